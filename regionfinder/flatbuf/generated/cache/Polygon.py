# automatically generated by the FlatBuffers compiler, do not modify

# namespace: cache

import flatbuffers
from flatbuffers.compat import import_numpy
np = import_numpy()

class Polygon(object):
    __slots__ = ['_tab']

    @classmethod
    def GetRootAs(cls, buf, offset=0):
        n = flatbuffers.encode.Get(flatbuffers.packer.uoffset, buf, offset)
        x = Polygon()
        x.Init(buf, n + offset)
        return x

    # Polygon
    def Init(self, buf, pos):
        self._tab = flatbuffers.table.Table(buf, pos)

    # Polygon
    def Exterior(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(4))
        if o != 0:
            x = self._tab.Indirect(o + self._tab.Pos)
            from regionfinder.flatbuf.generated.cache.Ring import Ring
            obj = Ring()
            obj.Init(self._tab.Bytes, x)
            return obj
        return None

    # Polygon
    def Holes(self, j):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(6))
        if o != 0:
            x = self._tab.Vector(o)
            x += flatbuffers.number_types.UOffsetTFlags.py_type(j) * 4
            x = self._tab.Indirect(x)
            from regionfinder.flatbuf.generated.cache.Ring import Ring
            obj = Ring()
            obj.Init(self._tab.Bytes, x)
            return obj
        return None

    # Polygon
    def HolesLength(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(6))
        if o != 0:
            return self._tab.VectorLen(o)
        return 0

    # Polygon
    def HolesIsNone(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(6))
        return o == 0

def PolygonStart(builder):
    builder.StartObject(2)

def PolygonAddExterior(builder, exterior):
    builder.PrependUOffsetTRelativeSlot(0, flatbuffers.number_types.UOffsetTFlags.py_type(exterior), 0)

def PolygonAddHoles(builder, holes):
    builder.PrependUOffsetTRelativeSlot(1, flatbuffers.number_types.UOffsetTFlags.py_type(holes), 0)

def PolygonStartHolesVector(builder, numElems):
    return builder.StartVector(4, numElems, 4)

def PolygonEnd(builder):
    return builder.EndObject()
