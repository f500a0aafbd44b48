# automatically generated by the FlatBuffers compiler, do not modify

# namespace: cache

import flatbuffers
from flatbuffers.compat import import_numpy
np = import_numpy()

class RegionCache(object):
    __slots__ = ['_tab']

    @classmethod
    def GetRootAs(cls, buf, offset=0):
        n = flatbuffers.encode.Get(flatbuffers.packer.uoffset, buf, offset)
        x = RegionCache()
        x.Init(buf, n + offset)
        return x

    # RegionCache
    def Init(self, buf, pos):
        self._tab = flatbuffers.table.Table(buf, pos)

    # RegionCache
    def Dataset(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(4))
        if o != 0:
            return self._tab.String(o + self._tab.Pos)
        return None

    # RegionCache
    def Precision(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(6))
        if o != 0:
            return self._tab.Get(flatbuffers.number_types.Uint8Flags, o + self._tab.Pos)
        return 0

    # RegionCache
    def Epsilon(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(8))
        if o != 0:
            return self._tab.Get(flatbuffers.number_types.Float64Flags, o + self._tab.Pos)
        return 0.0

    # RegionCache
    def Records(self, j):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(10))
        if o != 0:
            x = self._tab.Vector(o)
            x += flatbuffers.number_types.UOffsetTFlags.py_type(j) * 4
            x = self._tab.Indirect(x)
            from regionfinder.flatbuf.generated.cache.Record import Record
            obj = Record()
            obj.Init(self._tab.Bytes, x)
            return obj
        return None

    # RegionCache
    def RecordsLength(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(10))
        if o != 0:
            return self._tab.VectorLen(o)
        return 0

    # RegionCache
    def RecordsIsNone(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(10))
        return o == 0

    # RegionCache
    def Index(self):
        o = flatbuffers.number_types.UOffsetTFlags.py_type(self._tab.Offset(12))
        if o != 0:
            x = self._tab.Indirect(o + self._tab.Pos)
            from regionfinder.flatbuf.generated.cache.GridIndex import GridIndex
            obj = GridIndex()
            obj.Init(self._tab.Bytes, x)
            return obj
        return None

def RegionCacheStart(builder):
    builder.StartObject(5)

def RegionCacheAddDataset(builder, dataset):
    builder.PrependUOffsetTRelativeSlot(0, flatbuffers.number_types.UOffsetTFlags.py_type(dataset), 0)

def RegionCacheAddPrecision(builder, precision):
    builder.PrependUint8Slot(1, precision, 0)

def RegionCacheAddEpsilon(builder, epsilon):
    builder.PrependFloat64Slot(2, epsilon, 0.0)

def RegionCacheAddRecords(builder, records):
    builder.PrependUOffsetTRelativeSlot(3, flatbuffers.number_types.UOffsetTFlags.py_type(records), 0)

def RegionCacheStartRecordsVector(builder, numElems):
    return builder.StartVector(4, numElems, 4)

def RegionCacheAddIndex(builder, index):
    builder.PrependUOffsetTRelativeSlot(4, flatbuffers.number_types.UOffsetTFlags.py_type(index), 0)

def RegionCacheEnd(builder):
    return builder.EndObject()
