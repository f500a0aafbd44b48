"""
geometry model: rings, polygons, bounding boxes, simplification and exact containment

representation (same as the binary data):
    a ring is a numpy array of shape (2, N): [ [x1,x2,x3...], [y1,y2,y3...] ]
    the first point is repeated as the last point (closed ring)
    int32 rings hold fixed point coordinates (degree * 10^7), float64 rings hold degree
"""
from enum import IntEnum
from typing import Iterable, NamedTuple, Sequence, Tuple, Union

import numpy as np

from regionfinder import utils_numba
from regionfinder.configs import MIN_RING_LENGTH
from regionfinder.errors import GeometryError

Ring = np.ndarray


class Containment(IntEnum):
    OUTSIDE = utils_numba.OUTSIDE
    INSIDE = utils_numba.INSIDE
    ON_BOUNDARY = utils_numba.ON_BOUNDARY


class Box(NamedTuple):
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def overlaps(self, other: "Box") -> bool:
        if not isinstance(other, Box):
            raise TypeError
        if self.xmin > other.xmax:
            return False
        if self.xmax < other.xmin:
            return False
        if self.ymin > other.ymax:
            return False
        if self.ymax < other.ymin:
            return False
        return True

    def contains(self, x, y) -> bool:
        # NOTE: points on the box outline are contained
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax


class Polygon(NamedTuple):
    exterior: Ring
    holes: Tuple[Ring, ...] = ()

    @property
    def rings(self) -> Tuple[Ring, ...]:
        return (self.exterior,) + tuple(self.holes)

    @property
    def nr_of_coords(self) -> int:
        return sum(ring.shape[1] for ring in self.rings)


MultiPolygon = Tuple[Polygon, ...]
Geometry = Union[Polygon, Sequence[Polygon]]


def rings_equal(ring1: Ring, ring2: Ring) -> bool:
    return ring1.shape == ring2.shape and bool(np.array_equal(ring1, ring2))


def polygons_equal(poly1: Polygon, poly2: Polygon) -> bool:
    if len(poly1.holes) != len(poly2.holes):
        return False
    return all(rings_equal(r1, r2) for r1, r2 in zip(poly1.rings, poly2.rings))


def multipolygons_equal(multi1: Sequence[Polygon], multi2: Sequence[Polygon]) -> bool:
    if len(multi1) != len(multi2):
        return False
    return all(polygons_equal(p1, p2) for p1, p2 in zip(multi1, multi2))


def _unit_of(ring: Ring):
    if ring.dtype.kind == "i":
        return np.int64(1)
    return 1.0


def validate_ring(ring: Ring) -> Ring:
    """
    :raises GeometryError: if the ring is not of shape (2, N), has less than 4 points,
        is not closed or encloses no area
    """
    if not isinstance(ring, np.ndarray) or ring.ndim != 2 or ring.shape[0] != 2:
        raise GeometryError("ring must be a numpy array of shape (2, N)")
    nr_coords = ring.shape[1]
    if nr_coords < MIN_RING_LENGTH:
        raise GeometryError(
            f"ring has {nr_coords} points, at least {MIN_RING_LENGTH} are required"
        )
    if ring[0, 0] != ring[0, -1] or ring[1, 0] != ring[1, -1]:
        raise GeometryError("ring is not closed (first point must equal the last point)")
    if utils_numba.is_degenerate(ring, _unit_of(ring)):
        raise GeometryError("degenerate ring: all points are collinear (zero area)")
    if signed_area(ring) == 0.0:
        # e.g. a self intersecting "bow tie" with two opposite lobes of equal size
        raise GeometryError("degenerate ring: zero signed area")
    return ring


def signed_area(ring: Ring) -> float:
    """shoelace formula. positive for counter-clockwise rings (in degree^2 for float rings)"""
    x_coords = ring[0].astype(np.float64)
    y_coords = ring[1].astype(np.float64)
    # relative to the first point to keep the products small
    x_coords = x_coords - x_coords[0]
    y_coords = y_coords - y_coords[0]
    return 0.5 * float(
        np.sum(x_coords[:-1] * y_coords[1:] - x_coords[1:] * y_coords[:-1])
    )


def polygon_area(polygon: Polygon) -> float:
    area = abs(signed_area(polygon.exterior))
    for hole in polygon.holes:
        area -= abs(signed_area(hole))
    return area


def multipolygon_area(polygons: Iterable[Polygon]) -> float:
    return sum(polygon_area(poly) for poly in polygons)


def orient_ring(ring: Ring, counter_clockwise: bool) -> Ring:
    is_ccw = signed_area(ring) > 0.0
    if is_ccw == counter_clockwise:
        return ring
    return np.ascontiguousarray(ring[:, ::-1])


def orient_polygon(polygon: Polygon) -> Polygon:
    """exterior rings counter-clockwise, holes clockwise (RFC 7946)"""
    exterior = orient_ring(polygon.exterior, counter_clockwise=True)
    holes = tuple(orient_ring(hole, counter_clockwise=False) for hole in polygon.holes)
    return Polygon(exterior, holes)


def simplify(ring: Ring, epsilon: float) -> Ring:
    """
    Douglas-Peucker simplification of a closed ring

    the ring is split into two open polylines at the vertex farthest away from the first vertex,
    since a polyline with identical end points cannot be simplified directly.
    vertices within ``epsilon`` (degree) of the simplified outline are removed.

    NOTE: rings which would collapse below the minimum amount of points
    or to zero area are returned unchanged

    :param ring: float64 degree ring of shape (2, N)
    :param epsilon: maximum deviation in degree. 0 disables the simplification
    :return: the simplified ring (closed)
    """
    if epsilon < 0.0:
        raise ValueError(f"epsilon must not be negative, got {epsilon}")
    nr_coords = ring.shape[1]
    if epsilon == 0.0 or nr_coords <= MIN_RING_LENGTH:
        return ring
    x_coords = np.ascontiguousarray(ring[0], dtype=np.float64)
    y_coords = np.ascontiguousarray(ring[1], dtype=np.float64)
    dist_sq = (x_coords - x_coords[0]) ** 2 + (y_coords - y_coords[0]) ** 2
    split_idx = int(np.argmax(dist_sq))
    if split_idx == 0:
        # all points identical
        return ring
    keep_first = utils_numba.douglas_peucker_mask(
        x_coords[: split_idx + 1], y_coords[: split_idx + 1], epsilon
    )
    keep_second = utils_numba.douglas_peucker_mask(
        x_coords[split_idx:], y_coords[split_idx:], epsilon
    )
    keep = np.concatenate((keep_first, keep_second[1:]))
    if keep.all():
        return ring
    simplified = np.ascontiguousarray(ring[:, keep])
    if simplified.shape[1] < MIN_RING_LENGTH:
        return ring
    if utils_numba.is_degenerate(simplified, 1.0) or signed_area(simplified) == 0.0:
        return ring
    return simplified


def bounding_box(geometry: Geometry) -> Box:
    """axis aligned min/max over all rings of a polygon or of a sequence of polygons"""
    if isinstance(geometry, Polygon):
        return _ring_box(geometry.exterior)
    boxes = [_ring_box(poly.exterior) for poly in geometry]
    if len(boxes) == 0:
        raise GeometryError("cannot compute the bounding box of an empty geometry")
    return union_box(boxes)


def bounding_boxes(polygons: Iterable[Polygon]) -> Tuple[Box, ...]:
    """one box per polygon"""
    return tuple(_ring_box(poly.exterior) for poly in polygons)


def union_box(boxes: Sequence[Box]) -> Box:
    return Box(
        xmin=min(b.xmin for b in boxes),
        xmax=max(b.xmax for b in boxes),
        ymin=min(b.ymin for b in boxes),
        ymax=max(b.ymax for b in boxes),
    )


def _ring_box(ring: Ring) -> Box:
    # NOTE: holes lie within the exterior ring -> only the exterior is relevant
    x_coords = ring[0]
    y_coords = ring[1]
    return Box(
        xmin=x_coords.min().item(),
        xmax=x_coords.max().item(),
        ymin=y_coords.min().item(),
        ymax=y_coords.max().item(),
    )


def ring_containment(ring: Ring, x, y) -> Containment:
    return Containment(utils_numba.ring_containment(x, y, ring, _unit_of(ring)))


def contains_point(polygon: Polygon, x, y, box: Box = None) -> Containment:
    """
    exact containment test of a point in a polygon with holes

    x and y must be given in the unit of the polygon coordinates.
    a point on the outline of the exterior or of a hole is ON_BOUNDARY,
    a point inside a hole is OUTSIDE.

    :param box: the precomputed bounding box of the polygon (optional)
    """
    if box is None:
        box = _ring_box(polygon.exterior)
    if not box.contains(x, y):
        return Containment.OUTSIDE
    unit = _unit_of(polygon.exterior)
    result = utils_numba.ring_containment(x, y, polygon.exterior, unit)
    if result != utils_numba.INSIDE:
        return Containment(result)
    for hole in polygon.holes:
        hole_result = utils_numba.ring_containment(x, y, hole, unit)
        if hole_result == utils_numba.INSIDE:
            return Containment.OUTSIDE
        if hole_result == utils_numba.ON_BOUNDARY:
            return Containment.ON_BOUNDARY
    return Containment.INSIDE


def multipolygon_containment(
    polygons: Sequence[Polygon], x, y, boxes: Sequence[Box] = None
) -> Containment:
    """the strongest result over all polygons: INSIDE > ON_BOUNDARY > OUTSIDE"""
    if boxes is None:
        boxes = bounding_boxes(polygons)
    result = Containment.OUTSIDE
    for polygon, box in zip(polygons, boxes):
        containment = contains_point(polygon, x, y, box)
        if containment == Containment.INSIDE:
            return containment
        if containment == Containment.ON_BOUNDARY:
            result = containment
    return result
