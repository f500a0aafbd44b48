from typing import Tuple

import numpy as np
import pytest

from regionfinder import utils, utils_numba
from regionfinder.errors import GeometryError, OutOfRangeError
from regionfinder.geometry import (
    Box,
    Containment,
    Polygon,
    bounding_box,
    bounding_boxes,
    contains_point,
    multipolygon_containment,
    orient_polygon,
    polygon_area,
    ring_containment,
    signed_area,
    simplify,
    validate_ring,
)

POINT_IN_POLYGON_TESTCASES = [
    # (polygon, list of test points, expected results)
    (
        # square
        ([0.5, 0.5, -0.5, -0.5, 0.5], [-0.5, 0.5, 0.5, -0.5, -0.5]),
        [
            # (x,y),
            # inside
            (0.0, 0.000),
            # outside
            (-1.0, 1.0),
            (0.0, 1.0),
            (1.0, 1.0),
            (-1.0, 0.0),
            (1.0, 0.0),
            (-1.0, -1.0),
            (0.0, -1.0),
            (1.0, -1.0),
        ],
        [True, False, False, False, False, False, False, False, False],
    ),
    (
        # more complex polygon with sloped edges
        ([1, 5, 7, 8, 7, 6, 1, 1, 5, 1], [1, 4, 1, 3, 3, 6, 6, 2, 5, 1]),
        [
            # (x,y),
            # inside (14 cases)
            (7, 1.0001),
            (7, 1.1),
            (7, 1.5),
            (7, 2.9),
            (7, 2.999),
            (1.1, 3),
            (3.1, 3),
            (6, 3),
            (2, 4),
            (3, 4),
            (4.5, 4),
            (6, 4),
            (6.5, 4),
            (2, 5.5),
            # outside (21 cases)
            (0.0, 0.0),
            (5.0, 0.0),
            (9.0, 0.0),
            (7, 0.9),
            (7, 0.9999),
            (0.0, 1.0),
            (5.0, 1.0),
            (8.0, 1.0),
            (0.9, 3),
            (2.5, 3),
            (4, 3),
            (5, 3),
            (8.1, 3),
            (7, 3.00001),
            (7, 3.1),
            (0, 4),
            (7, 4),
            (0, 6),
            (7, 6),
            (0, 7),
            (7, 7),
        ],
        [True] * 14 + [False] * 21,
    ),
    (
        # test for overflow, use maximum valid domain (of the coordinates)
        # delta_y_max * delta_x_max = 180x10^7 * 360x10^7
        ([-180.0, 180.0, -180.0, -180.0], [-90.0, 90.0, 90.0, -90.0]),
        [
            # choose query points so (x-x_i) and (y-y_i) get big!
            (-179.9999999, -89.9999998),
            (-179.9999, -89.9998),
            (-179.9999, 89.9999),
            (179.9999, -89.9999),
        ],
        [True, True, True, False],
    ),
]


def int_ring(x_coords, y_coords) -> np.ndarray:
    return utils.quantise_array(np.array([x_coords, y_coords], dtype=np.float64), "int32")


def float_ring(x_coords, y_coords) -> np.ndarray:
    return np.array([x_coords, y_coords], dtype=np.float64)


def square(xmin, ymin, xmax, ymax, convert=float_ring) -> np.ndarray:
    return convert([xmin, xmax, xmax, xmin, xmin], [ymin, ymin, ymax, ymax, ymin])


@pytest.mark.parametrize("precision", ["int32", "float64"])
@pytest.mark.parametrize("test_case", POINT_IN_POLYGON_TESTCASES)
def test_ring_containment(test_case: Tuple, precision: str):
    (x_coords, y_coords), query_points, expected_results = test_case
    ring = utils.quantise_array(np.array([x_coords, y_coords], dtype=np.float64), precision)
    for (lng, lat), expected in zip(query_points, expected_results):
        x, y = utils.quantise_point(lng, lat, precision)
        result = ring_containment(ring, x, y)
        assert (result == Containment.INSIDE) == expected, f"{precision}: wrong result for ({lng}, {lat})"
        assert result != Containment.ON_BOUNDARY


@pytest.mark.parametrize("convert", [int_ring, float_ring])
@pytest.mark.parametrize(
    "point",
    [
        # corners
        (0.0, 0.0),
        (2.0, 2.0),
        # edges
        (1.0, 0.0),
        (2.0, 1.5),
        (0.5, 2.0),
        (0.0, 0.25),
    ],
)
def test_ring_boundary(convert, point):
    ring = square(0.0, 0.0, 2.0, 2.0, convert)
    precision = "int32" if ring.dtype.kind == "i" else "float64"
    x, y = utils.quantise_point(*point, precision)
    assert ring_containment(ring, x, y) == Containment.ON_BOUNDARY


def test_sloped_edge_boundary_int():
    # exactly on the diagonal edge (integer arithmetic is exact)
    ring = int_ring([0.0, 4.0, 0.0, 0.0], [0.0, 4.0, 4.0, 0.0])
    x, y = utils.quantise_point(1.5, 1.5, "int32")
    assert ring_containment(ring, x, y) == Containment.ON_BOUNDARY
    x, y = utils.quantise_point(1.5, 1.5000001, "int32")
    assert ring_containment(ring, x, y) == Containment.INSIDE
    x, y = utils.quantise_point(1.5, 1.4999999, "int32")
    assert ring_containment(ring, x, y) == Containment.OUTSIDE


def test_containment_kernel_constants():
    assert int(Containment.OUTSIDE) == utils_numba.OUTSIDE
    assert int(Containment.INSIDE) == utils_numba.INSIDE
    assert int(Containment.ON_BOUNDARY) == utils_numba.ON_BOUNDARY


@pytest.mark.parametrize("convert", [int_ring, float_ring])
def test_polygon_with_hole(convert):
    precision = "int32" if convert is int_ring else "float64"
    polygon = Polygon(square(0.0, 0.0, 10.0, 10.0, convert), (square(4.0, 4.0, 6.0, 6.0, convert),))

    def check(lng, lat, expected):
        x, y = utils.quantise_point(lng, lat, precision)
        assert contains_point(polygon, x, y) == expected, f"({lng}, {lat})"

    check(1.0, 1.0, Containment.INSIDE)
    check(5.0, 5.0, Containment.OUTSIDE)  # inside the hole
    check(4.0, 5.0, Containment.ON_BOUNDARY)  # on the hole outline
    check(10.0, 5.0, Containment.ON_BOUNDARY)  # on the exterior outline
    check(11.0, 5.0, Containment.OUTSIDE)
    check(5.0, -0.5, Containment.OUTSIDE)


def test_multipolygon_containment():
    polygons = (
        Polygon(square(0.0, 0.0, 1.0, 1.0)),
        Polygon(square(1.0, 0.0, 2.0, 1.0)),
        Polygon(square(5.0, 5.0, 6.0, 6.0)),
    )
    assert multipolygon_containment(polygons, 5.5, 5.5) == Containment.INSIDE
    # shared edge of the first two polygons
    assert multipolygon_containment(polygons, 1.0, 0.5) == Containment.ON_BOUNDARY
    assert multipolygon_containment(polygons, 3.0, 3.0) == Containment.OUTSIDE
    boxes = bounding_boxes(polygons)
    assert multipolygon_containment(polygons, 0.5, 0.5, boxes) == Containment.INSIDE


@pytest.mark.parametrize(
    "ring, msg",
    [
        (float_ring([0.0, 1.0, 0.0], [0.0, 0.0, 0.0]), "3 points"),
        (float_ring([0.0, 1.0, 1.0, 0.0], [0.0, 0.0, 1.0, 1.0]), "not closed"),
        (float_ring([0.0, 1.0, 2.0, 3.0, 0.0], [0.0, 1.0, 2.0, 3.0, 0.0]), "collinear"),
        (float_ring([1.0, 1.0, 1.0, 1.0], [2.0, 2.0, 2.0, 2.0]), "duplicates only"),
        (int_ring([0.0, 1.0, 2.0, 0.0], [0.0, 0.5, 1.0, 0.0]), "collinear int"),
        (np.array([[0, 10, 10, 0, 0], [0, 10, 0, 10, 0]], dtype=np.int32), "bow tie int"),
        (float_ring([0.0, 2.0, 2.0, 0.0, 0.0], [0.0, 2.0, 0.0, 2.0, 0.0]), "bow tie"),
        (np.zeros((3, 5)), "wrong shape"),
    ],
)
def test_validate_ring_invalid(ring, msg):
    with pytest.raises(GeometryError):
        validate_ring(ring)


def test_validate_ring_valid():
    ring = square(0.0, 0.0, 1.0, 1.0, int_ring)
    assert validate_ring(ring) is ring


def test_simplify_removes_collinear_points():
    # 3 points per edge
    x_coords = [0.0, 1.0, 2.0, 2.0, 2.0, 1.0, 0.0, 0.0, 0.0]
    y_coords = [0.0, 0.0, 0.0, 1.0, 2.0, 2.0, 2.0, 1.0, 0.0]
    ring = float_ring(x_coords, y_coords)
    simplified = simplify(ring, 0.0001)
    np.testing.assert_array_equal(
        simplified, float_ring([0.0, 2.0, 2.0, 0.0, 0.0], [0.0, 0.0, 2.0, 2.0, 0.0])
    )
    # closure preserved
    assert simplified[0, 0] == simplified[0, -1] and simplified[1, 0] == simplified[1, -1]


def test_simplify_tolerance():
    # the vertex (1, 0.005) deviates 0.005 degree from the edge
    ring = float_ring([0.0, 1.0, 2.0, 2.0, 0.0, 0.0], [0.0, 0.005, 0.0, 2.0, 2.0, 0.0])
    assert simplify(ring, 0.0001).shape[1] == 6
    assert simplify(ring, 0.01).shape[1] == 5


def test_simplify_disabled():
    ring = float_ring([0.0, 1.0, 2.0, 2.0, 0.0, 0.0], [0.0, 0.0, 0.0, 2.0, 2.0, 0.0])
    assert simplify(ring, 0.0) is ring


def test_simplify_keeps_minimum_ring():
    # a tiny triangle would collapse for a large epsilon -> unchanged
    ring = float_ring([0.0, 0.001, 0.0, 0.0, 0.0], [0.0, 0.0, 0.0005, 0.001, 0.0])
    simplified = simplify(ring, 0.01)
    np.testing.assert_array_equal(simplified, ring)
    validate_ring(simplified)


def test_simplify_negative_epsilon():
    with pytest.raises(ValueError):
        simplify(square(0.0, 0.0, 1.0, 1.0), -1.0)


def test_douglas_peucker_mask_endpoints():
    x_coords = np.array([0.0, 1.0, 2.0, 3.0])
    y_coords = np.array([0.0, 0.0, 0.0, 0.0])
    mask = utils_numba.douglas_peucker_mask(x_coords, y_coords, 0.1)
    np.testing.assert_array_equal(mask, [True, False, False, True])


def test_area_and_orientation():
    ccw = square(0.0, 0.0, 2.0, 2.0)
    cw = np.ascontiguousarray(ccw[:, ::-1])
    assert signed_area(ccw) == pytest.approx(4.0)
    assert signed_area(cw) == pytest.approx(-4.0)

    polygon = orient_polygon(Polygon(cw, (square(0.5, 0.5, 1.0, 1.0),)))
    assert signed_area(polygon.exterior) > 0
    assert signed_area(polygon.holes[0]) < 0
    assert polygon_area(polygon) == pytest.approx(3.75)


def test_bounding_box():
    poly1 = Polygon(square(0.0, -1.0, 2.0, 2.0))
    poly2 = Polygon(square(5.0, 3.0, 6.0, 4.0))
    assert bounding_box(poly1) == Box(0.0, 2.0, -1.0, 2.0)
    assert bounding_box((poly1, poly2)) == Box(0.0, 6.0, -1.0, 4.0)
    assert bounding_boxes((poly1, poly2)) == (Box(0.0, 2.0, -1.0, 2.0), Box(5.0, 6.0, 3.0, 4.0))
    with pytest.raises(GeometryError):
        bounding_box(())


def test_box_overlaps():
    box = Box(0.0, 1.0, 0.0, 1.0)
    assert box.overlaps(Box(1.0, 2.0, 1.0, 2.0))
    assert not box.overlaps(Box(1.1, 2.0, 0.0, 1.0))
    assert box.contains(1.0, 0.5)
    assert not box.contains(1.0, 1.5)
    with pytest.raises(TypeError):
        box.overlaps((0, 1, 0, 1))


def test_dtype_conversion():
    for lng in (-180.0, -87.62, 0.0, 13.358, 179.9999999):
        x_int = utils.coord2int(lng)
        np.testing.assert_almost_equal(utils.int2coord(x_int), lng)
    quantised = utils.quantise_array(np.array([[-87.62, 30.0], [41.88, -90.0]]), "int32")
    assert quantised.dtype == np.int32
    np.testing.assert_array_equal(quantised, [[-876200000, 300000000], [418800000, -900000000]])
    np.testing.assert_array_almost_equal(utils.dequantise_array(quantised), [[-87.62, 30.0], [41.88, -90.0]])


def test_convert2coord_pairs():
    ring = square(0.0, 0.0, 1.0, 2.0, int_ring)
    pairs = utils.convert2coord_pairs(ring)
    assert isinstance(pairs, list)
    assert pairs[0] == (0.0, 0.0)
    assert pairs[2] == pytest.approx((1.0, 2.0))
    for pair in pairs:
        assert isinstance(pair, tuple)
        assert all(isinstance(value, float) for value in pair)
    x_coords, y_coords = utils.convert2coords(ring)
    assert x_coords == pytest.approx([0.0, 1.0, 1.0, 0.0, 0.0])
    assert y_coords == pytest.approx([0.0, 0.0, 2.0, 2.0, 0.0])


@pytest.mark.parametrize(
    "lng, lat",
    [(181.0, 0.0), (-180.1, 0.0), (0.0, 90.5), (0.0, -91.0), (float("nan"), 0.0), (0.0, float("inf"))],
)
def test_validate_coordinates_out_of_range(lng, lat):
    with pytest.raises(OutOfRangeError):
        utils.validate_coordinates(lng, lat)
    # backwards compatible with ValueError handling
    with pytest.raises(ValueError):
        utils.validate_coordinates(lng, lat)


if __name__ == "__main__":
    pytest.main([__file__])
