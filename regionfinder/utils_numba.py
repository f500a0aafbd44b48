"""JIT compiled geometry kernels

all kernels accept ring coordinates of shape (2, N) either as int32 (fixed point, 10^7 scaled)
or as float64 (degree) arrays. ``unit`` is multiplied onto every coordinate before comparing:
pass ``np.int64(1)`` for int32 rings (-> widening to int64) and ``1.0`` for float64 rings.

Some overflow considerations for comparing the line segment slopes on int32 data:

    delta_y_max * delta_x_max = 180x10^7 * 360x10^7 <= 65x10^17

    these numbers need up to log_2(65 x10^17) ~ 63 bits to be represented!
    -> int64 is required, but the difference of two such products may overflow
    -> products are only ever compared, never subtracted
"""
import math

import numpy as np
from numba import njit

# containment results, must match geometry.Containment
OUTSIDE = 0
INSIDE = 1
ON_BOUNDARY = 2


@njit(cache=True)
def ring_containment(x, y, coords: np.ndarray, unit) -> int:
    """
    crossing number point in polygon test with explicit boundary detection
    cf. https://en.wikipedia.org/wiki/Point_in_polygon#Ray_casting_algorithm

    the ring must be closed (first point == last point)

    :param x: x coordinate of the point (same unit as coords)
    :param y: y coordinate of the point (same unit as coords)
    :param coords: the ring coordinates with shape (2, N)
    :param unit: factor converting a coordinate into the comparison type
    :return: ON_BOUNDARY if the point lies on any edge, otherwise INSIDE or OUTSIDE
    """
    x_coords = coords[0]
    y_coords = coords[1]
    nr_coords = x_coords.shape[0]
    px = x * unit
    py = y * unit
    inside = False
    x1 = x_coords[0] * unit
    y1 = y_coords[0] * unit
    for i in range(1, nr_coords):
        x2 = x_coords[i] * unit
        y2 = y_coords[i] * unit
        # collinear with the edge?
        if (x2 - x1) * (py - y1) == (y2 - y1) * (px - x1):
            if min(x1, x2) <= px <= max(x1, x2) and min(y1, y2) <= py <= max(y1, y2):
                return ON_BOUNDARY
        if (y1 > py) != (y2 > py):
            # [p1-p2] crosses the horizontal line through p
            # only count crossings right of p:
            #   px < x1 + (py - y1) * (x2 - x1) / (y2 - y1)
            # to avoid the division the divisor is brought to the other side (flips the sign if negative)
            lhs = (px - x1) * (y2 - y1)
            rhs = (py - y1) * (x2 - x1)
            if y2 > y1:
                if lhs < rhs:
                    inside = not inside
            elif lhs > rhs:
                inside = not inside
        x1 = x2
        y1 = y2

    if inside:
        return INSIDE
    return OUTSIDE


@njit(cache=True)
def is_degenerate(coords: np.ndarray, unit) -> bool:
    """
    :return: True if all points of the ring are collinear (includes duplicate only rings)
        these rings enclose no area
    """
    x_coords = coords[0]
    y_coords = coords[1]
    nr_coords = x_coords.shape[0]
    x0 = x_coords[0] * unit
    y0 = y_coords[0] * unit
    # find a second distinct point to define the direction
    ref = -1
    for i in range(1, nr_coords):
        if x_coords[i] * unit != x0 or y_coords[i] * unit != y0:
            ref = i
            break
    if ref == -1:
        return True
    dx_ref = x_coords[ref] * unit - x0
    dy_ref = y_coords[ref] * unit - y0
    for i in range(ref + 1, nr_coords):
        dx = x_coords[i] * unit - x0
        dy = y_coords[i] * unit - y0
        if dx_ref * dy != dy_ref * dx:
            return False
    return True


@njit(cache=True)
def segment_distance(px: float, py: float, x1: float, y1: float, x2: float, y2: float) -> float:
    """euclidean distance of point p to the line segment [p1-p2] (in degree)"""
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(px - x1, py - y1)
    t = ((px - x1) * dx + (py - y1) * dy) / length_sq
    if t < 0.0:
        t = 0.0
    elif t > 1.0:
        t = 1.0
    return math.hypot(px - (x1 + t * dx), py - (y1 + t * dy))


@njit(cache=True)
def douglas_peucker_mask(x_coords: np.ndarray, y_coords: np.ndarray, epsilon: float) -> np.ndarray:
    """
    Douglas-Peucker simplification of an open polyline
    cf. https://en.wikipedia.org/wiki/Ramer%E2%80%93Douglas%E2%80%93Peucker_algorithm

    NOTE: iterative with an explicit stack of index intervals, no recursion depth limits

    :return: boolean mask of the vertices to keep. the first and last vertex are always kept
    """
    nr_coords = x_coords.shape[0]
    keep = np.zeros(nr_coords, dtype=np.bool_)
    if nr_coords == 0:
        return keep
    keep[0] = True
    keep[nr_coords - 1] = True
    # at most one interval per vertex is pending at any time
    stack = np.empty((nr_coords, 2), dtype=np.int64)
    stack[0, 0] = 0
    stack[0, 1] = nr_coords - 1
    top = 1
    while top > 0:
        top -= 1
        first = stack[top, 0]
        last = stack[top, 1]
        max_dist = -1.0
        max_idx = -1
        for i in range(first + 1, last):
            dist = segment_distance(
                x_coords[i],
                y_coords[i],
                x_coords[first],
                y_coords[first],
                x_coords[last],
                y_coords[last],
            )
            if dist > max_dist:
                max_dist = dist
                max_idx = i
        if max_idx != -1 and max_dist > epsilon:
            keep[max_idx] = True
            stack[top, 0] = first
            stack[top, 1] = max_idx
            top += 1
            stack[top, 0] = max_idx
            stack[top, 1] = last
            top += 1
    return keep
