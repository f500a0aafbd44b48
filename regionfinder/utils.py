""" utility functions """
import logging
from functools import wraps
from time import perf_counter
from typing import Callable, Tuple, Union

import numpy as np

from regionfinder.configs import (
    COORD2INT_FACTOR,
    INT2COORD_FACTOR,
    MAX_LAT_VAL,
    MAX_LNG_VAL,
    PRECISION_DTYPES,
    PRECISION_INT32,
    CoordLists,
    CoordPairs,
)
from regionfinder.errors import OutOfRangeError

logger = logging.getLogger(__name__)

Number = Union[int, float]


def validate_coordinates(lng: float, lat: float) -> Tuple[float, float]:
    # NOTE: NaN fails every comparison -> also rejected
    if not -MAX_LNG_VAL <= lng <= MAX_LNG_VAL:
        raise OutOfRangeError(f"The given longitude {lng} is out of bounds")
    if not -MAX_LAT_VAL <= lat <= MAX_LAT_VAL:
        raise OutOfRangeError(f"The given latitude {lat} is out of bounds")
    return float(lng), float(lat)


def int2coord(i4: int) -> float:
    return float(i4 * INT2COORD_FACTOR)


def coord2int(double: float) -> int:
    # NOTE: rounding half to even, identical to np.round() used for whole arrays
    return int(round(double * COORD2INT_FACTOR))


def quantise_array(coords: np.ndarray, precision: str) -> np.ndarray:
    """convert degree coordinates into the storage representation of the given precision"""
    dtype = PRECISION_DTYPES[precision]
    if precision == PRECISION_INT32:
        return np.round(np.asarray(coords, dtype=np.float64) * COORD2INT_FACTOR).astype(dtype)
    return np.ascontiguousarray(coords, dtype=dtype)


def dequantise_array(coords: np.ndarray) -> np.ndarray:
    """convert stored coordinates back into degree"""
    if coords.dtype.kind == "i":
        return coords.astype(np.float64) * INT2COORD_FACTOR
    return coords.astype(np.float64)


def quantise_point(lng: float, lat: float, precision: str) -> Tuple[Number, Number]:
    """convert a query point into the storage representation of the given precision"""
    if precision == PRECISION_INT32:
        return coord2int(lng), coord2int(lat)
    return lng, lat


def to_degree(value: Number, precision: str) -> float:
    if precision == PRECISION_INT32:
        return int2coord(value)
    return float(value)


def convert2coords(ring: np.ndarray) -> CoordLists:
    # return a list of coordinate lists [[x1, x2, ...], [y1, y2, ...]]
    degree = dequantise_array(ring)
    return [degree[0].tolist(), degree[1].tolist()]


def convert2coord_pairs(ring: np.ndarray) -> CoordPairs:
    # return a list of coordinate tuples (x,y)
    degree = dequantise_array(ring)
    return list(zip(degree[0].tolist(), degree[1].tolist()))


# DECORATORS


def time_execution(func: Callable) -> Callable:
    """decorator logging the execution time of a function"""

    @wraps(func)
    def wrap_func(*args, **kwargs):
        t1 = perf_counter()
        result = func(*args, **kwargs)
        t2 = perf_counter()
        logger.info("function %s(...) executed in %.2fs", func.__name__, t2 - t1)
        return result

    return wrap_func
