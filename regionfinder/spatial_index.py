"""
spatial index: coordinate to candidate record ids

the surface of the world is split up into a uniform grid of lng/lat cells.
for every cell the ids of all records with a polygon bounding box overlapping the cell are stored.
the index is conservative: a record containing a point is always a candidate of the cell of that point,
extra candidates are removed by the exact containment test.

storage (compressed sparse rows, only non empty cells):
    keys:       sorted cell keys (row * nr_of_columns + column)
    offsets:    cell i owns record_ids[offsets[i]:offsets[i+1]]
    record_ids: ascending record ids per cell
"""
import math
from typing import Dict, List, NamedTuple, Sequence

import numpy as np

from regionfinder.configs import DEFAULT_CELL_SIZE, MAX_LAT_VAL, MAX_LNG_VAL
from regionfinder.geometry import Box

INDEX_DTYPE = np.dtype("<u4")
MAX_NR_OF_CELLS = 2**32 - 1

_EMPTY = np.empty(0, dtype=INDEX_DTYPE)


class IndexStats(NamedTuple):
    nr_of_cells: int
    nr_of_entries: int
    avg_candidates: float
    max_candidates: int


def grid_shape(cell_size: float):
    """
    :return: the number of grid (rows, columns) for the given cell size
    :raises ValueError: for invalid cell sizes
    """
    if not 0.0 < cell_size <= MAX_LAT_VAL * 2:
        raise ValueError(f"cell size must be within (0, 180] degree, got {cell_size}")
    nr_of_rows = math.ceil(2 * MAX_LAT_VAL / cell_size)
    nr_of_columns = math.ceil(2 * MAX_LNG_VAL / cell_size)
    if nr_of_rows * nr_of_columns > MAX_NR_OF_CELLS:
        raise ValueError(f"cell size {cell_size} results in too many grid cells")
    return nr_of_rows, nr_of_columns


def _cell_coord(value: float, offset: float, cell_size: float, nr_of_cells: int) -> int:
    # NOTE: clamping maps lng 180 and lat 90 into the last cell.
    # the same monotone function is used for indexing and querying -> no false negatives
    idx = math.floor((value + offset) / cell_size)
    if idx < 0:
        return 0
    if idx >= nr_of_cells:
        return nr_of_cells - 1
    return idx


class SpatialIndex:
    __slots__ = ["cell_size", "nr_of_rows", "nr_of_columns", "keys", "offsets", "record_ids"]

    def __init__(
        self,
        cell_size: float,
        keys: np.ndarray,
        offsets: np.ndarray,
        record_ids: np.ndarray,
    ):
        self.cell_size = float(cell_size)
        self.nr_of_rows, self.nr_of_columns = grid_shape(self.cell_size)
        self.keys = keys
        self.offsets = offsets
        self.record_ids = record_ids

    @classmethod
    def build(
        cls,
        record_boxes: Sequence[Sequence[Box]],
        cell_size: float = DEFAULT_CELL_SIZE,
    ) -> "SpatialIndex":
        """
        :param record_boxes: per record (in ascending id order) the degree bounding boxes of its polygons
        :param cell_size: edge length of a grid cell in degree
        """
        nr_of_rows, nr_of_columns = grid_shape(cell_size)
        mapping: Dict[int, List[int]] = {}
        for record_id, boxes in enumerate(record_boxes):
            for box in boxes:
                col_min = _cell_coord(box.xmin, MAX_LNG_VAL, cell_size, nr_of_columns)
                col_max = _cell_coord(box.xmax, MAX_LNG_VAL, cell_size, nr_of_columns)
                row_min = _cell_coord(box.ymin, MAX_LAT_VAL, cell_size, nr_of_rows)
                row_max = _cell_coord(box.ymax, MAX_LAT_VAL, cell_size, nr_of_rows)
                for row in range(row_min, row_max + 1):
                    row_key = row * nr_of_columns
                    for col in range(col_min, col_max + 1):
                        ids = mapping.setdefault(row_key + col, [])
                        # records are processed in ascending order
                        # -> duplicates (several polygons of one record) are always the last entry
                        if not ids or ids[-1] != record_id:
                            ids.append(record_id)

        keys = np.array(sorted(mapping), dtype=INDEX_DTYPE)
        lengths = [len(mapping[key]) for key in keys.tolist()]
        offsets = np.zeros(len(keys) + 1, dtype=INDEX_DTYPE)
        if lengths:
            offsets[1:] = np.cumsum(lengths)
        record_ids = np.fromiter(
            (rid for key in keys.tolist() for rid in mapping[key]),
            dtype=INDEX_DTYPE,
            count=int(offsets[-1]),
        )
        return cls(cell_size, keys, offsets, record_ids)

    def cell_key(self, lng: float, lat: float) -> int:
        col = _cell_coord(lng, MAX_LNG_VAL, self.cell_size, self.nr_of_columns)
        row = _cell_coord(lat, MAX_LAT_VAL, self.cell_size, self.nr_of_rows)
        return row * self.nr_of_columns + col

    def candidates(self, lng: float, lat: float) -> np.ndarray:
        """
        :param lng: longitude of the point in degree
        :param lat: latitude of the point in degree
        :return: the ascending ids of all records which might contain the point
        """
        key = self.cell_key(lng, lat)
        pos = int(np.searchsorted(self.keys, key))
        if pos == len(self.keys) or self.keys[pos] != key:
            return _EMPTY
        return self.record_ids[self.offsets[pos] : self.offsets[pos + 1]]

    def __len__(self) -> int:
        # number of non empty cells
        return len(self.keys)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SpatialIndex):
            return NotImplemented
        return (
            self.cell_size == other.cell_size
            and np.array_equal(self.keys, other.keys)
            and np.array_equal(self.offsets, other.offsets)
            and np.array_equal(self.record_ids, other.record_ids)
        )

    __hash__ = None

    def stats(self) -> IndexStats:
        nr_of_cells = len(self.keys)
        nr_of_entries = len(self.record_ids)
        if nr_of_cells == 0:
            return IndexStats(0, 0, 0.0, 0)
        lengths = np.diff(self.offsets.astype(np.int64))
        return IndexStats(
            nr_of_cells=nr_of_cells,
            nr_of_entries=nr_of_entries,
            avg_candidates=float(nr_of_entries / nr_of_cells),
            max_candidates=int(lengths.max()),
        )
