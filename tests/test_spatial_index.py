import numpy as np
import pytest

from regionfinder.geometry import Box
from regionfinder.spatial_index import INDEX_DTYPE, IndexStats, SpatialIndex, grid_shape


@pytest.fixture
def index() -> SpatialIndex:
    record_boxes = [
        # 0: a single cell
        [Box(0.2, 0.8, 0.2, 0.8)],
        # 1: two polygons in the same cells
        [Box(0.0, 1.5, 0.0, 0.5), Box(0.5, 1.0, 0.1, 0.4)],
        # 2: large box touching the poles and the antimeridian
        [Box(170.0, 180.0, 80.0, 90.0)],
        # 3: overlapping record 0
        [Box(-0.5, 0.5, -0.5, 0.5)],
    ]
    return SpatialIndex.build(record_boxes, cell_size=1.0)


def test_grid_shape():
    assert grid_shape(1.0) == (180, 360)
    assert grid_shape(7.0) == (26, 52)
    assert grid_shape(180.0) == (1, 2)


@pytest.mark.parametrize("cell_size", [0.0, -1.0, 180.5, 1e-5])
def test_invalid_cell_size(cell_size):
    with pytest.raises(ValueError):
        grid_shape(cell_size)
    with pytest.raises(ValueError):
        SpatialIndex.build([], cell_size)


@pytest.mark.parametrize(
    "lng, lat, expected",
    [
        (0.5, 0.5, [0, 1, 3]),
        (0.1, 0.1, [0, 1, 3]),
        (1.2, 0.2, [1]),
        (-0.2, -0.2, [3]),
        (-0.2, 0.2, [3]),
        (5.0, 5.0, []),
        (175.0, 85.0, [2]),
        # clamped into the last cell row and column
        (180.0, 90.0, [2]),
        (179.5, 89.5, [2]),
        (-180.0, -90.0, []),
    ],
)
def test_candidates(index: SpatialIndex, lng, lat, expected):
    candidates = index.candidates(lng, lat)
    assert candidates.dtype == INDEX_DTYPE
    np.testing.assert_array_equal(candidates, expected)


def test_candidates_are_ascending_and_unique(index: SpatialIndex):
    for pos in range(len(index.keys)):
        ids = index.record_ids[index.offsets[pos] : index.offsets[pos + 1]]
        assert len(ids) > 0
        assert np.all(np.diff(ids.astype(np.int64)) > 0)


def test_structure(index: SpatialIndex):
    assert index.keys.dtype == INDEX_DTYPE
    assert index.offsets.dtype == INDEX_DTYPE
    assert index.record_ids.dtype == INDEX_DTYPE
    assert len(index.offsets) == len(index.keys) + 1
    assert index.offsets[0] == 0
    assert index.offsets[-1] == len(index.record_ids)
    assert np.all(np.diff(index.keys.astype(np.int64)) > 0)


def test_cell_key(index: SpatialIndex):
    assert index.cell_key(-180.0, -90.0) == 0
    assert index.cell_key(-179.5, -89.5) == 0
    assert index.cell_key(-178.5, -90.0) == 1
    assert index.cell_key(-180.0, -89.0) == 360
    assert index.cell_key(180.0, 90.0) == 180 * 360 - 1


def test_box_on_cell_boundary():
    # the box ends exactly on the boundary to the next cell -> registered in both
    index = SpatialIndex.build([[Box(0.0, 1.0, 0.0, 1.0)]], cell_size=1.0)
    for lng, lat in [(0.5, 0.5), (1.0, 1.0), (1.0, 0.5), (0.5, 1.0)]:
        np.testing.assert_array_equal(index.candidates(lng, lat), [0])
    assert len(index.candidates(-0.5, 0.5)) == 0
    assert len(index.candidates(1.5, 0.5)) == 1
    assert len(index.candidates(2.5, 0.5)) == 0


def test_empty_index():
    index = SpatialIndex.build([], cell_size=2.0)
    assert len(index) == 0
    assert len(index.candidates(0.0, 0.0)) == 0
    assert index.stats() == IndexStats(0, 0, 0.0, 0)


def test_stats(index: SpatialIndex):
    stats = index.stats()
    assert stats.nr_of_cells == len(index)
    assert stats.nr_of_entries == len(index.record_ids)
    assert stats.max_candidates == 3
    assert stats.avg_candidates == pytest.approx(stats.nr_of_entries / stats.nr_of_cells)


def test_equality(index: SpatialIndex):
    copy = SpatialIndex(
        index.cell_size, index.keys.copy(), index.offsets.copy(), index.record_ids.copy()
    )
    assert copy == index
    other = SpatialIndex.build([[Box(0.2, 0.8, 0.2, 0.8)]], cell_size=1.0)
    assert other != index


if __name__ == "__main__":
    pytest.main([__file__])
