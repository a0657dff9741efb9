import pytest

from voxel_march.cell_iterator import CellIterator


def row_major(minimum, maximum):
    return [
        (x, y, z)
        for z in range(minimum[2], maximum[2] + 1)
        for y in range(minimum[1], maximum[1] + 1)
        for x in range(minimum[0], maximum[0] + 1)
    ]


def test_single_cell_range_order():
    cells = list(CellIterator((0, 0, 0), (1, 1, 1)))
    assert cells == [
        (0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0),
        (0, 0, 1), (1, 0, 1), (0, 1, 1), (1, 1, 1),
    ]


@pytest.mark.parametrize("minimum, maximum", [
    ((0, 0, 0), (2, 2, 2)),
    ((1, 2, 3), (3, 3, 4)),
    ((0, 0, 0), (0, 1, 1)),
    ((2, 0, 1), (4, 0, 1)),
])
def test_every_coordinate_once_in_row_major_order(minimum, maximum):
    assert list(CellIterator(minimum, maximum)) == row_major(minimum, maximum)


def test_exhausted_iterator_stays_exhausted():
    cells = CellIterator((0, 0, 0), (1, 1, 1))
    list(cells)
    assert cells.exhausted
    with pytest.raises(StopIteration):
        next(cells)
    with pytest.raises(StopIteration):
        next(cells)


def test_reset_restarts_the_same_instance():
    cells = CellIterator((0, 0, 0), (1, 2, 1))
    first = list(cells)
    cells.reset()
    assert list(cells) == first


def test_reset_mid_sweep():
    cells = CellIterator((0, 0, 0), (1, 1, 1))
    next(cells)
    next(cells)
    cells.reset()
    assert next(cells) == (0, 0, 0)


def test_for_chunk_covers_all_cell_origins():
    cells = CellIterator.for_chunk(4)
    origins = list(cells)
    assert len(origins) == 27 == len(cells)
    assert origins == row_major((0, 0, 0), (2, 2, 2))


def test_smallest_chunk_has_one_cell():
    assert list(CellIterator.for_chunk(2)) == [(0, 0, 0)]
