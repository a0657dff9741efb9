import itertools

import numpy as np
import pytest

from voxel_march.chunk_data import (
    IndexOutOfRange, VoxelChunk, VoxelMarchError, lattice_index, lattice_position,
)


def all_positions(size):
    return list(itertools.product(range(size), repeat=3))


def test_new_chunk_is_all_zero():
    chunk = VoxelChunk(4)
    assert chunk.points.shape == (64,)
    assert not chunk.points.any()
    assert not chunk.changed


def test_set_then_get_round_trips_every_position():
    size = 3
    chunk = VoxelChunk(size)
    for i, pos in enumerate(all_positions(size)):
        value = i * 0.37 - 1.25
        chunk.set(pos, value)
        assert chunk.get(pos) == value


def test_lattice_index_formula():
    assert lattice_index((1, 2, 3), 4) == 3 * 16 + 2 * 4 + 1
    assert lattice_index((0, 0, 0), 4) == 0
    assert lattice_index((3, 3, 3), 4) == 63


def test_lattice_index_is_a_bijection():
    size = 5
    indices = [lattice_index(pos, size) for pos in all_positions(size)]
    assert sorted(indices) == list(range(size ** 3))


def test_lattice_position_inverts_lattice_index():
    size = 4
    for pos in all_positions(size):
        assert lattice_position(lattice_index(pos, size), size) == pos


def test_lattice_position_rejects_out_of_range_index():
    with pytest.raises(ValueError):
        lattice_position(64, 4)
    with pytest.raises(ValueError):
        lattice_position(-1, 4)


@pytest.mark.parametrize("pos", [(-1, 0, 0), (4, 0, 0), (0, 4, 0), (0, 0, 4), (0, -1, 3)])
def test_get_and_set_outside_chunk_raise(pos):
    chunk = VoxelChunk(4)
    with pytest.raises(IndexOutOfRange):
        chunk.get(pos)
    with pytest.raises(IndexOutOfRange):
        chunk.set(pos, 1.0)
    assert not chunk.changed


def test_index_out_of_range_is_an_index_error():
    chunk = VoxelChunk(2)
    with pytest.raises(IndexError) as excinfo:
        chunk.get((2, 0, 0))
    assert isinstance(excinfo.value, VoxelMarchError)
    assert excinfo.value.pos == (2, 0, 0)
    assert excinfo.value.size == 2


def test_invalid_construction():
    with pytest.raises(ValueError):
        VoxelChunk(1)
    with pytest.raises(ValueError):
        VoxelChunk(3, points=np.zeros(26))


def test_chunk_from_existing_points():
    points = np.arange(8, dtype=np.float64)
    chunk = VoxelChunk(2, points)
    assert chunk.get((1, 0, 0)) == 1.0
    assert chunk.get((0, 1, 0)) == 2.0
    assert chunk.get((0, 0, 1)) == 4.0


def test_changed_flag_is_cleared_by_take_changed():
    chunk = VoxelChunk(3)
    assert chunk.take_changed() is False
    chunk.set((1, 1, 1), 0.5)
    assert chunk.take_changed() is True
    assert chunk.take_changed() is False


def test_toggle_flips_between_on_and_off():
    chunk = VoxelChunk(3)
    assert chunk.toggle((1, 1, 1)) == 1.0
    assert chunk.get((1, 1, 1)) == 1.0
    assert chunk.toggle((1, 1, 1)) == 0.0
    # anything that is not exactly 1.0 toggles on
    chunk.set((1, 1, 1), 0.7)
    assert chunk.toggle((1, 1, 1)) == 1.0


def test_fill_skips_border_points():
    calls = []

    def field(x, y, z):
        calls.append((x, y, z))
        return 0.25

    chunk = VoxelChunk(4)
    chunk.fill(field)

    assert len(calls) == 8
    assert all(1 <= c <= 2 for pos in calls for c in pos)
    assert chunk.get((1, 2, 1)) == 0.25
    assert chunk.get((0, 1, 1)) == 0.0
    assert chunk.take_changed()


def test_fill_without_border_uses_field_everywhere():
    chunk = VoxelChunk.from_field(3, lambda x, y, z: x + 10 * y + 100 * z, zero_border=False)
    for pos in all_positions(3):
        x, y, z = pos
        assert chunk.get(pos) == x + 10 * y + 100 * z


def test_grid_view_is_indexed_z_y_x():
    chunk = VoxelChunk(3)
    chunk.set((2, 1, 0), 5.0)
    assert chunk.grid()[0, 1, 2] == 5.0


def test_lattice_points_follow_storage_order():
    chunk = VoxelChunk(3)
    points = chunk.lattice_points()
    assert points.shape == (27, 3)
    for index in (0, 5, 13, 26):
        assert tuple(points[index]) == chunk.position(index)


def test_point_colors_mark_on_points():
    chunk = VoxelChunk(2)
    chunk.set((1, 0, 0), 1.0)
    colors = chunk.point_colors()
    assert colors.shape == (8, 3)
    np.testing.assert_array_equal(colors[1], [1.0, 1.0, 1.0])
    np.testing.assert_array_equal(colors[0], [0.0, 0.0, 0.0])


@pytest.mark.parametrize("pos", [(1.5, 0, 0), (0, 0.25, 1), (1, 1, 2.999)])
def test_fractional_coordinates_are_rejected(pos):
    chunk = VoxelChunk(4)
    with pytest.raises(ValueError):
        chunk.get(pos)
    with pytest.raises(ValueError):
        chunk.set(pos, 1.0)
    assert not chunk.changed


def test_integral_float_coordinates_are_accepted():
    chunk = VoxelChunk(4)
    chunk.set(np.array([1.0, 2.0, 3.0]), 0.5)
    assert chunk.get((1, 2, 3)) == 0.5
    assert lattice_index((1.0, 2.0, 3.0), 4) == 57
