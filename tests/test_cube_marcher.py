import numpy as np
import pytest

from voxel_march.chunk_data import VoxelChunk
from voxel_march.cube_marcher import GridCell, cube_index, march_cell, march_cube, vertex_interp
from voxel_march.geometry_constants import CORNER_OFFSETS
from voxel_march.marching_tables import EDGE_CONNECTION

ISO = 0.5


def corner_positions():
    return np.ascontiguousarray(CORNER_OFFSETS, dtype=np.float64)


@pytest.mark.parametrize("value", [0.0, 1.0, ISO + 0.1])
def test_uniform_cell_has_no_triangles(value):
    triangles = march_cube(corner_positions(), np.full(8, value), ISO)
    assert triangles.shape == (0, 3, 3)


def test_cube_index_bits():
    values = np.ones(8)
    assert cube_index(values, ISO) == 0
    values[3] = 0.0
    values[6] = 0.2
    assert cube_index(values, ISO) == (1 << 3) | (1 << 6)
    assert cube_index(np.zeros(8), ISO) == 255


@pytest.mark.parametrize("corner", range(8))
def test_single_low_corner_gives_one_triangle_facing_it(corner):
    positions = corner_positions()
    values = np.ones(8)
    values[corner] = 0.0

    triangles = march_cube(positions, values, ISO)
    assert triangles.shape == (1, 3, 3)

    incident = [
        (positions[u] + positions[v]) / 2.0
        for u, v in EDGE_CONNECTION if corner in (u, v)
    ]
    for vertex in triangles[0]:
        assert any(np.allclose(vertex, mid) for mid in incident)

    a, b, c = triangles[0]
    normal = np.cross(b - a, c - a)
    centroid = triangles[0].mean(axis=0)
    assert np.dot(normal, positions[corner] - centroid) > 0


@pytest.mark.parametrize("corner", range(8))
def test_single_high_corner_faces_away_from_it(corner):
    positions = corner_positions()
    values = np.zeros(8)
    values[corner] = 1.0

    triangles = march_cube(positions, values, ISO)
    assert triangles.shape == (1, 3, 3)

    a, b, c = triangles[0]
    normal = np.cross(b - a, c - a)
    assert np.dot(normal, positions[corner] - triangles[0].mean(axis=0)) < 0


def test_march_cube_is_deterministic():
    rng = np.random.default_rng(7)
    positions = corner_positions()
    values = rng.random(8)
    first = march_cube(positions, values, ISO)
    second = march_cube(positions, values, ISO)
    np.testing.assert_array_equal(first, second)
    assert len(first) <= 5


def test_vertex_interp_linear():
    p1 = np.array([0.0, 0.0, 0.0])
    p2 = np.array([2.0, 0.0, 0.0])
    np.testing.assert_allclose(vertex_interp(0.5, p1, p2, 0.0, 1.0), [1.0, 0.0, 0.0])
    np.testing.assert_allclose(vertex_interp(0.25, p1, p2, 0.0, 1.0), [0.5, 0.0, 0.0])


def test_vertex_interp_snaps_to_endpoints():
    p1 = np.array([1.0, 2.0, 3.0])
    p2 = np.array([1.0, 3.0, 3.0])
    np.testing.assert_array_equal(vertex_interp(0.5, p1, p2, 0.5, 1.0), p1)
    np.testing.assert_array_equal(vertex_interp(1.0, p1, p2, 0.5, 1.0), p2)


def test_vertex_interp_degenerate_edge_returns_first_point():
    p1 = np.array([0.0, 0.0, 0.0])
    p2 = np.array([0.0, 0.0, 1.0])
    np.testing.assert_array_equal(vertex_interp(0.5, p1, p2, 0.2, 0.2), p1)


def test_grid_cell_at_origin():
    cell = GridCell.at((1, 2, 3))
    np.testing.assert_array_equal(cell.positions[0], [1.0, 2.0, 3.0])
    np.testing.assert_array_equal(cell.positions[2], [2.0, 2.0, 4.0])
    np.testing.assert_array_equal(cell.positions[6], [2.0, 3.0, 4.0])
    assert not cell.values.any()


def test_grid_cell_samples_chunk():
    chunk = VoxelChunk(3)
    chunk.set((2, 1, 2), 0.75)
    cell = GridCell.from_chunk(chunk, (1, 0, 1))
    # corner 6 is offset (1, 1, 1)
    assert cell.values[6] == 0.75
    assert cell.values.sum() == 0.75


def test_march_cell_uses_chunk_coordinates():
    chunk = VoxelChunk(4)
    chunk.set((2, 2, 2), 1.0)
    triangles = march_cell(chunk, (1, 1, 1), ISO)
    assert triangles.shape == (1, 3, 3)
    # vertices halfway between (2, 2, 2) and its three neighbours in the cell
    assert np.all(triangles >= 1.5) and np.all(triangles <= 2.0)
