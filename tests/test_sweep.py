import logging
from collections import Counter

import numpy as np
import pytest

from voxel_march.chunk_data import VoxelChunk
from voxel_march.sweep import (
    ChunkSweeper, EditEvent, RemeshEvent, SweepConfig, SweepState,
)

CENTER = np.array([1.0, 1.0, 1.0])


@pytest.fixture
def chunk():
    c = VoxelChunk(4)
    c.set((1, 1, 1), 1.0)
    c.take_changed()
    return c


def edge_key(p, q):
    return tuple(p.tolist()), tuple(q.tolist())


def test_single_point_gives_closed_octahedron(chunk):
    mesh = ChunkSweeper(chunk).run()

    assert mesh.triangle_count == 8
    # every face has its own normal, so nothing is shared
    assert mesh.vertex_count == 24
    assert len(mesh.indices) == 24

    triangles = mesh.triangles().astype(np.float64)
    offsets = np.abs(triangles - CENTER)
    # each vertex is a midpoint half a unit from the point along one axis
    assert np.all(np.isclose(np.sort(offsets, axis=2), [0.0, 0.0, 0.5]))

    directed = Counter()
    for a, b, c in triangles:
        for p, q in ((a, b), (b, c), (c, a)):
            directed[edge_key(p, q)] += 1
    assert all(count == 1 for count in directed.values())
    for p, q in directed:
        assert (q, p) in directed

    for triangle, normal in zip(triangles, mesh.normals[mesh.indices[::3]]):
        assert np.dot(normal, triangle.mean(axis=0) - CENTER) > 0


def test_isolevel_above_every_value_gives_empty_mesh(chunk):
    assert ChunkSweeper(chunk).run(isolevel=1.5).is_empty()


def test_empty_chunk_gives_empty_mesh():
    assert ChunkSweeper(VoxelChunk(4)).run().is_empty()


def test_repeated_runs_give_identical_meshes(chunk):
    sweeper = ChunkSweeper(chunk)
    first = sweeper.run()
    second = sweeper.run()
    np.testing.assert_array_equal(first.positions, second.positions)
    np.testing.assert_array_equal(first.indices, second.indices)
    assert sweeper.completed_sweeps == 2


def test_state_transitions(chunk):
    sweeper = ChunkSweeper(chunk)
    assert sweeper.state is SweepState.IDLE
    assert sweeper.step() is False

    sweeper.begin()
    assert sweeper.state is SweepState.SWEEPING
    assert sweeper.indicator_position is None

    assert sweeper.step() is True
    assert sweeper.cursor == (0, 0, 0)
    assert sweeper.indicator_position == (0.5, 0.5, 0.5)

    while sweeper.step():
        pass
    assert sweeper.state is SweepState.IDLE
    assert sweeper.progress == 1.0
    assert sweeper.indicator_position is None
    assert sweeper.mesh.triangle_count == 8


def test_throttled_sweep_matches_eager_sweep(chunk):
    eager = ChunkSweeper(chunk.copy()).run()

    sweeper = ChunkSweeper(chunk, SweepConfig(throttled=True, cell_interval=0.25))
    sweeper.begin()
    for _ in range(27):
        assert sweeper.tick(0.25) is True
        assert sweeper.is_sweeping
    assert sweeper.cursor == (2, 2, 2)

    # one more tick notices the iterator is exhausted
    assert sweeper.tick(0.25) is True
    assert not sweeper.is_sweeping
    assert sweeper.tick(0.25) is False

    np.testing.assert_array_equal(sweeper.mesh.positions, eager.positions)
    np.testing.assert_array_equal(sweeper.mesh.normals, eager.normals)
    np.testing.assert_array_equal(sweeper.mesh.indices, eager.indices)


def test_tick_waits_for_the_interval(chunk):
    sweeper = ChunkSweeper(chunk, SweepConfig(throttled=True, cell_interval=0.25))
    sweeper.begin()
    assert sweeper.tick(0.1) is False
    assert sweeper.tick(0.1) is False
    assert sweeper.cursor is None
    assert sweeper.tick(0.1) is True
    assert sweeper.cursor == (0, 0, 0)


def test_tick_advances_one_cell_even_after_a_long_frame(chunk):
    sweeper = ChunkSweeper(chunk, SweepConfig(throttled=True, cell_interval=0.25))
    sweeper.begin()
    sweeper.tick(10.0)
    assert sweeper.cursor == (0, 0, 0)


def test_begin_while_sweeping_restarts(chunk):
    sweeper = ChunkSweeper(chunk)
    sweeper.begin()
    for _ in range(5):
        sweeper.step()
    sweeper.begin(isolevel=0.25)
    assert sweeper.isolevel == 0.25
    assert sweeper.progress == 0.0
    sweeper.step()
    assert sweeper.cursor == (0, 0, 0)


def test_edit_event_toggles_or_sets(chunk):
    sweeper = ChunkSweeper(chunk)
    sweeper.handle(EditEvent((1, 1, 1)))
    assert chunk.get((1, 1, 1)) == 0.0
    sweeper.handle(EditEvent((2, 1, 1), value=0.3))
    assert chunk.get((2, 1, 1)) == 0.3
    assert chunk.take_changed()


def test_remesh_event_eager(chunk):
    sweeper = ChunkSweeper(chunk)
    sweeper.handle(RemeshEvent())
    assert sweeper.state is SweepState.IDLE
    assert sweeper.mesh.triangle_count == 8

    sweeper.handle(RemeshEvent(isolevel=1.5))
    assert sweeper.mesh.is_empty()


def test_remesh_event_throttled_only_starts_the_sweep(chunk):
    sweeper = ChunkSweeper(chunk, SweepConfig(throttled=True))
    sweeper.handle(RemeshEvent())
    assert sweeper.is_sweeping
    assert sweeper.mesh.is_empty()


def test_edit_while_sweeping_logs_warning(chunk, caplog):
    sweeper = ChunkSweeper(chunk, SweepConfig(throttled=True))
    sweeper.begin()
    with caplog.at_level(logging.WARNING, logger="voxel_march.sweep"):
        sweeper.handle(EditEvent((2, 2, 2)))
    assert "while sweeping" in caplog.text
    assert chunk.get((2, 2, 2)) == 1.0


def test_unknown_event_is_rejected(chunk):
    with pytest.raises(TypeError):
        ChunkSweeper(chunk).handle("remesh")
