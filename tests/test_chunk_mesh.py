import logging

import numpy as np

from voxel_march.chunk_data import VoxelChunk
from voxel_march.chunk_mesh import MeshWorkerError, mesh_chunk, mesh_worker_wrapper, remesh_chunks
from voxel_march.sweep import ChunkSweeper


def make_chunk(point):
    chunk = VoxelChunk(4)
    chunk.set(point, 1.0)
    return chunk


def test_mesh_chunk_matches_sweeper():
    chunk = make_chunk((1, 2, 1))
    mesh = mesh_chunk(chunk, 0.5)
    expected = ChunkSweeper(chunk).run()
    np.testing.assert_array_equal(mesh.positions, expected.positions)
    np.testing.assert_array_equal(mesh.indices, expected.indices)


def test_worker_wrapper_returns_errors():
    result = mesh_worker_wrapper((0, 0, 0), None, 0.5)
    assert isinstance(result, MeshWorkerError)
    assert result.coord == (0, 0, 0)
    assert isinstance(result.error, AttributeError)
    assert result.__cause__ is result.error


def test_remesh_chunks_keeps_input_order():
    chunks = {
        (2, 0, 0): make_chunk((1, 1, 1)),
        (0, 0, 0): VoxelChunk(4),
        (1, 0, 0): make_chunk((2, 2, 2)),
    }
    meshes = remesh_chunks(chunks, 0.5, max_workers=2)
    assert list(meshes) == list(chunks)
    assert meshes[(2, 0, 0)].triangle_count == 8
    assert meshes[(0, 0, 0)].is_empty()


def test_remesh_chunks_drops_failed_chunks(caplog):
    chunks = {(0, 0, 0): make_chunk((1, 1, 1)), (1, 0, 0): None}
    with caplog.at_level(logging.ERROR, logger="voxel_march.chunk_mesh"):
        meshes = remesh_chunks(chunks)
    assert list(meshes) == [(0, 0, 0)]
    assert "Mesh generation error for (1, 0, 0)" in caplog.text
