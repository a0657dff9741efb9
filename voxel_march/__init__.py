"""Marching-Cubes-Oberflächen für Voxel-Chunks."""
from .cell_iterator import CellIterator
from .chunk_data import (
    CHUNK_SIZE, IndexOutOfRange, VoxelChunk, VoxelMarchError,
    lattice_index, lattice_position,
)
from .chunk_mesh import mesh_chunk, remesh_chunks
from .cube_marcher import GridCell, march_cell, march_cube, vertex_interp
from .mesh_builder import ChunkMesh, IndexedMesh, build_indexed_mesh, build_smooth_mesh
from .sweep import (
    ChunkSweeper, EditEvent, RemeshEvent, SweepConfig, SweepState,
)

__version__ = "0.1.0"
