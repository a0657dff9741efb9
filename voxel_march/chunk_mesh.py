# --- voxel_march/chunk_mesh.py (Meshing ganzer Chunks, optional im Thread-Pool) ---
import concurrent.futures
import logging

from .chunk_data import VoxelMarchError
from .sweep import ChunkSweeper, SweepConfig, DEFAULT_ISOLEVEL

logger = logging.getLogger(__name__)

THREAD_POOL_SIZE = 4


class MeshWorkerError(VoxelMarchError):
    """Mesh-Generierung für einen Chunk eines Batches fehlgeschlagen."""

    def __init__(self, coord, error):
        self.coord = coord
        self.error = error
        super().__init__(f"Mesh worker failed for {coord}: {error}")


def mesh_chunk(chunk, isolevel=DEFAULT_ISOLEVEL):
    """Kompletter Durchlauf eines Chunks."""
    return ChunkSweeper(chunk, SweepConfig(isolevel=isolevel)).run()


# --- Worker-Wrapper ---
# Rückgabe einer Exception, die im sammelnden Thread pro Chunk gemeldet wird

def mesh_worker_wrapper(coord, chunk, isolevel):
    """Wrapper für die Mesh-Generierung im Thread-Pool."""
    try:
        return mesh_chunk(chunk, isolevel)
    except Exception as e:
        error = MeshWorkerError(coord, e)
        error.__cause__ = e
        return error


def remesh_chunks(chunks, isolevel=DEFAULT_ISOLEVEL, max_workers=THREAD_POOL_SIZE):
    """
    Erzeugt Meshes unabhängiger Chunks parallel.

    chunks: coord -> VoxelChunk. Rückgabe coord -> IndexedMesh in der
    Reihenfolge von `chunks`; fehlgeschlagene Chunks werden geloggt und fehlen.
    """
    meshes = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(mesh_worker_wrapper, coord, chunk, isolevel): coord
            for coord, chunk in chunks.items()
        }
        for future in concurrent.futures.as_completed(futures):
            coord = futures[future]
            result = future.result()
            if isinstance(result, Exception):
                logger.error("Mesh generation error for %s: %s", coord, result.error)
                continue
            meshes[coord] = result

    return {coord: meshes[coord] for coord in chunks if coord in meshes}
