# --- voxel_march/mesh_builder.py (Dreieckssuppe -> indiziertes Mesh) ---
from dataclasses import dataclass

import numpy as np

from .geometry_constants import VERTEX_STRIDE


@dataclass(eq=False)
class IndexedMesh:
    """Indizierte Dreiecksliste für den Renderer."""
    positions: np.ndarray  # (N, 3) float32
    normals: np.ndarray    # (N, 3) float32
    uvs: np.ndarray        # (N, 2) float32, immer 0
    indices: np.ndarray    # (3T,) uint32

    @classmethod
    def empty(cls):
        return cls(
            positions=np.zeros((0, 3), dtype=np.float32),
            normals=np.zeros((0, 3), dtype=np.float32),
            uvs=np.zeros((0, 2), dtype=np.float32),
            indices=np.zeros(0, dtype=np.uint32),
        )

    @property
    def vertex_count(self):
        return len(self.positions)

    @property
    def triangle_count(self):
        return len(self.indices) // 3

    def is_empty(self):
        return self.indices.size == 0

    def triangles(self):
        """Expandiert die Indexliste wieder zu (T, 3, 3) Positionen."""
        return self.positions[self.indices].reshape(-1, 3, 3)

    def interleaved(self):
        """(N, 8) float32: Position, Normale, UV pro Vertex (ein VBO)."""
        verts = np.empty((self.vertex_count, VERTEX_STRIDE), dtype=np.float32)
        verts[:, 0:3] = self.positions
        verts[:, 3:6] = self.normals
        verts[:, 6:8] = self.uvs
        return verts


class ChunkMesh:
    """Sammelpuffer für die Dreiecke eines Durchlaufs."""

    def __init__(self):
        self.triangles = []

    def clear(self):
        self.triangles.clear()

    def extend(self, triangles):
        self.triangles.extend(np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3))

    def __len__(self):
        return len(self.triangles)

    def as_array(self):
        if not self.triangles:
            return np.zeros((0, 3, 3), dtype=np.float64)
        return np.array(self.triangles, dtype=np.float64)

    def build(self):
        return build_indexed_mesh(self.as_array())


def face_normals(triangles):
    """normalize(cross(b - a, c - a)) pro Dreieck; Dreiecke ohne Fläche bekommen 0."""
    a = triangles[:, 0]
    b = triangles[:, 1]
    c = triangles[:, 2]
    normals = np.cross(b - a, c - a)
    lengths = np.linalg.norm(normals, axis=1)

    out = np.zeros_like(normals)
    nonzero = lengths > 0.0
    out[nonzero] = normals[nonzero] / lengths[nonzero, None]
    return out


def build_indexed_mesh(triangles):
    """
    Wandelt eine Dreieckssuppe in ein IndexedMesh um.

    Ein Vertex wird nur zwischen Faces mit exakt gleicher Position UND
    gleicher Face-Normale geteilt: koplanare Nachbarn fallen zusammen,
    Vertices an Kanten werden dupliziert (Flat Shading bleibt erhalten).
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    if len(triangles) == 0:
        return IndexedMesh.empty()

    normals = face_normals(triangles)

    lookup = {}
    positions = []
    vertex_normals = []
    indices = []
    for triangle, normal in zip(triangles.tolist(), normals.tolist()):
        normal_key = tuple(normal)
        for vertex in triangle:
            key = (tuple(vertex), normal_key)
            index = lookup.get(key)
            if index is None:
                index = len(positions)
                lookup[key] = index
                positions.append(vertex)
                vertex_normals.append(normal)
            indices.append(index)

    return IndexedMesh(
        positions=np.array(positions, dtype=np.float32),
        normals=np.array(vertex_normals, dtype=np.float32),
        uvs=np.zeros((len(positions), 2), dtype=np.float32),
        indices=np.array(indices, dtype=np.uint32),
    )


def compute_vertex_normals(positions, indices):
    """Flächengewichtete Smooth-Normalen, eine pro Vertex."""
    positions = np.asarray(positions, dtype=np.float64)
    faces = np.asarray(indices, dtype=np.int64).reshape(-1, 3)

    a = positions[faces[:, 0]]
    b = positions[faces[:, 1]]
    c = positions[faces[:, 2]]
    # Nicht normalisiert: Länge = doppelte Dreiecksfläche
    face_n = np.cross(b - a, c - a)

    normals = np.zeros_like(positions)
    for corner in range(3):
        np.add.at(normals, faces[:, corner], face_n)

    lengths = np.linalg.norm(normals, axis=1)
    nonzero = lengths > 0.0
    normals[nonzero] /= lengths[nonzero, None]
    return normals.astype(np.float32)


def build_smooth_mesh(triangles):
    """
    NEU: Smooth Shading. Vertices werden nur über die Position geteilt,
    die Normalen kommen aus compute_vertex_normals.
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    if len(triangles) == 0:
        return IndexedMesh.empty()

    lookup = {}
    positions = []
    indices = []
    for vertex in triangles.reshape(-1, 3).tolist():
        key = tuple(vertex)
        index = lookup.get(key)
        if index is None:
            index = len(positions)
            lookup[key] = index
            positions.append(vertex)
        indices.append(index)

    indices = np.array(indices, dtype=np.uint32)
    return IndexedMesh(
        positions=np.array(positions, dtype=np.float32),
        normals=compute_vertex_normals(positions, indices),
        uvs=np.zeros((len(positions), 2), dtype=np.float32),
        indices=indices,
    )


def cell_mesh(triangles):
    """
    Nicht indiziertes Mesh aus losen Dreiecken (z.B. die bisher gerechneten Zellen).
    Die Reihenfolge kommt schon richtig aus march_cube, Normalen pro Face.
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    if len(triangles) == 0:
        return IndexedMesh.empty()

    normals = np.repeat(face_normals(triangles), 3, axis=0)
    count = len(triangles) * 3

    return IndexedMesh(
        positions=triangles.reshape(-1, 3).astype(np.float32),
        normals=normals.astype(np.float32),
        uvs=np.zeros((count, 2), dtype=np.float32),
        indices=np.arange(count, dtype=np.uint32),
    )
