# --- voxel_march/cube_marcher.py (Marching Cubes für eine Zelle) ---
import numpy as np
from numba import jit

from .geometry_constants import CORNER_OFFSETS
from .marching_tables import (
    EDGE_TABLE, EDGE_CONNECTION, TRIANGLE_TABLE, MAX_TRIANGLES_PER_CELL,
)

EPSILON = 1e-5


@jit(nopython=True, cache=True)
def cube_index(values, isolevel):
    """Bit i gesetzt, wenn Ecke i unter dem Isolevel liegt."""
    index = 0
    for i in range(8):
        if values[i] < isolevel:
            index |= 1 << i
    return index


@jit(nopython=True, cache=True)
def vertex_interp(isolevel, p1, p2, valp1, valp2):
    """Punkt auf der Kante p1-p2, an dem das Feld den Isolevel schneidet (float64)."""
    if abs(isolevel - valp1) < EPSILON:
        return p1.copy()
    if abs(isolevel - valp2) < EPSILON:
        return p2.copy()
    if abs(valp1 - valp2) < EPSILON:
        return p1.copy()

    mu = (isolevel - valp1) / (valp2 - valp1)
    return p1 + mu * (p2 - p1)


@jit(nopython=True, cache=True)
def march_cube(positions, values, isolevel):
    """
    Trianguliert eine Zelle.
    positions: (8, 3) Eckpositionen, values: (8,) Feldwerte.
    Rückgabe: (T, 3, 3) Array mit 0 <= T <= 5.
    """
    triangles = np.empty((MAX_TRIANGLES_PER_CELL, 3, 3), dtype=np.float64)

    index = cube_index(values, isolevel)
    edge = EDGE_TABLE[index]
    if edge == 0:
        # Zelle komplett innerhalb oder außerhalb der Oberfläche
        return triangles[:0].copy()

    vertices = np.zeros((12, 3), dtype=np.float64)
    for i in range(12):
        if edge & (1 << i):
            u = EDGE_CONNECTION[i, 0]
            v = EDGE_CONNECTION[i, 1]
            vertices[i] = vertex_interp(
                isolevel, positions[u], positions[v], values[u], values[v]
            )

    triangulation = TRIANGLE_TABLE[index]
    count = 0
    for i in range(0, 15, 3):
        if triangulation[i] < 0:
            break
        # Umgekehrte Reihenfolge: Normalen zeigen zur Seite unter dem Isolevel
        triangles[count, 0] = vertices[triangulation[i + 2]]
        triangles[count, 1] = vertices[triangulation[i + 1]]
        triangles[count, 2] = vertices[triangulation[i]]
        count += 1

    return triangles[:count].copy()


class GridCell:
    """Die 8 Ecken einer Zelle und die dort abgetasteten Feldwerte."""

    def __init__(self, positions, values=None):
        self.positions = np.ascontiguousarray(positions, dtype=np.float64).reshape(8, 3)
        if values is None:
            values = np.zeros(8, dtype=np.float64)
        self.values = np.ascontiguousarray(values, dtype=np.float64).reshape(8)

    @classmethod
    def at(cls, origin):
        return cls(CORNER_OFFSETS + np.asarray(origin, dtype=np.float64))

    @classmethod
    def from_chunk(cls, chunk, origin):
        cell = cls.at(origin)
        cell.sample(chunk)
        return cell

    def sample(self, chunk):
        for i in range(8):
            self.values[i] = chunk.get(self.positions[i])

    def march(self, isolevel):
        return march_cube(self.positions, self.values, float(isolevel))

    def __repr__(self):
        return f"GridCell(origin={tuple(self.positions[0])}, values={self.values.tolist()})"


def march_cell(chunk, origin, isolevel):
    """Tastet die Zelle bei `origin` im Chunk ab und trianguliert sie."""
    return GridCell.from_chunk(chunk, origin).march(isolevel)
