# --- voxel_march/chunk_data.py (Skalarfeld eines Chunks) ---
import logging

import numpy as np

from .geometry_constants import POINT_COLOR_ON, POINT_COLOR_OFF

logger = logging.getLogger(__name__)

# --- Chunk-Konstanten ---
CHUNK_SIZE = 4       # Kantenlänge in Gitterpunkten
MIN_CHUNK_SIZE = 2   # eine Zelle braucht 2 Punkte pro Achse
VALUE_ON = 1.0
VALUE_OFF = 0.0


class VoxelMarchError(Exception):
    """Basisklasse für Fehler aus voxel_march."""


class IndexOutOfRange(VoxelMarchError, IndexError):
    """Gitterkoordinate liegt auf mindestens einer Achse außerhalb von [0, size)."""

    def __init__(self, pos, size):
        self.pos = tuple(pos)
        self.size = size
        super().__init__(f"Lattice position {self.pos} out of range for chunk size {size}")


# --- Adressierung ---

def lattice_index(pos, size):
    """Flacher Index von (x, y, z): z*size^2 + y*size + x."""
    x, y, z = _checked_position(pos, size)
    return z * size * size + y * size + x


def lattice_position(index, size):
    """Umkehrung von lattice_index."""
    index = int(index)
    if not 0 <= index < size ** 3:
        raise ValueError(f"Lattice index {index} out of range for chunk size {size}")

    z = index // (size * size)
    index -= z * size * size
    y = index // size
    x = index % size
    return x, y, z


def _checked_position(pos, size):
    if len(pos) != 3:
        raise ValueError(f"Expected a 3D lattice position, got {pos!r}")
    # Ganzzahlige Floats (z.B. Eckpositionen einer GridCell) sind erlaubt, 1.5 nicht
    for component in pos:
        if float(component) != int(component):
            raise ValueError(f"Lattice coordinates must be integers, got {tuple(pos)!r}")
    for component in pos:
        if not 0 <= component < size:
            raise IndexOutOfRange(pos, size)
    return int(pos[0]), int(pos[1]), int(pos[2])


class VoxelChunk:
    """
    Dichtes Skalarfeld einer würfelförmigen Region, size^3 Gitterpunkte.

    Die Größe ist fest, eine neue Größe heißt neuer Chunk.
    Jeder Schreibzugriff setzt das Changed-Flag; der Aufrufer fragt es über
    take_changed() ab und baut davon abhängige Darstellungen neu.
    """

    def __init__(self, size=CHUNK_SIZE, points=None):
        size = int(size)
        if size < MIN_CHUNK_SIZE:
            raise ValueError(f"Chunk size must be at least {MIN_CHUNK_SIZE}, got {size}")

        if points is None:
            points = np.zeros(size ** 3, dtype=np.float64)
        else:
            points = np.array(points, dtype=np.float64).reshape(-1)
            if points.size != size ** 3:
                raise ValueError(
                    f"Chunk of size {size} needs {size ** 3} points, got {points.size}"
                )

        self.size = size
        self.points = points
        self._changed = False

    @classmethod
    def from_field(cls, size, field, zero_border=True):
        """Erzeugt einen Chunk und füllt ihn aus field(x, y, z)."""
        chunk = cls(size)
        chunk.fill(field, zero_border=zero_border)
        return chunk

    def index(self, pos):
        return lattice_index(pos, self.size)

    def position(self, index):
        return lattice_position(index, self.size)

    def get(self, pos):
        return float(self.points[self.index(pos)])

    def set(self, pos, value):
        self.points[self.index(pos)] = value
        self._changed = True

    def toggle(self, pos):
        """Schaltet zwischen VALUE_ON und VALUE_OFF um, gibt den neuen Wert zurück."""
        value = VALUE_OFF if self.get(pos) == VALUE_ON else VALUE_ON
        self.set(pos, value)
        return value

    def take_changed(self):
        """Gibt zurück, ob sich das Feld seit dem letzten Aufruf geändert hat, und setzt das Flag zurück."""
        changed = self._changed
        self._changed = False
        return changed

    @property
    def changed(self):
        return self._changed

    def is_border(self, pos):
        last = self.size - 1
        return any(c == 0 or c == last for c in pos)

    def fill(self, field, zero_border=True):
        """
        Füllt jeden Gitterpunkt mit field(x, y, z).

        Reihenfolge = Speicherreihenfolge. Mit zero_border bleibt die äußerste
        Schicht auf 0.0, damit sich die Oberfläche innerhalb des Chunks schließt.
        """
        for index in range(self.points.size):
            pos = self.position(index)
            if zero_border and self.is_border(pos):
                self.points[index] = VALUE_OFF
            else:
                self.points[index] = field(*pos)

        self._changed = True
        logger.debug("Filled chunk of size %d (zero_border=%s)", self.size, zero_border)

    def grid(self):
        """Das Feld als [z, y, x] Array (View, keine Kopie)."""
        return self.points.reshape(self.size, self.size, self.size)

    def lattice_points(self):
        """Positionen aller Gitterpunkte in Speicherreihenfolge, (size^3, 3)."""
        r = np.arange(self.size, dtype=np.float32)
        z, y, x = np.meshgrid(r, r, r, indexing="ij")
        return np.stack([x.ravel(), y.ravel(), z.ravel()], axis=1)

    def point_colors(self, on=POINT_COLOR_ON, off=POINT_COLOR_OFF):
        # Weiß bei VALUE_ON, sonst Schwarz
        mask = self.points == VALUE_ON
        return np.where(mask[:, None], on, off).astype(np.float32)

    def copy(self):
        return VoxelChunk(self.size, self.points.copy())

    def __repr__(self):
        return f"VoxelChunk(size={self.size})"
