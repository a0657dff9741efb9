# --- voxel_march/sweep.py (Remesh-Steuerung: Idle -> Sweeping -> Idle) ---
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .cell_iterator import CellIterator
from .cube_marcher import march_cell
from .geometry_constants import CELL_CENTER_OFFSET
from .mesh_builder import ChunkMesh, IndexedMesh

logger = logging.getLogger(__name__)

DEFAULT_ISOLEVEL = 0.5
CELL_INTERVAL = 0.25  # Sekunden pro Zelle im gedrosselten Modus


@dataclass
class SweepConfig:
    """Parameter eines Remesh, werden explizit vom Aufrufer übergeben."""
    isolevel: float = DEFAULT_ISOLEVEL
    throttled: bool = False
    cell_interval: float = CELL_INTERVAL


class SweepState(enum.Enum):
    IDLE = "idle"
    SWEEPING = "sweeping"


@dataclass(frozen=True)
class EditEvent:
    """Änderungswunsch von der Eingabe. value=None schaltet den Gitterpunkt um."""
    pos: Tuple[int, int, int]
    value: Optional[float] = None


@dataclass(frozen=True)
class RemeshEvent:
    """Startet einen Durchlauf; isolevel=None nimmt den konfigurierten Wert."""
    isolevel: Optional[float] = None


class ChunkSweeper:
    """
    Besitzt einen Chunk samt Zell-Iterator und Dreieckspuffer.

    run() rechnet alles auf einmal. begin() + tick(dt) rechnet eine Zelle pro
    cell_interval Sekunden und endet mit exakt demselben Mesh.
    """

    def __init__(self, chunk, config=None):
        self.chunk = chunk
        self.config = config if config is not None else SweepConfig()
        self.cells = CellIterator.for_chunk(chunk.size)
        self.buffer = ChunkMesh()
        self.mesh = IndexedMesh.empty()
        self.state = SweepState.IDLE
        self.cursor = None
        self.completed_sweeps = 0

        self._isolevel = self.config.isolevel
        self._timer = 0.0
        self._cells_done = 0

    @property
    def is_sweeping(self):
        return self.state is SweepState.SWEEPING

    @property
    def isolevel(self):
        """Isolevel des aktuellen (bzw. letzten) Durchlaufs."""
        return self._isolevel

    @property
    def progress(self):
        total = len(self.cells)
        return self._cells_done / total if total else 1.0

    @property
    def indicator_position(self):
        """Mitte der zuletzt gerechneten Zelle, None im Leerlauf."""
        if not self.is_sweeping or self.cursor is None:
            return None
        return tuple(float(c) for c in CELL_CENTER_OFFSET + self.cursor)

    def begin(self, isolevel=None):
        if self.is_sweeping:
            logger.info("Restarting sweep of %r", self.chunk)

        self._isolevel = self.config.isolevel if isolevel is None else float(isolevel)
        self.cells.reset()
        self.buffer.clear()
        self.cursor = None
        self._timer = 0.0
        self._cells_done = 0
        self.state = SweepState.SWEEPING
        logger.info("Start marching %r at isolevel %.3f", self.chunk, self._isolevel)

    def step(self):
        """Rechnet die nächste Zelle. False, sobald der Durchlauf vorbei ist."""
        if not self.is_sweeping:
            return False

        try:
            origin = next(self.cells)
        except StopIteration:
            self._finish()
            return False

        triangles = march_cell(self.chunk, origin, self._isolevel)
        self.buffer.extend(triangles)
        self.cursor = origin
        self._cells_done += 1
        logger.debug("Cell %s: %d triangles", origin, len(triangles))
        return True

    def _finish(self):
        self.mesh = self.buffer.build()
        self.state = SweepState.IDLE
        self.cursor = None
        self.completed_sweeps += 1
        logger.info(
            "Marching is over: %d cells, %d triangles, %d vertices",
            self._cells_done, self.mesh.triangle_count, self.mesh.vertex_count,
        )

    def run(self, isolevel=None):
        """Kompletter Durchlauf über alle Zellen, gibt das indizierte Mesh zurück."""
        self.begin(isolevel)
        while self.step():
            pass
        return self.mesh

    def tick(self, dt):
        """Gedrosselter Modus: höchstens eine Zelle pro Aufruf, Takt = cell_interval."""
        if not self.is_sweeping:
            return False

        interval = self.config.cell_interval
        if interval > 0.0:
            self._timer += dt
            if self._timer < interval:
                return False
            self._timer %= interval

        self.step()
        return True

    def handle(self, event):
        if isinstance(event, EditEvent):
            if self.is_sweeping:
                logger.warning("Edit at %s while sweeping, the current sweep may miss it", event.pos)
            if event.value is None:
                self.chunk.toggle(event.pos)
            else:
                self.chunk.set(event.pos, event.value)
        elif isinstance(event, RemeshEvent):
            if self.config.throttled:
                self.begin(event.isolevel)
            else:
                self.run(event.isolevel)
        else:
            raise TypeError(f"Unsupported sweep event: {event!r}")
