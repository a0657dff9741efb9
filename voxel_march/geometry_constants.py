# --- voxel_march/geometry_constants.py (Zellgeometrie für Marching Cubes) ---
import numpy as np

# CORNER_OFFSETS: Ecke i einer Zelle relativ zum Ursprung.
# 0-3: Unterseite (y=0), 4-7: Oberseite (y=1), gleiche (x, z) Reihenfolge.
CORNER_OFFSETS = np.array([
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [1.0, 0.0, 1.0],
    [0.0, 0.0, 1.0],
    [0.0, 1.0, 0.0],
    [1.0, 1.0, 0.0],
    [1.0, 1.0, 1.0],
    [0.0, 1.0, 1.0],
], dtype=np.float64)

# Vom Zellursprung zur Zellmitte (Marching-Indikator)
CELL_CENTER_OFFSET = np.array([0.5, 0.5, 0.5], dtype=np.float64)

# Farben der Gitterpunkte (RGB)
POINT_COLOR_ON = np.array([1.0, 1.0, 1.0], dtype=np.float32)
POINT_COLOR_OFF = np.array([0.0, 0.0, 0.0], dtype=np.float32)
CURSOR_COLOR = np.array([0.0, 1.0, 0.0], dtype=np.float32)
INDICATOR_COLOR = np.array([0.0, 0.0, 1.0], dtype=np.float32)

# Oberfläche (RGBA)
SURFACE_COLOR = np.array([1.0, 0.0, 0.0, 0.75], dtype=np.float32)
WIREFRAME_COLOR = np.array([1.0, 1.0, 0.0, 1.0], dtype=np.float32)  # NEU: Vorschau-Wireframe

# Floats pro Vertex: Position (3), Normale (3), UV (2)
VERTEX_STRIDE = 8
