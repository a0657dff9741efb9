# --- voxel_march/viewer.py (interaktiver Chunk-Viewer) ---
import logging

import glfw
import numpy as np
from OpenGL.GL import *
from pyrr import Matrix44

from .camera import Camera
from .chunk_data import VoxelChunk
from .geometry_constants import CURSOR_COLOR, INDICATOR_COLOR, SURFACE_COLOR, WIREFRAME_COLOR
from .mesh_builder import build_smooth_mesh, cell_mesh
from .opengl_core import (
    init_window,
    create_mesh_buffers, delete_mesh_buffers,
    create_point_buffers, delete_point_buffers,
)
from .sweep import ChunkSweeper, EditEvent, RemeshEvent, SweepConfig

logger = logging.getLogger(__name__)

ISOLEVEL_STEP = 0.1
POINT_SIZE = 8.0
MARKER_SIZE = 14.0
BACKGROUND = (0.53, 0.8, 0.95, 1.0)

CURSOR_KEYS = {
    glfw.KEY_RIGHT: (1, 0, 0),
    glfw.KEY_LEFT: (-1, 0, 0),
    glfw.KEY_PAGE_UP: (0, 1, 0),
    glfw.KEY_PAGE_DOWN: (0, -1, 0),
    glfw.KEY_DOWN: (0, 0, 1),
    glfw.KEY_UP: (0, 0, -1),
}


class ChunkViewer:
    def __init__(self, window, mesh_shader, point_shader, width, height, chunk, config):
        self.window = window
        self.mesh_shader = mesh_shader
        self.point_shader = point_shader
        self.width = width
        self.height = height

        self.chunk = chunk
        self.sweeper = ChunkSweeper(chunk, config)
        self.isolevel = config.isolevel
        self.edit_cursor = [min(1, chunk.size - 1)] * 3

        size = chunk.size
        center = [(size - 1) / 2.0] * 3
        self.camera = Camera.looking_at([size + 3.0, size * 0.6 + 0.5, size + 1.0], center)

        self.mouse_last = None
        self.smooth_shading = False

        self.mesh_buffers = (None, 0, None, None)
        self.preview_buffers = (None, 0, None, None)
        self.point_buffers = create_point_buffers(chunk.lattice_points(), chunk.point_colors())
        self.marker_buffers = (None, 0, None)

        self._shown_sweeps = self.sweeper.completed_sweeps
        self._preview_size = 0

        self._setup_callbacks()

    def _setup_callbacks(self):
        glfw.set_window_user_pointer(self.window, self)

        def key_callback_wrapper(window, key, scancode, action, mods):
            viewer = glfw.get_window_user_pointer(window)
            if viewer: viewer._handle_key_input(key, action)

        def cursor_callback_wrapper(window, xpos, ypos):
            viewer = glfw.get_window_user_pointer(window)
            if viewer: viewer._handle_mouse_movement(xpos, ypos)

        def resize_callback_wrapper(window, width, height):
            viewer = glfw.get_window_user_pointer(window)
            if viewer: viewer._handle_resize(width, height)

        glfw.set_key_callback(self.window, key_callback_wrapper)
        glfw.set_cursor_pos_callback(self.window, cursor_callback_wrapper)
        glfw.set_framebuffer_size_callback(self.window, resize_callback_wrapper)

    # --- Eingabe ---

    def _handle_key_input(self, key, action):
        if action not in (glfw.PRESS, glfw.REPEAT):
            return

        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(self.window, True)
        elif key in CURSOR_KEYS:
            self._move_edit_cursor(CURSOR_KEYS[key])
        elif key == glfw.KEY_T and action == glfw.PRESS:
            self.sweeper.handle(EditEvent(tuple(self.edit_cursor)))
        elif key == glfw.KEY_N and action == glfw.PRESS:
            self._toggle_smooth_shading()
        elif key == glfw.KEY_R and action == glfw.PRESS:
            self.sweeper.handle(RemeshEvent(self.isolevel))
        elif key in (glfw.KEY_EQUAL, glfw.KEY_KP_ADD):
            self._change_isolevel(ISOLEVEL_STEP)
        elif key in (glfw.KEY_MINUS, glfw.KEY_KP_SUBTRACT):
            self._change_isolevel(-ISOLEVEL_STEP)

    def _toggle_smooth_shading(self):
        self.smooth_shading = not self.smooth_shading
        logger.info("Smooth shading %s", "on" if self.smooth_shading else "off")
        self._replace_mesh(self.sweeper.mesh)

    def _move_edit_cursor(self, delta):
        last = self.chunk.size - 1
        self.edit_cursor = [max(0, min(last, c + d)) for c, d in zip(self.edit_cursor, delta)]

    def _change_isolevel(self, delta):
        self.isolevel = round(self.isolevel + delta, 3)
        logger.info("Isolevel %.3f (press R to remesh)", self.isolevel)

    def _handle_mouse_movement(self, xpos, ypos):
        if self.mouse_last is None or not self._flying():
            self.mouse_last = (xpos, ypos)
            return

        dx = xpos - self.mouse_last[0]
        dy = ypos - self.mouse_last[1]
        self.mouse_last = (xpos, ypos)
        self.camera.rotate(dx, dy, self.width, self.height)

    def _handle_resize(self, width, height):
        self.width = width
        self.height = height
        glViewport(0, 0, width, height)

    def _flying(self):
        return glfw.get_mouse_button(self.window, glfw.MOUSE_BUTTON_RIGHT) == glfw.PRESS

    def _camera_axis_input(self):
        if not self._flying():
            return (0.0, 0.0, 0.0)

        def pressed(key):
            return glfw.get_key(self.window, key) == glfw.PRESS

        right = float(pressed(glfw.KEY_D)) - float(pressed(glfw.KEY_A))
        up = float(pressed(glfw.KEY_SPACE)) - float(pressed(glfw.KEY_LEFT_SHIFT))
        forward = float(pressed(glfw.KEY_W)) - float(pressed(glfw.KEY_S))
        return (right, up, forward)

    # --- Frame ---

    def update(self, dt):
        self.camera.move(self._camera_axis_input(), dt)
        self.sweeper.tick(dt)

        if self.chunk.take_changed():
            delete_point_buffers(self.point_buffers[0], self.point_buffers[2])
            self.point_buffers = create_point_buffers(
                self.chunk.lattice_points(), self.chunk.point_colors()
            )

        if self.sweeper.completed_sweeps != self._shown_sweeps:
            self._shown_sweeps = self.sweeper.completed_sweeps
            self._replace_mesh(self.sweeper.mesh)
            self._replace_preview(None)
        elif self.sweeper.is_sweeping and len(self.sweeper.buffer) != self._preview_size:
            self._replace_preview(cell_mesh(self.sweeper.buffer.as_array()))

        self._update_markers()

    def _replace_mesh(self, mesh):
        vao, _, vbo, ebo = self.mesh_buffers
        delete_mesh_buffers(vao, vbo, ebo)
        if self.smooth_shading:
            mesh = build_smooth_mesh(mesh.triangles())
        self.mesh_buffers = create_mesh_buffers(mesh)

    def _replace_preview(self, mesh):
        vao, _, vbo, ebo = self.preview_buffers
        delete_mesh_buffers(vao, vbo, ebo)
        if mesh is None:
            self.preview_buffers = (None, 0, None, None)
            self._preview_size = 0
        else:
            self.preview_buffers = create_mesh_buffers(mesh)
            self._preview_size = len(self.sweeper.buffer)

    def _update_markers(self):
        positions = [np.array(self.edit_cursor, dtype=np.float32)]
        colors = [CURSOR_COLOR]
        indicator = self.sweeper.indicator_position
        if indicator is not None:
            positions.append(np.array(indicator, dtype=np.float32))
            colors.append(INDICATOR_COLOR)

        delete_point_buffers(self.marker_buffers[0], self.marker_buffers[2])
        self.marker_buffers = create_point_buffers(np.array(positions), np.array(colors))

    def render(self):
        view = self.camera.get_view_matrix().astype('float32')
        projection = self.camera.get_projection_matrix(self.width, self.height).astype('float32')

        glClearColor(*BACKGROUND)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        glUseProgram(self.point_shader)
        glUniformMatrix4fv(glGetUniformLocation(self.point_shader, "view"), 1, GL_FALSE, view)
        glUniformMatrix4fv(glGetUniformLocation(self.point_shader, "projection"), 1, GL_FALSE, projection)
        size_loc = glGetUniformLocation(self.point_shader, "pointSize")
        for (vao, count, _), point_size in ((self.point_buffers, POINT_SIZE), (self.marker_buffers, MARKER_SIZE)):
            if count > 0 and vao is not None:
                glUniform1f(size_loc, point_size)
                glBindVertexArray(vao)
                glDrawArrays(GL_POINTS, 0, count)

        glUseProgram(self.mesh_shader)
        glUniformMatrix4fv(glGetUniformLocation(self.mesh_shader, "view"), 1, GL_FALSE, view)
        glUniformMatrix4fv(glGetUniformLocation(self.mesh_shader, "projection"), 1, GL_FALSE, projection)
        glUniformMatrix4fv(glGetUniformLocation(self.mesh_shader, "model"), 1, GL_FALSE,
                           Matrix44.identity().astype('float32'))
        glUniform4f(glGetUniformLocation(self.mesh_shader, "color"), *SURFACE_COLOR)

        # Oberfläche ist am Chunkrand offen, beide Seiten zeichnen
        glDisable(GL_CULL_FACE)
        sweeping = self.sweeper.is_sweeping
        buffers = self.preview_buffers if sweeping else self.mesh_buffers
        vao, count, _, _ = buffers
        if count > 0 and vao is not None:
            glBindVertexArray(vao)
            glDrawElements(GL_TRIANGLES, count, GL_UNSIGNED_INT, None)

            # NEU: Wireframe über den bisher gerechneten Zellen
            if sweeping:
                glUniform4f(glGetUniformLocation(self.mesh_shader, "color"), *WIREFRAME_COLOR)
                glPolygonMode(GL_FRONT_AND_BACK, GL_LINE)
                glDrawElements(GL_TRIANGLES, count, GL_UNSIGNED_INT, None)
                glPolygonMode(GL_FRONT_AND_BACK, GL_FILL)

    def shutdown(self):
        for vao, _, vbo, ebo in (self.mesh_buffers, self.preview_buffers):
            delete_mesh_buffers(vao, vbo, ebo)
        for vao, _, vbo in (self.point_buffers, self.marker_buffers):
            delete_point_buffers(vao, vbo)


def run_viewer(chunk, config=None, width=1280, height=720, title="voxel-march"):
    config = config if config is not None else SweepConfig()
    window, mesh_shader, point_shader = init_window(width, height, title)
    viewer = ChunkViewer(window, mesh_shader, point_shader, width, height, chunk, config)
    logger.info("Arrows/PageUp/PageDown move the cursor, T toggles, R remeshes, +/- isolevel, N smooth shading")

    prev_time = glfw.get_time()
    try:
        while not glfw.window_should_close(window):
            now = glfw.get_time()
            dt = now - prev_time
            prev_time = now
            glfw.poll_events()

            viewer.update(dt)
            viewer.render()

            glfw.swap_buffers(window)
    finally:
        viewer.shutdown()
        glfw.terminate()


def demo_chunk(size, sphere=False):
    """Leerer Chunk oder einer mit kugelförmigem Dichtefeld."""
    if not sphere:
        return VoxelChunk(size)

    center = (size - 1) / 2.0
    radius = max(center - 0.5, 0.5)

    def sphere_field(x, y, z):
        distance = np.sqrt((x - center) ** 2 + (y - center) ** 2 + (z - center) ** 2)
        return float(np.clip(1.0 - distance / (2.0 * radius), 0.0, 1.0))

    return VoxelChunk.from_field(size, sphere_field)
