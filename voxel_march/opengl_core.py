# --- voxel_march/opengl_core.py (Fenster, Shader und GPU-Buffer) ---
import ctypes
import logging

import glfw
import numpy as np
from OpenGL.GL import *
import OpenGL.GL.shaders

from .geometry_constants import VERTEX_STRIDE

logger = logging.getLogger(__name__)

# --- Oberfläche (Flat Shading) ---
MESH_VERTEX_SRC = """
#version 330 core
layout(location = 0) in vec3 a_position;
layout(location = 1) in vec3 a_normal;
layout(location = 2) in vec2 a_texcoord;

out vec3 v_normal;

uniform mat4 model;
uniform mat4 view;
uniform mat4 projection;

void main() {
    gl_Position = projection * view * model * vec4(a_position, 1.0);
    v_normal = mat3(model) * a_normal;
}
"""

MESH_FRAGMENT_SRC = """
#version 330 core
in vec3 v_normal;

out vec4 out_color;

uniform vec4 color;
uniform vec3 lightDir;
uniform float ambientLight;

void main() {
    // Faces werden von beiden Seiten gezeichnet
    vec3 n = normalize(gl_FrontFacing ? v_normal : -v_normal);
    float diffuse = max(dot(n, normalize(-lightDir)), 0.0);
    float light = mix(ambientLight, 1.0, diffuse);
    out_color = vec4(color.rgb * light, color.a);
}
"""

# --- Gitterpunkte und Marching-Indikator ---
POINT_VERTEX_SRC = """
#version 330 core
layout(location = 0) in vec3 a_position;
layout(location = 1) in vec3 a_color;

out vec3 v_color;

uniform mat4 view;
uniform mat4 projection;
uniform float pointSize;

void main() {
    gl_Position = projection * view * vec4(a_position, 1.0);
    gl_PointSize = pointSize;
    v_color = a_color;
}
"""

POINT_FRAGMENT_SRC = """
#version 330 core
in vec3 v_color;

out vec4 out_color;

void main() {
    out_color = vec4(v_color, 1.0);
}
"""

AMBIENT_LIGHT = 0.25
LIGHT_DIR = (-0.4, -1.0, -0.3)


def compile_program(vertex_src, fragment_src):
    return OpenGL.GL.shaders.compileProgram(
        OpenGL.GL.shaders.compileShader(vertex_src, GL_VERTEX_SHADER),
        OpenGL.GL.shaders.compileShader(fragment_src, GL_FRAGMENT_SHADER)
    )


def init_window(width, height, title):
    """Initialisiert GLFW, erstellt das Fenster und kompiliert beide Shader."""
    if not glfw.init():
        raise RuntimeError("GLFW init failed")

    glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
    glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
    glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
    glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, GL_TRUE)

    window = glfw.create_window(width, height, title, None, None)
    if not window:
        glfw.terminate()
        raise RuntimeError("Failed to create window")

    glfw.make_context_current(window)
    glEnable(GL_DEPTH_TEST)
    glEnable(GL_BLEND)
    glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
    glEnable(GL_PROGRAM_POINT_SIZE)

    vao_placeholder = glGenVertexArrays(1)
    glBindVertexArray(vao_placeholder)

    mesh_shader = compile_program(MESH_VERTEX_SRC, MESH_FRAGMENT_SRC)
    point_shader = compile_program(POINT_VERTEX_SRC, POINT_FRAGMENT_SRC)

    glUseProgram(mesh_shader)
    glUniform1f(glGetUniformLocation(mesh_shader, "ambientLight"), AMBIENT_LIGHT)
    glUniform3f(glGetUniformLocation(mesh_shader, "lightDir"), *LIGHT_DIR)

    logger.info("OpenGL %s", glGetString(GL_VERSION).decode(errors="replace"))
    return window, mesh_shader, point_shader


def create_mesh_buffers(mesh):
    """
    Erstellt VAO/VBO/EBO für ein IndexedMesh.
    8 Floats pro Vertex (Position, Normale, UV).
    """
    if mesh.is_empty():
        return None, 0, None, None

    verts = np.ascontiguousarray(mesh.interleaved())
    inds = np.ascontiguousarray(mesh.indices, dtype=np.uint32)

    vao = glGenVertexArrays(1)
    glBindVertexArray(vao)

    vbo = glGenBuffers(1)
    ebo = glGenBuffers(1)

    glBindBuffer(GL_ARRAY_BUFFER, vbo)
    glBufferData(GL_ARRAY_BUFFER, verts.nbytes, verts, GL_STATIC_DRAW)

    glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, ebo)
    glBufferData(GL_ELEMENT_ARRAY_BUFFER, inds.nbytes, inds, GL_STATIC_DRAW)

    stride = VERTEX_STRIDE * verts.itemsize

    # Position (3 floats)
    glVertexAttribPointer(0, 3, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(0))
    glEnableVertexAttribArray(0)

    # Normale (3 floats)
    glVertexAttribPointer(1, 3, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(3 * 4))
    glEnableVertexAttribArray(1)

    # UV (2 floats)
    glVertexAttribPointer(2, 2, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(6 * 4))
    glEnableVertexAttribArray(2)

    glBindVertexArray(0)
    return vao, inds.size, vbo, ebo


def delete_mesh_buffers(vao, vbo, ebo):
    if vao is not None:
        glDeleteVertexArrays(1, [vao])
        glDeleteBuffers(1, [vbo])
        glDeleteBuffers(1, [ebo])


def create_point_buffers(positions, colors):
    """VAO/VBO für farbige Punkte, 6 Floats pro Punkt (Position, Farbe)."""
    verts = np.ascontiguousarray(
        np.hstack([np.asarray(positions, dtype=np.float32), np.asarray(colors, dtype=np.float32)])
    )
    if verts.size == 0:
        return None, 0, None

    vao = glGenVertexArrays(1)
    glBindVertexArray(vao)

    vbo = glGenBuffers(1)
    glBindBuffer(GL_ARRAY_BUFFER, vbo)
    glBufferData(GL_ARRAY_BUFFER, verts.nbytes, verts, GL_DYNAMIC_DRAW)

    stride = 6 * verts.itemsize
    glVertexAttribPointer(0, 3, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(0))
    glEnableVertexAttribArray(0)
    glVertexAttribPointer(1, 3, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(3 * 4))
    glEnableVertexAttribArray(1)

    glBindVertexArray(0)
    return vao, len(verts), vbo


def delete_point_buffers(vao, vbo):
    if vao is not None:
        glDeleteVertexArrays(1, [vao])
        glDeleteBuffers(1, [vbo])
