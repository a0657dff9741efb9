# --- voxel_march/camera.py (Flugkamera für den Chunk-Viewer) ---
import math

import numpy as np
from pyrr import Matrix44

MAX_SPEED = 5.0
FRICTION = 0.5
MIN_SPEED_SQ = 1e-6
PITCH_LIMIT = 89.0


class Camera:
    def __init__(self, position, yaw=0.0, pitch=0.0, fovy=60.0, near=0.1, far=100.0):
        self.pos = np.array(position, dtype=np.float32)
        self.yaw = yaw
        self.pitch = pitch

        self.fovy = fovy
        self.near = near
        self.far = far

        self.forward = np.zeros(3, dtype=np.float32)
        self.right = np.zeros(3, dtype=np.float32)
        self.velocity = np.zeros(3, dtype=np.float32)

        self.update_view_vectors()

    @classmethod
    def looking_at(cls, position, target, **kwargs):
        """Kamera bei `position`, Yaw/Pitch zeigen auf `target`."""
        direction = np.asarray(target, dtype=np.float64) - np.asarray(position, dtype=np.float64)
        direction /= np.linalg.norm(direction)
        yaw = math.degrees(math.atan2(direction[0], -direction[2]))
        pitch = math.degrees(math.asin(direction[1]))
        return cls(position, yaw=yaw, pitch=pitch, **kwargs)

    def update_view_vectors(self):
        """Forward- und Right-Vektor aus Yaw und Pitch (Yaw 0 schaut nach -Z)."""
        yaw = math.radians(self.yaw)
        pitch = math.radians(self.pitch)
        self.forward = np.array([
            math.sin(yaw) * math.cos(pitch),
            math.sin(pitch),
            -math.cos(yaw) * math.cos(pitch),
        ], dtype=np.float32)
        self.forward /= np.linalg.norm(self.forward)

        right = np.cross(self.forward, [0.0, 1.0, 0.0])
        norm = np.linalg.norm(right)
        if norm > 0:
            self.right = (right / norm).astype(np.float32)

    def rotate(self, dx, dy, width, height):
        """Mausdelta in Pixeln: volle Fensterbreite = eine Drehung, volle Höhe = halbe."""
        if dx == 0.0 and dy == 0.0:
            return
        if width > 0:
            self.yaw += dx / width * 360.0
        if height > 0:
            self.pitch -= dy / height * 180.0
        self.pitch = max(-PITCH_LIMIT, min(PITCH_LIMIT, self.pitch))
        self.update_view_vectors()

    def move(self, axis_input, dt):
        """
        axis_input: (rechts, hoch, vorwärts) in [-1, 1].
        Volle Geschwindigkeit solange gedrückt, sonst Abbremsen durch Reibung.
        """
        axis = np.asarray(axis_input, dtype=np.float32)
        norm = np.linalg.norm(axis)
        if norm > 0:
            self.velocity = axis / norm * MAX_SPEED
        else:
            self.velocity *= 1.0 - FRICTION
            if float(np.dot(self.velocity, self.velocity)) < MIN_SPEED_SQ:
                self.velocity[:] = 0.0

        self.pos += (
            self.velocity[0] * dt * self.right
            + self.velocity[1] * dt * np.array([0.0, 1.0, 0.0], dtype=np.float32)
            + self.velocity[2] * dt * self.forward
        )

    def get_view_matrix(self):
        return Matrix44.look_at(self.pos, self.pos + self.forward, [0.0, 1.0, 0.0])

    def get_projection_matrix(self, width, height):
        aspect = width / height if height else 1.0
        return Matrix44.perspective_projection(self.fovy, aspect, self.near, self.far)
