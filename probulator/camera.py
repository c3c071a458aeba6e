"""Perspective camera with orbit and first-person controllers.

Matrices are returned in mathematical (row-major) layout, so ``matrix @ vector`` applies them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from scipy.spatial.transform import Rotation


def _rotation_matrix(angle: float, axis) -> np.ndarray:
    axis = np.asarray(axis, dtype=float)
    axis = axis / np.linalg.norm(axis)
    c = math.cos(angle)
    s = math.sin(angle)
    cross = np.array([
        [0.0, -axis[2], axis[1]],
        [axis[2], 0.0, -axis[0]],
        [-axis[1], axis[0], 0.0],
    ])
    return c * np.eye(3) + s * cross + (1.0 - c) * np.outer(axis, axis)


def _mix(a, b, t):
    return a + (b - a) * t


@dataclass(eq=False)
class Camera:
    """Camera whose orientation columns are its right, up and backward axes."""

    aspect: float = 1.0
    fov: float = 1.0
    near: float = 1.0
    far: float = 1000.0
    orientation: np.ndarray = field(default_factory=lambda: np.eye(3))
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orbit_radius: float = 0.0

    def __post_init__(self):
        self.orientation = np.array(self.orientation, dtype=float)
        self.position = np.array(self.position, dtype=float)

    def projection_matrix(self) -> np.ndarray:
        """Right-handed perspective projection mapping depth to [-1, 1]."""
        tan_half = math.tan(self.fov / 2.0)
        result = np.zeros((4, 4))
        result[0, 0] = 1.0 / (self.aspect * tan_half)
        result[1, 1] = 1.0 / tan_half
        result[2, 2] = -(self.far + self.near) / (self.far - self.near)
        result[2, 3] = -(2.0 * self.far * self.near) / (self.far - self.near)
        result[3, 2] = -1.0
        return result

    def view_matrix(self) -> np.ndarray:
        """World-to-view transform; the eye sits ``orbit_radius`` behind ``position``."""
        eye = self.position + self.orbit_radius * self.orientation[:, 2]
        r = self.orientation.T
        result = np.eye(4)
        result[:3, :3] = r
        result[:3, 3] = -(r @ eye)
        return result

    def rotate(self, delta_around_up: float, delta_around_right: float) -> None:
        """Turn around world up and around the camera's right axis."""
        rot_up = _rotation_matrix(-delta_around_up, [0.0, 1.0, 0.0])
        rot_right = _rotation_matrix(-delta_around_right, self.orientation[:, 0])
        self.orientation = rot_up @ rot_right @ self.orientation

    def move_view_space(self, delta) -> None:
        """Translate by ``delta`` expressed in the camera's own axes."""
        self.position = self.position + self.orientation @ np.asarray(delta, dtype=float)

    def move_world_space(self, delta) -> None:
        """Translate by ``delta`` in world space."""
        self.position = self.position + np.asarray(delta, dtype=float)


class CameraMode(Enum):
    """How the controller moves the camera."""

    ORBIT = "Orbit"
    FIRST_PERSON = "FirstPerson"

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class InputState:
    """One frame of user input for :class:`CameraController`."""

    move_forward: float = 0.0
    move_up: float = 0.0
    move_right: float = 0.0
    rotate_around_up: float = 0.0
    rotate_around_right: float = 0.0
    move_speed_multiplier: float = 1.0
    rotate_speed_multiplier: float = 1.0
    scroll_delta: np.ndarray = field(default_factory=lambda: np.zeros(2))


@dataclass
class CameraController:
    """Applies input to a camera in orbit or first-person mode."""

    rotate_speed: float = 0.005
    move_speed: float = 0.05
    orbit_radius: float = 1.0
    mode: CameraMode = CameraMode.ORBIT

    def update(self, input_state: InputState, camera: Camera) -> None:
        """Rotate and move ``camera`` according to ``input_state``."""
        move_speed = self.move_speed * input_state.move_speed_multiplier
        rotate_speed = self.rotate_speed * input_state.rotate_speed_multiplier

        camera.rotate(
            input_state.rotate_around_up * rotate_speed,
            input_state.rotate_around_right * rotate_speed,
        )

        view_delta = np.array([
            input_state.move_right,
            input_state.move_up,
            -input_state.move_forward,
        ], dtype=float)

        if self.mode is CameraMode.ORBIT:
            if camera.orbit_radius == 0.0:
                camera.move_view_space([0.0, 0.0, -self.orbit_radius])
            self.orbit_radius = max(0.0, self.orbit_radius - float(input_state.scroll_delta[1]) * 0.25)
            camera.orbit_radius = self.orbit_radius
        else:
            if camera.orbit_radius != 0.0:
                camera.move_view_space([0.0, 0.0, self.orbit_radius])
            camera.orbit_radius = 0.0

        length = float(np.linalg.norm(view_delta))
        if length > 0.0:
            camera.move_view_space(move_speed * view_delta / length)

    def interpolate(
        self,
        x: Camera,
        y: Camera,
        position_alpha: float,
        orientation_alpha: float,
        attribute_alpha: float = 1.0,
    ) -> Camera:
        """Blend two cameras; orientation is spherically interpolated."""
        rx = Rotation.from_matrix(x.orientation)
        ry = Rotation.from_matrix(y.orientation)
        step = Rotation.from_rotvec((rx.inv() * ry).as_rotvec() * orientation_alpha)
        return Camera(
            aspect=_mix(x.aspect, y.aspect, attribute_alpha),
            fov=_mix(x.fov, y.fov, attribute_alpha),
            near=_mix(x.near, y.near, attribute_alpha),
            far=_mix(x.far, y.far, attribute_alpha),
            orientation=(rx * step).as_matrix(),
            position=_mix(x.position, y.position, position_alpha),
            orbit_radius=_mix(x.orbit_radius, y.orbit_radius, position_alpha),
        )