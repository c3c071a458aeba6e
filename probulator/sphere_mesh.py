"""Triangle meshes: procedural unit sphere, smooth vertex normals and bounds."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .mathutil import PI, TWO_PI


@dataclass(eq=False)
class Vertex:
    """One mesh vertex."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    tex_coord: np.ndarray = field(default_factory=lambda: np.zeros(2))

    def __post_init__(self):
        self.position = np.array(self.position, dtype=float)
        self.normal = np.array(self.normal, dtype=float)
        self.tex_coord = np.array(self.tex_coord, dtype=float)


@dataclass(eq=False)
class Mesh:
    """Indexed triangle list with its axis-aligned bounds."""

    vertices: list[Vertex] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    bounds_min: np.ndarray = field(default_factory=lambda: np.zeros(3))
    bounds_max: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def dimensions(self) -> np.ndarray:
        """Size of the bounding box along each axis."""
        return self.bounds_max - self.bounds_min

    @property
    def center(self) -> np.ndarray:
        """Centre of the bounding box."""
        return (self.bounds_max + self.bounds_min) / 2.0

    @property
    def positions(self) -> np.ndarray:
        """Vertex positions as an (n, 3) array."""
        return np.array([v.position for v in self.vertices], dtype=float).reshape(-1, 3)

    @property
    def triangles(self) -> np.ndarray:
        """Indices grouped as an (m, 3) array."""
        return np.array(self.indices, dtype=np.int64).reshape(-1, 3)


def generate_sphere(u_slices: int = 256, v_slices: int = 192) -> Mesh:
    """Unit sphere around the origin with poles on the Z axis.

    ``u_slices`` divides each ring around the axis and ``v_slices`` divides
    pole to pole, giving ``v_slices - 1`` rings between the two pole vertices.
    """
    if u_slices < 1:
        raise ValueError("u_slices must be at least 1")
    if v_slices < 2:
        raise ValueError("v_slices must be at least 2")

    vertices = [Vertex(position=(0.0, 0.0, 1.0), normal=(0.0, 0.0, 1.0))]
    for v in range(v_slices - 1):
        theta = ((v + 1.0) / v_slices) * PI
        for u in range(u_slices):
            phi = (u / u_slices) * TWO_PI
            pos = (
                math.sin(theta) * math.cos(phi),
                math.sin(theta) * math.sin(phi),
                math.cos(theta),
            )
            vertices.append(Vertex(position=pos, normal=pos))

    last = len(vertices)
    vertices.append(Vertex(position=(0.0, 0.0, -1.0), normal=(0.0, 0.0, -1.0)))

    indices: list[int] = []
    for u in range(u_slices):
        indices += [0, u + 1, u + 2 if u < u_slices - 1 else 1]

    prev_row = 1
    curr_row = u_slices + 1
    for _ in range(1, v_slices - 1):
        for u in range(u_slices):
            if u == u_slices - 1:
                next_bottom, next_top = curr_row, prev_row
            else:
                next_bottom, next_top = curr_row + u + 1, prev_row + u + 1
            indices += [
                prev_row + u, curr_row + u, next_bottom,
                next_bottom, next_top, prev_row + u,
            ]
        prev_row = curr_row
        curr_row += u_slices

    last_ring = last - u_slices
    for u in range(u_slices):
        indices += [last, last_ring + u, last_ring + u + 1 if u < u_slices - 1 else last_ring]

    return Mesh(
        vertices=vertices,
        indices=indices,
        bounds_min=np.array([-1.0, -1.0, -1.0]),
        bounds_max=np.array([1.0, 1.0, 1.0]),
    )


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    return np.divide(vectors, lengths, out=np.zeros_like(vectors), where=lengths > 0.0)


def compute_vertex_normals(positions, indices) -> np.ndarray:
    """Smooth per-vertex normals: the normalised sum of adjacent unit face normals.

    A face ``(a, b, c)`` has normal ``cross(b - a, c - b)``. Vertices touched by
    no non-degenerate face get a zero normal.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    triangles = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    if triangles.size and (triangles.min() < 0 or triangles.max() >= len(positions)):
        raise IndexError("triangle index out of range")
    normals = np.zeros_like(positions)
    if triangles.size:
        a = positions[triangles[:, 0]]
        b = positions[triangles[:, 1]]
        c = positions[triangles[:, 2]]
        face_normals = _normalize_rows(np.cross(b - a, c - b))
        for corner in range(3):
            np.add.at(normals, triangles[:, corner], face_normals)
    return _normalize_rows(normals)


def mesh_bounds(positions) -> tuple[np.ndarray, np.ndarray]:
    """Component-wise minimum and maximum of ``positions``."""
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    if len(positions) == 0:
        raise ValueError("no positions")
    return positions.min(axis=0), positions.max(axis=0)