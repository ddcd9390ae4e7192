"""Rays, planes and the intersection queries the drag math is built on."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class Ray3:
    """World-space ray. Direction is normalized on construction."""
    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self):
        self.origin = np.asarray(self.origin, dtype=float)
        direction = np.asarray(self.direction, dtype=float)
        norm = np.linalg.norm(direction)
        if norm == 0.0:
            raise ValueError("Ray3 direction must be non-zero")
        self.direction = direction / norm

    def point_at(self, t: float) -> np.ndarray:
        return self.origin + self.direction * t


@dataclass
class Plane:
    """Infinite plane through `point` with normal `normal`."""
    point: np.ndarray
    normal: np.ndarray

    def __post_init__(self):
        self.point = np.asarray(self.point, dtype=float)
        self.normal = np.asarray(self.normal, dtype=float)


def ray_plane_intersect(ray: Ray3, plane: Plane) -> np.ndarray | None:
    """
    Intersect ray with plane.

    Returns None when the ray is parallel to the plane or the plane is
    behind the ray origin.
    """
    denom = np.dot(ray.direction, plane.normal)
    if abs(denom) < 1e-6:
        return None

    t = np.dot(plane.point - ray.origin, plane.normal) / denom
    if t < 0.0:
        return None
    return ray.point_at(t)


def closest_point_on_axis(
    ray: Ray3,
    axis_point: np.ndarray,
    axis_dir: np.ndarray,
) -> np.ndarray:
    """Find closest point on an infinite axis to the ray."""
    axis_point = np.asarray(axis_point, dtype=float)
    axis_dir = np.asarray(axis_dir, dtype=float)
    w0 = axis_point - ray.origin
    a = np.dot(axis_dir, axis_dir)
    b = np.dot(axis_dir, ray.direction)
    c = np.dot(ray.direction, ray.direction)
    d = np.dot(axis_dir, w0)
    e = np.dot(ray.direction, w0)

    denom = a * c - b * b
    if abs(denom) < 1e-10:
        # Parallel
        return axis_point.copy()

    s = (b * e - c * d) / denom
    return axis_point + axis_dir * s


def normalize(v: np.ndarray, eps: float = 1e-9) -> np.ndarray | None:
    """Unit vector along v, or None if v is (nearly) zero."""
    v = np.asarray(v, dtype=float)
    n = np.linalg.norm(v)
    if n < eps:
        return None
    return v / n
