"""
Pickable handle shapes.

Shapes are declared in handle-local space. Picking maps the world ray into
that space with the inverse of the handle's world matrix, so `ray_dir` is
not necessarily unit length; every test below works for any non-zero
direction and returns the ray parameter t of the nearest hit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np


class HandleShape(ABC):
    """Base class for handle pick geometry."""

    @abstractmethod
    def ray_intersect(self, ray_origin: np.ndarray, ray_dir: np.ndarray) -> float | None:
        """
        Test ray intersection.

        Returns:
            Ray parameter t of the nearest hit in front of the origin, or None.
        """
        ...


@dataclass
class SphereShape(HandleShape):
    radius: float
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def ray_intersect(self, ray_origin: np.ndarray, ray_dir: np.ndarray) -> float | None:
        oc = ray_origin - self.center
        a = np.dot(ray_dir, ray_dir)
        b = 2.0 * np.dot(oc, ray_dir)
        c = np.dot(oc, oc) - self.radius * self.radius

        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return None

        sqrt_disc = np.sqrt(discriminant)
        t1 = (-b - sqrt_disc) / (2 * a)
        t2 = (-b + sqrt_disc) / (2 * a)

        if t1 >= 0:
            return float(t1)
        if t2 >= 0:
            return float(t2)
        return None


@dataclass
class CylinderShape(HandleShape):
    """Finite cylinder between `start` and `end` (side surface only)."""
    start: np.ndarray
    end: np.ndarray
    radius: float

    @staticmethod
    def along_y(height: float, radius: float) -> "CylinderShape":
        """Cylinder centered on the origin along local Y."""
        half = height * 0.5
        return CylinderShape(
            start=np.array([0.0, -half, 0.0]),
            end=np.array([0.0, half, 0.0]),
            radius=radius,
        )

    def ray_intersect(self, ray_origin: np.ndarray, ray_dir: np.ndarray) -> float | None:
        cyl_axis = self.end - self.start
        cyl_length = np.linalg.norm(cyl_axis)
        if cyl_length < 1e-9:
            return None
        cyl_axis = cyl_axis / cyl_length

        delta = ray_origin - self.start

        d_perp = ray_dir - np.dot(ray_dir, cyl_axis) * cyl_axis
        delta_perp = delta - np.dot(delta, cyl_axis) * cyl_axis

        a = np.dot(d_perp, d_perp)
        b = 2.0 * np.dot(d_perp, delta_perp)
        c = np.dot(delta_perp, delta_perp) - self.radius * self.radius

        if a < 1e-12:
            # Ray parallel to the cylinder axis
            return None

        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return None

        sqrt_disc = np.sqrt(discriminant)
        for t in sorted(((-b - sqrt_disc) / (2 * a), (-b + sqrt_disc) / (2 * a))):
            if t < 0:
                continue
            hit_point = ray_origin + ray_dir * t
            proj = np.dot(hit_point - self.start, cyl_axis)
            if 0 <= proj <= cyl_length:
                return float(t)

        return None


@dataclass
class TorusShape(HandleShape):
    """Ring around local `axis` (rotation handles)."""
    major_radius: float
    minor_radius: float
    axis: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))

    def ray_intersect(self, ray_origin: np.ndarray, ray_dir: np.ndarray) -> float | None:
        # Approximation: the ring is treated as an annulus at three heights.
        tangent, bitangent = build_basis(self.axis)
        to_local = np.array([tangent, bitangent, self.axis], dtype=float)

        local_origin = to_local @ ray_origin
        local_dir = to_local @ ray_dir

        if abs(local_dir[2]) < 1e-9:
            return None

        best = None
        for dz in (0.0, -self.minor_radius * 0.5, self.minor_radius * 0.5):
            t = -(local_origin[2] - dz) / local_dir[2]
            if t < 0:
                continue
            hit = local_origin + local_dir * t
            dist = np.hypot(hit[0], hit[1])
            if abs(dist - self.major_radius) <= self.minor_radius:
                if best is None or t < best:
                    best = float(t)
        return best


@dataclass
class QuadShape(HandleShape):
    """Square of side `size` centered on the origin in the local XZ plane."""
    size: float

    def ray_intersect(self, ray_origin: np.ndarray, ray_dir: np.ndarray) -> float | None:
        if abs(ray_dir[1]) < 1e-9:
            return None
        t = -ray_origin[1] / ray_dir[1]
        if t < 0:
            return None
        hit = ray_origin + ray_dir * t
        half = self.size * 0.5
        if abs(hit[0]) <= half and abs(hit[2]) <= half:
            return float(t)
        return None


def build_basis(axis: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Build orthonormal basis from axis (tangent, bitangent)."""
    axis = np.asarray(axis, dtype=float)
    if abs(axis[0]) < 0.9:
        tangent = np.cross(axis, np.array([1.0, 0.0, 0.0]))
    else:
        tangent = np.cross(axis, np.array([0.0, 1.0, 0.0]))
    tangent = tangent / np.linalg.norm(tangent)
    bitangent = np.cross(axis, tangent)
    return tangent, bitangent
