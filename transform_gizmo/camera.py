"""
Camera component.

Coordinate convention: Y-forward, Z-up
  - X: right
  - Y: forward (depth, camera looks along +Y)
  - Z: up

This differs from standard OpenGL (Z-forward, Y-up).
Projection matrices are adapted accordingly.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from transform_gizmo.geombase import Ray3

if TYPE_CHECKING:
    from transform_gizmo.scene.entity import Entity


class CameraComponent:
    """
    Camera supporting both perspective and orthographic projection.

    Attributes:
        projection_type: "perspective" or "orthographic"
        fov_y: Vertical field of view in radians (perspective mode)
        aspect: Aspect ratio width/height
        ortho_size: Half-height of the orthographic view (orthographic mode)
        near, far: Clipping planes
        order: Render order; higher draws later (on top)
        render_layers: Layers this camera draws
        clear_color: RGBA to clear with, None keeps the existing color buffer
        depth_clear: Depth value to clear to, None keeps the depth buffer
    """

    def __init__(
        self,
        near: float = 0.1,
        far: float = 100.0,
        fov_y_degrees: float = 60.0,
        aspect: float = 1.0,
        ortho_size: float = 5.0,
        projection_type: str = "perspective",
        order: int = 0,
        render_layers: frozenset[int] = frozenset({0}),
        clear_color: tuple[float, float, float, float] | None = (0.1, 0.1, 0.1, 1.0),
        depth_clear: float | None = 1.0,
    ):
        self.entity: "Entity | None" = None
        self.near = near
        self.far = far
        self.fov_y = math.radians(fov_y_degrees)
        self.aspect = aspect
        self.ortho_size = ortho_size
        self.projection_type = projection_type
        self.order = order
        self.is_active = True
        self.render_layers = frozenset(render_layers)
        self.clear_color = clear_color
        self.depth_clear = depth_clear

    # --- State snapshots used for change detection ---

    def projection_key(self) -> tuple:
        return (
            self.projection_type, self.fov_y, self.aspect,
            self.ortho_size, self.near, self.far,
        )

    def settings_key(self) -> tuple:
        return (self.order, self.is_active)

    def copy_projection_from(self, other: "CameraComponent") -> None:
        self.projection_type = other.projection_type
        self.fov_y = other.fov_y
        self.aspect = other.aspect
        self.ortho_size = other.ortho_size
        self.near = other.near
        self.far = other.far

    # --- Axes ---

    def _pose(self):
        if self.entity is None:
            raise RuntimeError("CameraComponent has no entity.")
        return self.entity.transform.global_pose()

    def position(self) -> np.ndarray:
        return self._pose().lin.copy()

    def forward(self) -> np.ndarray:
        """View direction in world space."""
        return self._pose().forward()

    def up(self) -> np.ndarray:
        return self._pose().up()

    # --- Matrices ---

    def get_view_matrix(self) -> np.ndarray:
        pose = self._pose().with_scale(1.0)
        return np.linalg.inv(pose.as_matrix())

    def get_projection_matrix(self) -> np.ndarray:
        """
        Projection matrix for Y-forward convention.

        Camera looks along +Y axis:
        - View X -> Screen X (right)
        - View Z -> Screen Y (up)
        - View Y -> Depth (forward)
        """
        if self.projection_type == "orthographic":
            return self._ortho_projection_matrix()
        return self._perspective_projection_matrix()

    def _perspective_projection_matrix(self) -> np.ndarray:
        f = 1.0 / math.tan(self.fov_y * 0.5)
        near, far = self.near, self.far
        proj = np.zeros((4, 4))
        proj[0, 0] = f / max(1e-6, self.aspect)  # X -> screen X
        proj[1, 2] = f                            # Z -> screen Y (up)
        proj[2, 1] = (far + near) / (far - near)  # Y -> depth
        proj[2, 3] = (-2 * far * near) / (far - near)
        proj[3, 1] = 1.0                          # w = y
        return proj

    def _ortho_projection_matrix(self) -> np.ndarray:
        top = self.ortho_size
        bottom = -self.ortho_size
        right = self.ortho_size * self.aspect
        left = -right
        near, far = self.near, self.far

        lr = right - left
        tb = top - bottom
        fn = far - near

        proj = np.zeros((4, 4))
        proj[0, 0] = 2.0 / lr                     # X -> screen X
        proj[1, 2] = 2.0 / tb                     # Z -> screen Y (up)
        proj[2, 1] = 2.0 / fn                     # Y -> depth
        proj[0, 3] = -(right + left) / lr
        proj[1, 3] = -(top + bottom) / tb
        proj[2, 3] = -(far + near) / fn
        proj[3, 3] = 1.0
        return proj

    def set_aspect(self, aspect: float):
        self.aspect = aspect

    # --- Screen <-> world ---

    def screen_point_to_ray(self, x: float, y: float, viewport_rect) -> Ray3:
        px, py, pw, ph = viewport_rect

        nx = ((x - px) / pw) * 2.0 - 1.0
        ny = ((y - py) / ph) * -2.0 + 1.0

        inv_pv = np.linalg.inv(self.get_projection_matrix() @ self.get_view_matrix())

        p_near = inv_pv @ np.array([nx, ny, -1.0, 1.0])
        p_far = inv_pv @ np.array([nx, ny, 1.0, 1.0])

        p_near /= p_near[3]
        p_far /= p_far[3]

        return Ray3(p_near[:3], p_far[:3] - p_near[:3])

    def world_to_screen(self, point: np.ndarray, viewport_rect) -> tuple[float, float] | None:
        """Project world point to screen coordinates (None if behind the camera)."""
        px, py, pw, ph = viewport_rect
        p = np.array([point[0], point[1], point[2], 1.0])
        clip = self.get_projection_matrix() @ self.get_view_matrix() @ p
        if clip[3] <= 0:
            return None
        ndc = clip[:3] / clip[3]
        return px + (ndc[0] + 1.0) * 0.5 * pw, py + (1.0 - ndc[1]) * 0.5 * ph

    def view_depth(self, point: np.ndarray) -> float:
        """Distance from the camera to `point` measured along the view direction."""
        return float(np.dot(np.asarray(point, dtype=float) - self.position(), self.forward()))

    def world_units_per_pixel(self, depth: float, viewport_height: float) -> float:
        """Size of one screen pixel in world units at the given view depth."""
        if self.projection_type == "orthographic":
            return 2.0 * self.ortho_size / viewport_height
        return 2.0 * depth * math.tan(self.fov_y * 0.5) / viewport_height
