"""
Screen-space normalization.

Scales an entity uniformly so that `size_in_world` units of its local
geometry cover `size_in_pixels` pixels on screen, whatever the camera
distance. The gizmo is built about 1.5 units across and shown 150 pixels
across by default.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from transform_gizmo.camera import CameraComponent
from transform_gizmo.scene.scene import Scene


@dataclass
class Normalize3d:
    size_in_world: float = 1.5
    size_in_pixels: float = 150.0

    def required_scale(self, camera: CameraComponent, position: np.ndarray, viewport_height: float) -> float | None:
        """Uniform scale for an entity at `position`, or None when it cannot be computed."""
        depth = camera.view_depth(position)
        if camera.projection_type != "orthographic" and depth <= camera.near:
            return None
        units_per_pixel = camera.world_units_per_pixel(depth, viewport_height)
        if units_per_pixel <= 0.0:
            return None
        return self.size_in_pixels * units_per_pixel / self.size_in_world


def normalize(scene: Scene, camera: CameraComponent, viewport_height: float) -> None:
    """Apply Normalize3d to every visible entity carrying it."""
    for entity in scene.query(Normalize3d):
        if not entity.is_visible():
            continue
        norm = entity.get_component(Normalize3d)
        world = entity.transform.global_pose()
        scale = norm.required_scale(camera, world.lin, viewport_height)
        if scale is None:
            continue
        entity.transform.set_global_pose(world.with_scale(scale))
        entity.transform.relocate(entity.transform.local_pose().with_scale(scale))
