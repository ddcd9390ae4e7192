"""View-facing free-move handle."""

from __future__ import annotations

import numpy as np

from transform_gizmo.camera import CameraComponent
from transform_gizmo.geombase import normalize, quat_from_basis
from transform_gizmo.gizmo.components import GizmoHandle, ViewTranslateGizmo
from transform_gizmo.gizmo.interaction import TranslatePlane
from transform_gizmo.scene.entity import Entity
from transform_gizmo.scene.scene import QuerySingleError, Scene


def adjust_view_translate_gizmo(scene: Scene, camera_entity: Entity) -> None:
    """
    Turn the free-move handle towards the camera.

    The handle's drag plane normal becomes the camera view direction and its
    orientation gets the basis (view x up, view, up), so dragging it moves
    the selection in screen space.
    """
    try:
        handle_entity = scene.single(ViewTranslateGizmo, GizmoHandle)
    except QuerySingleError:
        return
    camera = camera_entity.get_component(CameraComponent)
    if camera is None:
        return

    direction = camera.forward()
    up = camera.up()
    right = normalize(np.cross(direction, up))
    if right is None:
        return

    handle = handle_entity.get_component(GizmoHandle)
    handle.interaction = TranslatePlane(np.zeros(3), current_normal=direction)

    rotation = quat_from_basis(right, direction, up)
    transform = handle_entity.transform
    transform.set_global_pose(transform.global_pose().with_rotation(rotation))
