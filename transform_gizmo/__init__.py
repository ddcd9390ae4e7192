"""transform_gizmo - on-screen translate/rotate widget for a 3D scene."""

from transform_gizmo.camera import CameraComponent
from transform_gizmo.gizmo import (
    GizmoPickSource,
    GizmoTransformable,
    PickSelection,
    TransformGizmoEvent,
    TransformGizmoPlugin,
    TransformGizmoSettings,
)
from transform_gizmo.scene import Entity, Scene, Visibility

__version__ = "0.1.0"

__all__ = [
    "CameraComponent",
    "GizmoPickSource",
    "GizmoTransformable",
    "PickSelection",
    "TransformGizmoEvent",
    "TransformGizmoPlugin",
    "TransformGizmoSettings",
    "Entity",
    "Scene",
    "Visibility",
]
