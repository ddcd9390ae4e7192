"""
Settings propagation.

Pushes TransformGizmoSettings into the handles: every handle interaction
except the view-facing one is realigned with `alignment_rotation`, and the
rotation rings follow `allow_rotation`. Runs only when the settings
revision differs from the one applied last.
"""

from __future__ import annotations

from transform_gizmo.gizmo.components import GizmoHandle, RotationGizmo, ViewTranslateGizmo
from transform_gizmo.gizmo.settings import TransformGizmoSettings
from transform_gizmo.scene.entity import Visibility
from transform_gizmo.scene.scene import Scene


def update_gizmo_settings(
    scene: Scene,
    settings: TransformGizmoSettings,
    applied_revision: int | None = None,
) -> int:
    """Returns the revision now applied; pass it back on the next call."""
    if applied_revision == settings.revision:
        return applied_revision

    rotation = settings.alignment_rotation
    for entity in scene.query(GizmoHandle):
        if entity.has_component(ViewTranslateGizmo):
            continue
        handle = entity.get_component(GizmoHandle)
        handle.interaction = handle.interaction.realigned(rotation)

    ring_visibility = Visibility.INHERITED if settings.allow_rotation else Visibility.HIDDEN
    for entity in scene.query(RotationGizmo):
        entity.visibility = ring_visibility

    return settings.revision
