"""
Gizmo placement.

Runs once per frame after the scene's world poses are up to date:
- place_gizmo puts the gizmo at the centroid of the selection, oriented by
  the alignment rotation, and hides it when nothing is selected
- propagate_gizmo_elements recomputes handle world poses from the gizmo
  pose written this frame
"""

from __future__ import annotations

import numpy as np

from transform_gizmo import log
from transform_gizmo.gizmo.components import (
    GizmoHandle,
    GizmoTransformable,
    PickSelection,
    TransformGizmo,
)
from transform_gizmo.gizmo.settings import TransformGizmoSettings
from transform_gizmo.scene.entity import Entity, Visibility
from transform_gizmo.scene.scene import QuerySingleError, Scene


def selected_entities(scene: Scene) -> list[Entity]:
    """Transformable entities whose selection flag is set."""
    return [
        entity for entity in scene.query(GizmoTransformable, PickSelection)
        if entity.get_component(PickSelection).is_selected
    ]


def selection_centroid(scene: Scene) -> np.ndarray | None:
    """Mean world translation of the selection, None for an empty selection."""
    positions = [e.transform.global_pose().lin for e in selected_entities(scene)]
    if not positions:
        return None
    return np.mean(positions, axis=0)


def place_gizmo(scene: Scene, settings: TransformGizmoSettings) -> bool:
    """Returns False when the frame's placement was skipped."""
    try:
        gizmo = scene.single(TransformGizmo)
    except QuerySingleError as e:
        log.error(f"[place_gizmo] Number of gizmos is != 1: {e}")
        return False

    centroid = selection_centroid(scene)
    if centroid is None:
        gizmo.visibility = Visibility.HIDDEN
        return True

    world = gizmo.transform.global_pose()
    placed = world.with_translation(centroid).with_rotation(settings.alignment_rotation)
    gizmo.transform.set_global_pose(placed)
    gizmo.transform.relocate(
        gizmo.transform.local_pose()
        .with_translation(centroid)
        .with_rotation(settings.alignment_rotation)
    )
    gizmo.visibility = Visibility.INHERITED
    return True


def propagate_gizmo_elements(scene: Scene) -> None:
    """Handle world pose = gizmo world pose * handle local pose."""
    try:
        gizmo = scene.single(TransformGizmo)
    except QuerySingleError:
        return
    gizmo_pose = gizmo.transform.global_pose()
    for child in gizmo.children:
        if child.has_component(GizmoHandle):
            child.transform.set_global_pose(gizmo_pose * child.transform.local_pose())
