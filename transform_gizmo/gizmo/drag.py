"""
Drag interaction.

A drag session runs DragStart -> Drag* -> DragEnd on one handle:

- DragStart snapshots the world pose of every selected entity into an
  InitialTransform component and records the gizmo pose and the handle's
  interaction on the TransformGizmo.
- The first Drag only captures the anchor (TransformGizmo.drag_start).
  Every later Drag computes the total movement since that anchor and
  applies it to the InitialTransform snapshots, so the result of a frame
  depends only on the drag-start state and the current cursor ray.
- DragEnd removes the snapshots and clears the gizmo's drag state.

Lookups that fail (handle without a gizmo parent, no ray, drag not
started) skip the event silently.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from transform_gizmo.geombase import (
    Plane,
    Pose3,
    Ray3,
    normalize,
    quat_from_axis_angle,
    ray_plane_intersect,
)
from transform_gizmo.gizmo.components import (
    GizmoHandle,
    GizmoTransformable,
    InitialTransform,
    PickSelection,
    TransformGizmo,
)
from transform_gizmo.gizmo.events import (
    Drag,
    DragEnd,
    DragStart,
    EventChannel,
    Move,
    Out,
    TransformGizmoEvent,
)
from transform_gizmo.gizmo.interaction import (
    InteractionKind,
    RotateAxis,
    ScaleAxis,
    TranslateAxis,
    TranslatePlane,
)
from transform_gizmo.gizmo.placement import selected_entities
from transform_gizmo.scene.entity import Entity
from transform_gizmo.scene.scene import Scene

# Maps a drag-start world pose to the pose for the current frame.
PoseUpdate = Callable[[Pose3], Pose3]


def _gizmo_of(handle_entity: Entity | None) -> TransformGizmo | None:
    if handle_entity is None or not handle_entity.has_component(GizmoHandle):
        return None
    parent = handle_entity.parent
    if parent is None:
        return None
    return parent.get_component(TransformGizmo)


def signed_angle(from_dir: np.ndarray, to_dir: np.ndarray, axis: np.ndarray) -> float:
    """Angle from `from_dir` to `to_dir` about `axis`, in (-pi, pi]."""
    det = float(np.dot(axis, np.cross(from_dir, to_dir)))
    dot = float(np.dot(from_dir, to_dir))
    return float(np.arctan2(det, dot))


# ============================================================
# Per-kind drag math
# ============================================================

def _drag_translate_axis(
    gizmo: TransformGizmo, axis: np.ndarray, ray: Ray3, origin: np.ndarray
) -> PoseUpdate | None:
    # Plane containing the axis that faces the viewer as much as possible.
    vertical = normalize(np.cross(ray.direction, axis))
    if vertical is None:
        return None
    plane_normal = normalize(np.cross(axis, vertical))
    if plane_normal is None:
        return None

    hit = ray_plane_intersect(ray, Plane(origin, plane_normal))
    if hit is None:
        return None
    cursor_vector = hit - origin

    if gizmo.drag_start is None:
        axis_dir = normalize(axis)
        gizmo.drag_start = np.dot(cursor_vector, axis_dir) * axis_dir + origin
        return None

    anchor_vec = gizmo.drag_start - origin
    anchor_dir = normalize(anchor_vec)
    if anchor_dir is None:
        # Grabbed exactly at the origin: the anchor has no direction of its own.
        anchor_dir = normalize(axis)
    new_handle_vec = np.dot(cursor_vector, anchor_dir) * anchor_dir
    translation = new_handle_vec - anchor_vec

    def update(initial: Pose3) -> Pose3:
        return initial.with_translation(initial.lin + translation)

    return update


def _drag_translate_plane(
    gizmo: TransformGizmo, normal: np.ndarray, ray: Ray3, origin: np.ndarray
) -> PoseUpdate | None:
    hit = ray_plane_intersect(ray, Plane(origin, normal))
    if hit is None:
        return None

    if gizmo.drag_start is None:
        gizmo.drag_start = hit
        return None

    translation = hit - gizmo.drag_start

    def update(initial: Pose3) -> Pose3:
        return initial.with_translation(initial.lin + translation)

    return update


def _drag_rotate_axis(
    gizmo: TransformGizmo, axis: np.ndarray, ray: Ray3, origin: np.ndarray
) -> PoseUpdate | None:
    axis = normalize(axis)
    if axis is None:
        return None
    hit = ray_plane_intersect(ray, Plane(origin, axis))
    if hit is None:
        return None
    cursor_dir = normalize(hit - origin)
    if cursor_dir is None:
        return None

    if gizmo.drag_start is None:
        gizmo.drag_start = cursor_dir
        return None

    angle = signed_angle(gizmo.drag_start, cursor_dir, axis)
    rotation = quat_from_axis_angle(axis, angle)

    def update(initial: Pose3) -> Pose3:
        return initial.rotate_around(origin, rotation)

    return update


def _pose_update(
    gizmo: TransformGizmo, interaction: InteractionKind, ray: Ray3, origin: np.ndarray
) -> PoseUpdate | None:
    if isinstance(interaction, TranslateAxis):
        return _drag_translate_axis(gizmo, interaction.current_axis, ray, origin)
    elif isinstance(interaction, TranslatePlane):
        return _drag_translate_plane(gizmo, interaction.current_normal, ray, origin)
    elif isinstance(interaction, RotateAxis):
        return _drag_rotate_axis(gizmo, interaction.current_axis, ray, origin)
    elif isinstance(interaction, ScaleAxis):
        # Scaling has no behavior yet.
        return None
    raise TypeError(f"Unknown interaction kind: {interaction!r}")


# ============================================================
# Applying poses
# ============================================================

def _parent_world_matrix(entity: Entity) -> np.ndarray:
    parent = entity.parent
    if parent is None:
        return np.eye(4)
    return parent.transform.global_pose().as_matrix()


def _world_to_local(entity: Entity, world: Pose3) -> Pose3:
    inverse_parent = np.linalg.inv(_parent_world_matrix(entity))
    return Pose3.from_matrix(inverse_parent @ world.as_matrix())


def _current_world(entity: Entity) -> Pose3:
    """World pose implied by the current local pose (the cache may be a frame old)."""
    return Pose3.from_matrix(_parent_world_matrix(entity) @ entity.transform.local_pose().as_matrix())


def _apply(
    scene: Scene,
    update: PoseUpdate,
    interaction: InteractionKind,
    events: EventChannel | None,
) -> int:
    """Write updated local poses of the dragged entities. Returns the number of writes."""
    written = 0
    for entity in selected_entities(scene):
        initial = entity.get_component(InitialTransform)
        if initial is None:
            continue
        new_world = update(initial.transform)
        new_local = _world_to_local(entity, new_world)
        if new_local == entity.transform.local_pose():
            continue
        entity.transform.relocate(new_local)
        written += 1
        if events is not None:
            events.send(TransformGizmoEvent(
                from_=initial.transform,
                to=new_world,
                interaction=interaction,
                entity=entity,
            ))
    return written


# ============================================================
# Event handlers
# ============================================================

def on_drag_start(scene: Scene, event: DragStart) -> None:
    for entity in selected_entities(scene):
        entity.add_component(InitialTransform(transform=entity.transform.global_pose().copy()))

    gizmo = _gizmo_of(event.target)
    if gizmo is None:
        return

    handle = event.target.get_component(GizmoHandle)
    gizmo.initial_transform = gizmo.entity.transform.global_pose().copy()
    gizmo.current_interaction = handle.interaction
    gizmo.drag_start = None


def on_drag(scene: Scene, event: Drag, events: EventChannel | None = None) -> int:
    """Handle one drag sample. Returns the number of entity transforms written."""
    if event.ray is None:
        return 0

    gizmo = _gizmo_of(event.target)
    if gizmo is None:
        return 0

    interaction = gizmo.current_interaction
    if interaction is None or gizmo.initial_transform is None:
        return 0

    origin = gizmo.initial_transform.lin
    update = _pose_update(gizmo, interaction, event.ray, origin)
    if update is None:
        return 0
    return _apply(scene, update, interaction, events)


def on_drag_end(scene: Scene, event: DragEnd, events: EventChannel | None = None) -> None:
    interaction = None
    for gizmo_entity in scene.query(TransformGizmo):
        gizmo = gizmo_entity.get_component(TransformGizmo)
        interaction = interaction or gizmo.current_interaction
        gizmo.reset()

    for entity in scene.query(InitialTransform):
        initial = entity.remove_component(InitialTransform)
        if events is None or interaction is None:
            continue
        final = _current_world(entity)
        if not final.approx_equal(initial.transform):
            events.send(TransformGizmoEvent(
                from_=initial.transform,
                to=final,
                interaction=interaction,
                entity=entity,
                finished=True,
            ))


def on_hover(event: Move | Out) -> None:
    """Hover feedback: lighten the handle under the pointer."""
    if event.target is None:
        return
    handle = event.target.get_component(GizmoHandle)
    if handle is None:
        return
    if isinstance(event, Move):
        handle.material.highlight()
    else:
        handle.material.unhighlight()
