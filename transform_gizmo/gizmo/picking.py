"""
Picking for gizmo handles.

GizmoPickSource sits on the primary camera and turns the latest cursor
position into a world ray. pick_handle raycasts the visible handles, and
GizmoPointer turns raw pointer input into the pointer events the drag
state machine consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from transform_gizmo.camera import CameraComponent
from transform_gizmo.geombase import Plane, Ray3, ray_plane_intersect
from transform_gizmo.gizmo.components import GizmoHandle
from transform_gizmo.gizmo.events import Drag, DragEnd, DragStart, Move, Out, PointerEvent
from transform_gizmo.scene.scene import Scene

if TYPE_CHECKING:
    from transform_gizmo.scene.entity import Entity


@dataclass
class GizmoPickSource:
    """
    Cursor state of the primary camera.

    Attributes:
        cursor: Last cursor position in window pixels, None when unknown.
        viewport_rect: (x, y, width, height) of the viewport in window pixels.
    """
    viewport_rect: tuple[float, float, float, float] = (0.0, 0.0, 1.0, 1.0)
    cursor: tuple[float, float] | None = None
    entity: "Entity | None" = field(default=None, repr=False)

    def update_cursor(self, x: float | None, y: float | None = None) -> None:
        """Store the cursor position. Several updates in one frame: the last wins."""
        if x is None or y is None:
            self.cursor = None
        else:
            self.cursor = (float(x), float(y))

    def set_viewport(self, x: float, y: float, width: float, height: float) -> None:
        self.viewport_rect = (float(x), float(y), float(width), float(height))

    def get_ray(self) -> Ray3 | None:
        if self.cursor is None or self.entity is None:
            return None
        camera = self.entity.get_component(CameraComponent)
        if camera is None:
            return None
        return camera.screen_point_to_ray(self.cursor[0], self.cursor[1], self.viewport_rect)

    def intersect_plane(self, plane: Plane) -> np.ndarray | None:
        ray = self.get_ray()
        if ray is None:
            return None
        return ray_plane_intersect(ray, plane)


@dataclass
class GizmoHit:
    """Result of a handle raycast."""
    entity: "Entity"
    handle: GizmoHandle
    t: float  # distance along the world ray


def pick_handle(scene: Scene, ray: Ray3) -> GizmoHit | None:
    """
    Raycast against all visible handles.

    Returns the closest hit, or None.
    """
    best_hit: GizmoHit | None = None
    origin = np.append(ray.origin, 1.0)
    direction = np.append(ray.direction, 0.0)

    for entity in scene.query(GizmoHandle):
        if not entity.is_visible():
            continue
        handle = entity.get_component(GizmoHandle)
        world = entity.transform.global_pose().as_matrix()
        try:
            to_local = np.linalg.inv(world)
        except np.linalg.LinAlgError:
            # Zero scale: nothing to hit.
            continue
        # Same t in both spaces: the direction is mapped without renormalizing.
        t = handle.shape.ray_intersect((to_local @ origin)[:3], (to_local @ direction)[:3])
        if t is not None:
            if best_hit is None or t < best_hit.t:
                best_hit = GizmoHit(entity, handle, t)

    return best_hit


class GizmoPointer:
    """
    Pointer state for gizmo handles.

    - Hover: Move when the pointer enters a handle, Out when it leaves
    - Press on a handle: DragStart
    - Movement while pressed: Drag with the current ray
    - Release: DragEnd
    """

    def __init__(self, scene: Scene):
        self._scene = scene
        self._hovered: "Entity | None" = None
        self._pressed: "Entity | None" = None

    @property
    def is_dragging(self) -> bool:
        return self._pressed is not None

    @property
    def hovered(self) -> "Entity | None":
        return self._hovered

    def on_mouse_move(self, ray: Ray3 | None) -> list[PointerEvent]:
        if self._pressed is not None:
            if ray is None:
                return []
            return [Drag(self._pressed, ray)]

        hit = pick_handle(self._scene, ray) if ray is not None else None
        new_hovered = hit.entity if hit is not None else None
        if new_hovered is self._hovered:
            return []

        events: list[PointerEvent] = []
        if self._hovered is not None:
            events.append(Out(self._hovered))
        self._hovered = new_hovered
        if new_hovered is not None:
            events.append(Move(new_hovered))
        return events

    def on_mouse_down(self, ray: Ray3 | None) -> list[PointerEvent]:
        """Empty result means no handle was hit; the host may use the click itself."""
        if ray is None or self._pressed is not None:
            return []
        hit = pick_handle(self._scene, ray)
        if hit is None:
            return []
        self._pressed = hit.entity
        return [DragStart(hit.entity)]

    def on_mouse_up(self) -> list[PointerEvent]:
        if self._pressed is None:
            return []
        target, self._pressed = self._pressed, None
        return [DragEnd(target)]
