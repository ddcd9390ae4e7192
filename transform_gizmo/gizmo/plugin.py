"""
TransformGizmoPlugin - wires the gizmo into a host scene and frame loop.

Host side:
    plugin = TransformGizmoPlugin()
    plugin.build(scene)
    camera_entity.add_component(GizmoPickSource(viewport_rect=(0, 0, w, h)))

    # window callbacks
    plugin.cursor_moved(x, y)
    plugin.pointer_pressed() / plugin.pointer_released()
    plugin.key_pressed("r")

    # once per frame, after the host has written its transforms
    plugin.update()

    for event in plugin.events.drain():
        ...
"""

from __future__ import annotations

from dataclasses import replace

import numpy as np

from transform_gizmo import log
from transform_gizmo.camera import CameraComponent
from transform_gizmo.geombase import IDENTITY_QUAT
from transform_gizmo.gizmo.build import build_gizmo, build_gizmo_camera
from transform_gizmo.gizmo.camera_mirror import gizmo_cam_copy_settings
from transform_gizmo.gizmo.components import TransformGizmo
from transform_gizmo.gizmo.drag import on_drag, on_drag_end, on_drag_start, on_hover
from transform_gizmo.gizmo.events import (
    Drag,
    DragEnd,
    DragStart,
    EventChannel,
    Move,
    Out,
    PointerEvent,
    TransformGizmoEvent,
)
from transform_gizmo.gizmo.normalization import Normalize3d, normalize
from transform_gizmo.gizmo.picking import GizmoPickSource, GizmoPointer
from transform_gizmo.gizmo.placement import place_gizmo, propagate_gizmo_elements
from transform_gizmo.gizmo.settings import GizmoSystemsEnabled, TransformGizmoSettings
from transform_gizmo.gizmo.settings_sync import update_gizmo_settings
from transform_gizmo.gizmo.shortcuts import handle_key
from transform_gizmo.gizmo.view_handle import adjust_view_translate_gizmo
from transform_gizmo.scene.entity import Entity, Visibility
from transform_gizmo.scene.scene import QuerySingleError, Scene


class TransformGizmoPlugin:
    """
    Owns the gizmo settings and runs the per-frame steps in order:

    1. settings propagation (only when the settings changed)
    2. scene transform propagation
    3. placement at the selection centroid
    4. screen-space normalization
    5. handle propagation from the gizmo pose written in 3
    6. view-facing handle update
    7. gizmo camera mirror

    While `settings.enabled` is false none of them run and the gizmo stays
    hidden; pending settings changes are applied on the first enabled frame.
    Pointer events are handled synchronously as they arrive.
    """

    def __init__(
        self,
        alignment_rotation: np.ndarray | None = None,
        enable_shortcuts: bool = True,
        normalize: Normalize3d | None = None,
    ):
        self.settings = TransformGizmoSettings(
            alignment_rotation=IDENTITY_QUAT if alignment_rotation is None else alignment_rotation,
            enable_shortcuts=enable_shortcuts,
        )
        self.systems_enabled = GizmoSystemsEnabled(self.settings.enabled)
        self.normalize = normalize if normalize is not None else Normalize3d()
        self.events: EventChannel[TransformGizmoEvent] = EventChannel()

        self.scene: Scene | None = None
        self.gizmo: Entity | None = None
        self.gizmo_camera: Entity | None = None
        self._pointer: GizmoPointer | None = None
        self._applied_revision: int | None = None

    def build(self, scene: Scene) -> None:
        self.scene = scene
        self.gizmo = build_gizmo(scene, self.normalize)
        self.gizmo_camera = build_gizmo_camera(scene)
        self._pointer = GizmoPointer(scene)
        log.info("[TransformGizmoPlugin] Gizmo built")

    def _require_scene(self) -> Scene:
        if self.scene is None:
            raise RuntimeError("TransformGizmoPlugin.build() was not called")
        return self.scene

    # ============================================================
    # Frame
    # ============================================================

    def update(self, viewport_height: float | None = None) -> None:
        """Run one frame. Viewport height defaults to the pick source's viewport."""
        scene = self._require_scene()
        self.systems_enabled.value = self.settings.enabled

        if not self.systems_enabled.value:
            self._hide_gizmo(scene)
            return

        self._applied_revision = update_gizmo_settings(scene, self.settings, self._applied_revision)
        scene.propagate_transforms()
        place_gizmo(scene, self.settings)

        camera_entity = self._camera_entity(scene)
        if camera_entity is not None:
            if viewport_height is None:
                viewport_height = camera_entity.get_component(GizmoPickSource).viewport_rect[3]
            normalize(scene, camera_entity.get_component(CameraComponent), viewport_height)

        propagate_gizmo_elements(scene)

        if camera_entity is not None:
            adjust_view_translate_gizmo(scene, camera_entity)
        gizmo_cam_copy_settings(scene)

    def _hide_gizmo(self, scene: Scene) -> None:
        for entity in scene.query(TransformGizmo):
            entity.visibility = Visibility.HIDDEN

    @staticmethod
    def _camera_entity(scene: Scene) -> Entity | None:
        try:
            return scene.single(GizmoPickSource, CameraComponent)
        except QuerySingleError:
            return None

    # ============================================================
    # Pointer events
    # ============================================================

    def handle_event(self, event: PointerEvent) -> int:
        """Dispatch one pointer event. Returns the number of entity transforms written."""
        scene = self._require_scene()

        # A drag always ends, even when the gizmo was disabled meanwhile.
        if isinstance(event, DragEnd):
            on_drag_end(scene, event, self.events)
            return 0
        if not self.settings.enabled:
            return 0

        if isinstance(event, DragStart):
            on_drag_start(scene, event)
        elif isinstance(event, Drag):
            if event.ray is None:
                camera_entity = self._camera_entity(scene)
                if camera_entity is None:
                    return 0
                event = replace(event, ray=camera_entity.get_component(GizmoPickSource).get_ray())
            return on_drag(scene, event, self.events)
        elif isinstance(event, (Move, Out)):
            on_hover(event)
        else:
            raise TypeError(f"Unknown pointer event: {event!r}")
        return 0

    def _dispatch(self, events: list[PointerEvent]) -> None:
        for event in events:
            self.handle_event(event)

    def _pick_source(self) -> GizmoPickSource | None:
        camera_entity = self._camera_entity(self._require_scene())
        if camera_entity is None:
            return None
        return camera_entity.get_component(GizmoPickSource)

    # ============================================================
    # Raw input
    # ============================================================

    def cursor_moved(self, x: float | None, y: float | None) -> None:
        """Cursor position in window pixels; None when it left the window."""
        source = self._pick_source()
        if source is None:
            return
        source.update_cursor(x, y)
        self._dispatch(self._pointer.on_mouse_move(source.get_ray()))

    def pointer_pressed(self) -> bool:
        """Returns True when a handle was grabbed."""
        if not self.settings.enabled:
            return False
        source = self._pick_source()
        if source is None:
            return False
        events = self._pointer.on_mouse_down(source.get_ray())
        self._dispatch(events)
        return bool(events)

    def pointer_released(self) -> bool:
        """Returns True when a drag was ended."""
        if self._pointer is None:
            return False
        events = self._pointer.on_mouse_up()
        self._dispatch(events)
        return bool(events)

    def key_pressed(self, key: str) -> bool:
        return handle_key(self.settings, key)

    @property
    def is_dragging(self) -> bool:
        return self._pointer is not None and self._pointer.is_dragging
