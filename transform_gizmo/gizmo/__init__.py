"""
Transform gizmo: handles, drag interaction, placement and the frame driver.

The usual entry point is TransformGizmoPlugin; the individual steps are
exported for hosts that run their own frame loop.
"""

from transform_gizmo.gizmo.interaction import (
    InteractionKind,
    TranslateAxis,
    TranslatePlane,
    RotateAxis,
    ScaleAxis,
)
from transform_gizmo.gizmo.shapes import (
    HandleShape,
    SphereShape,
    CylinderShape,
    TorusShape,
    QuadShape,
)
from transform_gizmo.gizmo.components import (
    GIZMO_RENDER_LAYER,
    TransformGizmo,
    GizmoHandle,
    HandleMaterial,
    InitialTransform,
    PickSelection,
    GizmoTransformable,
    RotationGizmo,
    ViewTranslateGizmo,
    InternalGizmoCamera,
)
from transform_gizmo.gizmo.events import (
    PointerEvent,
    DragStart,
    Drag,
    DragEnd,
    Move,
    Out,
    TransformGizmoEvent,
    EventChannel,
)
from transform_gizmo.gizmo.settings import TransformGizmoSettings, GizmoSystemsEnabled
from transform_gizmo.gizmo.normalization import Normalize3d, normalize
from transform_gizmo.gizmo.build import build_gizmo, build_gizmo_camera
from transform_gizmo.gizmo.placement import (
    selected_entities,
    selection_centroid,
    place_gizmo,
    propagate_gizmo_elements,
)
from transform_gizmo.gizmo.drag import (
    on_drag_start,
    on_drag,
    on_drag_end,
    on_hover,
    signed_angle,
)
from transform_gizmo.gizmo.picking import GizmoPickSource, GizmoHit, GizmoPointer, pick_handle
from transform_gizmo.gizmo.view_handle import adjust_view_translate_gizmo
from transform_gizmo.gizmo.camera_mirror import gizmo_cam_copy_settings
from transform_gizmo.gizmo.settings_sync import update_gizmo_settings
from transform_gizmo.gizmo.shortcuts import SHORTCUTS, handle_key
from transform_gizmo.gizmo.plugin import TransformGizmoPlugin

__all__ = [
    "InteractionKind",
    "TranslateAxis",
    "TranslatePlane",
    "RotateAxis",
    "ScaleAxis",
    "HandleShape",
    "SphereShape",
    "CylinderShape",
    "TorusShape",
    "QuadShape",
    "GIZMO_RENDER_LAYER",
    "TransformGizmo",
    "GizmoHandle",
    "HandleMaterial",
    "InitialTransform",
    "PickSelection",
    "GizmoTransformable",
    "RotationGizmo",
    "ViewTranslateGizmo",
    "InternalGizmoCamera",
    "PointerEvent",
    "DragStart",
    "Drag",
    "DragEnd",
    "Move",
    "Out",
    "TransformGizmoEvent",
    "EventChannel",
    "TransformGizmoSettings",
    "GizmoSystemsEnabled",
    "Normalize3d",
    "normalize",
    "build_gizmo",
    "build_gizmo_camera",
    "selected_entities",
    "selection_centroid",
    "place_gizmo",
    "propagate_gizmo_elements",
    "on_drag_start",
    "on_drag",
    "on_drag_end",
    "on_hover",
    "signed_angle",
    "GizmoPickSource",
    "GizmoHit",
    "GizmoPointer",
    "pick_handle",
    "adjust_view_translate_gizmo",
    "gizmo_cam_copy_settings",
    "update_gizmo_settings",
    "SHORTCUTS",
    "handle_key",
    "TransformGizmoPlugin",
]
