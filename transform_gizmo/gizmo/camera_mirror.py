"""
Gizmo camera mirror.

The gizmo layer is drawn by its own camera. Each frame it takes over the
pose and projection of the primary camera (the one carrying the pick
source), drawing GIZMO_CAMERA_ORDER_OFFSET later so handles land on top.
Its render layers and clear settings are its own and are never copied.
"""

from __future__ import annotations

from transform_gizmo import log
from transform_gizmo.camera import CameraComponent
from transform_gizmo.gizmo.components import InternalGizmoCamera
from transform_gizmo.gizmo.picking import GizmoPickSource
from transform_gizmo.scene.scene import QuerySingleError, Scene

GIZMO_CAMERA_ORDER_OFFSET = 10


def gizmo_cam_copy_settings(scene: Scene) -> bool:
    """Returns True when anything was copied."""
    try:
        main_entity = scene.single(GizmoPickSource, CameraComponent)
    except QuerySingleError as e:
        log.error(f"[gizmo_cam_copy_settings] No GizmoPickSource found! Insert one on the main camera: {e}")
        return False
    try:
        gizmo_entity = scene.single(InternalGizmoCamera, CameraComponent)
    except QuerySingleError as e:
        log.error(f"[gizmo_cam_copy_settings] Gizmo camera is missing: {e}")
        return False

    main_camera = main_entity.get_component(CameraComponent)
    gizmo_camera = gizmo_entity.get_component(CameraComponent)
    mirror = gizmo_entity.get_component(InternalGizmoCamera)
    changed = False

    main_pose = main_entity.transform.global_pose()
    if mirror.last_pose is None or mirror.last_pose != main_pose:
        gizmo_entity.transform.relocate(main_pose.copy())
        gizmo_entity.transform.set_global_pose(main_pose.copy())
        mirror.last_pose = main_pose.copy()
        changed = True

    settings = main_camera.settings_key()
    if mirror.last_settings != settings:
        gizmo_camera.order = main_camera.order + GIZMO_CAMERA_ORDER_OFFSET
        gizmo_camera.is_active = main_camera.is_active
        mirror.last_settings = settings
        changed = True

    projection = main_camera.projection_key()
    if mirror.last_projection != projection:
        gizmo_camera.copy_projection_from(main_camera)
        mirror.last_projection = projection
        changed = True

    return changed
