"""
Startup construction of the gizmo entity, its handles and the gizmo camera.

Handle layout (gizmo-local units, before normalization):
- translation shafts of length 1.3 with cone heads at the tips
- plane quads of side 1.3 * 0.35, offset by half their size from the axes
- rotation rings of radius 1.0
- a view-facing sphere at the center
"""

from __future__ import annotations

import math

import numpy as np

from transform_gizmo.camera import CameraComponent
from transform_gizmo.geombase import Pose3, qmul, quat_from_axis_angle
from transform_gizmo.gizmo.components import (
    GIZMO_RENDER_LAYER,
    GizmoHandle,
    HandleMaterial,
    InternalGizmoCamera,
    RotationGizmo,
    TransformGizmo,
    ViewTranslateGizmo,
)
from transform_gizmo.gizmo.interaction import RotateAxis, TranslateAxis, TranslatePlane
from transform_gizmo.gizmo.normalization import Normalize3d
from transform_gizmo.gizmo.shapes import CylinderShape, QuadShape, SphereShape, TorusShape
from transform_gizmo.scene.entity import Entity, Visibility
from transform_gizmo.scene.scene import Scene

AXIS_LENGTH = 1.3
ARC_RADIUS = 1.0
PLANE_SIZE = AXIS_LENGTH * 0.35
PLANE_OFFSET = PLANE_SIZE / 2.0
SHAFT_RADIUS = 0.04
CONE_HEIGHT = 0.25
CONE_RADIUS = 0.10
RING_RADIUS = 0.04
VIEW_SPHERE_RADIUS = 0.25

# HSL hues per axis
AXIS_HUES = {"x": 0.0, "y": 120.0, "z": 240.0}
PLANE_ALPHA = 0.5

X = np.array([1.0, 0.0, 0.0])
Y = np.array([0.0, 1.0, 0.0])
Z = np.array([0.0, 0.0, 1.0])
AXES = {"x": X, "y": Y, "z": Z}

HALF_PI = math.pi / 2.0


def _rot(axis: np.ndarray, angle: float) -> np.ndarray:
    return quat_from_axis_angle(axis, angle)


# Shapes are built along local Y (cylinders, quads, rings); these rotations
# lay them onto each gizmo axis.
_SHAFT_ROTATION = {"x": _rot(Z, HALF_PI), "y": _rot(Y, HALF_PI), "z": _rot(X, HALF_PI)}
_HEAD_ROTATION = {"x": _rot(Z, -HALF_PI), "y": _rot(Y, 0.0), "z": _rot(X, HALF_PI)}
_PLANE_POSE = {
    "x": Pose3(ang=_rot(Z, -HALF_PI), lin=[0.0, PLANE_OFFSET, PLANE_OFFSET]),
    "y": Pose3(lin=[PLANE_OFFSET, 0.0, PLANE_OFFSET]),
    "z": Pose3(ang=_rot(X, HALF_PI), lin=[PLANE_OFFSET, PLANE_OFFSET, 0.0]),
}
_RING_ROTATION = {
    "x": _rot(Z, HALF_PI),
    "y": _rot(Y, 0.0),
    "z": qmul(_rot(Z, HALF_PI), _rot(X, HALF_PI)),
}


def _spawn_handle(
    scene: Scene,
    gizmo: Entity,
    name: str,
    pose: Pose3,
    handle: GizmoHandle,
    *markers,
) -> Entity:
    entity = Entity(pose=pose, name=name, parent=gizmo, layer=GIZMO_RENDER_LAYER)
    entity.add_component(handle)
    for marker in markers:
        entity.add_component(marker)
    scene.add(entity)
    return entity


def build_gizmo(scene: Scene, normalize: Normalize3d | None = None) -> Entity:
    """Spawn the gizmo with all handles. The gizmo starts hidden."""
    gizmo = Entity(name="transform_gizmo")
    gizmo.visibility = Visibility.HIDDEN
    gizmo.add_component(TransformGizmo())
    gizmo.add_component(normalize if normalize is not None else Normalize3d())
    scene.add(gizmo)

    for axis_name, axis in AXES.items():
        hue = AXIS_HUES[axis_name]

        _spawn_handle(
            scene, gizmo, f"translate_{axis_name}_shaft",
            Pose3(ang=_SHAFT_ROTATION[axis_name], lin=axis * (AXIS_LENGTH / 2.0)),
            GizmoHandle(
                interaction=TranslateAxis(axis),
                shape=CylinderShape.along_y(AXIS_LENGTH, SHAFT_RADIUS),
                material=HandleMaterial(hue),
            ),
        )
        _spawn_handle(
            scene, gizmo, f"translate_{axis_name}_head",
            Pose3(ang=_HEAD_ROTATION[axis_name], lin=axis * AXIS_LENGTH),
            GizmoHandle(
                interaction=TranslateAxis(axis),
                shape=CylinderShape.along_y(CONE_HEIGHT, CONE_RADIUS),
                material=HandleMaterial(hue),
            ),
        )
        _spawn_handle(
            scene, gizmo, f"translate_{axis_name}_plane",
            _PLANE_POSE[axis_name],
            GizmoHandle(
                interaction=TranslatePlane(axis),
                shape=QuadShape(PLANE_SIZE),
                material=HandleMaterial(hue, alpha=PLANE_ALPHA),
            ),
        )
        _spawn_handle(
            scene, gizmo, f"rotate_{axis_name}",
            Pose3(ang=_RING_ROTATION[axis_name]),
            GizmoHandle(
                interaction=RotateAxis(axis),
                shape=TorusShape(ARC_RADIUS, RING_RADIUS),
                material=HandleMaterial(hue),
            ),
            RotationGizmo(),
        )

    _spawn_handle(
        scene, gizmo, "translate_view",
        Pose3(),
        GizmoHandle(
            interaction=TranslatePlane(np.zeros(3), current_normal=Z),
            shape=SphereShape(VIEW_SPHERE_RADIUS),
            material=HandleMaterial(0.0, saturation=0.0),
        ),
        ViewTranslateGizmo(),
    )

    return gizmo


def build_gizmo_camera(scene: Scene) -> Entity:
    """Spawn the camera that draws the gizmo layer on top of the scene."""
    camera = CameraComponent(
        render_layers=frozenset({GIZMO_RENDER_LAYER}),
        clear_color=None,
        depth_clear=1.0,
    )
    entity = Entity(name="gizmo_camera", layer=GIZMO_RENDER_LAYER)
    entity.add_component(camera)
    entity.add_component(InternalGizmoCamera())
    scene.add(entity)
    return entity
