"""
3D scene with a parented pair of boxes.

The red box has two orange children; moving or rotating the parent carries
them along, and each child can also be selected and moved on its own.
"""

from __future__ import annotations

from viewer import Viewer, spawn_box

from transform_gizmo import (
    CameraComponent,
    Entity,
    GizmoPickSource,
    Scene,
    TransformGizmoPlugin,
)
from transform_gizmo.geombase import Pose3


def build_scene() -> tuple[Scene, Entity]:
    scene = Scene()

    spawn_box(scene, "ground", Pose3.translation(0.0, 0.0, -0.5),
              (5.0, 5.0, 0.02), (0.3, 0.5, 0.3))

    cube = spawn_box(scene, "cube", Pose3.translation(-1.0, -1.0, 0.0),
                     (1.0, 1.0, 1.0), (1.0, 0.27, 0.0))
    spawn_box(scene, "child_a", Pose3.translation(1.0, 0.0, 0.0),
              (1.0, 1.0, 1.0), (1.0, 0.65, 0.0), parent=cube)
    spawn_box(scene, "child_b", Pose3.translation(1.0, 0.0, 1.0),
              (1.0, 1.0, 1.0), (1.0, 0.65, 0.0), parent=cube)

    camera_entity = Entity(pose=Pose3.looking_at([-2.0, -5.0, 2.5], [0.0, 0.0, 0.0]), name="camera")
    camera_entity.add_component(CameraComponent(fov_y_degrees=45.0, aspect=16 / 9))
    camera_entity.add_component(GizmoPickSource())
    scene.add(camera_entity)

    return scene, camera_entity


def main():
    scene, camera_entity = build_scene()
    plugin = TransformGizmoPlugin()
    plugin.build(scene)
    Viewer(scene, camera_entity, plugin, title="transform gizmo: parenting").run()


if __name__ == "__main__":
    main()
