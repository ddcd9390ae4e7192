"""
Flat scene seen through an orthographic camera.

Two sprites lie in the XZ plane (the screen plane of a camera looking
along +Y); one world unit is one pixel at the default window height.
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

HEIGHT = 720


def build_scene() -> tuple[Scene, Entity]:
    scene = Scene()

    spawn_box(scene, "bar", Pose3.translation(0.0, 0.0, -100.0),
              (500.0, 1.0, 50.0), (1.0, 0.27, 0.0))
    spawn_box(scene, "square", Pose3.translation(0.0, 0.0, 25.0),
              (200.0, 1.0, 200.0), (1.0, 0.65, 0.0))

    camera_entity = Entity(pose=Pose3.translation(0.0, -500.0, 0.0), name="camera")
    camera_entity.add_component(CameraComponent(
        projection_type="orthographic",
        ortho_size=HEIGHT / 2,
        near=0.1,
        far=1000.0,
        aspect=16 / 9,
    ))
    camera_entity.add_component(GizmoPickSource())
    scene.add(camera_entity)

    return scene, camera_entity


def main():
    scene, camera_entity = build_scene()
    plugin = TransformGizmoPlugin()
    plugin.build(scene)
    Viewer(scene, camera_entity, plugin, title="transform gizmo: 2d",
           height=HEIGHT, orbit=False).run()


if __name__ == "__main__":
    main()
