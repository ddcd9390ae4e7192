"""End-to-end tests: plugin frame pipeline driven by screen-space input."""

import numpy as np
import pytest

from transform_gizmo import (
    CameraComponent,
    Entity,
    GizmoPickSource,
    GizmoTransformable,
    PickSelection,
    Scene,
    TransformGizmoPlugin,
    Visibility,
)
from transform_gizmo.geombase import Pose3, quat_from_axis_angle
from transform_gizmo.gizmo import (
    Drag,
    DragEnd,
    DragStart,
    GizmoHandle,
    InternalGizmoCamera,
    RotationGizmo,
    TransformGizmo,
    ViewTranslateGizmo,
)

VIEWPORT = (0.0, 0.0, 600.0, 600.0)


def make_world():
    scene = Scene()
    camera_entity = Entity(pose=Pose3.looking_at([0.0, -10.0, 0.0], [0.0, 0.0, 0.0]), name="camera")
    camera_entity.add_component(CameraComponent(fov_y_degrees=60.0, aspect=1.0))
    camera_entity.add_component(GizmoPickSource(viewport_rect=VIEWPORT))
    scene.add(camera_entity)

    cube = Entity(name="cube")
    cube.add_component(GizmoTransformable())
    cube.add_component(PickSelection(is_selected=True))
    scene.add(cube)

    plugin = TransformGizmoPlugin()
    plugin.build(scene)
    return scene, plugin, camera_entity, cube


def screen_of(camera_entity: Entity, point) -> tuple[float, float]:
    camera = camera_entity.get_component(CameraComponent)
    return camera.world_to_screen(np.array(point, dtype=float), VIEWPORT)


class TestBuild:

    def test_builds_gizmo_and_camera(self):
        scene, plugin, _, _ = make_world()
        assert scene.single(TransformGizmo) is plugin.gizmo
        assert scene.single(InternalGizmoCamera) is plugin.gizmo_camera
        assert len(scene.query(GizmoHandle)) == 13
        assert len(scene.query(RotationGizmo)) == 3
        assert len(scene.query(ViewTranslateGizmo)) == 1

    def test_update_requires_build(self):
        with pytest.raises(RuntimeError):
            TransformGizmoPlugin().update()


class TestFrame:

    def test_gizmo_placed_and_scaled(self):
        scene, plugin, camera_entity, _ = make_world()
        plugin.update()

        pose = plugin.gizmo.transform.global_pose()
        assert plugin.gizmo.is_visible()
        assert np.allclose(pose.lin, 0.0)
        expected = 150.0 * (2.0 * 10.0 * np.tan(np.radians(30.0)) / 600.0) / 1.5
        assert pose.scale[0] == pytest.approx(expected)

        head = scene.find("translate_x_head")
        assert np.allclose(head.transform.global_pose().lin, [1.3 * expected, 0.0, 0.0])

        mirror = plugin.gizmo_camera.get_component(CameraComponent)
        assert mirror.order == 10
        assert plugin.gizmo_camera.transform.global_pose() == camera_entity.transform.global_pose()

    def test_alignment_from_constructor(self):
        rotation = quat_from_axis_angle([0.0, 0.0, 1.0], np.pi / 2)
        scene = Scene()
        plugin = TransformGizmoPlugin(alignment_rotation=rotation)
        plugin.build(scene)
        plugin.update(viewport_height=600.0)

        shaft = scene.find("translate_x_shaft").get_component(GizmoHandle)
        assert np.allclose(shaft.interaction.current_axis, [0.0, 1.0, 0.0])

    def test_disabled_hides_gizmo(self):
        _, plugin, _, _ = make_world()
        plugin.update()
        assert plugin.gizmo.is_visible()

        plugin.settings.enabled = False
        plugin.update()

        assert not plugin.gizmo.is_visible()
        assert plugin.systems_enabled.value is False

    def test_settings_applied_only_while_enabled(self):
        scene, plugin, _, _ = make_world()
        plugin.update()
        rings = scene.query(RotationGizmo)

        plugin.settings.enabled = False
        plugin.settings.allow_rotation = False
        plugin.update()
        assert all(ring.visibility == Visibility.INHERITED for ring in rings)

        plugin.settings.enabled = True
        plugin.update()
        assert all(ring.visibility == Visibility.HIDDEN for ring in rings)
        assert plugin.gizmo.is_visible()


class TestScreenDrag:

    def test_drag_x_arrow_by_one_unit(self):
        scene, plugin, camera_entity, cube = make_world()
        plugin.update()
        scale = plugin.gizmo.transform.global_pose().scale[0]
        tip = [1.3 * scale, 0.0, 0.0]

        plugin.cursor_moved(*screen_of(camera_entity, tip))
        head = scene.find("translate_x_head")
        assert head.get_component(GizmoHandle).material.hovered

        assert plugin.pointer_pressed()
        assert plugin.is_dragging
        plugin.cursor_moved(*screen_of(camera_entity, tip))
        plugin.cursor_moved(*screen_of(camera_entity, [tip[0] + 1.0, 0.0, 0.0]))

        assert np.allclose(cube.transform.local_pose().lin, [1.0, 0.0, 0.0], atol=1e-6)

        assert plugin.pointer_released()
        assert not plugin.is_dragging

        finished = [e for e in plugin.events.drain() if e.finished]
        assert len(finished) == 1
        assert finished[0].entity is cube

        plugin.update()
        assert np.allclose(plugin.gizmo.transform.global_pose().lin, [1.0, 0.0, 0.0], atol=1e-6)

    def test_press_outside_gizmo(self):
        _, plugin, camera_entity, _ = make_world()
        plugin.update()

        plugin.cursor_moved(5.0, 5.0)
        assert not plugin.pointer_pressed()
        assert not plugin.pointer_released()

    def test_disabled_ignores_press(self):
        _, plugin, camera_entity, _ = make_world()
        plugin.update()
        scale = plugin.gizmo.transform.global_pose().scale[0]
        plugin.cursor_moved(*screen_of(camera_entity, [1.3 * scale, 0.0, 0.0]))

        plugin.settings.enabled = False
        assert not plugin.pointer_pressed()


class TestKeys:

    def test_r_hides_rotation_rings(self):
        scene, plugin, _, _ = make_world()
        plugin.update()

        assert plugin.key_pressed("r")
        plugin.update()

        assert all(not ring.is_visible() for ring in scene.query(RotationGizmo))
        assert scene.find("translate_x_head").is_visible()

    def test_shortcuts_can_be_disabled(self):
        scene = Scene()
        plugin = TransformGizmoPlugin(enable_shortcuts=False)
        plugin.build(scene)
        assert not plugin.key_pressed("r")
        assert plugin.settings.allow_rotation


class TestHandleEvent:

    def test_unknown_event_type(self):
        _, plugin, _, _ = make_world()
        with pytest.raises(TypeError):
            plugin.handle_event(object())

    def test_drag_without_ray_uses_cursor(self):
        scene, plugin, camera_entity, cube = make_world()
        plugin.update()
        scale = plugin.gizmo.transform.global_pose().scale[0]
        tip = [1.3 * scale, 0.0, 0.0]
        head = scene.find("translate_x_head")

        source = camera_entity.get_component(GizmoPickSource)

        plugin.handle_event(DragStart(head))
        source.update_cursor(*screen_of(camera_entity, tip))
        assert plugin.handle_event(Drag(head)) == 0
        source.update_cursor(*screen_of(camera_entity, [tip[0] + 0.5, 0.0, 0.0]))

        event = Drag(head)
        assert plugin.handle_event(event) == 1
        assert event.ray is None
        assert np.allclose(cube.transform.local_pose().lin, [0.5, 0.0, 0.0], atol=1e-6)

    def test_drag_end_processed_while_disabled(self):
        scene, plugin, _, _ = make_world()
        plugin.update()
        head = scene.find("translate_x_head")
        plugin.handle_event(DragStart(head))
        assert plugin.gizmo.get_component(TransformGizmo).is_dragging

        plugin.settings.enabled = False
        plugin.handle_event(DragEnd(head))

        assert not plugin.gizmo.get_component(TransformGizmo).is_dragging
