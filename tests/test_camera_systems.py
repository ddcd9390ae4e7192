"""Tests for the camera-dependent steps: normalization, view-facing handle, gizmo camera mirror."""

import math

import numpy as np
import pytest

from transform_gizmo import log
from transform_gizmo.camera import CameraComponent
from transform_gizmo.geombase import Pose3, Ray3
from transform_gizmo.gizmo import (
    GIZMO_RENDER_LAYER,
    GizmoHandle,
    GizmoPickSource,
    GizmoTransformable,
    InternalGizmoCamera,
    Normalize3d,
    PickSelection,
    TransformGizmoSettings,
    TranslatePlane,
    ViewTranslateGizmo,
    adjust_view_translate_gizmo,
    build_gizmo,
    build_gizmo_camera,
    gizmo_cam_copy_settings,
    normalize,
    pick_handle,
    place_gizmo,
    propagate_gizmo_elements,
)
from transform_gizmo.scene import Entity, Scene


@pytest.fixture
def log_messages():
    messages = []
    log.set_callback(lambda level, msg: messages.append((level, msg)))
    yield messages
    log.set_callback(None)


def make_camera(scene: Scene, eye, target=(0.0, 0.0, 0.0), **camera_kwargs) -> Entity:
    entity = Entity(pose=Pose3.looking_at(np.array(eye, dtype=float), np.array(target, dtype=float)), name="camera")
    entity.add_component(CameraComponent(**camera_kwargs))
    entity.add_component(GizmoPickSource(viewport_rect=(0.0, 0.0, 600.0, 600.0)))
    scene.add(entity)
    return entity


def make_gizmo_scene(position=(0.0, 0.0, 0.0)):
    scene = Scene()
    gizmo = build_gizmo(scene)
    obj = Entity(pose=Pose3(lin=position), name="object")
    obj.add_component(GizmoTransformable())
    obj.add_component(PickSelection(is_selected=True))
    scene.add(obj)
    return scene, gizmo


def run_placement(scene: Scene):
    scene.propagate_transforms()
    place_gizmo(scene, TransformGizmoSettings())


class TestNormalization:

    def test_perspective_scale(self):
        scene, gizmo = make_gizmo_scene()
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0], fov_y_degrees=60.0)
        run_placement(scene)

        normalize(scene, camera_entity.get_component(CameraComponent), 600.0)

        units_per_pixel = 2.0 * 10.0 * math.tan(math.radians(30.0)) / 600.0
        expected = 150.0 * units_per_pixel / 1.5
        assert gizmo.transform.global_pose().scale[0] == pytest.approx(expected)
        assert gizmo.transform.local_pose().scale[0] == pytest.approx(expected)

    def test_scale_grows_with_distance(self):
        scales = []
        for distance in (5.0, 10.0, 20.0):
            scene, gizmo = make_gizmo_scene()
            camera_entity = make_camera(scene, [0.0, -distance, 0.0])
            run_placement(scene)
            normalize(scene, camera_entity.get_component(CameraComponent), 600.0)
            scales.append(gizmo.transform.global_pose().scale[0])
        assert scales[1] == pytest.approx(2.0 * scales[0])
        assert scales[2] == pytest.approx(2.0 * scales[1])

    def test_orthographic_scale(self):
        scene, gizmo = make_gizmo_scene()
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0], projection_type="orthographic", ortho_size=5.0)
        run_placement(scene)

        normalize(scene, camera_entity.get_component(CameraComponent), 500.0)

        assert gizmo.transform.global_pose().scale[0] == pytest.approx(2.0)

    def test_custom_sizes(self):
        scene = Scene()
        gizmo = build_gizmo(scene, Normalize3d(size_in_world=1.0, size_in_pixels=50.0))
        obj = Entity(name="object")
        obj.add_component(GizmoTransformable())
        obj.add_component(PickSelection(is_selected=True))
        scene.add(obj)
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0], projection_type="orthographic", ortho_size=5.0)
        run_placement(scene)

        normalize(scene, camera_entity.get_component(CameraComponent), 500.0)

        assert gizmo.transform.global_pose().scale[0] == pytest.approx(1.0)

    def test_hidden_gizmo_untouched(self):
        scene, gizmo = make_gizmo_scene()
        scene.query(PickSelection)[0].get_component(PickSelection).is_selected = False
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0])
        run_placement(scene)

        normalize(scene, camera_entity.get_component(CameraComponent), 600.0)

        assert np.allclose(gizmo.transform.global_pose().scale, 1.0)

    def test_behind_camera_untouched(self):
        scene, gizmo = make_gizmo_scene(position=(0.0, -20.0, 0.0))
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0])
        run_placement(scene)

        normalize(scene, camera_entity.get_component(CameraComponent), 600.0)

        assert np.allclose(gizmo.transform.global_pose().scale, 1.0)

    def test_picking_uses_normalized_geometry(self):
        scene, gizmo = make_gizmo_scene()
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0], projection_type="orthographic", ortho_size=5.0)
        run_placement(scene)
        propagate_gizmo_elements(scene)
        ray = Ray3([2.6, -10.0, 0.0], [0.0, 1.0, 0.0])

        # At unit scale the X arrow tip is at 1.3
        assert pick_handle(scene, ray) is None

        normalize(scene, camera_entity.get_component(CameraComponent), 500.0)
        propagate_gizmo_elements(scene)

        hit = pick_handle(scene, ray)
        assert hit is not None
        assert hit.entity.name == "translate_x_head"


class TestViewHandle:

    def test_faces_camera(self):
        scene, _ = make_gizmo_scene()
        camera_entity = make_camera(scene, [5.0, 0.0, 0.0])
        run_placement(scene)
        propagate_gizmo_elements(scene)

        adjust_view_translate_gizmo(scene, camera_entity)

        view = scene.single(ViewTranslateGizmo)
        interaction = view.get_component(GizmoHandle).interaction
        assert isinstance(interaction, TranslatePlane)
        assert np.allclose(interaction.original_normal, 0.0)
        assert np.allclose(interaction.current_normal, [-1.0, 0.0, 0.0])

        rotation = view.transform.global_pose().rotation_matrix()
        assert np.allclose(rotation[:, 0], [0.0, 1.0, 0.0])
        assert np.allclose(rotation[:, 1], [-1.0, 0.0, 0.0])
        assert np.allclose(rotation[:, 2], [0.0, 0.0, 1.0])

    def test_keeps_position_and_scale(self):
        scene, _ = make_gizmo_scene(position=(1.0, 2.0, 3.0))
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0])
        run_placement(scene)
        scene.single(ViewTranslateGizmo).transform.set_global_pose(
            Pose3(lin=[1.0, 2.0, 3.0], scale=[2.0, 2.0, 2.0]))

        adjust_view_translate_gizmo(scene, camera_entity)

        pose = scene.single(ViewTranslateGizmo).transform.global_pose()
        assert np.allclose(pose.lin, [1.0, 2.0, 3.0])
        assert np.allclose(pose.scale, 2.0)

    def test_dragging_view_handle_moves_in_screen_plane(self):
        from transform_gizmo.gizmo import Drag, DragStart, on_drag, on_drag_start

        scene, _ = make_gizmo_scene()
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0])
        run_placement(scene)
        propagate_gizmo_elements(scene)
        adjust_view_translate_gizmo(scene, camera_entity)
        handle = scene.single(ViewTranslateGizmo)
        obj = scene.find("object")

        on_drag_start(scene, DragStart(handle))
        on_drag(scene, Drag(handle, Ray3([0.0, -10.0, 0.0], [0.0, 1.0, 0.0])))
        on_drag(scene, Drag(handle, Ray3([1.0, -10.0, 2.0], [0.0, 1.0, 0.0])))

        assert np.allclose(obj.transform.local_pose().lin, [1.0, 0.0, 2.0])

    def test_no_view_handle_is_skipped(self):
        scene = Scene()
        camera_entity = make_camera(scene, [0.0, -10.0, 0.0])
        adjust_view_translate_gizmo(scene, camera_entity)


class TestCameraMirror:

    def test_copies_pose_order_and_projection(self):
        scene = Scene()
        main = make_camera(scene, [3.0, -7.0, 2.0], fov_y_degrees=45.0, aspect=1.5, near=0.5, far=50.0, order=2)
        gizmo_cam = build_gizmo_camera(scene)
        scene.propagate_transforms()

        assert gizmo_cam_copy_settings(scene)

        assert gizmo_cam.transform.global_pose() == main.transform.global_pose()
        camera = gizmo_cam.get_component(CameraComponent)
        main_camera = main.get_component(CameraComponent)
        assert camera.order == 12
        assert camera.fov_y == pytest.approx(main_camera.fov_y)
        assert camera.aspect == pytest.approx(1.5)
        assert camera.near == pytest.approx(0.5)
        assert camera.far == pytest.approx(50.0)

    def test_own_layers_and_clears_are_kept(self):
        scene = Scene()
        make_camera(scene, [0.0, -10.0, 0.0])
        gizmo_cam = build_gizmo_camera(scene)
        scene.propagate_transforms()

        gizmo_cam_copy_settings(scene)

        camera = gizmo_cam.get_component(CameraComponent)
        assert camera.render_layers == frozenset({GIZMO_RENDER_LAYER})
        assert camera.clear_color is None
        assert camera.depth_clear is not None
        assert gizmo_cam.layer == GIZMO_RENDER_LAYER

    def test_copies_only_on_change(self):
        scene = Scene()
        main = make_camera(scene, [0.0, -10.0, 0.0])
        gizmo_cam = build_gizmo_camera(scene)
        scene.propagate_transforms()

        assert gizmo_cam_copy_settings(scene)
        version = gizmo_cam.transform.version
        assert not gizmo_cam_copy_settings(scene)
        assert gizmo_cam.transform.version == version

        main.get_component(CameraComponent).fov_y = math.radians(30.0)
        assert gizmo_cam_copy_settings(scene)
        assert gizmo_cam.get_component(CameraComponent).fov_y == pytest.approx(math.radians(30.0))

        main.transform.relocate(Pose3.looking_at([0.0, -4.0, 4.0], [0.0, 0.0, 0.0]))
        scene.propagate_transforms()
        assert gizmo_cam_copy_settings(scene)
        assert gizmo_cam.transform.global_pose().approx_equal(main.transform.global_pose())

    def test_follows_activity(self):
        scene = Scene()
        main = make_camera(scene, [0.0, -10.0, 0.0])
        gizmo_cam = build_gizmo_camera(scene)
        scene.propagate_transforms()
        gizmo_cam_copy_settings(scene)

        main.get_component(CameraComponent).is_active = False
        gizmo_cam_copy_settings(scene)

        assert gizmo_cam.get_component(CameraComponent).is_active is False

    def test_missing_pick_source_is_reported(self, log_messages):
        scene = Scene()
        scene.spawn(CameraComponent(), name="camera")
        build_gizmo_camera(scene)

        assert not gizmo_cam_copy_settings(scene)
        assert any(level == log.Level.ERROR and "GizmoPickSource" in msg for level, msg in log_messages)

    def test_missing_gizmo_camera_is_reported(self, log_messages):
        scene = Scene()
        make_camera(scene, [0.0, -10.0, 0.0])

        assert not gizmo_cam_copy_settings(scene)
        assert log_messages

    def test_gizmo_camera_marker(self):
        scene = Scene()
        gizmo_cam = build_gizmo_camera(scene)
        assert gizmo_cam.has_component(InternalGizmoCamera)
