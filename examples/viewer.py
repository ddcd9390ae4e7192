"""
Small GLFW viewer shared by the examples.

Draws boxes and the gizmo handles with fixed-function OpenGL and feeds
window input to TransformGizmoPlugin:
- left click on a handle drags it, elsewhere selects a box (shift adds)
- right drag orbits a perspective camera
- 'r' toggles rotation handles, 'h' toggles the gizmo, Esc quits
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import glfw
import numpy as np
from OpenGL import GL as gl
from OpenGL import GLU as glu

from transform_gizmo import (
    CameraComponent,
    Entity,
    GizmoPickSource,
    GizmoTransformable,
    PickSelection,
    Scene,
    TransformGizmoPlugin,
)
from transform_gizmo.geombase import Pose3, Ray3
from transform_gizmo.gizmo import (
    GIZMO_RENDER_LAYER,
    CylinderShape,
    GizmoHandle,
    InternalGizmoCamera,
    QuadShape,
    SphereShape,
    TorusShape,
)


@dataclass
class Box:
    """Axis-aligned box in entity-local space, centered on the origin."""
    size: tuple[float, float, float]
    color: tuple[float, float, float]

    def ray_intersect(self, origin: np.ndarray, direction: np.ndarray) -> float | None:
        half = np.array(self.size) * 0.5
        t_min, t_max = -math.inf, math.inf
        for i in range(3):
            if abs(direction[i]) < 1e-12:
                if abs(origin[i]) > half[i]:
                    return None
                continue
            t1 = (-half[i] - origin[i]) / direction[i]
            t2 = (half[i] - origin[i]) / direction[i]
            t_min = max(t_min, min(t1, t2))
            t_max = min(t_max, max(t1, t2))
        if t_max < max(t_min, 0.0):
            return None
        return t_min if t_min >= 0.0 else t_max


def spawn_box(
    scene: Scene,
    name: str,
    pose: Pose3,
    size,
    color,
    parent: Entity | None = None,
) -> Entity:
    entity = Entity(pose=pose, name=name, parent=parent)
    entity.add_component(Box(tuple(size), tuple(color)))
    entity.add_component(GizmoTransformable())
    entity.add_component(PickSelection())
    scene.add(entity)
    return entity


def _load_matrix(matrix: np.ndarray) -> None:
    # OpenGL expects column-major order.
    gl.glLoadMatrixd(np.asarray(matrix, dtype=np.float64).T)


def _mult_matrix(matrix: np.ndarray) -> None:
    gl.glMultMatrixd(np.asarray(matrix, dtype=np.float64).T)


class Viewer:
    def __init__(self, scene: Scene, camera_entity: Entity, plugin: TransformGizmoPlugin,
                 title: str = "transform gizmo", width: int = 1280, height: int = 720,
                 orbit: bool = True):
        self.scene = scene
        self.camera_entity = camera_entity
        self.camera = camera_entity.get_component(CameraComponent)
        self.pick_source = camera_entity.get_component(GizmoPickSource)
        self.plugin = plugin
        self.orbit = orbit

        self._orbit_target = np.zeros(3)
        eye = camera_entity.transform.local_pose().lin - self._orbit_target
        self._orbit_radius = float(np.linalg.norm(eye))
        self._orbit_yaw = math.atan2(eye[0], -eye[1])
        self._orbit_pitch = math.asin(eye[2] / max(self._orbit_radius, 1e-9))
        self._orbiting = False
        self._last_cursor: tuple[float, float] | None = None

        if not glfw.init():
            raise RuntimeError("Failed to initialize GLFW")
        self._window = glfw.create_window(width, height, title, None, None)
        if not self._window:
            glfw.terminate()
            raise RuntimeError("Failed to create GLFW window")
        glfw.make_context_current(self._window)
        glfw.swap_interval(1)

        glfw.set_cursor_pos_callback(self._window, self._on_cursor)
        glfw.set_mouse_button_callback(self._window, self._on_mouse_button)
        glfw.set_key_callback(self._window, self._on_key)
        glfw.set_window_size_callback(self._window, self._on_resize)
        self._on_resize(self._window, width, height)

        self._quadric = glu.gluNewQuadric()

    # ============================================================
    # Input
    # ============================================================

    def _on_resize(self, _win, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self.pick_source.set_viewport(0, 0, width, height)
        self.camera.set_aspect(width / height)

    def _on_cursor(self, _win, x: float, y: float) -> None:
        if self._orbiting and self._last_cursor is not None:
            dx = x - self._last_cursor[0]
            dy = y - self._last_cursor[1]
            self._orbit_yaw -= dx * 0.01
            self._orbit_pitch = float(np.clip(self._orbit_pitch + dy * 0.01, -1.5, 1.5))
            self._apply_orbit()
        self._last_cursor = (x, y)
        self.plugin.cursor_moved(x, y)

    def _on_mouse_button(self, win, button: int, action: int, mods: int) -> None:
        if button == glfw.MOUSE_BUTTON_LEFT:
            if action == glfw.PRESS:
                if not self.plugin.pointer_pressed():
                    self._select(additive=bool(mods & glfw.MOD_SHIFT))
            elif action == glfw.RELEASE:
                self.plugin.pointer_released()
        elif button == glfw.MOUSE_BUTTON_RIGHT and self.orbit:
            self._orbiting = action == glfw.PRESS

    def _on_key(self, win, key: int, scancode: int, action: int, mods: int) -> None:
        if action != glfw.PRESS:
            return
        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(win, True)
            return
        name = glfw.get_key_name(key, scancode)
        if name:
            self.plugin.key_pressed(name)

    def _apply_orbit(self) -> None:
        cp = math.cos(self._orbit_pitch)
        eye = self._orbit_target + self._orbit_radius * np.array([
            math.sin(self._orbit_yaw) * cp,
            -math.cos(self._orbit_yaw) * cp,
            math.sin(self._orbit_pitch),
        ])
        self.camera_entity.transform.relocate(Pose3.looking_at(eye, self._orbit_target))

    def _select(self, additive: bool) -> None:
        ray = self.pick_source.get_ray()
        hit = self._pick_box(ray) if ray is not None else None
        for entity in self.scene.query(PickSelection):
            selection = entity.get_component(PickSelection)
            if entity is hit:
                selection.is_selected = not selection.is_selected if additive else True
            elif not additive:
                selection.is_selected = False

    def _pick_box(self, ray: Ray3) -> Entity | None:
        best, best_t = None, math.inf
        origin = np.append(ray.origin, 1.0)
        direction = np.append(ray.direction, 0.0)
        for entity in self.scene.query(Box):
            to_local = np.linalg.inv(entity.transform.global_pose().as_matrix())
            t = entity.get_component(Box).ray_intersect(
                (to_local @ origin)[:3], (to_local @ direction)[:3])
            if t is not None and t < best_t:
                best, best_t = entity, t
        return best

    # ============================================================
    # Drawing
    # ============================================================

    def _begin_camera(self, camera: CameraComponent) -> None:
        gl.glMatrixMode(gl.GL_PROJECTION)
        _load_matrix(camera.get_projection_matrix())
        gl.glMatrixMode(gl.GL_MODELVIEW)
        _load_matrix(camera.get_view_matrix())

    def _draw_box(self, entity: Entity) -> None:
        box = entity.get_component(Box)
        selected = entity.get_component(PickSelection).is_selected
        hx, hy, hz = (s * 0.5 for s in box.size)
        faces = [
            ((1, 0, 0), [(hx, -hy, -hz), (hx, hy, -hz), (hx, hy, hz), (hx, -hy, hz)], 0.85),
            ((-1, 0, 0), [(-hx, -hy, -hz), (-hx, -hy, hz), (-hx, hy, hz), (-hx, hy, -hz)], 0.6),
            ((0, 1, 0), [(-hx, hy, -hz), (-hx, hy, hz), (hx, hy, hz), (hx, hy, -hz)], 0.7),
            ((0, -1, 0), [(-hx, -hy, -hz), (hx, -hy, -hz), (hx, -hy, hz), (-hx, -hy, hz)], 0.75),
            ((0, 0, 1), [(-hx, -hy, hz), (hx, -hy, hz), (hx, hy, hz), (-hx, hy, hz)], 1.0),
            ((0, 0, -1), [(-hx, -hy, -hz), (-hx, hy, -hz), (hx, hy, -hz), (hx, -hy, -hz)], 0.5),
        ]
        gl.glPushMatrix()
        _mult_matrix(entity.transform.global_pose().as_matrix())
        gl.glBegin(gl.GL_QUADS)
        for _normal, vertices, shade in faces:
            r, g, b = (c * shade for c in box.color)
            if selected:
                r, g, b = min(1.0, r + 0.2), min(1.0, g + 0.2), min(1.0, b + 0.2)
            gl.glColor3f(r, g, b)
            for v in vertices:
                gl.glVertex3f(*v)
        gl.glEnd()
        gl.glPopMatrix()

    def _draw_handle(self, entity: Entity) -> None:
        handle = entity.get_component(GizmoHandle)
        shape = handle.shape
        gl.glColor4f(*handle.material.rgba())
        gl.glPushMatrix()
        _mult_matrix(entity.transform.global_pose().as_matrix())

        if isinstance(shape, CylinderShape):
            length = float(np.linalg.norm(shape.end - shape.start))
            top = 0.0 if entity.name.endswith("_head") else shape.radius
            # GLU cylinders run along +Z from the origin.
            gl.glRotated(-90.0, 1.0, 0.0, 0.0)
            gl.glTranslated(0.0, 0.0, -length * 0.5)
            glu.gluCylinder(self._quadric, shape.radius, top, length, 16, 1)
        elif isinstance(shape, SphereShape):
            glu.gluSphere(self._quadric, shape.radius, 16, 12)
        elif isinstance(shape, QuadShape):
            h = shape.size * 0.5
            gl.glBegin(gl.GL_QUADS)
            for x, z in ((-h, -h), (h, -h), (h, h), (-h, h)):
                gl.glVertex3f(x, 0.0, z)
            gl.glEnd()
        elif isinstance(shape, TorusShape):
            gl.glLineWidth(3.0)
            gl.glBegin(gl.GL_LINE_LOOP)
            for i in range(64):
                a = 2.0 * math.pi * i / 64
                gl.glVertex3f(shape.major_radius * math.cos(a), 0.0, shape.major_radius * math.sin(a))
            gl.glEnd()

        gl.glPopMatrix()

    def _draw_layer(self, camera: CameraComponent, layer: int) -> None:
        if camera.clear_color is not None:
            gl.glClearColor(*camera.clear_color)
            gl.glClear(gl.GL_COLOR_BUFFER_BIT)
        if camera.depth_clear is not None:
            gl.glClearDepth(camera.depth_clear)
            gl.glClear(gl.GL_DEPTH_BUFFER_BIT)
        self._begin_camera(camera)
        for entity in self.scene.entities:
            if entity.layer != layer or not entity.is_visible():
                continue
            if entity.has_component(Box):
                self._draw_box(entity)
            elif entity.has_component(GizmoHandle):
                self._draw_handle(entity)

    def render(self) -> None:
        width, height = glfw.get_framebuffer_size(self._window)
        gl.glViewport(0, 0, width, height)
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

        cameras = sorted(self.scene.query(CameraComponent),
                         key=lambda e: e.get_component(CameraComponent).order)
        for entity in cameras:
            camera = entity.get_component(CameraComponent)
            if not camera.is_active:
                continue
            layer = GIZMO_RENDER_LAYER if entity.has_component(InternalGizmoCamera) else 0
            self._draw_layer(camera, layer)

    # ============================================================
    # Main loop
    # ============================================================

    def run(self) -> None:
        try:
            while not glfw.window_should_close(self._window):
                glfw.poll_events()
                _, height = glfw.get_window_size(self._window)
                self.plugin.update(viewport_height=height)
                for event in self.plugin.events.drain():
                    if event.finished:
                        print(f"{event.entity.name}: {event.from_.lin} -> {event.to.lin}")
                self.render()
                glfw.swap_buffers(self._window)
        finally:
            glu.gluDeleteQuadric(self._quadric)
            glfw.destroy_window(self._window)
            glfw.terminate()
