"""Components attached to scene entities by the gizmo and its host."""

from __future__ import annotations

import colorsys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from transform_gizmo.geombase import Pose3
from transform_gizmo.gizmo.interaction import InteractionKind
from transform_gizmo.gizmo.shapes import HandleShape

if TYPE_CHECKING:
    from transform_gizmo.scene.entity import Entity


# Render layer reserved for gizmo handles and the gizmo camera.
GIZMO_RENDER_LAYER = 12


@dataclass
class TransformGizmo:
    """
    State of the single gizmo entity.

    Attributes:
        current_interaction: Interaction of the handle being dragged, if any.
        drag_start: Anchor captured on the first drag sample. A world point
            for translation, a unit direction from the gizmo origin for rotation.
        initial_transform: Gizmo world pose when the drag started.
    """
    current_interaction: InteractionKind | None = None
    drag_start: np.ndarray | None = None
    initial_transform: Pose3 | None = None
    entity: "Entity | None" = field(default=None, repr=False)

    @property
    def is_dragging(self) -> bool:
        return self.current_interaction is not None

    def reset(self) -> None:
        self.current_interaction = None
        self.drag_start = None
        self.initial_transform = None


@dataclass
class HandleMaterial:
    """HSL color of a handle with a hover lightness."""
    hue: float
    saturation: float = 0.8
    lightness: float = 0.55
    hover_lightness: float = 0.7
    alpha: float = 1.0
    current_lightness: float | None = None

    def __post_init__(self):
        if self.current_lightness is None:
            self.current_lightness = self.lightness

    @property
    def hovered(self) -> bool:
        return self.current_lightness == self.hover_lightness

    def highlight(self) -> None:
        self.current_lightness = self.hover_lightness

    def unhighlight(self) -> None:
        self.current_lightness = self.lightness

    def rgba(self) -> tuple[float, float, float, float]:
        r, g, b = colorsys.hls_to_rgb(self.hue / 360.0, self.current_lightness, self.saturation)
        return (r, g, b, self.alpha)


@dataclass
class GizmoHandle:
    """One pickable part of the gizmo, bound to one interaction kind."""
    interaction: InteractionKind
    shape: HandleShape
    material: HandleMaterial
    entity: "Entity | None" = field(default=None, repr=False)


@dataclass
class InitialTransform:
    """World pose of a selected entity at drag start. Lives for one drag session."""
    transform: Pose3


@dataclass
class PickSelection:
    """Host-owned selection flag."""
    is_selected: bool = False


class GizmoTransformable:
    """Marks entities the gizmo is allowed to move."""


class RotationGizmo:
    """Marks rotation handles (hidden when rotation is disallowed)."""


class ViewTranslateGizmo:
    """Marks the free-move handle that always faces the camera."""


@dataclass
class InternalGizmoCamera:
    """
    Marks the camera that draws the gizmo layer.

    Keeps the snapshots of the primary camera that were last copied, for
    change detection.
    """
    last_pose: Pose3 | None = None
    last_settings: tuple | None = None
    last_projection: tuple | None = None
    entity: "Entity | None" = field(default=None, repr=False)

