"""Minimal scene graph the gizmo reads selection from and writes transforms to."""

from transform_gizmo.scene.transform import Transform3
from transform_gizmo.scene.entity import Entity, Visibility
from transform_gizmo.scene.scene import (
    Scene,
    QuerySingleError,
    NoEntitiesError,
    MultipleEntitiesError,
)

__all__ = [
    "Transform3",
    "Entity",
    "Visibility",
    "Scene",
    "QuerySingleError",
    "NoEntitiesError",
    "MultipleEntitiesError",
]
