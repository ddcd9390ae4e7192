"""
Interaction kinds - what dragging a handle does.

Every kind keeps the immutable gizmo-local `original_*` vector it was built
with and the `current_*` vector used by the drag math, which is the
original rotated by the settings' alignment rotation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

import numpy as np

from transform_gizmo.geombase import qrot


def _vec3(value) -> np.ndarray:
    v = np.array(value, dtype=float)
    if v.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {v.shape}")
    v.flags.writeable = False
    return v


@dataclass(frozen=True, eq=False)
class TranslateAxis:
    """Move along a single axis."""
    original_axis: np.ndarray
    current_axis: np.ndarray = None

    def __post_init__(self):
        object.__setattr__(self, "original_axis", _vec3(self.original_axis))
        current = self.original_axis if self.current_axis is None else self.current_axis
        object.__setattr__(self, "current_axis", _vec3(current))

    def realigned(self, rotation: np.ndarray) -> "TranslateAxis":
        return replace(self, current_axis=qrot(rotation, self.original_axis))


@dataclass(frozen=True, eq=False)
class TranslatePlane:
    """Move within the plane with the given normal."""
    original_normal: np.ndarray
    current_normal: np.ndarray = None

    def __post_init__(self):
        object.__setattr__(self, "original_normal", _vec3(self.original_normal))
        current = self.original_normal if self.current_normal is None else self.current_normal
        object.__setattr__(self, "current_normal", _vec3(current))

    def realigned(self, rotation: np.ndarray) -> "TranslatePlane":
        return replace(self, current_normal=qrot(rotation, self.original_normal))


@dataclass(frozen=True, eq=False)
class RotateAxis:
    """Rotate about an axis through the gizmo origin."""
    original_axis: np.ndarray
    current_axis: np.ndarray = None

    def __post_init__(self):
        object.__setattr__(self, "original_axis", _vec3(self.original_axis))
        current = self.original_axis if self.current_axis is None else self.current_axis
        object.__setattr__(self, "current_axis", _vec3(current))

    def realigned(self, rotation: np.ndarray) -> "RotateAxis":
        return replace(self, current_axis=qrot(rotation, self.original_axis))


@dataclass(frozen=True, eq=False)
class ScaleAxis:
    """Reserved. Carried and realigned like the others but dragging it does nothing."""
    original_axis: np.ndarray
    current_axis: np.ndarray = None

    def __post_init__(self):
        object.__setattr__(self, "original_axis", _vec3(self.original_axis))
        current = self.original_axis if self.current_axis is None else self.current_axis
        object.__setattr__(self, "current_axis", _vec3(current))

    def realigned(self, rotation: np.ndarray) -> "ScaleAxis":
        return replace(self, current_axis=qrot(rotation, self.original_axis))


InteractionKind = Union[TranslateAxis, TranslatePlane, RotateAxis, ScaleAxis]
