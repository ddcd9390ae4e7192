"""
Настройки гизмо (gizmo settings).

The settings object is passed explicitly to the frame steps. Every
attribute assignment bumps `revision`; the settings-propagation step
compares it with the revision it last applied and does nothing when they
match.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from transform_gizmo import log
from transform_gizmo.geombase import IDENTITY_QUAT, qnormalize


@dataclass(eq=False)
class TransformGizmoSettings:
    """
    Process-wide gizmo settings.

    - enabled: run the per-frame steps and handle pointer events
    - alignment_rotation: quaternion (x, y, z, w) orienting the whole gizmo
    - allow_rotation: show rotation handles
    - enable_shortcuts: react to keyboard shortcuts
    """

    enabled: bool = True
    alignment_rotation: np.ndarray = field(default_factory=lambda: IDENTITY_QUAT.copy())
    allow_rotation: bool = True
    enable_shortcuts: bool = True
    revision: int = 0

    def __setattr__(self, name, value):
        if name == "alignment_rotation":
            value = np.array(value, dtype=float)
            if value.shape != (4,):
                raise ValueError(f"alignment_rotation must be a quaternion (x, y, z, w), got shape {value.shape}")
            value = qnormalize(value)
            value.flags.writeable = False
        super().__setattr__(name, value)
        if name != "revision":
            super().__setattr__("revision", getattr(self, "revision", 0) + 1)

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "alignment_rotation": [float(v) for v in self.alignment_rotation],
            "allow_rotation": self.allow_rotation,
            "enable_shortcuts": self.enable_shortcuts,
        }

    @staticmethod
    def from_dict(data: dict) -> "TransformGizmoSettings":
        return TransformGizmoSettings(
            enabled=bool(data.get("enabled", True)),
            alignment_rotation=np.array(data.get("alignment_rotation", IDENTITY_QUAT), dtype=float),
            allow_rotation=bool(data.get("allow_rotation", True)),
            enable_shortcuts=bool(data.get("enable_shortcuts", True)),
        )

    def save(self, path: Path | str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @staticmethod
    def load(path: Path | str) -> "TransformGizmoSettings":
        """Load settings; a missing or unreadable file yields defaults."""
        path = Path(path)
        if not path.exists():
            return TransformGizmoSettings()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            settings = TransformGizmoSettings.from_dict(data)
        except Exception as e:
            log.error(e, f"[TransformGizmoSettings] Failed to load {path}")
            return TransformGizmoSettings()
        log.info(f"[TransformGizmoSettings] Loaded from {path}")
        return settings


@dataclass
class GizmoSystemsEnabled:
    value: bool = True
