"""Keyboard shortcuts for the gizmo settings."""

from __future__ import annotations

from transform_gizmo import log
from transform_gizmo.gizmo.settings import TransformGizmoSettings

# key -> settings flag it toggles
SHORTCUTS = {
    "r": "allow_rotation",
    "h": "enabled",
}


def handle_key(settings: TransformGizmoSettings, key: str) -> bool:
    """Apply the shortcut bound to `key`. Returns True if the key was consumed."""
    if not settings.enable_shortcuts:
        return False
    flag = SHORTCUTS.get(key.lower()) if key else None
    if flag is None:
        return False
    value = not getattr(settings, flag)
    setattr(settings, flag, value)
    log.debug(f"[shortcuts] {flag} = {value}")
    return True
