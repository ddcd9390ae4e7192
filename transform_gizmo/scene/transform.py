"""Transform3 - local pose with a cached world pose and parent/child links.

The world pose is a cache: it reflects the hierarchy as of the last
propagation pass (Scene.propagate_transforms) or an explicit
set_global_pose() call. Writing the local pose does not refresh it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from transform_gizmo.geombase import Pose3

if TYPE_CHECKING:
    from transform_gizmo.scene.entity import Entity


class Transform3:
    def __init__(self, pose: Pose3 | None = None):
        self._local: Pose3 = pose.copy() if pose is not None else Pose3.identity()
        self._global: Pose3 = self._local.copy()
        self._parent: Transform3 | None = None
        self._children: list[Transform3] = []
        self.entity: "Entity | None" = None
        # Incremented on every local write.
        self.version: int = 0

    # --- Hierarchy ---

    @property
    def parent(self) -> "Transform3 | None":
        return self._parent

    @property
    def children(self) -> list["Transform3"]:
        return list(self._children)

    def add_child(self, child: "Transform3") -> None:
        child.set_parent(self)

    def set_parent(self, parent: "Transform3 | None") -> None:
        """Reparent keeping the local pose."""
        if self._parent is parent:
            return
        if self._parent is not None:
            self._parent._children.remove(self)
        self._parent = parent
        if parent is not None:
            parent._children.append(self)

    # --- Poses ---

    def local_pose(self) -> Pose3:
        return self._local

    def global_pose(self) -> Pose3:
        return self._global

    def relocate(self, pose: Pose3) -> None:
        """Write the local pose."""
        self._local = pose.copy()
        self.version += 1

    def relocate_global(self, pose: Pose3) -> None:
        """Write the local pose that puts this transform at `pose` in world space."""
        if self._parent is None:
            self.relocate(pose)
        else:
            parent_inv = np.linalg.inv(self._parent.global_pose().as_matrix())
            self.relocate(Pose3.from_matrix(parent_inv @ pose.as_matrix()))

    def set_global_pose(self, pose: Pose3) -> None:
        """Overwrite the cached world pose, bypassing propagation."""
        self._global = pose.copy()

    def propagate(self) -> None:
        """Recompute world poses of this transform and its subtree."""
        if self._parent is None:
            self._global = self._local.copy()
        else:
            self._global = self._parent._global * self._local
        for child in self._children:
            child.propagate()

    def __repr__(self):
        name = self.entity.name if self.entity is not None else "?"
        return f"Transform3({name}, local={self._local})"
