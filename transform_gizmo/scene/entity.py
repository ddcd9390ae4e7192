"""Entity - named node with a transform and a component store."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Iterator, Type, TypeVar

from transform_gizmo.geombase import Pose3
from transform_gizmo.scene.transform import Transform3

C = TypeVar("C")


class Visibility(Enum):
    INHERITED = auto()
    HIDDEN = auto()
    VISIBLE = auto()


class Entity:
    """
    Scene node.

    Components are plain objects keyed by their type; a component with an
    `entity` attribute gets it pointed back at its owner when added.
    """

    def __init__(
        self,
        pose: Pose3 | None = None,
        name: str = "entity",
        parent: "Entity | None" = None,
        layer: int = 0,
    ):
        self.name = name
        self.transform = Transform3(pose)
        self.transform.entity = self
        self.visibility = Visibility.INHERITED
        self.layer = layer
        self._components: dict[type, Any] = {}
        if parent is not None:
            self.set_parent(parent)

    # --- Hierarchy ---

    @property
    def parent(self) -> "Entity | None":
        parent_tf = self.transform.parent
        return parent_tf.entity if parent_tf is not None else None

    @property
    def children(self) -> list["Entity"]:
        return [tf.entity for tf in self.transform.children if tf.entity is not None]

    def set_parent(self, parent: "Entity | None") -> None:
        self.transform.set_parent(parent.transform if parent is not None else None)

    def iter_subtree(self) -> Iterator["Entity"]:
        yield self
        for child in self.children:
            yield from child.iter_subtree()

    # --- Visibility ---

    def is_visible(self) -> bool:
        """Resolve INHERITED against the parent chain (roots default to visible)."""
        if self.visibility == Visibility.HIDDEN:
            return False
        if self.visibility == Visibility.VISIBLE:
            return True
        parent = self.parent
        return parent.is_visible() if parent is not None else True

    # --- Components ---

    def add_component(self, component: Any) -> Any:
        self._components[type(component)] = component
        if hasattr(component, "entity"):
            component.entity = self
        return component

    def get_component(self, component_type: Type[C]) -> C | None:
        component = self._components.get(component_type)
        if component is not None:
            return component
        for value in self._components.values():
            if isinstance(value, component_type):
                return value
        return None

    def has_component(self, component_type: type) -> bool:
        return self.get_component(component_type) is not None

    def remove_component(self, component_type: Type[C]) -> C | None:
        component = self.get_component(component_type)
        if component is None:
            return None
        del self._components[type(component)]
        if hasattr(component, "entity"):
            component.entity = None
        return component

    @property
    def components(self) -> list[Any]:
        return list(self._components.values())

    def __repr__(self):
        return f"Entity({self.name!r})"
