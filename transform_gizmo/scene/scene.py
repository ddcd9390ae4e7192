"""Scene - entity registry, component queries and transform propagation."""

from __future__ import annotations

from typing import Iterable

from transform_gizmo.scene.entity import Entity


class QuerySingleError(LookupError):
    """A query expected exactly one entity."""


class NoEntitiesError(QuerySingleError):
    pass


class MultipleEntitiesError(QuerySingleError):
    pass


class Scene:
    def __init__(self):
        self._entities: list[Entity] = []

    @property
    def entities(self) -> list[Entity]:
        return list(self._entities)

    def add(self, entity: Entity) -> Entity:
        """Register entity and its whole subtree."""
        for node in entity.iter_subtree():
            if node not in self._entities:
                self._entities.append(node)
        return entity

    def spawn(self, *components, **entity_kwargs) -> Entity:
        entity = Entity(**entity_kwargs)
        for component in components:
            entity.add_component(component)
        return self.add(entity)

    def remove(self, entity: Entity) -> None:
        for node in list(entity.iter_subtree()):
            if node in self._entities:
                self._entities.remove(node)
        entity.set_parent(None)

    def find(self, name: str) -> Entity | None:
        for entity in self._entities:
            if entity.name == name:
                return entity
        return None

    def query(self, *component_types: type) -> list[Entity]:
        """Entities carrying all of the given component types."""
        return [
            entity for entity in self._entities
            if all(entity.has_component(t) for t in component_types)
        ]

    def single(self, *component_types: type) -> Entity:
        """The only entity carrying the component types; raises QuerySingleError otherwise."""
        found = self.query(*component_types)
        names = ", ".join(t.__name__ for t in component_types)
        if not found:
            raise NoEntitiesError(f"no entity with ({names})")
        if len(found) > 1:
            raise MultipleEntitiesError(f"{len(found)} entities with ({names})")
        return found[0]

    def roots(self) -> Iterable[Entity]:
        return [entity for entity in self._entities if entity.parent is None]

    def propagate_transforms(self) -> None:
        """Recompute every world pose from the local hierarchy."""
        for root in self.roots():
            root.transform.propagate()
