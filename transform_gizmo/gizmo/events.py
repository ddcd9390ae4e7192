"""
Pointer events consumed by the gizmo and the event it emits.

Pointer events carry the handle entity they target. `Drag` additionally
carries the world-space pick ray for the current cursor position; when it
is None the plugin fills it from the pick source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar, TYPE_CHECKING

from transform_gizmo import log
from transform_gizmo.geombase import Pose3, Ray3
from transform_gizmo.gizmo.interaction import InteractionKind

if TYPE_CHECKING:
    from transform_gizmo.scene.entity import Entity

E = TypeVar("E")


@dataclass
class PointerEvent:
    target: "Entity"


@dataclass
class DragStart(PointerEvent):
    pass


@dataclass
class Drag(PointerEvent):
    ray: Ray3 | None = None


@dataclass
class DragEnd(PointerEvent):
    pass


@dataclass
class Move(PointerEvent):
    """Pointer is over the target handle."""


@dataclass
class Out(PointerEvent):
    """Pointer left the target handle."""


@dataclass
class TransformGizmoEvent:
    """
    A transform written by the gizmo.

    During a drag one event is sent per entity per write (finished=False);
    on DragEnd one more per moved entity spans the whole drag (finished=True).
    """
    from_: Pose3
    to: Pose3
    interaction: InteractionKind
    entity: "Entity | None" = None
    finished: bool = False


@dataclass
class EventChannel(Generic[E]):
    """Queue of events plus synchronous subscribers."""
    _queue: list = field(default_factory=list)
    _subscribers: list = field(default_factory=list)

    def send(self, event: E) -> None:
        self._queue.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                log.error(e, "[EventChannel] subscriber failed")

    def subscribe(self, callback: Callable[[E], None]) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[E], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def drain(self) -> list[E]:
        """Return and forget all queued events."""
        events, self._queue = self._queue, []
        return events

    def __len__(self) -> int:
        return len(self._queue)
