from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol, Sequence, Union, runtime_checkable

__all__ = [
    "Role",
    "HandlerId",
    "TypeTag",
    "TargetType",
    "Event",
    "DragSource",
    "DropTarget",
    "RegistryActions",
    "BaseDragSource",
    "BaseDropTarget",
    "SOURCE_CAPABILITIES",
    "TARGET_CAPABILITIES",
]


class Role(enum.Enum):
    SOURCE = "S"
    TARGET = "T"

    @property
    def prefix(self) -> str:
        return self.value


# --------- Primitive / aliases ---------
HandlerId = str
TypeTag = Union[str, enum.Enum]
TargetType = Union[TypeTag, Sequence[TypeTag]]

SOURCE_CAPABILITIES = ("can_drag", "begin_drag", "end_drag")
TARGET_CAPABILITIES = ("can_drop", "hover", "drop")


@dataclass(slots=True, frozen=True)
class Event:
    """Notification envelope: a topic such as ``source.added`` and the handler id."""
    topic: str
    data: Any


# --------- Handler contracts ---------
@runtime_checkable
class DragSource(Protocol):
    def can_drag(self, monitor: Any, handle: HandlerId) -> bool: ...
    def begin_drag(self, monitor: Any, handle: HandlerId) -> Any: ...
    def end_drag(self, monitor: Any, handle: HandlerId) -> None: ...


@runtime_checkable
class DropTarget(Protocol):
    def can_drop(self, monitor: Any, handle: HandlerId) -> bool: ...
    def hover(self, monitor: Any, handle: HandlerId) -> None: ...
    def drop(self, monitor: Any, handle: HandlerId) -> Any: ...


class RegistryActions(Protocol):
    """Receives registration changes one scheduling tick after they happen."""
    def add_source(self, source_id: HandlerId) -> Any: ...
    def add_target(self, target_id: HandlerId) -> Any: ...
    def remove_source(self, source_id: HandlerId) -> Any: ...
    def remove_target(self, target_id: HandlerId) -> Any: ...


# --------- Convenience bases ---------
class BaseDragSource:
    """Draggable by default; subclasses must at least implement begin_drag."""

    def can_drag(self, monitor: Any = None, handle: HandlerId | None = None) -> bool:
        return True

    def is_dragging(self, monitor: Any, handle: HandlerId) -> bool:
        return handle == monitor.get_source_id()

    def begin_drag(self, monitor: Any = None, handle: HandlerId | None = None) -> Any:
        raise NotImplementedError(f"{type(self).__name__} must implement begin_drag()")

    def end_drag(self, monitor: Any = None, handle: HandlerId | None = None) -> None:
        pass


class BaseDropTarget:
    def can_drop(self, monitor: Any = None, handle: HandlerId | None = None) -> bool:
        return True

    def hover(self, monitor: Any = None, handle: HandlerId | None = None) -> None:
        pass

    def drop(self, monitor: Any = None, handle: HandlerId | None = None) -> Any:
        return None
