# src/dndreg/core/store.py
from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

from dndreg.core.contracts import HandlerId, Role, TargetType
from dndreg.core.errors import UnknownHandlerError
from dndreg.core.ids import HandlerIdAllocator, role_of


class HandlerStore:
    """id -> type and id -> handler, always holding the same keys."""

    def __init__(self, allocator: Optional[HandlerIdAllocator] = None):
        self.allocator = allocator or HandlerIdAllocator()
        self._types: Dict[HandlerId, TargetType] = {}
        self._handlers: Dict[HandlerId, Any] = {}
        self._counts: Dict[Role, int] = {r: 0 for r in Role}

    def add(self, role: Role, type_: TargetType, handler: Any) -> HandlerId:
        handler_id = self.allocator.next_id(role)
        self._types[handler_id] = type_
        self._handlers[handler_id] = handler
        self._counts[role] += 1
        return handler_id

    def get(self, handler_id: HandlerId) -> Any:
        return self._handlers.get(handler_id)

    def get_type(self, handler_id: HandlerId) -> Optional[TargetType]:
        return self._types.get(handler_id)

    def remove(self, handler_id: HandlerId) -> None:
        if handler_id not in self._handlers:
            raise UnknownHandlerError(f"No handler registered under {handler_id!r}.")
        del self._handlers[handler_id]
        del self._types[handler_id]
        self._counts[role_of(handler_id)] -= 1

    def contains(self, handler: Any) -> bool:
        return any(h is handler for h in self._handlers.values())

    def ids(self, role: Optional[Role] = None) -> Iterator[HandlerId]:
        for handler_id in list(self._handlers):
            if role is None or role_of(handler_id) is role:
                yield handler_id

    def count(self, role: Optional[Role] = None) -> int:
        if role is None:
            return len(self._handlers)
        return self._counts[role]

    def __contains__(self, handler_id: object) -> bool:
        return handler_id in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
