from __future__ import annotations

from typing import Any, Optional

from dndreg.core.contracts import HandlerId
from dndreg.core.errors import PinError

NOT_PINNED = object()


class PinSlot:
    """Holds at most one (source id, handler) snapshot outside the live store."""

    def __init__(self):
        self._id: Optional[HandlerId] = None
        self._handler: Any = None

    @property
    def pinned_id(self) -> Optional[HandlerId]:
        return self._id

    @property
    def held(self) -> bool:
        return self._id is not None

    def is_pinned(self, handler_id: HandlerId) -> bool:
        return self.held and handler_id == self._id

    def pin(self, handler_id: HandlerId, handler: Any) -> None:
        if self.held:
            raise PinError(f"Source {self._id} is already pinned; unpin it before pinning {handler_id}.")
        self._id = handler_id
        self._handler = handler

    def unpin(self) -> None:
        if not self.held:
            raise PinError("No source is pinned at the time.")
        self._id = None
        self._handler = None

    def resolve(self, handler_id: HandlerId, include_pinned: bool) -> Any:
        """Pinned handler for ``handler_id``, or NOT_PINNED to fall back to the store."""
        if include_pinned and self.is_pinned(handler_id):
            return self._handler
        return NOT_PINNED
