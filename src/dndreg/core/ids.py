# src/dndreg/core/ids.py
from __future__ import annotations

import itertools
from typing import Any, Dict, Iterator

from dndreg.core.contracts import HandlerId, Role
from dndreg.core.errors import InvalidHandlerIdError

_PREFIXES: Dict[str, Role] = {r.prefix: r for r in Role}


def role_of(handler_id: Any) -> Role:
    """Decode the role from the id's first character."""
    if not isinstance(handler_id, str) or not handler_id:
        raise InvalidHandlerIdError(f"Cannot parse handler ID: {handler_id!r}")
    role = _PREFIXES.get(handler_id[0])
    if role is None:
        raise InvalidHandlerIdError(f"Cannot parse handler ID: {handler_id!r}")
    return role


def is_source_id(handler_id: Any) -> bool:
    return role_of(handler_id) is Role.SOURCE


def is_target_id(handler_id: Any) -> bool:
    return role_of(handler_id) is Role.TARGET


class HandlerIdAllocator:
    """Mints ``S<n>`` / ``T<n>`` ids from one counter shared by both roles.

    Each allocator owns its sequence, so two registries never need to
    coordinate. Ids are never handed out twice by the same allocator.
    """

    def __init__(self, start: int = 0):
        self._seq: Iterator[int] = itertools.count(start)

    def next_id(self, role: Role) -> HandlerId:
        if not isinstance(role, Role):
            raise ValueError(f"Unknown role: {role!r}")
        return f"{role.prefix}{next(self._seq)}"

    role_of = staticmethod(role_of)
