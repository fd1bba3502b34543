# src/dndreg/core/registry.py
from __future__ import annotations

import asyncio
import itertools
from typing import Any, Optional

from dndreg.core import log
from dndreg.core.contracts import HandlerId, RegistryActions, Role, TargetType, TypeTag
from dndreg.core.errors import InvalidHandlerIdError, UnknownHandlerError
from dndreg.core.ids import HandlerIdAllocator, is_source_id, is_target_id
from dndreg.core.metrics import gauge_set, inc
from dndreg.core.notify import (
    SOURCE_ADDED,
    SOURCE_REMOVED,
    TARGET_ADDED,
    TARGET_REMOVED,
    DeferredNotifier,
)
from dndreg.core.pin import NOT_PINNED, PinSlot
from dndreg.core.store import HandlerStore
from dndreg.core.validate import validate_source_contract, validate_target_contract, validate_type

# metric label for registries created without a name
_UNNAMED = itertools.count(1)


class HandlerRegistry:
    """Drag sources and drop targets keyed by role-tagged ids.

    Mutations are synchronous; the ``actions`` collaborator hears about them
    one scheduling tick later (see DeferredNotifier). Every precondition
    failure raises a RegistryError before anything is changed.
    """

    def __init__(self, actions: RegistryActions, *, loop: Optional[asyncio.AbstractEventLoop] = None,
                 allocator: Optional[HandlerIdAllocator] = None, name: Optional[str] = None):
        self.actions = actions
        self.name = name or f"registry-{next(_UNNAMED)}"
        self.l = log.get(name or "registry")
        self._store = HandlerStore(allocator)
        self._pin = PinSlot()
        self._notifier = DeferredNotifier(actions, loop=loop, name=f"{self.name}.notify",
                                          logger=log.get(f"{name or 'registry'}.notify"))

    # -------------------- registration --------------------
    def add_source(self, type_: TypeTag, source: Any) -> HandlerId:
        validate_type(type_)
        validate_source_contract(source)

        source_id = self.add_handler(Role.SOURCE, type_, source)
        self._notifier.schedule(SOURCE_ADDED, source_id)
        return source_id

    def add_target(self, type_: TargetType, target: Any) -> HandlerId:
        validate_type(type_, True)
        validate_target_contract(target)

        target_id = self.add_handler(Role.TARGET, type_, target)
        self._notifier.schedule(TARGET_ADDED, target_id)
        return target_id

    def add_handler(self, role: Role, type_: TargetType, handler: Any) -> HandlerId:
        """Store without validation or notification."""
        handler_id = self._store.add(role, type_, handler)
        self.l.debug("add %s type=%r", handler_id, type_)
        self._record(role, "registry_add_total")
        return handler_id

    def remove_source(self, source_id: HandlerId) -> None:
        if self.get_source(source_id) is None:
            raise UnknownHandlerError(f"Expected an existing source, got {source_id!r}.")
        self._remove(Role.SOURCE, source_id)
        self._notifier.schedule(SOURCE_REMOVED, source_id)

    def remove_target(self, target_id: HandlerId) -> None:
        if self.get_target(target_id) is None:
            raise UnknownHandlerError(f"Expected an existing target, got {target_id!r}.")
        self._remove(Role.TARGET, target_id)
        self._notifier.schedule(TARGET_REMOVED, target_id)

    def _remove(self, role: Role, handler_id: HandlerId) -> None:
        self._store.remove(handler_id)
        self.l.debug("remove %s", handler_id)
        self._record(role, "registry_remove_total")

    def _record(self, role: Role, counter: str) -> None:
        label = role.name.lower()
        inc(counter, 1, registry=self.name, role=label)
        gauge_set("registry_handlers", float(self._store.count(role)), registry=self.name, role=label)

    # -------------------- lookup --------------------
    def contains_handler(self, handler: Any) -> bool:
        return self._store.contains(handler)

    def get_source(self, source_id: HandlerId, include_pinned: bool = False) -> Any:
        self._expect_source_id(source_id)
        pinned = self._pin.resolve(source_id, include_pinned)
        if pinned is not NOT_PINNED:
            return pinned
        return self._store.get(source_id)

    def get_target(self, target_id: HandlerId) -> Any:
        self._expect_target_id(target_id)
        return self._store.get(target_id)

    def get_source_type(self, source_id: HandlerId) -> Optional[TypeTag]:
        self._expect_source_id(source_id)
        return self._store.get_type(source_id)

    def get_target_type(self, target_id: HandlerId) -> Optional[TargetType]:
        self._expect_target_id(target_id)
        return self._store.get_type(target_id)

    def is_source_id(self, handler_id: HandlerId) -> bool:
        return is_source_id(handler_id)

    def is_target_id(self, handler_id: HandlerId) -> bool:
        return is_target_id(handler_id)

    @staticmethod
    def _expect_source_id(handler_id: HandlerId) -> None:
        if not is_source_id(handler_id):
            raise InvalidHandlerIdError(f"Expected a valid source ID, got {handler_id!r}.")

    @staticmethod
    def _expect_target_id(handler_id: HandlerId) -> None:
        if not is_target_id(handler_id):
            raise InvalidHandlerIdError(f"Expected a valid target ID, got {handler_id!r}.")

    # -------------------- pinning --------------------
    @property
    def pinned_source_id(self) -> Optional[HandlerId]:
        return self._pin.pinned_id

    def pin_source(self, source_id: HandlerId) -> None:
        source = self.get_source(source_id)
        if source is None:
            raise UnknownHandlerError(f"Expected an existing source, got {source_id!r}.")
        self._pin.pin(source_id, source)
        self.l.debug("pin %s", source_id)

    def unpin_source(self) -> None:
        pinned = self._pin.pinned_id
        self._pin.unpin()
        self.l.debug("unpin %s", pinned)

    # -------------------- notifications --------------------
    @property
    def pending_notifications(self) -> int:
        return self._notifier.pending

    def flush_notifications(self) -> int:
        """Deliver queued notifications now; needed when no asyncio loop is running."""
        return self._notifier.flush()

    def __len__(self) -> int:
        return len(self._store)
