# src/dndreg/core/notify.py
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Deque, Dict, Optional

from dndreg.core import log
from dndreg.core.contracts import Event, HandlerId, RegistryActions
from dndreg.core.metrics import gauge_set, inc

SOURCE_ADDED = "source.added"
TARGET_ADDED = "target.added"
SOURCE_REMOVED = "source.removed"
TARGET_REMOVED = "target.removed"

# topic -> RegistryActions method
_ACTION_FOR_TOPIC: Dict[str, str] = {
    SOURCE_ADDED: "add_source",
    TARGET_ADDED: "add_target",
    SOURCE_REMOVED: "remove_source",
    TARGET_REMOVED: "remove_target",
}


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class DeferredNotifier:
    """FIFO of registry notifications delivered after the mutating call returns.

    schedule() never calls into ``actions``. Delivery happens either on the
    next turn of the asyncio loop (the running one, or the one passed in),
    or when flush() is called by code that has no loop.
    """

    def __init__(self, actions: RegistryActions, loop: Optional[asyncio.AbstractEventLoop] = None,
                 name: str = "notify", logger: Optional[logging.Logger] = None):
        self.actions = actions
        self.name = name
        self.l = logger or log.get(name)
        self._loop = loop
        self._q: Deque[Event] = deque()
        self._drain_scheduled = False
        self._flushing = False

    @property
    def pending(self) -> int:
        return len(self._q)

    def schedule(self, topic: str, handler_id: HandlerId) -> None:
        if topic not in _ACTION_FOR_TOPIC:
            raise ValueError(f"Unknown notification topic: {topic!r}")
        self._q.append(Event(topic=topic, data=handler_id))
        gauge_set("notify_pending", float(len(self._q)), notifier=self.name)

        loop = self._loop or _running_loop()
        if loop is not None and not self._drain_scheduled:
            self._drain_scheduled = True
            loop.call_soon(self._drain)

    def _drain(self) -> None:
        self._drain_scheduled = False
        self.flush()

    def flush(self) -> int:
        """Deliver everything queued so far, in order. Returns how many were delivered."""
        if self._flushing:
            # called from inside a dispatcher; the outer loop picks up new items
            return 0
        self._flushing = True
        n = 0
        try:
            while self._q:
                self._deliver(self._q.popleft())
                n += 1
        finally:
            self._flushing = False
            gauge_set("notify_pending", float(len(self._q)), notifier=self.name)
        return n

    def _deliver(self, ev: Event) -> None:
        fn = getattr(self.actions, _ACTION_FOR_TOPIC[ev.topic])
        try:
            fn(ev.data)
            inc("notify_dispatch_total", 1, topic=ev.topic)
        except Exception as e:
            inc("notify_error_total", 1, topic=ev.topic)
            self.l.error("dispatch error topic=%s id=%s err=%s", ev.topic, ev.data, e, exc_info=True)
