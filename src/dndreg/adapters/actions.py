# src/dndreg/adapters/actions.py
from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, List, Optional

from dndreg.core.contracts import Event, HandlerId
from dndreg.core.notify import SOURCE_ADDED, SOURCE_REMOVED, TARGET_ADDED, TARGET_REMOVED

log = logging.getLogger("dndreg.adapters.actions")


class CallbackActions:
    """Forward every registry notification to ``fn(topic, handler_id)``."""

    def __init__(self, fn: Callable[[str, HandlerId], Any]):
        self.fn = fn

    def add_source(self, source_id: HandlerId) -> None:
        self.fn(SOURCE_ADDED, source_id)

    def add_target(self, target_id: HandlerId) -> None:
        self.fn(TARGET_ADDED, target_id)

    def remove_source(self, source_id: HandlerId) -> None:
        self.fn(SOURCE_REMOVED, source_id)

    def remove_target(self, target_id: HandlerId) -> None:
        self.fn(TARGET_REMOVED, target_id)


class RecordingActions(CallbackActions):
    """Keeps notifications in arrival order; with maxlen only the newest survive."""

    def __init__(self, maxlen: Optional[int] = None):
        super().__init__(self._record)
        self.maxlen = maxlen
        self._events: Deque[Event] = deque(maxlen=maxlen)

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def _record(self, topic: str, handler_id: HandlerId) -> None:
        self._events.append(Event(topic=topic, data=handler_id))

    def topics(self) -> List[str]:
        return [ev.topic for ev in self._events]

    def clear(self) -> None:
        self._events.clear()


class LoggingActions(CallbackActions):
    def __init__(self, level: str = "INFO", logger: Optional[logging.Logger] = None):
        super().__init__(self._log)
        self.level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        self.log = logger or log

    def _log(self, topic: str, handler_id: HandlerId) -> None:
        self.log.log(self.level, "%s %s", topic, handler_id)
