from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

LabelKey = Tuple[Tuple[str, str], ...]  # sorted (k, v) pairs


def _labels_key(labels: Dict[str, Any] | None) -> LabelKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


@dataclass
class _Base:
    name: str
    labels: LabelKey


class Counter(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0
        self._lock = threading.Lock()

    def inc(self, n: float = 1.0) -> None:
        with self._lock:
            self._value += n

    def value(self) -> float:
        with self._lock:
            return self._value


class Gauge(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0
        self._lock = threading.Lock()

    def set(self, v: float) -> None:
        with self._lock:
            self._value = float(v)

    def value(self) -> float:
        with self._lock:
            return self._value


class _Registry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._counters: Dict[Tuple[str, LabelKey], Counter] = {}
        self._gauges: Dict[Tuple[str, LabelKey], Gauge] = {}

    def counter(self, name: str, labels: Dict[str, Any] | None) -> Counter:
        key = (name, _labels_key(labels))
        with self._lock:
            m = self._counters.get(key)
            if m is None:
                m = self._counters[key] = Counter(name, key[1])
            return m

    def gauge(self, name: str, labels: Dict[str, Any] | None) -> Gauge:
        key = (name, _labels_key(labels))
        with self._lock:
            m = self._gauges.get(key)
            if m is None:
                m = self._gauges[key] = Gauge(name, key[1])
            return m

    def items(self):
        with self._lock:
            return list(self._counters.items()), list(self._gauges.items())

    def clear(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()


_REG = _Registry()


def inc(name: str, n: float = 1.0, **labels: Any) -> None:
    _REG.counter(name, labels).inc(n)


def gauge_set(name: str, v: float, **labels: Any) -> None:
    _REG.gauge(name, labels).set(v)


def counter_value(name: str, **labels: Any) -> float:
    return _REG.counter(name, labels).value()


def gauge_value(name: str, **labels: Any) -> float:
    return _REG.gauge(name, labels).value()


def reset() -> None:
    """Drop every metric. Tests only."""
    _REG.clear()


# ---------------- Exporter (log every N seconds) ----------------

class _Exporter(threading.Thread):
    def __init__(self, interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None):
        super().__init__(name="metrics-exporter", daemon=True)
        self.interval = float(interval_sec)
        self.json_mode = bool(json_mode)
        self.log = logger or logging.getLogger("metrics")
        self._stop_evt = threading.Event()

    def run(self) -> None:
        while not self._stop_evt.wait(max(0.5, self.interval)):
            self._emit_snapshot()

    def stop(self, timeout: float = 1.0) -> None:
        self._stop_evt.set()
        self.join(timeout=timeout)

    def _emit_snapshot(self) -> None:
        counters, gauges = _REG.items()
        if self.json_mode:
            for (_, labels), m in counters:
                self.log.info({"type": "counter", "name": m.name, "labels": dict(labels), "value": m.value()})
            for (_, labels), m in gauges:
                self.log.info({"type": "gauge", "name": m.name, "labels": dict(labels), "value": m.value()})
        else:
            for (_, labels), m in counters:
                self.log.info(f"[ctr] {m.name} {dict(labels)} value={m.value():.0f}")
            for (_, labels), m in gauges:
                self.log.info(f"[gauge] {m.name} {dict(labels)} value={m.value():.3f}")


_EXPORTER: Optional[_Exporter] = None


def start_exporter(interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        return
    _EXPORTER = _Exporter(interval_sec=interval_sec, json_mode=json_mode, logger=logger)
    _EXPORTER.start()


def stop_exporter(timeout: float = 1.0) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        _EXPORTER.stop(timeout=timeout)
        _EXPORTER = None


def snapshot_all() -> dict:
    """Plain-dict view of every metric (for tests)."""
    counters, gauges = _REG.items()
    out = {"counters": [], "gauges": []}
    for (name, labels), m in counters:
        out["counters"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in gauges:
        out["gauges"].append({"name": name, "labels": dict(labels), "value": m.value()})
    return out


def force_emit(logger: Optional[logging.Logger] = None, json_mode: bool = False) -> None:
    """Emit a snapshot right now instead of waiting for the exporter."""
    _Exporter(interval_sec=0, json_mode=json_mode, logger=logger or logging.getLogger("metrics"))._emit_snapshot()
