# tests/test_metrics_dump.py
import logging

from dndreg.adapters.actions import RecordingActions
from dndreg.core.metrics import counter_value, force_emit, gauge_value, snapshot_all
from dndreg.core.registry import HandlerRegistry
from handlers import NormalSource, NormalTarget


def test_registry_counts_adds_and_removes():
    reg = HandlerRegistry(RecordingActions(), name="metrics-reg")
    sids = [reg.add_source("drag", NormalSource()) for _ in range(2)]
    reg.add_target("drag", NormalTarget())
    reg.remove_source(sids[0])

    assert counter_value("registry_add_total", registry="metrics-reg", role="source") == 2
    assert counter_value("registry_remove_total", registry="metrics-reg", role="source") == 1
    assert gauge_value("registry_handlers", registry="metrics-reg", role="source") == 1
    assert gauge_value("registry_handlers", registry="metrics-reg", role="target") == 1

    before = counter_value("notify_dispatch_total", topic="source.added")
    reg.flush_notifications()
    assert counter_value("notify_dispatch_total", topic="source.added") == before + 2
    assert gauge_value("notify_pending", notifier="metrics-reg.notify") == 0


def test_force_emit_logs_snapshot(caplog):
    caplog.set_level(logging.INFO, logger="metrics")
    reg = HandlerRegistry(RecordingActions(), name="emit-reg")
    reg.add_source("drag", NormalSource())

    snap = snapshot_all()
    assert any(c["name"] == "registry_add_total" and c["labels"].get("registry") == "emit-reg"
               for c in snap["counters"])

    force_emit(logging.getLogger("metrics"))
    text = " ".join(r.getMessage() for r in caplog.records if r.name == "metrics")
    assert "registry_add_total" in text
