import asyncio
import logging

import pytest

from dndreg.adapters.actions import CallbackActions, RecordingActions
from dndreg.core.contracts import Event
from dndreg.core.metrics import counter_value
from dndreg.core.notify import DeferredNotifier
from dndreg.core.registry import HandlerRegistry
from handlers import NormalSource, NormalTarget


@pytest.mark.asyncio
async def test_add_then_remove_notifies_in_order_after_sync_code():
    actions = RecordingActions()
    registry = HandlerRegistry(actions)

    sid = registry.add_source("drag", NormalSource())
    registry.remove_source(sid)
    # nothing delivered while we still hold control
    assert actions.events == []
    assert registry.pending_notifications == 2

    await asyncio.sleep(0)
    assert actions.events == [Event("source.added", sid), Event("source.removed", sid)]
    assert registry.pending_notifications == 0


@pytest.mark.asyncio
async def test_targets_notify_with_their_own_topics():
    actions = RecordingActions()
    registry = HandlerRegistry(actions)
    tid = registry.add_target(["a", "b"], NormalTarget())
    sid = registry.add_source("a", NormalSource())
    registry.remove_target(tid)

    await asyncio.sleep(0)
    assert actions.topics() == ["target.added", "source.added", "target.removed"]
    assert [ev.data for ev in actions.events] == [tid, sid, tid]


@pytest.mark.asyncio
async def test_store_is_visible_before_dispatcher_runs():
    seen = []
    registry = None

    def on_event(topic, handler_id):
        # dispatcher observes the registry one tick later
        seen.append((topic, registry.get_source(handler_id)))

    registry = HandlerRegistry(CallbackActions(on_event))
    src = NormalSource()
    sid = registry.add_source("drag", src)
    assert registry.get_source(sid) is src
    assert seen == []
    await asyncio.sleep(0)
    assert seen == [("source.added", src)]


def test_without_loop_notifications_wait_for_flush():
    actions = RecordingActions()
    registry = HandlerRegistry(actions)
    sid = registry.add_source("drag", NormalSource())
    registry.remove_source(sid)

    assert actions.events == []
    assert registry.flush_notifications() == 2
    assert actions.topics() == ["source.added", "source.removed"]
    assert registry.flush_notifications() == 0


def test_injected_loop_drains_on_next_turn():
    loop = asyncio.new_event_loop()
    try:
        actions = RecordingActions()
        registry = HandlerRegistry(actions, loop=loop)
        sid = registry.add_source("drag", NormalSource())
        assert actions.events == []
        loop.run_until_complete(asyncio.sleep(0))
        assert actions.events == [Event("source.added", sid)]
    finally:
        loop.close()


def test_dispatcher_registering_more_handlers_keeps_order():
    log = []
    registry = None

    def on_event(topic, handler_id):
        log.append((topic, handler_id))
        if topic == "source.added":
            registry.add_target("drag", NormalTarget())

    registry = HandlerRegistry(CallbackActions(on_event))
    sid = registry.add_source("drag", NormalSource())
    assert registry.flush_notifications() == 2
    assert log[0] == ("source.added", sid)
    assert log[1][0] == "target.added"


def test_dispatcher_errors_are_logged_and_delivery_continues(caplog):
    class Flaky(RecordingActions):
        def add_source(self, source_id):
            raise RuntimeError("boom")

    actions = Flaky()
    notifier = DeferredNotifier(actions, name="notify.flaky")
    before = counter_value("notify_error_total", topic="source.added")

    caplog.set_level(logging.ERROR, logger="dndreg.notify.flaky")
    notifier.schedule("source.added", "S0")
    notifier.schedule("target.added", "T1")
    assert notifier.flush() == 2

    assert actions.events == [Event("target.added", "T1")]
    assert counter_value("notify_error_total", topic="source.added") == before + 1
    assert any("dispatch error" in r.getMessage() for r in caplog.records)


def test_unknown_topic_is_rejected():
    notifier = DeferredNotifier(RecordingActions())
    with pytest.raises(ValueError):
        notifier.schedule("source.moved", "S0")
    assert notifier.pending == 0
