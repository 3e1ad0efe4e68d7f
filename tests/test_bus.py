import logging

from companion.core.bus import DIAGNOSTIC_CAPACITY, EventBus


def test_faulty_handler_does_not_block_others(bus, recorder, caplog):
    def broken(payload):
        raise RuntimeError("boom")

    bus.subscribe("ping", broken)
    bus.subscribe("ping", recorder)

    with caplog.at_level(logging.ERROR, logger="companion.core.bus"):
        bus.publish("ping", 1)

    assert recorder.calls == [1]
    assert "Event handler error" in caplog.text


def test_publish_never_raises_to_publisher(bus):
    bus.subscribe("ping", lambda payload: 1 / 0)
    bus.publish("ping")


def test_disposer_is_idempotent(bus, recorder):
    dispose = bus.subscribe("ping", recorder)
    bus.publish("ping", "a")
    dispose()
    dispose()
    bus.publish("ping", "b")
    bus.publish("ping", "c")
    assert recorder.calls == ["a"]


def test_disposer_only_removes_its_own_registration(bus, recorder):
    other = []
    dispose = bus.subscribe("ping", recorder)
    bus.subscribe("ping", other.append)
    dispose()
    bus.publish("ping", 1)
    assert recorder.calls == []
    assert other == [1]


def test_unsubscribe_unknown_is_noop(bus, recorder):
    bus.unsubscribe("never", recorder)
    bus.subscribe("ping", recorder)
    bus.unsubscribe("ping", print)
    assert bus.has_subscribers("ping")


def test_empty_event_entry_is_removed(bus, recorder):
    bus.subscribe("ping", recorder)
    assert bus.has_subscribers("ping")
    bus.unsubscribe("ping", recorder)
    assert not bus.has_subscribers("ping")


def test_subscribe_once_fires_with_first_payload_only(bus, recorder):
    bus.subscribe_once("ping", recorder)
    bus.publish("ping", "p1")
    bus.publish("ping", "p2")
    assert recorder.calls == ["p1"]
    assert not bus.has_subscribers("ping")


def test_subscribe_once_disposer_before_publish(bus, recorder):
    dispose = bus.subscribe_once("ping", recorder)
    dispose()
    bus.publish("ping", "p1")
    assert recorder.calls == []


def test_subscribe_once_handler_error_is_logged(bus, caplog):
    def broken(payload):
        raise ValueError("nope")

    bus.subscribe_once("ping", broken)
    with caplog.at_level(logging.ERROR, logger="companion.core.bus"):
        bus.publish("ping")
    assert "One-shot handler failed" in caplog.text
    assert not bus.has_subscribers("ping")


def test_handlers_added_during_dispatch_wait_for_next_publish(bus, recorder):
    def late_subscriber(payload):
        bus.subscribe("ping", recorder)

    bus.subscribe("ping", late_subscriber)
    bus.publish("ping", 1)
    assert recorder.calls == []
    bus.publish("ping", 2)
    assert recorder.calls == [2]


def test_diagnostics_off_by_default(bus):
    bus.publish("ping", 1)
    assert bus.get_diagnostics() == []
    assert not bus.diagnostics_enabled


def test_diagnostic_buffer_keeps_most_recent_entries():
    bus = EventBus(diagnostics=True)
    for i in range(500):
        bus.publish(f"event-{i}", i)

    records = bus.get_diagnostics()
    assert len(records) == DIAGNOSTIC_CAPACITY == 300
    assert [r["payload"] for r in records] == list(range(200, 500))
    assert records[0]["event"] == "event-200"
    assert isinstance(records[0]["timestamp"], int)


def test_diagnostics_recorded_without_subscribers():
    bus = EventBus(diagnostics=True, capacity=5)
    bus.publish("lonely", {"x": 1})
    assert bus.get_diagnostics()[0]["event"] == "lonely"


def test_toggling_diagnostics_keeps_buffer():
    bus = EventBus(capacity=10)
    bus.set_diagnostics(True)
    bus.publish("a")
    bus.set_diagnostics(False)
    bus.publish("b")
    assert [r["event"] for r in bus.get_diagnostics()] == ["a"]
    bus.set_diagnostics(True)
    bus.publish("c")
    assert [r["event"] for r in bus.get_diagnostics()] == ["a", "c"]


def test_get_diagnostics_returns_copy():
    bus = EventBus(diagnostics=True)
    bus.publish("a", 1)
    snapshot = bus.get_diagnostics()
    snapshot[0]["event"] = "tampered"
    snapshot.clear()
    assert bus.get_diagnostics()[0]["event"] == "a"
