"""Tests for the synchronous event dispatcher."""

import logging

import pytest

from events import EventDispatcher, EventEmitter, EventTypes, HandlerFailure


class TestEventDispatcherDelivery:
    """Tests for EventDispatcher.on() and EventDispatcher.emit()."""

    def test_handlers_called_in_registration_order_with_data(self) -> None:
        dispatcher = EventDispatcher()
        calls = []

        dispatcher.on("saved", lambda data: calls.append(("h1", data)))
        dispatcher.on("saved", lambda data: calls.append(("h2", data)))
        dispatcher.emit("saved", {"id": 7})

        assert calls == [("h1", {"id": 7}), ("h2", {"id": 7})]

    def test_same_handler_registered_twice_runs_twice(self) -> None:
        dispatcher = EventDispatcher()
        calls = []

        def handler(data):
            calls.append(data)

        dispatcher.on("tick", handler)
        dispatcher.on("tick", handler)
        dispatcher.emit("tick", 1)

        assert calls == [1, 1]

    def test_emit_without_subscribers_is_noop(self) -> None:
        dispatcher = EventDispatcher()

        failures = dispatcher.emit("nobody-listens", "data")

        assert failures == []
        assert dispatcher.get_stats()["total_events"] == 0

    def test_handlers_only_receive_their_event(self) -> None:
        dispatcher = EventDispatcher()
        calls = []

        dispatcher.on("a", calls.append)
        dispatcher.emit("b", "ignored")

        assert calls == []

    def test_emitter_alias_is_dispatcher(self) -> None:
        assert EventEmitter is EventDispatcher


class TestEventDispatcherFailures:
    """Tests for handler failure isolation."""

    def test_failing_handler_does_not_stop_later_handlers(self, caplog) -> None:
        dispatcher = EventDispatcher()
        calls = []

        def broken(data):
            raise RuntimeError("boom")

        dispatcher.on("evt", broken)
        dispatcher.on("evt", calls.append)

        with caplog.at_level(logging.ERROR, logger="events.event_bus"):
            failures = dispatcher.emit("evt", "payload")

        assert calls == ["payload"]
        assert len(failures) == 1
        assert isinstance(failures[0], HandlerFailure)
        assert failures[0].handler is broken
        assert str(failures[0].error) == "boom"
        assert "Error in event handler for evt" in caplog.text

    def test_failures_are_counted_in_stats(self) -> None:
        dispatcher = EventDispatcher()

        def broken(data):
            raise ValueError("bad")

        dispatcher.on("evt", broken)
        dispatcher.emit("evt")
        dispatcher.emit("evt")

        stats = dispatcher.get_stats()
        assert stats["failure_count"] == 2
        assert stats["event_counts"] == {"evt": 2}

    def test_failure_to_dict(self) -> None:
        dispatcher = EventDispatcher()

        def broken(data):
            raise KeyError("k")

        dispatcher.on("evt", broken)
        failure = dispatcher.emit("evt")[0]

        assert failure.to_dict()["error_type"] == "KeyError"
        assert failure.to_dict()["event"] == "evt"


class TestEventDispatcherRegistration:
    """Tests for wildcard handlers, off() and listener counts."""

    def test_wildcard_handler_runs_after_specific_handlers(self) -> None:
        dispatcher = EventDispatcher()
        calls = []

        dispatcher.on_all(lambda name, data: calls.append(("*", name, data)))
        dispatcher.on("evt", lambda data: calls.append(("evt", data)))
        dispatcher.emit("evt", 3)

        assert calls == [("evt", 3), ("*", "evt", 3)]

    def test_off_removes_one_registration(self) -> None:
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.on("evt", calls.append)
        dispatcher.on("evt", calls.append)

        assert dispatcher.off("evt", calls.append) is True
        dispatcher.emit("evt", "x")

        assert calls == ["x"]
        assert dispatcher.listener_count("evt") == 1

    def test_off_unknown_handler_returns_false(self) -> None:
        dispatcher = EventDispatcher()

        assert dispatcher.off("evt", print) is False

    def test_handler_registered_during_emit_is_not_called_for_that_emit(self) -> None:
        dispatcher = EventDispatcher()
        calls = []

        def registering(data):
            dispatcher.on("evt", lambda d: calls.append("late"))
            calls.append("first")

        dispatcher.on("evt", registering)
        dispatcher.emit("evt")

        assert calls == ["first"]


@pytest.mark.parametrize(
    "name,value",
    [
        ("READY", "ready"),
        ("RESOURCE_LOADED", "resource-loaded"),
        ("BEFORE_TEARDOWN", "before-teardown"),
        ("UNCAUGHT_ERROR", "uncaught-error"),
        ("UNHANDLED_ASYNC_FAILURE", "unhandled-async-failure"),
    ],
)
def test_lifecycle_event_names(name: str, value: str) -> None:
    assert getattr(EventTypes, name) == value
