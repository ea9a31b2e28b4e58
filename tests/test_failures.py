"""Tests for handler failure isolation and logging."""

from conftest import ChildPing, Ping

from eventapi import (
    Event,
    EventDispatcher,
    ExecutionTier,
    HandlerDescriptor,
    Listener,
    handler,
)


class TestFailureIsolation:
    def test_failure_does_not_propagate(self):
        """A raising handler never reaches the publisher."""
        d = EventDispatcher()

        class Faulty:
            @handler
            def explode(self, event: Ping) -> None:
                raise ValueError("bad")

        d.register(Faulty())
        d.publish(Ping(msg="x"))

    def test_other_handlers_still_run(self, recorder):
        """Same listener, later tiers and the later phase keep running."""
        d = EventDispatcher()

        class Faulty:
            @handler(tier=ExecutionTier.FIRST)
            def base_explode(self, event: Event) -> None:
                recorder("base-explode")
                raise RuntimeError("first")

            @handler(tier=ExecutionTier.FIRST)
            def base_after(self, event: Event) -> None:
                recorder("base-after")

            @handler(tier=ExecutionTier.FIRST)
            def ping_explode(self, event: Ping) -> None:
                recorder("ping-explode")
                raise KeyError("second")

            @handler(tier=ExecutionTier.LAST)
            def ping_last(self, event: Ping) -> None:
                recorder("ping-last")

        d.register(Faulty())
        d.publish(ChildPing(msg="x"))
        assert recorder.calls == [
            "base-explode",
            "base-after",
            "ping-explode",
            "ping-last",
        ]

    def test_other_listeners_still_run(self, recorder):
        """A failing listener does not starve the others."""
        d = EventDispatcher()

        class Faulty:
            @handler
            def explode(self, event: Ping) -> None:
                raise RuntimeError("boom")

        class Healthy:
            @handler
            def on_ping(self, event: Ping) -> None:
                recorder("healthy")

        d.register(Faulty(), Healthy(), Faulty())
        d.publish(Ping(msg="x"))
        assert recorder.calls == ["healthy"]

    def test_next_publish_unaffected(self, recorder):
        """A failure in one publish does not disturb the next."""
        d = EventDispatcher()

        class Flaky:
            def __init__(self) -> None:
                self.calls = 0

            @handler
            def on_ping(self, event: Ping) -> None:
                self.calls += 1
                recorder(event.msg)
                if self.calls == 1:
                    raise RuntimeError("first call fails")

        d.register(Flaky())
        d.publish(Ping(msg="one"))
        d.publish(Ping(msg="two"))
        assert recorder.calls == ["one", "two"]


class TestFailureLogging:
    def test_failure_logged_with_context(self, log_records):
        """The failure is logged at error level with handler, listener and event."""
        d = EventDispatcher()

        class Faulty:
            @handler
            def explode(self, event: Ping) -> None:
                raise RuntimeError("boom")

        d.register(Faulty())
        d.publish(Ping(msg="x"))

        errors = [r for r in log_records if r["level"].name == "ERROR"]
        assert len(errors) == 1
        message = errors[0]["message"]
        assert "Unhandled exception in event handler" in message
        assert "Faulty.explode" in message
        assert "Faulty@" in message
        assert "Ping" in message
        assert errors[0]["exception"].type is RuntimeError

    def test_silent_by_default(self, log_records):
        """With logging disabled nothing is emitted."""
        from loguru import logger

        logger.disable("eventapi")
        d = EventDispatcher()

        class Faulty:
            @handler
            def explode(self, event: Ping) -> None:
                raise RuntimeError("boom")

        d.register(Faulty())
        d.publish(Ping(msg="x"))
        assert log_records == []

    def test_excluded_handler_logged_at_debug(self, log_records):
        """Malformed handlers are reported at debug level."""

        class Sloppy:
            @handler
            def no_event(self) -> None: ...

        EventDispatcher().register(Sloppy())
        assert any(
            r["level"].name == "DEBUG" and "Excluding handler" in r["message"]
            for r in log_records
        )


class TestRegistrationFailures:
    def test_failing_handler_hook_does_not_block_others(self, recorder):
        """A listener whose event_handlers() raises never stops the rest."""
        d = EventDispatcher()

        class Broken(Listener):
            def event_handlers(self) -> list[HandlerDescriptor]:
                raise RuntimeError("boom")

        class Healthy:
            @handler
            def on_ping(self, event: Ping) -> None:
                recorder("healthy")

        broken, healthy = Broken(), Healthy()
        d.register(broken, healthy)

        assert d.is_registered(healthy)
        assert d.is_registered(broken)
        d.publish(Ping(msg="x"))
        assert recorder.calls == ["healthy"]

    def test_non_iterable_handler_list(self):
        """An event_handlers() returning None registers no handlers."""
        d = EventDispatcher()

        class Lazy(Listener):
            def event_handlers(self) -> list[HandlerDescriptor]:
                return None  # type: ignore[return-value]

        lazy = Lazy()
        d.register(lazy)
        assert d.is_registered(lazy)
        d.publish(Ping(msg="x"))

    def test_collection_failure_logged(self, log_records):
        """The collection failure is logged at error level with the listener."""

        class Broken(Listener):
            def event_handlers(self) -> list[HandlerDescriptor]:
                raise RuntimeError("boom")

        EventDispatcher().register(Broken())

        errors = [r for r in log_records if r["level"].name == "ERROR"]
        assert len(errors) == 1
        assert "Failed to collect handlers of" in errors[0]["message"]
        assert "Broken@" in errors[0]["message"]
        assert errors[0]["exception"].type is RuntimeError


class TestCancellationCheckFailures:
    def test_faulty_cancel_flag_costs_one_handler(self, recorder):
        """A raising is_cancelled() skips that handler only, not the dispatch."""
        d = EventDispatcher()

        class BrokenFlag(Event):
            def is_cancelled(self) -> bool:
                raise RuntimeError("flag broken")

            def set_cancelled(self, cancelled: bool) -> None: ...

        class Checked:
            @handler
            def normal(self, event: BrokenFlag) -> None:
                recorder("normal")

        class Ignoring:
            @handler(ignore_cancelled=True)
            def ignoring(self, event: BrokenFlag) -> None:
                recorder("ignoring")

        d.register(Checked(), Ignoring())
        d.publish(BrokenFlag())
        assert recorder.calls == ["ignoring"]
