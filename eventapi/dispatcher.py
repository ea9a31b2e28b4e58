"""Synchronous, tier-ordered event dispatcher."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from loguru import logger

from eventapi.events import Cancellable, Event
from eventapi.handlers import HandlerDescriptor
from eventapi.registry import ListenerEntry, ListenerRegistry
from eventapi.tiers import ExecutionTier
from eventapi.utils import listener_name

log = logger.bind(source=__name__)


class EventDispatcher:
    """Routes published events to registered listeners' handlers.

    Each dispatcher owns an independent :class:`ListenerRegistry`.
    Handlers run sequentially on the publishing thread: first every
    handler accepting the base ``Event`` type, then every handler
    accepting a more specific type, each phase in :class:`ExecutionTier`
    order.  Handler failures are logged and never reach the publisher.
    """

    def __init__(self) -> None:
        self._registry = ListenerRegistry()

    @property
    def listener_count(self) -> int:
        """Number of currently registered listeners."""
        return len(self._registry)

    def register(self, *listeners: Any) -> None:
        """Register listeners, replacing any earlier registration of each.

        Args:
            *listeners: Listener objects.  None entries are skipped and no
                arguments at all is a no-op.

        Post:
            Each listener's handlers are exactly those collected now.
        """
        for listener in listeners:
            self._registry.register(listener)

    def unregister(self, *listeners: Any) -> None:
        """Unregister listeners.

        Unknown listeners and None entries are ignored.  Dispatches
        already in progress keep delivering to their snapshot.

        Args:
            *listeners: Listener objects to remove.
        """
        for listener in listeners:
            self._registry.unregister(listener)

    def is_registered(self, listener: Any) -> bool:
        """Return True if *listener* is currently registered."""
        return listener in self._registry

    @contextmanager
    def listening(self, *listeners: Any) -> Iterator[None]:
        """Register *listeners* for the duration of a ``with`` block.

        Example::

            with dispatcher.listening(audit):
                dispatcher.publish(ClickEvent(x=1, y=2))
            # audit unregistered here
        """
        self.register(*listeners)
        try:
            yield
        finally:
            self.unregister(*listeners)

    def publish(self, event: Event) -> None:
        """Synchronously dispatch *event* to every interested handler.

        For each listener in a registry snapshot:

        1. Handlers accepting exactly ``Event`` run, tier by tier.
        2. Unless the event's type is ``Event`` itself, handlers whose
           event type the event is an instance of run, tier by tier.

        Before every handler the cancellation state is read afresh: a
        cancelled :class:`Cancellable` event skips handlers that do not
        ignore cancellation, and un-cancelling it lets later handlers
        run again.

        Args:
            event: Event to dispatch.

        Raises:
            TypeError: If *event* is not an ``Event`` instance.
        """
        if not isinstance(event, Event):
            raise TypeError(
                f"publish() expects an Event instance, got {type(event).__name__}"
            )
        event_type = type(event)
        snapshot = self._registry.snapshot()
        log.debug(
            "Publish {} to {} listener(s)", event_type.__qualname__, len(snapshot)
        )
        for entry in snapshot:
            self._dispatch_to(entry, event)

    def _dispatch_to(self, entry: ListenerEntry, event: Event) -> None:
        event_type = type(event)
        selected = [h for h in entry.handlers if h.accepts(event_type)]
        if not selected:
            return

        self._run_phase(entry.listener, [h for h in selected if h.is_base], event)
        if event_type is not Event:
            self._run_phase(
                entry.listener, [h for h in selected if not h.is_base], event
            )

    def _run_phase(
        self,
        listener: Any,
        handlers: Sequence[HandlerDescriptor],
        event: Event,
    ) -> None:
        for tier in ExecutionTier:
            for descriptor in handlers:
                if descriptor.tier != tier:
                    continue
                self._invoke(descriptor, listener, event)

    @staticmethod
    def _is_eligible(descriptor: HandlerDescriptor, event: Event) -> bool:
        """Apply the cancellation rule against the event's current state."""
        if descriptor.ignore_cancelled or not isinstance(event, Cancellable):
            return True
        return not event.is_cancelled()

    def _invoke(
        self, descriptor: HandlerDescriptor, listener: Any, event: Event
    ) -> None:
        """Invoke one handler if still eligible, absorbing any failure.

        The cancellation check runs inside the guarded block, so a
        faulty ``is_cancelled()`` only costs this one handler.
        """
        try:
            if not self._is_eligible(descriptor, event):
                log.debug(
                    "Skipping {} for cancelled {}",
                    descriptor.name,
                    type(event).__qualname__,
                )
                return
            descriptor.invoke(listener, event)
        except Exception:
            log.exception(
                "Unhandled exception in event handler {} of {} while handling {}",
                descriptor.name,
                listener_name(listener),
                type(event).__qualname__,
            )
