"""Registry for listener management.

This module provides ListenerRegistry, which maps each registered
listener to its handler descriptors and hands out immutable snapshots
for dispatch.
"""

import threading
from dataclasses import dataclass
from typing import Any

from loguru import logger

from eventapi.handlers import HandlerDescriptor, is_event_type, scan_handlers
from eventapi.listener import Listener
from eventapi.utils import listener_name

log = logger.bind(source=__name__)


@dataclass(frozen=True, slots=True)
class ListenerEntry:
    """One registered listener with its handlers.

    Attributes:
        listener: The registered listener object.
        handlers: Handler descriptors owned by the listener.
    """

    listener: Any
    handlers: tuple[HandlerDescriptor, ...]


def collect_handlers(listener: Any) -> tuple[HandlerDescriptor, ...]:
    """Build the descriptor list for *listener*.

    :class:`Listener` subclasses supply their own descriptors through
    ``event_handlers()``; any other object is scanned for ``@handler``
    methods.  Descriptors whose event type is not an ``Event`` subclass
    are dropped.

    Args:
        listener: Listener object being registered.

    Returns:
        Validated descriptors, in the order supplied.  Empty when the
        listener's ``event_handlers()`` raises or returns a non-iterable;
        the failure is logged, never raised.
    """
    try:
        if isinstance(listener, Listener):
            candidates = list(listener.event_handlers())
        else:
            candidates = scan_handlers(listener)
    except Exception:
        log.exception("Failed to collect handlers of {}", listener_name(listener))
        return ()
    handlers = []
    for descriptor in candidates:
        if not isinstance(descriptor, HandlerDescriptor) or not is_event_type(
            descriptor.event_type
        ):
            log.debug(
                "Excluding invalid handler {!r} on {}",
                descriptor,
                listener_name(listener),
            )
            continue
        handlers.append(descriptor)
    return tuple(handlers)


class ListenerRegistry:
    """Registry table for event listeners.

    Keys listeners by identity, so a listener registered twice replaces
    its own entry and two equal-but-distinct listeners never collide.

    ``register``, ``unregister``, ``snapshot`` and ``clear`` share one
    lock.  Dispatch iterates snapshots and never holds the lock, so
    handlers may register or unregister listeners while running.
    """

    def __init__(self) -> None:
        """Initialize empty registry.

        Post:
            _entries is empty.
        """
        self._entries: dict[int, ListenerEntry] = {}
        self._lock = threading.Lock()

    def register(self, listener: Any) -> None:
        """Register *listener*, replacing any previous entry for it.

        Handler collection runs listener code and happens outside the
        lock; only the store is guarded.  A listener whose handler
        collection fails is registered with no handlers.

        Args:
            listener: Listener object, or None for a no-op.

        Post:
            listener's entry holds exactly the freshly collected handlers.
        """
        if listener is None:
            return
        entry = ListenerEntry(listener, collect_handlers(listener))
        with self._lock:
            replaced = id(listener) in self._entries
            self._entries[id(listener)] = entry
        log.debug(
            "{} {} with {} handler(s)",
            "Re-registered" if replaced else "Registered",
            listener_name(listener),
            len(entry.handlers),
        )

    def unregister(self, listener: Any) -> None:
        """Remove *listener*'s entry.

        Args:
            listener: Listener object, or None for a no-op.

        Post:
            listener not in registry.  Snapshots already taken keep it.
        """
        if listener is None:
            return
        with self._lock:
            entry = self._entries.get(id(listener))
            if entry is None or entry.listener is not listener:
                return
            del self._entries[id(listener)]
        log.debug("Unregistered {}", listener_name(listener))

    def snapshot(self) -> tuple[ListenerEntry, ...]:
        """Return an immutable point-in-time copy of all entries."""
        with self._lock:
            return tuple(self._entries.values())

    def handlers_of(self, listener: Any) -> tuple[HandlerDescriptor, ...]:
        """Return the handlers registered for *listener* (empty if absent)."""
        with self._lock:
            entry = self._entries.get(id(listener))
        if entry is None or entry.listener is not listener:
            return ()
        return entry.handlers

    def clear(self) -> None:
        """Remove every listener."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, listener: Any) -> bool:
        with self._lock:
            entry = self._entries.get(id(listener))
        return entry is not None and entry.listener is listener

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
