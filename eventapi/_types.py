"""Shared type definitions for eventapi.

All type aliases are declared with ``typing.TypeAlias``.
"""

from collections.abc import Callable
from typing import Any, TypeAlias

from eventapi.events import Event

Invoker: TypeAlias = Callable[[Any, Event], None]
"""Stored handler call: receives the owning listener and the event."""

EventType: TypeAlias = type[Event]
"""An ``Event`` class accepted by a handler."""
