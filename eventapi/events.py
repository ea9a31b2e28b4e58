"""Event model for eventapi.

This module provides the Event base class and the Cancellable capability
inspected by the dispatcher before each handler invocation.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, ValidationError

from eventapi.exceptions import EventValidationError


class Event(BaseModel):
    """Base class for all events.

    Users should inherit from this class to define custom events with
    additional fields.  ``Event`` itself is the generic base type:
    handlers accepting it see every published event, before any handler
    accepting a more specific type.

    Example:
        >>> class UserEvent(Event):
        ...     user_id: int
        ...     action: str
        >>> event = UserEvent(user_id=123, action="login")

    Raises:
        EventValidationError: If fields fail pydantic validation.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid", strict=True)

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into EventValidationError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise EventValidationError(str(exc)) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except ValidationError as exc:
            raise EventValidationError(str(exc)) from exc


@runtime_checkable
class Cancellable(Protocol):
    """Capability of events that can be cancelled mid-dispatch.

    Checked structurally with ``isinstance(event, Cancellable)``, so any
    event class exposing these two methods qualifies without inheriting
    from this protocol.
    """

    def is_cancelled(self) -> bool:
        """Return True if the event is currently cancelled."""
        ...

    def set_cancelled(self, cancelled: bool) -> None:
        """Set the cancelled state of the event."""
        ...


class CancellableEvent(Event):
    """Event carrying a mutable cancelled flag.

    Any handler may cancel or un-cancel the event.  The dispatcher reads
    the current flag before every handler, so a later handler observes
    whatever the previous handler left behind.

    Attributes:
        cancelled: Current cancellation state (defaults to False).
    """

    cancelled: bool = False

    def is_cancelled(self) -> bool:
        return self.cancelled

    def set_cancelled(self, cancelled: bool) -> None:
        self.cancelled = cancelled
