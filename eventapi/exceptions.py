"""Exception hierarchy for eventapi.

All custom exceptions inherit from EventApiError base class.
"""


class EventApiError(Exception):
    """Base exception for all eventapi errors.

    Lets callers catch every framework-specific error with a single
    except clause.
    """


class EventValidationError(EventApiError, ValueError):
    """Event validation failed.

    Raised when event fields fail pydantic validation, either at
    construction or on assignment.

    This wraps pydantic.ValidationError to provide a framework-specific exception type.
    """


class InvalidHandlerError(EventApiError, TypeError):
    """Handler does not satisfy the single-event-parameter contract.

    Raised by :func:`eventapi.handlers.describe_handler` when:
    - The handler takes zero, or more than one, event parameter
    - The event parameter type is missing or not an ``Event`` subclass

    Registration never surfaces this error; malformed handlers are
    excluded from the listener's handler list instead.
    """
