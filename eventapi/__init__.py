"""eventapi - tiered, cancellation-aware in-process event dispatch.

Listeners own handler methods for event types.  Publishing an event routes
it to every interested handler, base-type handlers first, each phase in
execution tier order.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all eventapi logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("eventapi")
logger.disable("eventapi")

from eventapi.dispatcher import EventDispatcher
from eventapi.events import Cancellable, CancellableEvent, Event
from eventapi.exceptions import (
    EventApiError,
    EventValidationError,
    InvalidHandlerError,
)
from eventapi.handlers import (
    HandlerDescriptor,
    describe_handler,
    handler,
    scan_handlers,
)
from eventapi.listener import Listener
from eventapi.registry import ListenerEntry, ListenerRegistry
from eventapi.tiers import DEFAULT_TIER, ExecutionTier

# Module-level default dispatcher instance
default_dispatcher = EventDispatcher()

__all__ = [
    # Version
    "__version__",
    # Event classes
    "Event",
    "Cancellable",
    "CancellableEvent",
    # Handlers and listeners
    "ExecutionTier",
    "DEFAULT_TIER",
    "HandlerDescriptor",
    "handler",
    "describe_handler",
    "scan_handlers",
    "Listener",
    # Dispatch
    "ListenerEntry",
    "ListenerRegistry",
    "EventDispatcher",
    "default_dispatcher",
    # Exception classes
    "EventApiError",
    "EventValidationError",
    "InvalidHandlerError",
]
