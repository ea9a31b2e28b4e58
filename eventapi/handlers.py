"""Handler descriptors and handler discovery.

A :class:`HandlerDescriptor` is the immutable record the dispatcher works
with.  Descriptors are built at registration time, either explicitly via
:func:`describe_handler` or by :func:`scan_handlers`, which collects the
methods a listener marked with the :func:`handler` decorator.
"""

import inspect
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar, overload

from loguru import logger

from eventapi._types import EventType, Invoker
from eventapi.events import Event
from eventapi.exceptions import InvalidHandlerError
from eventapi.tiers import DEFAULT_TIER, ExecutionTier
from eventapi.utils import callable_name, listener_name

F = TypeVar("F", bound=Callable[..., Any])

log = logger.bind(source=__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """Immutable record of one event handler.

    Attributes:
        event_type: Event class the handler accepts.  ``Event`` itself
            marks a base-type handler that sees every published event.
        invoke: Callable receiving ``(listener, event)``.
        tier: Execution tier the handler runs in.
        ignore_cancelled: Run even when the event is cancelled.
        name: Debug label for logging (defaults to the invoker's qualname).
    """

    event_type: EventType
    invoke: Invoker
    tier: ExecutionTier = DEFAULT_TIER
    ignore_cancelled: bool = False
    name: str = field(default="")

    def __post_init__(self) -> None:
        """Set default name if not provided."""
        if not self.name:
            object.__setattr__(self, "name", callable_name(self.invoke))

    @property
    def is_base(self) -> bool:
        """True when the handler accepts exactly the base ``Event`` type."""
        return self.event_type is Event

    def accepts(self, event_type: type) -> bool:
        """Return True if events of *event_type* should reach this handler."""
        return self.is_base or issubclass(event_type, self.event_type)


def is_event_type(candidate: Any) -> bool:
    """Return True if *candidate* is ``Event`` or one of its subclasses."""
    return isinstance(candidate, type) and issubclass(candidate, Event)


@overload
def handler(func: F, /) -> F: ...


@overload
def handler(
    event_type: EventType | None = None,
    /,
    *,
    tier: ExecutionTier = DEFAULT_TIER,
    ignore_cancelled: bool = False,
) -> Callable[[F], F]: ...


def handler(
    event_type: Any = None,
    /,
    *,
    tier: ExecutionTier = DEFAULT_TIER,
    ignore_cancelled: bool = False,
) -> Any:
    """Decorator marking a listener method as an event handler.

    Does **not** register anything.  It stamps metadata on the function
    so that :func:`scan_handlers` can build a descriptor when the owning
    listener is registered with a dispatcher.

    Usable bare or with arguments::

        class Audit:
            @handler
            def everything(self, event: Event) -> None: ...

            @handler(tier=ExecutionTier.FIRST)
            def clicks(self, event: ClickEvent) -> None: ...

            @handler(ClickEvent, ignore_cancelled=True)
            def raw(self, event) -> None: ...

    ``@staticmethod`` and ``@classmethod`` are supported; place them
    **outside** ``@handler``.

    Args:
        event_type: Accepted event class.  When omitted it is read from
            the event parameter's type annotation at registration time.
        tier: Execution tier the handler runs in.
        ignore_cancelled: Run even when the event has been cancelled.

    Returns:
        The original function (bare form) or a decorator returning it.
    """
    if callable(event_type) and not isinstance(event_type, type):
        return handler(tier=tier, ignore_cancelled=ignore_cancelled)(event_type)

    def decorator(func: F) -> F:
        func._handler_event_type = event_type  # type: ignore[attr-defined]
        func._handler_tier = ExecutionTier(tier)  # type: ignore[attr-defined]
        func._handler_ignore_cancelled = ignore_cancelled  # type: ignore[attr-defined]
        return func

    return decorator


def describe_handler(
    callback: Callable[..., Any],
    event_type: EventType | None = None,
    *,
    tier: ExecutionTier = DEFAULT_TIER,
    ignore_cancelled: bool = False,
    name: str = "",
    takes_listener: bool = False,
) -> HandlerDescriptor:
    """Build a descriptor for *callback*, validating its shape.

    The callback must take exactly one event parameter, after the
    listener parameter when *takes_listener* is True.  The accepted
    event type is *event_type* when given, else the parameter's type
    annotation.

    Args:
        callback: Handler function, bound method, or other callable.
        event_type: Accepted event class, overriding the annotation.
        tier: Execution tier the handler runs in.
        ignore_cancelled: Run even when the event has been cancelled.
        name: Debug label (defaults to the callback's qualname).
        takes_listener: Callback is an unbound method expecting the
            listener as its first argument.

    Returns:
        The handler descriptor.

    Raises:
        InvalidHandlerError: If the callback takes zero or several event
            parameters, or its event type is not an ``Event`` subclass.
    """
    label = name or callable_name(callback)
    try:
        params = list(inspect.signature(callback).parameters.values())
    except (TypeError, ValueError) as exc:
        raise InvalidHandlerError(f"cannot inspect handler {label}") from exc

    if takes_listener:
        if not params or params[0].kind not in _POSITIONAL:
            raise InvalidHandlerError(f"handler {label} takes no listener parameter")
        params = params[1:]

    if len(params) != 1 or params[0].kind not in _POSITIONAL:
        raise InvalidHandlerError(
            f"handler {label} must take exactly one event parameter, "
            f"got {len(params)}"
        )

    if event_type is None:
        try:
            hints = typing.get_type_hints(callback)
        except Exception as exc:
            raise InvalidHandlerError(
                f"cannot resolve annotations of handler {label}"
            ) from exc
        event_type = hints.get(params[0].name)

    if not is_event_type(event_type):
        raise InvalidHandlerError(
            f"handler {label} parameter type {event_type!r} is not an Event subclass"
        )

    if takes_listener:
        invoke: Invoker = callback
    else:

        def invoke(_listener: Any, event: Event) -> None:
            callback(event)

    return HandlerDescriptor(
        event_type=event_type,
        invoke=invoke,
        tier=ExecutionTier(tier),
        ignore_cancelled=ignore_cancelled,
        name=label,
    )


def scan_handlers(listener: Any) -> list[HandlerDescriptor]:
    """Collect descriptors for every ``@handler`` method of *listener*.

    Walks the listener's MRO so that inherited handlers are found and
    overriding definitions win over the ones they override.  Methods
    violating the single-event-parameter contract are excluded and
    logged at debug level, never raised.

    Args:
        listener: Any object whose class may define handler methods.

    Returns:
        Descriptors in class declaration order, subclass first.
    """
    descriptors: list[HandlerDescriptor] = []
    seen: set[str] = set()
    owner = type(listener)
    for klass in owner.__mro__:
        for attr_name, attr in vars(klass).items():
            if attr_name in seen:
                continue
            seen.add(attr_name)
            # Unwrap staticmethod/classmethod to access inner function
            inner = attr
            if isinstance(attr, (staticmethod, classmethod)):
                inner = attr.__func__
            if not callable(inner) or not hasattr(inner, "_handler_tier"):
                continue

            if isinstance(attr, (staticmethod, classmethod)):
                # Resolved through the class: plain function or class-bound method
                callback, takes_listener = getattr(owner, attr_name), False
            else:
                callback, takes_listener = inner, True
            try:
                descriptors.append(
                    describe_handler(
                        callback,
                        inner._handler_event_type,
                        tier=inner._handler_tier,
                        ignore_cancelled=inner._handler_ignore_cancelled,
                        name=callable_name(inner),
                        takes_listener=takes_listener,
                    )
                )
            except InvalidHandlerError as exc:
                log.debug("Excluding handler on {}: {}", listener_name(listener), exc)

    return descriptors
