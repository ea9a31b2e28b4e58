from typing import Any


def callable_name(cb: Any) -> str:
    """Return a human-readable name for a callable, safe for logging.

    Falls back through ``__qualname__``, ``__name__``, and ``repr()``
    so that ``functools.partial``, callable instances, and other exotic
    callables never raise ``AttributeError``.

    Args:
        cb: Any callable object.

    Returns:
        Display name string.
    """
    return (
        getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None) or repr(cb)
    )


def listener_name(listener: Any) -> str:
    """Return a display name for a listener object.

    Uses the listener's class qualname plus its identity so that two
    instances of the same class remain distinguishable in logs.

    Args:
        listener: Any listener object.

    Returns:
        Display name string, e.g. ``"Kitchen@0x7f3a2c"``.
    """
    return f"{type(listener).__qualname__}@{id(listener):#x}"
