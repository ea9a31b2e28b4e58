"""Execution tiers for event handlers."""

from enum import IntEnum


class ExecutionTier(IntEnum):
    """Fixed-order priority bucket controlling handler invocation.

    Dispatch visits tiers in ascending value order regardless of the
    order handlers were registered in.  ``MONITOR`` runs last and is
    meant for handlers that observe the final outcome of an event.
    """

    FIRST = 0
    MIDDLE = 1
    LAST = 2
    MONITOR = 3


DEFAULT_TIER = ExecutionTier.MIDDLE
"""Tier used when a handler registration omits one."""
