"""Listener base class for explicit handler registration.

Any object can be registered with a dispatcher; its ``@handler`` methods
are discovered by scanning its class.  Subclassing :class:`Listener`
lets a listener supply its handler descriptors directly instead.
"""

from eventapi.handlers import HandlerDescriptor, scan_handlers


class Listener:
    """Optional base class for event listeners.

    Override :meth:`event_handlers` to hand the dispatcher an explicit
    descriptor list, e.g. built from bound methods or closures::

        class Counter(Listener):
            def __init__(self) -> None:
                self.clicks = 0

            def event_handlers(self) -> list[HandlerDescriptor]:
                return [
                    describe_handler(
                        self.count, ClickEvent, tier=ExecutionTier.MONITOR
                    )
                ]

            def count(self, event: ClickEvent) -> None:
                self.clicks += 1

    The default implementation falls back to ``@handler`` scanning, so a
    subclass that does not override it behaves like a plain object.
    """

    def event_handlers(self) -> list[HandlerDescriptor]:
        """Return the handler descriptors this listener owns.

        Called once per registration.  Returning a fresh list each time
        is expected; re-registering replaces the previous list.
        """
        return scan_handlers(self)
