"""Observer list shared by the orchestrator and the scheduler.

Events are published from connect workers and from the tick thread, so
the list is copy-on-write: registration swaps in a new tuple under a
lock, and notification iterates whatever tuple was current when it
started without taking the lock at all.
"""

import logging
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=object)


class ObserverManager(Generic[T]):
    """
    Observers of one kind (fleet or scheduler) and the fan-out to them.

    An observer may (un)register itself from inside a callback; the change
    applies from the next notification. A raising observer is logged and
    skipped, and the publisher never sees the exception.

    Example:
        ```python
        self._observers = ObserverManager[FleetObserver](observer_type_name="fleet")
        self._observers.notify("on_fleet_event", FleetEvent.LINK_CONNECTED, panel.id)
        ```
    """

    def __init__(self, observer_type_name: str = "observer"):
        self._kind = observer_type_name
        self._lock = Lock()
        self._observers: tuple[T, ...] = ()

    def register(self, observer: T) -> None:
        """Add an observer; adding it twice has no effect."""
        with self._lock:
            if observer in self._observers:
                return
            self._observers = (*self._observers, observer)
        logger.debug(f"Registered {self._kind} observer: {observer}")

    def unregister(self, observer: T) -> None:
        with self._lock:
            remaining = tuple(o for o in self._observers if o is not observer)
            found = len(remaining) != len(self._observers)
            self._observers = remaining
        if found:
            logger.debug(f"Unregistered {self._kind} observer: {observer}")
        else:
            logger.warning(f"Attempted to unregister unknown {self._kind} observer: {observer}")

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """Call `callback_name(*args, **kwargs)` on every observer."""
        for observer in self._observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                logger.error(f"{self._kind} observer {observer} has no method '{callback_name}'")
                continue
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error notifying {self._kind} observer {observer} via {callback_name}: {e}",
                    exc_info=True,
                )

    def clear(self) -> None:
        with self._lock:
            self._observers = ()

    def __contains__(self, observer: T) -> bool:
        return observer in self._observers

    def __len__(self) -> int:
        return len(self._observers)
