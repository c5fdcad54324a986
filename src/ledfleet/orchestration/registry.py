"""Thread-safe registry of connected panel links."""

from threading import Lock

from ledfleet.devices import DeviceLink


class LinkRegistry:
    """
    Connected links keyed by panel id.

    Connect workers add links while the tick thread iterates them, so
    every read hands out a copy taken under the lock. Iterating a
    snapshot never blocks a connect, and a connect never changes a list
    someone is iterating.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._links: dict[str, DeviceLink] = {}

    def add_if_absent(self, link: DeviceLink) -> bool:
        """
        Add a link unless its panel already has one.

        Returns:
            True if added, False if the panel already had a link
        """
        with self._lock:
            if link.panel_id in self._links:
                return False
            self._links[link.panel_id] = link
            return True

    def get(self, panel_id: str) -> DeviceLink | None:
        with self._lock:
            return self._links.get(panel_id)

    def remove(self, panel_id: str) -> DeviceLink | None:
        with self._lock:
            return self._links.pop(panel_id, None)

    def snapshot(self) -> list[DeviceLink]:
        """Copy of the current links, in insertion order."""
        with self._lock:
            return list(self._links.values())

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._links)

    def drain(self) -> list[DeviceLink]:
        """Remove and return every link in one step."""
        with self._lock:
            links = list(self._links.values())
            self._links.clear()
            return links

    def __contains__(self, panel_id: object) -> bool:
        with self._lock:
            return panel_id in self._links

    def __len__(self) -> int:
        with self._lock:
            return len(self._links)
