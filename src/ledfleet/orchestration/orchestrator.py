"""
Fleet orchestrator: connects panels and fans frames out to them.

Every panel is handled on its own. A panel that fails to connect is
recorded and can be retried later; a panel that fails to take a frame
is logged and tried again on the next frame. Neither ever stops the
rest of the fleet.
"""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from threading import Lock

import numpy as np

from ledfleet.devices import DeviceLink, PanelMetadataSource
from ledfleet.exceptions import DeviceError, collect_errors
from ledfleet.mapping import plan_for
from ledfleet.models import AppConfig, LayoutConfig, PanelConfig
from ledfleet.protocols import FleetEvent, FleetObserver
from ledfleet.utils import ObserverManager

from .registry import LinkRegistry

logger = logging.getLogger(__name__)

LinkFactory = Callable[[PanelConfig], DeviceLink]


@dataclass(slots=True)
class PanelFailure:
    """A panel and the error that stopped it."""

    panel_id: str
    error: Exception


@dataclass(slots=True)
class ConnectResult:
    """Outcome of connect_all or retry."""

    connected: list[str] = field(default_factory=list)
    failed: list[PanelFailure] = field(default_factory=list)

    @property
    def failed_ids(self) -> list[str]:
        return [f.panel_id for f in self.failed]


@dataclass(slots=True)
class BroadcastReport:
    """Outcome of sending one frame to every connected panel."""

    sent: list[str] = field(default_factory=list)
    failed: list[PanelFailure] = field(default_factory=list)

    @property
    def failed_ids(self) -> list[str]:
        return [f.panel_id for f in self.failed]


@dataclass(slots=True)
class FleetStatus:
    """Operator-facing summary of the fleet."""

    connected: int
    total: int
    failed_ids: list[str]

    def __str__(self) -> str:
        text = f"Connected {self.connected}/{self.total}"
        if self.failed_ids:
            text += f", failed: {', '.join(self.failed_ids)}"
        return text


class FleetOrchestrator:
    """
    Owns the links of a fleet and drives them.

    Threading:
        connect_all and retry run connect attempts on a thread pool and
        are serialized with each other. broadcast_frame and blackout run
        on the caller's thread (normally the tick thread) and iterate a
        snapshot of the link registry, so they never wait for a connect.
        shutdown may be called from any thread, including the tick thread.

    Example:
        ```python
        orchestrator = FleetOrchestrator(layout.canvas_size)
        result = orchestrator.connect_all(layout.panels)
        orchestrator.broadcast_frame(frame)
        orchestrator.retry()
        orchestrator.shutdown()
        ```
    """

    def __init__(
        self,
        canvas_size: tuple[int, int],
        link_factory: LinkFactory | None = None,
        metadata_source: PanelMetadataSource | None = None,
        send_timeout: float = 0.1,
        max_workers: int = 8,
    ):
        """
        Initialize the orchestrator (nothing is connected yet).

        Args:
            canvas_size: (width, height) of the frames that will be broadcast
            link_factory: Builds a DeviceLink for a panel (injectable for tests)
            metadata_source: Optional source of device-reported panel settings
            send_timeout: Socket send timeout for links built by the default factory
            max_workers: Upper bound on parallel connect attempts
        """
        self.canvas_size = canvas_size
        self.max_workers = max_workers
        self._link_factory = link_factory or (
            lambda panel: DeviceLink(panel, send_timeout=send_timeout)
        )
        self._metadata = metadata_source

        self._registry = LinkRegistry()
        self._connect_lock = Lock()
        self._state_lock = Lock()
        self._known: dict[str, PanelConfig] = {}
        self._failed: dict[str, PanelFailure] = {}
        self._send_failing: set[str] = set()
        self._closed = False

        self._observers = ObserverManager[FleetObserver](observer_type_name="fleet")

    @classmethod
    def for_layout(
        cls,
        layout: LayoutConfig,
        config: AppConfig,
        metadata_source: PanelMetadataSource | None = None,
    ) -> "FleetOrchestrator":
        """Build an orchestrator sized for a layout with settings from config."""
        return cls(
            layout.canvas_size,
            metadata_source=metadata_source,
            send_timeout=config.send_timeout,
            max_workers=config.connect_workers,
        )

    # Observers

    def register_observer(self, observer: FleetObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: FleetObserver) -> None:
        self._observers.unregister(observer)

    def _notify(self, event: FleetEvent, panel_id: str | None, **data) -> None:
        self._observers.notify("on_fleet_event", event, panel_id, **data)

    # Connecting

    def connect_all(self, panels: Iterable[PanelConfig]) -> ConnectResult:
        """
        Connect every given panel, in parallel.

        Panels that are already connected are left alone. A failure on one
        panel is recorded and never stops the others.

        Args:
            panels: Panels to connect

        Returns:
            ConnectResult with the panels connected now and those that failed
        """
        panels = list(panels)
        with self._connect_lock:
            with self._state_lock:
                self._closed = False
                for panel in panels:
                    self._known[panel.id] = panel
            pending = [p for p in panels if p.id not in self._registry]
            return self._connect_many(pending)

    def retry(self, panel_ids: Iterable[str] | None = None) -> ConnectResult:
        """
        Try again to connect panels that are not connected.

        Args:
            panel_ids: Panels to retry. None retries every panel whose last
                connect attempt failed.

        Returns:
            ConnectResult with the newly connected panels and those still failing.
            Connected panels are skipped, never reconnected or duplicated.
        """
        with self._connect_lock:
            if self._closed:
                logger.info("Retry skipped: fleet is shut down")
                return ConnectResult()

            with self._state_lock:
                ids = list(self._failed) if panel_ids is None else list(panel_ids)
                unknown = [pid for pid in ids if pid not in self._known]
                candidates = [self._known[pid] for pid in ids if pid in self._known]

            for pid in unknown:
                logger.warning(f"Cannot retry unknown panel '{pid}'")

            pending = [p for p in candidates if p.id not in self._registry]
            if not pending:
                logger.debug("Retry: nothing to reconnect")
                return ConnectResult()

            logger.info(f"Retrying {len(pending)} panel(s): {', '.join(p.id for p in pending)}")
            return self._connect_many(pending)

    def _connect_many(self, panels: list[PanelConfig]) -> ConnectResult:
        if not panels:
            return ConnectResult()

        collector = collect_errors("connect panels")
        workers = min(self.max_workers, len(panels))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ledfleet-connect") as pool:
            futures = {pool.submit(self._connect_one, panel): panel for panel in panels}
            for future in as_completed(futures):
                with collector.try_operation(futures[future].id):
                    future.result()

        failures = {pid: PanelFailure(pid, error) for pid, error in collector.errors}
        result = ConnectResult(
            connected=[p.id for p in panels if p.id not in failures],
            failed=[failures[p.id] for p in panels if p.id in failures],
        )

        with self._state_lock:
            for pid in result.connected:
                self._failed.pop(pid, None)
            for failure in result.failed:
                self._failed[failure.panel_id] = failure

        for failure in result.failed:
            self._notify(FleetEvent.LINK_FAILED, failure.panel_id, error=failure.error)

        logger.info(f"Connect finished: {self.status()}")
        return result

    def _connect_one(self, panel: PanelConfig) -> None:
        resolved = panel
        if self._metadata is not None:
            resolved = self._metadata.fetch(panel).apply_to(panel)

        link = self._link_factory(resolved)
        link.connect()

        # shutdown() flips _closed under the same lock before draining, so a
        # link is either drained by it or never added
        with self._state_lock:
            added = not self._closed and self._registry.add_if_absent(link)
        if not added:
            link.disconnect()
            return

        self._notify(FleetEvent.LINK_CONNECTED, panel.id)

    # Sending

    def broadcast_frame(self, frame: np.ndarray) -> BroadcastReport:
        """
        Send one canvas frame to every connected panel, one after another.

        Args:
            frame: uint8 array of shape (canvas_height, canvas_width, 3)

        Returns:
            BroadcastReport naming the panels that took the frame and those that did not

        Raises:
            ValueError: If the frame does not match the canvas size
            EncodingError: If a panel's settings cannot be encoded
        """
        width, height = self.canvas_size
        if frame.shape != (height, width, 3):
            raise ValueError(
                f"Frame shape {frame.shape} does not match canvas {width}x{height}"
            )

        return self._send_each(
            lambda link: link.send_frame(plan_for(link.panel, self.canvas_size).render(frame))
        )

    def blackout(self) -> BroadcastReport:
        """Send an all-zero frame to every connected panel."""
        return self._send_each(lambda link: link.send_blackout())

    def _send_each(self, send: Callable[[DeviceLink], int]) -> BroadcastReport:
        report = BroadcastReport()
        for link in self._registry.snapshot():
            try:
                send(link)
            except DeviceError as e:
                report.failed.append(PanelFailure(link.panel_id, e))
                self._record_send_failure(link.panel_id, e)
            else:
                report.sent.append(link.panel_id)
                self._record_send_success(link.panel_id)
        return report

    def _record_send_failure(self, panel_id: str, error: DeviceError) -> None:
        with self._state_lock:
            first = panel_id not in self._send_failing
            self._send_failing.add(panel_id)

        # One warning per failure streak; a dead panel at 60 fps would flood the log
        if first:
            logger.warning(f"Panel {panel_id} stopped taking frames: {error.technical_message}")
            self._notify(FleetEvent.SEND_FAILED, panel_id, error=error)
        else:
            logger.debug(f"Panel {panel_id} send failed: {error.technical_message}")

    def _record_send_success(self, panel_id: str) -> None:
        with self._state_lock:
            if panel_id not in self._send_failing:
                return
            self._send_failing.discard(panel_id)

        logger.info(f"Panel {panel_id} is taking frames again")
        self._notify(FleetEvent.SEND_RECOVERED, panel_id)

    # Lifecycle

    def shutdown(self) -> None:
        """
        Black out and disconnect every connected panel.

        Each panel is blacked out and closed under its link's send lock,
        so a frame in flight on another thread cannot land after the
        blackout. Safe to call more than once.
        """
        with self._state_lock:
            already_closed = self._closed
            self._closed = True

        links = self._registry.drain()
        if already_closed and not links:
            return

        logger.info(f"Shutting down fleet: blacking out {len(links)} panel(s)")
        for link in links:
            link.close(blackout=True)
            self._notify(FleetEvent.LINK_DISCONNECTED, link.panel_id)

        with self._state_lock:
            self._send_failing.clear()
        self._notify(FleetEvent.FLEET_SHUTDOWN, None)

    # Queries

    def status(self) -> FleetStatus:
        with self._state_lock:
            total = len(self._known)
            failed = [pid for pid in self._known if pid in self._failed]
        return FleetStatus(connected=len(self._registry), total=total, failed_ids=failed)

    @property
    def connected_ids(self) -> list[str]:
        return self._registry.ids()

    @property
    def failed_ids(self) -> list[str]:
        return self.status().failed_ids

    def get_link(self, panel_id: str) -> DeviceLink | None:
        return self._registry.get(panel_id)

    def links(self) -> list[DeviceLink]:
        return self._registry.snapshot()

    def __enter__(self) -> "FleetOrchestrator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
