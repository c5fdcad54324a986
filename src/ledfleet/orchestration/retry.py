"""Background reconnect loop for panels that failed to connect."""

import logging
import threading

from .orchestrator import FleetOrchestrator

logger = logging.getLogger(__name__)


class AutoRetry:
    """
    Periodically calls `orchestrator.retry()` while some panels are down.

    Example:
        ```python
        auto_retry = AutoRetry(orchestrator, interval=10.0)
        auto_retry.start()
        ...
        auto_retry.stop()
        ```
    """

    def __init__(self, orchestrator: FleetOrchestrator, interval: float):
        """
        Initialize the retry loop.

        Args:
            orchestrator: Fleet to retry
            interval: Seconds between attempts
        """
        if interval <= 0:
            raise ValueError(f"Retry interval must be positive, got {interval}")
        self.orchestrator = orchestrator
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            logger.warning("AutoRetry is already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="ledfleet-retry", daemon=True)
        self._thread.start()
        logger.debug(f"AutoRetry started (every {self.interval}s)")

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval + 1.0)
        self._thread = None
        logger.debug("AutoRetry stopped")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            if not self.orchestrator.failed_ids:
                continue
            try:
                result = self.orchestrator.retry()
            except Exception as e:
                logger.error(f"Error in automatic retry: {e}", exc_info=True)
                continue
            if result.connected:
                logger.info(f"Reconnected: {', '.join(result.connected)}")
