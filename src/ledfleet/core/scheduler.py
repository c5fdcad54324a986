"""Fixed-rate frame scheduler."""

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum
from threading import Lock

from ledfleet.orchestration import FleetOrchestrator
from ledfleet.protocols import PixelSource, SchedulerEvent, SchedulerObserver
from ledfleet.utils import ObserverManager

from .frame import apply_brightness, sample_frame

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Run state of the frame scheduler."""

    STOPPED = "stopped"
    RUNNING = "running"


class FrameScheduler:
    """
    Drives the pipeline at a fixed frame rate.

    Each tick advances the pixel source, samples the whole canvas, scales
    it by the brightness and hands it to the orchestrator.

    Timing:
        A tick that comes less than one frame interval after the previous
        rendered tick is skipped. When a tick overruns, the next one is
        due immediately and timing restarts from there; missed frames are
        never replayed.

    Lifecycle:
        - start(): init the source and start the tick thread
        - source.update() returns False: the scheduler stops itself and
          shuts the fleet down (blackout and disconnect)
        - stop(): lets the running tick finish, starts no new tick, then
          blacks out every connected panel

    The tick thread is the only thread that touches the source. `tick()`
    is public so tests and embedders can drive frames themselves.
    """

    def __init__(
        self,
        source: PixelSource,
        orchestrator: FleetOrchestrator,
        canvas_size: tuple[int, int],
        fps: int = 60,
        brightness: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the scheduler.

        Args:
            source: Pixel source to render
            orchestrator: Fleet that receives the frames
            canvas_size: (width, height) of the canvas
            fps: Target frame rate
            brightness: Global brightness, 0.0 to 1.0
            clock: Monotonic time source in seconds
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        if not 0.0 <= brightness <= 1.0:
            raise ValueError(f"Brightness must be between 0.0 and 1.0, got {brightness}")

        self.source = source
        self.orchestrator = orchestrator
        self.width, self.height = canvas_size
        self.fps = fps
        self.frame_interval = 1.0 / fps
        self.brightness = brightness
        self._clock = clock

        self._lock = Lock()
        self._state = SchedulerState.STOPPED
        self._stop_event = threading.Event()
        self._done = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_tick: float | None = None

        self.frames_rendered = 0
        self.ticks_skipped = 0
        self.last_tick_duration = 0.0
        self.error: Exception | None = None

        self._observers = ObserverManager[SchedulerObserver](observer_type_name="scheduler")

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    def register_observer(self, observer: SchedulerObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: SchedulerObserver) -> None:
        self._observers.unregister(observer)

    def start(self, threaded: bool = True) -> None:
        """
        Start rendering.

        Args:
            threaded: Run the tick loop on a background thread. With False
                the caller drives frames through tick().
        """
        with self._lock:
            if self._state is SchedulerState.RUNNING:
                logger.warning("FrameScheduler is already running")
                return

            self.source.init(self.width, self.height)
            self._stop_event.clear()
            self._done.clear()
            self._last_tick = None
            self.error = None
            self._state = SchedulerState.RUNNING

            if threaded:
                self._thread = threading.Thread(
                    target=self._run, name="ledfleet-ticks", daemon=True
                )
                self._thread.start()

        logger.info(f"Scheduler started: {self.width}x{self.height} at {self.fps} fps")
        self._observers.notify("on_scheduler_event", SchedulerEvent.STARTED)

    def stop(self) -> None:
        """
        Stop rendering and black out the fleet.

        Waits for the running tick to complete. Safe to call more than
        once and from the tick thread itself.
        """
        with self._lock:
            if self._state is SchedulerState.STOPPED and self._thread is None:
                return
            self._state = SchedulerState.STOPPED
            thread, self._thread = self._thread, None

        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(1.0, 10 * self.frame_interval))
            if thread.is_alive():
                logger.warning("Tick thread did not finish in time")

        self.orchestrator.blackout()
        logger.info(f"Scheduler stopped after {self.frames_rendered} frames")
        self._observers.notify(
            "on_scheduler_event", SchedulerEvent.STOPPED, frames=self.frames_rendered
        )
        self._done.set()

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until the scheduler has stopped and the fleet was blacked out
        (or shut down, when the source finished).

        Returns:
            True if stopped, False on timeout
        """
        return self._done.wait(timeout)

    def tick(self, now: float) -> bool:
        """
        Run one tick at time `now`.

        Returns:
            True if a frame was rendered and broadcast, False if the tick
            was skipped or the source finished
        """
        if self._state is not SchedulerState.RUNNING:
            return False

        if self._last_tick is not None and now - self._last_tick < self.frame_interval:
            self.ticks_skipped += 1
            return False
        self._last_tick = now

        started = self._clock()
        if not self.source.update(now):
            self._finish()
            return False
        if self._state is not SchedulerState.RUNNING:
            # Stopped from inside update(); the blackout already went out
            return False

        frame = sample_frame(self.source, self.width, self.height)
        frame = apply_brightness(frame, self.brightness)
        self.orchestrator.broadcast_frame(frame)

        self.frames_rendered += 1
        self.last_tick_duration = self._clock() - started
        return True

    def _run(self) -> None:
        logger.debug("Tick loop started")
        while not self._stop_event.is_set():
            try:
                self.tick(self._clock())
            except Exception as e:
                logger.error(f"Render loop failed: {e}", exc_info=True)
                self.error = e
                self._finish()
                break

            if self._last_tick is None:
                delay = self.frame_interval
            else:
                delay = self._last_tick + self.frame_interval - self._clock()
            if delay > 0:
                self._stop_event.wait(delay)
        logger.debug("Tick loop exited")

    def _finish(self) -> None:
        """Source finished (or the loop failed): stop and shut the fleet down."""
        with self._lock:
            if self._state is SchedulerState.STOPPED and self._thread is None:
                return
            self._state = SchedulerState.STOPPED
            self._thread = None
        self._stop_event.set()

        logger.info(f"Animation finished after {self.frames_rendered} frames")
        self._observers.notify(
            "on_scheduler_event", SchedulerEvent.FINISHED, frames=self.frames_rendered
        )
        self.orchestrator.shutdown()
        self._observers.notify(
            "on_scheduler_event", SchedulerEvent.STOPPED, frames=self.frames_rendered
        )
        self._done.set()
