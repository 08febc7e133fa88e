import logging
import threading
from collections.abc import Callable

from dam_agent.model.models import CaptureSample
from dam_agent.watchers.screen_capture import ScreenCapture

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0
JOIN_TIMEOUT_SECONDS = 10.0


class CaptureScheduler:
    """Runs capture + callback on a daemon thread at a fixed interval.

    The first capture happens immediately on start. Each tick finishes
    before the next wait begins, so callbacks never overlap. Every run owns
    its stop event; a thread that outlives ``stop()`` exits after its
    current tick even if the scheduler has been started again.
    """

    def __init__(self, capture: ScreenCapture) -> None:
        self.capture = capture
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.interval = DEFAULT_INTERVAL_SECONDS

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(
        self,
        callback: Callable[[CaptureSample], None],
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        if self.running:
            logger.warning("Screen capture already in progress")
            return

        self.interval = interval
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(callback, self._stop, interval),
            name="dam-capture",
            daemon=True,
        )
        self._thread.start()
        logger.info("Screen capture started with %.1fs interval", interval)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=JOIN_TIMEOUT_SECONDS)
            if self._thread.is_alive():
                logger.warning("Capture thread did not stop within %.0fs", JOIN_TIMEOUT_SECONDS)
        self._thread = None
        logger.info("Screen capture stopped")

    def tick(self, callback: Callable[[CaptureSample], None]) -> None:
        """One capture + callback. Failures are logged and the tick dropped."""
        try:
            sample = self.capture.capture()
            callback(sample)
        except Exception:
            logger.exception("Capture tick failed")

    def _run(
        self,
        callback: Callable[[CaptureSample], None],
        stop: threading.Event,
        interval: float,
    ) -> None:
        while not stop.is_set():
            self.tick(callback)
            stop.wait(interval)
