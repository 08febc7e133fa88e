import logging
import time
from collections.abc import Callable
from typing import cast

import mss  # pyright: ignore[reportMissingImports]
from mss.exception import ScreenShotError  # pyright: ignore[reportMissingImports]
from PIL import Image  # pyright: ignore[reportMissingImports]

from dam_agent.errors import CaptureError
from dam_agent.model.models import CaptureSample
from dam_agent.watchers.active_window import get_window_label

logger = logging.getLogger(__name__)


class ScreenCapture:
    """Grabs the primary monitor together with the focused window label."""

    def __init__(
        self,
        bbox: dict[str, int] | None = None,
        window_provider: Callable[[], str] = get_window_label,
    ) -> None:
        """Initialise the capture area.

        Args:
        bbox: capture area {"top": int, "left": int, "width": int, "height": int}
             None captures the whole primary monitor
        window_provider: returns the active window label at capture time

        """
        self._bbox = bbox
        self.window_provider = window_provider
        self.last_capture_time: float = 0.0

    @property
    def bbox(self) -> dict[str, int]:
        if self._bbox is None:
            self._bbox = self._get_primary_monitor_bbox()
            logger.info("ScreenCapture initialized | bbox=%s", self._bbox)
        return self._bbox

    def _get_primary_monitor_bbox(self) -> dict[str, int]:
        """Resolution of the primary monitor."""
        with mss.mss() as sct:
            monitors = sct.monitors
            chosen = cast(
                "dict[str, int]",
                monitors[1] if len(monitors) > 1 else monitors[0],
            )
            logger.info("Monitors detected: %s | chosen=%s", len(monitors) - 1, chosen)
            return chosen

    def grab(self) -> Image.Image:
        try:
            with mss.mss() as sct:
                screenshot = sct.grab(self.bbox)
                image = Image.frombytes(
                    "RGB", screenshot.size, screenshot.bgra, "raw", "BGRX"
                )
        except ScreenShotError as e:
            msg = f"Screen grab failed: {e}"
            raise CaptureError(msg) from e
        self.last_capture_time = time.time()
        return image

    def capture(self) -> CaptureSample:
        """One frame plus the active window label."""
        image = self.grab()
        return CaptureSample(
            timestamp=self.last_capture_time,
            image_data=image,
            active_window=self.window_provider(),
            screen_id="primary",
        )

