import logging
import platform
import sys
import threading
import time
import webbrowser
from collections import deque
from dataclasses import dataclass
from typing import Any

from dam_agent.model.models import Notification

if sys.platform == "win32":
    from win10toast import ToastNotifier  # type: ignore[import-untyped, unused-ignore]

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100
# Windows toasts cannot stay open forever; sticky ones get this long.
STICKY_TOAST_SECONDS = 60
DEFAULT_LEARNING_URL = "https://dam.ai/learn"


@dataclass
class NotificationConfig:
    """Configuration for :class:`NotificationService`."""

    sound: bool = False
    open_links: bool = True


class NotificationService:
    """Notification sink: shows toasts on Windows and keeps a history.

    ``show`` never blocks on the user. Actions the user takes come back
    through :meth:`handle_action`, usually via the local API.
    """

    def __init__(self, config: NotificationConfig | None = None) -> None:
        self.platform = platform.system()
        self.config = config or NotificationConfig()
        self._history: deque[dict[str, Any]] = deque(maxlen=HISTORY_LIMIT)
        self._lock = threading.Lock()
        self.current: Notification | None = None

    def show(self, notification: Notification) -> bool:
        """Display a notification and record it.

        Returns True when a toast was handed to the OS. On other platforms
        the notification is only recorded and the call reports ``False``.
        """
        delivered = False
        if self.platform == "Windows":
            duration = (
                notification.duration // 1000
                if notification.duration is not None
                else STICKY_TOAST_SECONDS
            )
            notifier = ToastNotifier()
            delivered = bool(
                notifier.show_toast(  # pyright: ignore[reportUnknownMemberType]
                    notification.title,
                    notification.message,
                    duration=duration,
                    threaded=True,
                )
            )
        with self._lock:
            self.current = notification
            self._history.append(
                {
                    **notification.to_dict(),
                    "sound": self.config.sound,
                    "timestamp": time.time(),
                    "delivered": delivered,
                }
            )
        logger.info("Notification shown: %s (%s)", notification.title, notification.type)
        return delivered

    def handle_action(self, action: str, data: Any = None) -> dict[str, Any]:
        """Apply a user action on the current notification."""
        with self._lock:
            current = self.current
            self.current = None

        if action in ("learn_more", "open_training"):
            url = data if isinstance(data, str) and data else self._learning_url(current)
            if self.config.open_links:
                webbrowser.open(url)
            return {"action": action, "url": url}
        if action == "copy_improved":
            return {"action": action, "improved_prompt": data}
        if action == "view_details" and current is not None:
            return {"action": action, "notification": current.to_dict()}
        return {"action": action}

    @staticmethod
    def _learning_url(notification: Notification | None) -> str:
        if notification is None:
            return DEFAULT_LEARNING_URL
        for suggestion in notification.suggestions:
            if suggestion.learning_resource:
                return suggestion.learning_resource
        if notification.learning_opportunity and notification.learning_opportunity.resources:
            return notification.learning_opportunity.resources[0]
        return DEFAULT_LEARNING_URL

    # ------------------------------------------------------------------
    # Query helpers
    def get_capabilities(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "supports_toast": self.platform == "Windows",
            "supports_sound": self.platform == "Windows",
        }

    def get_notification_history(self) -> list[dict[str, Any]]:
        """Return a copy of the notification history."""
        with self._lock:
            return list(self._history)
