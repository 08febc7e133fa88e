"""Forwarding of usage events and security alerts to the enterprise dashboard.

The dashboard is an opaque HTTP endpoint. Records are queued in memory and
POSTed as one JSON batch; risky records trigger an immediate flush, the
rest go out with the periodic flush.
"""

from __future__ import annotations

import logging
import platform
import sys
import threading
import time
import uuid
from typing import Any

import requests

from dam_agent import __version__
from dam_agent.config.settings import EnterpriseSettings
from dam_agent.model.models import SecurityAlert, UsageEvent

logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_OK = 200

REQUEST_TIMEOUT_SECONDS = 10
MAX_QUEUED_EVENTS = 1000
KEPT_EVENTS = 500
MAX_QUEUED_ALERTS = 100
KEPT_ALERTS = 50


class DashboardSyncService:
    def __init__(
        self,
        settings: EnterpriseSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.usage_queue: list[dict[str, Any]] = []
        self.alert_queue: list[dict[str, Any]] = []
        self.last_sync_time: float = 0.0
        self._lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def enabled(self) -> bool:
        return self.settings.active

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
            "X-Dam-Client": "desktop",
            "X-Dam-Version": __version__,
        }

    # --- queueing ---

    def record_usage_event(self, event: UsageEvent) -> None:
        if not self.enabled:
            return
        item = {"id": _new_id(), **event}
        with self._lock:
            self.usage_queue.append(item)
        logger.info("Usage event queued for sync: %s", item["id"])

        if (
            event["risk_level"] in ("high", "critical")
            or event["sensitive_data_detected"]
            or event["api_key_exposed"]
        ):
            self.sync()

    def record_security_alert(self, alert: SecurityAlert) -> None:
        if not self.enabled:
            return
        item = {"id": _new_id(), **alert}
        with self._lock:
            self.alert_queue.append(item)
        logger.warning("Security alert queued for sync: %s", item["id"])

        if alert["severity"] in ("high", "critical"):
            self.sync()

    # --- sending ---

    def sync(self) -> bool:
        """POST everything queued. Returns True when the batch was accepted.

        Called from the capture thread (immediate flush) and the periodic
        flush thread; one batch is in flight at a time.
        """
        if not self.enabled:
            return False
        with self._send_lock:
            return self._send_batch()

    def _send_batch(self) -> bool:
        with self._lock:
            if not self.usage_queue and not self.alert_queue:
                return True
            events = list(self.usage_queue)
            alerts = list(self.alert_queue)

        payload = {
            "organizationId": self.settings.organization_id,
            "usageEvents": events,
            "securityAlerts": alerts,
            "lastSyncTime": self.last_sync_time,
            "clientVersion": __version__,
            "deviceInfo": {
                "platform": sys.platform,
                "arch": platform.machine(),
                "pythonVersion": platform.python_version(),
            },
        }
        try:
            response = self.session.post(
                f"{self.settings.dashboard_url}/api/desktop-sync",
                json=payload,
                headers=self._headers(),
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            status_code = int(getattr(response, "status_code", 0))
            if status_code != HTTP_OK:
                msg = f"Sync failed with status: {status_code}"
                raise requests.HTTPError(msg, response=response)
        except requests.RequestException:
            logger.exception("Dashboard sync failed")
            self._trim_queues()
            return False

        with self._lock:
            # Records queued during the request stay for the next batch.
            del self.usage_queue[: len(events)]
            del self.alert_queue[: len(alerts)]
            self.last_sync_time = time.time()
        logger.info("Sync successful: %d events, %d alerts", len(events), len(alerts))
        return True

    def _trim_queues(self) -> None:
        with self._lock:
            if len(self.usage_queue) > MAX_QUEUED_EVENTS:
                self.usage_queue = self.usage_queue[-KEPT_EVENTS:]
            if len(self.alert_queue) > MAX_QUEUED_ALERTS:
                self.alert_queue = self.alert_queue[-KEPT_ALERTS:]

    def test_connection(self) -> bool:
        if not self.enabled:
            return False
        try:
            response = self.session.post(
                f"{self.settings.dashboard_url}/api/test-connection",
                json={
                    "organizationId": self.settings.organization_id,
                    "clientType": "desktop",
                },
                headers=self._headers(),
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException:
            logger.exception("Dashboard connection test failed")
            return False
        return int(getattr(response, "status_code", 0)) == HTTP_OK

    def get_queue_status(self) -> dict[str, Any]:
        with self._lock:
            return {
                "events": len(self.usage_queue),
                "alerts": len(self.alert_queue),
                "last_sync": self.last_sync_time,
            }

    # --- periodic flush ---

    def start(self) -> None:
        if not self.enabled or self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="dam-dashboard-sync", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self.settings.sync_interval_seconds):
            self.sync()

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=REQUEST_TIMEOUT_SECONDS)
            self._thread = None
        self.session.close()


def _new_id() -> str:
    return f"dam_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


__all__ = ["DashboardSyncService"]
