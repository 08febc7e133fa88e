"""Monitoring orchestrator: one pipeline run per capture tick.

tick -> analysis throttle -> window gate -> OCR -> analysis -> persist and
sync -> notify gate -> notification throttle -> policy -> notification sink
"""

from __future__ import annotations

import logging
import random
import threading
import time
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from dam_agent.analysis.content import AIContentAnalyzer
from dam_agent.analysis.window import AIWindowDetector
from dam_agent.config.settings import (
    CONFIG_FILE_NAME,
    AgentSettings,
    ConfigStore,
    MonitoringConfig,
    NotificationSettings,
)
from dam_agent.model.models import (
    AnalysisResult,
    CaptureSample,
    MonitoringSession,
    MonitoringState,
)
from dam_agent.monitoring.policy import NotificationPolicy
from dam_agent.storage.db import AgentDatabase
from dam_agent.storage.records import (
    build_security_alert,
    build_usage_event,
    needs_alert,
)
from dam_agent.sync.dashboard import DashboardSyncService
from dam_agent.ui.notifications import NotificationService
from dam_agent.watchers.ocr import OCRService
from dam_agent.watchers.scheduler import CaptureScheduler
from dam_agent.watchers.screen_capture import ScreenCapture

logger = logging.getLogger(__name__)

MANUAL_TRIGGER_WAIT_SECONDS = 30.0


class MonitoringService:
    """Owns the monitoring lifecycle and runs the per-tick pipeline.

    All collaborators are injected; :func:`build_monitoring_service` wires
    the production ones. ``clock`` must be monotonic.
    """

    def __init__(
        self,
        *,
        scheduler: CaptureScheduler,
        ocr: OCRService,
        database: AgentDatabase,
        notifier: NotificationService,
        notification_settings: NotificationSettings,
        analyzer: AIContentAnalyzer | None = None,
        window_detector: AIWindowDetector | None = None,
        policy: NotificationPolicy | None = None,
        sync: DashboardSyncService | None = None,
        config: MonitoringConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.scheduler = scheduler
        self.ocr = ocr
        self.database = database
        self.notifier = notifier
        self.notification_settings = notification_settings
        self.analyzer = analyzer or AIContentAnalyzer()
        self.window_detector = window_detector or AIWindowDetector()
        self.policy = policy or NotificationPolicy()
        self.sync = sync
        self.config = config or MonitoringConfig()
        self.clock = clock

        self.state = MonitoringState.STOPPED
        self.session: MonitoringSession | None = None
        self.last_result: AnalysisResult | None = None
        self._last_analysis_time: float | None = None
        self._last_notification_time: float | None = None
        self._last_alert_id: int | None = None
        self._state_lock = threading.Lock()
        self._busy = threading.Lock()

    @property
    def is_monitoring(self) -> bool:
        return self.state is MonitoringState.ACTIVE

    # --- lifecycle ---

    def start(self) -> None:
        with self._state_lock:
            if self.state is not MonitoringState.STOPPED:
                logger.warning("Monitoring already %s", self.state.value)
                return
            self.state = MonitoringState.STARTING
            try:
                self.session = self.database.start_session()
                self.scheduler.start(
                    self.analyze_capture, interval=self.config.interval_seconds
                )
                if self.sync is not None:
                    self.sync.start()
            except Exception:
                logger.exception("Failed to start monitoring")
                if self.session is not None:
                    self.database.end_session(self.session.id)
                    self.session = None
                self.state = MonitoringState.STOPPED
                raise
            self.state = MonitoringState.ACTIVE
        logger.info("Monitoring started")

    def stop(self) -> None:
        with self._state_lock:
            if self.state is MonitoringState.STOPPED:
                logger.warning("Monitoring is not running")
                return
            self.state = MonitoringState.STOPPING
            try:
                self.scheduler.stop()
                if self.session is not None:
                    self.database.end_session(self.session.id)
            finally:
                self.session = None
                self.state = MonitoringState.STOPPED
        logger.info("Monitoring stopped")

    # --- pipeline ---

    def analyze_capture(self, capture: CaptureSample) -> AnalysisResult | None:
        """Scheduler callback. Never raises; failures abandon the tick."""
        if not self._busy.acquire(blocking=False):
            logger.debug("Previous analysis still running, skipping tick")
            return None
        try:
            now = self.clock()
            if (
                self._last_analysis_time is not None
                and now - self._last_analysis_time < self.config.analysis_throttle_seconds
            ):
                return None
            self._last_analysis_time = now

            classification = self.window_detector.classify(capture.active_window, "")
            if not classification.is_ai_window:
                logger.info("Not an AI window, skipping analysis: %s", capture.active_window)
                return None
            logger.info(
                "Analyzing AI window: %s - %s",
                classification.platform,
                capture.active_window,
            )

            result = self._analyze(capture)
            if result is None:
                return None

            if self.window_detector.should_notify(classification, result):
                if self._can_notify():
                    self._dispatch(result)
            return result
        except Exception:
            logger.exception("Error during screen analysis")
            return None
        finally:
            self._busy.release()

    def trigger_analysis(self, capture: CaptureSample | None = None) -> AnalysisResult | None:
        """Manual check of one sample.

        Skips the window gate, both throttles and the notify gate. Provider
        errors propagate to the caller.
        """
        if not self._busy.acquire(timeout=MANUAL_TRIGGER_WAIT_SECONDS):
            logger.warning("Analysis busy, manual trigger dropped")
            return None
        try:
            if capture is None:
                capture = self.scheduler.capture.capture()
            result = self._analyze(capture)
            if result is not None and self.notification_settings.get_preferences().enabled:
                self._dispatch(result)
            return result
        finally:
            self._busy.release()

    def _analyze(self, capture: CaptureSample) -> AnalysisResult | None:
        extracted = self.ocr.extract_text(capture)
        logger.info("OCR extracted %d characters of text", len(extracted.text))
        if not extracted.text.strip():
            logger.info("No text extracted, skipping analysis")
            return None

        result = self.analyzer.analyze(capture, extracted.text)
        logger.info(
            "Analysis complete - Risk: %s, AI Tool: %s, Prompt Quality: %s",
            result.risk_level,
            result.ai_tool_detected,
            result.prompt_quality,
        )
        self._record(result, extracted.text, capture.active_window)
        self.last_result = result
        return result

    def _record(self, result: AnalysisResult, text: str, window: str) -> None:
        session_id = self.session.id if self.session else None
        event = build_usage_event(result, text, window)
        alert = build_security_alert(result, text)

        if result.ai_tool_detected:
            self.database.record_usage(event, session_id)
        if needs_alert(result):
            self._last_alert_id = self.database.record_alert(alert, session_id)

        if self.sync is not None:
            self.sync.record_usage_event(event)
            # The dashboard also wants medium-risk sensitive data.
            if needs_alert(result) or (
                result.sensitive_data_detected and result.ai_tool_detected
            ):
                self.sync.record_security_alert(alert)

    def _can_notify(self) -> bool:
        if self._last_notification_time is not None:
            elapsed = self.clock() - self._last_notification_time
            if elapsed < self.config.notification_throttle_seconds:
                return False
        return self.notification_settings.get_preferences().enabled

    def _dispatch(self, result: AnalysisResult) -> None:
        prefs = self.notification_settings.get_preferences()
        notification = self.policy.select(result, prefs)
        if notification is None:
            return
        self._last_notification_time = self.clock()
        self.notifier.show(notification)

    # --- queries and callbacks ---

    def handle_notification_action(self, action: str, data: Any = None) -> dict[str, Any]:
        logger.info("Notification action: %s", action)
        outcome = self.notifier.handle_action(action, data)
        if action == "remove_sensitive" and self._last_alert_id is not None:
            outcome["alert_resolved"] = self.database.resolve_alert(self._last_alert_id)
            self._last_alert_id = None
        return outcome

    def get_status(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "is_monitoring": self.is_monitoring,
            "session": asdict(self.session) if self.session else None,
            "interval_seconds": self.config.interval_seconds,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "sync": self.sync.get_queue_status() if self.sync else None,
        }

    def close(self) -> None:
        if self.state is not MonitoringState.STOPPED:
            self.stop()
        if self.sync is not None:
            self.sync.close()
        self.database.close()


def build_monitoring_service(
    settings: AgentSettings | None = None,
    store: ConfigStore | None = None,
    rng: random.Random | None = None,
) -> MonitoringService:
    """Wire the production providers from environment and stored config."""
    settings = settings or AgentSettings.from_env()
    store = store or ConfigStore(settings.config_dir / CONFIG_FILE_NAME)
    rng = rng or random.Random()

    enterprise = store.enterprise(settings)
    sync = DashboardSyncService(enterprise) if enterprise.active else None

    return MonitoringService(
        scheduler=CaptureScheduler(ScreenCapture()),
        ocr=OCRService(settings.tesseract_cmd),
        database=AgentDatabase(settings.db_path),
        notifier=NotificationService(),
        notification_settings=NotificationSettings(store),
        window_detector=AIWindowDetector(rng),
        policy=NotificationPolicy(rng),
        sync=sync,
        config=store.monitoring(),
    )


__all__ = ["MonitoringService", "build_monitoring_service"]
