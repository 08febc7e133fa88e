import random
import time
from unittest.mock import Mock

import pytest

from dam_agent.analysis.window import AIWindowDetector
from dam_agent.config.settings import ConfigStore, NotificationSettings
from dam_agent.model.models import CaptureSample, ExtractedText
from dam_agent.monitoring.policy import NotificationPolicy
from dam_agent.monitoring.service import MonitoringService
from dam_agent.storage.db import AgentDatabase
from dam_agent.ui.notifications import NotificationConfig, NotificationService
from dam_agent.watchers.ocr import OCRService
from dam_agent.watchers.scheduler import CaptureScheduler

API_KEY = "sk-abcd1234567890123456789012345678901234567890ab"


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_capture(window: str, text: str | None = None) -> CaptureSample:
    return CaptureSample(
        timestamp=time.time(),
        image_data=None,
        active_window=window,
        screen_id="primary",
        text_hint=text,
    )


@pytest.fixture(name="make_capture")
def make_capture_fixture():
    return make_capture


@pytest.fixture
def api_key():
    return API_KEY


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config_store(tmp_path):
    return ConfigStore(tmp_path / "config.json")


@pytest.fixture
def database():
    db = AgentDatabase(":memory:")
    yield db
    db.close()


@pytest.fixture
def notifier():
    """Notification sink that never pops a real toast."""
    service = NotificationService(NotificationConfig(open_links=False))
    service.platform = "Linux"
    return service


@pytest.fixture
def ocr():
    """OCR provider mock; set ``ocr.text`` to change what it returns."""
    provider = Mock(spec=OCRService)

    def extract(capture):
        return ExtractedText(text=provider.text, confidence=0.9, timestamp=capture.timestamp)

    provider.text = ""
    provider.extract_text.side_effect = extract
    return provider


@pytest.fixture
def scheduler():
    mock = Mock(spec=CaptureScheduler)
    mock.capture = Mock()
    return mock


@pytest.fixture
def make_service(scheduler, ocr, database, notifier, config_store, clock):
    def _make(seed: int = 0, sync=None) -> MonitoringService:
        rng = random.Random(seed)
        return MonitoringService(
            scheduler=scheduler,
            ocr=ocr,
            database=database,
            notifier=notifier,
            notification_settings=NotificationSettings(config_store),
            window_detector=AIWindowDetector(rng),
            policy=NotificationPolicy(rng),
            sync=sync,
            clock=clock,
        )

    return _make
