import pytest
from fastapi.testclient import TestClient

from dam_agent.api.main import STATE, app, attach_service
from dam_agent.errors import CaptureError
from dam_agent.watchers.ocr import OCRService


@pytest.fixture
def ocr(monkeypatch):
    """Real OCR service; the API only sends text-carrying samples."""
    monkeypatch.delenv("DAM_TESSERACT_CMD", raising=False)
    return OCRService()


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def client(service, monkeypatch, tmp_path):
    monkeypatch.setenv("DAM_LOG_DIR", str(tmp_path))
    attach_service(service)
    STATE["logs"].clear()
    yield TestClient(app)
    attach_service(None)
    STATE["logs"].clear()


class TestMonitoringEndpoints:
    """Local control API."""

    def test_status(self, client):
        response = client.get("/status")
        assert response.status_code == 200
        assert response.json()["state"] == "stopped"

    def test_start_and_stop(self, client, scheduler):
        response = client.post("/monitoring/start")
        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert response.json()["state"] == "active"
        scheduler.start.assert_called_once()

        response = client.post("/monitoring/stop")
        assert response.json()["state"] == "stopped"
        scheduler.stop.assert_called_once()

    def test_start_failure(self, client, scheduler):
        scheduler.start.side_effect = CaptureError("no display")
        response = client.post("/monitoring/start")
        assert response.status_code == 503
        assert "no display" in response.json()["detail"]

    def test_analyze_text(self, client, api_key):
        """Text checks run through the full pipeline"""
        # When: a key is submitted as a manual check
        response = client.post(
            "/monitoring/analyze",
            json={"window": "Chrome - claude.ai", "text": api_key},
        )

        # Then: the critical result is returned and recorded
        assert response.status_code == 200
        result = response.json()["result"]
        assert result["risk_level"] == "critical"
        assert result["sensitive_data_types"] == ["apiKey"]

        data = client.get("/api/monitoring_data").json()
        assert len(data["usage"]) == 1
        assert data["alerts"][0]["data"]["sanitized_content"] == "[API_KEY_REDACTED]"
        assert data["notifications"][0]["title"] == "Critical Security Risk"
        assert "Manual analysis: risk=critical" in data["logs"]
        assert api_key not in str(data["usage"])

    def test_analyze_live_screen(self, client, scheduler, make_capture):
        scheduler.capture.capture.return_value = make_capture("Chrome - claude.ai", "help")

        response = client.post("/monitoring/analyze")

        assert response.status_code == 200
        assert response.json()["result"]["prompt_quality"] == "poor"

    def test_analyze_capture_failure(self, client, scheduler):
        scheduler.capture.capture.side_effect = CaptureError("no display")
        response = client.post("/monitoring/analyze")
        assert response.status_code == 503


class TestNotificationEndpoints:
    def test_action(self, client):
        response = client.post(
            "/notifications/action",
            json={"action": "copy_improved", "data": "Explain recursion"},
        )
        assert response.json() == {
            "ok": True,
            "action": "copy_improved",
            "improved_prompt": "Explain recursion",
        }

    def test_empty_action_rejected(self, client):
        response = client.post("/notifications/action", json={"action": "  "})
        assert response.status_code == 422

    def test_preferences_roundtrip(self, client):
        assert client.get("/settings/notifications").json()["frequency"] == "minimal"

        response = client.post("/settings/notifications", json={"frequency": "all"})

        assert response.status_code == 200
        assert response.json()["frequency"] == "all"
        assert response.json()["enabled"] is True
        assert client.get("/settings/notifications").json()["frequency"] == "all"

    def test_invalid_preferences(self, client):
        response = client.post("/settings/notifications", json={"position": "left"})
        assert response.status_code == 422


def test_no_service_attached():
    attach_service(None)
    response = TestClient(app).get("/status")
    assert response.status_code == 503
