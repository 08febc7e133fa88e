"""FastAPI app exposing local control of the DAM monitoring agent."""

import logging
import time
from collections import deque
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from dam_agent.errors import ConfigError, DamAgentError
from dam_agent.model.models import CaptureSample
from dam_agent.monitoring.service import MonitoringService, build_monitoring_service
from dam_agent.watchers.logger import read_log_tail

logger = logging.getLogger(__name__)

app = FastAPI(
    title="DAM Desktop Agent",
    description="Local control API for AI usage monitoring",
)

STATE: dict[str, Any] = {
    "service": None,
    "logs": deque(maxlen=100),
}

# --- logging ---


def log_message(message: str) -> None:
    """Log and keep the line for the monitoring endpoint."""
    STATE["logs"].append(message)
    logger.info(message)


# --- Pydantic models ---


class AnalyzeRequest(BaseModel):
    """Manual check of a text sample instead of the live screen."""

    window: str = "Manual Check"
    text: str | None = None


class NotificationActionRequest(BaseModel):
    action: str
    data: Any = None

    @field_validator("action")
    @classmethod
    def action_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "action must not be empty"
            raise ValueError(msg)
        return v.strip()


class NotificationPreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    enabled: bool | None = None
    critical_alerts: bool | None = None
    security_warnings: bool | None = None
    prompt_suggestions: bool | None = None
    learning_tips: bool | None = None
    frequency: str | None = None
    sound_enabled: bool | None = None
    position: str | None = None


# --- lifecycle ---


def attach_service(service: MonitoringService | None) -> None:
    STATE["service"] = service


def get_service() -> MonitoringService:
    service: MonitoringService | None = STATE["service"]
    if service is None:
        raise HTTPException(status_code=503, detail="Monitoring service not available")
    return service


# Deprecated on_event usage is temporarily retained for simplicity.
@app.on_event("startup")  # pyright: ignore[reportDeprecated]
async def startup_event() -> None:
    """Build the monitoring service unless one was attached already."""
    if STATE["service"] is None:
        STATE["service"] = build_monitoring_service()
    log_message("Monitoring service ready")


@app.on_event("shutdown")  # pyright: ignore[reportDeprecated]
async def shutdown_event() -> None:
    service: MonitoringService | None = STATE["service"]
    if service is not None and service.is_monitoring:
        service.stop()


# --- endpoints ---


@app.get("/status")
async def get_current_status() -> dict[str, Any]:
    return get_service().get_status()


@app.post("/monitoring/start")
def start_monitoring() -> dict[str, Any]:
    service = get_service()
    try:
        service.start()
    except DamAgentError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    log_message("Monitoring started via API")
    return {"ok": True, **service.get_status()}


@app.post("/monitoring/stop")
def stop_monitoring() -> dict[str, Any]:
    service = get_service()
    service.stop()
    log_message("Monitoring stopped via API")
    return {"ok": True, **service.get_status()}


@app.post("/monitoring/analyze")
def analyze_now(req: AnalyzeRequest | None = None) -> dict[str, Any]:
    """Run one analysis now, on the given text or on the live screen."""
    service = get_service()
    capture = None
    if req is not None and req.text is not None:
        capture = CaptureSample(
            timestamp=time.time(),
            image_data=None,
            active_window=req.window,
            screen_id="manual",
            text_hint=req.text,
        )
    try:
        result = service.trigger_analysis(capture)
    except DamAgentError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    log_message(
        f"Manual analysis: risk={result.risk_level if result else 'N/A'}"
    )
    return {"ok": True, "result": result.to_dict() if result else None}


@app.post("/notifications/action")
def notification_action(req: NotificationActionRequest) -> dict[str, Any]:
    outcome = get_service().handle_notification_action(req.action, req.data)
    return {"ok": True, **outcome}


@app.get("/settings/notifications")
async def get_notification_settings() -> dict[str, Any]:
    return get_service().notification_settings.get_preferences().model_dump()


@app.post("/settings/notifications")
def save_notification_settings(req: NotificationPreferencesUpdate) -> dict[str, Any]:
    settings = get_service().notification_settings
    try:
        saved = settings.save_preferences(**req.model_dump(exclude_none=True))
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    log_message("Notification preferences updated")
    return saved.model_dump()


@app.get("/api/monitoring_data")
def get_monitoring_data() -> dict[str, Any]:
    """Recent records and logs for a monitoring UI."""
    service = get_service()
    return {
        "status": service.get_status(),
        "usage": service.database.recent_usage(),
        "alerts": service.database.recent_alerts(),
        "notifications": service.notifier.get_notification_history(),
        "logs": list(STATE["logs"]),
        "agent_logs": read_log_tail(),
    }
