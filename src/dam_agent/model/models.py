__all__ = [
    "AnalysisResult",
    "CaptureSample",
    "ExtractedText",
    "LearningOpportunity",
    "MonitoringSession",
    "MonitoringState",
    "Notification",
    "NotificationAction",
    "PromptQuality",
    "RiskLevel",
    "SecurityAlert",
    "SensitiveDataResult",
    "Suggestion",
    "TextRegion",
    "UsageEvent",
    "WindowClassification",
]


from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, TypedDict

RiskLevel = Literal["low", "medium", "high", "critical"]
PromptQuality = Literal["poor", "fair", "good", "excellent"]
SuggestionType = Literal["security", "efficiency", "quality", "alternative"]
Priority = Literal["low", "medium", "high"]
LearningType = Literal[
    "prompt_improvement", "tool_suggestion", "security_risk", "efficiency_tip"
]
NotificationType = Literal["warning", "tip", "success", "error"]


class MonitoringState(Enum):
    """Lifecycle states of the monitoring orchestrator."""

    STOPPED = "stopped"
    STARTING = "starting"
    ACTIVE = "active"
    STOPPING = "stopping"


@dataclass(frozen=True)
class CaptureSample:
    """One screen capture. Consumed immediately and never persisted."""

    timestamp: float
    image_data: Any  # PIL.Image.Image, or None for text-only samples
    active_window: str
    screen_id: str
    # Text-only samples (manual API checks, tests) carry their text here
    text_hint: str | None = None


@dataclass(frozen=True)
class TextRegion:
    text: str
    confidence: float
    bbox: dict[str, int]


@dataclass(frozen=True)
class ExtractedText:
    """OCR output. ``confidence`` is advisory only."""

    text: str
    confidence: float
    timestamp: float
    regions: tuple[TextRegion, ...] = ()


@dataclass(frozen=True)
class WindowClassification:
    is_ai_window: bool
    platform: str | None = None
    url: str | None = None
    app_name: str | None = None


@dataclass(frozen=True)
class SensitiveDataResult:
    detected: bool
    types: tuple[str, ...] = ()


@dataclass(frozen=True)
class Suggestion:
    type: SuggestionType
    title: str
    description: str
    actionable: bool
    priority: Priority
    improved_prompt: str | None = None
    learning_resource: str | None = None
    can_rewrite: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "actionable": self.actionable,
            "priority": self.priority,
            "improved_prompt": self.improved_prompt,
            "learning_resource": self.learning_resource,
            "can_rewrite": self.can_rewrite,
        }


@dataclass(frozen=True)
class LearningOpportunity:
    type: LearningType
    title: str
    description: str
    example: str | None = None
    resources: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "example": self.example,
            "resources": list(self.resources),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one text sample.

    ``suggestions`` keeps generation order: security, then quality, then
    efficiency.
    """

    timestamp: float
    risk_level: RiskLevel
    sensitive_data_detected: bool
    sensitive_data_types: tuple[str, ...]
    ai_tool_detected: str | None
    prompt_quality: PromptQuality
    suggestions: tuple[Suggestion, ...] = ()
    learning_opportunity: LearningOpportunity | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "risk_level": self.risk_level,
            "sensitive_data_detected": self.sensitive_data_detected,
            "sensitive_data_types": list(self.sensitive_data_types),
            "ai_tool_detected": self.ai_tool_detected,
            "prompt_quality": self.prompt_quality,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "learning_opportunity": (
                self.learning_opportunity.to_dict()
                if self.learning_opportunity
                else None
            ),
        }


@dataclass
class MonitoringSession:
    id: int
    start_time: str
    end_time: str | None = None
    total_usage: int = 0
    total_cost: float = 0.0


@dataclass(frozen=True)
class NotificationAction:
    label: str
    action: str
    primary: bool = False
    data: Any = None


@dataclass(frozen=True)
class Notification:
    """Content and actions of one notification; rendering is the sink's job.

    ``duration`` is in milliseconds, ``None`` keeps the notification open
    until the user acts on it.
    """

    type: NotificationType
    title: str
    message: str
    suggestions: tuple[Suggestion, ...] = ()
    learning_opportunity: LearningOpportunity | None = None
    actions: tuple[NotificationAction, ...] = ()
    position: str = "bottom-right"
    duration: int | None = 10_000

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "learning_opportunity": (
                self.learning_opportunity.to_dict()
                if self.learning_opportunity
                else None
            ),
            "actions": [
                {
                    "label": a.label,
                    "action": a.action,
                    "primary": a.primary,
                    "data": a.data,
                }
                for a in self.actions
            ],
            "position": self.position,
            "duration": self.duration,
        }


class UsageEvent(TypedDict):
    """AI usage record handed to the persistence and dashboard sinks."""

    timestamp: float
    tool: str
    risk_level: str
    content_type: str  # "code", "text", "data", "image"
    category: str
    prompt_length: int
    content_hash: str
    sensitive_data_detected: bool
    api_key_exposed: bool
    compliance_flags: list[str]
    metadata: dict[str, Any]


class SecurityAlert(TypedDict):
    """Security alert record. ``sanitized_content`` is already redacted."""

    timestamp: float
    alert_type: str  # "api_key_exposure", "sensitive_data"
    severity: str
    description: str
    tool: str
    sanitized_content: str
    action_taken: str
    resolved: bool
