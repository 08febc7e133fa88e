"""Builders turning an analysis result into the records that get stored."""

from __future__ import annotations

from dam_agent.analysis.content import (
    categorize_content,
    content_hash,
    describe_alert,
    determine_content_type,
)
from dam_agent.analysis.sanitizer import sanitize_content
from dam_agent.model.models import AnalysisResult, SecurityAlert, UsageEvent

ALERT_RISK_LEVELS = frozenset({"high", "critical"})


def build_usage_event(
    result: AnalysisResult, text: str, window: str = ""
) -> UsageEvent:
    return {
        "timestamp": result.timestamp,
        "tool": result.ai_tool_detected or "unknown",
        "risk_level": result.risk_level,
        "content_type": determine_content_type(text),
        "category": categorize_content(text),
        "prompt_length": len(text),
        "content_hash": content_hash(text),
        "sensitive_data_detected": result.sensitive_data_detected,
        "api_key_exposed": "apiKey" in result.sensitive_data_types,
        "compliance_flags": list(result.sensitive_data_types),
        "metadata": {
            "prompt_quality": result.prompt_quality,
            "suggestions_count": len(result.suggestions),
            "has_learning_opportunity": result.learning_opportunity is not None,
            "window": window,
        },
    }


def build_security_alert(result: AnalysisResult, text: str) -> SecurityAlert:
    return {
        "timestamp": result.timestamp,
        "alert_type": (
            "api_key_exposure"
            if "apiKey" in result.sensitive_data_types
            else "sensitive_data"
        ),
        "severity": result.risk_level,
        "description": describe_alert(result),
        "tool": result.ai_tool_detected or "unknown",
        "sanitized_content": sanitize_content(text),
        "action_taken": (
            "suggestions_provided" if result.suggestions else "user_notified"
        ),
        "resolved": False,
    }


def needs_alert(result: AnalysisResult) -> bool:
    """Alerts are stored for high and critical risk only."""
    return result.risk_level in ALERT_RISK_LEVELS


__all__ = ["build_security_alert", "build_usage_event", "needs_alert"]
