"""Analysis of one extracted text sample plus the record helpers around it."""

from __future__ import annotations

import hashlib
import logging
import time

from dam_agent.analysis.ai_tools import AIToolDetector
from dam_agent.analysis.patterns import CONTENT_CATEGORIES, CONTENT_TYPES
from dam_agent.analysis.prompt_quality import assess_prompt_quality
from dam_agent.analysis.risk import calculate_risk_level
from dam_agent.analysis.sensitive import SensitiveDataDetector
from dam_agent.analysis.suggestions import (
    generate_suggestions,
    identify_learning_opportunity,
)
from dam_agent.model.models import AnalysisResult, CaptureSample

logger = logging.getLogger(__name__)

ALERT_DESCRIPTIONS = [
    ("apiKey", "API key detected in prompt"),
    ("ssn", "Social Security Number detected"),
    ("creditCard", "Credit card number detected"),
    ("email", "Email address detected"),
    ("password", "Password detected"),
]


class AIContentAnalyzer:
    """Pure analysis pipeline: tool, sensitive data, quality, risk, coaching."""

    def __init__(
        self,
        tool_detector: AIToolDetector | None = None,
        sensitive_detector: SensitiveDataDetector | None = None,
    ):
        self.tool_detector = tool_detector or AIToolDetector()
        self.sensitive_detector = sensitive_detector or SensitiveDataDetector()

    def analyze(self, capture: CaptureSample, text: str) -> AnalysisResult:
        ai_tool = self.tool_detector.detect(capture.active_window, text)
        sensitive = self.sensitive_detector.detect(text)
        # Without a tool there is no prompt to coach.
        quality = assess_prompt_quality(text) if ai_tool else "good"
        risk = calculate_risk_level(ai_tool, sensitive.types)

        result = AnalysisResult(
            timestamp=capture.timestamp or time.time(),
            risk_level=risk,
            sensitive_data_detected=sensitive.detected,
            sensitive_data_types=sensitive.types,
            ai_tool_detected=ai_tool,
            prompt_quality=quality,
            suggestions=generate_suggestions(ai_tool, sensitive, quality, text),
            learning_opportunity=identify_learning_opportunity(
                ai_tool, quality, sensitive, text
            ),
        )
        logger.debug(
            "Analyzed %d chars: tool=%s risk=%s quality=%s types=%s",
            len(text),
            ai_tool,
            risk,
            quality,
            ",".join(sensitive.types) or "-",
        )
        return result


def categorize_content(text: str) -> str:
    lowered = text.lower()
    for category, keywords in CONTENT_CATEGORIES:
        if any(k in lowered for k in keywords):
            return category
    return "other"


def determine_content_type(text: str) -> str:
    for content_type, markers in CONTENT_TYPES:
        if any(m in text for m in markers):
            return content_type
    return "text"


def content_hash(text: str) -> str:
    """Stable 16-hex-digit fingerprint; the text itself is never stored."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def describe_alert(result: AnalysisResult) -> str:
    parts = [
        description
        for data_type, description in ALERT_DESCRIPTIONS
        if data_type in result.sensitive_data_types
    ]
    if parts:
        return ", ".join(parts)
    return f"{result.risk_level} risk activity detected in AI interaction"


__all__ = [
    "AIContentAnalyzer",
    "categorize_content",
    "content_hash",
    "describe_alert",
    "determine_content_type",
]
