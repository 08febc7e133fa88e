"""Active-window classification and the notify gate."""

from __future__ import annotations

import logging
import random
import re

from dam_agent.analysis.patterns import (
    AI_DESKTOP_APP_PATTERNS,
    AI_PLATFORM_URLS,
    BROWSER_KEYWORDS,
    TERMINAL_AI_PATTERNS,
    TERMINAL_KEYWORDS,
    TITLE_PLATFORM_NAMES,
)
from dam_agent.model.models import AnalysisResult, WindowClassification

logger = logging.getLogger(__name__)

POOR_PROMPT_NOTIFY_PROBABILITY = 0.33
LEARNING_NOTIFY_PROBABILITY = 0.2

NOT_AI_WINDOW = WindowClassification(is_ai_window=False)


class AIWindowDetector:
    """Decides whether the focused window is an AI tool interaction.

    Branches are tried in order (browser, terminal, desktop app) and the
    first positive one wins. ``rng`` drives the probabilistic parts of
    :meth:`should_notify`; pass a seeded ``random.Random`` for repeatable
    behaviour.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self._urls = [(re.compile(p, re.I), name) for p, name in AI_PLATFORM_URLS]
        self._terminal = [
            (re.compile(p, re.I), name) for p, name in TERMINAL_AI_PATTERNS
        ]
        self._desktop = [
            (re.compile(p, re.I), name) for p, name in AI_DESKTOP_APP_PATTERNS
        ]

    def classify(self, title: str, text: str = "") -> WindowClassification:
        title = title or ""
        text = text or ""
        for branch in (self._browser, self._terminal_cli, self._desktop_app):
            result = branch(title, text)
            if result.is_ai_window:
                logger.debug("AI window detected: %s", result.platform)
                return result
        return NOT_AI_WINDOW

    def _browser(self, title: str, text: str) -> WindowClassification:
        lowered = title.lower()
        if not any(k in lowered for k in BROWSER_KEYWORDS):
            return NOT_AI_WINDOW

        combined = f"{title} {text}"
        for pattern, platform in self._urls:
            match = pattern.search(combined)
            if match:
                return WindowClassification(
                    is_ai_window=True, platform=platform, url=match.group(0)
                )

        for platform in TITLE_PLATFORM_NAMES:
            if platform.lower() in lowered:
                return WindowClassification(is_ai_window=True, platform=platform)
        return NOT_AI_WINDOW

    def _terminal_cli(self, title: str, text: str) -> WindowClassification:
        lowered = title.lower()
        if not any(k in lowered for k in TERMINAL_KEYWORDS):
            return NOT_AI_WINDOW

        for pattern, platform in self._terminal:
            if pattern.search(text):
                return WindowClassification(
                    is_ai_window=True, platform=platform, app_name="Terminal"
                )
        return NOT_AI_WINDOW

    def _desktop_app(self, title: str, text: str) -> WindowClassification:
        lowered = title.lower()
        for pattern, platform in self._desktop:
            if pattern.search(lowered):
                return WindowClassification(
                    is_ai_window=True, platform=platform, app_name=platform
                )
        return NOT_AI_WINDOW

    def should_notify(
        self, classification: WindowClassification, result: AnalysisResult
    ) -> bool:
        if not classification.is_ai_window:
            return False

        if result.risk_level in ("critical", "high"):
            return True
        if result.sensitive_data_detected:
            return True

        # Coaching nudges are sampled.
        if result.prompt_quality == "poor":
            return self.rng.random() < POOR_PROMPT_NOTIFY_PROBABILITY
        if result.learning_opportunity and result.prompt_quality == "fair":
            return self.rng.random() < LEARNING_NOTIFY_PROBABILITY

        return False


__all__ = ["AIWindowDetector", "NOT_AI_WINDOW"]
