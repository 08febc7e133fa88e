"""Selection of the single notification to show for an analysis result."""

from __future__ import annotations

import random

from dam_agent.config.settings import NotificationPreferences, frequency_multiplier
from dam_agent.model.models import AnalysisResult, Notification, NotificationAction

PROMPT_TIP_DURATION_MS = 10_000
LEARNING_TIP_DURATION_MS = 8_000
LEARNING_TIP_FACTOR = 0.5

DISMISS = NotificationAction(label="Dismiss", action="dismiss")


class NotificationPolicy:
    """Priority order: critical alert, high-risk warning, prompt tip, learning tip.

    Tips are gated by a draw from ``rng`` against the frequency multiplier
    of the user's preferences.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def select(
        self, result: AnalysisResult, prefs: NotificationPreferences
    ) -> Notification | None:
        multiplier = frequency_multiplier(prefs.frequency)

        if result.risk_level == "critical" and prefs.critical_alerts:
            return Notification(
                type="error",
                title="Critical Security Risk",
                message=(
                    "You're about to share sensitive data "
                    f"({', '.join(result.sensitive_data_types)}) with an AI "
                    "service. This could violate privacy policies."
                ),
                suggestions=result.suggestions,
                actions=(
                    NotificationAction(
                        label="Remove Sensitive Data",
                        action="remove_sensitive",
                        primary=True,
                    ),
                    NotificationAction(label="I Understand the Risk", action="dismiss"),
                ),
                position=prefs.position,
                duration=None,
            )

        if result.risk_level == "high" and prefs.security_warnings:
            return Notification(
                type="warning",
                title="Security Risk Detected",
                message="Sensitive information detected in your AI conversation.",
                suggestions=result.suggestions,
                actions=(
                    NotificationAction(
                        label="View Details", action="view_details", primary=True
                    ),
                    DISMISS,
                ),
                position=prefs.position,
            )

        if prefs.prompt_suggestions and self.rng.random() < multiplier:
            quality = [
                s for s in result.suggestions if s.type == "quality" and s.improved_prompt
            ]
            if quality:
                return Notification(
                    type="tip",
                    title="Improve Your Prompt",
                    message="DAM can help make your prompt more effective.",
                    suggestions=tuple(quality),
                    actions=(
                        NotificationAction(
                            label="Copy Improved Prompt",
                            action="copy_improved",
                            primary=True,
                            data=quality[0].improved_prompt,
                        ),
                        NotificationAction(label="Learn More", action="learn_more"),
                        DISMISS,
                    ),
                    position=prefs.position,
                    duration=PROMPT_TIP_DURATION_MS,
                )

        if (
            prefs.learning_tips
            and result.learning_opportunity is not None
            and self.rng.random() < multiplier * LEARNING_TIP_FACTOR
        ):
            opportunity = result.learning_opportunity
            return Notification(
                type="tip",
                title=opportunity.title,
                message=opportunity.description,
                learning_opportunity=opportunity,
                actions=(
                    NotificationAction(
                        label="Learn More", action="open_training", primary=True
                    ),
                    NotificationAction(label="Not Now", action="dismiss"),
                ),
                position=prefs.position,
                duration=LEARNING_TIP_DURATION_MS,
            )

        return None


__all__ = ["NotificationPolicy"]
