from unittest.mock import patch

import pytest

import dam_agent.ui.notifications as notifications_module
from dam_agent.model.models import (
    LearningOpportunity,
    Notification,
    NotificationAction,
    Suggestion,
)
from dam_agent.ui.notifications import (
    DEFAULT_LEARNING_URL,
    HISTORY_LIMIT,
    NotificationConfig,
    NotificationService,
)

QUALITY = Suggestion(
    type="quality",
    title="Your Prompt Needs Improvement",
    description="too vague",
    actionable=True,
    priority="high",
    improved_prompt="I need help with [specific topic/task].",
    learning_resource="https://docs.anthropic.com/claude/docs/prompt-engineering",
    can_rewrite=True,
)


def make_notification(**overrides):
    fields = {
        "type": "tip",
        "title": "Improve Your Prompt",
        "message": "DAM can help make your prompt more effective.",
        "suggestions": (QUALITY,),
        "actions": (NotificationAction(label="Learn More", action="learn_more"),),
    }
    fields.update(overrides)
    return Notification(**fields)


class TestNotificationService:
    """Notification sink and action handling."""

    def test_platform_detection(self):
        with patch("platform.system", return_value="Linux"):
            service = NotificationService()
            assert service.platform == "Linux"
            assert service.get_capabilities()["supports_toast"] is False

    def test_show_records_history_off_windows(self, notifier):
        """Outside Windows the notification is recorded but not delivered"""
        # When: a notification is shown
        delivered = notifier.show(make_notification())

        # Then: it is kept in the history
        assert delivered is False
        (entry,) = notifier.get_notification_history()
        assert entry["title"] == "Improve Your Prompt"
        assert entry["delivered"] is False
        assert entry["sound"] is False
        assert notifier.current.title == "Improve Your Prompt"

    def test_history_is_bounded(self, notifier):
        for i in range(HISTORY_LIMIT + 5):
            notifier.show(make_notification(title=f"n{i}"))
        history = notifier.get_notification_history()
        assert len(history) == HISTORY_LIMIT
        assert history[0]["title"] == "n5"

    @pytest.mark.parametrize(("duration", "seconds"), [(10_000, 10), (None, 60)])
    def test_windows_toast(self, duration, seconds):
        """Sticky notifications stay up for the longest toast duration"""
        with patch.object(notifications_module, "ToastNotifier", create=True) as mock_toaster:
            mock_toaster.return_value.show_toast.return_value = True
            service = NotificationService()
            service.platform = "Windows"

            delivered = service.show(make_notification(duration=duration))

        assert delivered is True
        mock_toaster.return_value.show_toast.assert_called_once_with(
            "Improve Your Prompt",
            "DAM can help make your prompt more effective.",
            duration=seconds,
            threaded=True,
        )


class TestHandleAction:
    def test_learn_more_opens_suggestion_resource(self):
        with patch("webbrowser.open") as mock_open:
            service = NotificationService(NotificationConfig(open_links=True))
            service.platform = "Linux"
            service.show(make_notification())

            outcome = service.handle_action("learn_more")

        assert outcome == {"action": "learn_more", "url": QUALITY.learning_resource}
        mock_open.assert_called_once_with(QUALITY.learning_resource)
        assert service.current is None

    def test_open_training_uses_learning_resources(self, notifier):
        opportunity = LearningOpportunity(
            type="security_risk",
            title="Data Privacy Best Practices",
            description="d",
            resources=("https://dam.ai/learn/data-privacy",),
        )
        notifier.show(make_notification(suggestions=(), learning_opportunity=opportunity))

        outcome = notifier.handle_action("open_training")

        assert outcome["url"] == "https://dam.ai/learn/data-privacy"

    def test_learn_more_without_notification(self, notifier):
        assert notifier.handle_action("learn_more")["url"] == DEFAULT_LEARNING_URL

    def test_explicit_url_wins(self, notifier):
        outcome = notifier.handle_action("learn_more", "https://example.com/guide")
        assert outcome["url"] == "https://example.com/guide"

    def test_copy_improved(self, notifier):
        outcome = notifier.handle_action("copy_improved", QUALITY.improved_prompt)
        assert outcome == {"action": "copy_improved", "improved_prompt": QUALITY.improved_prompt}

    def test_view_details(self, notifier):
        notifier.show(make_notification(type="warning", title="Security Risk Detected"))
        outcome = notifier.handle_action("view_details")
        assert outcome["notification"]["title"] == "Security Risk Detected"

    def test_dismiss(self, notifier):
        notifier.show(make_notification())
        assert notifier.handle_action("dismiss") == {"action": "dismiss"}
        assert notifier.current is None
