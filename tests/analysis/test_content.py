import pytest

from dam_agent.analysis.content import (
    AIContentAnalyzer,
    categorize_content,
    content_hash,
    describe_alert,
    determine_content_type,
)
from dam_agent.model.models import AnalysisResult


def make_result(types, risk="critical"):
    return AnalysisResult(
        timestamp=0.0,
        risk_level=risk,
        sensitive_data_detected=bool(types),
        sensitive_data_types=tuple(types),
        ai_tool_detected="claude",
        prompt_quality="good",
    )


class TestAIContentAnalyzer:
    """Full analysis of one text sample."""

    @pytest.fixture
    def analyzer(self):
        return AIContentAnalyzer()

    def test_api_key_on_claude(self, analyzer, make_capture, api_key):
        """Key pasted into claude.ai is critical and gets security coaching"""
        # Given: a Claude tab with an API key on screen
        capture = make_capture("Chrome - claude.ai")

        # When: the text is analyzed
        result = analyzer.analyze(capture, api_key)

        # Then: critical risk with security and alternative suggestions
        assert result.ai_tool_detected == "claude"
        assert result.sensitive_data_detected is True
        assert "apiKey" in result.sensitive_data_types
        assert result.risk_level == "critical"
        types = [s.type for s in result.suggestions]
        assert "security" in types
        assert "alternative" in types
        assert result.learning_opportunity.type == "security_risk"
        assert result.timestamp == capture.timestamp

    def test_no_tool_is_low_and_uncoached(self, analyzer, make_capture):
        """Outside AI tools sensitive data is noted but risk stays low"""
        result = analyzer.analyze(make_capture("Notepad"), "SSN 123-45-6789")
        assert result.risk_level == "low"
        assert result.sensitive_data_detected is True
        assert result.prompt_quality == "good"
        assert result.suggestions == ()
        assert result.learning_opportunity is None

    def test_poor_prompt_on_tool(self, analyzer, make_capture):
        result = analyzer.analyze(make_capture("ChatGPT - Google Chrome"), "help")
        assert result.prompt_quality == "poor"
        assert result.risk_level == "low"
        assert [s.type for s in result.suggestions] == ["quality"]

    def test_to_dict_lists(self, analyzer, make_capture, api_key):
        data = analyzer.analyze(make_capture("Chrome - claude.ai"), api_key).to_dict()
        assert data["sensitive_data_types"] == ["apiKey"]
        assert data["suggestions"][0]["type"] == "security"


class TestContentHelpers:
    @pytest.mark.parametrize(
        ("text", "category"),
        [
            ("debug this function", "code_generation"),
            ("write an email to my boss", "writing_editing"),
            ("research the market", "analysis_research"),
            ("solve my problem", "problem_solving"),
            ("design a logo", "creative_tasks"),
            ("nothing here", "other"),
        ],
    )
    def test_categorize_content(self, text, category):
        assert categorize_content(text) == category

    @pytest.mark.parametrize(
        ("text", "content_type"),
        [
            ("import os", "code"),
            ("load the csv", "data"),
            ("a photo of a dog", "image"),
            ("hello", "text"),
        ],
    )
    def test_determine_content_type(self, text, content_type):
        assert determine_content_type(text) == content_type

    def test_content_hash(self):
        digest = content_hash("secret prompt")
        assert len(digest) == 16
        assert digest == content_hash("secret prompt")
        assert digest != content_hash("other prompt")
        assert "secret" not in digest

    def test_describe_alert_lists_types(self):
        result = make_result(["email", "apiKey"])
        assert describe_alert(result) == "API key detected in prompt, Email address detected"

    def test_describe_alert_falls_back_to_risk(self):
        result = make_result(["financialData"], risk="high")
        assert describe_alert(result) == "high risk activity detected in AI interaction"
