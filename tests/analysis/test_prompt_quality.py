import pytest

from dam_agent.analysis.prompt_quality import assess_prompt_quality


class TestAssessPromptQuality:
    """Priority cascade of the prompt quality heuristic."""

    @pytest.mark.parametrize("prompt", ["help", "what", "fix it", "Create"])
    def test_bare_or_tiny_prompts_are_poor(self, prompt):
        assert assess_prompt_quality(prompt) == "poor"

    def test_neutral_60_chars_is_fair(self):
        """Length fallback: no indicator and more than 50 characters"""
        prompt = "z" * 60
        assert assess_prompt_quality(prompt) == "fair"

    def test_neutral_short_text_is_poor(self):
        assert assess_prompt_quality("z" * 40) == "poor"

    def test_excellent_indicator_wins(self):
        """A persona request beats every other rule"""
        assert assess_prompt_quality("Act as a senior reviewer and check this") == "excellent"

    def test_one_good_indicator_is_fair(self):
        prompt = "Please give a detailed summary of the meeting notes"
        assert assess_prompt_quality(prompt) == "fair"

    def test_two_good_indicators_are_good(self):
        prompt = "Give me a detailed example for this context"
        assert assess_prompt_quality(prompt) == "good"
