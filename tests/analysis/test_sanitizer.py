from dam_agent.analysis.patterns import MAX_SANITIZED_LENGTH, TRUNCATION_MARKER
from dam_agent.analysis.sanitizer import sanitize_content


class TestSanitizeContent:
    """Redaction and truncation of stored content."""

    def test_api_key_is_redacted(self, api_key):
        assert sanitize_content(f"my key {api_key}") == "my key [API_KEY_REDACTED]"

    def test_ssn_and_card_are_redacted(self):
        text = "SSN 123-45-6789 card 4111 1111 1111 1111"
        assert sanitize_content(text) == "SSN [SSN_REDACTED] card [CREDIT_CARD_REDACTED]"

    def test_long_content_is_truncated(self):
        sanitized = sanitize_content("a" * 600)
        assert sanitized == "a" * MAX_SANITIZED_LENGTH + TRUNCATION_MARKER

    def test_content_at_limit_is_kept(self):
        text = "a" * MAX_SANITIZED_LENGTH
        assert sanitize_content(text) == text

    def test_clean_text_is_unchanged(self):
        assert sanitize_content("hello world") == "hello world"

    def test_empty(self):
        assert sanitize_content("") == ""
