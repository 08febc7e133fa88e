"""Redaction applied to any content before it is stored or synced."""

import re

from dam_agent.analysis.patterns import (
    MAX_SANITIZED_LENGTH,
    REDACTION_RULES,
    TRUNCATION_MARKER,
)

_RULES = [
    ([re.compile(p, re.I) for p in patterns], placeholder)
    for patterns, placeholder in REDACTION_RULES
]


def sanitize_content(text: str, max_length: int = MAX_SANITIZED_LENGTH) -> str:
    """Mask API keys, SSNs and card numbers, then truncate."""
    sanitized = text or ""
    for patterns, placeholder in _RULES:
        for pattern in patterns:
            sanitized = pattern.sub(placeholder, sanitized)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + TRUNCATION_MARKER
    return sanitized


__all__ = ["sanitize_content"]
