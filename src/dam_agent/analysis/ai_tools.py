"""AI tool identification from window labels and screen text."""

from __future__ import annotations

import re

from dam_agent.analysis.patterns import AI_TOOL_PATTERNS, VENDOR_KEYWORDS


class AIToolDetector:
    """Returns the first tool in table order whose pattern matches."""

    def __init__(self, table: list[tuple[str, str]] | None = None) -> None:
        table = table if table is not None else AI_TOOL_PATTERNS
        self.compiled = [(tool, re.compile(p, re.I)) for tool, p in table]

    def detect(self, window_label: str, text: str) -> str | None:
        combined = f"{window_label or ''} {text or ''}".lower()
        for tool, pattern in self.compiled:
            if pattern.search(combined):
                return tool
        return None


def infer_vendor(text: str) -> str:
    """Best-effort vendor guess from free text, ``general`` when unknown."""
    lowered = (text or "").lower()
    for vendor, keywords in VENDOR_KEYWORDS:
        if any(k in lowered for k in keywords):
            return vendor
    return "general"


__all__ = ["AIToolDetector", "infer_vendor"]
