"""Category-level detection of sensitive data in extracted screen text.

Categories are reported in table order. Overlapping categories are kept
as-is: a dollar amount next to a customer name fires both
``financialData`` and ``customerData``.
"""

from __future__ import annotations

import re

from dam_agent.analysis.patterns import SENSITIVE_DATA_PATTERNS
from dam_agent.model.models import SensitiveDataResult


class SensitiveDataDetector:
    """Table-driven sensitive data detection."""

    def __init__(self, table: list[tuple[str, list[str]]] | None = None) -> None:
        table = table if table is not None else SENSITIVE_DATA_PATTERNS
        self.compiled: list[tuple[str, list[re.Pattern[str]]]] = [
            (category, [re.compile(p, re.I) for p in patterns])
            for category, patterns in table
        ]

    @property
    def categories(self) -> list[str]:
        return [category for category, _ in self.compiled]

    def detect(self, text: str) -> SensitiveDataResult:
        if not text:
            return SensitiveDataResult(detected=False, types=())

        types = tuple(
            category
            for category, patterns in self.compiled
            if any(p.search(text) for p in patterns)
        )
        return SensitiveDataResult(detected=bool(types), types=types)


__all__ = ["SensitiveDataDetector", "SensitiveDataResult"]
