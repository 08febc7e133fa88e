"""Heuristic prompt-quality rating.

The rating is a strict priority cascade, not a weighted score:

1. any excellent indicator -> ``excellent``
2. two or more good indicators -> ``good``, exactly one -> ``fair``
3. any poor indicator -> ``poor``
4. ``fair`` for text longer than 50 characters, otherwise ``poor``
"""

import re

from dam_agent.analysis.patterns import (
    EXCELLENT_PROMPT_INDICATORS,
    FAIR_LENGTH_THRESHOLD,
    GOOD_PROMPT_INDICATORS,
    POOR_PROMPT_INDICATORS,
)
from dam_agent.model.models import PromptQuality

_EXCELLENT = [re.compile(p, re.I) for p in EXCELLENT_PROMPT_INDICATORS]
_GOOD = [re.compile(p, re.I) for p in GOOD_PROMPT_INDICATORS]
_POOR = [re.compile(p, re.I) for p in POOR_PROMPT_INDICATORS]


def assess_prompt_quality(text: str) -> PromptQuality:
    if any(p.search(text) for p in _EXCELLENT):
        return "excellent"

    good_hits = sum(1 for p in _GOOD if p.search(text))
    if good_hits >= 2:
        return "good"
    if good_hits == 1:
        return "fair"

    if any(p.search(text) for p in _POOR):
        return "poor"

    return "fair" if len(text) > FAIR_LENGTH_THRESHOLD else "poor"


__all__ = ["assess_prompt_quality"]
