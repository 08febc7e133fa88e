"""Risk level of one analyzed sample."""

from collections.abc import Iterable

from dam_agent.analysis.patterns import CRITICAL_DATA_TYPES, HIGH_RISK_DATA_TYPES
from dam_agent.model.models import RiskLevel


def calculate_risk_level(
    ai_tool: str | None,
    sensitive_types: Iterable[str],
) -> RiskLevel:
    """Deterministic risk from (tool, sensitive types).

    Without a detected AI tool the sample is ``low`` whatever it contains.
    Critical types are checked before high-risk ones.
    """
    if not ai_tool:
        return "low"

    types = set(sensitive_types)
    if types & CRITICAL_DATA_TYPES:
        return "critical"
    if types & HIGH_RISK_DATA_TYPES:
        return "high"
    if types:
        return "medium"
    return "low"


__all__ = ["calculate_risk_level"]
