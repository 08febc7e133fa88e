import pytest

from dam_agent.analysis.patterns import SENSITIVE_DATA_PATTERNS
from dam_agent.analysis.risk import calculate_risk_level


@pytest.mark.parametrize(
    ("tool", "types", "expected"),
    [
        ("claude", ["apiKey", "financialData"], "critical"),
        ("claude", ["password"], "critical"),
        ("chatgpt", ["creditCard", "phone"], "high"),
        ("claude", ["financialData"], "high"),
        ("claude", ["email"], "medium"),
        ("claude", [], "low"),
    ],
)
def test_risk_table(tool, types, expected):
    assert calculate_risk_level(tool, types) == expected


def test_no_tool_is_always_low():
    """Without an AI tool even every category at once stays low"""
    every_category = [category for category, _ in SENSITIVE_DATA_PATTERNS]
    assert calculate_risk_level(None, every_category) == "low"
    for category in every_category:
        assert calculate_risk_level(None, [category]) == "low"
