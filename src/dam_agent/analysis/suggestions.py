"""Coaching suggestions and learning opportunities for an analyzed sample."""

from __future__ import annotations

from dam_agent.analysis.patterns import SPREADSHEET_TERMS
from dam_agent.analysis.rewrite import PromptRewriteAdvisor
from dam_agent.model.models import (
    LearningOpportunity,
    PromptQuality,
    SensitiveDataResult,
    Suggestion,
)

PROMPT_LEARNING_RESOURCES = (
    "https://dam.ai/learn/prompt-engineering",
    "https://dam.ai/learn/ai-communication",
)

_advisor = PromptRewriteAdvisor()


def generate_suggestions(
    ai_tool: str | None,
    sensitive: SensitiveDataResult,
    quality: PromptQuality,
    text: str,
) -> tuple[Suggestion, ...]:
    """Build suggestions in fixed order: security, quality, efficiency."""
    suggestions: list[Suggestion] = []

    if sensitive.detected and ai_tool:
        suggestions.append(
            Suggestion(
                type="security",
                title="Sensitive Data Detected",
                description=(
                    f"You're about to share {', '.join(sensitive.types)} with "
                    f"{ai_tool}. Consider removing or masking this information "
                    "before proceeding."
                ),
                actionable=True,
                priority="high",
            )
        )
        suggestions.append(
            Suggestion(
                type="alternative",
                title="Use Local AI Alternative",
                description=(
                    "For sensitive data analysis, consider using a local AI "
                    "model or enterprise-approved tools that don't send data "
                    "to external servers."
                ),
                actionable=True,
                priority="medium",
            )
        )

    if quality in ("poor", "fair"):
        feedback = _advisor.advise(text, ai_tool)
        suggestions.append(
            Suggestion(
                type="quality",
                title=(
                    "Your Prompt Needs Improvement"
                    if quality == "poor"
                    else "DAM Can Make Your Prompt More Effective"
                ),
                description=feedback.description,
                actionable=True,
                priority="high" if quality == "poor" else "medium",
                improved_prompt=feedback.improved_prompt,
                learning_resource=feedback.learning_resource,
                can_rewrite=True,
            )
        )

    lowered = text.lower()
    if any(term in lowered for term in SPREADSHEET_TERMS):
        suggestions.append(
            Suggestion(
                type="efficiency",
                title="Use Specialized Tools",
                description=(
                    "For spreadsheet analysis, consider using Excel's built-in "
                    "AI features or specialized data analysis tools for better "
                    "performance."
                ),
                actionable=True,
                priority="low",
            )
        )

    return tuple(suggestions)


def identify_learning_opportunity(
    ai_tool: str | None,
    quality: PromptQuality,
    sensitive: SensitiveDataResult,
    text: str,
) -> LearningOpportunity | None:
    if sensitive.detected and ai_tool:
        return LearningOpportunity(
            type="security_risk",
            title="Data Privacy Best Practices",
            description="Learn how to safely use AI tools with sensitive information",
            example=(
                'Instead of: "Analyze this customer list: [actual data]"\n'
                'Try: "Analyze a customer list with columns: name, email, '
                'purchase_amount"'
            ),
            resources=(
                "https://dam.ai/learn/data-privacy",
                "https://dam.ai/learn/ai-security",
            ),
        )

    if quality == "poor":
        return LearningOpportunity(
            type="prompt_improvement",
            title="Write Better AI Prompts",
            description=(
                "Your prompt is too vague. Learn prompt engineering techniques "
                "to get better results"
            ),
            example=(
                f'Instead of: "{text[:20]}..."\n'
                'Try: "[Be specific about what you want, provide context, '
                'specify format, include examples]"'
            ),
            resources=PROMPT_LEARNING_RESOURCES,
        )

    if quality == "fair":
        return LearningOpportunity(
            type="prompt_improvement",
            title="Write Better AI Prompts",
            description="Learn prompt engineering techniques to get better results",
            example=(
                'Instead of: "Fix this"\n'
                'Try: "Review this Python function for bugs and suggest '
                'improvements. Focus on error handling and performance."'
            ),
            resources=PROMPT_LEARNING_RESOURCES,
        )

    if "code" in text.lower() and ai_tool == "chatgpt":
        return LearningOpportunity(
            type="tool_suggestion",
            title="Try GitHub Copilot for Coding",
            description=(
                "For code-related tasks, specialized tools like GitHub Copilot "
                "might provide better results with IDE integration."
            ),
            resources=("https://dam.ai/learn/coding-ai-tools",),
        )

    return None


__all__ = ["generate_suggestions", "identify_learning_opportunity"]
