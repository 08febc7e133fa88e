"""Template-based prompt rewrite advice.

The advisor classifies why a prompt is weak and fills a fixed template.
Placeholders such as ``[specific topic/task]`` are literal text for the
user to complete; nothing is generated from the prompt's context.
"""

import re
from dataclasses import dataclass

from dam_agent.analysis.ai_tools import infer_vendor
from dam_agent.analysis.patterns import BRAND_NAMES_PATTERN

ONE_WORD = "one-word"
TOO_SHORT = "too-short"
VAGUE_REQUEST = "vague-request"
CODE_HELP = "code-help"
GENERIC = "generic"

MIN_PROMPT_LENGTH = 10
SHORT_CODE_PROMPT_LENGTH = 20

DEFAULT_RESOURCE = (
    "https://docs.anthropic.com/en/docs/build-with-claude/"
    "prompt-engineering/overview"
)

LEARNING_RESOURCES = {
    "claude": DEFAULT_RESOURCE,
    "chatgpt": "https://platform.openai.com/docs/guides/prompt-engineering",
    "gemini": "https://ai.google.dev/gemini-api/docs/prompting-strategies",
    "copilot": (
        "https://docs.github.com/en/copilot/using-github-copilot/"
        "prompt-engineering-for-github-copilot"
    ),
}

_BRANDS = re.compile(BRAND_NAMES_PATTERN, re.I)
_ONE_WORD = re.compile(r"^(help|fix|do|make|create|what|why|how|when|where)$")
_VAGUE = re.compile(r"^(help me|fix this|do this|make it)$")


@dataclass(frozen=True)
class PromptFeedback:
    issue: str
    description: str
    improved_prompt: str
    learning_resource: str


def strip_brand_names(prompt: str) -> str:
    return _BRANDS.sub("", prompt).strip()


def learning_resource_for(tool: str | None) -> str:
    return LEARNING_RESOURCES.get(tool or "", DEFAULT_RESOURCE)


class PromptRewriteAdvisor:
    """Classifies a weak prompt and returns rewrite guidance."""

    def classify(self, prompt: str) -> str:
        # Length is judged on what was on screen, phrases without brand names.
        raw = prompt.strip().lower()
        clean = strip_brand_names(prompt).lower()

        if _ONE_WORD.match(clean):
            return ONE_WORD
        if len(raw) < MIN_PROMPT_LENGTH:
            return TOO_SHORT
        if _VAGUE.match(clean):
            return VAGUE_REQUEST
        if "code" in raw and len(raw) < SHORT_CODE_PROMPT_LENGTH:
            return CODE_HELP
        return GENERIC

    def advise(self, prompt: str, ai_tool: str | None = None) -> PromptFeedback:
        issue = self.classify(prompt)
        clean = strip_brand_names(prompt)
        resource = learning_resource_for(ai_tool or infer_vendor(prompt))
        return PromptFeedback(
            issue=issue,
            description=self._describe(issue, clean),
            improved_prompt=self.improved_prompt(clean, issue),
            learning_resource=resource,
        )

    @staticmethod
    def _describe(issue: str, clean: str) -> str:
        if issue == ONE_WORD:
            return (
                f'"{clean}" is too vague. DAM suggests adding: WHAT you want help '
                "with, WHY you need it, and HOW you want the response formatted."
            )
        if issue == TOO_SHORT:
            return (
                f'"{clean}" is too short. DAM recommends adding context about '
                "your situation, specific requirements, and desired outcome."
            )
        if issue == VAGUE_REQUEST:
            return (
                f'"{clean}" lacks specifics. DAM suggests clarifying: What exactly '
                "needs help? What's the current problem? What's your goal?"
            )
        if issue == CODE_HELP:
            return (
                "For coding help, DAM recommends specifying: the programming "
                "language, what the code should do, any error messages, and "
                "your current code snippet."
            )
        return (
            f'"{clean}" needs more detail. DAM suggests adding context, '
            "specifying your goal, mentioning constraints, and describing the "
            "desired output format."
        )

    @staticmethod
    def improved_prompt(original: str, issue: str) -> str:
        original = strip_brand_names(original)
        lowered = original.lower()

        if issue == ONE_WORD:
            if lowered == "help":
                return (
                    "I need help with [specific topic/task]. My current situation "
                    "is [context]. I want to achieve [goal]. Please provide "
                    "[step-by-step instructions/explanation/code example] in "
                    "[format preference]."
                )
            if lowered == "fix":
                return (
                    "I have a problem with [specific issue]. Here's what I've "
                    "tried: [previous attempts]. The error/issue is: [detailed "
                    "description]. Please help me fix this by [desired solution "
                    "approach]."
                )
            return (
                f'Instead of "{original}", try: "I need help with [specific '
                "topic]. My goal is [what you want to achieve]. Please provide "
                '[type of response you want]."'
            )

        if issue == TOO_SHORT:
            return (
                f'Expand "{original}" to include: **Context**: What you\'re '
                "working on, **Goal**: What you want to achieve, "
                "**Constraints**: Any limitations, **Format**: How you want the "
                "response structured."
            )

        if issue == VAGUE_REQUEST:
            if "fix" in lowered:
                return (
                    "I'm having trouble with [specific problem]. Here's my "
                    "current code/situation: [paste code/details]. The issue is: "
                    "[error message or unwanted behavior]. I want to achieve: "
                    "[desired outcome]. Please help me fix this."
                )
            return (
                f'Be specific about "{original}": What exactly do you need? '
                "What's your current situation? What's your desired outcome? "
                "Any constraints or preferences?"
            )

        if issue == CODE_HELP:
            return (
                "I'm working on [project/task] in [programming language]. I need "
                "help with [specific functionality]. Here's my current code: "
                "[code snippet]. The issue is: [error/problem]. Expected "
                "behavior: [what should happen]. Please provide a solution with "
                "explanation."
            )

        return (
            f'Improve "{original}" by adding: 1) Specific context about your '
            "situation, 2) Clear goal/objective, 3) Any constraints or "
            "requirements, 4) Preferred response format, 5) Examples if "
            "applicable."
        )


__all__ = [
    "CODE_HELP",
    "DEFAULT_RESOURCE",
    "GENERIC",
    "LEARNING_RESOURCES",
    "ONE_WORD",
    "TOO_SHORT",
    "VAGUE_REQUEST",
    "PromptFeedback",
    "PromptRewriteAdvisor",
    "learning_resource_for",
    "strip_brand_names",
]
