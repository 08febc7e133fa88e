from dam_agent.analysis.ai_tools import AIToolDetector, infer_vendor
from dam_agent.analysis.content import (
    AIContentAnalyzer,
    categorize_content,
    content_hash,
    describe_alert,
    determine_content_type,
)
from dam_agent.analysis.prompt_quality import assess_prompt_quality
from dam_agent.analysis.rewrite import PromptFeedback, PromptRewriteAdvisor
from dam_agent.analysis.risk import calculate_risk_level
from dam_agent.analysis.sanitizer import sanitize_content
from dam_agent.analysis.sensitive import SensitiveDataDetector
from dam_agent.analysis.suggestions import (
    generate_suggestions,
    identify_learning_opportunity,
)
from dam_agent.analysis.window import AIWindowDetector

__all__ = [
    "AIContentAnalyzer",
    "AIToolDetector",
    "AIWindowDetector",
    "PromptFeedback",
    "PromptRewriteAdvisor",
    "SensitiveDataDetector",
    "assess_prompt_quality",
    "calculate_risk_level",
    "categorize_content",
    "content_hash",
    "describe_alert",
    "determine_content_type",
    "generate_suggestions",
    "identify_learning_opportunity",
    "infer_vendor",
    "sanitize_content",
]
