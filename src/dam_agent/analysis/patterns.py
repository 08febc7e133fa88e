"""Regex and keyword tables for the analysis layer.

Tables are ordered. Detectors walk them in declaration order and several
return the first match, so reordering entries changes behaviour.
"""

# --- sensitive data ---

# Vendor-specific API key shapes. Unioned into the single ``apiKey`` category.
API_KEY_PATTERNS = [
    r"\bsk-[a-zA-Z0-9]{20,}\b",                 # OpenAI
    r"\bAKIA[0-9A-Z]{16}\b",                    # AWS access key id
    r"\bya29\.[a-zA-Z0-9_-]+",                  # Google OAuth token
    r"\bAIza[0-9A-Za-z_-]{35}\b",               # Google API key
    r"\bxoxb-[0-9]+-[0-9A-Za-z-]+",             # Slack bot token
    r"\bghp_[a-zA-Z0-9]{36}\b",                 # GitHub personal token
    r"\bgho_[a-zA-Z0-9]{36}\b",                 # GitHub OAuth token
    r"\bgithub_pat_[a-zA-Z0-9_]+",              # GitHub fine-grained token
    r"\bBearer\s+[a-zA-Z0-9_-]+",               # Bearer header
    r"\b(?:api[_-]?key|apikey|api[_-]?secret|access[_-]?token|bearer)"
    r"[:\s=]*['\"]?[a-zA-Z0-9_-]{16,}",         # generic assignment
]

# (category, patterns). A category fires if ANY of its patterns matches.
SENSITIVE_DATA_PATTERNS = [
    ("ssn", [r"\b\d{3}-\d{2}-\d{4}\b"]),
    ("creditCard", [r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"]),
    ("email", [r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"]),
    ("phone", [r"\b(?:\+\d{1,3}[- ]?)?\(?\d{3}\)?[- ]?\d{3}[- ]?\d{4}\b"]),
    ("apiKey", API_KEY_PATTERNS),
    ("password", [r"\b(?:password|passwd|pwd)[:\s=]*['\"]?[^\s'\"]{8,}"]),
    ("financialData", [r"\$[\d,]+\.?\d*|USD\s*[\d,]+|revenue|profit|salary|income"]),
    ("customerData", [r"customer|client|user|account.*name|billing.*address"]),
]

CRITICAL_DATA_TYPES = frozenset({"apiKey", "password", "ssn"})
HIGH_RISK_DATA_TYPES = frozenset({"financialData", "customerData", "creditCard"})

# Storage redaction: (patterns, placeholder), applied in order.
REDACTION_RULES = [
    (API_KEY_PATTERNS, "[API_KEY_REDACTED]"),
    ([r"\b\d{3}-\d{2}-\d{4}\b"], "[SSN_REDACTED]"),
    ([r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"], "[CREDIT_CARD_REDACTED]"),
]

MAX_SANITIZED_LENGTH = 500
TRUNCATION_MARKER = "... [TRUNCATED]"

# --- AI tools ---

# Matched case-insensitively against "<window label> <text>", first hit wins.
AI_TOOL_PATTERNS = [
    ("chatgpt", r"chat\.openai\.com|chatgpt"),
    ("claude", r"claude\.ai|anthropic|\bclaude\b"),
    ("gemini", r"gemini\.google|\bgemini\b|bard"),
    ("copilot", r"github.*copilot|copilot"),
    ("midjourney", r"midjourney"),
    ("perplexity", r"perplexity\.ai|\bperplexity\b"),
]

# Free-text vendor inference, used to pick a learning resource.
VENDOR_KEYWORDS = [
    ("claude", ("claude", "anthropic")),
    ("chatgpt", ("chatgpt", "openai")),
    ("gemini", ("gemini", "bard")),
    ("copilot", ("copilot",)),
]

BRAND_NAMES_PATTERN = r"(claude\.ai|chatgpt|openai|anthropic)"

# --- window classification ---

BROWSER_KEYWORDS = ("chrome", "firefox", "safari", "edge", "brave")

AI_PLATFORM_URLS = [
    (r"https?://(www\.)?chatgpt\.com", "ChatGPT"),
    (r"https?://chat\.openai\.com", "ChatGPT"),
    (r"https?://(www\.)?claude\.ai", "Claude"),
    (r"https?://claude\.anthropic\.com", "Claude"),
    (r"https?://gemini\.google\.com", "Gemini"),
    (r"https?://bard\.google\.com", "Gemini"),
    (r"https?://(www\.)?perplexity\.ai", "Perplexity"),
]

# Browser tabs usually carry the site name in the title.
TITLE_PLATFORM_NAMES = ("ChatGPT", "Claude", "Gemini", "Perplexity")

TERMINAL_KEYWORDS = ("terminal", "iterm", "console", "powershell", "cmd")

TERMINAL_AI_PATTERNS = [
    (r"claude\s+(-|--)?", "Claude CLI"),
    (r"gemini\s+(-|--)?", "Gemini CLI"),
    (r"openai\s+(-|--)?", "OpenAI CLI"),
    (r"chatgpt\s+(-|--)?", "ChatGPT CLI"),
]

AI_DESKTOP_APP_PATTERNS = [
    (r"claude.*desktop|claude\s*app", "Claude Desktop"),
    (r"chatgpt.*desktop|openai.*app", "ChatGPT Desktop"),
    (r"gemini.*desktop|gemini\s*app", "Gemini Desktop"),
]

# --- prompt quality ---

EXCELLENT_PROMPT_INDICATORS = [
    r"role.*play|act.*as|perspective|persona",
    r"constraints|requirements|specifications",
    r"format.*as|structure.*like|output.*should",
    r"avoid|don't|exclude|without",
]

GOOD_PROMPT_INDICATORS = [
    r"context|background|specifically|example|format|style",
    r"step.?by.?step|detailed|comprehensive",
    r"please.*explain|can.*you.*help.*with",
]

POOR_PROMPT_INDICATORS = [
    r"^(help|fix|do|make|create)$",
    r"^.{0,10}$",
    r"^(what|how|why|when|where)$",
]

FAIR_LENGTH_THRESHOLD = 50

# --- content heuristics ---

SPREADSHEET_TERMS = ("spreadsheet", "excel", "csv")

# (category, keywords), first hit wins.
CONTENT_CATEGORIES = [
    ("code_generation", ("code", "function", "class", "debug")),
    ("writing_editing", ("write", "email", "document", "content")),
    ("analysis_research", ("analyze", "research", "data", "study")),
    ("problem_solving", ("problem", "solve", "help", "fix")),
    ("creative_tasks", ("design", "creative", "art", "image")),
]

CONTENT_TYPES = [
    ("code", ("function", "class", "{", "import")),
    ("data", ("data", "csv", "json", "table")),
    ("image", ("image", "picture", "photo", "visual")),
]


__all__ = [
    "API_KEY_PATTERNS",
    "SENSITIVE_DATA_PATTERNS",
    "CRITICAL_DATA_TYPES",
    "HIGH_RISK_DATA_TYPES",
    "REDACTION_RULES",
    "MAX_SANITIZED_LENGTH",
    "TRUNCATION_MARKER",
    "AI_TOOL_PATTERNS",
    "VENDOR_KEYWORDS",
    "BRAND_NAMES_PATTERN",
    "BROWSER_KEYWORDS",
    "AI_PLATFORM_URLS",
    "TITLE_PLATFORM_NAMES",
    "TERMINAL_KEYWORDS",
    "TERMINAL_AI_PATTERNS",
    "AI_DESKTOP_APP_PATTERNS",
    "EXCELLENT_PROMPT_INDICATORS",
    "GOOD_PROMPT_INDICATORS",
    "POOR_PROMPT_INDICATORS",
    "FAIR_LENGTH_THRESHOLD",
    "SPREADSHEET_TERMS",
    "CONTENT_CATEGORIES",
    "CONTENT_TYPES",
]
