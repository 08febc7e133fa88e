"""DAM desktop agent: local monitoring of AI tool usage."""

__version__ = "1.0.0"
