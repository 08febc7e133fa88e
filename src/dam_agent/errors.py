__all__ = ["CaptureError", "ConfigError", "DamAgentError", "OCRError", "StorageError"]


class DamAgentError(Exception):
    """Base class for errors raised by agent providers and stores."""


class ConfigError(DamAgentError):
    """Invalid preferences or settings."""


class StorageError(DamAgentError):
    """The local database could not be read or written."""


class CaptureError(DamAgentError):
    """The screen could not be captured."""


class OCRError(DamAgentError):
    """Text extraction failed."""
