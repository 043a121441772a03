# ABOUTME: Exception hierarchy for live configuration reconciliation
# ABOUTME: Distinguishes I/O, parse, shape and "not configured" failures
from pathlib import Path


class LiveSyncError(Exception):
    """Base class for livesync errors."""


class LiveIOError(LiveSyncError, OSError):
    """Raised when a live file cannot be read, written or deleted.

    ABOUTME: Always carries the offending path
    """

    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        super().__init__(f"I/O error on {path}: {error}")


class LiveParseError(LiveSyncError, ValueError):
    """Raised when a live file holds malformed JSON or TOML."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        super().__init__(f"Invalid content in {path}: {detail}")


class ConfigError(LiveSyncError, ValueError):
    """Raised when a settings document has the wrong shape.

    ABOUTME: field names the offending key, e.g. 'config' or 'env.GEMINI_API_KEY'
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class LiveConfigMissing(LiveSyncError, FileNotFoundError):
    """Raised when a tool's live configuration does not exist (not configured)."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Live configuration not found: {path}")


class HomeDirectoryError(LiveSyncError, RuntimeError):
    """Raised when the user's home directory cannot be determined."""
