# Claude Code live configuration adapter
import logging
from pathlib import Path
from typing import Any

from livesync.adapters.base import read_json_file, write_json_file
from livesync.errors import LiveConfigMissing
from livesync.models import AppType, LiveAdapter, Provider
from livesync.paths import LivePaths

logger = logging.getLogger(__name__)

# ABOUTME: Legacy env key replaced by ANTHROPIC_DEFAULT_HAIKU_MODEL
LEGACY_SMALL_FAST_MODEL = "ANTHROPIC_SMALL_FAST_MODEL"
HAIKU_MODEL = "ANTHROPIC_DEFAULT_HAIKU_MODEL"


def normalize_claude_models(settings: Any) -> bool:
    """Migrate the legacy small/fast model key in place.

    ABOUTME: Moves env.ANTHROPIC_SMALL_FAST_MODEL to ANTHROPIC_DEFAULT_HAIKU_MODEL
    ABOUTME: An existing haiku key wins; the legacy key is always dropped
    ABOUTME: Returns True if the document changed
    """
    if not isinstance(settings, dict):
        return False
    env = settings.get("env")
    if not isinstance(env, dict) or LEGACY_SMALL_FAST_MODEL not in env:
        return False

    legacy = env.pop(LEGACY_SMALL_FAST_MODEL)
    if HAIKU_MODEL not in env:
        env[HAIKU_MODEL] = legacy
    return True


class ClaudeAdapter(LiveAdapter):
    """Adapter for Claude Code (~/.claude/settings.json).

    ABOUTME: Single-document format: settings_config is written verbatim
    """

    def __init__(self, paths: LivePaths | None = None) -> None:
        self._paths = paths if paths else LivePaths.from_settings()

    @property
    def app_type(self) -> AppType:
        return AppType.CLAUDE

    @property
    def name(self) -> str:
        return "Claude Code"

    def live_files(self) -> list[Path]:
        return self._paths.live_files(AppType.CLAUDE)

    def write_live(self, provider: Provider) -> None:
        """Replace settings.json with the provider's settings document."""
        path = self._paths.claude_settings
        write_json_file(path, provider.settings_config)
        logger.info(f"Wrote Claude settings for provider '{provider.name}' to {path}")

    def read_live(self) -> Any:
        """Read settings.json, normalizing legacy model keys.

        Raises:
            LiveConfigMissing: If settings.json does not exist
        """
        path = self._paths.claude_settings
        if not path.exists():
            raise LiveConfigMissing(path, f"Claude settings file is missing: {path}")

        settings = read_json_file(path)
        normalize_claude_models(settings)
        return settings
