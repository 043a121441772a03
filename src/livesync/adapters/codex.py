# Codex CLI live configuration adapter
import logging
from pathlib import Path
from typing import Any

import tomli

from livesync.adapters.base import read_json_file, read_text_file, write_json_file, write_text_file
from livesync.errors import ConfigError, LiveConfigMissing, LiveParseError
from livesync.models import AppType, CodexSettings, LiveAdapter, Provider
from livesync.paths import LivePaths

logger = logging.getLogger(__name__)


def parse_codex_settings(settings: Any) -> CodexSettings:
    """Validate a canonical Codex settings document.

    ABOUTME: Requires an object with 'auth' (any JSON) and 'config' (TOML text)
    """
    if not isinstance(settings, dict):
        raise ConfigError("settings_config", "Codex settings must be a JSON object")
    if "auth" not in settings:
        raise ConfigError("auth", "Codex settings missing required 'auth' field")

    config = settings.get("config")
    if not isinstance(config, str):
        raise ConfigError("config", "Codex settings missing 'config' field or it is not a string")

    return CodexSettings(auth=settings["auth"], config=config)


class CodexAdapter(LiveAdapter):
    """Adapter for Codex CLI (~/.codex/auth.json + ~/.codex/config.toml).

    ABOUTME: Split format: auth goes to JSON, config goes verbatim to TOML text
    ABOUTME: auth.json is always written first
    """

    def __init__(self, paths: LivePaths | None = None) -> None:
        self._paths = paths if paths else LivePaths.from_settings()

    @property
    def app_type(self) -> AppType:
        return AppType.CODEX

    @property
    def name(self) -> str:
        return "Codex CLI"

    def live_files(self) -> list[Path]:
        return self._paths.live_files(AppType.CODEX)

    def write_live(self, provider: Provider) -> None:
        """Write auth.json then config.toml.

        ABOUTME: A failure on config.toml leaves the new auth.json in place
        """
        settings = parse_codex_settings(provider.settings_config)

        write_json_file(self._paths.codex_auth, settings.auth)
        write_text_file(self._paths.codex_config, settings.config)
        logger.info(f"Wrote Codex auth and config for provider '{provider.name}'")

    def read_config_text(self, tolerate_missing: bool = True) -> str:
        """Read config.toml and check that it parses as TOML.

        Args:
            tolerate_missing: Return "" instead of raising when the file is absent

        Raises:
            LiveConfigMissing: If absent and tolerate_missing is False
            LiveParseError: If the text is not valid TOML
        """
        path = self._paths.codex_config
        if not path.exists():
            if tolerate_missing:
                return ""
            raise LiveConfigMissing(path, f"Codex config.toml not found: {path}")

        text = read_text_file(path)
        if text.strip():
            try:
                tomli.loads(text)
            except tomli.TOMLDecodeError as e:
                raise LiveParseError(path, f"invalid TOML: {e}") from e
        return text

    def read_live(self) -> dict[str, Any]:
        """Reassemble {"auth": ..., "config": "..."} from the live files.

        Raises:
            LiveConfigMissing: If auth.json does not exist
        """
        auth_path = self._paths.codex_auth
        if not auth_path.exists():
            raise LiveConfigMissing(auth_path, "Codex configuration missing: auth.json not found")

        auth = read_json_file(auth_path)
        return {"auth": auth, "config": self.read_config_text()}
