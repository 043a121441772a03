# Gemini CLI live configuration adapter
import copy
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, set_key

from livesync.adapters.base import read_json_file, write_json_file
from livesync.errors import ConfigError, LiveConfigMissing, LiveIOError, LiveParseError
from livesync.models import AppType, GeminiSettings, LiveAdapter, Provider
from livesync.paths import LivePaths

logger = logging.getLogger(__name__)

API_KEY_VAR = "GEMINI_API_KEY"
BASE_URL_VAR = "GOOGLE_GEMINI_BASE_URL"

# ABOUTME: Values Gemini CLI accepts for security.auth.selectedType
OAUTH_SELECTED_TYPE = "oauth-personal"
API_KEY_SELECTED_TYPE = "gemini-api-key"


class GeminiAuthType(Enum):
    """How a Gemini provider authenticates."""
    GOOGLE_OFFICIAL = "google-official"
    PACKYCODE = "packycode"
    GENERIC = "generic"


def detect_gemini_auth_type(provider: Provider) -> GeminiAuthType:
    """Classify a provider's authentication mode.

    ABOUTME: Official category or a Google-named provider uses OAuth
    ABOUTME: PackyCode is recognised by name or base URL; everything else is generic
    """
    name = provider.name.strip().lower()
    if provider.category == "official" or name.startswith("google"):
        return GeminiAuthType.GOOGLE_OFFICIAL

    base_url = ""
    settings = provider.settings_config
    if isinstance(settings, dict) and isinstance(settings.get("env"), dict):
        base_url = str(settings["env"].get(BASE_URL_VAR) or "").lower()

    if "packycode" in name or "packycode" in base_url:
        return GeminiAuthType.PACKYCODE
    return GeminiAuthType.GENERIC


def parse_gemini_settings(settings: Any) -> GeminiSettings:
    """Validate a canonical Gemini settings document.

    ABOUTME: env must map strings to strings; absent env means empty
    ABOUTME: config must be an object or null; absent config counts as null
    """
    if not isinstance(settings, dict):
        raise ConfigError("settings_config", "Gemini settings must be a JSON object")

    raw_env = settings.get("env")
    if raw_env is None:
        raw_env = {}
    if not isinstance(raw_env, dict):
        raise ConfigError("env", "must be an object of string values")

    env: dict[str, str] = {}
    for key, value in raw_env.items():
        if not isinstance(value, str):
            raise ConfigError(f"env.{key}", "must be a string")
        env[key] = value

    config = settings.get("config")
    if config is not None and not isinstance(config, dict):
        raise ConfigError("config", "Gemini config must be an object or null")

    return GeminiSettings(env=env, config=config)


def validate_gemini_settings_strict(settings: GeminiSettings) -> None:
    """Require a non-empty API key and endpoint for API-key providers."""
    for var in (API_KEY_VAR, BASE_URL_VAR):
        if not settings.env.get(var, "").strip():
            raise ConfigError(f"env.{var}", "is required for API key providers")


def read_env_file(path: Path) -> dict[str, str]:
    """Parse a KEY=VALUE env file; keys without a value map to "".

    ABOUTME: Values are taken literally; ${VAR} references are not expanded
    """
    try:
        values = dotenv_values(path, interpolate=False, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LiveParseError(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise LiveIOError(path, e) from e
    return {key: value or "" for key, value in values.items()}


def write_env_file(path: Path, env: dict[str, str]) -> None:
    """Write an env map as sorted, single-quoted KEY='VALUE' lines.

    ABOUTME: Lines are rendered by dotenv's set_key into a sibling temp file, then swapped in
    ABOUTME: Quoting matches what read_env_file reads back
    """
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text("", encoding="utf-8")
        for key in sorted(env):
            set_key(tmp_path, key, env[key], quote_mode="always", encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise LiveIOError(path, e) from e


def set_selected_auth_type(settings: dict[str, Any], selected_type: str) -> None:
    """Set security.auth.selectedType, creating the nested objects as needed."""
    security = settings.setdefault("security", {})
    if not isinstance(security, dict):
        raise ConfigError("security", "must be an object")
    auth = security.setdefault("auth", {})
    if not isinstance(auth, dict):
        raise ConfigError("security.auth", "must be an object")
    auth["selectedType"] = selected_type


class GeminiAdapter(LiveAdapter):
    """Adapter for Gemini CLI (~/.gemini/.env + ~/.gemini/settings.json).

    ABOUTME: env is fully replaced; settings.json is merged key by key
    ABOUTME: Preserves mcpServers, theme and every other unowned setting
    """

    def __init__(self, paths: LivePaths | None = None) -> None:
        self._paths = paths if paths else LivePaths.from_settings()

    @property
    def app_type(self) -> AppType:
        return AppType.GEMINI

    @property
    def name(self) -> str:
        return "Gemini CLI"

    def live_files(self) -> list[Path]:
        return self._paths.live_files(AppType.GEMINI)

    def _load_settings(self) -> dict[str, Any]:
        path = self._paths.gemini_settings
        data = read_json_file(path)
        if not isinstance(data, dict):
            raise ConfigError("settings.json", f"root of {path} must be a JSON object")
        return data

    def write_live(self, provider: Provider) -> None:
        """Write .env, then merge config and the auth flag into settings.json.

        ABOUTME: OAuth providers get an empty .env; API key providers are validated strictly
        ABOUTME: config null/absent leaves every existing setting untouched
        """
        auth_type = detect_gemini_auth_type(provider)
        settings = parse_gemini_settings(provider.settings_config)

        env = settings.env
        if auth_type is GeminiAuthType.GOOGLE_OFFICIAL:
            env = {}
        else:
            validate_gemini_settings_strict(settings)

        # Load before writing anything so a corrupt settings.json aborts cleanly
        live_settings = self._load_settings()
        if settings.config is not None:
            live_settings.update(copy.deepcopy(settings.config))

        if auth_type is GeminiAuthType.GOOGLE_OFFICIAL:
            set_selected_auth_type(live_settings, OAUTH_SELECTED_TYPE)
        else:
            set_selected_auth_type(live_settings, API_KEY_SELECTED_TYPE)

        write_env_file(self._paths.gemini_env, env)
        write_json_file(self._paths.gemini_settings, live_settings)
        logger.info(
            f"Wrote Gemini env and settings for provider '{provider.name}' "
            f"(auth: {auth_type.value})"
        )

    def read_live(self) -> dict[str, Any]:
        """Return {"env": {...}, "config": {...}} from the live files.

        Raises:
            LiveConfigMissing: If the .env file does not exist
        """
        env_path = self._paths.gemini_env
        if not env_path.exists():
            raise LiveConfigMissing(env_path, f"Gemini .env file not found: {env_path}")

        return {
            "env": read_env_file(env_path),
            "config": read_json_file(self._paths.gemini_settings),
        }
