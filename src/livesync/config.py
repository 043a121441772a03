# Settings loading and saving for livesync
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from livesync.errors import ConfigError, LiveParseError
from livesync.models import AppType
from livesync.utils.backup import get_backup_dir
from livesync.utils.env import expand_path, get_home_dir

logger = logging.getLogger(__name__)

# ABOUTME: Directory name for livesync's own files under the home directory
APP_DIR_NAME = ".livesync"

# ABOUTME: Settings file name inside the app directory
SETTINGS_FILE_NAME = "settings.json"

# ABOUTME: On-disk (camelCase) key for each per-app override directory
OVERRIDE_KEYS: dict[AppType, str] = {
    AppType.CLAUDE: "claudeConfigDir",
    AppType.CODEX: "codexConfigDir",
    AppType.GEMINI: "geminiConfigDir",
    AppType.DROID: "droidConfigDir",
}

BACKUP_DIR_KEY = "backupDir"


@dataclass(frozen=True)
class LiveSettings:
    """Process-wide settings, resolved once at startup and passed explicitly.

    ABOUTME: Each *_config_dir replaces the app's default directory when set
    """
    claude_config_dir: Path | None = None
    codex_config_dir: Path | None = None
    gemini_config_dir: Path | None = None
    droid_config_dir: Path | None = None
    backup_dir: Path | None = None

    def override_dir(self, app_type: AppType) -> Path | None:
        """Return the override directory for an app type, if configured."""
        return {
            AppType.CLAUDE: self.claude_config_dir,
            AppType.CODEX: self.codex_config_dir,
            AppType.GEMINI: self.gemini_config_dir,
            AppType.DROID: self.droid_config_dir,
        }[app_type]

    def resolved_backup_dir(self) -> Path:
        """Configured backup directory, or ~/.livesync/backups.

        Raises:
            HomeDirectoryError: If no backupDir is set and $HOME is unknown
        """
        if self.backup_dir is not None:
            return self.backup_dir
        return get_backup_dir()


def get_app_dir() -> Path:
    """Return ~/.livesync (may not exist yet)."""
    return get_home_dir() / APP_DIR_NAME


def get_settings_path() -> Path:
    """Return the path to the livesync settings file.

    ABOUTME: Returns ~/.livesync/settings.json
    ABOUTME: File may not exist yet - load_settings() treats that as defaults
    """
    return get_app_dir() / SETTINGS_FILE_NAME


def _read_dir(data: dict[str, Any], key: str) -> Path | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(key, f"must be a string path, got {type(value).__name__}")
    return expand_path(value)


def load_settings(path: Path | None = None) -> LiveSettings:
    """Load livesync settings from JSON.

    ABOUTME: Missing file yields default settings (no overrides)
    ABOUTME: Expands ${VAR} and ~ in every directory value
    ABOUTME: Blank strings are treated as "no override"

    Args:
        path: Settings file, defaults to ~/.livesync/settings.json

    Returns:
        Parsed LiveSettings

    Raises:
        LiveParseError: If the file is not valid JSON
        ConfigError: If the root is not an object or a value is not a string
    """
    if path is None:
        path = get_settings_path()

    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return LiveSettings()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LiveParseError(path, str(e)) from e
    except UnicodeDecodeError as e:
        raise LiveParseError(path, f"not valid UTF-8: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("settings", "root must be a JSON object")

    return LiveSettings(
        claude_config_dir=_read_dir(data, OVERRIDE_KEYS[AppType.CLAUDE]),
        codex_config_dir=_read_dir(data, OVERRIDE_KEYS[AppType.CODEX]),
        gemini_config_dir=_read_dir(data, OVERRIDE_KEYS[AppType.GEMINI]),
        droid_config_dir=_read_dir(data, OVERRIDE_KEYS[AppType.DROID]),
        backup_dir=_read_dir(data, BACKUP_DIR_KEY),
    )


def save_settings(settings: LiveSettings, path: Path | None = None) -> None:
    """Save settings to JSON, omitting unset directories.

    ABOUTME: Creates parent directory if needed
    """
    if path is None:
        path = get_settings_path()

    data: dict[str, str] = {}
    for app_type, key in OVERRIDE_KEYS.items():
        override = settings.override_dir(app_type)
        if override is not None:
            data[key] = str(override)
    if settings.backup_dir is not None:
        data[BACKUP_DIR_KEY] = str(settings.backup_dir)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
