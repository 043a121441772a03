# ABOUTME: Droid (Factory CLI) live configuration adapter
# ABOUTME: Registers each provider as one customModels entry with a stable id and index
import logging
from pathlib import Path
from typing import Any

from livesync.adapters.base import lookup_field, read_json_file, write_json_file
from livesync.errors import ConfigError, LiveConfigMissing
from livesync.models import AppType, ConfigStatus, DroidModel, LiveAdapter, Provider
from livesync.paths import LivePaths

logger = logging.getLogger(__name__)

CUSTOM_MODELS_KEY = "customModels"
SESSION_DEFAULTS_KEY = "sessionDefaultSettings"

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_PROVIDER = "anthropic"
DEFAULT_MAX_OUTPUT_TOKENS = 131072

# ABOUTME: Accepted spellings per logical field, tried in order
API_KEY_KEYS = ("apiKey", "api_key")
BASE_URL_KEYS = ("baseUrl", "base_url")
MAX_TOKENS_KEYS = ("maxOutputTokens", "max_tokens")
NO_IMAGE_KEYS = ("noImageSupport", "no_image_support")


def sanitize_model_name(name: str) -> str:
    """Replace anything but letters, digits, '-' and '_' with '-'."""
    return "".join(c if c.isalnum() or c in "-_" else "-" for c in name)


def make_model_id(display_name: str, index: int) -> str:
    return f"custom:{sanitize_model_name(display_name)}-{index}"


def _string_field(settings: dict[str, Any], keys: tuple[str, ...], default: str | None) -> str:
    found = lookup_field(settings, *keys)
    if found is None:
        if default is None:
            raise ConfigError(keys[0], "is required for Droid providers")
        return default
    key, value = found
    if not isinstance(value, str):
        raise ConfigError(key, "must be a string")
    return value


def _int_field(settings: dict[str, Any], keys: tuple[str, ...], default: int) -> int:
    found = lookup_field(settings, *keys)
    if found is None:
        return default
    key, value = found
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(key, "must be an integer")
    return value


def _bool_field(settings: dict[str, Any], keys: tuple[str, ...], default: bool) -> bool:
    found = lookup_field(settings, *keys)
    if found is None:
        return default
    key, value = found
    if not isinstance(value, bool):
        raise ConfigError(key, "must be a boolean")
    return value


def build_droid_model(settings: Any, display_name: str, index: int) -> DroidModel:
    """Build a customModels entry from canonical Droid settings.

    ABOUTME: Accepts camelCase and snake_case keys; the first spelling present wins
    ABOUTME: apiKey and baseUrl are required, everything else has a default
    """
    if not isinstance(settings, dict):
        raise ConfigError("settings_config", "Droid settings must be a JSON object")

    api_key = _string_field(settings, API_KEY_KEYS, None)
    base_url = _string_field(settings, BASE_URL_KEYS, None)
    model = _string_field(settings, ("model",), DEFAULT_MODEL)
    provider_kind = _string_field(settings, ("provider",), DEFAULT_PROVIDER)
    max_tokens = _int_field(settings, MAX_TOKENS_KEYS, DEFAULT_MAX_OUTPUT_TOKENS)
    no_image_support = _bool_field(settings, NO_IMAGE_KEYS, False)

    logger.debug(
        f"Droid model fields: api_key={'***' if api_key else '(empty)'}, "
        f"base_url={base_url}, model={model}"
    )

    return DroidModel(
        model=model,
        id=make_model_id(display_name, index),
        index=index,
        base_url=base_url,
        api_key=api_key,
        display_name=display_name,
        max_output_tokens=max_tokens,
        no_image_support=no_image_support,
        provider=provider_kind,
    )


def model_to_settings(entry: dict[str, Any]) -> dict[str, Any]:
    """Translate a customModels entry back into canonical Droid settings."""
    settings: dict[str, Any] = {}
    for key in ("apiKey", "baseUrl", "model", "provider", "maxOutputTokens", "noImageSupport"):
        if key in entry:
            settings[key] = entry[key]
    return settings


def next_model_index(custom_models: list[Any]) -> int:
    """One more than the highest integer index present, or 0."""
    indexes = [
        m["index"] for m in custom_models
        if isinstance(m, dict) and isinstance(m.get("index"), int) and not isinstance(m.get("index"), bool)
    ]
    return max(indexes) + 1 if indexes else 0


def find_model_slot(custom_models: list[Any], display_name: str) -> int | None:
    for position, entry in enumerate(custom_models):
        if isinstance(entry, dict) and entry.get("displayName") == display_name:
            return position
    return None


def upsert_custom_model(settings: dict[str, Any], model: DroidModel) -> str:
    """Merge one entry into a settings document, preserving identity.

    ABOUTME: An entry with the same displayName keeps its id and index
    ABOUTME: New entries are appended; sessionDefaultSettings.model follows the written id
    ABOUTME: Mutates settings in place and returns the final id

    Examples:
        >>> settings = {}
        >>> upsert_custom_model(settings, build_droid_model(
        ...     {"apiKey": "k1", "baseUrl": "https://x"}, "acme", 0))
        'custom:acme-0'
    """
    custom_models = settings.setdefault(CUSTOM_MODELS_KEY, [])
    if not isinstance(custom_models, list):
        raise ConfigError(CUSTOM_MODELS_KEY, "must be an array")

    entry = model.to_dict()
    slot = find_model_slot(custom_models, model.display_name)

    if slot is not None:
        existing = custom_models[slot]
        old_index = existing.get("index")
        if isinstance(old_index, int) and not isinstance(old_index, bool):
            entry["index"] = old_index
        else:
            entry["index"] = slot
        old_id = existing.get("id")
        if isinstance(old_id, str) and old_id:
            entry["id"] = old_id
        else:
            entry["id"] = make_model_id(model.display_name, entry["index"])
        custom_models[slot] = entry
        logger.info(f"Updated Droid custom model: {model.display_name}")
    else:
        custom_models.append(entry)
        logger.info(f"Added Droid custom model: {model.display_name}")

    final_id = entry["id"]
    if final_id:
        session_defaults = settings.setdefault(SESSION_DEFAULTS_KEY, {})
        if not isinstance(session_defaults, dict):
            raise ConfigError(SESSION_DEFAULTS_KEY, "must be an object")
        session_defaults["model"] = final_id
        logger.info(f"Set {SESSION_DEFAULTS_KEY}.model = {final_id}")

    return final_id


class DroidAdapter(LiveAdapter):
    """Adapter for Droid (~/.factory/settings.json customModels).

    ABOUTME: Collection format: one entry per provider, matched by displayName
    ABOUTME: Other entries and unrelated settings are never touched
    """

    def __init__(self, paths: LivePaths | None = None) -> None:
        self._paths = paths if paths else LivePaths.from_settings()

    @property
    def app_type(self) -> AppType:
        return AppType.DROID

    @property
    def name(self) -> str:
        return "Droid"

    def live_files(self) -> list[Path]:
        return self._paths.live_files(AppType.DROID)

    def read_settings(self) -> Any:
        """Read settings.json; empty object when absent."""
        return read_json_file(self._paths.droid_settings)

    def _load_settings_object(self) -> dict[str, Any]:
        settings = self.read_settings()
        if not isinstance(settings, dict):
            raise ConfigError("settings.json", "Droid settings.json must be a JSON object")
        return settings

    def write_live(self, provider: Provider) -> None:
        """Register or update the provider's custom model entry."""
        settings = self._load_settings_object()

        custom_models = settings.get(CUSTOM_MODELS_KEY, [])
        if not isinstance(custom_models, list):
            raise ConfigError(CUSTOM_MODELS_KEY, "must be an array")

        model = build_droid_model(
            provider.settings_config, provider.name, next_model_index(custom_models)
        )
        upsert_custom_model(settings, model)

        path = self._paths.droid_settings
        write_json_file(path, settings)
        logger.info(f"Wrote Droid settings.json: {path}")

    def read_live(self) -> dict[str, Any]:
        """Canonical settings of the selected custom model.

        ABOUTME: Falls back to the first entry when the selection matches nothing

        Raises:
            LiveConfigMissing: If settings.json is absent or has no custom models
        """
        path = self._paths.droid_settings
        if not path.exists():
            raise LiveConfigMissing(path, f"Droid settings.json not found: {path}")

        settings = self._load_settings_object()
        models = [m for m in settings.get(CUSTOM_MODELS_KEY) or [] if isinstance(m, dict)]
        if not models:
            raise LiveConfigMissing(path, f"No custom models configured in {path}")

        selected = None
        session_defaults = settings.get(SESSION_DEFAULTS_KEY)
        if isinstance(session_defaults, dict):
            selected = session_defaults.get("model")

        for entry in models:
            if selected and entry.get("id") == selected:
                return model_to_settings(entry)
        return model_to_settings(models[0])

    def list_custom_models(self) -> list[dict[str, Any]]:
        """All customModels entries currently in settings.json."""
        settings = self.read_settings()
        if not isinstance(settings, dict):
            return []
        models = settings.get(CUSTOM_MODELS_KEY)
        return list(models) if isinstance(models, list) else []

    def remove_custom_model(self, display_name: str) -> bool:
        """Remove the entry with this displayName.

        ABOUTME: No-op when the file, the array or the entry is missing
        ABOUTME: Returns True only if settings.json was rewritten
        """
        settings = self.read_settings()
        if not isinstance(settings, dict):
            return False

        custom_models = settings.get(CUSTOM_MODELS_KEY)
        if not isinstance(custom_models, list):
            return False

        kept = [
            m for m in custom_models
            if not (isinstance(m, dict) and m.get("displayName") == display_name)
        ]
        if len(kept) == len(custom_models):
            return False

        settings[CUSTOM_MODELS_KEY] = kept
        write_json_file(self._paths.droid_settings, settings)
        logger.info(f"Removed Droid custom model: {display_name}")
        return True

    def cleanup_settings_for_new_config(self) -> bool:
        """Strip fields that stop Droid from picking up a fresh config.json.

        ABOUTME: Drops an empty customModels array and sessionDefaultSettings.model
        ABOUTME: Idempotent; writes only when something changed
        """
        path = self._paths.droid_settings
        if not path.exists():
            return False

        settings = self.read_settings()
        if not isinstance(settings, dict):
            return False

        modified = False
        if settings.get(CUSTOM_MODELS_KEY) == []:
            del settings[CUSTOM_MODELS_KEY]
            modified = True
            logger.info(f"Removed empty {CUSTOM_MODELS_KEY} from {path}")

        session_defaults = settings.get(SESSION_DEFAULTS_KEY)
        if isinstance(session_defaults, dict) and "model" in session_defaults:
            del session_defaults["model"]
            modified = True
            logger.info(f"Removed {SESSION_DEFAULTS_KEY}.model from {path}")

        if modified:
            write_json_file(path, settings)
        return modified

    def read_config(self) -> Any:
        """Read config.json (user-edited main config); empty object when absent."""
        return read_json_file(self._paths.droid_config)

    def write_config(self, config: Any) -> None:
        write_json_file(self._paths.droid_config, config)
        logger.info(f"Wrote Droid config.json: {self._paths.droid_config}")

    def config_status(self) -> ConfigStatus:
        path = self._paths.droid_config
        return ConfigStatus(exists=path.exists(), path=str(path))
