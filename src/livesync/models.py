# Core data models for livesync
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


class AppType(str, Enum):
    """The external AI-CLI tools whose live configuration we manage."""

    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"
    DROID = "droid"

    @classmethod
    def parse(cls, value: str) -> "AppType":
        """Parse an app type name, case-insensitively.

        ABOUTME: Raises ValueError listing valid names for unknown input
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown app type '{value}'. Must be one of: {valid}") from None


@dataclass(frozen=True)
class Provider:
    """Canonical provider record, as handed to us by the provider store.

    ABOUTME: settings_config is opaque JSON whose shape depends on the app type
    ABOUTME: name is the natural key for collection-style live files
    """
    id: str
    name: str
    settings_config: Any = field(default_factory=dict)
    category: str | None = None


@dataclass(frozen=True)
class CodexSettings:
    """Validated Codex settings: auth.json payload plus config.toml text."""
    auth: Any
    config: str


@dataclass(frozen=True)
class GeminiSettings:
    """Validated Gemini settings.

    ABOUTME: config None means "leave the live settings.json untouched"
    """
    env: dict[str, str]
    config: dict[str, Any] | None


@dataclass(frozen=True)
class DroidModel:
    """One entry of Droid's customModels array (camelCase on disk)."""
    model: str
    id: str
    index: int
    base_url: str
    api_key: str
    display_name: str
    max_output_tokens: int
    no_image_support: bool
    provider: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "id": self.id,
            "index": self.index,
            "baseUrl": self.base_url,
            "apiKey": self.api_key,
            "displayName": self.display_name,
            "maxOutputTokens": self.max_output_tokens,
            "noImageSupport": self.no_image_support,
            "provider": self.provider,
        }


@dataclass(frozen=True)
class ConfigStatus:
    """Whether a config file exists, and where it lives."""
    exists: bool
    path: str


@dataclass
class McpApps:
    """Which apps an MCP server is enabled for."""
    claude: bool = False
    codex: bool = False
    gemini: bool = False
    droid: bool = False


@dataclass
class McpServer:
    """MCP server record in the unified (app-agnostic) store."""
    id: str
    name: str
    server: dict[str, Any]
    apps: McpApps = field(default_factory=McpApps)
    description: str | None = None
    homepage: str | None = None
    docs: str | None = None
    tags: list[str] = field(default_factory=list)


@runtime_checkable
class LiveAdapter(Protocol):
    """Protocol for per-app live configuration adapters.

    ABOUTME: Defines interface all format adapters must implement
    ABOUTME: Uses @runtime_checkable for isinstance() support
    """

    @property
    def app_type(self) -> AppType:
        """Which app this adapter serves."""
        ...

    @property
    def name(self) -> str:
        """Human-readable app name."""
        ...

    def live_files(self) -> list[Path]:
        """Every live file this adapter may write, in write order."""
        ...

    def write_live(self, provider: Provider) -> None:
        """Translate the provider to live shape and persist it."""
        ...

    def read_live(self) -> Any:
        """Read live files back into the canonical settings shape."""
        ...


@runtime_checkable
class ProviderStore(Protocol):
    """The provider database, owned outside livesync."""

    def get_effective_current_provider(self, app_type: AppType) -> str | None:
        """Validated current provider id, falling back to the database flag."""
        ...

    def get_all_providers(self, app_type: AppType) -> dict[str, Provider]:
        ...

    def save_provider(self, app_type: AppType, provider: Provider) -> None:
        ...

    def set_current_provider(self, app_type: AppType, provider_id: str) -> None:
        ...


@dataclass
class ImportReport:
    """Report from a bulk import.

    ABOUTME: Failures are per item; the import continues past them
    """
    changed: int = 0
    errors: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        self.errors.append(error)
