# ABOUTME: Live path resolution for every supported app type
# ABOUTME: Pure computation; nothing here touches the filesystem except existence checks
from dataclasses import dataclass
from pathlib import Path

from livesync.config import LiveSettings, get_home_dir
from livesync.models import AppType

# ABOUTME: Default directory name under the home directory, per app type
DEFAULT_DIR_NAMES: dict[AppType, str] = {
    AppType.CLAUDE: ".claude",
    AppType.CODEX: ".codex",
    AppType.GEMINI: ".gemini",
    AppType.DROID: ".factory",
}


@dataclass(frozen=True)
class LivePaths:
    """Resolved base directories of every app's live configuration.

    ABOUTME: Build once per process with from_settings() and pass it around
    ABOUTME: File-level properties derive from the four base directories
    """
    claude_dir: Path
    codex_dir: Path
    gemini_dir: Path
    droid_dir: Path

    @classmethod
    def from_settings(cls, settings: LiveSettings | None = None) -> "LivePaths":
        """Resolve base directories, honoring per-app overrides.

        Raises:
            HomeDirectoryError: If a default is needed and $HOME is unknown
        """
        if settings is None:
            settings = LiveSettings()

        def resolve(app_type: AppType) -> Path:
            override = settings.override_dir(app_type)
            if override is not None:
                return override
            return get_home_dir() / DEFAULT_DIR_NAMES[app_type]

        return cls(
            claude_dir=resolve(AppType.CLAUDE),
            codex_dir=resolve(AppType.CODEX),
            gemini_dir=resolve(AppType.GEMINI),
            droid_dir=resolve(AppType.DROID),
        )

    @classmethod
    def under(cls, root: Path) -> "LivePaths":
        """Place every app's directory under one root (tests, sandboxes)."""
        return cls(**{
            f"{app_type.value}_dir": root / name
            for app_type, name in DEFAULT_DIR_NAMES.items()
        })

    def config_dir(self, app_type: AppType) -> Path:
        return {
            AppType.CLAUDE: self.claude_dir,
            AppType.CODEX: self.codex_dir,
            AppType.GEMINI: self.gemini_dir,
            AppType.DROID: self.droid_dir,
        }[app_type]

    @property
    def claude_settings(self) -> Path:
        """Claude settings.json, or the legacy claude.json if only that exists."""
        settings = self.claude_dir / "settings.json"
        legacy = self.claude_dir / "claude.json"
        if not settings.exists() and legacy.exists():
            return legacy
        return settings

    @property
    def codex_auth(self) -> Path:
        return self.codex_dir / "auth.json"

    @property
    def codex_config(self) -> Path:
        return self.codex_dir / "config.toml"

    @property
    def gemini_env(self) -> Path:
        return self.gemini_dir / ".env"

    @property
    def gemini_settings(self) -> Path:
        return self.gemini_dir / "settings.json"

    @property
    def droid_settings(self) -> Path:
        """Droid runtime settings.json, holding customModels."""
        return self.droid_dir / "settings.json"

    @property
    def droid_config(self) -> Path:
        """Droid main config.json, edited by the user."""
        return self.droid_dir / "config.json"

    @property
    def droid_mcp(self) -> Path:
        return self.droid_dir / "mcp.json"

    def live_files(self, app_type: AppType) -> list[Path]:
        """Every file a write for this app type may touch, in write order."""
        if app_type is AppType.CLAUDE:
            return [self.claude_settings]
        if app_type is AppType.CODEX:
            return [self.codex_auth, self.codex_config]
        if app_type is AppType.GEMINI:
            return [self.gemini_env, self.gemini_settings]
        return [self.droid_settings]
