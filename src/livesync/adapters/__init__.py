# Live adapter registry
from livesync.adapters.claude import ClaudeAdapter
from livesync.adapters.codex import CodexAdapter
from livesync.adapters.droid import DroidAdapter
from livesync.adapters.gemini import GeminiAdapter
from livesync.models import AppType, LiveAdapter
from livesync.paths import LivePaths

# Registry of the adapter class serving each app type
ADAPTERS: dict[AppType, type[LiveAdapter]] = {
    AppType.CLAUDE: ClaudeAdapter,
    AppType.CODEX: CodexAdapter,
    AppType.GEMINI: GeminiAdapter,
    AppType.DROID: DroidAdapter,
}

__all__ = [
    "LiveAdapter",
    "ClaudeAdapter",
    "CodexAdapter",
    "GeminiAdapter",
    "DroidAdapter",
    "ADAPTERS",
    "get_adapter",
    "get_all_adapters",
]


def get_adapter(app_type: AppType, paths: LivePaths | None = None) -> LiveAdapter:
    """Instantiate the adapter for one app type."""
    return ADAPTERS[app_type](paths)


def get_all_adapters(paths: LivePaths | None = None) -> list[LiveAdapter]:
    """Instantiate and return all adapters, in AppType order.

    ABOUTME: Resolves default paths once and shares them across adapters
    """
    if paths is None:
        paths = LivePaths.from_settings()
    return [ADAPTERS[app_type](paths) for app_type in AppType]
