# livesync - live configuration reconciliation for AI CLI tools
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and errors
from livesync.config import LiveSettings, load_settings, save_settings
from livesync.errors import (
    ConfigError,
    HomeDirectoryError,
    LiveConfigMissing,
    LiveIOError,
    LiveParseError,
    LiveSyncError,
)
from livesync.models import AppType, LiveAdapter, Provider, ProviderStore
from livesync.paths import LivePaths

# ABOUTME: Export adapters, snapshots and sync operations
from livesync.adapters import get_adapter, get_all_adapters
from livesync.snapshot import capture_snapshot, restore_snapshot, rollback_on_error
from livesync.sync import (
    SyncReport,
    import_default_config,
    import_droid_custom_models,
    read_live,
    sync_current_to_live,
    sync_from_settings,
    write_live,
    write_live_with_rollback,
)

__all__ = [
    "__version__",
    "AppType",
    "Provider",
    "ProviderStore",
    "LiveAdapter",
    "LiveSettings",
    "LivePaths",
    "load_settings",
    "save_settings",
    "LiveSyncError",
    "LiveIOError",
    "LiveParseError",
    "ConfigError",
    "LiveConfigMissing",
    "HomeDirectoryError",
    "get_adapter",
    "get_all_adapters",
    "capture_snapshot",
    "restore_snapshot",
    "rollback_on_error",
    "SyncReport",
    "write_live",
    "read_live",
    "write_live_with_rollback",
    "sync_current_to_live",
    "sync_from_settings",
    "import_default_config",
    "import_droid_custom_models",
]
