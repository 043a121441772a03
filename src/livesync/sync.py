# Sync orchestration for livesync
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from livesync.adapters import get_adapter
from livesync.adapters.droid import DroidAdapter, build_droid_model, model_to_settings
from livesync.config import LiveSettings
from livesync.errors import LiveSyncError
from livesync.models import AppType, ImportReport, Provider, ProviderStore
from livesync.paths import LivePaths
from livesync.snapshot import rollback_on_error
from livesync.utils.backup import backup_label, create_backup

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_ID = "default"


@dataclass
class SyncReport:
    """Report from a sync of current providers to live files.

    ABOUTME: Tracks which app types were written, skipped or failed
    ABOUTME: A failure for one app type never stops the others
    """
    apps_total: int
    apps_synced: dict[str, str] = field(default_factory=dict)
    apps_skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_synced(self, app_type: AppType, provider_name: str) -> None:
        self.apps_synced[app_type.value] = provider_name

    def add_skipped(self, app_type: AppType) -> None:
        self.apps_skipped.append(app_type.value)

    def add_error(self, error: str) -> None:
        """Record an error that occurred during sync.

        ABOUTME: Errors are non-fatal, sync continues
        """
        self.errors.append(error)

    @property
    def ok(self) -> bool:
        return not self.errors


def write_live(app_type: AppType, provider: Provider, paths: LivePaths) -> None:
    """Write one provider to its app's live files."""
    get_adapter(app_type, paths).write_live(provider)


def read_live(app_type: AppType, paths: LivePaths) -> Any:
    """Read an app's live files back into canonical settings.

    Raises:
        LiveConfigMissing: If the app has not been configured yet
    """
    return get_adapter(app_type, paths).read_live()


def write_live_with_rollback(app_type: AppType, provider: Provider, paths: LivePaths) -> None:
    """Write live files, restoring the previous state if the write fails.

    ABOUTME: The original error is re-raised after the restore
    """
    with rollback_on_error(app_type, paths):
        write_live(app_type, provider, paths)


def backup_live_files(app_type: AppType, paths: LivePaths, backup_dir: Path) -> list[Path]:
    """Create timestamped backups of the app's existing live files."""
    backups: list[Path] = []
    for live_file in paths.live_files(app_type):
        if live_file.exists():
            label = f"{app_type.value}-{backup_label(live_file)}"
            backups.append(create_backup(live_file, backup_dir, label))
    return backups


def sync_current_to_live(
    store: ProviderStore,
    paths: LivePaths,
    app_types: Iterable[AppType] | None = None,
    mcp_sync: Callable[[], None] | None = None,
    backup_dir: Path | None = None,
) -> SyncReport:
    """Write each app type's effective current provider to its live files.

    ABOUTME: Skips app types without a current provider
    ABOUTME: Continues past per-app failures and records them in the report
    ABOUTME: Runs the MCP sync collaborator last, also failure-isolated

    Args:
        store: Provider store resolving the current provider per app type
        paths: Resolved live paths
        app_types: App types to sync, defaults to all of them
        mcp_sync: Optional "sync all enabled MCP servers" callable
        backup_dir: When set, existing live files are backed up before writing

    Returns:
        SyncReport with results from all app types
    """
    selected = list(app_types) if app_types is not None else list(AppType)
    report = SyncReport(apps_total=len(selected))

    for app_type in selected:
        try:
            current_id = store.get_effective_current_provider(app_type)
            if current_id is None:
                logger.debug(f"No current provider for {app_type.value}, skipping")
                report.add_skipped(app_type)
                continue

            provider = store.get_all_providers(app_type).get(current_id)
            if provider is None:
                report.add_error(f"{app_type.value}: current provider '{current_id}' not found")
                continue

            if backup_dir is not None:
                backup_live_files(app_type, paths, backup_dir)

            write_live(app_type, provider, paths)
            report.add_synced(app_type, provider.name)

        except (LiveSyncError, OSError) as e:
            logger.warning(f"Sync failed for {app_type.value}: {e}")
            report.add_error(f"{app_type.value}: {e}")

    if mcp_sync is not None:
        try:
            mcp_sync()
        except (LiveSyncError, OSError) as e:
            logger.warning(f"MCP sync failed: {e}")
            report.add_error(f"mcp: {e}")

    return report


def sync_from_settings(
    store: ProviderStore,
    settings: LiveSettings,
    mcp_sync: Callable[[], None] | None = None,
) -> SyncReport:
    """Resolve paths and the backup directory from settings, then sync every app type.

    ABOUTME: Existing live files are always backed up before they are replaced

    Raises:
        HomeDirectoryError: If a default directory is needed and $HOME is unknown
    """
    paths = LivePaths.from_settings(settings)
    return sync_current_to_live(
        store, paths, mcp_sync=mcp_sync, backup_dir=settings.resolved_backup_dir()
    )


def import_default_config(store: ProviderStore, app_type: AppType, paths: LivePaths) -> bool:
    """Seed the store with the app's live configuration as provider "default".

    ABOUTME: Returns False without reading anything if providers already exist
    ABOUTME: The imported provider becomes current for the app type

    Raises:
        LiveConfigMissing: If the app has no live configuration to import
    """
    if store.get_all_providers(app_type):
        return False

    settings = read_live(app_type, paths)

    provider = Provider(
        id=DEFAULT_PROVIDER_ID,
        name=DEFAULT_PROVIDER_ID,
        settings_config=settings,
        category="custom",
    )
    store.save_provider(app_type, provider)
    store.set_current_provider(app_type, provider.id)
    logger.info(f"Imported default {app_type.value} provider from live configuration")
    return True


def import_droid_custom_models(store: ProviderStore, paths: LivePaths) -> ImportReport:
    """Import every Droid customModels entry as a provider.

    ABOUTME: Bad entries are recorded and skipped; the rest still import
    ABOUTME: Entries whose id is already a provider id are left alone
    """
    report = ImportReport()
    existing = dict(store.get_all_providers(AppType.DROID))

    for position, entry in enumerate(DroidAdapter(paths).list_custom_models()):
        try:
            if not isinstance(entry, dict):
                raise LiveSyncError(f"entry {position} is not an object")
            display_name = entry.get("displayName")
            if not isinstance(display_name, str) or not display_name:
                raise LiveSyncError(f"entry {position} has no displayName")

            settings = model_to_settings(entry)
            model = build_droid_model(settings, display_name, position)
            entry_id = entry.get("id")
            provider_id = entry_id if isinstance(entry_id, str) and entry_id else model.id

            if provider_id in existing:
                continue

            provider = Provider(
                id=provider_id,
                name=display_name,
                settings_config=settings,
                category="custom",
            )
            store.save_provider(AppType.DROID, provider)
            existing[provider_id] = provider
            report.changed += 1

        except LiveSyncError as e:
            logger.warning(f"Skipping Droid custom model #{position}: {e}")
            report.add_error(f"#{position}: {e}")

    return report
