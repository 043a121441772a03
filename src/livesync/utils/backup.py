# ABOUTME: Backup utilities for live configuration files.
# ABOUTME: Handles timestamped backups with automatic retention cleanup (keep last 5 per label).
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

from livesync.utils.env import get_home_dir

logger = logging.getLogger(__name__)

# Pattern matches: {label}_{YYYYMMDD}_{HHMMSS}[.{ext}]
# e.g., codex-auth_20260108_143022.json, gemini-env_20260108_143022
BACKUP_PATTERN = re.compile(r"^(.+?)_(\d{8}_\d{6})(\..+)?$")


def backup_label(source_path: Path) -> str:
    """Derive a label from a file name.

    ABOUTME: settings.json -> settings, .env -> env, auth.json -> auth
    """
    return source_path.stem.lstrip(".") or "file"


def create_backup(source_path: Path, backup_dir: Path, label: str | None = None) -> Path:
    """Create a timestamped backup of a file.

    ABOUTME: Backup format: {label}_{YYYYMMDD}_{HHMMSS}{ext}
    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Creates backup_dir if it doesn't exist

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created
        label: Prefix for the backup name, defaults to the file's stem

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails

    Examples:
        >>> create_backup(Path("~/.codex/auth.json").expanduser(), backup_dir, "codex-auth").name
        'codex-auth_20260108_143022.json'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    if label is None:
        label = backup_label(source_path)

    # A dotfile like .env has no suffix; its backup has no extension either
    backup_path = backup_dir / f"{label}_{timestamp}{source_path.suffix}"

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir)

    return backup_path


def get_backup_dir() -> Path:
    """Get the default backup directory path.

    ABOUTME: Returns ~/.livesync/backups
    ABOUTME: Does not create the directory

    Raises:
        HomeDirectoryError: If the home directory cannot be determined
    """
    return get_home_dir() / ".livesync" / "backups"


def cleanup_old_backups(backup_dir: Path, max_backups_per_label: int = 5) -> list[Path]:
    """Remove old backup files, keeping only the most recent per label.

    ABOUTME: Groups backups by label prefix (before _timestamp)
    ABOUTME: Deletes backups beyond max_backups_per_label for each label
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    if not backup_dir.exists():
        return deleted_files

    backups_by_label: dict[str, list[tuple[str, Path]]] = {}

    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue

        match = BACKUP_PATTERN.match(file_path.name)
        if not match:
            continue

        label = match.group(1)
        timestamp = match.group(2)
        backups_by_label.setdefault(label, []).append((timestamp, file_path))

    for label, backups in backups_by_label.items():
        # Newest first
        backups.sort(key=lambda x: x[0], reverse=True)

        for timestamp, file_path in backups[max_backups_per_label:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files
