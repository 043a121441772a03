# ABOUTME: Capture and restore of live configuration files for rollback
# ABOUTME: Snapshots hold raw file bytes so restore is byte-for-byte
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from livesync.adapters.base import atomic_write_bytes, delete_file, read_bytes_file
from livesync.errors import LiveSyncError
from livesync.models import AppType
from livesync.paths import LivePaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedFile:
    """One file's bytes at capture time; None means the file was absent."""
    path: Path
    content: bytes | None

    @classmethod
    def capture(cls, path: Path) -> "CapturedFile":
        if not path.exists():
            return cls(path=path, content=None)
        return cls(path=path, content=read_bytes_file(path))

    def restore(self) -> None:
        if self.content is None:
            delete_file(self.path)
        else:
            atomic_write_bytes(self.path, self.content)


@dataclass(frozen=True)
class ClaudeSnapshot:
    settings: CapturedFile
    app_type: ClassVar[AppType] = AppType.CLAUDE

    def files(self) -> tuple[CapturedFile, ...]:
        return (self.settings,)


@dataclass(frozen=True)
class CodexSnapshot:
    auth: CapturedFile
    config: CapturedFile
    app_type: ClassVar[AppType] = AppType.CODEX

    def files(self) -> tuple[CapturedFile, ...]:
        return (self.auth, self.config)


@dataclass(frozen=True)
class GeminiSnapshot:
    env: CapturedFile
    settings: CapturedFile
    app_type: ClassVar[AppType] = AppType.GEMINI

    def files(self) -> tuple[CapturedFile, ...]:
        return (self.env, self.settings)


@dataclass(frozen=True)
class DroidSnapshot:
    settings: CapturedFile
    app_type: ClassVar[AppType] = AppType.DROID

    def files(self) -> tuple[CapturedFile, ...]:
        return (self.settings,)


LiveSnapshot = ClaudeSnapshot | CodexSnapshot | GeminiSnapshot | DroidSnapshot


def capture_snapshot(app_type: AppType, paths: LivePaths) -> LiveSnapshot:
    """Read the current live files of one app type into memory.

    Raises:
        LiveIOError: If an existing live file cannot be read
    """
    if app_type is AppType.CLAUDE:
        return ClaudeSnapshot(settings=CapturedFile.capture(paths.claude_settings))
    if app_type is AppType.CODEX:
        return CodexSnapshot(
            auth=CapturedFile.capture(paths.codex_auth),
            config=CapturedFile.capture(paths.codex_config),
        )
    if app_type is AppType.GEMINI:
        return GeminiSnapshot(
            env=CapturedFile.capture(paths.gemini_env),
            settings=CapturedFile.capture(paths.gemini_settings),
        )
    return DroidSnapshot(settings=CapturedFile.capture(paths.droid_settings))


def restore_snapshot(snapshot: LiveSnapshot) -> None:
    """Write every captured file back, or delete it if it was absent.

    ABOUTME: Files are restored independently; all are attempted before raising
    ABOUTME: Re-raises the first failure, so a multi-file restore may be partial
    """
    failures: list[LiveSyncError] = []
    for captured in snapshot.files():
        try:
            captured.restore()
        except LiveSyncError as e:
            logger.error(f"Failed to restore {captured.path}: {e}")
            failures.append(e)

    if failures:
        raise failures[0]
    logger.info(f"Restored {snapshot.app_type.value} live configuration from snapshot")


@contextmanager
def rollback_on_error(app_type: AppType, paths: LivePaths) -> Iterator[LiveSnapshot]:
    """Capture live files, and restore them if the with-block raises.

    ABOUTME: The with-block's exception always propagates; a failed restore is logged

    Examples:
        >>> with rollback_on_error(AppType.CODEX, paths):
        ...     CodexAdapter(paths).write_live(provider)
    """
    snapshot = capture_snapshot(app_type, paths)
    try:
        yield snapshot
    except Exception:
        logger.warning(f"Rolling back {app_type.value} live configuration")
        try:
            restore_snapshot(snapshot)
        except LiveSyncError as restore_error:
            logger.error(f"Rollback of {app_type.value} live configuration failed: {restore_error}")
        raise
