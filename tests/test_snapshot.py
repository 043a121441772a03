# ABOUTME: Tests for live file snapshots and rollback
import pytest

from livesync.errors import LiveIOError
from livesync.models import AppType
from livesync.paths import LivePaths
from livesync.snapshot import (
    CapturedFile,
    CodexSnapshot,
    GeminiSnapshot,
    capture_snapshot,
    restore_snapshot,
    rollback_on_error,
)


class TestCapturedFile:
    """Tests for single-file capture and restore."""

    def test_capture_absent(self, tmp_path):
        captured = CapturedFile.capture(tmp_path / "missing.json")
        assert captured.content is None

    def test_restore_verbatim(self, tmp_path):
        path = tmp_path / "settings.json"
        original = '{ "a":1,\n\n  "b" : [ ] }'
        path.write_text(original)
        captured = CapturedFile.capture(path)
        path.write_text("{}")

        captured.restore()

        assert path.read_text() == original

    def test_restore_keeps_crlf_line_endings(self, tmp_path):
        path = tmp_path / "config.toml"
        original = b'model = "x"\r\n[a]\r\nb = 1\r\n'
        path.write_bytes(original)
        captured = CapturedFile.capture(path)
        path.write_bytes(b'model = "y"\n')

        captured.restore()

        assert path.read_bytes() == original

    def test_restore_non_utf8_content(self, tmp_path):
        path = tmp_path / ".env"
        original = b"GEMINI_API_KEY=caf\xe9\n"
        path.write_bytes(original)
        captured = CapturedFile.capture(path)
        path.write_bytes(b"")

        captured.restore()

        assert path.read_bytes() == original

    def test_restore_absent_deletes(self, tmp_path):
        path = tmp_path / "settings.json"
        captured = CapturedFile.capture(path)
        path.write_text("{}")

        captured.restore()

        assert not path.exists()

    def test_restore_absent_when_still_absent(self, tmp_path):
        CapturedFile(path=tmp_path / "never.json", content=None).restore()
        assert not (tmp_path / "never.json").exists()


def test_capture_snapshot_kinds(paths: LivePaths) -> None:
    """Test that each app type captures its own file set."""
    codex = capture_snapshot(AppType.CODEX, paths)
    gemini = capture_snapshot(AppType.GEMINI, paths)

    assert isinstance(codex, CodexSnapshot)
    assert [f.path for f in codex.files()] == [paths.codex_auth, paths.codex_config]
    assert isinstance(gemini, GeminiSnapshot)
    assert [f.path for f in gemini.files()] == [paths.gemini_env, paths.gemini_settings]
    assert capture_snapshot(AppType.DROID, paths).app_type is AppType.DROID


def test_restore_snapshot_mixed(paths: LivePaths) -> None:
    """Test restoring a snapshot where one file existed and one did not."""
    paths.codex_dir.mkdir(parents=True)
    paths.codex_auth.write_text('{"k": "old"}')
    snapshot = capture_snapshot(AppType.CODEX, paths)

    paths.codex_auth.write_text('{"k": "new"}')
    paths.codex_config.write_text('model = "x"\n')
    restore_snapshot(snapshot)

    assert paths.codex_auth.read_text() == '{"k": "old"}'
    assert not paths.codex_config.exists()


class TestRollbackOnError:
    """Tests for the rollback context manager."""

    def test_success_keeps_changes(self, paths: LivePaths):
        with rollback_on_error(AppType.CLAUDE, paths):
            paths.claude_dir.mkdir(parents=True)
            (paths.claude_dir / "settings.json").write_text('{"new": 1}')

        assert (paths.claude_dir / "settings.json").read_text() == '{"new": 1}'

    def test_failure_restores_and_reraises(self, paths: LivePaths):
        paths.gemini_dir.mkdir(parents=True)
        paths.gemini_env.write_text("A=1\n")

        with pytest.raises(RuntimeError, match="boom"):
            with rollback_on_error(AppType.GEMINI, paths):
                paths.gemini_env.write_text("A=2\n")
                paths.gemini_settings.write_text("{}")
                raise RuntimeError("boom")

        assert paths.gemini_env.read_text() == "A=1\n"
        assert not paths.gemini_settings.exists()

    def test_failed_restore_keeps_original_error(self, paths: LivePaths, monkeypatch, caplog):
        """Test that the write error reaches the caller even when restore fails."""
        def broken_restore(self):
            raise LiveIOError(self.path, OSError("disk full"))

        monkeypatch.setattr(CapturedFile, "restore", broken_restore)

        with pytest.raises(RuntimeError, match="write failed"):
            with rollback_on_error(AppType.DROID, paths):
                raise RuntimeError("write failed")

        assert "Rollback of droid live configuration failed" in caplog.text
        assert "disk full" in caplog.text
