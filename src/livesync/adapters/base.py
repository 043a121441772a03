# Adapter base utilities: file primitives and field lookup
import json
import os
from pathlib import Path
from typing import Any

from livesync.errors import LiveIOError, LiveParseError


def read_json_file(path: Path) -> Any:
    """Read JSON file with error handling.

    ABOUTME: Returns empty dict if file doesn't exist
    ABOUTME: Raises LiveParseError for invalid JSON or UTF-8, LiveIOError for unreadable files
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise LiveParseError(path, str(e)) from e
    except UnicodeDecodeError as e:
        raise LiveParseError(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise LiveIOError(path, e) from e


def read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LiveParseError(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise LiveIOError(path, e) from e


def read_bytes_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise LiveIOError(path, e) from e


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Write bytes via a sibling temp file and os.replace().

    ABOUTME: Readers never observe a truncated file
    ABOUTME: Creates parent directories if needed
    """
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_bytes(content)
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise LiveIOError(path, e) from e


def atomic_write(path: Path, content: str) -> None:
    """Write text atomically as UTF-8, without newline translation."""
    atomic_write_bytes(path, content.encode("utf-8"))


def write_json_file(path: Path, data: Any) -> None:
    """Write JSON file atomically.

    ABOUTME: Uses 2-space indentation and keeps key order as given
    """
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    atomic_write(path, content)


def write_text_file(path: Path, text: str) -> None:
    """Write raw text atomically, exactly as given."""
    atomic_write(path, text)


def delete_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise LiveIOError(path, e) from e


def lookup_field(data: dict[str, Any], *candidates: str) -> tuple[str, Any] | None:
    """Return (key, value) for the first candidate key present in data.

    ABOUTME: Compatibility shim for settings that arrive in two casings
    ABOUTME: e.g. lookup_field(obj, "apiKey", "api_key")
    """
    for key in candidates:
        if key in data:
            return key, data[key]
    return None
