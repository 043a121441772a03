# ABOUTME: Validation utilities for MCP server specs found in live files
# ABOUTME: Checks only the fields we read or write, not the full MCP schema
from typing import Any
from urllib.parse import urlparse

from livesync.errors import ConfigError

VALID_SERVER_TYPES = ("stdio", "http", "sse")


def validate_url(url: str) -> str | None:
    """Validate that a URL is properly formatted.

    ABOUTME: Requires HTTP or HTTPS scheme and a host
    ABOUTME: Returns None if URL valid, an error message otherwise
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return f"Invalid URL format '{url}': {e}"
    if parsed.scheme not in ("http", "https"):
        return f"URL must use HTTP or HTTPS scheme: {url}"
    if not parsed.netloc:
        return f"URL missing host/domain: {url}"
    return None


def _check_string_map(spec: dict[str, Any], key: str) -> None:
    value = spec.get(key)
    if value is None:
        return
    if not isinstance(value, dict):
        raise ConfigError(key, "must be an object")
    for name, item in value.items():
        if not isinstance(item, str):
            raise ConfigError(f"{key}.{name}", "must be a string")


def validate_server_spec(spec: Any) -> None:
    """Validate one MCP server spec.

    ABOUTME: type defaults to stdio when absent
    ABOUTME: stdio needs a command; http and sse need a valid url

    Raises:
        ConfigError: Naming the first offending field

    Examples:
        >>> validate_server_spec({"command": "npx", "args": ["-y", "server"]})
        >>> validate_server_spec({"type": "http"})
        Traceback (most recent call last):
        ...
        livesync.errors.ConfigError: url: is required for http servers
    """
    if not isinstance(spec, dict):
        raise ConfigError("server", "must be an object")

    server_type = spec.get("type", "stdio")
    if server_type not in VALID_SERVER_TYPES:
        valid = ", ".join(VALID_SERVER_TYPES)
        raise ConfigError("type", f"invalid type '{server_type}'. Must be one of: {valid}")

    if server_type == "stdio":
        command = spec.get("command")
        if not isinstance(command, str) or not command.strip():
            raise ConfigError("command", "is required for stdio servers")

        args = spec.get("args")
        if args is not None and (
            not isinstance(args, list) or not all(isinstance(a, str) for a in args)
        ):
            raise ConfigError("args", "must be an array of strings")
        _check_string_map(spec, "env")
    else:
        url = spec.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ConfigError("url", f"is required for {server_type} servers")

        url_error = validate_url(url)
        if url_error:
            raise ConfigError("url", url_error)
        _check_string_map(spec, "headers")
