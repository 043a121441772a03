# ABOUTME: MCP server sync and import for Droid (~/.factory/mcp.json)
# ABOUTME: Only the mcpServers map is owned here; other top-level fields are preserved
import logging
from typing import Any

from livesync.adapters.base import read_json_file, write_json_file
from livesync.errors import ConfigError, LiveSyncError
from livesync.models import ImportReport, McpApps, McpServer
from livesync.paths import LivePaths
from livesync.utils.validation import validate_server_spec

logger = logging.getLogger(__name__)

MCP_SERVERS_KEY = "mcpServers"

# ABOUTME: Fields of the unified server record that are not part of the MCP spec
UI_FIELDS = ("enabled", "source", "id", "name", "description", "tags", "homepage", "docs")


def should_sync_droid_mcp(paths: LivePaths) -> bool:
    """Droid not installed (no ~/.factory) means: create nothing, delete nothing."""
    return paths.droid_dir.exists()


def read_mcp_servers_map(paths: LivePaths) -> dict[str, Any]:
    """Read the mcpServers map; empty when mcp.json is absent."""
    root = read_json_file(paths.droid_mcp)
    if not isinstance(root, dict):
        return {}
    servers = root.get(MCP_SERVERS_KEY)
    return dict(servers) if isinstance(servers, dict) else {}


def get_enabled_server_ids(paths: LivePaths) -> set[str]:
    """Every server id present in mcp.json counts as enabled for Droid."""
    return set(read_mcp_servers_map(paths))


def to_live_spec(server_id: str, spec: Any) -> dict[str, Any]:
    """Strip UI helper fields, unwrapping a nested 'server' object first."""
    if not isinstance(spec, dict):
        raise ConfigError(server_id, "MCP server spec must be an object")

    live = dict(spec)
    if "server" in live:
        inner = live.pop("server")
        if not isinstance(inner, dict):
            raise ConfigError(f"{server_id}.server", "must be an object")
        live = dict(inner)

    for key in UI_FIELDS:
        live.pop(key, None)
    return live


def set_mcp_servers_map(paths: LivePaths, servers: dict[str, Any]) -> None:
    """Replace the mcpServers map in mcp.json.

    ABOUTME: Creates mcp.json if missing; keeps every other top-level field
    """
    root = read_json_file(paths.droid_mcp)
    if not isinstance(root, dict):
        raise ConfigError("mcp.json", f"root of {paths.droid_mcp} must be a JSON object")

    root[MCP_SERVERS_KEY] = {
        server_id: to_live_spec(server_id, spec) for server_id, spec in servers.items()
    }
    write_json_file(paths.droid_mcp, root)


def sync_single_server(paths: LivePaths, server_id: str, spec: dict[str, Any]) -> None:
    """Add or update one server in Droid's mcp.json."""
    if not should_sync_droid_mcp(paths):
        return

    current = read_mcp_servers_map(paths)
    current[server_id] = spec
    set_mcp_servers_map(paths, current)
    logger.info(f"Synced MCP server '{server_id}' to Droid")


def remove_server(paths: LivePaths, server_id: str) -> None:
    """Remove one server from Droid's mcp.json."""
    if not should_sync_droid_mcp(paths):
        return

    current = read_mcp_servers_map(paths)
    if current.pop(server_id, None) is None:
        return
    set_mcp_servers_map(paths, current)
    logger.info(f"Removed MCP server '{server_id}' from Droid")


def import_from_droid(paths: LivePaths, servers: dict[str, McpServer]) -> ImportReport:
    """Import Droid's MCP servers into the unified server map.

    ABOUTME: Invalid specs are recorded and skipped; the rest still import
    ABOUTME: Existing servers only gain the droid flag; other fields are untouched
    ABOUTME: New servers are enabled for Droid only

    Args:
        paths: Resolved live paths
        servers: Unified server map, updated in place

    Returns:
        ImportReport with the number of changed servers and per-item errors
    """
    report = ImportReport()

    for server_id, spec in read_mcp_servers_map(paths).items():
        try:
            validate_server_spec(spec)
        except LiveSyncError as e:
            logger.warning(f"Skipping invalid MCP server '{server_id}': {e}")
            report.add_error(f"{server_id}: {e}")
            continue

        existing = servers.get(server_id)
        if existing is not None:
            if not existing.apps.droid:
                existing.apps.droid = True
                report.changed += 1
                logger.info(f"Enabled Droid for MCP server '{server_id}'")
            continue

        servers[server_id] = McpServer(
            id=server_id,
            name=server_id,
            server=dict(spec),
            apps=McpApps(droid=True),
        )
        report.changed += 1
        logger.info(f"Imported new MCP server '{server_id}'")

    if report.errors:
        logger.warning(f"Import finished with {len(report.errors)} failed item(s)")

    return report
