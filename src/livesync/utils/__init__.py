# ABOUTME: Utility modules for livesync
# ABOUTME: Exports env expansion, backup, and validation functions

from livesync.utils.backup import cleanup_old_backups, create_backup, get_backup_dir
from livesync.utils.env import expand_env_vars, expand_path, get_home_dir
from livesync.utils.validation import validate_server_spec, validate_url

__all__ = [
    "expand_env_vars",
    "expand_path",
    "get_home_dir",
    "validate_server_spec",
    "validate_url",
    "create_backup",
    "cleanup_old_backups",
    "get_backup_dir",
]
