# Environment variable and path expansion for settings values
import os
import re
import warnings
from pathlib import Path

from livesync.errors import HomeDirectoryError

# ABOUTME: Pattern matches ${VAR_NAME} where VAR_NAME is uppercase with underscores
ENV_VAR_PATTERN = re.compile(r'\$\{([A-Z_][A-Z0-9_]*)\}')


def expand_env_vars(value: str) -> str:
    """Expand environment variables in ${VAR} format.

    ABOUTME: Unknown variables are kept verbatim, with a UserWarning

    Examples:
        >>> expand_env_vars("${HOME}/.claude")
        '/Users/user/.claude'
    """
    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        if var_name in os.environ:
            return os.environ[var_name]
        warnings.warn(
            f"Environment variable '{var_name}' not found, keeping original",
            UserWarning,
            stacklevel=2
        )
        return match.group(0)

    return ENV_VAR_PATTERN.sub(replace_var, value)


def expand_path(value: str | None) -> Path | None:
    """Turn a user-supplied directory string into an absolute Path.

    ABOUTME: Blank or missing values mean "no override" and return None
    ABOUTME: Expands ${VAR} references first, then a leading ~
    """
    if value is None or not value.strip():
        return None

    expanded = expand_env_vars(value.strip())
    return Path(expanded).expanduser().absolute()


def get_home_dir() -> Path:
    """Return the user's home directory.

    Raises:
        HomeDirectoryError: If the home directory cannot be determined
    """
    try:
        return Path.home()
    except (KeyError, RuntimeError) as e:
        raise HomeDirectoryError(f"Cannot determine home directory: {e}") from e
