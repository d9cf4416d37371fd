"""
Environment variables for hits-search.

Settings read from the environment share the ``HITS_SEARCH_`` prefix, so
callers name them by key only: ``get_env_int("SERVER_PORT")`` reads
``HITS_SEARCH_SERVER_PORT``. Unset variables yield the default; a variable
that is set but cannot be read as the requested type is an error.
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

ENV_PREFIX = "HITS_SEARCH_"

TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})


def load_env_file(env_file: Optional[Union[str, Path]] = None) -> bool:
    """
    Load variables from a .env file.

    Args:
        env_file: Path to the file; without one, the nearest .env is used

    Returns:
        True if a file was found and loaded
    """
    if env_file:
        return load_dotenv(env_file)

    return load_dotenv(dotenv_path=None, override=True)


def env_name(key: str) -> str:
    """Full variable name for a settings key, e.g. ``HITS_SEARCH_DEBUG``."""
    return f"{ENV_PREFIX}{key.upper()}"


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read a prefixed variable as a string.

    Empty values count as unset.
    """
    value = os.getenv(env_name(key))
    return value if value else default


def get_env_bool(key: str, default: Optional[bool] = None) -> Optional[bool]:
    """
    Read a prefixed variable as a boolean.

    Args:
        key: Settings key without the prefix
        default: Value when the variable is unset

    Returns:
        Parsed flag or the default

    Raises:
        ValueError: If the value is not a recognised flag
    """
    value = get_env(key)
    if value is None:
        return default

    flag = value.strip().lower()
    if flag in TRUE_VALUES:
        return True
    if flag in FALSE_VALUES:
        return False
    raise ValueError(f"{env_name(key)} must be a boolean, got {value!r}")


def get_env_int(key: str, default: Optional[int] = None) -> Optional[int]:
    """Read a prefixed variable as an integer, raising ValueError when malformed."""
    value = get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{env_name(key)} must be an integer, got {value!r}") from None


def get_env_float(key: str, default: Optional[float] = None) -> Optional[float]:
    """Read a prefixed variable as a number, raising ValueError when malformed."""
    value = get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{env_name(key)} must be a number, got {value!r}") from None
