"""
Configuration management for hits-search.

This module handles loading and validating configuration from configuration
files and environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field

from hits_search.utils.environment import get_env, get_env_bool, get_env_float, get_env_int


class BackendConfig(BaseModel):
    """Configuration for the search backend."""

    application_id: str = Field(..., description="Backend application identifier")
    api_key: str = Field(..., description="Backend search API key")
    api_url: Optional[str] = Field(
        None,
        description="Backend base URL, defaults to https://<application_id>-dsn.algolia.net",
    )
    timeout: float = Field(30.0, description="Request timeout in seconds")


class SearchConfig(BaseModel):
    """Configuration for search behaviour."""

    disjunctive_faceting: bool = Field(
        True, description="Correct facet counts for OR-combined facet selections"
    )


class ServerConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = Field("127.0.0.1", description="Server host")
    port: int = Field(8000, description="Server port")
    workers: int = Field(1, description="Number of worker processes")
    reload: bool = Field(False, description="Enable auto-reload for development")
    cors_origins: List[str] = Field(
        ["*"], description="CORS allowed origins for API endpoints"
    )
    request_timeout: int = Field(60, description="Keep-alive timeout in seconds")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field("INFO", description="Default logging level")
    config_file: Optional[str] = Field(
        None, description="Path to logging configuration file"
    )
    log_file: Optional[str] = Field(None, description="Path to log file")


class Config(BaseModel):
    """Main configuration for hits-search."""

    backend: BackendConfig
    search: SearchConfig = Field(default_factory=SearchConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    debug: bool = Field(False, description="Enable debug mode")
    environment: str = Field("production", description="Deployment environment")


def load_config(config_path: Union[str, Path]) -> Config:
    """
    Load configuration from a YAML file.

    A sibling file named ``<stem>.<ENV>.yaml`` (ENV defaults to ``local``) is
    deep-merged on top when it exists.

    Args:
        config_path: Path to configuration YAML file

    Returns:
        Validated configuration object

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    config_data = _read_yaml(config_path)

    env_config_path = config_path.parent / f"{config_path.stem}.{os.getenv('ENV', 'local')}.yaml"
    if env_config_path.exists():
        # Environment-specific values take precedence
        config_data = _deep_merge(config_data, _read_yaml(env_config_path))

    try:
        return Config(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as file:
            data = yaml.safe_load(file)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")
    return data


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary with values to override in base

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables.

    Variables carry the HITS_SEARCH_ prefix followed by the section and the
    field name; unset variables keep the model defaults.

    Examples:
        HITS_SEARCH_BACKEND_APPLICATION_ID=xxx
        HITS_SEARCH_BACKEND_API_KEY=xxx
        HITS_SEARCH_SEARCH_DISJUNCTIVE_FACETING=false
        HITS_SEARCH_SERVER_PORT=8080
        HITS_SEARCH_LOGGING_LEVEL=DEBUG

    Returns:
        Validated configuration object with values from environment variables

    Raises:
        ValueError: If a variable is malformed or the configuration is invalid
    """
    config_data: Dict[str, Any] = {
        "backend": {
            "application_id": get_env("BACKEND_APPLICATION_ID", ""),
            "api_key": get_env("BACKEND_API_KEY", ""),
        },
        "debug": get_env_bool("DEBUG"),
        "environment": get_env("ENVIRONMENT"),
    }

    sections = {
        ("backend", "api_url"): get_env("BACKEND_API_URL"),
        ("backend", "timeout"): get_env_float("BACKEND_TIMEOUT"),
        ("search", "disjunctive_faceting"): get_env_bool("SEARCH_DISJUNCTIVE_FACETING"),
        ("server", "host"): get_env("SERVER_HOST"),
        ("server", "port"): get_env_int("SERVER_PORT"),
        ("logging", "level"): get_env("LOGGING_LEVEL"),
    }
    for (section, key), value in sections.items():
        if value is not None:
            config_data.setdefault(section, {})[key] = value

    config_data = {key: value for key, value in config_data.items() if value is not None}

    try:
        return Config(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid environment configuration: {e}") from e
