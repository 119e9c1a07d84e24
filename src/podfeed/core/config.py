"""Configuration management for podfeed.

Handles TOML configuration loading from an explicit path or from the
local and global default paths, with environment variable precedence
for the fetch limits and log level.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from podfeed import __version__
from podfeed.core.errors import ConfigError

# Configuration file paths
LOCAL_CONFIG_PATH = Path(".podfeed/config.toml")
GLOBAL_CONFIG_PATH = Path.home() / ".podfeed" / "config.toml"

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_USER_AGENT = f"podfeed/{__version__}"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "fetch": {
        "timeout": DEFAULT_TIMEOUT,
        "max_bytes": DEFAULT_MAX_BYTES,
        "follow_redirects": True,
        "user_agent": DEFAULT_USER_AGENT,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "logging": {
        "level": "INFO",
    },
}

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Environment variables and the (section, key) they override
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PODFEED_TIMEOUT": ("fetch", "timeout"),
    "PODFEED_MAX_BYTES": ("fetch", "max_bytes"),
    "PODFEED_LOG_LEVEL": ("logging", "level"),
}


@dataclass
class FetchConfig:
    """Feed download settings."""

    timeout: float = DEFAULT_TIMEOUT
    max_bytes: int = DEFAULT_MAX_BYTES
    follow_redirects: bool = True
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class ServerConfig:
    """HTTP server settings for ``podfeed serve``."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"


@dataclass
class Config:
    """Main configuration container.

    Holds all configuration settings for podfeed, loaded from config
    files with environment variable overrides applied on top.
    """

    fetch: FetchConfig = field(default_factory=FetchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML configuration file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed configuration dictionary, empty if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(
    config_dict: dict[str, Any], environ: Mapping[str, str]
) -> dict[str, Any]:
    """Apply PODFEED_* environment variables on top of file values.

    Raises:
        ConfigError: If a numeric override cannot be parsed.
    """
    result = _deep_merge(config_dict, {})
    for env_name, (section, key) in ENV_OVERRIDES.items():
        raw = environ.get(env_name, "").strip()
        if not raw:
            continue

        if key == "timeout":
            try:
                value: Any = float(raw)
            except ValueError as e:
                raise ConfigError(f"{env_name} must be a number, got '{raw}'") from e
        elif key == "max_bytes":
            try:
                value = int(raw)
            except ValueError as e:
                raise ConfigError(f"{env_name} must be an integer, got '{raw}'") from e
        else:
            value = raw

        result[section] = {**result.get(section, {}), key: value}
    return result


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration values are invalid.
    """
    fetch_config = config_dict.get("fetch", {})

    timeout = fetch_config.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
        raise ConfigError(f"fetch.timeout must be a positive number, got {timeout!r}")

    max_bytes = fetch_config.get("max_bytes")
    if isinstance(max_bytes, bool) or not isinstance(max_bytes, int) or max_bytes <= 0:
        raise ConfigError(f"fetch.max_bytes must be a positive integer, got {max_bytes!r}")

    follow_redirects = fetch_config.get("follow_redirects")
    if not isinstance(follow_redirects, bool):
        raise ConfigError(
            f"fetch.follow_redirects must be a boolean, got {type(follow_redirects).__name__}"
        )

    user_agent = fetch_config.get("user_agent")
    if not isinstance(user_agent, str):
        raise ConfigError(f"fetch.user_agent must be a string, got {type(user_agent).__name__}")

    server_config = config_dict.get("server", {})
    if not isinstance(server_config.get("host"), str):
        raise ConfigError("server.host must be a string")

    port = server_config.get("port")
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"server.port must be between 1 and 65535, got {port!r}")

    level = config_dict.get("logging", {}).get("level")
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid logging level '{level}'. "
            f"Valid options: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )


def _dict_to_config(config_dict: dict[str, Any]) -> Config:
    """Convert a validated configuration dictionary to a Config object."""
    fetch_dict = config_dict["fetch"]
    server_dict = config_dict["server"]
    logging_dict = config_dict["logging"]

    return Config(
        fetch=FetchConfig(
            timeout=float(fetch_dict["timeout"]),
            max_bytes=fetch_dict["max_bytes"],
            follow_redirects=fetch_dict["follow_redirects"],
            user_agent=fetch_dict["user_agent"],
        ),
        server=ServerConfig(
            host=server_dict["host"],
            port=server_dict["port"],
        ),
        logging=LoggingConfig(
            level=logging_dict["level"].upper(),
        ),
    )


def load_config(
    config_path: Path | None = None,
    *,
    local_path: Path | None = None,
    global_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from TOML files and the environment.

    Configuration priority (highest to lowest):
    1. PODFEED_* environment variables
    2. ``config_path`` if given, otherwise the local config file
       (.podfeed/config.toml in the current directory) merged over
       the global one ($HOME/.podfeed/config.toml)
    3. Default values

    Args:
        config_path: Explicit config file. Must exist when given.
        local_path: Override path for the local config file.
        global_path: Override path for the global config file.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If configuration files or values are invalid.
    """
    merged_config = _deep_merge(DEFAULT_CONFIG, {})

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        merged_config = _deep_merge(merged_config, _load_toml_file(config_path))
    else:
        global_config = _load_toml_file(global_path or GLOBAL_CONFIG_PATH)
        merged_config = _deep_merge(merged_config, global_config)

        local_config = _load_toml_file(local_path or LOCAL_CONFIG_PATH)
        merged_config = _deep_merge(merged_config, local_config)

    merged_config = _apply_env_overrides(
        merged_config, os.environ if environ is None else environ
    )

    _validate_config(merged_config)

    return _dict_to_config(merged_config)
