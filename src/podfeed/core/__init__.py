"""Core modules for podfeed."""

from podfeed.core.config import (
    Config,
    FetchConfig,
    LoggingConfig,
    ServerConfig,
    load_config,
)
from podfeed.core.errors import (
    ConfigError,
    FetchError,
    FormatError,
    InvalidRequestError,
    PodfeedError,
)
from podfeed.core.models import EpisodeRecord, FeedImport, PodcastMetadata

__all__ = [
    "Config",
    "ConfigError",
    "EpisodeRecord",
    "FeedImport",
    "FetchConfig",
    "FetchError",
    "FormatError",
    "InvalidRequestError",
    "LoggingConfig",
    "PodcastMetadata",
    "PodfeedError",
    "ServerConfig",
    "load_config",
]
