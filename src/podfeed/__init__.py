"""Podfeed - podcast RSS feed import and normalization."""

__version__ = "0.1.0"

from podfeed.core.errors import FetchError, FormatError, PodfeedError  # noqa: E402
from podfeed.core.models import EpisodeRecord, FeedImport, PodcastMetadata  # noqa: E402
from podfeed.services.rss import import_feed, parse_feed_document  # noqa: E402

__all__ = [
    "EpisodeRecord",
    "FeedImport",
    "FetchError",
    "FormatError",
    "PodcastMetadata",
    "PodfeedError",
    "__version__",
    "import_feed",
    "parse_feed_document",
]
