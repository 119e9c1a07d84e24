"""Service modules for podfeed."""

from podfeed.services.fetcher import fetch_feed
from podfeed.services.rss import import_feed, parse_feed_document

__all__ = [
    "fetch_feed",
    "import_feed",
    "parse_feed_document",
]
