"""Data models for podfeed."""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class PodcastMetadata:
    """Podcast-level metadata derived from a feed's channel."""

    title: str = ""
    description: str = ""
    language: str = "en"
    author_name: str = ""
    author_email: str = ""
    website_url: str = ""
    category: str = ""
    is_explicit: bool = False
    cover_image_url: str = ""

    def to_json(self) -> dict[str, Any]:
        """Convert podcast metadata to a JSON-serializable dictionary."""
        return asdict(self)


@dataclass
class EpisodeRecord:
    """One feed item that carries an audio enclosure."""

    title: str
    description: str
    audio_url: str
    file_size_bytes: int = 0
    duration_seconds: int = 0
    publish_date: str = ""  # raw value from the feed
    episode_number: int | None = None
    season_number: int | None = None

    def to_json(self) -> dict[str, Any]:
        """Convert episode to a JSON-serializable dictionary."""
        return asdict(self)


@dataclass
class FeedImport:
    """Result of importing one feed.

    Episodes keep source document order. ``items_seen`` counts every
    ``<item>`` in the channel, including the ones dropped for lacking
    an enclosure.
    """

    podcast: PodcastMetadata
    episodes: list[EpisodeRecord] = field(default_factory=list)
    items_seen: int = 0

    @property
    def items_imported(self) -> int:
        """Number of items that made it into ``episodes``."""
        return len(self.episodes)

    @property
    def items_skipped(self) -> int:
        """Number of items dropped for lacking an audio enclosure."""
        return self.items_seen - self.items_imported

    def to_json(self) -> dict[str, Any]:
        """Build the response body returned to import callers."""
        return {
            "podcast": self.podcast.to_json(),
            "episodes": [episode.to_json() for episode in self.episodes],
            "itemsSeen": self.items_seen,
            "itemsImported": self.items_imported,
        }
