"""Pytest fixtures for podfeed tests."""

import pytest

from podfeed.core.config import Config, FetchConfig
from podfeed.core.models import EpisodeRecord, FeedImport, PodcastMetadata

FEED_URL = "https://example.com/feed.xml"

RSS_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Test Podcast</title>
    <description>A test podcast</description>
    {items}
  </channel>
</rss>
"""

ITEM_TEMPLATE = """\
<item>
  <title>{title}</title>
  <pubDate>{pub_date}</pubDate>
  <enclosure url="{audio_url}" type="audio/mpeg" length="{length}"/>
  <itunes:duration>{duration}</itunes:duration>
</item>
"""


def build_feed(items: list[dict]) -> str:
    """Create an RSS feed string from item data."""
    items_xml = "\n".join(
        ITEM_TEMPLATE.format(
            title=item.get("title", "Episode"),
            pub_date=item.get("pub_date", "Mon, 01 Jan 2024 00:00:00 +0000"),
            audio_url=item.get("audio_url", "https://example.com/episode.mp3"),
            length=item.get("length", "12345"),
            duration=item.get("duration", "30:00"),
        )
        for item in items
    )
    return RSS_TEMPLATE.format(items=items_xml)


@pytest.fixture
def sample_rss_feed() -> str:
    """A podcast feed using the common iTunes extension fields."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"
     xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <atom:link href="https://example.com/feed.xml" rel="self" type="application/rss+xml"/>
    <title>Test Podcast</title>
    <link>https://example.com</link>
    <description><![CDATA[<p>A show about <b>testing</b> &amp; more.</p>]]></description>
    <language>en-us</language>
    <itunes:author>Test Author</itunes:author>
    <itunes:owner>
      <itunes:name>Test Owner</itunes:name>
      <itunes:email>owner@example.com</itunes:email>
    </itunes:owner>
    <itunes:category text="Technology">
      <itunes:category text="Software How-To"/>
    </itunes:category>
    <itunes:explicit>Yes</itunes:explicit>
    <itunes:image href="https://example.com/cover.jpg"/>
    <image>
      <url>https://example.com/fallback.jpg</url>
      <title>Test Podcast</title>
      <link>https://example.com</link>
    </image>
    <item>
      <title>Episode 1</title>
      <description>First &lt;i&gt;episode&lt;/i&gt;</description>
      <pubDate>Mon, 15 Jan 2024 12:00:00 +0000</pubDate>
      <enclosure url="https://example.com/ep1.mp3" type="audio/mpeg" length="1000000"/>
      <itunes:duration>01:02:03</itunes:duration>
      <itunes:episode>1</itunes:episode>
      <itunes:season>2</itunes:season>
    </item>
    <item>
      <title>Episode 2</title>
      <description>Second episode</description>
      <pubDate>Mon, 22 Jan 2024 12:00:00 +0000</pubDate>
      <enclosure url="https://example.com/ep2.mp3" type="audio/mpeg" length="2000000"/>
      <itunes:duration>25:00</itunes:duration>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def sample_podcast() -> PodcastMetadata:
    """Create sample podcast metadata for testing."""
    return PodcastMetadata(
        title="Test Podcast",
        description="A test podcast",
        language="en",
        author_name="Test Author",
        author_email="owner@example.com",
        website_url="https://example.com",
        category="Technology",
        is_explicit=False,
        cover_image_url="https://example.com/cover.jpg",
    )


@pytest.fixture
def sample_import(sample_podcast: PodcastMetadata) -> FeedImport:
    """Create a sample import result with one skipped item."""
    return FeedImport(
        podcast=sample_podcast,
        episodes=[
            EpisodeRecord(
                title="Episode 1",
                description="First episode",
                audio_url="https://example.com/ep1.mp3",
                file_size_bytes=1000000,
                duration_seconds=3723,
                publish_date="Mon, 15 Jan 2024 12:00:00 +0000",
                episode_number=1,
                season_number=2,
            ),
        ],
        items_seen=2,
    )


@pytest.fixture
def fetch_config() -> FetchConfig:
    """Fetch settings with a small size cap."""
    return FetchConfig(timeout=5.0, max_bytes=64 * 1024)


@pytest.fixture
def config(fetch_config: FetchConfig) -> Config:
    """Application config using the test fetch settings."""
    return Config(fetch=fetch_config)
