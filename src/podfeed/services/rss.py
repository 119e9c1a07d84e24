"""RSS feed import for podcast metadata and episodes.

Parses a feed document with a conformant XML parser and maps the
channel and its items onto PodcastMetadata and EpisodeRecord objects.
Documents that are not well-formed go through feedparser's lenient
parser instead, so one broken item does not sink the feed.

A missing channel is fatal (FormatError). Item-level problems fall
back to defaults, and items without an enclosure URL are skipped.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from html.entities import name2codepoint
from typing import Any

import feedparser
import httpx

from podfeed.core.config import FetchConfig
from podfeed.core.errors import FormatError, InvalidRequestError
from podfeed.core.models import EpisodeRecord, FeedImport, PodcastMetadata
from podfeed.services.fetcher import fetch_feed
from podfeed.utils.text import clean_text, parse_duration, parse_int

logger = logging.getLogger(__name__)

# Namespaces whose elements are matched under a short prefix.
# Keys are lower-cased: feeds disagree on the casing of the iTunes URI.
NAMESPACE_PREFIXES: dict[str, str] = {
    "http://www.itunes.com/dtds/podcast-1.0.dtd": "itunes",
    "https://www.itunes.com/dtds/podcast-1.0.dtd": "itunes",
    # RSS 1.0 and 0.90 put channel and item in a default namespace
    "http://purl.org/rss/1.0/": "",
    "http://my.netscape.com/rdf/simple/0.9/": "",
}

# Entities XML defines itself; everything else from HTML gets rewritten
XML_ENTITIES = frozenset({b"amp", b"lt", b"gt", b"quot", b"apos"})

_ENTITY_RE = re.compile(rb"&([A-Za-z][A-Za-z0-9]*);")
_BARE_AMPERSAND_RE = re.compile(rb"&(?!#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")
_CHANNEL_TAG_RE = re.compile(rb"<(?:[\w.-]+:)?channel[\s>/]", re.IGNORECASE)


def _tag_key(tag: object) -> str:
    """Map an ElementTree tag to a lower-cased lookup key.

    ``{http://www.itunes.com/dtds/podcast-1.0.dtd}Author`` becomes
    ``itunes:author`` and ``Title`` becomes ``title``. Tags from other
    namespaces keep their ``{uri}`` prefix so they never collide with
    plain RSS elements (``atom:link`` is not ``link``).
    """
    if not isinstance(tag, str):
        return ""

    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        prefix = NAMESPACE_PREFIXES.get(uri.lower())
        if prefix is None:
            return f"{{{uri.lower()}}}{local.lower()}"
        return f"{prefix}:{local.lower()}" if prefix else local.lower()

    return tag.lower()


def _children(parent: ET.Element, key: str) -> list[ET.Element]:
    """Direct children of ``parent`` matching ``key``, in document order."""
    return [child for child in parent if _tag_key(child.tag) == key]


def _find(parent: ET.Element, key: str) -> ET.Element | None:
    """First direct child of ``parent`` matching ``key``."""
    for child in parent:
        if _tag_key(child.tag) == key:
            return child
    return None


def _get_text(parent: ET.Element, key: str) -> str:
    """Clean text of the first child matching ``key``, or ``""``."""
    element = _find(parent, key)
    if element is None:
        return ""
    return clean_text("".join(element.itertext()))


def _get_attribute(parent: ET.Element, key: str, attr_name: str) -> str:
    """Value of ``attr_name`` on the first child matching ``key`` that has it.

    Attribute names are compared case-insensitively and without namespace.
    """
    attr_name = attr_name.lower()
    for element in _children(parent, key):
        for name, value in element.attrib.items():
            if name.rpartition("}")[2].lower() == attr_name and value.strip():
                return value.strip()
    return ""


def _get_optional_int(parent: ET.Element, key: str) -> int | None:
    """Integer value of a child element.

    Uses a presence check so a tag holding ``0`` yields 0, while an
    absent or unparsable tag yields None.
    """
    element = _find(parent, key)
    if element is None:
        return None
    return parse_int(clean_text("".join(element.itertext())))


def _repair_entities(document: bytes) -> bytes:
    """Rewrite HTML-only entities and bare ampersands so XML can parse them.

    ``&nbsp;`` becomes ``&#160;`` and ``AT&T`` becomes ``AT&amp;T``.
    Unknown entity names are escaped as literal text.
    """

    def replace_entity(match: re.Match[bytes]) -> bytes:
        name = match.group(1)
        if name in XML_ENTITIES:
            return match.group(0)
        codepoint = name2codepoint.get(name.decode("ascii"))
        if codepoint is None:
            return b"&amp;" + name + b";"
        return b"&#%d;" % codepoint

    document = _BARE_AMPERSAND_RE.sub(b"&amp;", document)
    return _ENTITY_RE.sub(replace_entity, document)


def _parse_xml(data: bytes, encoding: str | None) -> ET.Element:
    """Parse a feed document, repairing HTML entities once if needed.

    Raises:
        ET.ParseError: If the document is not well-formed XML even after repair.
    """
    try:
        return ET.fromstring(data, parser=ET.XMLParser(encoding=encoding))
    except ET.ParseError as first_error:
        logger.debug("Feed is not well-formed (%s), retrying with entity repair", first_error)
        return ET.fromstring(_repair_entities(data), parser=ET.XMLParser(encoding=encoding))


def _find_channel(root: ET.Element) -> ET.Element | None:
    """Locate the first channel element anywhere in the document."""
    for element in root.iter():
        if _tag_key(element.tag) == "channel":
            return element
    return None


def _find_items(root: ET.Element, channel: ET.Element) -> list[ET.Element]:
    """Return the feed's items in document order.

    RSS 2.0 nests items inside the channel. RSS 1.0 (RDF) documents put
    them next to the channel, under the document root.
    """
    items = _children(channel, "item")
    if not items and root is not channel:
        items = _children(root, "item")
    return items


def _parse_podcast(channel: ET.Element) -> PodcastMetadata:
    """Build podcast metadata from the channel element."""
    author_email = _get_text(channel, "itunes:email")
    if not author_email:
        owner = _find(channel, "itunes:owner")
        if owner is not None:
            author_email = _get_text(owner, "itunes:email")

    cover_image_url = _get_attribute(channel, "itunes:image", "href")
    if not cover_image_url:
        image = _find(channel, "image")
        if image is not None:
            cover_image_url = _get_text(image, "url")

    return PodcastMetadata(
        title=_get_text(channel, "title"),
        description=_get_text(channel, "description"),
        language=_get_text(channel, "language") or "en",
        author_name=_get_text(channel, "itunes:author"),
        author_email=author_email,
        website_url=_get_text(channel, "link"),
        category=_get_attribute(channel, "itunes:category", "text"),
        is_explicit=_get_text(channel, "itunes:explicit").lower() == "yes",
        cover_image_url=cover_image_url,
    )


def _parse_episode(item: ET.Element) -> EpisodeRecord | None:
    """Build an episode record from an item, or None if it has no audio URL."""
    audio_url = _get_attribute(item, "enclosure", "url")
    if not audio_url:
        return None

    file_size = parse_int(_get_attribute(item, "enclosure", "length"))

    return EpisodeRecord(
        title=_get_text(item, "title"),
        description=_get_text(item, "description"),
        audio_url=audio_url,
        file_size_bytes=max(file_size or 0, 0),
        duration_seconds=parse_duration(_get_text(item, "itunes:duration")),
        publish_date=_get_text(item, "pubdate"),
        episode_number=_get_optional_int(item, "itunes:episode"),
        season_number=_get_optional_int(item, "itunes:season"),
    )


def _lenient_podcast(channel: Any) -> PodcastMetadata:
    """Build podcast metadata from a feedparser channel dictionary."""
    publisher = channel.get("publisher_detail") or {}
    image = channel.get("image") or {}
    category = next(
        (
            tag.get("term")
            for tag in channel.get("tags", [])
            if tag.get("term") and "itunes.com" in (tag.get("scheme") or "")
        ),
        "",
    )

    return PodcastMetadata(
        title=clean_text(channel.get("title")),
        description=clean_text(channel.get("subtitle")),
        language=clean_text(channel.get("language")) or "en",
        author_name=clean_text(channel.get("author")),
        author_email=clean_text(publisher.get("email")),
        website_url=clean_text(channel.get("link")),
        category=clean_text(category),
        is_explicit=channel.get("itunes_explicit") is True,
        cover_image_url=(image.get("href") or "").strip(),
    )


def _lenient_episode(entry: Any) -> EpisodeRecord | None:
    """Build an episode record from a feedparser entry, or None without audio."""
    enclosures = getattr(entry, "enclosures", [])
    enclosure = next((e for e in enclosures if (e.get("href") or "").strip()), None)
    if enclosure is None:
        return None

    file_size = parse_int(enclosure.get("length"))

    return EpisodeRecord(
        title=clean_text(entry.get("title")),
        description=clean_text(entry.get("summary")),
        audio_url=enclosure["href"].strip(),
        file_size_bytes=max(file_size or 0, 0),
        duration_seconds=parse_duration(clean_text(entry.get("itunes_duration"))),
        publish_date=clean_text(entry.get("published")),
        episode_number=parse_int(entry.get("itunes_episode")),
        season_number=parse_int(entry.get("itunes_season")),
    )


def _parse_lenient(
    data: bytes, encoding: str | None
) -> tuple[PodcastMetadata, list[EpisodeRecord | None]]:
    """Recover what feedparser's lenient parser can from a broken document.

    A malformed item then costs at most that item, not the whole feed.

    Raises:
        FormatError: If there is no channel element or nothing can be recovered.
    """
    if not _CHANNEL_TAG_RE.search(data):
        raise FormatError("Invalid RSS feed - no channel element found")

    response_headers: dict[str, str] = {}
    if encoding:
        response_headers["content-type"] = f"application/xml; charset={encoding}"
    parsed = feedparser.parse(data, response_headers=response_headers)

    if parsed.bozo and not parsed.entries and not parsed.feed:
        raise FormatError(f"Invalid RSS feed - could not parse XML: {parsed.bozo_exception}")

    return _lenient_podcast(parsed.feed), [_lenient_episode(entry) for entry in parsed.entries]


def parse_feed_document(document: str | bytes) -> FeedImport:
    """
    Parse a feed document into podcast metadata and episode records.

    Args:
        document: The raw feed, as text or undecoded bytes

    Returns:
        FeedImport holding the podcast, its episodes in document order,
        and the number of items seen

    Raises:
        FormatError: If the document cannot be parsed or has no channel

    Example:
        >>> result = parse_feed_document(xml_text)
        >>> print(result.podcast.title, len(result.episodes))
    """
    # Text is parsed as UTF-8 whatever its declaration says; bytes honor it
    encoding = None
    if isinstance(document, str):
        document = document.encode("utf-8")
        encoding = "utf-8"
    data = document.lstrip()

    try:
        root = _parse_xml(data, encoding)
    except ET.ParseError as e:
        logger.warning("Feed is not well-formed (%s), falling back to lenient parsing", e)
        podcast, candidates = _parse_lenient(data, encoding)
    else:
        channel = _find_channel(root)
        if channel is None:
            raise FormatError("Invalid RSS feed - no channel element found")
        podcast = _parse_podcast(channel)
        candidates = [_parse_episode(item) for item in _find_items(root, channel)]

    logger.info("Parsed podcast: %s", podcast.title)

    episodes: list[EpisodeRecord] = []
    for position, episode in enumerate(candidates, start=1):
        if episode is None:
            logger.debug("Skipping item %d: no audio enclosure", position)
            continue
        episodes.append(episode)

    result = FeedImport(podcast=podcast, episodes=episodes, items_seen=len(candidates))
    logger.info("Parsed %d episodes (%d items seen)", result.items_imported, result.items_seen)
    return result


def import_feed(
    rss_url: str,
    *,
    config: FetchConfig | None = None,
    client: httpx.Client | None = None,
) -> FeedImport:
    """
    Fetch a podcast feed and normalize it into podcast and episode records.

    Args:
        rss_url: URL of the RSS feed
        config: Fetch settings (timeout, size cap, redirects, user agent)
        client: Optional httpx client for testing

    Returns:
        FeedImport with the podcast metadata and its episodes

    Raises:
        InvalidRequestError: If ``rss_url`` is empty
        FetchError: If the feed cannot be retrieved
        FormatError: If the feed has no channel element

    Example:
        >>> result = import_feed("https://example.com/podcast/feed.xml")
        >>> for episode in result.episodes:
        ...     print(episode.title, episode.duration_seconds)
    """
    if not rss_url or not rss_url.strip():
        raise InvalidRequestError("RSS URL is required")

    config = config or FetchConfig()

    document = fetch_feed(
        rss_url.strip(),
        client=client,
        timeout=config.timeout,
        max_bytes=config.max_bytes,
        follow_redirects=config.follow_redirects,
        user_agent=config.user_agent,
    )
    return parse_feed_document(document)
