"""Text processing utilities."""

import html
import re

_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[A-Za-z/!?][^>]*>")
_LEADING_INT_RE = re.compile(r"[+-]?\d+")


def clean_text(text: str | None) -> str:
    """
    Normalize feed text to plain text.

    Unwraps CDATA sections, strips markup tags, decodes HTML entities
    (``&nbsp;`` becomes a plain space) and trims surrounding whitespace.
    Every channel and item text field goes through this function.

    Args:
        text: Raw element text, may be None

    Returns:
        Plain text, empty string for missing input

    Example:
        >>> clean_text("<p>Hello &amp; welcome</p>")
        'Hello & welcome'
    """
    if not text:
        return ""

    text = _CDATA_RE.sub(r"\1", text)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text).replace("\xa0", " ")
    return text.strip()


def parse_int(text: str | None) -> int | None:
    """
    Parse the leading integer of a string.

    Surrounding whitespace is ignored and trailing garbage is tolerated,
    so ``"12abc"`` gives 12. Returns None when no digits lead the string.
    """
    if text is None:
        return None

    match = _LEADING_INT_RE.match(text.strip())
    if not match:
        return None
    return int(match.group())


def parse_duration(text: str | None) -> int:
    """
    Parse an iTunes duration string to total seconds.

    Supported formats:
    - HH:MM:SS (e.g., "01:02:03" = 3723 seconds)
    - MM:SS (e.g., "05:30" = 330 seconds)
    - SS (e.g., "90" = 90 seconds, never 1:30)

    Args:
        text: Duration string from the feed

    Returns:
        Total duration in seconds, 0 if missing or unparsable
    """
    if not text:
        return 0

    parts = text.strip().split(":")

    if len(parts) in (2, 3):
        values = [parse_int(part) for part in parts]
        if any(value is None for value in values):
            return 0
        if len(values) == 3:
            hours, minutes, seconds = values
            return hours * 3600 + minutes * 60 + seconds
        minutes, seconds = values
        return minutes * 60 + seconds

    return parse_int(text) or 0


def format_duration(seconds: int) -> str:
    """
    Format seconds as a duration string.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration (H:MM:SS or M:SS)
    """
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_bytes(size: int) -> str:
    """Format a byte count for display (e.g. ``"1.5 MB"``)."""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"
