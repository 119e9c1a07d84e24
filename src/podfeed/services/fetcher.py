"""Feed download over HTTP.

A single GET per call: no retries, no caching. The request timeout
and the response size cap bound the work done for one import.
"""

from __future__ import annotations

import logging

import httpx

from podfeed.core.config import DEFAULT_MAX_BYTES, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from podfeed.core.errors import FetchError

logger = logging.getLogger(__name__)


def _declared_length(response: httpx.Response) -> int | None:
    """Return the Content-Length header as an int, if it is usable."""
    value = response.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _read_limited(response: httpx.Response, max_bytes: int) -> bytes:
    """Read a streamed response body, refusing to go past ``max_bytes``."""
    declared = _declared_length(response)
    if declared is not None and declared > max_bytes:
        raise FetchError(
            f"Failed to fetch RSS feed: response of {declared} bytes exceeds "
            f"the {max_bytes} byte limit"
        )

    chunks: list[bytes] = []
    total = 0
    for chunk in response.iter_bytes():
        total += len(chunk)
        if total > max_bytes:
            raise FetchError(
                f"Failed to fetch RSS feed: response exceeds the {max_bytes} byte limit"
            )
        chunks.append(chunk)

    return b"".join(chunks)


def fetch_feed(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_BYTES,
    follow_redirects: bool = True,
    user_agent: str = DEFAULT_USER_AGENT,
) -> bytes:
    """
    Download the raw body of a feed.

    Args:
        url: Feed URL
        client: Optional httpx client for testing
        timeout: Request timeout in seconds
        max_bytes: Largest body accepted
        follow_redirects: Whether to follow 3xx responses
        user_agent: User-Agent header sent with the request

    Returns:
        The response body as bytes, left undecoded so the XML parser
        can honor the document's own encoding declaration

    Raises:
        FetchError: If the URL is unreachable, the request times out, the
            status is not 2xx, or the body is larger than ``max_bytes``
    """
    should_close_client = client is None
    if client is None:
        client = httpx.Client()

    logger.info("Fetching RSS feed from %s", url)

    try:
        with client.stream(
            "GET",
            url,
            headers={"User-Agent": user_agent},
            timeout=timeout,
            follow_redirects=follow_redirects,
        ) as response:
            if not response.is_success:
                reason = f" {response.reason_phrase}" if response.reason_phrase else ""
                raise FetchError(
                    f"Failed to fetch RSS feed: HTTP {response.status_code}{reason}"
                )
            body = _read_limited(response, max_bytes)
    except httpx.TimeoutException as e:
        raise FetchError(
            f"Failed to fetch RSS feed: request timed out after {timeout} seconds"
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(f"Failed to fetch RSS feed: {e}") from e
    finally:
        if should_close_client:
            client.close()

    logger.debug("Downloaded %d bytes from %s", len(body), url)
    return body
