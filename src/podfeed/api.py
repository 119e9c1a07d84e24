"""HTTP surface for feed imports.

``handle_import_request`` implements the JSON contract used by the
platform: ``{"rssUrl": ...}`` in, ``{"podcast", "episodes"}`` or
``{"error"}`` out. ``create_app`` wraps it as a WSGI application with
the CORS headers browser callers need.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from podfeed.core.config import Config
from podfeed.core.errors import InvalidRequestError, PodfeedError
from podfeed.services.rss import import_feed

logger = logging.getLogger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

STATUS_REASONS: dict[int, str] = {
    200: "OK",
    400: "Bad Request",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}

StartResponse = Callable[[str, list[tuple[str, str]]], Any]


@dataclass
class ApiResponse:
    """Status code and JSON body of an import request."""

    status: int
    body: dict[str, Any] | None = None

    def to_bytes(self) -> bytes:
        """Serialize the body as UTF-8 JSON (empty for preflight responses)."""
        if self.body is None:
            return b""
        return json.dumps(self.body).encode("utf-8")


def handle_import_request(
    payload: Any,
    *,
    config: Config | None = None,
    client: httpx.Client | None = None,
) -> ApiResponse:
    """
    Run a feed import for a decoded JSON request body.

    Args:
        payload: Decoded request body, expected to be ``{"rssUrl": str}``
        config: Application configuration (fetch limits)
        client: Optional httpx client for testing

    Returns:
        200 with the import result, 400 when the RSS URL is missing,
        500 with ``{"error": message}`` when the import fails
    """
    config = config or Config()

    rss_url = payload.get("rssUrl") if isinstance(payload, dict) else None
    if not isinstance(rss_url, str) or not rss_url.strip():
        return ApiResponse(400, {"error": "RSS URL is required"})

    try:
        result = import_feed(rss_url, config=config.fetch, client=client)
    except InvalidRequestError as e:
        return ApiResponse(400, {"error": str(e)})
    except PodfeedError as e:
        logger.error("RSS import error for %s: %s", rss_url, e)
        return ApiResponse(500, {"error": str(e)})
    except Exception as e:  # noqa: BLE001
        logger.exception("Unexpected RSS import error for %s", rss_url)
        return ApiResponse(500, {"error": str(e) or "Unknown error"})

    return ApiResponse(200, result.to_json())


def _read_json_body(environ: dict[str, Any]) -> Any:
    """Decode the JSON request body of a WSGI request, None if unusable."""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0

    raw = environ["wsgi.input"].read(length) if length > 0 else b""
    if not raw:
        return None

    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


def create_app(
    config: Config | None = None,
    *,
    client: httpx.Client | None = None,
) -> Callable[[dict[str, Any], StartResponse], Iterable[bytes]]:
    """
    Build the WSGI application serving feed imports.

    Any path is accepted: ``OPTIONS`` answers CORS preflight requests,
    ``POST`` runs an import, other methods get 405.
    """
    config = config or Config()

    def application(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET").upper()

        if method == "OPTIONS":
            response = ApiResponse(200)
        elif method == "POST":
            response = handle_import_request(_read_json_body(environ), config=config, client=client)
        else:
            response = ApiResponse(405, {"error": f"Method {method} not allowed"})

        body = response.to_bytes()
        headers = list(CORS_HEADERS.items())
        if response.body is not None:
            headers.append(("Content-Type", "application/json"))
        headers.append(("Content-Length", str(len(body))))

        start_response(f"{response.status} {STATUS_REASONS[response.status]}", headers)
        return [body]

    return application
