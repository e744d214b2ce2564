"""HTTP and JSON collaborators used by the provider adapters.

The adapters only depend on two small callables:
- get_async(url, fmt) -> response body as text (or None for no content)
- deserialize_json(text) -> parsed JSON value

Both are implemented here with httpx and the json module. Tests (and
callers with their own HTTP stack) can inject any callable with the
same signature instead.

Design notes:
- A fresh httpx.AsyncClient per request; adapters never share a session
- HTTP failures are re-raised as TransportError, chained to the httpx error
- No retries happen at this layer
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import httpx

from build_stats.exceptions import ParseError, TransportError
from build_stats.logging_config import get_logger

logger = get_logger(__name__)


class ContentFormat(str, Enum):
    """Response format requested through the Accept header."""

    JSON = "application/json"
    TEXT = "text/plain"


# Signature every adapter expects from its HTTP collaborator.
HttpGet = Callable[[str, ContentFormat], Awaitable[str | None]]


async def get_async(
    url: str,
    fmt: ContentFormat = ContentFormat.JSON,
    *,
    timeout: float = 30.0,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str | None:
    """Issue a GET request and return the response body as text.

    Args:
        url: Absolute URL to fetch
        fmt: Content type to ask for via the Accept header
        timeout: Request timeout in seconds
        headers: Extra request headers
        transport: Optional httpx transport (used by tests)

    Returns:
        The response body, or None when the server sent no content

    Raises:
        TransportError: On network failure or a non-2xx status
    """
    request_headers = {"Accept": fmt.value, **(headers or {})}

    async with httpx.AsyncClient(
        headers=request_headers,
        timeout=timeout,
        transport=transport,
    ) as client:
        try:
            resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("http_status_error", url=url, status_code=status)
            raise TransportError(
                f"GET {url} returned HTTP {status}", url=url, status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("http_request_failed", url=url, error=str(exc))
            raise TransportError(f"GET {url} failed: {exc}", url=url) from exc

    if resp.status_code == httpx.codes.NO_CONTENT or not resp.text:
        return None
    return resp.text


def deserialize_json(text: str) -> Any:
    """Parse a JSON document.

    Raises:
        ParseError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed JSON response: {exc}") from exc
