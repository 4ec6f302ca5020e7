"""YouTube oEmbed enrichment.

The endpoint is public and unauthenticated but may be slow, rate limited or
unreachable.  Every failure is logged and reported as ``None`` so that the
caller can keep its offline classification.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from learning_feed.ingestion.config import (
    YOUTUBE_OEMBED_DEFAULT_TIMEOUT,
    YOUTUBE_OEMBED_ENDPOINT,
)

logger = structlog.get_logger(__name__)


class YouTubeOEmbedClient:
    """Fetches title, author and thumbnail for a YouTube URL.

    Args:
        http_client: Shared :class:`httpx.AsyncClient`, owned by the caller.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = YOUTUBE_OEMBED_DEFAULT_TIMEOUT,
    ) -> None:
        self._http_client = http_client
        self._timeout = timeout

    async def fetch(self, url: str) -> Optional[dict[str, Any]]:
        """Return snake_case overrides for a detection result, or ``None``.

        Only keys present in the response are returned: ``title``,
        ``author`` and ``thumbnail_url``.
        """
        try:
            response = await self._http_client.get(
                YOUTUBE_OEMBED_ENDPOINT,
                params={"url": url, "format": "json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
            return _parse_payload(payload)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "detect.oembed_failed",
                url=url,
                status_code=exc.response.status_code,
            )
        except httpx.HTTPError as exc:
            logger.warning("detect.oembed_failed", url=url, error=repr(exc))
        except (ValueError, TypeError) as exc:
            logger.warning("detect.oembed_malformed", url=url, error=str(exc))
        return None


def _parse_payload(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    fields = {
        "title": payload.get("title"),
        "author": payload.get("author_name"),
        "thumbnail_url": payload.get("thumbnail_url"),
    }
    return {
        key: value.strip()
        for key, value in fields.items()
        if isinstance(value, str) and value.strip()
    }
