"""Offline URL classification and the detector used by the API.

:func:`classify_url` never touches the network: it validates the URL shape
and walks :data:`~learning_feed.ingestion.config.PLATFORM_SIGNATURES`.
:class:`ContentDetector` wraps it and, for YouTube links, asks the oEmbed
client for the real title, author and thumbnail.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

import structlog

from learning_feed.core.exceptions import ValidationError
from learning_feed.core.schemas.ingestion import DetectionResult
from learning_feed.ingestion.config import (
    FALLBACK_PLATFORM,
    FALLBACK_TITLE,
    FALLBACK_TYPE,
    PLATFORM_SIGNATURES,
    YOUTUBE_THUMBNAIL_TEMPLATE,
    YOUTUBE_TYPE,
)
from learning_feed.ingestion.oembed import YouTubeOEmbedClient

logger = structlog.get_logger(__name__)

_YOUTUBE_ID_RE = re.compile(r"(?:v=|youtu\.be/|shorts/)([^&?]+)")


def extract_youtube_id(url: str) -> Optional[str]:
    """Return the video id that follows ``v=``, ``youtu.be/`` or ``shorts/``.

    The id runs up to the next ``&`` or ``?``.
    """
    match = _YOUTUBE_ID_RE.search(url)
    return match.group(1) if match else None


def youtube_thumbnail_url(url: str) -> Optional[str]:
    video_id = extract_youtube_id(url)
    if not video_id:
        return None
    return YOUTUBE_THUMBNAIL_TEMPLATE.format(video_id=video_id)


def _check_url(url: str) -> str:
    url = url.strip()
    try:
        parts = urlsplit(url)
    except ValueError:
        raise ValidationError("url must be a valid http(s) URL", field="url") from None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationError("url must be a valid http(s) URL", field="url")
    return url


def classify_url(url: str) -> DetectionResult:
    """Classify ``url`` with the signature table.

    Args:
        url: Absolute http(s) URL.

    Returns:
        The first matching platform's stub, or a generic article stub.

    Raises:
        ValidationError: If ``url`` has no http(s) scheme or no host.
    """
    url = _check_url(url)
    for signature in PLATFORM_SIGNATURES:
        if signature.pattern in url:
            thumbnail = (
                youtube_thumbnail_url(url) if signature.type == YOUTUBE_TYPE else None
            )
            return DetectionResult(
                type=signature.type,
                title=signature.title,
                platform_name=signature.platform_name,
                estimated_minutes=signature.estimated_minutes,
                thumbnail_url=thumbnail,
            )
    return DetectionResult(
        type=FALLBACK_TYPE,
        title=FALLBACK_TITLE,
        platform_name=FALLBACK_PLATFORM,
    )


class ContentDetector:
    """Classifies URLs, enriching YouTube links through oEmbed when available.

    Args:
        oembed: Enrichment client.  ``None`` keeps detection fully offline.
    """

    def __init__(self, oembed: Optional[YouTubeOEmbedClient] = None) -> None:
        self._oembed = oembed

    async def detect(self, url: str) -> DetectionResult:
        result = classify_url(url)
        if result.type == YOUTUBE_TYPE and self._oembed is not None:
            metadata = await self._oembed.fetch(url.strip())
            if metadata is not None:
                result = result.model_copy(update=metadata)
        logger.info(
            "detect.classified",
            type=result.type,
            platform=result.platform_name,
            enriched=result.author is not None,
        )
        return result
