"""Configuration for URL ingestion.

Defines the ordered platform signature table and the YouTube URL
constants used by :mod:`learning_feed.ingestion.detect` and
:mod:`learning_feed.ingestion.oembed`.
"""

from __future__ import annotations

from typing import NamedTuple, Optional


class PlatformSignature(NamedTuple):
    """One row of the detection table.

    A URL matches when ``pattern`` occurs anywhere in it.
    """

    pattern: str
    type: str
    platform_name: str
    title: str
    estimated_minutes: int


# ---------------------------------------------------------------------------
# Signature table
# ---------------------------------------------------------------------------

PLATFORM_SIGNATURES: tuple[PlatformSignature, ...] = (
    PlatformSignature("youtube.com/shorts/", "youtube", "YouTube", "YouTube Short", 1),
    PlatformSignature("youtube.com/watch", "youtube", "YouTube", "YouTube Video", 10),
    PlatformSignature("youtu.be/", "youtube", "YouTube", "YouTube Video", 10),
    PlatformSignature("tiktok.com", "tiktok", "TikTok", "TikTok Video", 3),
    PlatformSignature("instagram.com/reel", "instagram", "Instagram", "Instagram Reel", 2),
    PlatformSignature("udemy.com/course", "course_launcher", "Udemy", "Udemy Course", 60),
    PlatformSignature("coursera.org", "course_launcher", "Coursera", "Coursera Course", 60),
)
"""Ordered: ``shorts/`` must be tested before ``watch``."""

FALLBACK_TYPE: str = "article"
FALLBACK_TITLE: str = "New Article"
FALLBACK_PLATFORM: Optional[str] = None

# ---------------------------------------------------------------------------
# YouTube
# ---------------------------------------------------------------------------

YOUTUBE_TYPE: str = "youtube"

YOUTUBE_THUMBNAIL_TEMPLATE: str = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"
"""High-quality thumbnail, available for every public video."""

YOUTUBE_OEMBED_ENDPOINT: str = "https://www.youtube.com/oembed"
"""Public oEmbed endpoint; no credentials required."""

YOUTUBE_OEMBED_DEFAULT_TIMEOUT: float = 3.0
"""Seconds before the enrichment call gives up and detection stays offline."""
