"""Pydantic schemas for the URL detection endpoint."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from learning_feed.core.schemas._base import CamelModel
from learning_feed.core.schemas.content import ContentItemCreate


class DetectRequest(CamelModel):
    """Request body for ``POST /api/content/detect``."""

    url: str = Field(min_length=1)


class DetectionResult(CamelModel):
    """Best-effort classification of a URL.

    Attributes:
        type: Content type tag (``"youtube"``, ``"article"``, ...).
        title: Detected title, or a placeholder such as ``"New Article"``.
        thumbnail_url: Thumbnail URL, when derivable.
        author: Creator name (oEmbed enrichment only).
        platform_name: Platform label; absent for generic articles.
        estimated_minutes: Default time estimate for the platform.
    """

    type: str
    title: str
    thumbnail_url: Optional[str] = None
    author: Optional[str] = None
    platform_name: Optional[str] = None
    estimated_minutes: Optional[int] = None

    def to_content_item(self, url: str, **overrides: Any) -> ContentItemCreate:
        """Merge this detection into a validated create request.

        Args:
            url: The URL that was classified.
            **overrides: Extra or replacement fields (e.g. ``difficulty``,
                ``tags``) using snake_case names.

        Returns:
            A :class:`ContentItemCreate`; pydantic validation errors propagate.
        """
        data = self.model_dump(exclude_none=True)
        data["url"] = url
        data.update(overrides)
        return ContentItemCreate.model_validate(data)
