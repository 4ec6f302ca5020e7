"""Feed query engine: the ordered working set of items to present.

Algorithm:

1. Keep items whose status is not ``completed``; finished items never
   come back into the feed.
2. With a focus level, keep items whose difficulty matches the mapped
   value or is unset.  Unset difficulty is a wildcard.
3. Order by priority (highest first), then newest first, then id.

Filtering and ordering are done by the database.  An empty result is a
valid "caught up" feed, not an error.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy import Select, or_, select

from learning_feed.core.content_store import ContentStore
from learning_feed.core.exceptions import ValidationError
from learning_feed.core.models.content import STATUS_COMPLETED, ContentItem

logger = structlog.get_logger(__name__)

FOCUS_TO_DIFFICULTY: dict[str, str] = {
    "low": "light",
    "medium": "medium",
    "high": "deep",
}


def resolve_focus(focus: Optional[str]) -> Optional[str]:
    """Map a focus level to its stored difficulty.

    Raises:
        ValidationError: For anything other than ``low``, ``medium``,
            ``high`` or ``None``.
    """
    if focus is None:
        return None
    try:
        return FOCUS_TO_DIFFICULTY[focus]
    except KeyError:
        raise ValidationError(
            f"focus must be one of: {', '.join(FOCUS_TO_DIFFICULTY)}",
            field="focus",
        ) from None


def build_feed_stmt(difficulty: Optional[str]) -> Select[tuple[ContentItem]]:
    """Build the feed ``SELECT`` for an already-resolved difficulty."""
    stmt = select(ContentItem).where(ContentItem.status != STATUS_COMPLETED)
    if difficulty is not None:
        stmt = stmt.where(
            or_(ContentItem.difficulty == difficulty, ContentItem.difficulty.is_(None))
        )
    return stmt.order_by(
        ContentItem.priority.desc(),
        ContentItem.date_added.desc(),
        ContentItem.id.desc(),
    )


class FeedQueryEngine:
    """Returns the filtered, ranked feed.

    Args:
        store: The content store to read from.
    """

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    async def list(self, focus: Optional[str] = None) -> list[ContentItem]:
        """Return active items for ``focus`` (or all active items), best first."""
        difficulty = resolve_focus(focus)
        items = await self._store.select(build_feed_stmt(difficulty))
        logger.debug("feed.listed", focus=focus, count=len(items))
        return items
