"""Durable store for content items.

``ContentStore`` is built once by ``create_app()`` around the process-wide
session factory and injected into route handlers; it is never a module
global.  Every public method runs in its own transaction.  The lifecycle
service needs several writes to commit together, so it opens
:meth:`ContentStore.transaction` and calls the session-level helpers
(:func:`get_item`, :func:`apply_changes`) directly.

Counters are changed with single ``UPDATE ... SET col = col + :delta``
statements.  Two concurrent upvotes therefore both land; a
read-modify-write in Python would lose one of them.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from learning_feed.core.exceptions import NotFoundError
from learning_feed.core.models.base import utcnow
from learning_feed.core.models.content import (
    CONTENT_FIELDS,
    DEFAULT_PRIORITY,
    STATUS_UNSEEN,
    ContentItem,
)
from learning_feed.core.schemas.content import ContentItemCreate

logger = structlog.get_logger(__name__)

_RESOURCE = "content item"


# ---------------------------------------------------------------------------
# Session-level helpers
# ---------------------------------------------------------------------------


async def get_item(
    session: AsyncSession,
    item_id: int,
    *,
    for_update: bool = False,
    refresh: bool = False,
) -> ContentItem:
    """Load one item inside an open session or raise :class:`NotFoundError`.

    Args:
        session: Session with an active transaction.
        item_id: Primary key.
        for_update: Take a row lock (``SELECT ... FOR UPDATE``) where the
            backend supports it.
        refresh: Overwrite any identity-map copy with the row as stored,
            needed after a bulk ``UPDATE`` in the same session.
    """
    item = await session.get(
        ContentItem,
        item_id,
        with_for_update=for_update or None,
        populate_existing=refresh,
    )
    if item is None:
        raise NotFoundError(_RESOURCE, item_id)
    return item


def apply_changes(
    item: ContentItem,
    changes: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> list[str]:
    """Merge ``changes`` into ``item`` and stamp ``last_edited`` on content edits.

    Only values that differ from the stored ones count as changes.

    Returns:
        Names of the columns that actually changed.
    """
    changed = []
    for name, value in changes.items():
        if getattr(item, name) != value:
            setattr(item, name, value)
            changed.append(name)
    if CONTENT_FIELDS.intersection(changed):
        item.last_edited = now or utcnow()
    return changed


async def _increment(
    session: AsyncSession, item_id: int, column: str, delta: int
) -> ContentItem:
    """Atomically add ``delta`` to an integer column and return the fresh row."""
    target = getattr(ContentItem, column)
    stmt = (
        update(ContentItem)
        .where(ContentItem.id == item_id)
        .values({column: target + delta})
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        raise NotFoundError(_RESOURCE, item_id)
    return await get_item(session, item_id, refresh=True)


# ---------------------------------------------------------------------------
# ContentStore
# ---------------------------------------------------------------------------


class ContentStore:
    """CRUD plus atomic counters over the ``content_items`` table.

    Args:
        session_factory: The application's :class:`async_sessionmaker`.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Yield a session whose work commits on clean exit and rolls back on error."""
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, item_id: int) -> ContentItem:
        """Return the item with ``item_id`` or raise :class:`NotFoundError`."""
        async with self.transaction() as session:
            return await get_item(session, item_id)

    async def select(self, stmt: Select[tuple[ContentItem]]) -> list[ContentItem]:
        """Execute a prepared ``SELECT`` over content items."""
        async with self.transaction() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count(self) -> int:
        """Return the number of stored items, completed ones included."""
        async with self.transaction() as session:
            result = await session.execute(select(func.count()).select_from(ContentItem))
            return int(result.scalar_one())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, data: ContentItemCreate) -> ContentItem:
        """Insert a new item.

        The store assigns ``id``, ``date_added``, ``status="unseen"``,
        ``progress_percent=0``, ``priority=0`` and ``times_surfaced=0``.
        """
        item = ContentItem(
            **data.model_dump(),
            status=STATUS_UNSEEN,
            progress_percent=0,
            priority=DEFAULT_PRIORITY,
            date_added=utcnow(),
            times_surfaced=0,
        )
        async with self.transaction() as session:
            session.add(item)
            await session.flush()
        logger.info("content.created", item_id=item.id, type=item.type)
        return item

    async def update(self, item_id: int, changes: Mapping[str, Any]) -> ContentItem:
        """Merge ``changes`` (snake_case column names) into an existing item.

        Raises:
            NotFoundError: If no item has ``item_id``.
        """
        async with self.transaction() as session:
            item = await get_item(session, item_id, for_update=True)
            changed = apply_changes(item, changes)
        logger.info("content.updated", item_id=item_id, fields=changed)
        return item

    async def delete(self, item_id: int) -> None:
        """Remove an item.

        Raises:
            NotFoundError: If no item has ``item_id``; deleting twice is an error.
        """
        async with self.transaction() as session:
            result = await session.execute(
                delete(ContentItem)
                .where(ContentItem.id == item_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(_RESOURCE, item_id)
        logger.info("content.deleted", item_id=item_id)

    async def increment_surfaced(self, item_id: int) -> ContentItem:
        """Add one to ``times_surfaced``."""
        async with self.transaction() as session:
            return await _increment(session, item_id, "times_surfaced", 1)

    async def adjust_priority(self, item_id: int, delta: int) -> ContentItem:
        """Add ``delta`` to ``priority``.  The counter is unbounded in both directions."""
        async with self.transaction() as session:
            item = await _increment(session, item_id, "priority", delta)
        logger.info("content.rated", item_id=item_id, delta=delta, priority=item.priority)
        return item
