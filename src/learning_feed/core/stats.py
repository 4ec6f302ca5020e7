"""User statistics record: lazy singleton row plus the streak rule.

The row is created on first access with all counters at zero.  Completion
credit is applied by :func:`record_completion` inside the caller's
transaction, so the item update and the stats update commit together.

Streak rule, evaluated on UTC calendar days:

    last activity yesterday   → current_streak + 1
    last activity today       → unchanged
    older, or never active    → 1

``longest_streak`` follows ``max(longest_streak, current_streak)``.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from learning_feed.core.exceptions import InternalError
from learning_feed.core.models.stats import STATS_ROW_ID, UserStats

logger = structlog.get_logger(__name__)


def _utc_day(moment: datetime) -> date:
    """Calendar day of ``moment`` in UTC.  Naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def advance_streak(
    current_streak: int,
    longest_streak: int,
    last_active: Optional[datetime],
    now: datetime,
) -> tuple[int, int]:
    """Return ``(current_streak, longest_streak)`` after a completion at ``now``."""
    if last_active is None:
        current = 1
    else:
        gap_days = (_utc_day(now) - _utc_day(last_active)).days
        if gap_days == 0:
            current = max(current_streak, 1)
        elif gap_days == 1:
            current = current_streak + 1
        else:
            current = 1
    return current, max(longest_streak, current)


_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}
"""Dialect ``insert()`` constructs that support ``ON CONFLICT DO NOTHING``."""


async def get_or_create_stats(
    session: AsyncSession, *, for_update: bool = False
) -> UserStats:
    """Return the singleton row, inserting it with zero counters if absent.

    The insert is ``INSERT ... ON CONFLICT (id) DO NOTHING`` followed by a
    re-read, so concurrent first readers all end up with the same row
    instead of one of them failing on the primary key.

    Raises:
        InternalError: If the row is still missing after the insert.
    """
    stats = await session.get(UserStats, STATS_ROW_ID, with_for_update=for_update or None)
    if stats is not None:
        return stats

    dialect = session.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect, postgresql_insert)
    result = await session.execute(
        insert(UserStats)
        .values(
            id=STATS_ROW_ID,
            current_streak=0,
            longest_streak=0,
            total_items_completed=0,
            total_minutes_learned=0,
            xp_total=0,
        )
        .on_conflict_do_nothing(index_elements=[UserStats.id])
    )
    if result.rowcount:
        logger.info("stats.created")

    stats = await session.get(
        UserStats,
        STATS_ROW_ID,
        with_for_update=for_update or None,
        populate_existing=True,
    )
    if stats is None:
        raise InternalError("user stats row could not be created")
    return stats


async def record_completion(
    session: AsyncSession,
    *,
    minutes: int,
    xp: int,
    now: datetime,
) -> UserStats:
    """Credit one first-time completion to the stats row.

    Counters are incremented with SQL expressions on a row locked for the
    rest of the transaction; the streak is derived from the locked row.

    Args:
        session: Session with an active transaction (the caller's).
        minutes: Minutes to add to ``total_minutes_learned``.
        xp: XP to add to ``xp_total``.
        now: Completion time; becomes ``last_active_date``.

    Returns:
        The refreshed stats row.
    """
    stats = await get_or_create_stats(session, for_update=True)
    current, longest = advance_streak(
        stats.current_streak, stats.longest_streak, stats.last_active_date, now
    )
    await session.execute(
        update(UserStats)
        .where(UserStats.id == STATS_ROW_ID)
        .values(
            total_items_completed=UserStats.total_items_completed + 1,
            total_minutes_learned=UserStats.total_minutes_learned + minutes,
            xp_total=UserStats.xp_total + xp,
            current_streak=current,
            longest_streak=longest,
            last_active_date=now,
        )
        .execution_options(synchronize_session=False)
    )
    await session.refresh(stats)
    return stats


class UserStatsStore:
    """Read access to the statistics row for the stats endpoint.

    Args:
        session_factory: The application's :class:`async_sessionmaker`.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self) -> UserStats:
        """Return the stats row, creating it on first access."""
        async with self._session_factory() as session:
            async with session.begin():
                return await get_or_create_stats(session)
