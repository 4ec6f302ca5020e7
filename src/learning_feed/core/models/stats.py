"""User statistics model: the single gamification row.

Exactly one logical row exists (``id = 1``).  It is created lazily with
zero counters by :mod:`learning_feed.core.stats` and never deleted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from learning_feed.core.models.base import Base

STATS_ROW_ID = 1


class UserStats(Base):
    """Streak and XP aggregates, updated only by completion events.

    Attributes:
        id: Always :data:`STATS_ROW_ID`.
        current_streak: Consecutive days with at least one completion.
        longest_streak: Best ``current_streak`` ever reached.
        total_items_completed: Count of first-time completions.
        total_minutes_learned: Sum of ``estimated_minutes`` of completed items.
        xp_total: Accumulated XP.
        last_active_date: Time of the most recent completion.
    """

    __tablename__ = "user_stats"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=False)
    current_streak: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    total_items_completed: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    total_minutes_learned: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    xp_total: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    last_active_date: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return (
            f"<UserStats streak={self.current_streak}/{self.longest_streak} "
            f"xp={self.xp_total}>"
        )
