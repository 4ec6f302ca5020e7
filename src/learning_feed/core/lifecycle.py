"""Lifecycle and status transitions for content items.

States::

    unseen ──▶ in_progress ──▶ completed
       └──────────────────────────▲

``in_progress`` is optional and surfacing an item never moves it.  The
transition that matters is ``* → completed``: it stamps the item and
credits the user's statistics, all in one transaction.

Stats are credited only on the real edge.  The item is moved with a
guarded ``UPDATE ... WHERE status != 'completed'``; when that statement
touches no row the item was already completed (or does not exist) and the
stats row is left alone.  Repeated or concurrent "complete" calls for the
same item therefore award XP exactly once.

Completed items stay completed: PATCHing them back to ``unseen`` /
``in_progress`` or below 100 % is rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from learning_feed.api import metrics
from learning_feed.core.content_store import ContentStore, apply_changes, get_item
from learning_feed.core.exceptions import ValidationError
from learning_feed.core.models.base import utcnow
from learning_feed.core.models.content import STATUS_COMPLETED, ContentItem
from learning_feed.core.models.stats import UserStats
from learning_feed.core.stats import get_or_create_stats, record_completion

logger = structlog.get_logger(__name__)

DEFAULT_COMPLETION_XP = 150


@dataclass
class CompletionOutcome:
    """Result of a completion request.

    Attributes:
        item: The item after the transition.
        stats: The statistics row after the transition.
        xp_awarded: XP credited by this call (0 on a repeat).
        newly_completed: True only when this call performed the transition.
    """

    item: ContentItem
    stats: UserStats
    xp_awarded: int
    newly_completed: bool


class LifecycleService:
    """Applies status transitions and their statistics side effects.

    Args:
        store: Content store providing the transaction scope.
        xp_reward: XP granted for the first completion of an item.
    """

    def __init__(self, store: ContentStore, xp_reward: int = DEFAULT_COMPLETION_XP) -> None:
        self._store = store
        self._xp_reward = xp_reward

    async def complete(
        self,
        item_id: int,
        user_note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CompletionOutcome:
        """Mark an item completed and credit the statistics once.

        Args:
            item_id: Item to complete.
            user_note: Replaces the stored note when given; ``None`` keeps it.
            now: Completion time.  Defaults to the current UTC time.

        Raises:
            NotFoundError: If the item does not exist.  Nothing is written.
        """
        now = now or utcnow()
        async with self._store.transaction() as session:
            outcome = await self._complete_in(session, item_id, user_note, now)

        if outcome.newly_completed:
            metrics.content_items_completed_total.labels(type=outcome.item.type).inc()
            metrics.xp_awarded_total.inc(outcome.xp_awarded)
            logger.info(
                "content.completed",
                item_id=item_id,
                xp_awarded=outcome.xp_awarded,
                current_streak=outcome.stats.current_streak,
            )
        else:
            logger.info("content.completed_again", item_id=item_id)
        return outcome

    async def apply_update(self, item_id: int, changes: Mapping[str, Any]) -> ContentItem:
        """Apply a PATCH: content fields, then any status change.

        ``status="completed"`` is routed through the completion path, with
        ``user_note`` from the same request used as the completion note.

        Raises:
            NotFoundError: If the item does not exist.
            ValidationError: If the change would reopen a completed item or
                move a completed item below 100 %.  Raised before any write.
        """
        changes = dict(changes)
        status = changes.pop("status", None)
        progress = changes.pop("progress_percent", None)
        now = utcnow()
        newly_completed = False

        async with self._store.transaction() as session:
            item = await get_item(session, item_id, for_update=True)
            completing = status == STATUS_COMPLETED
            if item.status == STATUS_COMPLETED or completing:
                if status is not None and status != STATUS_COMPLETED:
                    raise ValidationError(
                        "a completed item cannot change status", field="status"
                    )
                if progress is not None and progress != 100:
                    raise ValidationError(
                        "a completed item stays at 100 percent", field="progressPercent"
                    )
            note = changes.pop("user_note", None) if completing else None
            apply_changes(item, changes, now)
            if completing:
                await session.flush()
                outcome = await self._complete_in(session, item_id, note, now)
                item = outcome.item
                newly_completed = outcome.newly_completed
            else:
                lifecycle_changes = {}
                if status is not None:
                    lifecycle_changes["status"] = status
                if progress is not None:
                    lifecycle_changes["progress_percent"] = progress
                apply_changes(item, lifecycle_changes, now)

        if newly_completed:
            metrics.content_items_completed_total.labels(type=item.type).inc()
            metrics.xp_awarded_total.inc(self._xp_reward)
        logger.info(
            "content.patched",
            item_id=item_id,
            status=status,
            newly_completed=newly_completed,
        )
        return item

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _complete_in(
        self,
        session: AsyncSession,
        item_id: int,
        user_note: Optional[str],
        now: datetime,
    ) -> CompletionOutcome:
        """Perform the completion inside an open transaction."""
        values: dict[str, Any] = {
            "status": STATUS_COMPLETED,
            "progress_percent": 100,
            "date_completed": now,
        }
        if user_note is not None:
            values["user_note"] = user_note
        result = await session.execute(
            update(ContentItem)
            .where(ContentItem.id == item_id, ContentItem.status != STATUS_COMPLETED)
            .values(values)
            .execution_options(synchronize_session=False)
        )
        newly_completed = result.rowcount == 1

        if newly_completed:
            item = await get_item(session, item_id, refresh=True)
            stats = await record_completion(
                session,
                minutes=item.estimated_minutes or 0,
                xp=self._xp_reward,
                now=now,
            )
            return CompletionOutcome(item, stats, self._xp_reward, True)

        # Already completed, or missing (get_item raises NotFoundError).
        item = await get_item(session, item_id, for_update=True, refresh=True)
        repeat = {"status": STATUS_COMPLETED, "progress_percent": 100}
        if user_note is not None:
            repeat["user_note"] = user_note
        apply_changes(item, repeat, now)
        stats = await get_or_create_stats(session)
        return CompletionOutcome(item, stats, 0, False)
