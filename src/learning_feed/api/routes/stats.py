"""User statistics route.

Routes:
    GET /api/stats - the singleton statistics row, created on first access
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from learning_feed.api.dependencies import get_stats_store
from learning_feed.core.schemas.stats import UserStatsRead
from learning_feed.core.stats import UserStatsStore

router = APIRouter()


@router.get("", response_model=UserStatsRead)
async def get_stats(
    stats_store: Annotated[UserStatsStore, Depends(get_stats_store)],
) -> UserStatsRead:
    """Return streaks, totals and XP.  A fresh database reports all zeros."""
    stats = await stats_store.get()
    return UserStatsRead.model_validate(stats)
