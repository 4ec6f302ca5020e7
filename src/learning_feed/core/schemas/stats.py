"""Pydantic response schema for the user statistics row."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, field_validator

from learning_feed.core.schemas._base import CamelModel, as_utc


class UserStatsRead(CamelModel):
    """The singleton statistics row as returned by ``GET /api/stats``."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    current_streak: int
    longest_streak: int
    total_items_completed: int
    total_minutes_learned: int
    xp_total: int
    last_active_date: Optional[datetime]

    _utc = field_validator("last_active_date")(as_utc)
