"""Pydantic request/response schemas for content items.

Boundary validation lives here: every rule that can be checked without
looking at stored state (non-empty title, vocabularies, ranges, text
lengths) fails before any store call.  Rules that depend on the stored
record (e.g. re-opening a completed item) are enforced by
:mod:`learning_feed.core.lifecycle`.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field, computed_field, field_validator

from learning_feed.core.models.content import (
    CONTENT_TYPES,
    DIFFICULTIES,
    MAX_TEXT_LENGTH,
    STATUSES,
)
from learning_feed.core.schemas._base import CamelModel, as_utc
from learning_feed.core.schemas.stats import UserStatsRead

# ---------------------------------------------------------------------------
# Shared field validators
# ---------------------------------------------------------------------------


def _check_title(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("title must not be empty")
    return value.strip()


def _check_type(value: Optional[str]) -> str:
    if value not in CONTENT_TYPES:
        raise ValueError(f"type must be one of: {', '.join(sorted(CONTENT_TYPES))}")
    return value


def _check_difficulty(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in DIFFICULTIES:
        raise ValueError(f"difficulty must be one of: {', '.join(sorted(DIFFICULTIES))}")
    return value


def _parse_tags(value: Any) -> Any:
    """Accept a list of strings or its JSON-encoded form.

    Older clients sent ``JSON.stringify(["a", "b"])``; both shapes end up
    as the same ordered list.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError("tags must be a list of strings") from exc
        if not isinstance(value, list):
            raise ValueError("tags must be a list of strings")
    return value


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ContentItemCreate(CamelModel):
    """Request body for ``POST /api/content``.

    Lifecycle fields (status, progress, completion date) and store-assigned
    fields (id, dateAdded, priority, timesSurfaced) are not accepted and are
    ignored if sent: a new item is always ``unseen`` at 0 % with priority 0.
    Priority moves only through the rate endpoint.
    """

    title: str
    type: str
    url: Optional[str] = None
    local_path: Optional[str] = None
    thumbnail_url: Optional[str] = None
    display_image_url: Optional[str] = None
    author: Optional[str] = Field(default=None, max_length=300)
    platform_name: Optional[str] = Field(default=None, max_length=100)
    content_body: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)
    estimated_minutes: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[str] = None
    tags: Optional[list[str]] = None
    user_note: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)

    _title = field_validator("title")(_check_title)
    _type = field_validator("type")(_check_type)
    _difficulty = field_validator("difficulty")(_check_difficulty)
    _tags = field_validator("tags", mode="before")(_parse_tags)


class ContentItemUpdate(CamelModel):
    """Request body for ``PATCH /api/content/{id}``.

    Every field is optional; only the fields present in the request are
    applied (``model_dump(exclude_unset=True)``).  An explicit ``null``
    clears an optional field.  ``priority`` changes only through the rate
    endpoint and ``dateCompleted`` only through the lifecycle, so neither is
    accepted here.
    """

    title: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    local_path: Optional[str] = None
    thumbnail_url: Optional[str] = None
    display_image_url: Optional[str] = None
    author: Optional[str] = Field(default=None, max_length=300)
    platform_name: Optional[str] = Field(default=None, max_length=100)
    content_body: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)
    estimated_minutes: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[str] = None
    tags: Optional[list[str]] = None
    user_note: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)
    status: Optional[str] = None
    progress_percent: Optional[int] = Field(default=None, ge=0, le=100)

    _title = field_validator("title")(_check_title)
    _type = field_validator("type")(_check_type)
    _difficulty = field_validator("difficulty")(_check_difficulty)
    _tags = field_validator("tags", mode="before")(_parse_tags)

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: Optional[str]) -> str:
        if value not in STATUSES:
            raise ValueError(f"status must be one of: {', '.join(sorted(STATUSES))}")
        return value

    @field_validator("progress_percent")
    @classmethod
    def _check_progress(cls, value: Optional[int]) -> int:
        if value is None:
            raise ValueError("progressPercent must not be null")
        return value


class RateRequest(CamelModel):
    """Request body for ``POST /api/content/{id}/rate``."""

    delta: int

    @field_validator("delta")
    @classmethod
    def _unit_step(cls, value: int) -> int:
        if value not in (-1, 1):
            raise ValueError("delta must be +1 or -1")
        return value


class CompleteRequest(CamelModel):
    """Request body for ``POST /api/content/{id}/complete``."""

    user_note: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ContentItemRead(CamelModel):
    """A content item as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: str
    url: Optional[str]
    local_path: Optional[str]
    thumbnail_url: Optional[str]
    display_image_url: Optional[str]
    author: Optional[str]
    platform_name: Optional[str]
    content_body: Optional[str]
    estimated_minutes: Optional[int]
    difficulty: Optional[str]
    tags: list[str] = Field(default_factory=list)
    status: str
    progress_percent: int
    date_added: datetime
    date_completed: Optional[datetime]
    last_edited: Optional[datetime]
    user_note: Optional[str]
    priority: int
    times_surfaced: int

    _utc = field_validator("date_added", "date_completed", "last_edited")(as_utc)

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else _parse_tags(value)

    @computed_field(alias="coverImageUrl")  # type: ignore[prop-decorator]
    @property
    def cover_image_url(self) -> Optional[str]:
        """Image the client should show: the user's choice, else the thumbnail."""
        return self.display_image_url or self.thumbnail_url


class CompletionRead(CamelModel):
    """Response for ``POST /api/content/{id}/complete``."""

    item: ContentItemRead
    stats: UserStatsRead
    xp_awarded: int
    newly_completed: bool
