"""Content item model: one row per learning link in the feed.

Owns the closed vocabularies for ``type``, ``difficulty`` and ``status``.
They are enforced at the application layer (request schemas and the
lifecycle service), not via DB CHECK constraints, so the vocabulary can
grow without a schema migration.

Invariants maintained by :mod:`learning_feed.core.lifecycle`:

- ``date_completed`` is non-null if and only if ``status == "completed"``.
- ``progress_percent == 100`` whenever ``status == "completed"``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from learning_feed.core.models.base import Base, utcnow

# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

VIDEO_TYPES: frozenset[str] = frozenset({"youtube", "tiktok", "video", "instagram"})
TEXT_TYPES: frozenset[str] = frozenset({"article", "manual"})
COURSE_TYPES: frozenset[str] = frozenset({"course_launcher"})
CONTENT_TYPES: frozenset[str] = VIDEO_TYPES | TEXT_TYPES | COURSE_TYPES

DIFFICULTIES: frozenset[str] = frozenset({"light", "medium", "deep"})

STATUS_UNSEEN = "unseen"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUSES: frozenset[str] = frozenset({STATUS_UNSEEN, STATUS_IN_PROGRESS, STATUS_COMPLETED})

DEFAULT_PRIORITY = 0
MAX_TEXT_LENGTH = 10_000
"""Upper bound for ``user_note`` and ``content_body``."""

CONTENT_FIELDS: frozenset[str] = frozenset({
    "title",
    "type",
    "url",
    "local_path",
    "thumbnail_url",
    "display_image_url",
    "author",
    "platform_name",
    "estimated_minutes",
    "difficulty",
    "tags",
    "user_note",
    "content_body",
})
"""Columns whose change counts as a content edit and refreshes ``last_edited``."""


class ContentItem(Base):
    """A single learning item (video, article, clip or course).

    Attributes:
        id: Auto-incrementing integer primary key.
        title: Display title.  Never empty.
        type: One of :data:`CONTENT_TYPES`.
        url: Source URL, if the item lives on the web.
        local_path: Path to a local file or course launcher.
        thumbnail_url: Thumbnail derived at ingestion.
        display_image_url: User-chosen cover; wins over ``thumbnail_url``.
        author: Creator name.
        platform_name: Human-readable platform label (``"YouTube"``).
        content_body: Article text captured in the reader view.
        estimated_minutes: Expected time investment; positive when set.
        difficulty: One of :data:`DIFFICULTIES`, or NULL (matches any focus).
        tags: Ordered list of tag strings, serialised as JSON.
        status: One of :data:`STATUSES`.
        progress_percent: 0-100.
        date_added: Creation time; never changes.
        date_completed: Time of the first transition into ``completed``.
        last_edited: Time of the latest content edit.
        user_note: Free-text note, usually written on completion.
        priority: Signed vote counter ordering the feed.
        times_surfaced: How often the item became visible in the feed.
    """

    __tablename__ = "content_items"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    # ------------------------------------------------------------------
    # Descriptive
    # ------------------------------------------------------------------

    title: Mapped[str] = mapped_column(sa.Text, nullable=False)
    type: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    url: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    local_path: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    display_image_url: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    author: Mapped[Optional[str]] = mapped_column(sa.String(300), nullable=True)
    platform_name: Mapped[Optional[str]] = mapped_column(sa.String(100), nullable=True)
    content_body: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)

    # ------------------------------------------------------------------
    # Learning metadata
    # ------------------------------------------------------------------

    estimated_minutes: Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    difficulty: Mapped[Optional[str]] = mapped_column(sa.String(16), nullable=True, index=True)
    tags: Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    status: Mapped[str] = mapped_column(
        sa.String(16), nullable=False, default=STATUS_UNSEEN, index=True
    )
    progress_percent: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    date_added: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=utcnow
    )
    date_completed: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    last_edited: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    user_note: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)

    # ------------------------------------------------------------------
    # Ranking
    # ------------------------------------------------------------------

    priority: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=DEFAULT_PRIORITY, index=True
    )
    times_surfaced: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<ContentItem id={self.id} type={self.type!r} "
            f"status={self.status!r} priority={self.priority}>"
        )
