"""Content item routes: feed, CRUD, lifecycle actions and URL detection.

Routes:
    GET    /api/content                 - the feed, optionally filtered by focus
    POST   /api/content                 - create an item (201)
    POST   /api/content/detect          - classify a URL into an item stub
    GET    /api/content/{item_id}       - one item
    PATCH  /api/content/{item_id}       - partial update, lifecycle rules apply
    DELETE /api/content/{item_id}       - remove an item (204)
    POST   /api/content/{item_id}/surfaced  - count one appearance in the feed
    POST   /api/content/{item_id}/rate      - move priority by +1 or -1
    POST   /api/content/{item_id}/complete  - mark completed, credit stats once

Domain errors (``ValidationError``, ``NotFoundError``) propagate to the
exception handlers registered in ``api/main.py``.
"""

from __future__ import annotations

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from learning_feed.api import metrics
from learning_feed.api.dependencies import (
    get_content_store,
    get_detector,
    get_feed,
    get_lifecycle,
)
from learning_feed.core.content_store import ContentStore
from learning_feed.core.feed import FeedQueryEngine
from learning_feed.core.lifecycle import LifecycleService
from learning_feed.core.schemas.content import (
    CompleteRequest,
    CompletionRead,
    ContentItemCreate,
    ContentItemRead,
    ContentItemUpdate,
    RateRequest,
)
from learning_feed.core.schemas.ingestion import DetectionResult, DetectRequest
from learning_feed.core.schemas.stats import UserStatsRead
from learning_feed.ingestion.detect import ContentDetector

logger = structlog.get_logger(__name__)

router = APIRouter()

StoreDep = Annotated[ContentStore, Depends(get_content_store)]
LifecycleDep = Annotated[LifecycleService, Depends(get_lifecycle)]


# ---------------------------------------------------------------------------
# Feed and creation
# ---------------------------------------------------------------------------


@router.get("", response_model=list[ContentItemRead])
async def list_content(
    feed: Annotated[FeedQueryEngine, Depends(get_feed)],
    focus: Optional[str] = Query(
        default=None,
        description="Focus level: low, medium or high.  Omit for every active item.",
    ),
) -> list[ContentItemRead]:
    """Return the active feed, best first.

    Completed items are never included.  With a focus level, items whose
    difficulty matches the level or is unset are returned.

    Raises:
        ValidationError: If ``focus`` is not a known level (400).
    """
    items = await feed.list(focus)
    metrics.feed_requests_total.labels(focus=focus or "all").inc()
    return [ContentItemRead.model_validate(item) for item in items]


@router.post("", response_model=ContentItemRead, status_code=status.HTTP_201_CREATED)
async def create_content(body: ContentItemCreate, store: StoreDep) -> ContentItemRead:
    """Store a new item.  It starts ``unseen`` at 0 %."""
    item = await store.create(body)
    return ContentItemRead.model_validate(item)


@router.post(
    "/detect",
    response_model=DetectionResult,
    response_model_exclude_none=True,
)
async def detect_content(
    body: DetectRequest,
    detector: Annotated[ContentDetector, Depends(get_detector)],
) -> DetectionResult:
    """Classify a pasted URL.

    Unknown URLs come back as a generic article; only a malformed URL is
    rejected.  Fields that could not be derived are omitted from the body.
    """
    return await detector.detect(body.url)


# ---------------------------------------------------------------------------
# Single item
# ---------------------------------------------------------------------------


@router.get("/{item_id}", response_model=ContentItemRead)
async def get_content(item_id: int, store: StoreDep) -> ContentItemRead:
    item = await store.get(item_id)
    return ContentItemRead.model_validate(item)


@router.patch("/{item_id}", response_model=ContentItemRead)
async def update_content(
    item_id: int,
    body: ContentItemUpdate,
    lifecycle: LifecycleDep,
) -> ContentItemRead:
    """Apply the fields present in the body.

    ``status="completed"`` behaves like the complete action.  A completed
    item cannot be moved back to another status or below 100 %.
    """
    changes = body.model_dump(exclude_unset=True)
    item = await lifecycle.apply_update(item_id, changes)
    return ContentItemRead.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(item_id: int, store: StoreDep) -> Response:
    await store.delete(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@router.post("/{item_id}/surfaced", response_model=ContentItemRead)
async def mark_surfaced(item_id: int, store: StoreDep) -> ContentItemRead:
    """Count one appearance of the item in the feed.  Status is unchanged."""
    item = await store.increment_surfaced(item_id)
    return ContentItemRead.model_validate(item)


@router.post("/{item_id}/rate", response_model=ContentItemRead)
async def rate_content(item_id: int, body: RateRequest, store: StoreDep) -> ContentItemRead:
    """Nudge the item's priority by ``delta`` (+1 or -1)."""
    item = await store.adjust_priority(item_id, body.delta)
    return ContentItemRead.model_validate(item)


@router.post("/{item_id}/complete", response_model=CompletionRead)
async def complete_content(
    item_id: int,
    lifecycle: LifecycleDep,
    body: Optional[CompleteRequest] = None,
) -> CompletionRead:
    """Mark the item completed.

    The first completion credits the stats (items, minutes, XP, streak).
    Completing again returns ``newlyCompleted: false`` with ``xpAwarded: 0``
    and leaves the stats unchanged.
    """
    note = body.user_note if body is not None else None
    outcome = await lifecycle.complete(item_id, user_note=note)
    return CompletionRead(
        item=ContentItemRead.model_validate(outcome.item),
        stats=UserStatsRead.model_validate(outcome.stats),
        xp_awarded=outcome.xp_awarded,
        newly_completed=outcome.newly_completed,
    )
