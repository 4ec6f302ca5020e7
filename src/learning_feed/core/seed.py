"""Demo content for a fresh database.

On an empty store the application inserts one starter item so that the
feed has something to show on first launch.  A store that already holds
items, completed ones included, is never touched.
"""

from __future__ import annotations

import structlog

from learning_feed.core.content_store import ContentStore
from learning_feed.ingestion.detect import classify_url

logger = structlog.get_logger(__name__)

DEMO_URL = "https://www.youtube.com/watch?v=9QiE-M1LrZk"
DEMO_TITLE = "Understanding Dopamine Detox"


async def seed_demo_content(store: ContentStore) -> bool:
    """Insert the demo item when the store is empty.

    Returns:
        ``True`` if an item was inserted.
    """
    if await store.count() > 0:
        return False
    data = classify_url(DEMO_URL).to_content_item(
        DEMO_URL,
        title=DEMO_TITLE,
        difficulty="light",
        tags=["psychology", "productivity"],
        estimated_minutes=15,
    )
    item = await store.create(data)
    logger.info("seed.demo_inserted", item_id=item.id)
    return True
