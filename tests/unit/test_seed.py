"""Unit tests for demo content seeding."""

from __future__ import annotations

from learning_feed.core.content_store import ContentStore
from learning_feed.core.seed import DEMO_TITLE, DEMO_URL, seed_demo_content


class TestSeedDemoContent:
    async def test_empty_store_gets_demo_item(self, store: ContentStore) -> None:
        inserted = await seed_demo_content(store)

        assert inserted is True
        assert await store.count() == 1
        item = await store.get(1)
        assert item.title == DEMO_TITLE
        assert item.url == DEMO_URL
        assert item.type == "youtube"
        assert item.platform_name == "YouTube"
        assert item.difficulty == "light"
        assert item.tags == ["psychology", "productivity"]
        assert item.estimated_minutes == 15
        assert item.thumbnail_url == "https://img.youtube.com/vi/9QiE-M1LrZk/hqdefault.jpg"

    async def test_non_empty_store_is_left_alone(self, store: ContentStore, make_item) -> None:
        await make_item()

        inserted = await seed_demo_content(store)

        assert inserted is False
        assert await store.count() == 1

    async def test_seeding_twice_inserts_once(self, store: ContentStore) -> None:
        await seed_demo_content(store)
        await seed_demo_content(store)

        assert await store.count() == 1
