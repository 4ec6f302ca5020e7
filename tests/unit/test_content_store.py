"""Unit tests for ContentStore.

Tests cover:
- create() assigns id, date_added, status, progress and counters
- get() / update() / delete() raise NotFoundError for unknown ids
- update() stamps last_edited only when a content field changes
- adjust_priority() is unbounded and +1 then -1 restores the value
- increment_surfaced() counts without touching status
- concurrent priority adjustments are not lost
"""

from __future__ import annotations

import asyncio

import pytest

from learning_feed.core.content_store import ContentStore
from learning_feed.core.exceptions import NotFoundError
from learning_feed.core.schemas.content import ContentItemCreate
from tests.factories.content import ContentItemPayloadFactory


class TestCreate:
    async def test_create_assigns_store_fields(self, store: ContentStore) -> None:
        payload = ContentItemPayloadFactory.build(title="Deep work notes")
        item = await store.create(ContentItemCreate(**payload))

        assert item.id is not None
        assert item.title == "Deep work notes"
        assert item.status == "unseen"
        assert item.progress_percent == 0
        assert item.times_surfaced == 0
        assert item.priority == 0
        assert item.date_added is not None
        assert item.date_completed is None
        assert item.last_edited is None

    async def test_create_keeps_tag_order(self, store: ContentStore) -> None:
        payload = ContentItemPayloadFactory.build(tags=["zeta", "alpha", "mid"])
        item = await store.create(ContentItemCreate(**payload))

        fetched = await store.get(item.id)
        assert fetched.tags == ["zeta", "alpha", "mid"]

    async def test_ids_are_unique(self, make_item) -> None:
        first = await make_item()
        second = await make_item()
        assert first.id != second.id

    async def test_count(self, store: ContentStore, make_item) -> None:
        assert await store.count() == 0
        await make_item()
        await make_item()
        assert await store.count() == 2


class TestReadUpdateDelete:
    async def test_get_unknown_id_raises(self, store: ContentStore) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await store.get(9999)
        assert exc_info.value.item_id == 9999
        assert "9999" in str(exc_info.value)

    async def test_update_changes_fields_and_stamps_last_edited(
        self, store: ContentStore, make_item
    ) -> None:
        item = await make_item(title="Old title")

        updated = await store.update(item.id, {"title": "New title", "tags": ["x"]})

        assert updated.title == "New title"
        assert updated.tags == ["x"]
        assert updated.last_edited is not None

    async def test_update_with_identical_values_is_not_an_edit(
        self, store: ContentStore, make_item
    ) -> None:
        item = await make_item(title="Same")

        updated = await store.update(item.id, {"title": "Same"})

        assert updated.last_edited is None

    async def test_update_unknown_id_raises(self, store: ContentStore) -> None:
        with pytest.raises(NotFoundError):
            await store.update(404, {"title": "Nope"})

    async def test_delete_removes_item(self, store: ContentStore, make_item) -> None:
        item = await make_item()

        await store.delete(item.id)

        with pytest.raises(NotFoundError):
            await store.get(item.id)

    async def test_delete_twice_raises(self, store: ContentStore, make_item) -> None:
        item = await make_item()
        await store.delete(item.id)

        with pytest.raises(NotFoundError):
            await store.delete(item.id)


class TestCounters:
    async def test_rate_up_then_down_restores_priority(
        self, store: ContentStore, make_item
    ) -> None:
        item = await make_item()

        up = await store.adjust_priority(item.id, 1)
        down = await store.adjust_priority(item.id, -1)

        assert up.priority == 1
        assert down.priority == 0

    async def test_priority_can_go_negative(self, store: ContentStore, make_item) -> None:
        item = await make_item()

        for _ in range(3):
            item = await store.adjust_priority(item.id, -1)

        assert item.priority == -3

    async def test_adjust_priority_unknown_id_raises(self, store: ContentStore) -> None:
        with pytest.raises(NotFoundError):
            await store.adjust_priority(77, 1)

    async def test_surfaced_counts_and_keeps_status(
        self, store: ContentStore, make_item
    ) -> None:
        item = await make_item()

        await store.increment_surfaced(item.id)
        item = await store.increment_surfaced(item.id)

        assert item.times_surfaced == 2
        assert item.status == "unseen"

    async def test_surfaced_unknown_id_raises(self, store: ContentStore) -> None:
        with pytest.raises(NotFoundError):
            await store.increment_surfaced(123)

    async def test_concurrent_upvotes_are_not_lost(
        self, store: ContentStore, make_item
    ) -> None:
        item = await make_item()

        await asyncio.gather(*(store.adjust_priority(item.id, 1) for _ in range(5)))

        assert (await store.get(item.id)).priority == 5
