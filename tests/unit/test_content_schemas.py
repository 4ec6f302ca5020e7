"""Unit tests for the content request/response schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pydantic
import pytest

from learning_feed.core.schemas.content import (
    ContentItemCreate,
    ContentItemRead,
    ContentItemUpdate,
    RateRequest,
)
from tests.factories.content import ContentItemPayloadFactory, camel_payload


def _row(**overrides) -> SimpleNamespace:
    values = dict(
        id=1,
        title="Item",
        type="article",
        url=None,
        local_path=None,
        thumbnail_url=None,
        display_image_url=None,
        author=None,
        platform_name=None,
        content_body=None,
        estimated_minutes=None,
        difficulty=None,
        tags=None,
        status="unseen",
        progress_percent=0,
        date_added=datetime(2026, 1, 2, 3, 4, 5),
        date_completed=None,
        last_edited=None,
        user_note=None,
        priority=0,
        times_surfaced=0,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestContentItemCreate:
    def test_accepts_camel_case(self) -> None:
        payload = camel_payload(ContentItemPayloadFactory.build(estimated_minutes=25))

        data = ContentItemCreate.model_validate(payload)

        assert data.estimated_minutes == 25

    def test_title_is_trimmed(self) -> None:
        data = ContentItemCreate(title="  Padded  ", type="article")
        assert data.title == "Padded"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title: str) -> None:
        with pytest.raises(pydantic.ValidationError) as exc_info:
            ContentItemCreate(title=title, type="article")
        assert exc_info.value.errors()[0]["loc"] == ("title",)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ContentItemCreate(title="x", type="podcast")

    def test_unknown_difficulty_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ContentItemCreate(title="x", type="article", difficulty="extreme")

    def test_non_positive_minutes_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ContentItemCreate(title="x", type="article", estimated_minutes=0)

    def test_tags_accept_json_string(self) -> None:
        data = ContentItemCreate(title="x", type="article", tags='["a", "b"]')
        assert data.tags == ["a", "b"]

    def test_overlong_note_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ContentItemCreate(title="x", type="article", user_note="n" * 10_001)

    def test_priority_is_not_accepted_on_create(self) -> None:
        data = ContentItemCreate.model_validate({"title": "x", "type": "manual", "priority": 9})
        assert "priority" not in data.model_dump()


class TestContentItemUpdate:
    def test_only_sent_fields_are_set(self) -> None:
        data = ContentItemUpdate.model_validate({"progressPercent": 40})
        assert data.model_dump(exclude_unset=True) == {"progress_percent": 40}

    def test_null_status_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ContentItemUpdate.model_validate({"status": None})

    def test_progress_out_of_range_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ContentItemUpdate.model_validate({"progressPercent": 101})

    def test_explicit_null_clears_optional_field(self) -> None:
        data = ContentItemUpdate.model_validate({"difficulty": None})
        assert data.model_dump(exclude_unset=True) == {"difficulty": None}


class TestRateRequest:
    @pytest.mark.parametrize("delta", [1, -1])
    def test_unit_steps_accepted(self, delta: int) -> None:
        assert RateRequest(delta=delta).delta == delta

    @pytest.mark.parametrize("delta", [0, 2, -5])
    def test_other_steps_rejected(self, delta: int) -> None:
        with pytest.raises(pydantic.ValidationError):
            RateRequest(delta=delta)


class TestContentItemRead:
    def test_serialises_camel_case_with_cover_image(self) -> None:
        read = ContentItemRead.model_validate(_row(thumbnail_url="https://img/t.jpg"))

        body = read.model_dump(by_alias=True)

        assert body["coverImageUrl"] == "https://img/t.jpg"
        assert body["timesSurfaced"] == 0
        assert "times_surfaced" not in body

    def test_display_image_wins_over_thumbnail(self) -> None:
        read = ContentItemRead.model_validate(
            _row(thumbnail_url="https://img/t.jpg", display_image_url="https://img/d.jpg")
        )
        assert read.cover_image_url == "https://img/d.jpg"

    def test_null_tags_become_empty_list(self) -> None:
        assert ContentItemRead.model_validate(_row(tags=None)).tags == []

    def test_naive_dates_are_returned_as_utc(self) -> None:
        read = ContentItemRead.model_validate(_row())
        assert read.date_added.tzinfo == timezone.utc
