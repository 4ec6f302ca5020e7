"""Unit tests for URL classification and the content detector.

Tests cover:
- every platform signature and its defaults
- signature order (shorts before watch)
- YouTube id extraction and thumbnail derivation
- fallback to a generic article
- malformed URLs rejected with field="url"
- conversion of a detection into a validated create request
"""

from __future__ import annotations

import pytest

from learning_feed.core.exceptions import ValidationError
from learning_feed.ingestion.detect import (
    ContentDetector,
    classify_url,
    extract_youtube_id,
    youtube_thumbnail_url,
)


class TestClassifyUrl:
    def test_short_youtube_link(self) -> None:
        result = classify_url("https://youtu.be/abc123")

        assert result.type == "youtube"
        assert result.platform_name == "YouTube"
        assert result.title == "YouTube Video"
        assert result.estimated_minutes == 10
        assert "abc123" in result.thumbnail_url

    def test_youtube_watch_link(self) -> None:
        result = classify_url("https://www.youtube.com/watch?v=9QiE-M1LrZk&t=42")

        assert result.type == "youtube"
        assert result.thumbnail_url == "https://img.youtube.com/vi/9QiE-M1LrZk/hqdefault.jpg"

    def test_shorts_take_precedence_over_watch(self) -> None:
        result = classify_url("https://www.youtube.com/shorts/xyz789?feature=share")

        assert result.title == "YouTube Short"
        assert result.estimated_minutes == 1
        assert result.thumbnail_url == "https://img.youtube.com/vi/xyz789/hqdefault.jpg"

    @pytest.mark.parametrize(
        ("url", "type_", "platform", "title", "minutes"),
        [
            ("https://www.tiktok.com/@coach/video/123", "tiktok", "TikTok", "TikTok Video", 3),
            ("https://www.instagram.com/reel/Cx1/", "instagram", "Instagram", "Instagram Reel", 2),
            (
                "https://www.udemy.com/course/python-basics/",
                "course_launcher",
                "Udemy",
                "Udemy Course",
                60,
            ),
            (
                "https://www.coursera.org/learn/machine-learning",
                "course_launcher",
                "Coursera",
                "Coursera Course",
                60,
            ),
        ],
    )
    def test_platform_signatures(self, url, type_, platform, title, minutes) -> None:
        result = classify_url(url)

        assert result.type == type_
        assert result.platform_name == platform
        assert result.title == title
        assert result.estimated_minutes == minutes
        assert result.thumbnail_url is None

    def test_unknown_url_is_an_article(self) -> None:
        result = classify_url("https://example.com/post/spaced-repetition")

        assert result.type == "article"
        assert result.title == "New Article"
        assert result.platform_name is None
        assert result.estimated_minutes is None

    def test_instagram_profile_is_not_a_reel(self) -> None:
        assert classify_url("https://www.instagram.com/someone/").type == "article"

    @pytest.mark.parametrize(
        "url",
        ["not a url", "ftp://files.example.com/a.pdf", "https://", "youtube.com/watch?v=x"],
    )
    def test_malformed_url_raises(self, url: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            classify_url(url)
        assert exc_info.value.field == "url"


class TestYouTubeIds:
    @pytest.mark.parametrize(
        ("url", "video_id"),
        [
            ("https://www.youtube.com/watch?v=abc&list=PL1", "abc"),
            ("https://youtu.be/def456?si=tracking", "def456"),
            ("https://youtube.com/shorts/ghi", "ghi"),
        ],
    )
    def test_extract(self, url: str, video_id: str) -> None:
        assert extract_youtube_id(url) == video_id

    def test_no_id(self) -> None:
        assert extract_youtube_id("https://www.youtube.com/") is None
        assert youtube_thumbnail_url("https://www.youtube.com/") is None


class TestToContentItem:
    def test_detection_becomes_valid_create_request(self) -> None:
        url = "https://youtu.be/abc123"

        data = classify_url(url).to_content_item(url, difficulty="light", tags=["focus"])

        assert data.type == "youtube"
        assert data.url == url
        assert data.difficulty == "light"
        assert data.tags == ["focus"]
        assert data.platform_name == "YouTube"

    def test_overrides_replace_detected_values(self) -> None:
        url = "https://example.com/a"

        data = classify_url(url).to_content_item(url, title="My own title")

        assert data.title == "My own title"
        assert data.type == "article"


class TestContentDetectorOffline:
    async def test_detect_without_enrichment(self) -> None:
        detector = ContentDetector()

        result = await detector.detect("https://youtu.be/abc123")

        assert result.type == "youtube"
        assert result.author is None

    async def test_detect_article_skips_enrichment(self) -> None:
        detector = ContentDetector()

        result = await detector.detect("https://blog.example.org/notes")

        assert result.type == "article"
