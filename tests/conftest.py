"""Shared pytest fixtures for Learning Feed tests.

Fixture summary
---------------
settings        - Settings pointing at a fresh SQLite file under tmp_path.
session_factory - async_sessionmaker over a schema-initialised engine.
store           - ContentStore bound to the session factory.
stats_store     - UserStatsStore bound to the session factory.
feed            - FeedQueryEngine over ``store``.
lifecycle       - LifecycleService over ``store`` (150 XP per completion).
make_item       - coroutine factory: insert a content item from a payload.
app             - FastAPI application with its lifespan running.
client          - httpx.AsyncClient against ``app``.

Every test gets its own database file, so tests never share rows and need
no external infrastructure.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

# Keep the module-level ``app`` in learning_feed.api.main off the working
# directory's database and away from the network during collection.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_DEMO_CONTENT", "false")
os.environ.setdefault("OEMBED_ENABLED", "false")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from learning_feed.api.main import create_app  # noqa: E402
from learning_feed.config.settings import Settings, get_settings  # noqa: E402
from learning_feed.core.content_store import ContentStore  # noqa: E402
from learning_feed.core.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    create_schema,
)
from learning_feed.core.feed import FeedQueryEngine  # noqa: E402
from learning_feed.core.lifecycle import LifecycleService  # noqa: E402
from learning_feed.core.models.content import ContentItem  # noqa: E402
from learning_feed.core.schemas.content import ContentItemCreate  # noqa: E402
from learning_feed.core.stats import UserStatsStore  # noqa: E402
from tests.factories.content import ContentItemPayloadFactory  # noqa: E402

get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Settings and database
# ---------------------------------------------------------------------------


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file unique to the current test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'learning_feed_test.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Settings for an isolated, offline application instance."""
    return Settings(
        _env_file=None,
        database_url=database_url,
        seed_demo_content=False,
        oembed_enabled=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def session_factory(
    database_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a freshly created schema."""
    engine = build_engine(database_url)
    await create_schema(engine)
    try:
        yield build_session_factory(engine)
    finally:
        await engine.dispose()


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> ContentStore:
    return ContentStore(session_factory)


@pytest.fixture
def stats_store(session_factory: async_sessionmaker[AsyncSession]) -> UserStatsStore:
    return UserStatsStore(session_factory)


@pytest.fixture
def feed(store: ContentStore) -> FeedQueryEngine:
    return FeedQueryEngine(store)


@pytest.fixture
def lifecycle(store: ContentStore) -> LifecycleService:
    return LifecycleService(store, xp_reward=150)


@pytest.fixture
def make_item(store: ContentStore) -> Callable[..., Awaitable[ContentItem]]:
    """Return a coroutine that stores an item built by the payload factory.

    Usage::

        item = await make_item(difficulty="deep", estimated_minutes=20)
    """

    async def _make(**overrides: Any) -> ContentItem:
        payload = ContentItemPayloadFactory.build(**overrides)
        return await store.create(ContentItemCreate(**payload))

    return _make


# ---------------------------------------------------------------------------
# Application and HTTP client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """FastAPI application with startup (schema creation) already run."""
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired directly to the ASGI app, no network."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
