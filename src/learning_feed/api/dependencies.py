"""FastAPI dependency injection providers.

The application's long-lived collaborators are built once per process by
:func:`build_services` during the lifespan startup and stored on
``app.state.services``.  Route handlers receive them through the
``get_*`` providers below, and tests can swap any of them with
``app.dependency_overrides``.

Dependency graph::

    Services
    ├── engine / session_factory
    ├── content_store ──┬── feed
    │                   └── lifecycle
    ├── stats_store
    └── http_client ──── detector (oEmbed enrichment)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from learning_feed.config.settings import Settings
from learning_feed.core.content_store import ContentStore
from learning_feed.core.database import build_engine, build_session_factory
from learning_feed.core.feed import FeedQueryEngine
from learning_feed.core.lifecycle import LifecycleService
from learning_feed.core.stats import UserStatsStore
from learning_feed.ingestion.detect import ContentDetector
from learning_feed.ingestion.oembed import YouTubeOEmbedClient


@dataclass
class Services:
    """Process-wide collaborators shared by all requests."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    content_store: ContentStore
    stats_store: UserStatsStore
    feed: FeedQueryEngine
    lifecycle: LifecycleService
    http_client: httpx.AsyncClient
    detector: ContentDetector

    async def close(self) -> None:
        """Release the HTTP connection pool and the database pool."""
        await self.http_client.aclose()
        await self.engine.dispose()


def build_services(settings: Settings) -> Services:
    """Wire every collaborator for ``settings``.  No I/O is performed."""
    engine = build_engine(settings.database_url, echo=settings.database_echo)
    session_factory = build_session_factory(engine)
    content_store = ContentStore(session_factory)
    http_client = httpx.AsyncClient(
        timeout=settings.oembed_timeout_seconds,
        headers={"User-Agent": "LearningFeed/0.1 (content-detector)"},
        follow_redirects=True,
    )
    oembed = (
        YouTubeOEmbedClient(http_client, timeout=settings.oembed_timeout_seconds)
        if settings.oembed_enabled
        else None
    )
    return Services(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        content_store=content_store,
        stats_store=UserStatsStore(session_factory),
        feed=FeedQueryEngine(content_store),
        lifecycle=LifecycleService(content_store, xp_reward=settings.completion_xp_reward),
        http_client=http_client,
        detector=ContentDetector(oembed),
    )


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


def get_services(request: Request) -> Services:
    """Return the services built at startup for this application."""
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]


def get_content_store(services: ServicesDep) -> ContentStore:
    return services.content_store


def get_stats_store(services: ServicesDep) -> UserStatsStore:
    return services.stats_store


def get_feed(services: ServicesDep) -> FeedQueryEngine:
    return services.feed


def get_lifecycle(services: ServicesDep) -> LifecycleService:
    return services.lifecycle


def get_detector(services: ServicesDep) -> ContentDetector:
    return services.detector
