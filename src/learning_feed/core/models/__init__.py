"""SQLAlchemy ORM models for Learning Feed.

All models are imported here so that:
1. ``Base.metadata.create_all`` sees every table.
2. Application code can do ``from learning_feed.core.models import ContentItem``
   without knowing which sub-module a model lives in.
"""

from __future__ import annotations

from learning_feed.core.models.base import Base
from learning_feed.core.models.content import ContentItem
from learning_feed.core.models.stats import UserStats

__all__ = [
    "Base",
    "ContentItem",
    "UserStats",
]
