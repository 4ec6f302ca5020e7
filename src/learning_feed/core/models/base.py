"""SQLAlchemy declarative base and shared column helpers for all ORM models.

Provides:
- Base: the DeclarativeBase subclass all models inherit from
- utcnow: timezone-aware "now" used for every application-set timestamp
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


class Base(DeclarativeBase):
    """Shared declarative base for all Learning Feed models."""
