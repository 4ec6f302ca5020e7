#!/usr/bin/env python
"""Initialise the Learning Feed database.

Creates any missing tables and, on an empty database, inserts the demo
item.  The API server does the same at startup when ``AUTO_CREATE_SCHEMA``
and ``SEED_DEMO_CONTENT`` are set; this script is for deployments that turn
those off and prepare the database as a separate step.

Usage::

    python scripts/init_db.py
    python scripts/init_db.py --no-seed

Environment variables (via .env or shell)::

    DATABASE_URL  SQLAlchemy async URL of the target database.

Exit codes:
    0 - Success (tables verified, demo item inserted or already present).
    1 - Database error.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from sqlalchemy.exc import SQLAlchemyError

from learning_feed.config.settings import get_settings
from learning_feed.core.content_store import ContentStore
from learning_feed.core.database import build_engine, build_session_factory, create_schema
from learning_feed.core.logging_config import configure_logging
from learning_feed.core.seed import seed_demo_content


async def _init_db(seed: bool) -> None:
    """Create the schema and optionally seed the demo item.

    Raises:
        SystemExit: With code 1 if a database error occurs.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = build_engine(settings.database_url, echo=settings.database_echo)
    try:
        await create_schema(engine)
        print(f"[init_db] Schema verified on {engine.url.render_as_string(hide_password=True)}")
        if seed:
            store = ContentStore(build_session_factory(engine))
            if await seed_demo_content(store):
                print("[init_db] Demo item inserted.")
            else:
                print("[init_db] Database already has content.  Nothing to seed.")
    except SQLAlchemyError as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        await engine.dispose()

    print("[init_db] Done.")


def main() -> None:
    """Entry point for the init script.

    Wraps the async coroutine in ``asyncio.run``.
    """
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Only create tables; do not insert the demo item.",
    )
    args = parser.parse_args()
    asyncio.run(_init_db(seed=not args.no_seed))


if __name__ == "__main__":
    main()
