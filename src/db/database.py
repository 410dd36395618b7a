from __future__ import annotations

import inspect
import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from core.config_models import DatabaseConfig

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_kwargs(config: DatabaseConfig) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": config.echo, "pool_pre_ping": config.pool_pre_ping}
    # SQLite drivers reject pool sizing arguments
    if not make_url(config.url).get_backend_name().startswith("sqlite"):
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
    return kwargs


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    engine = create_async_engine(config.url, **_engine_kwargs(config))
    logger.debug("AsyncEngine created for %s", make_url(config.url).render_as_string(hide_password=True))
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create tables directly from metadata; migrations are the normal route."""
    from db.models import post as _post_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db_connection(engine: AsyncEngine) -> bool:
    try:
        ctx = engine.begin()
        # Support both real AsyncEngine (returns async context manager)
        # and test mocks that return a coroutine yielding a context manager
        if inspect.isawaitable(ctx):
            ctx = await ctx  # type: ignore[assignment]
        async with ctx as conn:  # type: ignore[func-returns-value]
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection is healthy")
        return True
    except Exception as e:
        logger.error("Database connection check failed: %s", e)
        return False
