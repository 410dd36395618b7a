from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from core.config_models import DatabaseConfig
from core.exceptions import DatabaseError
from db.database import check_db_connection, create_db_engine, create_session_maker
from db.repositories import post_repository
from schemas.posts import Post

from .base import PostDraft

logger = logging.getLogger(__name__)


class DatabasePostStorage:
    """Posts stored as rows of the ``posts`` table.

    Each operation runs in its own session; writes commit before returning.
    """

    unique_slugs = True
    derives_slugs = False

    def __init__(self, engine: AsyncEngine, *, check_on_start: bool = True) -> None:
        self.engine = engine
        self.check_on_start = check_on_start
        self._sessions = create_session_maker(engine)

    @classmethod
    def from_config(cls, config: DatabaseConfig, *, check_on_start: bool = True) -> "DatabasePostStorage":
        return cls(create_db_engine(config), check_on_start=check_on_start)

    async def startup(self) -> None:
        if not self.check_on_start:
            logger.debug("Skipping DB connection check on startup (DB_CHECK_ON_START=false)")
            return
        if not await check_db_connection(self.engine):
            raise RuntimeError("Database connection failed")
        logger.info("Database connection verified")

    async def shutdown(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")

    async def healthcheck(self) -> bool:
        return await check_db_connection(self.engine)

    async def list_posts(self) -> list[Post]:
        async with self._session() as db:
            rows = await post_repository.list_posts(db)
            return [Post.model_validate(row) for row in rows]

    async def get_by_id(self, post_id: int) -> Post | None:
        async with self._session() as db:
            row = await post_repository.get_post_by_id(db, post_id)
            return Post.model_validate(row) if row is not None else None

    async def get_by_slug(self, slug: str) -> Post | None:
        async with self._session() as db:
            row = await post_repository.get_post_by_slug(db, slug)
            return Post.model_validate(row) if row is not None else None

    async def get_by_derived_slug(self, slug: str) -> Post | None:
        # Stored slugs carry a uniqueness suffix, so title-derived matching is not offered
        return None

    async def create(self, draft: PostDraft) -> Post:
        async with self._session(commit=True) as db:
            row = await post_repository.create_post(
                db,
                title=draft.title,
                content=draft.content,
                label=draft.label,
                slug=draft.slug,
                image=draft.image,
                date=draft.date,
                created_at=draft.created_at,
            )
            return Post.model_validate(row)

    async def update(self, post_id: int, changes: dict[str, Any]) -> Post | None:
        async with self._session(commit=True) as db:
            row = await post_repository.update_post_fields(db, post_id, changes)
            return Post.model_validate(row) if row is not None else None

    async def delete(self, post_id: int) -> Post | None:
        async with self._session(commit=True) as db:
            row = await post_repository.delete_post_by_id(db, post_id)
            return Post.model_validate(row) if row is not None else None

    @asynccontextmanager
    async def _session(self, *, commit: bool = False) -> AsyncIterator[AsyncSession]:
        async with self._sessions() as session:
            try:
                yield session
                if commit:
                    await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error in async DB session: %s", e)
                raise DatabaseError(message="Database failure") from e
            except Exception:
                await session.rollback()
                raise
