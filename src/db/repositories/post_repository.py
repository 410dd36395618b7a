from datetime import datetime
import logging
from typing import Any, Literal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models.post import Post
from db.repositories.decorators import db_operation

logger = logging.getLogger(__name__)

AllowedField = Literal["title", "content", "label", "slug", "image", "updated_at"]
ALLOWED_UPDATE_FIELDS: frozenset[str] = frozenset({"title", "content", "label", "slug", "image", "updated_at"})
# posts.id is a 32-bit integer column
MAX_POST_ID = 2**31 - 1


@db_operation("creating post")
async def create_post(
    db: AsyncSession,
    *,
    title: str,
    content: str,
    label: str,
    slug: str,
    created_at: datetime,
    image: str | None = None,
    date: str | None = None,
) -> Post:
    new_post = Post(
        title=title,
        content=content,
        label=label,
        slug=slug,
        image=image,
        date=date,
        created_at=created_at,
    )
    db.add(new_post)
    await db.flush()
    await db.refresh(new_post)
    logger.info("Created new post with id %s", new_post.id)
    return new_post


@db_operation("fetching all posts", retries=3)
async def list_posts(db: AsyncSession) -> list[Post]:
    stmt = select(Post).order_by(Post.created_at.desc(), Post.id.desc())
    res = await db.execute(stmt)
    return list(res.scalars().all())


@db_operation("fetching post", retries=3)
async def get_post_by_id(db: AsyncSession, post_id: int) -> Post | None:
    if post_id <= 0 or post_id > MAX_POST_ID:
        logger.debug("Invalid post_id: %s (out of range)", post_id)
        return None
    return await db.get(Post, post_id)


@db_operation("fetching post by slug", retries=3)
async def get_post_by_slug(db: AsyncSession, slug: str) -> Post | None:
    stmt = select(Post).where(Post.slug == slug).order_by(Post.created_at.desc()).limit(1)
    res = await db.execute(stmt)
    return res.scalars().first()


@db_operation("updating post")
async def update_post_fields(db: AsyncSession, post_id: int, changes: dict[str, Any]) -> Post | None:
    post = await get_post_by_id(db, post_id)
    if post is None:
        logger.info("Skip update: post %s not found", post_id)
        return None

    disallowed = set(changes) - ALLOWED_UPDATE_FIELDS
    if disallowed:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(disallowed))}")

    for field, value in changes.items():
        setattr(post, field, value)

    await db.flush()
    await db.refresh(post)
    logger.info("Updated %s for post %s", ", ".join(sorted(changes)), post_id)
    return post


@db_operation("deleting post")
async def delete_post_by_id(db: AsyncSession, post_id: int) -> Post | None:
    post = await get_post_by_id(db, post_id)
    if post is None:
        logger.info("Skip delete: post %s not found", post_id)
        return None

    await db.delete(post)
    await db.flush()
    logger.info("Deleted post with id %s", post_id)
    return post
