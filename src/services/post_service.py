from datetime import UTC, datetime
import logging

from core.exceptions import NotFoundError, ValidationError
from core.slugs import make_slug
from schemas.posts import Post, PostCreate, PostCreated, PostMutation, PostUpdate, clean_text
from storage.base import PostDraft, PostStorage
from storage.images import ImageStore, UploadedImage

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _epoch_ms(moment: datetime) -> int:
    # Some drivers (SQLite) hand back naive datetimes; they are stored as UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp() * 1000)


def display_date(moment: datetime) -> str:
    """Short date shown on post cards, e.g. 'Oct 18'."""
    return f"{moment:%b} {moment.day}"


def parse_post_id(raw: str | int) -> int | None:
    """Numeric id from a path segment; anything else never matches a post."""
    if isinstance(raw, int):
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        return None


async def list_posts(storage: PostStorage) -> list[Post]:
    return await storage.list_posts()


async def get_post(storage: PostStorage, identifier: str) -> Post:
    """
    Resolve a post by numeric id, then exact slug, then (where the backend
    supports it) a slug derived from the stored title.
    """
    post: Post | None = None
    post_id = parse_post_id(identifier)
    if post_id is not None:
        post = await storage.get_by_id(post_id)
    if post is None:
        post = await storage.get_by_slug(identifier)
    if post is None and storage.derives_slugs:
        post = await storage.get_by_derived_slug(identifier)
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def create_post(
    storage: PostStorage,
    images: ImageStore,
    payload: PostCreate,
    image: UploadedImage | None = None,
) -> PostCreated:
    if payload.missing_fields():
        raise ValidationError("Title, content, and label required")

    title = payload.title or ""
    created_at = _utcnow()
    slug = make_slug(title, unique_suffix=_epoch_ms(created_at) if storage.unique_slugs else None)
    image_url = await images.save(image) if image is not None else None

    post = await storage.create(
        PostDraft(
            title=title,
            content=payload.content or "",
            label=payload.label or "",
            slug=slug,
            created_at=created_at,
            image=image_url,
            date=display_date(created_at),
        )
    )
    logger.info("Created post %s with slug %r", post.id, post.slug)
    return PostCreated(id=post.id, slug=post.slug)


async def update_post(
    storage: PostStorage,
    images: ImageStore,
    post_id: str | int,
    payload: PostUpdate,
    image: UploadedImage | None = None,
) -> PostMutation:
    parsed_id = parse_post_id(post_id)
    existing = await storage.get_by_id(parsed_id) if parsed_id is not None else None
    if parsed_id is None or existing is None:
        raise NotFoundError("Post not found")

    changes: dict[str, object] = {}
    for field, value in payload.supplied().items():
        if value is None:
            continue
        if clean_text(value) is None:
            raise ValidationError(f"{field.capitalize()} cannot be empty")
        changes[field] = value

    if "title" in changes:
        suffix = _epoch_ms(existing.created_at) if storage.unique_slugs else None
        changes["slug"] = make_slug(str(changes["title"]), unique_suffix=suffix)
    if image is not None:
        changes["image"] = await images.save(image)
    changes["updated_at"] = _utcnow()

    post = await storage.update(parsed_id, changes)
    if post is None:
        raise NotFoundError("Post not found")
    logger.info("Updated post %s (%s)", parsed_id, ", ".join(sorted(changes)))
    return PostMutation(post=post)


async def delete_post(storage: PostStorage, post_id: str | int) -> PostMutation:
    parsed_id = parse_post_id(post_id)
    post = await storage.delete(parsed_id) if parsed_id is not None else None
    if post is None:
        raise NotFoundError("Post not found")
    logger.info("Deleted post %s", parsed_id)
    return PostMutation(post=post)
