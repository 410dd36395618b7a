from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from schemas.posts import Post


@dataclass(frozen=True)
class PostDraft:
    """Everything a backend needs to persist a new post; the id is assigned by the backend."""

    title: str
    content: str
    label: str
    slug: str
    created_at: datetime
    image: str | None = None
    date: str | None = None


class PostStorage(Protocol):
    """Operations the post service needs from a storage backend.

    ``unique_slugs`` makes the service append a creation-time suffix to new slugs.
    ``derives_slugs`` enables lookup by a slug derived from each stored title.
    """

    unique_slugs: bool
    derives_slugs: bool

    async def startup(self) -> None:
        ...

    async def shutdown(self) -> None:
        ...

    async def healthcheck(self) -> bool:
        ...

    async def list_posts(self) -> list[Post]:
        ...

    async def get_by_id(self, post_id: int) -> Post | None:
        ...

    async def get_by_slug(self, slug: str) -> Post | None:
        ...

    async def get_by_derived_slug(self, slug: str) -> Post | None:
        ...

    async def create(self, draft: PostDraft) -> Post:
        ...

    async def update(self, post_id: int, changes: dict[str, Any]) -> Post | None:
        ...

    async def delete(self, post_id: int) -> Post | None:
        ...
