from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import StorageError
from core.slugs import generate_slug
from schemas.posts import Post

from .base import PostDraft

logger = logging.getLogger(__name__)


class JsonFilePostStorage:
    """Posts kept as one JSON array on disk.

    Every write re-reads the whole file and rewrites it. There is no locking,
    so concurrent writers can lose updates.
    """

    unique_slugs = False
    derives_slugs = True

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def startup(self) -> None:
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write([])
        logger.info("Initialized empty posts file at %s", self.path)

    async def shutdown(self) -> None:
        return None

    async def healthcheck(self) -> bool:
        try:
            await self.list_posts()
        except StorageError:
            return False
        return True

    async def list_posts(self) -> list[Post]:
        return [self._to_post(record) for record in self._read()]

    async def get_by_id(self, post_id: int) -> Post | None:
        return self._find(lambda record: record.get("id") == post_id)

    async def get_by_slug(self, slug: str) -> Post | None:
        return self._find(lambda record: record.get("slug") == slug)

    async def get_by_derived_slug(self, slug: str) -> Post | None:
        return self._find(lambda record: generate_slug(str(record.get("title") or "")) == slug)

    async def create(self, draft: PostDraft) -> Post:
        records = self._read()
        post = Post(
            id=self._next_id(records, draft),
            title=draft.title,
            content=draft.content,
            label=draft.label,
            slug=draft.slug,
            image=draft.image,
            date=draft.date,
            created_at=draft.created_at,
        )
        records.append(post.to_record())
        self._write(records)
        return post

    async def update(self, post_id: int, changes: dict[str, Any]) -> Post | None:
        records = self._read()
        index = self._index_of(records, post_id)
        if index is None:
            return None
        updated = self._to_post(records[index]).model_copy(update=changes)
        # Merge so keys this service does not know about survive the rewrite
        records[index] = {**records[index], **updated.to_record()}
        self._write(records)
        return updated

    async def delete(self, post_id: int) -> Post | None:
        records = self._read()
        index = self._index_of(records, post_id)
        if index is None:
            return None
        removed = records.pop(index)
        self._write(records)
        return self._to_post(removed)

    def _read(self) -> list[dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Cannot read posts file %s: %s", self.path, e)
            raise StorageError("Cannot read posts") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Posts file %s is not valid JSON: %s", self.path, e)
            raise StorageError("Invalid posts data") from e
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            logger.error("Posts file %s does not hold a JSON array of objects", self.path)
            raise StorageError("Invalid posts data")
        return data

    def _write(self, records: list[dict[str, Any]]) -> None:
        try:
            self.path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.error("Cannot write posts file %s: %s", self.path, e)
            raise StorageError("Cannot save post") from e

    def _find(self, predicate) -> Post | None:
        for record in self._read():
            if predicate(record):
                return self._to_post(record)
        return None

    @staticmethod
    def _index_of(records: list[dict[str, Any]], post_id: int) -> int | None:
        for index, record in enumerate(records):
            if record.get("id") == post_id:
                return index
        return None

    @staticmethod
    def _next_id(records: list[dict[str, Any]], draft: PostDraft) -> int:
        # Creation time in epoch milliseconds, bumped past any existing id
        candidate = int(draft.created_at.timestamp() * 1000)
        existing = [record["id"] for record in records if isinstance(record.get("id"), int)]
        if existing and candidate <= max(existing):
            candidate = max(existing) + 1
        return candidate

    @staticmethod
    def _to_post(record: dict[str, Any]) -> Post:
        try:
            return Post.model_validate(record)
        except PydanticValidationError as e:
            logger.error("Malformed post record %r: %s", record.get("id"), e)
            raise StorageError("Invalid posts data") from e
