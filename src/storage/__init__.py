from __future__ import annotations

from core.config import Settings

from .base import PostDraft, PostStorage
from .database_storage import DatabasePostStorage
from .file_storage import JsonFilePostStorage
from .images import ImageStore, LocalImageStore, S3ImageStore, UploadedImage


def build_post_storage(settings: Settings) -> PostStorage:
    """Pick the post backend named by STORAGE_BACKEND."""
    assert settings.storage is not None
    if settings.storage.backend == "database":
        assert settings.database is not None
        return DatabasePostStorage.from_config(settings.database, check_on_start=settings.server.check_db_on_start)
    return JsonFilePostStorage(settings.storage.posts_file)


def build_image_store(settings: Settings) -> ImageStore:
    """Local disk next to the posts file, or the bucket in database mode."""
    assert settings.storage is not None
    if settings.storage.backend == "database":
        assert settings.object_storage is not None
        return S3ImageStore.from_config(settings.object_storage)
    return LocalImageStore(settings.storage.uploads_dir, public_base_url=settings.storage.public_base_url)


__all__ = [
    "DatabasePostStorage",
    "ImageStore",
    "JsonFilePostStorage",
    "LocalImageStore",
    "PostDraft",
    "PostStorage",
    "S3ImageStore",
    "UploadedImage",
    "build_image_store",
    "build_post_storage",
]
