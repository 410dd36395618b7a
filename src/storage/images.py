"""
Image stores: local disk for the file backend, S3-compatible buckets for the database backend.
"""

from __future__ import annotations

from dataclasses import dataclass
import functools
import logging
from pathlib import Path
import time
from typing import Any, Protocol
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from core.config_models import ObjectStorageConfig
from core.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_NAME = "image"


@dataclass(frozen=True)
class UploadedImage:
    """An image received in a multipart request."""

    filename: str
    data: bytes
    content_type: str | None = None


def stored_name(filename: str, *, now_ms: int | None = None) -> str:
    """Upload-time prefixed basename, e.g. ``1718000000000-cat.png``."""
    base = filename.replace("\\", "/").rsplit("/", 1)[-1].strip() or DEFAULT_IMAGE_NAME
    if base in (".", ".."):
        base = DEFAULT_IMAGE_NAME
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}-{base}"


class ImageStore(Protocol):
    """Defines the operations the API needs from image storage."""

    async def save(self, image: UploadedImage) -> str:
        """Persist the image and return its public URL."""
        ...


class LocalImageStore:
    """Writes images into a directory served under ``/uploads``."""

    def __init__(self, directory: str | Path, *, public_base_url: str = "") -> None:
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def url_for(self, name: str) -> str:
        return f"{self.public_base_url}/uploads/{quote(name)}"

    async def save(self, image: UploadedImage) -> str:
        name = stored_name(image.filename)
        path = self.directory / name
        try:
            await run_in_threadpool(path.write_bytes, image.data)
        except OSError as e:
            logger.error("Cannot write image %s: %s", path, e)
            raise StorageError(str(e)) from e
        logger.info("Stored image %s (%s bytes)", path, len(image.data))
        return self.url_for(name)


@dataclass
class S3ImageStore:
    """
    S3-compatible object storage (AWS, MinIO, R2, Supabase Storage S3 endpoint).
    """

    client: Any
    bucket: str
    prefix: str = "uploads"
    public_url: str | None = None
    endpoint_url: str | None = None

    @classmethod
    def from_config(cls, config: ObjectStorageConfig) -> "S3ImageStore":
        client = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url,
            region_name=config.region,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            config=Config(signature_version="s3v4"),
        )
        return cls(
            client=client,
            bucket=config.bucket,
            prefix=config.prefix,
            public_url=config.public_url,
            endpoint_url=config.endpoint_url,
        )

    def key_for(self, name: str) -> str:
        return f"{self.prefix}/{name}" if self.prefix else name

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{quote(key)}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quote(key)}"
        return f"https://{self.bucket}.s3.amazonaws.com/{quote(key)}"

    async def save(self, image: UploadedImage) -> str:
        key = self.key_for(stored_name(image.filename))
        put = functools.partial(
            self.client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=image.data,
            ContentType=image.content_type or "application/octet-stream",
        )
        try:
            await run_in_threadpool(put)
        except (BotoCoreError, ClientError) as e:
            logger.error("Upload of %s to bucket %s failed: %s", key, self.bucket, e)
            raise StorageError(str(e)) from e
        logger.info("Uploaded image to s3://%s/%s", self.bucket, key)
        return self.url_for(key)
