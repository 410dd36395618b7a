from botocore.exceptions import ClientError
import pytest

from core.config_models import ObjectStorageConfig
from core.exceptions import StorageError
from storage.images import LocalImageStore, S3ImageStore, stored_name
from tests.factories.posts import PNG_BYTES, png_image

pytestmark = pytest.mark.anyio


@pytest.mark.unit
@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("cat.png", "1700000000000-cat.png"),
        ("../../etc/passwd", "1700000000000-passwd"),
        ("C:\\photos\\dog.jpg", "1700000000000-dog.jpg"),
        ("", "1700000000000-image"),
        ("..", "1700000000000-image"),
    ],
)
def test_stored_name(filename, expected):
    assert stored_name(filename, now_ms=1_700_000_000_000) == expected


@pytest.mark.unit
async def test_local_store_writes_file_and_returns_uploads_url(tmp_path):
    store = LocalImageStore(tmp_path)

    url = await store.save(png_image("my cat.png"))

    assert url.startswith("/uploads/")
    assert url.endswith("-my%20cat.png")
    (written,) = list(tmp_path.iterdir())
    assert written.name.endswith("-my cat.png")
    assert written.read_bytes() == PNG_BYTES


@pytest.mark.unit
def test_local_store_prefixes_public_base_url(tmp_path):
    store = LocalImageStore(tmp_path, public_base_url="https://blog.example.com/")

    assert store.url_for("1-a.png") == "https://blog.example.com/uploads/1-a.png"


@pytest.mark.unit
async def test_local_store_write_failure(tmp_path):
    store = LocalImageStore(tmp_path / "missing-dir")

    with pytest.raises(StorageError):
        await store.save(png_image())


class _RecordingClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict] = []
        self.error = error

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"ETag": '"abc"'}


@pytest.mark.unit
async def test_s3_store_puts_object_under_prefix():
    client = _RecordingClient()
    store = S3ImageStore(client=client, bucket="blog", public_url="https://cdn.example.com/blog")

    url = await store.save(png_image())

    (call,) = client.calls
    assert call["Bucket"] == "blog"
    assert call["Key"].startswith("uploads/")
    assert call["Key"].endswith("-cat.png")
    assert call["Body"] == PNG_BYTES
    assert call["ContentType"] == "image/png"
    assert url == f"https://cdn.example.com/blog/{call['Key']}"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("kwargs", "expected"),
    [
        ({"endpoint_url": "http://minio:9000/"}, "http://minio:9000/blog/uploads/a.png"),
        ({}, "https://blog.s3.amazonaws.com/uploads/a.png"),
    ],
)
def test_s3_url_fallbacks(kwargs, expected):
    store = S3ImageStore(client=None, bucket="blog", **kwargs)

    assert store.url_for(store.key_for("a.png")) == expected


@pytest.mark.unit
async def test_s3_client_error_becomes_storage_error():
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject")
    store = S3ImageStore(client=_RecordingClient(error), bucket="blog")

    with pytest.raises(StorageError) as exc:
        await store.save(png_image())

    assert "Access Denied" in exc.value.message


@pytest.mark.unit
def test_s3_from_config_builds_client():
    config = ObjectStorageConfig(
        bucket="blog",
        endpoint_url="http://localhost:9000",
        region="us-east-1",
        access_key_id="key",
        secret_access_key="secret",
        prefix="",
    )

    store = S3ImageStore.from_config(config)

    assert store.bucket == "blog"
    assert store.key_for("a.png") == "a.png"
    assert store.client.meta.region_name == "us-east-1"
