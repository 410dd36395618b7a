from datetime import UTC, datetime
import json

import pytest

from core.exceptions import NotFoundError, ValidationError
from schemas.posts import PostCreate, PostUpdate
from services import post_service
from tests.factories.posts import png_image, post_payload

pytestmark = pytest.mark.anyio


async def _create(storage, images, **overrides):
    return await post_service.create_post(storage, images, PostCreate(**post_payload(**overrides)))


@pytest.mark.unit
def test_display_date_is_month_and_day():
    assert post_service.display_date(datetime(2026, 10, 8, tzinfo=UTC)) == "Oct 8"


@pytest.mark.unit
@pytest.mark.parametrize(("raw", "expected"), [("42", 42), (" 7 ", 7), (5, 5), ("hello-world", None), ("", None)])
def test_parse_post_id(raw, expected):
    assert post_service.parse_post_id(raw) == expected


@pytest.mark.unit
@pytest.mark.parametrize("missing", ["title", "content", "label"])
async def test_create_requires_all_fields(file_storage, image_store, missing):
    await file_storage.startup()

    with pytest.raises(ValidationError) as exc:
        await _create(file_storage, image_store, **{missing: None})

    assert exc.value.message == "Title, content, and label required"
    assert await file_storage.list_posts() == []


@pytest.mark.unit
async def test_create_rejects_blank_title(file_storage, image_store):
    await file_storage.startup()

    with pytest.raises(ValidationError):
        await _create(file_storage, image_store, title="   ")


@pytest.mark.unit
async def test_create_returns_id_and_slug(file_storage, image_store):
    await file_storage.startup()

    created = await _create(file_storage, image_store, title="Hello, World!")

    assert created.success is True
    assert created.slug == "hello-world"
    stored = await file_storage.get_by_id(created.id)
    assert stored is not None
    assert stored.image is None
    assert stored.date == post_service.display_date(stored.created_at)
    assert image_store.saved == []


@pytest.mark.unit
async def test_create_with_image_stores_url(file_storage, image_store):
    await file_storage.startup()

    created = await post_service.create_post(file_storage, image_store, PostCreate(**post_payload()), png_image("cover.png"))

    stored = await file_storage.get_by_id(created.id)
    assert stored.image == "https://images.test/1-cover.png"
    assert [saved.filename for saved in image_store.saved] == ["cover.png"]


@pytest.mark.unit
async def test_file_backend_allows_duplicate_slugs(file_storage, image_store):
    await file_storage.startup()

    first = await _create(file_storage, image_store)
    second = await _create(file_storage, image_store)

    assert first.slug == second.slug == "hello-world"
    assert first.id != second.id


@pytest.mark.unit
async def test_get_post_by_id_and_slug(file_storage, image_store):
    await file_storage.startup()
    created = await _create(file_storage, image_store)

    by_id = await post_service.get_post(file_storage, str(created.id))
    by_slug = await post_service.get_post(file_storage, "hello-world")

    assert by_id == by_slug
    assert by_id.id == created.id


@pytest.mark.unit
async def test_get_post_by_slug_derived_from_title(posts_file, file_storage):
    record = {
        "id": 1,
        "title": "Legacy Title",
        "content": "c",
        "label": "l",
        "slug": "hand-edited",
        "createdAt": "2026-01-02T03:04:05Z",
    }
    posts_file.write_text(json.dumps([record]))

    post = await post_service.get_post(file_storage, "legacy-title")

    assert post.id == 1
    assert post.slug == "hand-edited"


@pytest.mark.unit
async def test_get_post_unknown_identifier(file_storage):
    await file_storage.startup()

    with pytest.raises(NotFoundError) as exc:
        await post_service.get_post(file_storage, "nope")

    assert exc.value.message == "Post not found"


@pytest.mark.unit
async def test_update_title_recomputes_slug(file_storage, image_store):
    await file_storage.startup()
    created = await _create(file_storage, image_store)

    result = await post_service.update_post(file_storage, image_store, str(created.id), PostUpdate(title="Brand New Title"))

    assert result.success is True
    assert result.post.title == "Brand New Title"
    assert result.post.slug == "brand-new-title"
    assert result.post.content == "First post body with a few words."
    assert result.post.updated_at is not None


@pytest.mark.unit
async def test_update_without_title_keeps_slug(file_storage, image_store):
    await file_storage.startup()
    created = await _create(file_storage, image_store)

    result = await post_service.update_post(file_storage, image_store, created.id, PostUpdate(label="updates"))

    assert result.post.label == "updates"
    assert result.post.slug == "hello-world"


@pytest.mark.unit
async def test_update_replaces_image(file_storage, image_store):
    await file_storage.startup()
    created = await _create(file_storage, image_store)

    result = await post_service.update_post(file_storage, image_store, created.id, PostUpdate(), png_image("new.png"))

    assert result.post.image == "https://images.test/1-new.png"


@pytest.mark.unit
async def test_update_rejects_blank_field(file_storage, image_store):
    await file_storage.startup()
    created = await _create(file_storage, image_store)

    with pytest.raises(ValidationError) as exc:
        await post_service.update_post(file_storage, image_store, created.id, PostUpdate(content="  "))

    assert exc.value.message == "Content cannot be empty"
    assert (await file_storage.get_by_id(created.id)).content == "First post body with a few words."


@pytest.mark.unit
@pytest.mark.parametrize("post_id", ["123", "not-a-number"])
async def test_update_unknown_post(file_storage, image_store, post_id):
    await file_storage.startup()

    with pytest.raises(NotFoundError):
        await post_service.update_post(file_storage, image_store, post_id, PostUpdate(title="x"))


@pytest.mark.unit
async def test_delete_returns_removed_post(file_storage, image_store):
    await file_storage.startup()
    created = await _create(file_storage, image_store)

    result = await post_service.delete_post(file_storage, str(created.id))

    assert result.post.id == created.id
    assert await file_storage.list_posts() == []
    with pytest.raises(NotFoundError):
        await post_service.delete_post(file_storage, str(created.id))


@pytest.mark.unit
async def test_delete_non_numeric_id(file_storage):
    await file_storage.startup()

    with pytest.raises(NotFoundError):
        await post_service.delete_post(file_storage, "hello-world")
