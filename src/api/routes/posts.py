from __future__ import annotations

from fastapi import APIRouter, Request, status

from api.utils.request_context import read_post_payload, validate_payload
from core.deps import AdminUser, ImageStoreDep, PostStorageDep
from schemas.posts import Post, PostCreate, PostCreated, PostMutation, PostUpdate
from schemas.responses import ERROR_RESPONSES
from services import post_service

router = APIRouter(tags=["Posts"])

MUTATION_FIELDS = {
    "title": {"type": "string"},
    "content": {"type": "string"},
    "label": {"type": "string"},
}

MUTATION_BODY = {
    "requestBody": {
        "content": {
            "application/json": {"schema": {"type": "object", "properties": MUTATION_FIELDS}},
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {**MUTATION_FIELDS, "image": {"type": "string", "format": "binary"}},
                }
            },
        }
    }
}


@router.get(
    "/posts",
    response_model=list[Post],
    summary="List posts",
    description="Return every post. The file backend keeps insertion order; the database backend lists newest first.",
    responses={500: ERROR_RESPONSES[500]},
)
async def list_posts(storage: PostStorageDep) -> list[Post]:
    return await post_service.list_posts(storage)


@router.get(
    "/post/{identifier}",
    response_model=Post,
    summary="Get a post",
    description="Look a post up by numeric id, exact slug, or a slug derived from its title.",
    responses={code: ERROR_RESPONSES[code] for code in (404, 500)},
)
async def get_post(identifier: str, storage: PostStorageDep) -> Post:
    return await post_service.get_post(storage, identifier)


@router.post(
    "/posts",
    response_model=PostCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a post from title, content and label, with an optional `image` file when sent as multipart.",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 403, 500)},
    openapi_extra=MUTATION_BODY,
)
async def create_post(
    request: Request,
    _admin: AdminUser,
    storage: PostStorageDep,
    images: ImageStoreDep,
) -> PostCreated:
    fields, image = await read_post_payload(request)
    payload = validate_payload(PostCreate, fields)
    return await post_service.create_post(storage, images, payload, image)


@router.put(
    "/posts/{post_id}",
    response_model=PostMutation,
    summary="Update post",
    description="Merge the supplied fields into the post. A new `image` file replaces the current image.",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 403, 404, 500)},
    openapi_extra=MUTATION_BODY,
)
async def update_post(
    post_id: str,
    request: Request,
    _admin: AdminUser,
    storage: PostStorageDep,
    images: ImageStoreDep,
) -> PostMutation:
    fields, image = await read_post_payload(request)
    payload = validate_payload(PostUpdate, fields)
    return await post_service.update_post(storage, images, post_id, payload, image)


@router.delete(
    "/posts/{post_id}",
    response_model=PostMutation,
    summary="Delete post",
    description="Delete a post by id and return the removed record.",
    responses={code: ERROR_RESPONSES[code] for code in (401, 403, 404, 500)},
)
async def delete_post(post_id: str, _admin: AdminUser, storage: PostStorageDep) -> PostMutation:
    return await post_service.delete_post(storage, post_id)
