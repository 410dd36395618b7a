import json
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from core.exceptions import ValidationError
from storage.images import UploadedImage

IMAGE_FIELD = "image"

PayloadT = TypeVar("PayloadT", bound=BaseModel)


async def read_upload(upload: UploadFile | None) -> UploadedImage | None:
    """Buffer a multipart file; an empty part (no file chosen) counts as absent."""
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    await upload.close()
    return UploadedImage(filename=upload.filename, data=data, content_type=upload.content_type)


async def read_post_payload(request: Request) -> tuple[dict[str, Any], UploadedImage | None]:
    """
    Read body fields from either a JSON body or a multipart/urlencoded form.
    The optional file in the ``image`` form field is returned separately.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        fields: dict[str, Any] = {}
        image: UploadedImage | None = None
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == IMAGE_FIELD and image is None:
                    image = await read_upload(value)
                continue
            fields[key] = value
        return fields, image

    body = await request.body()
    if not body.strip():
        return {}, None
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data, None


def validate_payload(model: type[PayloadT], fields: dict[str, Any]) -> PayloadT:
    """Validate raw body fields into ``model``; failures surface as a 400."""
    try:
        return model.model_validate(fields)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"{location}: {first.get('msg')}" if location else "Invalid request body") from e
