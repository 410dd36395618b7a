from __future__ import annotations

from fastapi import APIRouter, File, UploadFile

from api.utils.request_context import read_upload
from core.deps import AdminUser, ImageStoreDep
from core.exceptions import ValidationError
from schemas.responses import ERROR_RESPONSES, UploadResponse

router = APIRouter(tags=["Uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload an image",
    description="Store a single image from the multipart field `image` and return its public URL.",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401, 403, 500)},
)
async def upload_image(
    _admin: AdminUser,
    images: ImageStoreDep,
    image: UploadFile | None = File(None),
) -> UploadResponse:
    uploaded = await read_upload(image)
    if uploaded is None:
        raise ValidationError("No file uploaded")
    return UploadResponse(url=await images.save(uploaded))
