from __future__ import annotations

from fastapi import APIRouter, Request

from api.utils.request_context import read_post_payload, validate_payload
from core.deps import SettingsDep
from schemas.auth import LoginRequest, TokenPayload
from schemas.responses import ERROR_RESPONSES
from services import auth_service

router = APIRouter(tags=["Auth"])

LOGIN_FIELDS = {
    "username": {"type": "string"},
    "password": {"type": "string", "format": "password"},
}

LOGIN_BODY = {
    "requestBody": {
        "content": {
            "application/json": {"schema": {"type": "object", "properties": LOGIN_FIELDS}},
            "application/x-www-form-urlencoded": {"schema": {"type": "object", "properties": LOGIN_FIELDS}},
        }
    }
}


@router.post(
    "/login",
    response_model=TokenPayload,
    summary="Login as the admin",
    description="Check the admin credentials (JSON or form body) and return a bearer token valid for one hour.",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401)},
    openapi_extra=LOGIN_BODY,
)
async def login(request: Request, settings: SettingsDep) -> TokenPayload:
    fields, _ = await read_post_payload(request)
    payload = validate_payload(LoginRequest, fields)
    assert settings.admin is not None and settings.security is not None
    return auth_service.login(payload, admin=settings.admin, security=settings.security)
