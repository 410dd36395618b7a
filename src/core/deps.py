import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings
from core.exceptions import AuthenticationError
from core.jwt import decode_token
from storage.base import PostStorage
from storage.images import ImageStore

logger = logging.getLogger(__name__)

# HTTP Bearer scheme (no auto_error to control 401 shape)
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings injected into the app by create_app."""
    return request.app.state.settings


def get_post_storage(request: Request) -> PostStorage:
    return request.app.state.post_storage


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def _extract_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    """Extract Bearer token from Authorization header or raise AuthenticationError."""
    if credentials is None or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("No token provided")
    token = credentials.credentials
    if not token:
        raise AuthenticationError("No token provided")
    return token


def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str:
    """
    FastAPI dependency guarding mutating routes:
    - no Bearer header: 401
    - bad signature, malformed or expired token: 403
    Returns the username claim.
    """
    token = _extract_bearer_token(credentials)
    assert settings.security is not None
    decoded = decode_token(token, settings.security)
    return str(decoded["username"])


AdminUser = Annotated[str, Depends(require_admin)]
PostStorageDep = Annotated[PostStorage, Depends(get_post_storage)]
ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
