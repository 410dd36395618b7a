from datetime import UTC, datetime, timedelta
import logging
from typing import Any

import jwt

from core.exceptions import AuthorizationError

from .config_models import SecurityConfig

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(UTC)


def encode_access_token(username: str, security: SecurityConfig, *, issued_at: datetime | None = None) -> str:
    """
    Create an access token with claims: username, sub, iat, exp.
    """
    issued_at = issued_at or _now_utc()
    expires_at = issued_at + timedelta(minutes=security.access_token_expire_minutes)

    payload: dict[str, Any] = {
        "username": username,
        "sub": username,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, security.secret_key, algorithm=security.algorithm)


def decode_token(token: str, security: SecurityConfig) -> dict[str, Any]:
    """
    Decode and validate the token signature and expiry.
    PyJWT exceptions are mapped to HTTP 403.
    """
    try:
        decoded: dict[str, Any] = jwt.decode(
            token,
            security.secret_key,
            algorithms=[security.algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise AuthorizationError("Invalid token") from None
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid token: %s", e)
        raise AuthorizationError("Invalid token") from None

    if not decoded.get("username"):
        raise AuthorizationError("Invalid token")
    return decoded
