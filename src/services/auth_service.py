import hmac
import logging

from core.config_models import AdminConfig, SecurityConfig
from core.exceptions import AuthenticationError, ValidationError
from core.jwt import encode_access_token
from core.security import verify_password
from schemas.auth import LoginRequest, TokenPayload

logger = logging.getLogger(__name__)


def login(payload: LoginRequest, *, admin: AdminConfig, security: SecurityConfig) -> TokenPayload:
    """
    Check the submitted credentials against the configured admin and issue a token.

    Raises:
        ValidationError: username or password missing
        AuthenticationError: wrong username, wrong password, or no admin configured
    """
    if not payload.username or not payload.password:
        raise ValidationError("Username and password required")

    if not admin.configured:
        logger.warning("Login attempted but ADMIN_USERNAME/ADMIN_PASSWORD_HASH are not configured")
        raise AuthenticationError("Invalid credentials")

    if not hmac.compare_digest(payload.username.encode("utf-8"), (admin.username or "").encode("utf-8")):
        logger.info("Login rejected for unknown username %r", payload.username)
        raise AuthenticationError("Invalid credentials")

    if not verify_password(payload.password, admin.password_hash or ""):
        logger.info("Login rejected for %r: wrong password", payload.username)
        raise AuthenticationError("Invalid credentials")

    token = encode_access_token(payload.username, security)
    logger.info("Issued access token for %r", payload.username)
    return TokenPayload(token=token, expires_in=security.access_token_expire_minutes * 60)
