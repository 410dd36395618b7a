from datetime import UTC, datetime, timedelta

import jwt as pyjwt
import pytest

from core.config_models import SecurityConfig
from core.exceptions import AuthorizationError
from core.jwt import decode_token, encode_access_token


@pytest.mark.unit
def test_encode_and_decode_access_token_success(security_config: SecurityConfig):
    token = encode_access_token("admin", security_config)
    decoded = decode_token(token, security_config)
    assert decoded["username"] == "admin"
    assert decoded["sub"] == "admin"
    assert decoded["exp"] - decoded["iat"] == 60 * 60


@pytest.mark.unit
def test_decode_token_rejects_other_secret(security_config: SecurityConfig):
    forged = pyjwt.encode({"username": "admin", "iat": 0, "exp": 4102444800}, "different-secret", algorithm="HS256")
    with pytest.raises(AuthorizationError) as exc_info:
        decode_token(forged, security_config)
    assert exc_info.value.message == "Invalid token"


@pytest.mark.unit
def test_decode_token_rejects_expired_token(security_config: SecurityConfig):
    issued_at = datetime.now(UTC) - timedelta(minutes=security_config.access_token_expire_minutes + 1)
    token = encode_access_token("admin", security_config, issued_at=issued_at)
    with pytest.raises(AuthorizationError):
        decode_token(token, security_config)


@pytest.mark.unit
def test_token_valid_just_inside_window(security_config: SecurityConfig):
    issued_at = datetime.now(UTC) - timedelta(minutes=security_config.access_token_expire_minutes - 1)
    token = encode_access_token("admin", security_config, issued_at=issued_at)
    assert decode_token(token, security_config)["username"] == "admin"


@pytest.mark.unit
def test_decode_token_requires_username_claim(security_config: SecurityConfig):
    now = int(datetime.now(UTC).timestamp())
    token = pyjwt.encode({"iat": now, "exp": now + 60}, security_config.secret_key, algorithm="HS256")
    with pytest.raises(AuthorizationError):
        decode_token(token, security_config)


@pytest.mark.unit
def test_decode_token_rejects_garbage(security_config: SecurityConfig):
    with pytest.raises(AuthorizationError):
        decode_token("not-a-jwt", security_config)


@pytest.mark.unit
def test_security_config_rejects_asymmetric_algorithm():
    with pytest.raises(ValueError):
        SecurityConfig(secret_key="x" * 40, algorithm="RS256")
