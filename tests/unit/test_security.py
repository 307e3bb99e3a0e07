"""
File: tests/unit/test_security.py
Description: 密码哈希、JWT 签发与校验、资源归属校验
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import JWTError, jwt

from socialconnect.core.config import settings
from socialconnect.core.error_code import SystemErrorCode
from socialconnect.core.exceptions import AppException
from socialconnect.core.security import (
    TokenType,
    authorize_owner,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from socialconnect.domains.posts.constants import PostError


def test_password_hash_roundtrip() -> None:
    hashed = get_password_hash("Secret123")

    assert hashed != "Secret123"
    assert verify_password("Secret123", hashed)
    assert not verify_password("secret123", hashed)


def test_access_token_payload() -> None:
    user_id = uuid4()
    payload = decode_token(create_access_token(user_id), TokenType.ACCESS)

    assert payload["sub"] == str(user_id)
    assert payload["type"] == "access"
    assert payload["jti"]
    assert payload["exp"] > payload["iat"]


def test_token_signed_with_wrong_secret_is_invalid() -> None:
    forged = jwt.encode(
        {"sub": str(uuid4()), "type": "access"}, "not-the-secret", algorithm=settings.ALGORITHM
    )

    with pytest.raises(AppException) as exc_info:
        decode_token(forged, TokenType.ACCESS)

    assert exc_info.value.error is SystemErrorCode.TOKEN_INVALID
    assert exc_info.value.http_status == 401


def test_token_expired_by_one_second_is_expired() -> None:
    token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))

    with pytest.raises(AppException) as exc_info:
        decode_token(token, TokenType.ACCESS)

    assert exc_info.value.error is SystemErrorCode.TOKEN_EXPIRED
    assert exc_info.value.http_status == 401


def test_refresh_token_cannot_be_used_as_access_token() -> None:
    refresh = create_refresh_token(uuid4())

    with pytest.raises(AppException) as exc_info:
        decode_token(refresh, TokenType.ACCESS)

    assert exc_info.value.error is SystemErrorCode.TOKEN_INVALID


def test_refresh_token_uses_its_own_secret() -> None:
    refresh = create_refresh_token(uuid4())

    # 用 Access 密钥无法验证 Refresh Token
    with pytest.raises(JWTError):
        jwt.decode(refresh, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert decode_token(refresh, TokenType.REFRESH)["type"] == "refresh"


def test_authorize_owner() -> None:
    owner = uuid4()
    authorize_owner(owner, owner)

    with pytest.raises(AppException) as exc_info:
        authorize_owner(owner, uuid4(), PostError.NOT_OWNER)

    assert exc_info.value.http_status == 403
    assert exc_info.value.code == "posts.not_owner"
