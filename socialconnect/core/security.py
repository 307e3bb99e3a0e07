"""
File: socialconnect/core/security.py
Description: 安全工具模块 (bcrypt + JWT)

本模块负责：
1. 密码加密 / 验证: bcrypt，cost factor 由 PASSWORD_HASH_ROUNDS 控制
2. JWT 签发: Access Token (短效) 与 Refresh Token (长效，独立密钥)
3. JWT 校验: 区分 "过期" 与 "无效" 两类失败
4. 资源归属校验: authorize_owner
5. 异步封装: CPU 密集型哈希操作放入线程池执行
"""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
from starlette.concurrency import run_in_threadpool
from uuid6 import uuid7

from socialconnect.core.config import settings
from socialconnect.core.error_code import BaseErrorCode, SystemErrorCode
from socialconnect.core.exceptions import AppException

password_hash = PasswordHash((BcryptHasher(rounds=settings.PASSWORD_HASH_ROUNDS),))


class TokenType(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


# ------------------------------------------------------------------------------
# 1. 密码处理 (Password Hashing)
# ------------------------------------------------------------------------------


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    验证明文密码与哈希值是否匹配。

    Args:
        plain_password: 用户输入的明文密码
        hashed_password: 数据库存储的 bcrypt 哈希值

    Returns:
        bool: 匹配返回 True，否则 False
    """
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """生成 bcrypt 密码哈希值。"""
    return password_hash.hash(password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """异步验证密码（在线程池中执行，避免阻塞事件循环）。"""
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


async def get_password_hash_async(password: str) -> str:
    """异步生成密码哈希（在线程池中执行，避免阻塞事件循环）。"""
    return await run_in_threadpool(get_password_hash, password)


# ------------------------------------------------------------------------------
# 2. JWT 处理 (JSON Web Token)
# ------------------------------------------------------------------------------


def _signing_key(token_type: TokenType) -> str:
    if token_type is TokenType.REFRESH:
        return settings.refresh_secret_key
    return settings.SECRET_KEY  # type: ignore[return-value]


def create_token(
    subject: str | Any,
    token_type: TokenType,
    expires_delta: timedelta,
) -> str:
    """
    签发 JWT。

    Payload:
        sub: 用户 ID
        exp / iat: 过期时间 / 签发时间
        jti: 唯一标识 (用于登出黑名单)
        type: access / refresh
    """
    now = datetime.now(UTC)
    to_encode = {
        "sub": str(subject),
        "exp": now + expires_delta,
        "iat": now,
        "jti": uuid7().hex,
        "type": token_type.value,
    }
    return jwt.encode(to_encode, _signing_key(token_type), algorithm=settings.ALGORITHM)


def create_access_token(
    subject: str | Any, expires_delta: timedelta | None = None
) -> str:
    """生成 Access Token，默认有效期 ACCESS_TOKEN_EXPIRE_MINUTES。"""
    return create_token(
        subject,
        TokenType.ACCESS,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    subject: str | Any, expires_delta: timedelta | None = None
) -> str:
    """生成 Refresh Token，默认有效期 REFRESH_TOKEN_EXPIRE_DAYS。"""
    return create_token(
        subject,
        TokenType.REFRESH,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str, token_type: TokenType) -> dict[str, Any]:
    """
    校验签名、有效期与 Token 类型，返回 payload。

    Raises:
        AppException(TOKEN_EXPIRED): 签名正确但已过期
        AppException(TOKEN_INVALID): 签名错误、格式错误、类型不符或缺少 sub
    """
    try:
        payload = jwt.decode(
            token,
            _signing_key(token_type),
            algorithms=[settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        raise AppException(SystemErrorCode.TOKEN_EXPIRED) from None
    except JWTError:
        # from None 截断异常链，避免暴露底层 jose 异常细节
        raise AppException(SystemErrorCode.TOKEN_INVALID) from None

    if payload.get("type") != token_type.value or not payload.get("sub"):
        raise AppException(SystemErrorCode.TOKEN_INVALID)

    return payload


def subject_to_uuid(payload: dict[str, Any]) -> UUID:
    """将 payload.sub 解析为 UUID，格式错误视为无效 Token"""
    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError):
        raise AppException(SystemErrorCode.TOKEN_INVALID) from None


# ------------------------------------------------------------------------------
# 3. 资源归属校验 (Authorization)
# ------------------------------------------------------------------------------


def authorize_owner(
    owner_id: UUID,
    user_id: UUID,
    error: BaseErrorCode = SystemErrorCode.FORBIDDEN,
) -> None:
    """资源所属用户与当前用户不一致时抛出 403 (可传入领域错误码定制文案)。"""
    if owner_id != user_id:
        raise AppException(error)
