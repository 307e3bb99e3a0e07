"""
File: socialconnect/domains/auth/service.py
Description: 认证领域服务 (Service)

本模块封装 Token 生命周期：
1. issue_session: 为用户签发 Access + Refresh Token (注册、登录、OAuth 共用)
2. 刷新令牌: 校验 Refresh Token (类型、签名、有效期、黑名单、用户状态)，签发新 Access Token
3. 用户登出: Refresh Token 的 jti 写入 Redis 黑名单，保留到其自然过期
4. OAuth 兑换: 消费一次性兑换码，换取用户与双 Token
"""

from datetime import UTC, datetime

from redis.asyncio import Redis

from socialconnect.core.config import settings
from socialconnect.core.error_code import SystemErrorCode
from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.core.security import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    subject_to_uuid,
)
from socialconnect.db.models.user import User
from socialconnect.domains.auth.constants import (
    OAUTH_CODE_KEY,
    REVOKED_TOKEN_KEY,
    AuthError,
)
from socialconnect.domains.auth.schemas import AccessTokenData, AuthSession
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import UserRead


def issue_session(user: User) -> AuthSession:
    """为用户签发双 Token"""
    return AuthSession(
        user=UserRead.model_validate(user),
        access_token=create_access_token(subject=user.id),
        refresh_token=create_refresh_token(subject=user.id),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


class AuthService:
    """
    认证服务类。
    """

    def __init__(self, user_repo: UserRepository, redis: Redis):
        self.user_repo = user_repo
        self.redis = redis

    async def refresh_access_token(self, refresh_token: str) -> AccessTokenData:
        """
        使用 Refresh Token 换取新的 Access Token。
        任何校验失败均返回 401。
        """
        payload = decode_token(refresh_token, TokenType.REFRESH)

        jti = payload.get("jti")
        if jti and await self.redis.exists(REVOKED_TOKEN_KEY.format(jti=jti)):
            raise AppException(AuthError.REFRESH_TOKEN_REVOKED)

        user = await self.user_repo.get_active(subject_to_uuid(payload))
        if user is None:
            raise AppException(
                SystemErrorCode.UNAUTHORIZED, message="User not found or inactive"
            )

        logger.bind(user_id=str(user.id)).info("Access token refreshed")

        return AccessTokenData(
            access_token=create_access_token(subject=user.id),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    async def logout(self, refresh_token: str) -> None:
        """
        撤销 Refresh Token。
        已过期的 Token 无需撤销，直接视为登出成功。
        """
        try:
            payload = decode_token(refresh_token, TokenType.REFRESH)
        except AppException as exc:
            if exc.error is SystemErrorCode.TOKEN_EXPIRED:
                return
            raise

        jti = payload.get("jti")
        if not jti:
            raise AppException(SystemErrorCode.TOKEN_INVALID)

        remaining = int(payload["exp"] - datetime.now(UTC).timestamp())
        await self.redis.set(
            REVOKED_TOKEN_KEY.format(jti=jti), payload["sub"], ex=max(remaining, 1)
        )

        logger.bind(user_id=payload["sub"]).info("Refresh token revoked")

    async def exchange_code(self, code: str) -> AuthSession:
        """
        消费 OAuth 一次性兑换码 (GETDEL，只能使用一次)。
        """
        user_id = await self.redis.getdel(OAUTH_CODE_KEY.format(code=code))
        if not user_id:
            raise AppException(AuthError.OAUTH_CODE_INVALID)

        user = await self.user_repo.get(subject_to_uuid({"sub": user_id}))
        if user is None or not user.is_active:
            raise AppException(AuthError.ACCOUNT_INACTIVE)

        logger.bind(user_id=user_id).info("OAuth exchange code redeemed")
        return issue_session(user)
