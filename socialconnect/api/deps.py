"""
File: socialconnect/api/deps.py
Description: 全局依赖注入定义 (DB Session + Authentication)

本模块负责：
1. 数据库会话管理 (get_db / DBSession)
2. JWT 鉴权与用户身份提取 (get_current_user / CurrentUser)
3. 可选鉴权 (get_optional_user / OptionalUser)：未携带 Token 时为 None
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.error_code import SystemErrorCode
from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.core.security import TokenType, decode_token, subject_to_uuid
from socialconnect.db.models.user import User
from socialconnect.db.session import AsyncSessionLocal

# ------------------------------------------------------------------------------
# 1. Database Dependencies
# ------------------------------------------------------------------------------


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取异步数据库会话依赖。
    async with 确保请求结束时关闭 session (未提交的事务自动回滚)。
    """
    async with AsyncSessionLocal() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


# ------------------------------------------------------------------------------
# 2. Authentication Dependencies (JWT 鉴权)
# ------------------------------------------------------------------------------


def _parse_bearer(authorization: str) -> str:
    scheme, _, param = authorization.partition(" ")
    if scheme.lower() != "bearer" or not param.strip():
        raise AppException(
            SystemErrorCode.UNAUTHORIZED, message="Invalid authentication scheme"
        )
    return param.strip()


async def get_token_from_header(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    从 Authorization Header 提取 Bearer Token。
    格式要求: Authorization: Bearer <token>
    """
    if not authorization:
        raise AppException(
            SystemErrorCode.UNAUTHORIZED, message="Access token is required"
        )
    return _parse_bearer(authorization)


async def resolve_user_from_token(token: str, session: AsyncSession) -> User:
    """
    校验 Access Token 并加载对应用户。

    1. 签名 / 有效期 / 类型校验 (过期与无效分别返回不同业务码)
    2. 查库确认用户存在且未被停用
    """
    payload = decode_token(token, TokenType.ACCESS)
    user = await session.get(User, subject_to_uuid(payload))

    if user is None or not user.is_active:
        logger.bind(sub=payload.get("sub")).warning("Token subject is missing or inactive")
        raise AppException(
            SystemErrorCode.UNAUTHORIZED, message="User not found or inactive"
        )

    return user


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_header)],
    session: DBSession,
) -> User:
    """解析 JWT 并获取当前登录用户。"""
    return await resolve_user_from_token(token, session)


async def get_optional_user(
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """
    可选鉴权：未携带 Authorization 时返回 None；
    携带了但无效时仍然拒绝，避免静默降级为匿名。
    """
    if not authorization:
        return None
    return await resolve_user_from_token(_parse_bearer(authorization), session)


# 已登录用户依赖
# 用法: async def endpoint(user: CurrentUser): ...
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
