"""
File: socialconnect/domains/auth/router.py
Description: 认证领域 HTTP 路由层

本模块定义认证相关的 API 端点：
1. GET  /auth: 登录方式列表 (本地 + 已配置的 OAuth 提供方)
2. GET  /auth/{provider} + /auth/{provider}/callback: OAuth 跳转 (307) 与回调 (302)
3. POST /auth/exchange: 一次性兑换码换取双 Token
4. GET  /auth/status: 当前登录状态
5. POST /auth/refresh: 刷新 Access Token
6. POST /auth/logout: 撤销 Refresh Token

注意：OAuth 回调始终以重定向结束，错误以 ?error= 形式带回前端。
"""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from socialconnect.api.deps import OptionalUser
from socialconnect.core.config import settings
from socialconnect.core.error_code import SystemErrorCode
from socialconnect.core.exceptions import AppException
from socialconnect.core.redis import RedisDep
from socialconnect.core.response import ResponseModel
from socialconnect.db.models.user import OAuthProvider
from socialconnect.domains.auth.constants import AuthMsg
from socialconnect.domains.auth.oauth import OAuthService, client_credentials
from socialconnect.domains.auth.schemas import (
    AccessTokenData,
    AuthSession,
    AuthStatus,
    ExchangeRequest,
    ProviderInfo,
    RefreshRequest,
)
from socialconnect.domains.auth.service import AuthService
from socialconnect.domains.users.dependencies import UserRepoDep
from socialconnect.domains.users.schemas import UserRead

router = APIRouter()

# ------------------------------------------------------------------------------
# 依赖注入构造器 (Dependencies)
# ------------------------------------------------------------------------------


async def get_auth_service(user_repo: UserRepoDep, redis: RedisDep) -> AuthService:
    """
    构造 AuthService 实例。
    """
    return AuthService(user_repo=user_repo, redis=redis)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_oauth_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    每个 OAuth 请求使用独立的 httpx 客户端，请求结束后关闭。
    测试中可替换为 MockTransport 客户端。
    """
    async with httpx.AsyncClient(timeout=settings.OAUTH_HTTP_TIMEOUT) as client:
        yield client


async def get_oauth_service(
    user_repo: UserRepoDep,
    redis: RedisDep,
    http: Annotated[httpx.AsyncClient, Depends(get_oauth_http_client)],
) -> OAuthService:
    return OAuthService(user_repo=user_repo, redis=redis, http=http)


OAuthServiceDep = Annotated[OAuthService, Depends(get_oauth_service)]


# ------------------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------------------


@router.get(
    "",
    response_model=ResponseModel[list[ProviderInfo]],
    summary="可用登录方式",
)
async def list_providers(request: Request) -> ResponseModel[list[ProviderInfo]]:
    providers = [
        ProviderInfo(
            name=provider,
            enabled=client_credentials(provider) is not None,
            login_url=f"{settings.API_PREFIX}/auth/{provider.value}",
        )
        for provider in OAuthProvider
    ]
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=providers, message=AuthMsg.PROVIDERS, request_id=req_id)


@router.get(
    "/status",
    response_model=ResponseModel[AuthStatus],
    summary="当前登录状态",
    description="携带有效 Access Token 时返回当前用户，否则返回 401。",
)
async def auth_status(request: Request, current_user: OptionalUser) -> ResponseModel[AuthStatus]:
    if current_user is None:
        raise AppException(SystemErrorCode.UNAUTHORIZED)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=AuthStatus(user=UserRead.model_validate(current_user)),
        message=AuthMsg.STATUS,
        request_id=req_id,
    )


@router.post(
    "/refresh",
    response_model=ResponseModel[AccessTokenData],
    summary="刷新 Access Token",
    description="使用未撤销、未过期的 Refresh Token 换取新的 Access Token。",
)
async def refresh_token(
    request: Request,
    refresh_in: RefreshRequest,
    service: AuthServiceDep,
) -> ResponseModel[AccessTokenData]:
    token_data = await service.refresh_access_token(refresh_in.refresh_token)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=token_data, message=AuthMsg.REFRESH_SUCCESS, request_id=req_id
    )


@router.post(
    "/logout",
    response_model=ResponseModel[None],
    summary="用户登出",
    description="撤销 Refresh Token，之后不能再用于刷新。",
)
async def logout(
    request: Request,
    logout_in: RefreshRequest,
    service: AuthServiceDep,
) -> ResponseModel[None]:
    await service.logout(logout_in.refresh_token)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(message=AuthMsg.LOGOUT_SUCCESS, request_id=req_id)


@router.post(
    "/exchange",
    response_model=ResponseModel[AuthSession],
    summary="OAuth 兑换码换取 Token",
    description="前端从 /auth/success?code=... 取得一次性兑换码，60 秒内有效，只能使用一次。",
)
async def exchange_code(
    request: Request,
    exchange_in: ExchangeRequest,
    service: AuthServiceDep,
) -> ResponseModel[AuthSession]:
    auth_session = await service.exchange_code(exchange_in.code)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=auth_session, message=AuthMsg.EXCHANGE_SUCCESS, request_id=req_id
    )


@router.get(
    "/{provider}",
    response_class=RedirectResponse,
    summary="发起 OAuth 登录",
)
async def oauth_start(provider: OAuthProvider, service: OAuthServiceDep) -> RedirectResponse:
    url = await service.authorization_url(provider)
    return RedirectResponse(url)


@router.get(
    "/{provider}/callback",
    response_class=RedirectResponse,
    status_code=302,
    summary="OAuth 回调",
)
async def oauth_callback(
    provider: OAuthProvider,
    service: OAuthServiceDep,
    code: Annotated[str | None, Query()] = None,
    state: Annotated[str | None, Query()] = None,
    error: Annotated[str | None, Query()] = None,
) -> RedirectResponse:
    url = await service.complete(provider, code=code, state=state, error=error)
    return RedirectResponse(url, status_code=302)
