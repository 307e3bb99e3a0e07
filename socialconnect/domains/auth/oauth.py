"""
File: socialconnect/domains/auth/oauth.py
Description: OAuth 登录桥接 (Google / GitHub)

流程 (每次登录尝试):
    initiated -> provider_redirect -> provider_callback
              -> user_matched | user_created -> success
    任意一步失败 -> failure (重定向到前端错误页，不向外抛出异常)

要点:
1. state 随机串存入 Redis (一次性，GETDEL 消费)，防止 CSRF
2. 使用 httpx 调用提供方的 token / userinfo 接口
3. 按 (提供方 + 外部 ID) 或邮箱匹配已有账号；未命中则创建无密码账号
4. 头像 URL 仅在域名命中提供方白名单时保存
5. 成功后只把一次性兑换码放进重定向 URL，Token 通过 POST /auth/exchange 获取
"""

import re
import secrets
import time
from typing import Any
from urllib.parse import urlencode, urlparse

import httpx
from pydantic import BaseModel, ConfigDict
from redis.asyncio import Redis

from socialconnect.core.config import settings
from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.db.models.user import OAuthProvider, User
from socialconnect.domains.auth.constants import (
    OAUTH_CODE_KEY,
    OAUTH_STATE_KEY,
    AuthError,
    OAuthFailureReason,
    OAuthFlowState,
)
from socialconnect.domains.auth.schemas import OAuthProfile
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import (
    BIO_MAX_LENGTH,
    NAME_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
)
from socialconnect.utils.masking import mask_email

# ==============================================================================
# 1. 提供方配置
# ==============================================================================


class ProviderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: OAuthProvider
    authorize_url: str
    token_url: str
    profile_url: str
    emails_url: str | None = None
    scopes: tuple[str, ...]
    photo_hosts: tuple[str, ...]
    extra_authorize_params: dict[str, str] = {}


PROVIDERS: dict[OAuthProvider, ProviderConfig] = {
    OAuthProvider.GOOGLE: ProviderConfig(
        provider=OAuthProvider.GOOGLE,
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        profile_url="https://openidconnect.googleapis.com/v1/userinfo",
        scopes=("openid", "profile", "email"),
        photo_hosts=("googleusercontent.com",),
        extra_authorize_params={"prompt": "select_account"},
    ),
    OAuthProvider.GITHUB: ProviderConfig(
        provider=OAuthProvider.GITHUB,
        authorize_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        profile_url="https://api.github.com/user",
        emails_url="https://api.github.com/user/emails",
        scopes=("user:email",),
        photo_hosts=("githubusercontent.com",),
    ),
}


def client_credentials(provider: OAuthProvider) -> tuple[str, str] | None:
    """返回 (client_id, client_secret)，未配置时返回 None"""
    if provider is OAuthProvider.GOOGLE and settings.google_enabled:
        return settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET  # type: ignore[return-value]
    if provider is OAuthProvider.GITHUB and settings.github_enabled:
        return settings.GITHUB_CLIENT_ID, settings.GITHUB_CLIENT_SECRET  # type: ignore[return-value]
    return None


def callback_url(provider: OAuthProvider) -> str:
    base = settings.OAUTH_CALLBACK_BASE_URL.rstrip("/")
    return f"{base}{settings.API_PREFIX}/auth/{provider.value}/callback"


# ==============================================================================
# 2. 资料归一化工具
# ==============================================================================

_USERNAME_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")


def build_oauth_username(hint: str, now_ms: int | None = None) -> str:
    """
    生成用户名: <清洗后的前缀>_<毫秒时间戳>，整体不超过 30 个字符。
    """
    suffix = f"_{now_ms if now_ms is not None else int(time.time() * 1000)}"
    base = _USERNAME_INVALID_CHARS.sub("", hint) or "user"
    return base[: USERNAME_MAX_LENGTH - len(suffix)] + suffix


def filter_profile_picture(provider: OAuthProvider, url: str | None) -> str | None:
    """头像域名命中提供方白名单才保留"""
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    host = parsed.hostname.lower()
    if any(allowed in host for allowed in PROVIDERS[provider].photo_hosts):
        return url
    return None


def _clip(value: str | None, limit: int) -> str | None:
    return value[:limit] if value else value


def normalize_google_profile(data: dict[str, Any]) -> OAuthProfile:
    email = data.get("email")
    if not email:
        raise OAuthFlowError(OAuthFailureReason.PROVIDER_ERROR, "Google profile has no email")
    return OAuthProfile(
        provider=OAuthProvider.GOOGLE,
        provider_id=str(data["sub"]),
        email=email,
        username_hint=email.split("@", 1)[0],
        first_name=_clip(data.get("given_name"), NAME_MAX_LENGTH) or "Usuario",
        last_name=_clip(data.get("family_name"), NAME_MAX_LENGTH) or "Google",
        picture=data.get("picture"),
    )


def normalize_github_profile(
    data: dict[str, Any], emails: list[dict[str, Any]] | None = None
) -> OAuthProfile:
    login = str(data["login"])
    email = data.get("email")
    if not email and emails:
        verified = [e for e in emails if e.get("verified")]
        primary = next((e for e in verified if e.get("primary")), None)
        chosen = primary or (verified[0] if verified else None)
        email = chosen["email"] if chosen else None

    name_parts = (data.get("name") or "").split()
    return OAuthProfile(
        provider=OAuthProvider.GITHUB,
        provider_id=str(data["id"]),
        email=email or f"{login}@github.local",
        username_hint=login,
        first_name=_clip(name_parts[0] if name_parts else login, NAME_MAX_LENGTH) or login,
        last_name=_clip(name_parts[1] if len(name_parts) > 1 else "GitHub", NAME_MAX_LENGTH)
        or "GitHub",
        picture=data.get("avatar_url"),
        bio=_clip(data.get("bio"), BIO_MAX_LENGTH),
    )


# ==============================================================================
# 3. 流程服务
# ==============================================================================


class OAuthFlowError(Exception):
    """OAuth 流程内部失败，由 complete() 统一转换为前端错误重定向"""

    def __init__(self, reason: OAuthFailureReason, detail: str = ""):
        self.reason = reason
        self.detail = detail or reason.value
        super().__init__(self.detail)


class OAuthService:
    """
    OAuth 登录服务。
    """

    def __init__(self, user_repo: UserRepository, redis: Redis, http: httpx.AsyncClient):
        self.user_repo = user_repo
        self.redis = redis
        self.http = http

    def _log(self, provider: OAuthProvider, state: OAuthFlowState, **extra: Any):
        return logger.bind(provider=provider.value, oauth_state=state.value, **extra)

    # --------------------------------------------------------------------------
    # Start
    # --------------------------------------------------------------------------

    async def authorization_url(self, provider: OAuthProvider) -> str:
        """
        生成提供方授权地址，并登记一次性 state。
        """
        credentials = client_credentials(provider)
        if credentials is None:
            raise AppException(AuthError.PROVIDER_NOT_CONFIGURED)
        self._log(provider, OAuthFlowState.INITIATED).info("OAuth login initiated")

        config = PROVIDERS[provider]
        state = secrets.token_urlsafe(32)
        await self.redis.set(
            OAUTH_STATE_KEY.format(state=state),
            provider.value,
            ex=settings.OAUTH_STATE_EXPIRE_SECONDS,
        )

        params = {
            "client_id": credentials[0],
            "redirect_uri": callback_url(provider),
            "response_type": "code",
            "scope": " ".join(config.scopes),
            "state": state,
            **config.extra_authorize_params,
        }

        self._log(provider, OAuthFlowState.PROVIDER_REDIRECT).info(
            "Redirecting to OAuth provider"
        )
        return f"{config.authorize_url}?{urlencode(params)}"

    # --------------------------------------------------------------------------
    # Callback
    # --------------------------------------------------------------------------

    async def complete(
        self,
        provider: OAuthProvider,
        *,
        code: str | None,
        state: str | None,
        error: str | None = None,
    ) -> str:
        """
        处理提供方回调，返回浏览器应被重定向到的前端地址。
        """
        self._log(provider, OAuthFlowState.PROVIDER_CALLBACK).info("OAuth callback received")

        try:
            if error:
                raise OAuthFlowError(OAuthFailureReason.ACCESS_DENIED, error)

            await self._consume_state(provider, state)

            if not code:
                raise OAuthFlowError(OAuthFailureReason.PROVIDER_ERROR, "missing code")

            profile = await self.fetch_profile(provider, code)
            user = await self.link_or_create(profile)
            exchange_code = await self._issue_exchange_code(user)

        except OAuthFlowError as exc:
            await self.user_repo.session.rollback()
            self._log(provider, OAuthFlowState.FAILURE, reason=exc.reason.value).warning(
                "OAuth login failed: {}", exc.detail
            )
            return self.failure_url(exc.reason)

        except httpx.HTTPError as exc:
            await self.user_repo.session.rollback()
            self._log(provider, OAuthFlowState.FAILURE).opt(exception=exc).warning(
                "OAuth provider request failed"
            )
            return self.failure_url(OAuthFailureReason.PROVIDER_ERROR)

        except Exception as exc:
            await self.user_repo.session.rollback()
            self._log(provider, OAuthFlowState.FAILURE).opt(exception=exc).error(
                "OAuth login crashed"
            )
            return self.failure_url(OAuthFailureReason.SERVER_ERROR)

        self._log(provider, OAuthFlowState.SUCCESS, user_id=str(user.id)).info(
            "OAuth login succeeded"
        )
        return f"{settings.FRONTEND_URL.rstrip('/')}/auth/success?{urlencode({'code': exchange_code})}"

    @staticmethod
    def failure_url(reason: OAuthFailureReason) -> str:
        return f"{settings.FRONTEND_URL.rstrip('/')}/auth/error?{urlencode({'error': reason.value})}"

    async def _consume_state(self, provider: OAuthProvider, state: str | None) -> None:
        if not state:
            raise OAuthFlowError(OAuthFailureReason.INVALID_STATE, "missing state")
        stored = await self.redis.getdel(OAUTH_STATE_KEY.format(state=state))
        if stored != provider.value:
            raise OAuthFlowError(OAuthFailureReason.INVALID_STATE, "unknown state")

    async def _issue_exchange_code(self, user: User) -> str:
        exchange_code = secrets.token_urlsafe(32)
        await self.redis.set(
            OAUTH_CODE_KEY.format(code=exchange_code),
            str(user.id),
            ex=settings.OAUTH_CODE_EXPIRE_SECONDS,
        )
        return exchange_code

    # --------------------------------------------------------------------------
    # Provider HTTP
    # --------------------------------------------------------------------------

    async def fetch_profile(self, provider: OAuthProvider, code: str) -> OAuthProfile:
        """用授权码换取提供方 Token，再拉取用户资料"""
        credentials = client_credentials(provider)
        if credentials is None:
            raise OAuthFlowError(OAuthFailureReason.PROVIDER_ERROR, "provider disabled")

        config = PROVIDERS[provider]
        token_resp = await self.http.post(
            config.token_url,
            data={
                "code": code,
                "client_id": credentials[0],
                "client_secret": credentials[1],
                "redirect_uri": callback_url(provider),
                "grant_type": "authorization_code",
            },
            headers={"Accept": "application/json"},
        )
        token_resp.raise_for_status()
        provider_token = token_resp.json().get("access_token")
        if not provider_token:
            raise OAuthFlowError(OAuthFailureReason.PROVIDER_ERROR, "no access token")

        headers = {
            "Authorization": f"Bearer {provider_token}",
            "Accept": "application/json",
        }
        profile_resp = await self.http.get(config.profile_url, headers=headers)
        profile_resp.raise_for_status()
        data = profile_resp.json()

        if provider is OAuthProvider.GOOGLE:
            return normalize_google_profile(data)

        emails = None
        if not data.get("email") and config.emails_url:
            emails_resp = await self.http.get(config.emails_url, headers=headers)
            if emails_resp.is_success:
                emails = emails_resp.json()
        return normalize_github_profile(data, emails)

    # --------------------------------------------------------------------------
    # Account Linking
    # --------------------------------------------------------------------------

    async def link_or_create(self, profile: OAuthProfile) -> User:
        """
        匹配已有账号 (回填 OAuth 字段) 或创建新账号。
        """
        user = await self.user_repo.find_oauth_match(
            profile.provider, profile.provider_id, profile.email
        )

        if user is not None:
            if not user.is_active:
                raise OAuthFlowError(OAuthFailureReason.ACCOUNT_INACTIVE)
            if not user.oauth_id:
                user.oauth_provider = profile.provider
                user.oauth_id = profile.provider_id
            user.touch_login()
            await self.user_repo.session.commit()
            self._log(profile.provider, OAuthFlowState.USER_MATCHED, user_id=str(user.id)).info(
                "OAuth identity matched existing user"
            )
            return user

        user = User(
            username=build_oauth_username(profile.username_hint),
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            profile_picture=filter_profile_picture(profile.provider, profile.picture),
            bio=profile.bio,
            oauth_provider=profile.provider,
            oauth_id=profile.provider_id,
            is_active=True,
        )
        user.touch_login()
        self.user_repo.session.add(user)
        await self.user_repo.session.commit()
        await self.user_repo.session.refresh(user)

        self._log(
            profile.provider,
            OAuthFlowState.USER_CREATED,
            user_id=str(user.id),
            email=mask_email(user.email),
        ).info("OAuth user created")
        return user
