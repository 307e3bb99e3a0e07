"""
File: socialconnect/domains/auth/schemas.py
Description: 认证领域 Pydantic 模型 (Schema)

1. AuthSession: 注册 / 登录 / OAuth 兑换成功后返回的用户 + 双 Token
2. AccessTokenData: 刷新后返回的新 Access Token
3. RefreshRequest / ExchangeRequest: 请求参数
4. ProviderInfo / AuthStatus: 提供方列表与登录状态
5. OAuthProfile: 第三方资料归一化结果 (内部使用)
"""

from pydantic import Field

from socialconnect.core.schemas import CamelModel
from socialconnect.db.models.user import OAuthProvider
from socialconnect.domains.users.schemas import UserRead


class AuthSession(CamelModel):
    """
    用户 + 双 Token 响应结构。
    """

    user: UserRead
    access_token: str = Field(..., description="访问令牌 (JWT, 短效)")
    refresh_token: str = Field(..., description="刷新令牌 (JWT, 长效)")
    token_type: str = Field(default="Bearer", description="令牌类型")
    expires_in: int = Field(..., description="Access Token 有效期 (秒)")


class AccessTokenData(CamelModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class RefreshRequest(CamelModel):
    """
    刷新 / 登出请求参数。
    """

    refresh_token: str = Field(..., min_length=1, description="有效的刷新令牌")


class ExchangeRequest(CamelModel):
    """OAuth 一次性兑换码"""

    code: str = Field(..., min_length=1, max_length=128)


class ProviderInfo(CamelModel):
    name: OAuthProvider
    enabled: bool
    login_url: str


class AuthStatus(CamelModel):
    authenticated: bool = True
    user: UserRead


class OAuthProfile(CamelModel):
    """
    第三方用户资料 (归一化后)。
    username_hint: Google 取邮箱前缀，GitHub 取 login
    """

    provider: OAuthProvider
    provider_id: str
    email: str | None = None
    username_hint: str
    first_name: str
    last_name: str
    picture: str | None = None
    bio: str | None = None
