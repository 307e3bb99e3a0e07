"""
File: socialconnect/domains/auth/constants.py
Description: 认证领域常量定义 (错误码 + 成功提示 + Redis Key + OAuth 状态)
Namespace: auth.*
"""

from enum import StrEnum

from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from socialconnect.core.error_code import BaseErrorCode

# ==============================================================================
# 1. 错误码定义 (Error Codes)
# ==============================================================================


class AuthError(BaseErrorCode):
    """
    认证领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    REFRESH_TOKEN_REVOKED = (
        HTTP_401_UNAUTHORIZED,
        "auth.refresh_token_revoked",
        "Refresh token has been revoked",
    )
    OAUTH_CODE_INVALID = (
        HTTP_401_UNAUTHORIZED,
        "auth.oauth_code_invalid",
        "Exchange code is invalid or has expired",
    )
    PROVIDER_NOT_CONFIGURED = (
        HTTP_503_SERVICE_UNAVAILABLE,
        "auth.provider_not_configured",
        "OAuth provider is not configured",
    )
    ACCOUNT_INACTIVE = (
        HTTP_401_UNAUTHORIZED,
        "auth.account_inactive",
        "User account is inactive",
    )


# ==============================================================================
# 2. 成功提示语 (Success Messages)
# ==============================================================================


class AuthMsg:
    """
    认证领域成功提示文案
    """

    PROVIDERS = "Authentication providers"
    STATUS = "User is authenticated"
    LOGOUT_SUCCESS = "Logged out successfully"
    REFRESH_SUCCESS = "Access token refreshed"
    EXCHANGE_SUCCESS = "OAuth login successful"


# ==============================================================================
# 3. Redis Key 模板
# ==============================================================================

REVOKED_TOKEN_KEY = "revoked_token:{jti}"
OAUTH_STATE_KEY = "oauth_state:{state}"
OAUTH_CODE_KEY = "oauth_code:{code}"


# ==============================================================================
# 4. OAuth 流程状态 (仅用于日志)
# ==============================================================================


class OAuthFlowState(StrEnum):
    INITIATED = "initiated"
    PROVIDER_REDIRECT = "provider_redirect"
    PROVIDER_CALLBACK = "provider_callback"
    USER_MATCHED = "user_matched"
    USER_CREATED = "user_created"
    SUCCESS = "success"
    FAILURE = "failure"


class OAuthFailureReason(StrEnum):
    """重定向到前端错误页时携带的 error 参数"""

    ACCESS_DENIED = "access_denied"
    INVALID_STATE = "invalid_state"
    PROVIDER_ERROR = "provider_error"
    ACCOUNT_INACTIVE = "account_inactive"
    SERVER_ERROR = "server_error"
