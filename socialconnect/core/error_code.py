"""
File: socialconnect/core/error_code.py
Description: 全局错误码基类与系统级错误定义

定义结构 Tuple(http_status, code, message):
1. http_status: HTTP 响应状态码 (4xx/5xx)
2. code: 字符串业务码 (格式: domain.reason)
3. message: 默认的人类可读错误消息
"""

from enum import Enum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)


class BaseErrorCode(Enum):
    """
    错误码枚举基类
    所有业务领域的错误码 Enum 必须继承此类。

    Value Tuple Definition:
    (http_status, code, msg)
    """

    @property
    def http_status(self) -> int:
        """获取映射的 HTTP 状态码"""
        return self.value[0]

    @property
    def code(self) -> str:
        """获取业务错误标识 (domain.reason)"""
        return self.value[1]

    @property
    def msg(self) -> str:
        """获取默认错误描述信息"""
        return self.value[2]


class SystemErrorCode(BaseErrorCode):
    """
    系统通用错误定义 (System Domain)
    包含: 参数校验、唯一性冲突、认证、授权、资源缺失、系统故障
    """

    # HTTP 400: 客户端参数错误 (Pydantic 校验会自动映射到这里)
    INVALID_PARAMS = (HTTP_400_BAD_REQUEST, "system.invalid_params", "Validation failed")

    # HTTP 400: 唯一键冲突 (数据库 IntegrityError 兜底)
    CONFLICT = (HTTP_400_BAD_REQUEST, "system.conflict", "Resource already exists")

    # HTTP 401: 身份认证失败
    UNAUTHORIZED = (HTTP_401_UNAUTHORIZED, "system.unauthorized", "Authentication required")
    TOKEN_INVALID = (HTTP_401_UNAUTHORIZED, "system.token_invalid", "Token is invalid")
    TOKEN_EXPIRED = (HTTP_401_UNAUTHORIZED, "system.token_expired", "Token has expired")

    # HTTP 403: 已认证但无权操作
    FORBIDDEN = (
        HTTP_403_FORBIDDEN,
        "system.forbidden",
        "You do not have permission to perform this action",
    )

    # HTTP 404
    NOT_FOUND = (HTTP_404_NOT_FOUND, "system.not_found", "Resource not found")

    # HTTP 503: 依赖的外部能力未配置 (如 OAuth 提供方)
    SERVICE_UNAVAILABLE = (
        HTTP_503_SERVICE_UNAVAILABLE,
        "system.service_unavailable",
        "Service unavailable",
    )

    # HTTP 500: 服务端故障
    INTERNAL_ERROR = (
        HTTP_500_INTERNAL_SERVER_ERROR,
        "system.internal_error",
        "Internal server error",
    )
