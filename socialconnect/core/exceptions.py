"""
File: socialconnect/core/exceptions.py
Description: 业务异常类与全局异常处理器

1. 业务异常基类（AppException）接受 BaseErrorCode 枚举
2. 全局异常处理器将异常映射为：语义化 HTTP 状态码 + 字符串业务码
3. 使用 ResponseModel.fail() 构造统一的失败响应信封
4. 未知异常一律按 500 处理，仅在调试模式下回显异常信息
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from socialconnect.core.config import settings
from socialconnect.core.error_code import BaseErrorCode, SystemErrorCode
from socialconnect.core.logging import logger
from socialconnect.core.response import ErrorDetail, ResponseModel
from socialconnect.utils.masking import mask_field_value, mask_sensitive_data

# ------------------------------------------------------------------------------
# 1. 自定义业务异常类
# ------------------------------------------------------------------------------


class AppException(Exception):
    """
    应用基础异常类。

    用法示例:
        raise AppException(PostError.POST_NOT_FOUND)
        raise AppException(SystemErrorCode.TOKEN_EXPIRED, message="Token expired")
    """

    def __init__(
        self,
        error: BaseErrorCode,
        message: str = "",
        data: Any = None,
    ):
        # 自动从枚举中解构: (HTTP状态, 业务码, 默认文案)
        self.error = error
        self.http_status = error.http_status
        self.code = error.code
        self.message = message or error.msg
        self.data = data
        super().__init__(self.message)


# ------------------------------------------------------------------------------
# 2. 辅助函数
# ------------------------------------------------------------------------------


def _get_request_id(request: Request) -> str:
    """尝试从 request.state 获取 request_id，如果不存在则返回 'unknown'"""
    return str(getattr(request.state, "request_id", "unknown"))


def _clean_message(msg: str) -> str:
    """去掉 Pydantic 为自定义校验器添加的 'Value error, ' 前缀"""
    prefix = "Value error, "
    return msg[len(prefix) :] if msg.startswith(prefix) else msg


def format_validation_errors(errors: list[dict[str, Any]]) -> list[ErrorDetail]:
    """
    将 Pydantic 错误列表转换为 [{field, message, value}]。

    loc 示例: ('body', 'password') / ('query', 'limit') / ('body',)
    字段名取 loc 最后一段，即客户端提交时使用的 (camelCase) 名称。
    """
    details: list[ErrorDetail] = []
    for error in errors:
        loc = error.get("loc", ())
        field = str(loc[-1]) if loc else "unknown"
        value = None if error.get("type") == "missing" else error.get("input")
        details.append(
            ErrorDetail(
                field=field,
                message=_clean_message(str(error.get("msg", "Invalid parameter"))),
                value=mask_field_value(field, value),
            )
        )
    return details


def _json_response(status_code: int, model: ResponseModel[Any]) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", exclude_none=False),
    )


# ------------------------------------------------------------------------------
# 3. 全局异常处理器 (Handlers)
# ------------------------------------------------------------------------------


async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
    """
    处理自定义业务异常 (AppException)
    """
    request_id = _get_request_id(request)

    logger.bind(
        request_id=request_id,
        code=exc.code,
        http_status=exc.http_status,
        message=exc.message,
    ).warning("Business exception occurred")

    response_model = ResponseModel.fail(
        code=exc.code,
        message=exc.message,
        data=exc.data,
        request_id=request_id,
    )
    return _json_response(exc.http_status, response_model)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """
    处理 Pydantic 校验异常 (FastAPI 默认抛出 422)
    映射目标: HTTP 400 Bad Request / Code: system.invalid_params
    """
    request_id = _get_request_id(request)

    details = format_validation_errors(list(exc.errors()))
    first = details[0] if details else None
    readable_message = (
        f"{first.field}: {first.message}" if first else SystemErrorCode.INVALID_PARAMS.msg
    )

    logger.bind(
        request_id=request_id,
        detail=readable_message,
        fields=[d.field for d in details],
        body=mask_sensitive_data(exc.body),
    ).warning("Request validation failed")

    response_model = ResponseModel.fail(
        code=SystemErrorCode.INVALID_PARAMS.code,
        message=readable_message,
        errors=details,
        request_id=request_id,
    )
    return _json_response(SystemErrorCode.INVALID_PARAMS.http_status, response_model)


async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> ORJSONResponse:
    """
    处理数据库唯一约束冲突。
    Service 层已做前置查重，这里兜底并发写入时的竞态。
    """
    request_id = _get_request_id(request)

    logger.bind(request_id=request_id, detail=str(exc.orig)).warning(
        "Database integrity error"
    )

    response_model = ResponseModel.fail(
        code=SystemErrorCode.CONFLICT.code,
        message=SystemErrorCode.CONFLICT.msg,
        request_id=request_id,
    )
    return _json_response(SystemErrorCode.CONFLICT.http_status, response_model)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """
    处理框架层面的 HTTP 异常 (如 404 Not Found, 405 Method Not Allowed)
    """
    request_id = _get_request_id(request)

    code_str = "system.not_found" if exc.status_code == 404 else "system.http_error"

    logger.bind(
        request_id=request_id,
        status_code=exc.status_code,
        detail=str(exc.detail),
    ).warning("Framework HTTP exception occurred")

    response_model = ResponseModel.fail(
        code=code_str,
        message=str(exc.detail),
        request_id=request_id,
    )
    return _json_response(exc.status_code, response_model)


async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    处理所有未捕获的异常 (500 Internal Server Error)
    生产环境屏蔽内部细节，调试模式下回显异常信息
    """
    request_id = _get_request_id(request)

    logger.opt(exception=exc).bind(request_id=request_id).error(
        "Unhandled system exception occurred"
    )

    response_model = ResponseModel.fail(
        code=SystemErrorCode.INTERNAL_ERROR.code,
        message=SystemErrorCode.INTERNAL_ERROR.msg,
        data={"detail": repr(exc)} if settings.is_debug else None,
        request_id=request_id,
    )
    return _json_response(SystemErrorCode.INTERNAL_ERROR.http_status, response_model)


# ------------------------------------------------------------------------------
# 4. 异常处理器注册函数
# ------------------------------------------------------------------------------


def register_exception_handlers(app: FastAPI) -> None:
    """
    统一注册所有异常处理器。
    应在 main.py 中调用。
    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore
    app.add_exception_handler(Exception, general_exception_handler)
