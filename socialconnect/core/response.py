"""
File: socialconnect/core/response.py
Description: 统一响应信封（Unified Response Envelope）模型

成功: {success: true, code: "success", message, data, request_id, timestamp}
失败: {success: false, code, message, data?, errors?: [{field, message, value}], ...}

信封本身的 Key 保持 snake_case，data 内的业务载荷使用 camelCase (见 CamelModel)。
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar, cast

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """字段级错误详情"""

    field: str = Field(..., description="出错字段 (请求中的字段名)")
    message: str = Field(..., description="未满足的规则说明")
    value: Any = Field(default=None, description="客户端提交的原始值")


class ResponseBase(BaseModel):
    """
    响应基类
    """

    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(default=True, description="是否成功")
    code: str = Field(default="success", description="业务状态码")
    message: str = Field(default="Success", description="响应消息")
    request_id: str | None = Field(default=None, description="请求追踪ID")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="响应生成时间",
    )


def _to_jsonable(data: Any) -> Any:
    """将 Pydantic 模型 (或模型列表) 转换为按别名输出的 JSON 安全结构"""
    if hasattr(data, "model_dump"):
        return cast(Any, data).model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_to_jsonable(item) for item in data]
    return data


class ResponseModel(ResponseBase, Generic[T]):
    """
    统一响应信封
    """

    data: T | None = Field(default=None, description="业务数据")
    errors: list[ErrorDetail] | None = Field(default=None, description="字段级错误列表")

    @classmethod
    def ok(
        cls,
        data: T | None = None,
        message: str = "Success",
        request_id: str | None = None,
    ) -> "ResponseModel[T]":
        """
        构造成功响应
        """
        return cls(
            success=True,
            code="success",
            message=message,
            data=_to_jsonable(data),
            request_id=request_id,
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        data: Any = None,
        errors: list[ErrorDetail] | None = None,
        request_id: str | None = None,
    ) -> "ResponseModel[Any]":
        """
        构造失败响应
        """
        return cls(
            success=False,
            code=code,
            message=message,
            data=data,
            errors=errors,
            request_id=request_id,
        )
