"""
File: socialconnect/core/schemas.py
Description: 全站共享的 Pydantic 基础模型与分页结构

1. CamelModel: 对外字段统一为 camelCase (firstName, likesCount ...)，
   同时允许按 Python 属性名填充，并支持从 ORM 对象构造
2. Pagination / PageData[T]: 列表接口的分页信封
3. PageParams / SortOrder: 分页与排序查询参数依赖
"""

from enum import StrEnum
from math import ceil
from typing import Annotated, Generic, TypeVar

from fastapi import Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase 对外契约的基类"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ------------------------------------------------------------------------------
# 分页信封
# ------------------------------------------------------------------------------


class Pagination(CamelModel):
    """分页元信息"""

    current_page: int = Field(..., description="当前页码 (从 1 开始)")
    total_pages: int = Field(..., description="总页数")
    total_items: int = Field(..., description="总记录数")
    has_next_page: bool = Field(..., description="是否有下一页")
    has_prev_page: bool = Field(..., description="是否有上一页")
    limit: int = Field(..., description="每页条数")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=ceil(total / limit) if limit else 0,
            total_items=total,
            has_next_page=page * limit < total,
            has_prev_page=page > 1,
            limit=limit,
        )


class PageData(CamelModel, Generic[T]):
    """分页列表载荷"""

    items: list[T] = Field(default_factory=list)
    pagination: Pagination


# ------------------------------------------------------------------------------
# 查询参数依赖
# ------------------------------------------------------------------------------


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class PageParams(BaseModel):
    page: int = 1
    limit: int = 10


async def get_page_params(
    page: Annotated[int, Query(ge=1, description="页码")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="每页条数")] = 10,
) -> PageParams:
    return PageParams(page=page, limit=limit)


async def get_feed_page_params(
    page: Annotated[int, Query(ge=1, description="页码")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="每页条数")] = 20,
) -> PageParams:
    """动态流默认每页 20 条"""
    return PageParams(page=page, limit=limit)


PageParamsDep = Annotated[PageParams, Depends(get_page_params)]
FeedPageParamsDep = Annotated[PageParams, Depends(get_feed_page_params)]
SortOrderQuery = Annotated[SortOrder, Query(alias="sortOrder", description="排序方向")]
