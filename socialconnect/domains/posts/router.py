"""
File: socialconnect/domains/posts/router.py
Description: 帖子领域 HTTP 路由层

1. 查询接口公开：列表、搜索、最新动态、用户帖子、详情
2. 创建 / 更新 / 删除必须鉴权，更新与删除仅限作者
3. 静态路径 (/search, /feed/recent, /user/{user_id}) 声明在 /{post_id} 之前
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from socialconnect.api.deps import CurrentUser
from socialconnect.core.response import ResponseModel
from socialconnect.core.schemas import (
    FeedPageParamsDep,
    PageData,
    PageParamsDep,
    Pagination,
    SortOrder,
    SortOrderQuery,
)
from socialconnect.domains.posts.constants import PostMsg, PostSortField
from socialconnect.domains.posts.dependencies import PostServiceDep
from socialconnect.domains.posts.schemas import PostCreate, PostRead, PostUpdate

router = APIRouter()

PostSortQuery = Annotated[PostSortField, Query(alias="sortBy", description="排序字段")]


@router.post(
    "",
    response_model=ResponseModel[PostRead],
    status_code=status.HTTP_201_CREATED,
    summary="发布帖子",
    description="正文 (≤2000) 与图片 URL 至少提供一项；标签最多 10 个，自动转小写并去重。",
)
async def create_post(
    request: Request,
    post_in: PostCreate,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[PostRead]:
    post = await service.create(current_user, post_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=post, message=PostMsg.CREATED, request_id=req_id)


@router.get(
    "",
    response_model=ResponseModel[PageData[PostRead]],
    summary="帖子列表",
    description="tags 为逗号分隔的标签列表，命中任意一个即返回。",
)
async def list_posts(
    request: Request,
    service: PostServiceDep,
    page: PageParamsDep,
    sort_by: PostSortQuery = PostSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
    tags: Annotated[str | None, Query(max_length=600)] = None,
) -> ResponseModel[PageData[PostRead]]:
    posts, total = await service.list_posts(page, sort_by, sort_order, tags)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=PageData[PostRead](
            items=posts, pagination=Pagination.build(page.page, page.limit, total)
        ),
        message=PostMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/search",
    response_model=ResponseModel[PageData[PostRead]],
    summary="搜索帖子",
    description="在正文与标签中做大小写不敏感的子串匹配。q 不能为空。",
)
async def search_posts(
    request: Request,
    service: PostServiceDep,
    page: PageParamsDep,
    q: Annotated[str | None, Query(max_length=200, description="搜索关键词")] = None,
) -> ResponseModel[PageData[PostRead]]:
    posts, total = await service.search(q, page)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=PageData[PostRead](
            items=posts, pagination=Pagination.build(page.page, page.limit, total)
        ),
        message=PostMsg.SEARCH,
        request_id=req_id,
    )


@router.get(
    "/feed/recent",
    response_model=ResponseModel[PageData[PostRead]],
    summary="最新动态",
)
async def recent_feed(
    request: Request,
    service: PostServiceDep,
    page: FeedPageParamsDep,
) -> ResponseModel[PageData[PostRead]]:
    posts, total = await service.feed(page)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=PageData[PostRead](
            items=posts, pagination=Pagination.build(page.page, page.limit, total)
        ),
        message=PostMsg.FEED,
        request_id=req_id,
    )


@router.get(
    "/user/{user_id}",
    response_model=ResponseModel[PageData[PostRead]],
    summary="用户的帖子",
)
async def list_user_posts(
    request: Request,
    user_id: UUID,
    service: PostServiceDep,
    page: PageParamsDep,
    sort_by: PostSortQuery = PostSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
) -> ResponseModel[PageData[PostRead]]:
    posts, total = await service.list_by_user(user_id, page, sort_by, sort_order)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=PageData[PostRead](
            items=posts, pagination=Pagination.build(page.page, page.limit, total)
        ),
        message=PostMsg.BY_USER,
        request_id=req_id,
    )


@router.get(
    "/{post_id}",
    response_model=ResponseModel[PostRead],
    summary="帖子详情",
)
async def read_post(
    request: Request,
    post_id: UUID,
    service: PostServiceDep,
) -> ResponseModel[PostRead]:
    post = await service.get(post_id)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=post, message=PostMsg.DETAIL, request_id=req_id)


@router.put(
    "/{post_id}",
    response_model=ResponseModel[PostRead],
    summary="更新帖子",
    description="仅作者可更新 content、imageUrl、tags；imageUrl 传 null 移除图片。",
)
async def update_post(
    request: Request,
    post_id: UUID,
    post_in: PostUpdate,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[PostRead]:
    post = await service.update(post_id, current_user, post_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=post, message=PostMsg.UPDATED, request_id=req_id)


@router.delete(
    "/{post_id}",
    response_model=ResponseModel[None],
    summary="删除帖子",
    description="软删除，帖子不再出现在任何列表中。",
)
async def delete_post(
    request: Request,
    post_id: UUID,
    current_user: CurrentUser,
    service: PostServiceDep,
) -> ResponseModel[None]:
    await service.deactivate(post_id, current_user)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(message=PostMsg.DELETED, request_id=req_id)
