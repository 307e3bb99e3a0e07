"""
File: socialconnect/domains/likes/router.py
Description: 点赞领域 HTTP 路由层

1. POST /likes/toggle: 点赞 / 取消点赞 (幂等翻转)
2. POST /likes, DELETE /likes/{id}: 显式点赞与取消
3. 列表接口只返回有效点赞
4. GET /likes/check/{targetType}/{targetId}: 当前用户是否已点赞
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from socialconnect.api.deps import CurrentUser
from socialconnect.core.response import ResponseModel
from socialconnect.core.schemas import (
    PageData,
    PageParamsDep,
    Pagination,
    SortOrder,
    SortOrderQuery,
)
from socialconnect.db.models.like import LikeTargetType
from socialconnect.domains.likes.constants import LikeAction, LikeMsg, LikeSortField
from socialconnect.domains.likes.dependencies import LikeServiceDep
from socialconnect.domains.likes.schemas import LikeCheck, LikeRead, LikeTarget, ToggleResult

router = APIRouter()

TargetTypeQuery = Annotated[
    LikeTargetType | None, Query(alias="targetType", description="Post 或 Comment")
]


def _page(items: list[LikeRead], page: int, limit: int, total: int) -> PageData[LikeRead]:
    return PageData[LikeRead](items=items, pagination=Pagination.build(page, limit, total))


@router.post(
    "/toggle",
    response_model=ResponseModel[ToggleResult],
    summary="点赞 / 取消点赞",
    description="首次调用创建点赞，之后每次调用在已点赞与已取消之间切换，目标点赞数同步增减。",
)
async def toggle_like(
    request: Request,
    target_in: LikeTarget,
    current_user: CurrentUser,
    service: LikeServiceDep,
) -> ResponseModel[ToggleResult]:
    result = await service.toggle(current_user, target_in)
    req_id = getattr(request.state, "request_id", None)
    message = LikeMsg.LIKED if result.action is LikeAction.LIKED else LikeMsg.UNLIKED

    return ResponseModel.ok(data=result, message=message, request_id=req_id)


@router.post(
    "",
    response_model=ResponseModel[LikeRead],
    status_code=status.HTTP_201_CREATED,
    summary="点赞",
)
async def create_like(
    request: Request,
    target_in: LikeTarget,
    current_user: CurrentUser,
    service: LikeServiceDep,
) -> ResponseModel[LikeRead]:
    like = await service.create(current_user, target_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=like, message=LikeMsg.CREATED, request_id=req_id)


@router.get("", response_model=ResponseModel[PageData[LikeRead]], summary="点赞列表")
async def list_likes(
    request: Request,
    service: LikeServiceDep,
    page: PageParamsDep,
    target_type: TargetTypeQuery = None,
    sort_by: Annotated[LikeSortField, Query(alias="sortBy")] = LikeSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
) -> ResponseModel[PageData[LikeRead]]:
    likes, total = await service.list_likes(page, sort_by, sort_order, target_type)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(likes, page.page, page.limit, total),
        message=LikeMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/post/{post_id}",
    response_model=ResponseModel[PageData[LikeRead]],
    summary="帖子的点赞",
)
async def list_post_likes(
    request: Request,
    post_id: UUID,
    service: LikeServiceDep,
    page: PageParamsDep,
) -> ResponseModel[PageData[LikeRead]]:
    likes, total = await service.list_by_target(LikeTargetType.POST, post_id, page)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(likes, page.page, page.limit, total),
        message=LikeMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/comment/{comment_id}",
    response_model=ResponseModel[PageData[LikeRead]],
    summary="评论的点赞",
)
async def list_comment_likes(
    request: Request,
    comment_id: UUID,
    service: LikeServiceDep,
    page: PageParamsDep,
) -> ResponseModel[PageData[LikeRead]]:
    likes, total = await service.list_by_target(LikeTargetType.COMMENT, comment_id, page)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(likes, page.page, page.limit, total),
        message=LikeMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/user/{user_id}",
    response_model=ResponseModel[PageData[LikeRead]],
    summary="用户的点赞",
)
async def list_user_likes(
    request: Request,
    user_id: UUID,
    service: LikeServiceDep,
    page: PageParamsDep,
    target_type: TargetTypeQuery = None,
) -> ResponseModel[PageData[LikeRead]]:
    likes, total = await service.list_by_user(user_id, page, target_type)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(likes, page.page, page.limit, total),
        message=LikeMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/check/{target_type}/{target_id}",
    response_model=ResponseModel[LikeCheck],
    summary="是否已点赞",
)
async def check_like(
    request: Request,
    target_type: LikeTargetType,
    target_id: UUID,
    current_user: CurrentUser,
    service: LikeServiceDep,
) -> ResponseModel[LikeCheck]:
    result = await service.check(current_user, target_type, target_id)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=result, message=LikeMsg.CHECK, request_id=req_id)


@router.get("/{like_id}", response_model=ResponseModel[LikeRead], summary="点赞详情")
async def read_like(
    request: Request,
    like_id: UUID,
    service: LikeServiceDep,
) -> ResponseModel[LikeRead]:
    like = await service.get(like_id)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=like, message=LikeMsg.DETAIL, request_id=req_id)


@router.delete(
    "/{like_id}",
    response_model=ResponseModel[None],
    summary="取消点赞",
    description="仅本人可取消，记录保留为已取消状态，目标点赞数减一。",
)
async def delete_like(
    request: Request,
    like_id: UUID,
    current_user: CurrentUser,
    service: LikeServiceDep,
) -> ResponseModel[None]:
    await service.delete(like_id, current_user)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(message=LikeMsg.DELETED, request_id=req_id)
