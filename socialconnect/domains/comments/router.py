"""
File: socialconnect/domains/comments/router.py
Description: 评论领域 HTTP 路由层
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
from socialconnect.domains.comments.constants import CommentMsg, CommentSortField
from socialconnect.domains.comments.dependencies import CommentServiceDep
from socialconnect.domains.comments.schemas import CommentCreate, CommentRead, CommentUpdate

router = APIRouter()

CommentSortQuery = Annotated[CommentSortField, Query(alias="sortBy", description="排序字段")]


def _page(
    items: list[CommentRead], page: int, limit: int, total: int
) -> PageData[CommentRead]:
    return PageData[CommentRead](
        items=items, pagination=Pagination.build(page, limit, total)
    )


@router.post(
    "",
    response_model=ResponseModel[CommentRead],
    status_code=status.HTTP_201_CREATED,
    summary="发表评论",
    description="parentCommentId 可选，只能回复同一帖子下的顶层评论。",
)
async def create_comment(
    request: Request,
    comment_in: CommentCreate,
    current_user: CurrentUser,
    service: CommentServiceDep,
) -> ResponseModel[CommentRead]:
    comment = await service.create(current_user, comment_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=comment, message=CommentMsg.CREATED, request_id=req_id)


@router.get("", response_model=ResponseModel[PageData[CommentRead]], summary="评论列表")
async def list_comments(
    request: Request,
    service: CommentServiceDep,
    page: PageParamsDep,
    sort_by: CommentSortQuery = CommentSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
) -> ResponseModel[PageData[CommentRead]]:
    comments, total = await service.list_comments(page, sort_by, sort_order)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(comments, page.page, page.limit, total),
        message=CommentMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/post/{post_id}",
    response_model=ResponseModel[PageData[CommentRead]],
    summary="帖子的评论",
    description="只返回顶层评论 (最新在前)，每条附带 repliesCount。",
)
async def list_post_comments(
    request: Request,
    post_id: UUID,
    service: CommentServiceDep,
    page: PageParamsDep,
) -> ResponseModel[PageData[CommentRead]]:
    comments, total = await service.list_by_post(post_id, page)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(comments, page.page, page.limit, total),
        message=CommentMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/user/{user_id}",
    response_model=ResponseModel[PageData[CommentRead]],
    summary="用户的评论",
)
async def list_user_comments(
    request: Request,
    user_id: UUID,
    service: CommentServiceDep,
    page: PageParamsDep,
    sort_by: CommentSortQuery = CommentSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
) -> ResponseModel[PageData[CommentRead]]:
    comments, total = await service.list_by_user(user_id, page, sort_by, sort_order)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(comments, page.page, page.limit, total),
        message=CommentMsg.LIST,
        request_id=req_id,
    )


@router.get("/{comment_id}", response_model=ResponseModel[CommentRead], summary="评论详情")
async def read_comment(
    request: Request,
    comment_id: UUID,
    service: CommentServiceDep,
) -> ResponseModel[CommentRead]:
    comment = await service.get(comment_id)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=comment, message=CommentMsg.DETAIL, request_id=req_id)


@router.get(
    "/{comment_id}/replies",
    response_model=ResponseModel[PageData[CommentRead]],
    summary="评论的回复",
    description="有效回复按时间正序返回。",
)
async def list_replies(
    request: Request,
    comment_id: UUID,
    service: CommentServiceDep,
    page: PageParamsDep,
) -> ResponseModel[PageData[CommentRead]]:
    replies, total = await service.list_replies(comment_id, page)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=_page(replies, page.page, page.limit, total),
        message=CommentMsg.REPLIES,
        request_id=req_id,
    )


@router.put(
    "/{comment_id}",
    response_model=ResponseModel[CommentRead],
    summary="编辑评论",
    description="仅作者可编辑，编辑后 isEdited 为 true。",
)
async def update_comment(
    request: Request,
    comment_id: UUID,
    comment_in: CommentUpdate,
    current_user: CurrentUser,
    service: CommentServiceDep,
) -> ResponseModel[CommentRead]:
    comment = await service.update(comment_id, current_user, comment_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=comment, message=CommentMsg.UPDATED, request_id=req_id)


@router.delete(
    "/{comment_id}",
    response_model=ResponseModel[None],
    summary="删除评论",
    description="软删除，同时帖子评论数减一。",
)
async def delete_comment(
    request: Request,
    comment_id: UUID,
    current_user: CurrentUser,
    service: CommentServiceDep,
) -> ResponseModel[None]:
    await service.deactivate(comment_id, current_user)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(message=CommentMsg.DELETED, request_id=req_id)
