"""
File: socialconnect/domains/users/router.py
Description: 用户领域 HTTP 路由层

1. 注册 / 登录 / 列表 / 详情保持公开
2. 个人资料、修改密码、更新、停用必须鉴权 (CurrentUser)
3. 更新与停用仅限本人 (Service 层校验归属)
4. 静态路径 (/login, /profile, /change-password) 必须声明在 /{user_id} 之前
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
from socialconnect.domains.auth.schemas import AuthSession
from socialconnect.domains.users.constants import UserMsg, UserSortField
from socialconnect.domains.users.dependencies import UserServiceDep
from socialconnect.domains.users.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    UserCreate,
    UserRead,
    UserUpdate,
)

router = APIRouter()


# ------------------------------------------------------------------------------
# Public Endpoints (公开接口)
# ------------------------------------------------------------------------------


@router.post(
    "",
    response_model=ResponseModel[AuthSession],
    status_code=status.HTTP_201_CREATED,
    summary="注册新用户",
    description="创建新用户并返回用户信息与双 Token。用户名与邮箱必须唯一。",
)
async def create_user(
    request: Request,
    user_in: UserCreate,
    service: UserServiceDep,
) -> ResponseModel[AuthSession]:
    session = await service.register(user_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(data=session, message=UserMsg.CREATED, request_id=req_id)


@router.post(
    "/login",
    response_model=ResponseModel[AuthSession],
    summary="用户登录",
    description="使用邮箱或用户名 + 密码登录，返回 Access Token 与 Refresh Token。",
)
async def login(
    request: Request,
    login_in: LoginRequest,
    service: UserServiceDep,
) -> ResponseModel[AuthSession]:
    session = await service.login(login_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=session, message=UserMsg.LOGIN_SUCCESS, request_id=req_id
    )


# ------------------------------------------------------------------------------
# Protected Endpoints (受保护接口 - 需登录)
# ------------------------------------------------------------------------------


@router.get(
    "/profile",
    response_model=ResponseModel[UserRead],
    summary="获取我的个人资料",
)
async def read_profile(
    request: Request,
    current_user: CurrentUser,
) -> ResponseModel[UserRead]:
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=UserRead.model_validate(current_user),
        message=UserMsg.PROFILE,
        request_id=req_id,
    )


@router.put(
    "/change-password",
    response_model=ResponseModel[None],
    summary="修改密码",
    description="需提供当前密码、新密码与确认密码。新密码不能与当前密码相同。",
)
async def change_password(
    request: Request,
    password_in: ChangePasswordRequest,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> ResponseModel[None]:
    await service.change_password(current_user, password_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(message=UserMsg.PASSWORD_CHANGED, request_id=req_id)


# ------------------------------------------------------------------------------
# Collection & Item Endpoints
# ------------------------------------------------------------------------------


@router.get(
    "",
    response_model=ResponseModel[PageData[UserRead]],
    summary="用户列表",
    description="分页获取有效用户，可按用户名、姓名、邮箱模糊搜索。",
)
async def list_users(
    request: Request,
    service: UserServiceDep,
    page: PageParamsDep,
    sort_by: Annotated[UserSortField, Query(alias="sortBy")] = UserSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> ResponseModel[PageData[UserRead]]:
    users, total = await service.list_users(page, sort_by, sort_order, search)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=PageData[UserRead](
            items=[UserRead.model_validate(u) for u in users],
            pagination=Pagination.build(page.page, page.limit, total),
        ),
        message=UserMsg.LIST,
        request_id=req_id,
    )


@router.get(
    "/{user_id}",
    response_model=ResponseModel[UserRead],
    summary="用户详情",
)
async def read_user(
    request: Request,
    user_id: UUID,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.get(user_id)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=UserRead.model_validate(user), message=UserMsg.DETAIL, request_id=req_id
    )


@router.put(
    "/{user_id}",
    response_model=ResponseModel[UserRead],
    summary="更新用户资料",
    description="仅本人可更新。可修改字段: username, email, firstName, lastName, profilePicture, bio。",
)
async def update_user(
    request: Request,
    user_id: UUID,
    user_in: UserUpdate,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.update(user_id, current_user, user_in)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(
        data=UserRead.model_validate(user), message=UserMsg.UPDATED, request_id=req_id
    )


@router.delete(
    "/{user_id}",
    response_model=ResponseModel[None],
    summary="停用账号",
    description="软删除：账号标记为停用，不再出现在列表中，也无法登录。",
)
async def delete_user(
    request: Request,
    user_id: UUID,
    current_user: CurrentUser,
    service: UserServiceDep,
) -> ResponseModel[None]:
    await service.deactivate(user_id, current_user)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.ok(message=UserMsg.DELETED, request_id=req_id)
