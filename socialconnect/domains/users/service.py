"""
File: socialconnect/domains/users/service.py
Description: 用户领域服务 (业务逻辑层)

本模块封装用户管理的核心业务逻辑：
1. 注册：唯一性校验、哈希密码、写入数据库、签发双 Token
2. 登录：邮箱或用户名查找、状态校验、密码校验、刷新最近登录时间
3. 查询：按 ID 获取有效用户、分页搜索
4. 更新 / 停用：仅本人可操作，白名单字段
5. 修改密码：校验当前密码后重新哈希

注意：
- 所有数据库写操作的事务提交 (Commit) 由本层负责
- 密码哈希使用异步版本函数，避免阻塞事件循环
"""

from uuid import UUID

from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.core.schemas import PageParams, SortOrder
from socialconnect.core.security import (
    authorize_owner,
    get_password_hash_async,
    verify_password_async,
)
from socialconnect.db.models.user import User
from socialconnect.domains.auth.schemas import AuthSession
from socialconnect.domains.auth.service import issue_session
from socialconnect.domains.users.constants import UserError, UserSortField
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    UserCreate,
    UserUpdate,
)
from socialconnect.utils.masking import mask_email


class UserService:
    """
    用户领域服务。
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # --------------------------------------------------------------------------
    # 注册 / 登录
    # --------------------------------------------------------------------------

    async def register(self, obj_in: UserCreate) -> AuthSession:
        """
        创建新用户 (注册) 并签发双 Token。
        """
        # 1. 唯一性校验 (Fail Fast)
        if await self.repo.get_by_email(obj_in.email):
            raise AppException(UserError.EMAIL_EXIST)

        if await self.repo.get_by_username(obj_in.username):
            raise AppException(UserError.USERNAME_EXIST)

        # 2. 密码加密
        hashed_password = await get_password_hash_async(obj_in.password)

        # 3. 持久化与事务提交
        user_data = obj_in.model_dump(exclude={"password"})
        user = User(**user_data, hashed_password=hashed_password)
        self.repo.session.add(user)
        await self.repo.session.commit()
        await self.repo.session.refresh(user)

        logger.bind(user_id=str(user.id), email=mask_email(user.email)).info(
            "User registered"
        )

        return issue_session(user)

    async def login(self, login_in: LoginRequest) -> AuthSession:
        """
        登录流程：查找 -> 密码 -> 状态 -> 刷新最近登录时间 -> 签发令牌。
        密码校验通过后才暴露账号停用状态。
        """
        user = await self.repo.get_by_login(login_in.email_or_username)

        if user is None:
            raise AppException(UserError.INVALID_CREDENTIALS)

        # OAuth 账号没有本地密码，与密码错误同样处理
        if not user.hashed_password or not await verify_password_async(
            login_in.password, user.hashed_password
        ):
            raise AppException(UserError.INVALID_CREDENTIALS)

        if not user.is_active:
            raise AppException(UserError.ACCOUNT_INACTIVE)

        user.touch_login()
        await self.repo.session.commit()

        logger.bind(user_id=str(user.id)).info("User logged in")

        return issue_session(user)

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def get(self, user_id: UUID) -> User:
        """
        获取有效用户，已停用视为不存在。
        """
        user = await self.repo.get_active(user_id)
        if user is None:
            raise AppException(UserError.USER_NOT_FOUND)
        return user

    async def list_users(
        self,
        params: PageParams,
        sort_by: UserSortField,
        sort_order: SortOrder,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        return await self.repo.search_active(
            page=params.page,
            limit=params.limit,
            sort_by=sort_by,
            sort_order=sort_order,
            search=search.strip() if search and search.strip() else None,
        )

    # --------------------------------------------------------------------------
    # 更新 / 停用
    # --------------------------------------------------------------------------

    async def update(self, user_id: UUID, current_user: User, obj_in: UserUpdate) -> User:
        """
        更新用户资料 (仅本人)。
        """
        authorize_owner(user_id, current_user.id, UserError.NOT_OWNER)
        user = await self.get(user_id)

        update_data = obj_in.model_dump(exclude_unset=True)
        if not update_data:
            raise AppException(UserError.EMPTY_UPDATE)

        if "email" in update_data and update_data["email"] != user.email:
            existing = await self.repo.get_by_email(update_data["email"])
            if existing and existing.id != user.id:
                raise AppException(UserError.EMAIL_EXIST)

        if "username" in update_data and update_data["username"] != user.username:
            existing = await self.repo.get_by_username(update_data["username"])
            if existing and existing.id != user.id:
                raise AppException(UserError.USERNAME_EXIST)

        updated_user = await self.repo.update(user, update_data)
        await self.repo.session.commit()
        await self.repo.session.refresh(updated_user)

        logger.bind(user_id=str(user_id), fields=sorted(update_data)).info(
            "User updated"
        )
        return updated_user

    async def deactivate(self, user_id: UUID, current_user: User) -> None:
        """停用账号 (软删除，仅本人)"""
        authorize_owner(user_id, current_user.id, UserError.NOT_OWNER)
        user = await self.get(user_id)

        await self.repo.deactivate(user)
        await self.repo.session.commit()

        logger.bind(user_id=str(user_id)).info("User deactivated")

    async def change_password(self, user: User, obj_in: ChangePasswordRequest) -> None:
        """
        修改密码：校验当前密码 -> 重新哈希新密码。
        新旧密码不同、确认密码一致已在 Schema 层校验。
        """
        if not user.hashed_password:
            raise AppException(UserError.PASSWORD_NOT_SET)

        if not await verify_password_async(obj_in.current_password, user.hashed_password):
            raise AppException(UserError.CURRENT_PASSWORD_INCORRECT)

        user.hashed_password = await get_password_hash_async(obj_in.new_password)
        await self.repo.session.commit()

        logger.bind(user_id=str(user.id)).info("Password changed")
