"""
File: socialconnect/domains/users/repository.py
Description: 用户领域仓储层 (Repository)

扩展功能：
1. get_by_email / get_by_username / get_by_login: 凭证查询 (包含已停用账号，
   由 Service 决定如何处理停用状态)
2. find_oauth_match: OAuth 回调时按 (提供方 + 外部 ID) 或邮箱匹配已有账号
3. search_active: 有效用户分页 + 模糊搜索
4. get_summaries: 批量加载作者信息 (帖子/评论/点赞列表使用)
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import or_, select

from socialconnect.core.schemas import SortOrder
from socialconnect.db.models.user import OAuthProvider, User
from socialconnect.db.repositories.base import BaseRepository
from socialconnect.domains.users.constants import UserSortField
from socialconnect.domains.users.schemas import UserCreate, UserUpdate

SORT_COLUMNS = {
    UserSortField.CREATED_AT: User.created_at,
    UserSortField.UPDATED_AT: User.updated_at,
    UserSortField.USERNAME: User.username,
}


class UserRepository(BaseRepository[User, UserCreate, UserUpdate]):
    """
    用户仓储类。
    """

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_login(self, identifier: str) -> User | None:
        """按邮箱或用户名查找 (登录场景)"""
        stmt = select(User).where(
            or_(User.email == identifier.lower(), User.username == identifier)
        )
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def find_oauth_match(
        self, provider: OAuthProvider, oauth_id: str, email: str | None
    ) -> User | None:
        """
        OAuth 账号匹配：(provider, oauth_id) 优先，其次邮箱。
        """
        stmt = select(User).where(
            User.oauth_provider == provider, User.oauth_id == oauth_id
        )
        user = (await self.session.execute(stmt)).scalar_one_or_none()
        if user is not None or not email:
            return user
        return await self.get_by_email(email)

    async def search_active(
        self,
        *,
        page: int,
        limit: int,
        sort_by: UserSortField,
        sort_order: SortOrder,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        """
        有效用户分页查询。
        search 对用户名、姓名、邮箱做大小写不敏感的子串匹配。
        """
        stmt = select(User).where(User.is_active.is_(True))

        if search:
            stmt = stmt.where(
                or_(
                    User.username.icontains(search, autoescape=True),
                    User.first_name.icontains(search, autoescape=True),
                    User.last_name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )

        column = SORT_COLUMNS[sort_by]
        ordering = column.asc() if sort_order is SortOrder.ASC else column.desc()
        stmt = stmt.order_by(ordering, User.id)

        return await self.paginate(stmt, page=page, limit=limit)

    async def get_summaries(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        """批量加载用户，返回 {id: User}"""
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}
