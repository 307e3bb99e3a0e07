"""
File: socialconnect/domains/likes/repository.py
Description: 点赞领域仓储层 (Repository)
"""

from uuid import UUID

from sqlalchemy import select

from socialconnect.core.schemas import SortOrder
from socialconnect.db.models.like import Like, LikeTargetType
from socialconnect.db.repositories.base import BaseRepository
from socialconnect.domains.likes.constants import LikeSortField
from socialconnect.domains.likes.schemas import LikeTarget

SORT_COLUMNS = {
    LikeSortField.CREATED_AT: Like.created_at,
    LikeSortField.UPDATED_AT: Like.updated_at,
}


class LikeRepository(BaseRepository[Like, LikeTarget, LikeTarget]):
    """
    点赞仓储类。
    """

    async def get_for_target(
        self, user_id: UUID, target_type: LikeTargetType, target_id: UUID
    ) -> Like | None:
        """(user, targetType, targetId) 唯一，包含已取消的记录"""
        stmt = select(Like).where(
            Like.user_id == user_id,
            Like.target_type == target_type,
            Like.target_id == target_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(
        self,
        *,
        page: int,
        limit: int,
        sort_by: LikeSortField = LikeSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        target_type: LikeTargetType | None = None,
        target_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> tuple[list[Like], int]:
        stmt = select(Like).where(Like.is_active.is_(True))

        if target_type is not None:
            stmt = stmt.where(Like.target_type == target_type)
        if target_id is not None:
            stmt = stmt.where(Like.target_id == target_id)
        if user_id is not None:
            stmt = stmt.where(Like.user_id == user_id)

        column = SORT_COLUMNS[sort_by]
        if sort_order is SortOrder.ASC:
            stmt = stmt.order_by(column.asc(), Like.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Like.id.desc())

        return await self.paginate(stmt, page=page, limit=limit)
