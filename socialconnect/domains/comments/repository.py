"""
File: socialconnect/domains/comments/repository.py
Description: 评论领域仓储层 (Repository)
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import Select, func, select

from socialconnect.core.schemas import SortOrder
from socialconnect.db.models.comment import Comment
from socialconnect.db.repositories.base import BaseRepository
from socialconnect.domains.comments.constants import CommentSortField
from socialconnect.domains.comments.schemas import CommentCreate, CommentUpdate

SORT_COLUMNS = {
    CommentSortField.CREATED_AT: Comment.created_at,
    CommentSortField.UPDATED_AT: Comment.updated_at,
    CommentSortField.LIKES_COUNT: Comment.likes_count,
}


class CommentRepository(BaseRepository[Comment, CommentCreate, CommentUpdate]):
    """
    评论仓储类。列表查询只返回有效评论。
    """

    @staticmethod
    def active() -> Select:
        return select(Comment).where(Comment.is_active.is_(True))

    async def list_active(
        self,
        *,
        page: int,
        limit: int,
        sort_by: CommentSortField = CommentSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        post_id: UUID | None = None,
        user_id: UUID | None = None,
        parent_id: UUID | None = None,
        top_level_only: bool = False,
    ) -> tuple[list[Comment], int]:
        stmt = self.active()

        if post_id is not None:
            stmt = stmt.where(Comment.post_id == post_id)
        if user_id is not None:
            stmt = stmt.where(Comment.user_id == user_id)
        if parent_id is not None:
            stmt = stmt.where(Comment.parent_comment_id == parent_id)
        if top_level_only:
            stmt = stmt.where(Comment.parent_comment_id.is_(None))

        column = SORT_COLUMNS[sort_by]
        if sort_order is SortOrder.ASC:
            stmt = stmt.order_by(column.asc(), Comment.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Comment.id.desc())

        return await self.paginate(stmt, page=page, limit=limit)

    async def count_replies(self, comment_ids: Iterable[UUID]) -> dict[UUID, int]:
        """批量统计有效回复数，返回 {父评论 ID: 数量}"""
        ids = set(comment_ids)
        if not ids:
            return {}
        stmt = (
            select(Comment.parent_comment_id, func.count())
            .where(Comment.parent_comment_id.in_(ids), Comment.is_active.is_(True))
            .group_by(Comment.parent_comment_id)
        )
        result = await self.session.execute(stmt)
        return {parent_id: count for parent_id, count in result.all()}
