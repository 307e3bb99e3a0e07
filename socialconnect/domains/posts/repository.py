"""
File: socialconnect/domains/posts/repository.py
Description: 帖子领域仓储层 (Repository)

所有列表查询只返回有效帖子 (is_active = True)。
标签以 JSON 数组存储，过滤时对其文本形式做 '"tag"' 子串匹配，
PostgreSQL 与 SQLite 行为一致。
"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Select, String, cast, false, or_, select

from socialconnect.core.schemas import SortOrder
from socialconnect.db.models.post import Post
from socialconnect.db.repositories.base import BaseRepository
from socialconnect.domains.posts.constants import PostSortField
from socialconnect.domains.posts.schemas import TAG_PATTERN, PostCreate, PostUpdate

SORT_COLUMNS = {
    PostSortField.CREATED_AT: Post.created_at,
    PostSortField.UPDATED_AT: Post.updated_at,
    PostSortField.LIKES_COUNT: Post.likes_count,
    PostSortField.COMMENTS_COUNT: Post.comments_count,
}


def _ordered(
    stmt: Select, sort_by: PostSortField, sort_order: SortOrder
) -> Select:
    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order is SortOrder.ASC else column.desc()
    return stmt.order_by(ordering, Post.id.desc())


class PostRepository(BaseRepository[Post, PostCreate, PostUpdate]):
    """
    帖子仓储类。
    """

    @staticmethod
    def active() -> Select:
        return select(Post).where(Post.is_active.is_(True))

    async def list_active(
        self,
        *,
        page: int,
        limit: int,
        sort_by: PostSortField = PostSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        tags: Sequence[str] | None = None,
        user_id: UUID | None = None,
    ) -> tuple[list[Post], int]:
        """
        有效帖子分页。
        tags: 命中任意一个标签即返回
        """
        stmt = self.active()

        if user_id is not None:
            stmt = stmt.where(Post.user_id == user_id)

        if tags:
            tags_text = cast(Post.tags, String)
            # 库中标签只含 TAG_PATTERN 字符，其他取值不会命中
            valid = [tag for tag in tags if TAG_PATTERN.match(tag)]
            stmt = stmt.where(
                or_(
                    false(),
                    *(tags_text.contains(f'"{tag}"', autoescape=True) for tag in valid),
                )
            )

        stmt = _ordered(stmt, sort_by, sort_order)
        return await self.paginate(stmt, page=page, limit=limit)

    async def search_active(
        self, query: str, *, page: int, limit: int
    ) -> tuple[list[Post], int]:
        """
        正文或标签的大小写不敏感子串匹配，按创建时间倒序。

        标签字符集不含 JSON 分隔符 ([ ] " ,)，只由标签字符组成的关键词
        在数组文本中的命中必然落在单个标签内部；含其他字符的关键词只匹配正文。
        """
        conditions = [Post.content.icontains(query, autoescape=True)]
        if TAG_PATTERN.match(query):
            conditions.append(cast(Post.tags, String).icontains(query, autoescape=True))

        stmt = self.active().where(or_(*conditions))
        stmt = _ordered(stmt, PostSortField.CREATED_AT, SortOrder.DESC)
        return await self.paginate(stmt, page=page, limit=limit)
