"""
File: socialconnect/domains/comments/service.py
Description: 评论领域服务 (业务逻辑层)

1. 创建评论：帖子必须有效；回复只能指向同一帖子的有效顶层评论；
   评论记录与 post.comments_count 在同一事务内写入
2. 删除评论：软删除 + 帖子评论数原子递减 (下限为 0)
3. 更新评论：仅作者，标记 is_edited
4. 帖子评论列表只返回顶层评论，并附带回复数
"""

from collections.abc import Sequence
from uuid import UUID

from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.core.schemas import PageParams, SortOrder
from socialconnect.core.security import authorize_owner
from socialconnect.db.models.comment import Comment
from socialconnect.db.models.user import User
from socialconnect.domains.comments.constants import CommentError, CommentSortField
from socialconnect.domains.comments.repository import CommentRepository
from socialconnect.domains.comments.schemas import CommentCreate, CommentRead, CommentUpdate
from socialconnect.domains.posts.constants import PostError
from socialconnect.domains.posts.repository import PostRepository
from socialconnect.domains.users.constants import UserError
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import AuthorSummary


class CommentService:
    """
    评论领域服务。
    """

    def __init__(
        self,
        repo: CommentRepository,
        post_repo: PostRepository,
        user_repo: UserRepository,
    ):
        self.repo = repo
        self.post_repo = post_repo
        self.user_repo = user_repo

    async def present(
        self, comments: Sequence[Comment], *, with_replies: bool = False
    ) -> list[CommentRead]:
        authors = await self.user_repo.get_summaries(c.user_id for c in comments)
        replies = (
            await self.repo.count_replies(c.id for c in comments) if with_replies else {}
        )

        result = []
        for comment in comments:
            author = authors.get(comment.user_id)
            update: dict = {"author": AuthorSummary.model_validate(author) if author else None}
            if with_replies:
                update["replies_count"] = replies.get(comment.id, 0)
            result.append(CommentRead.model_validate(comment).model_copy(update=update))
        return result

    async def present_one(self, comment: Comment) -> CommentRead:
        return (await self.present([comment]))[0]

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def get_active_comment(self, comment_id: UUID) -> Comment:
        comment = await self.repo.get_active(comment_id)
        if comment is None:
            raise AppException(CommentError.COMMENT_NOT_FOUND)
        return comment

    async def get(self, comment_id: UUID) -> CommentRead:
        return await self.present_one(await self.get_active_comment(comment_id))

    async def list_comments(
        self, params: PageParams, sort_by: CommentSortField, sort_order: SortOrder
    ) -> tuple[list[CommentRead], int]:
        comments, total = await self.repo.list_active(
            page=params.page, limit=params.limit, sort_by=sort_by, sort_order=sort_order
        )
        return await self.present(comments), total

    async def list_by_post(
        self, post_id: UUID, params: PageParams
    ) -> tuple[list[CommentRead], int]:
        """帖子的顶层评论，最新在前"""
        if await self.post_repo.get_active(post_id) is None:
            raise AppException(PostError.POST_NOT_FOUND)

        comments, total = await self.repo.list_active(
            page=params.page, limit=params.limit, post_id=post_id, top_level_only=True
        )
        return await self.present(comments, with_replies=True), total

    async def list_by_user(
        self,
        user_id: UUID,
        params: PageParams,
        sort_by: CommentSortField,
        sort_order: SortOrder,
    ) -> tuple[list[CommentRead], int]:
        if await self.user_repo.get_active(user_id) is None:
            raise AppException(UserError.USER_NOT_FOUND)

        comments, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            sort_by=sort_by,
            sort_order=sort_order,
            user_id=user_id,
        )
        return await self.present(comments), total

    async def list_replies(
        self, comment_id: UUID, params: PageParams
    ) -> tuple[list[CommentRead], int]:
        """回复按时间正序"""
        await self.get_active_comment(comment_id)

        comments, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            sort_order=SortOrder.ASC,
            parent_id=comment_id,
        )
        return await self.present(comments), total

    # --------------------------------------------------------------------------
    # 写入
    # --------------------------------------------------------------------------

    async def create(self, user: User, obj_in: CommentCreate) -> CommentRead:
        post = await self.post_repo.get_active(obj_in.post_id)
        if post is None:
            raise AppException(PostError.POST_NOT_FOUND)

        if obj_in.parent_comment_id is not None:
            parent = await self.repo.get_active(obj_in.parent_comment_id)
            if parent is None:
                raise AppException(CommentError.PARENT_NOT_FOUND)
            if parent.post_id != post.id or parent.is_reply:
                raise AppException(CommentError.INVALID_PARENT)

        comment = await self.repo.create({**obj_in.model_dump(), "user_id": user.id})
        await self.post_repo.increment(post.id, "comments_count")
        await self.repo.session.commit()

        logger.bind(
            comment_id=str(comment.id), post_id=str(post.id), user_id=str(user.id)
        ).info("Comment created")
        return await self.present_one(comment)

    async def update(
        self, comment_id: UUID, user: User, obj_in: CommentUpdate
    ) -> CommentRead:
        comment = await self.get_active_comment(comment_id)
        authorize_owner(comment.user_id, user.id, CommentError.NOT_OWNER)

        comment = await self.repo.update(
            comment, {"content": obj_in.content, "is_edited": True}
        )
        await self.repo.session.commit()

        logger.bind(comment_id=str(comment_id)).info("Comment updated")
        return await self.present_one(comment)

    async def deactivate(self, comment_id: UUID, user: User) -> None:
        """软删除评论，并递减帖子评论数"""
        comment = await self.get_active_comment(comment_id)
        authorize_owner(comment.user_id, user.id, CommentError.NOT_OWNER)

        await self.repo.deactivate(comment)
        await self.post_repo.decrement(comment.post_id, "comments_count")
        await self.repo.session.commit()

        logger.bind(comment_id=str(comment_id), post_id=str(comment.post_id)).info(
            "Comment deleted"
        )
