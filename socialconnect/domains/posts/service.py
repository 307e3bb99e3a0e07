"""
File: socialconnect/domains/posts/service.py
Description: 帖子领域服务 (业务逻辑层)

1. 创建 / 更新：正文与图片至少有一项 (结合现值判断)
2. 列表 / 搜索 / 动态流 / 用户帖子：只返回有效帖子，并批量附带作者信息
3. 更新 / 删除：仅作者本人，删除为软删除
4. content_type 由模型事件在写入前重新计算
"""

from collections.abc import Sequence
from uuid import UUID

from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.core.schemas import PageParams, SortOrder
from socialconnect.core.security import authorize_owner
from socialconnect.db.models.post import Post
from socialconnect.db.models.user import User
from socialconnect.domains.posts.constants import PostError, PostSortField
from socialconnect.domains.posts.repository import PostRepository
from socialconnect.domains.posts.schemas import PostCreate, PostRead, PostUpdate
from socialconnect.domains.users.constants import UserError
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import AuthorSummary


def parse_tag_filter(raw: str | None) -> list[str]:
    """'Python, fastapi' -> ['python', 'fastapi']"""
    if not raw:
        return []
    return [tag.strip().lower() for tag in raw.split(",") if tag.strip()]


class PostService:
    """
    帖子领域服务。
    """

    def __init__(self, repo: PostRepository, user_repo: UserRepository):
        self.repo = repo
        self.user_repo = user_repo

    # --------------------------------------------------------------------------
    # 响应组装
    # --------------------------------------------------------------------------

    async def present(self, posts: Sequence[Post]) -> list[PostRead]:
        """ORM -> PostRead，并批量加载作者"""
        authors = await self.user_repo.get_summaries(p.user_id for p in posts)
        result = []
        for post in posts:
            author = authors.get(post.user_id)
            result.append(
                PostRead.model_validate(post).model_copy(
                    update={"author": AuthorSummary.model_validate(author) if author else None}
                )
            )
        return result

    async def present_one(self, post: Post) -> PostRead:
        return (await self.present([post]))[0]

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def get_active_post(self, post_id: UUID) -> Post:
        """有效帖子，已删除视为不存在"""
        post = await self.repo.get_active(post_id)
        if post is None:
            raise AppException(PostError.POST_NOT_FOUND)
        return post

    async def get(self, post_id: UUID) -> PostRead:
        return await self.present_one(await self.get_active_post(post_id))

    async def list_posts(
        self,
        params: PageParams,
        sort_by: PostSortField,
        sort_order: SortOrder,
        tags: str | None = None,
    ) -> tuple[list[PostRead], int]:
        posts, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            sort_by=sort_by,
            sort_order=sort_order,
            tags=parse_tag_filter(tags),
        )
        return await self.present(posts), total

    async def search(self, query: str | None, params: PageParams) -> tuple[list[PostRead], int]:
        query = (query or "").strip()
        if not query:
            raise AppException(PostError.SEARCH_QUERY_REQUIRED)

        posts, total = await self.repo.search_active(
            query, page=params.page, limit=params.limit
        )
        return await self.present(posts), total

    async def feed(self, params: PageParams) -> tuple[list[PostRead], int]:
        """最新动态：有效帖子按创建时间倒序"""
        posts, total = await self.repo.list_active(page=params.page, limit=params.limit)
        return await self.present(posts), total

    async def list_by_user(
        self,
        user_id: UUID,
        params: PageParams,
        sort_by: PostSortField,
        sort_order: SortOrder,
    ) -> tuple[list[PostRead], int]:
        if await self.user_repo.get_active(user_id) is None:
            raise AppException(UserError.USER_NOT_FOUND)

        posts, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            sort_by=sort_by,
            sort_order=sort_order,
            user_id=user_id,
        )
        return await self.present(posts), total

    # --------------------------------------------------------------------------
    # 写入
    # --------------------------------------------------------------------------

    async def create(self, user: User, obj_in: PostCreate) -> PostRead:
        if not obj_in.content and not obj_in.image_url:
            raise AppException(PostError.CONTENT_REQUIRED)

        post = await self.repo.create({**obj_in.model_dump(), "user_id": user.id})
        await self.repo.session.commit()

        logger.bind(
            post_id=str(post.id), user_id=str(user.id), content_type=post.content_type
        ).info("Post created")
        return await self.present_one(post)

    async def update(self, post_id: UUID, user: User, obj_in: PostUpdate) -> PostRead:
        """
        更新帖子 (仅作者)。
        合并后的帖子仍需有正文或图片。
        """
        post = await self.get_active_post(post_id)
        authorize_owner(post.user_id, user.id, PostError.NOT_OWNER)

        update_data = obj_in.model_dump(exclude_unset=True)
        if not update_data:
            raise AppException(PostError.EMPTY_UPDATE)

        content = update_data.get("content", post.content)
        image_url = update_data.get("image_url", post.image_url)
        if not content and not image_url:
            raise AppException(PostError.CONTENT_REQUIRED)

        post = await self.repo.update(post, update_data)
        await self.repo.session.commit()

        logger.bind(
            post_id=str(post_id), fields=sorted(update_data), content_type=post.content_type
        ).info("Post updated")
        return await self.present_one(post)

    async def deactivate(self, post_id: UUID, user: User) -> None:
        """软删除帖子 (仅作者)"""
        post = await self.get_active_post(post_id)
        authorize_owner(post.user_id, user.id, PostError.NOT_OWNER)

        await self.repo.deactivate(post)
        await self.repo.session.commit()

        logger.bind(post_id=str(post_id), user_id=str(user.id)).info("Post deleted")
