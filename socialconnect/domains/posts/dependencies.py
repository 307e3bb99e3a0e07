"""
File: socialconnect/domains/posts/dependencies.py
Description: 帖子领域依赖注入 (DI)

依赖链：
DBSession → PostRepository ┐
DBSession → UserRepository ┴→ PostService → PostServiceDep
"""

from typing import Annotated

from fastapi import Depends

from socialconnect.api.deps import DBSession
from socialconnect.db.models.post import Post
from socialconnect.domains.posts.repository import PostRepository
from socialconnect.domains.posts.service import PostService
from socialconnect.domains.users.dependencies import UserRepoDep


async def get_post_repository(session: DBSession) -> PostRepository:
    return PostRepository(model=Post, session=session)


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


async def get_post_service(repo: PostRepoDep, user_repo: UserRepoDep) -> PostService:
    """
    获取帖子服务实例 (PostService)。
    """
    return PostService(repo=repo, user_repo=user_repo)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
