"""
File: socialconnect/domains/comments/dependencies.py
Description: 评论领域依赖注入 (DI)
"""

from typing import Annotated

from fastapi import Depends

from socialconnect.api.deps import DBSession
from socialconnect.db.models.comment import Comment
from socialconnect.domains.comments.repository import CommentRepository
from socialconnect.domains.comments.service import CommentService
from socialconnect.domains.posts.dependencies import PostRepoDep
from socialconnect.domains.users.dependencies import UserRepoDep


async def get_comment_repository(session: DBSession) -> CommentRepository:
    return CommentRepository(model=Comment, session=session)


CommentRepoDep = Annotated[CommentRepository, Depends(get_comment_repository)]


async def get_comment_service(
    repo: CommentRepoDep,
    post_repo: PostRepoDep,
    user_repo: UserRepoDep,
) -> CommentService:
    return CommentService(repo=repo, post_repo=post_repo, user_repo=user_repo)


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
