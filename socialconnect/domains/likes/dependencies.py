"""
File: socialconnect/domains/likes/dependencies.py
Description: 点赞领域依赖注入 (DI)
"""

from typing import Annotated

from fastapi import Depends

from socialconnect.api.deps import DBSession
from socialconnect.db.models.like import Like
from socialconnect.domains.likes.repository import LikeRepository
from socialconnect.domains.likes.service import LikeService
from socialconnect.domains.users.dependencies import UserRepoDep


async def get_like_repository(session: DBSession) -> LikeRepository:
    return LikeRepository(model=Like, session=session)


LikeRepoDep = Annotated[LikeRepository, Depends(get_like_repository)]


async def get_like_service(repo: LikeRepoDep, user_repo: UserRepoDep) -> LikeService:
    return LikeService(repo=repo, user_repo=user_repo)


LikeServiceDep = Annotated[LikeService, Depends(get_like_service)]
