"""
File: socialconnect/domains/users/dependencies.py
Description: 用户领域依赖注入 (DI)

依赖链：
DBSession → UserRepository → UserService → UserServiceDep

其他领域 (帖子、评论、点赞) 复用 UserRepoDep 批量加载作者信息。
"""

from typing import Annotated

from fastapi import Depends

from socialconnect.api.deps import DBSession
from socialconnect.db.models.user import User
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.service import UserService


async def get_user_repository(session: DBSession) -> UserRepository:
    """
    获取用户仓储实例 (UserRepository)。
    """
    return UserRepository(model=User, session=session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


async def get_user_service(repo: UserRepoDep) -> UserService:
    """
    获取用户服务实例 (UserService)。
    """
    return UserService(repo=repo)


# Router 中只需写: service: UserServiceDep
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
