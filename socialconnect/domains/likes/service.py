"""
File: socialconnect/domains/likes/service.py
Description: 点赞领域服务 (业务逻辑层)

Toggle 状态机 (每个 user + target 一条记录):
    无记录 --toggle--> 有效 (计数 +1)
    有效   --toggle--> 已取消 (计数 -1，下限 0)
    已取消 --toggle--> 有效 (计数 +1)

点赞记录与目标计数器在同一数据库事务内提交，任一步失败整体回滚。
目标模型由 LIKE_TARGET_MODELS 按 targetType 分派。
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from socialconnect.core.exceptions import AppException
from socialconnect.core.logging import logger
from socialconnect.core.schemas import PageParams, SortOrder
from socialconnect.core.security import authorize_owner
from socialconnect.db.models.like import LIKE_TARGET_MODELS, Like, LikeTargetType
from socialconnect.db.models.user import User
from socialconnect.db.repositories.base import BaseRepository
from socialconnect.domains.likes.constants import LikeAction, LikeError, LikeSortField
from socialconnect.domains.likes.repository import LikeRepository
from socialconnect.domains.likes.schemas import LikeCheck, LikeRead, LikeTarget, ToggleResult
from socialconnect.domains.users.constants import UserError
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import AuthorSummary

LIKES_COUNT = "likes_count"


class LikeService:
    """
    点赞领域服务。
    """

    def __init__(self, repo: LikeRepository, user_repo: UserRepository):
        self.repo = repo
        self.user_repo = user_repo

    def target_repo(self, target_type: LikeTargetType) -> BaseRepository[Any, Any, Any]:
        return BaseRepository(model=LIKE_TARGET_MODELS[target_type], session=self.repo.session)

    async def resolve_target(self, target_type: LikeTargetType, target_id: UUID) -> Any:
        """目标必须存在且有效"""
        target = await self.target_repo(target_type).get_active(target_id)
        if target is None:
            raise AppException(
                LikeError.TARGET_NOT_FOUND, message=f"{target_type.value} not found"
            )
        return target

    async def present(self, likes: Sequence[Like]) -> list[LikeRead]:
        users = await self.user_repo.get_summaries(like.user_id for like in likes)
        result = []
        for like in likes:
            user = users.get(like.user_id)
            result.append(
                LikeRead.model_validate(like).model_copy(
                    update={"user": AuthorSummary.model_validate(user) if user else None}
                )
            )
        return result

    async def present_one(self, like: Like) -> LikeRead:
        return (await self.present([like]))[0]

    # --------------------------------------------------------------------------
    # 写入
    # --------------------------------------------------------------------------

    async def toggle(self, user: User, obj_in: LikeTarget) -> ToggleResult:
        target = await self.resolve_target(obj_in.target_type, obj_in.target_id)
        like = await self.repo.get_for_target(user.id, obj_in.target_type, obj_in.target_id)

        if like is None:
            like = await self.repo.create({**obj_in.model_dump(), "user_id": user.id})
            liked = True
        elif like.is_active:
            like.deactivate()
            liked = False
        else:
            like.activate()
            liked = True

        await self.repo.session.flush()
        await self._adjust_counter(obj_in.target_type, obj_in.target_id, liked)
        await self.repo.session.commit()
        await self.repo.session.refresh(target)
        await self.repo.session.refresh(like)

        action = LikeAction.LIKED if liked else LikeAction.UNLIKED
        logger.bind(
            user_id=str(user.id),
            target_type=obj_in.target_type.value,
            target_id=str(obj_in.target_id),
            action=action.value,
        ).info("Like toggled")

        return ToggleResult(
            action=action,
            liked=liked,
            likes_count=target.likes_count,
            like=await self.present_one(like),
        )

    async def create(self, user: User, obj_in: LikeTarget) -> LikeRead:
        """
        显式点赞：已点赞返回 400；曾取消过的记录重新激活。
        """
        await self.resolve_target(obj_in.target_type, obj_in.target_id)
        like = await self.repo.get_for_target(user.id, obj_in.target_type, obj_in.target_id)

        if like is not None and like.is_active:
            raise AppException(LikeError.ALREADY_LIKED)

        if like is None:
            like = await self.repo.create({**obj_in.model_dump(), "user_id": user.id})
        else:
            like.activate()
            await self.repo.session.flush()

        await self._adjust_counter(obj_in.target_type, obj_in.target_id, True)
        await self.repo.session.commit()
        await self.repo.session.refresh(like)

        logger.bind(user_id=str(user.id), like_id=str(like.id)).info("Like created")
        return await self.present_one(like)

    async def delete(self, like_id: UUID, user: User) -> None:
        """取消点赞 (仅本人)：停用记录并递减目标计数"""
        like = await self.get_active_like(like_id)
        authorize_owner(like.user_id, user.id, LikeError.NOT_OWNER)

        await self.repo.deactivate(like)
        await self._adjust_counter(like.target_type, like.target_id, False)
        await self.repo.session.commit()

        logger.bind(user_id=str(user.id), like_id=str(like_id)).info("Like deleted")

    async def _adjust_counter(
        self, target_type: LikeTargetType, target_id: UUID, liked: bool
    ) -> None:
        target_repo = self.target_repo(target_type)
        if liked:
            await target_repo.increment(target_id, LIKES_COUNT)
        else:
            await target_repo.decrement(target_id, LIKES_COUNT)

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def get_active_like(self, like_id: UUID) -> Like:
        like = await self.repo.get_active(like_id)
        if like is None:
            raise AppException(LikeError.LIKE_NOT_FOUND)
        return like

    async def get(self, like_id: UUID) -> LikeRead:
        return await self.present_one(await self.get_active_like(like_id))

    async def list_likes(
        self,
        params: PageParams,
        sort_by: LikeSortField,
        sort_order: SortOrder,
        target_type: LikeTargetType | None = None,
    ) -> tuple[list[LikeRead], int]:
        likes, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            sort_by=sort_by,
            sort_order=sort_order,
            target_type=target_type,
        )
        return await self.present(likes), total

    async def list_by_target(
        self, target_type: LikeTargetType, target_id: UUID, params: PageParams
    ) -> tuple[list[LikeRead], int]:
        await self.resolve_target(target_type, target_id)
        likes, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            target_type=target_type,
            target_id=target_id,
        )
        return await self.present(likes), total

    async def list_by_user(
        self,
        user_id: UUID,
        params: PageParams,
        target_type: LikeTargetType | None = None,
    ) -> tuple[list[LikeRead], int]:
        if await self.user_repo.get_active(user_id) is None:
            raise AppException(UserError.USER_NOT_FOUND)

        likes, total = await self.repo.list_active(
            page=params.page,
            limit=params.limit,
            target_type=target_type,
            user_id=user_id,
        )
        return await self.present(likes), total

    async def check(
        self, user: User, target_type: LikeTargetType, target_id: UUID
    ) -> LikeCheck:
        like = await self.repo.get_for_target(user.id, target_type, target_id)
        if like is None or not like.is_active:
            return LikeCheck(liked=False)
        return LikeCheck(liked=True, like=await self.present_one(like))
