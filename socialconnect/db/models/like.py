"""
File: socialconnect/db/models/like.py
Description: 点赞模型 (多态目标: Post | Comment)

- target_type + target_id 共同指向被点赞对象，target_id 不设外键
- (user_id, target_type, target_id) 唯一：每个用户对每个目标最多一条记录
- 取消点赞只翻转 is_active，不删除记录，点赞历史可追溯
"""

import uuid
from enum import StrEnum

from sqlalchemy import Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from socialconnect.db.models.base import LifecycleMixin, UUIDModel
from socialconnect.db.models.comment import Comment
from socialconnect.db.models.post import Post


class LikeTargetType(StrEnum):
    """点赞目标类型 (对外取值与历史数据保持一致)"""

    POST = "Post"
    COMMENT = "Comment"


class Like(UUIDModel, LifecycleMixin):
    """
    点赞记录
    """

    __table_args__ = (
        UniqueConstraint(
            "user_id", "target_type", "target_id", name="uq_like_user_target"
        ),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="点赞用户 ID",
    )

    target_type: Mapped[LikeTargetType] = mapped_column(
        Enum(
            LikeTargetType,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        comment="目标类型",
    )

    target_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False, index=True, comment="目标 ID"
    )


# 目标类型 -> 目标模型 (多态分派表)
LIKE_TARGET_MODELS: dict[LikeTargetType, type[UUIDModel]] = {
    LikeTargetType.POST: Post,
    LikeTargetType.COMMENT: Comment,
}
