"""
File: socialconnect/db/models/comment.py
Description: 评论模型 (支持一层回复)
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from socialconnect.db.models.base import LifecycleMixin, UUIDModel


class Comment(UUIDModel, LifecycleMixin):
    """
    评论

    parent_comment_id 为空表示顶层评论；非空表示对某条顶层评论的回复。
    """

    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="likes_count_non_negative"),
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="所属帖子 ID",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="作者 ID",
    )

    content: Mapped[str] = mapped_column(
        String(500), nullable=False, comment="评论内容 (1-500)"
    )

    parent_comment_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        comment="父评论 ID",
    )

    likes_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"), comment="点赞数"
    )

    is_edited: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="是否被编辑过",
    )

    @property
    def is_reply(self) -> bool:
        return self.parent_comment_id is not None
