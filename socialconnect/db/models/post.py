"""
File: socialconnect/db/models/post.py
Description: 帖子模型

要点:
- content_type 由内容与图片派生 (text / image / text_image)，每次写入前重新计算
- likes_count / comments_count 为冗余计数器，只通过原子 UPDATE 增减，永不为负
- tags 以 JSON 数组存储 (小写、去重、最多 10 个)
"""

import uuid
from enum import StrEnum

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    event,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from socialconnect.db.models.base import LifecycleMixin, UUIDModel


class ContentType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    TEXT_IMAGE = "text_image"


def resolve_content_type(content: str | None, image_url: str | None) -> ContentType:
    """有图有字 -> text_image；只有图 -> image；其余 -> text"""
    has_text = bool(content and content.strip())
    if image_url and has_text:
        return ContentType.TEXT_IMAGE
    if image_url:
        return ContentType.IMAGE
    return ContentType.TEXT


class Post(UUIDModel, LifecycleMixin):
    """
    帖子
    """

    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="likes_count_non_negative"),
        CheckConstraint("comments_count >= 0", name="comments_count_non_negative"),
    )

    # 不建立 ORM relationship，作者信息由 Service 层批量加载
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="作者 ID",
    )

    content: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default="", comment="正文 (≤2000)"
    )

    image_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="图片 URL"
    )

    content_type: Mapped[ContentType] = mapped_column(
        Enum(
            ContentType,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ContentType.TEXT,
        comment="内容类型 (派生字段)",
    )

    tags: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list, comment="标签列表"
    )

    likes_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"), comment="点赞数"
    )

    comments_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"), comment="评论数"
    )

    def refresh_content_type(self) -> None:
        self.content_type = resolve_content_type(self.content, self.image_url)


@event.listens_for(Post, "before_insert")
@event.listens_for(Post, "before_update")
def _derive_content_type(mapper, connection, target: Post) -> None:  # noqa: ANN001
    """持久化前重新计算派生字段"""
    target.refresh_content_type()
