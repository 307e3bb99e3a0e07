"""
File: socialconnect/domains/comments/schemas.py
Description: 评论领域 Pydantic 模型 (Schema)
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from socialconnect.core.schemas import CamelModel
from socialconnect.domains.users.schemas import AuthorSummary

CONTENT_MAX_LENGTH = 500


def check_comment_content(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Comment content cannot be empty")
    if len(value) > CONTENT_MAX_LENGTH:
        raise ValueError(f"Comment content must be at most {CONTENT_MAX_LENGTH} characters")
    return value


class CommentCreate(CamelModel):
    post_id: UUID = Field(..., description="所属帖子 ID")
    content: str = Field(..., description="评论内容 (1-500)")
    parent_comment_id: UUID | None = Field(default=None, description="回复的顶层评论 ID")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return check_comment_content(v)


class CommentUpdate(CamelModel):
    """仅允许修改正文"""

    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return check_comment_content(v)


class CommentRead(CamelModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    author: AuthorSummary | None = None
    content: str
    parent_comment_id: UUID | None = None
    likes_count: int
    is_edited: bool
    is_active: bool
    replies_count: int | None = Field(default=None, description="回复数 (仅帖子评论列表返回)")
    created_at: datetime
    updated_at: datetime
