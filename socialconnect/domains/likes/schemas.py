"""
File: socialconnect/domains/likes/schemas.py
Description: 点赞领域 Pydantic 模型 (Schema)

targetType 只接受 "Post" / "Comment"，其他取值在边界处按 400 拒绝。
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from socialconnect.core.schemas import CamelModel
from socialconnect.db.models.like import LikeTargetType
from socialconnect.domains.likes.constants import LikeAction
from socialconnect.domains.users.schemas import AuthorSummary


class LikeTarget(CamelModel):
    """点赞目标 (toggle / create 请求体)"""

    target_type: LikeTargetType = Field(..., description="Post 或 Comment")
    target_id: UUID = Field(..., description="目标 ID")


class LikeRead(CamelModel):
    id: UUID
    user_id: UUID
    user: AuthorSummary | None = None
    target_type: LikeTargetType
    target_id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ToggleResult(CamelModel):
    action: LikeAction
    liked: bool
    likes_count: int = Field(..., description="目标当前点赞数")
    like: LikeRead


class LikeCheck(CamelModel):
    liked: bool
    like: LikeRead | None = None
