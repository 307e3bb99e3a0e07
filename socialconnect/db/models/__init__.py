"""
File: socialconnect/db/models/__init__.py
Description: ORM 模型注册表

导入全部业务模型，供 Alembic (env.py) 与测试 create_all 发现 metadata。
新增模型必须在此处导入。
"""

from socialconnect.db.models.base import (
    Base,
    LifecycleMixin,
    TimestampMixin,
    UUIDBase,
    UUIDModel,
)
from socialconnect.db.models.comment import Comment
from socialconnect.db.models.like import Like, LikeTargetType
from socialconnect.db.models.post import ContentType, Post
from socialconnect.db.models.user import OAuthProvider, User

__all__ = [
    # 基类
    "Base",
    "UUIDBase",
    "UUIDModel",
    "TimestampMixin",
    "LifecycleMixin",
    # 业务模型
    "User",
    "OAuthProvider",
    "Post",
    "ContentType",
    "Comment",
    "Like",
    "LikeTargetType",
]
