"""
File: socialconnect/domains/posts/schemas.py
Description: 帖子领域 Pydantic 模型 (Schema)

1. PostCreate / PostUpdate: 输入模型 (content / imageUrl / tags)
2. PostRead: 响应模型，附带作者信息 (author)

"必须有正文或图片" 需要结合数据库中的现值判断，由 Service 层校验。
"""

import re
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from socialconnect.core.schemas import CamelModel
from socialconnect.db.models.post import ContentType
from socialconnect.domains.users.schemas import AuthorSummary

CONTENT_MAX_LENGTH = 2000
TAG_MAX_LENGTH = 50
MAX_TAGS = 10

IMAGE_URL_PATTERN = re.compile(r"^https?://.+\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)
TAG_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def check_image_url(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not IMAGE_URL_PATTERN.match(value):
        raise ValueError(
            "Image URL must be an http(s) URL ending in .jpg, .jpeg, .png, .gif or .webp"
        )
    return value


def normalize_tags(values: list[str]) -> list[str]:
    """
    去空白、转小写、去重 (保持顺序)，并校验字符集与数量。
    """
    tags: list[str] = []
    for raw in values:
        tag = raw.strip().lower()
        if not tag:
            raise ValueError("Tags cannot be empty")
        if len(tag) > TAG_MAX_LENGTH:
            raise ValueError(f"Each tag must be at most {TAG_MAX_LENGTH} characters")
        if not TAG_PATTERN.match(tag):
            raise ValueError(
                "Tags may only contain letters, numbers, hyphens and underscores"
            )
        if tag not in tags:
            tags.append(tag)

    if len(tags) > MAX_TAGS:
        raise ValueError(f"A post can have at most {MAX_TAGS} tags")
    return tags


class PostCreate(CamelModel):
    content: str = Field(default="", max_length=CONTENT_MAX_LENGTH, description="正文")
    image_url: str | None = Field(default=None, description="图片 URL")
    tags: list[str] = Field(default_factory=list, description="标签 (最多 10 个)")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return v.strip()

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        return check_image_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class PostUpdate(CamelModel):
    """
    帖子更新模型 (白名单: content, imageUrl, tags)。
    imageUrl 显式传 null 表示移除图片。
    """

    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    image_url: str | None = None
    tags: list[str] | None = None

    @field_validator("content", "tags", mode="before")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return v.strip()

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str | None) -> str | None:
        return check_image_url(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class PostRead(CamelModel):
    id: UUID
    user_id: UUID
    author: AuthorSummary | None = None
    content: str
    image_url: str | None = None
    content_type: ContentType
    tags: list[str] = Field(default_factory=list)
    likes_count: int
    comments_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
