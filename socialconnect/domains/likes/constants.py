"""
File: socialconnect/domains/likes/constants.py
Description: 点赞领域常量定义 (错误码 + 成功提示 + 排序字段 + 动作)
Namespace: likes.*
"""

from enum import StrEnum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

from socialconnect.core.error_code import BaseErrorCode


class LikeError(BaseErrorCode):
    """
    点赞领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    LIKE_NOT_FOUND = (HTTP_404_NOT_FOUND, "likes.like_not_found", "Like not found")
    TARGET_NOT_FOUND = (HTTP_404_NOT_FOUND, "likes.target_not_found", "Like target not found")
    ALREADY_LIKED = (HTTP_400_BAD_REQUEST, "likes.already_liked", "You have already liked this")
    NOT_OWNER = (
        HTTP_403_FORBIDDEN,
        "likes.not_owner",
        "You do not have permission to remove this like",
    )


class LikeMsg:
    LIKED = "Liked successfully"
    UNLIKED = "Like removed successfully"
    CREATED = "Like created successfully"
    DELETED = "Like deleted successfully"
    LIST = "Likes retrieved successfully"
    DETAIL = "Like retrieved successfully"
    CHECK = "Like status retrieved successfully"


class LikeAction(StrEnum):
    LIKED = "liked"
    UNLIKED = "unliked"


class LikeSortField(StrEnum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
