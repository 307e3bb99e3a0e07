"""
File: socialconnect/domains/posts/constants.py
Description: 帖子领域常量定义 (错误码 + 成功提示 + 排序字段)
Namespace: posts.*
"""

from enum import StrEnum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

from socialconnect.core.error_code import BaseErrorCode


class PostError(BaseErrorCode):
    """
    帖子领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    POST_NOT_FOUND = (HTTP_404_NOT_FOUND, "posts.post_not_found", "Post not found")
    NOT_OWNER = (
        HTTP_403_FORBIDDEN,
        "posts.not_owner",
        "You do not have permission to modify this post",
    )
    CONTENT_REQUIRED = (
        HTTP_400_BAD_REQUEST,
        "posts.content_required",
        "Post must have content or an image",
    )
    EMPTY_UPDATE = (
        HTTP_400_BAD_REQUEST,
        "posts.empty_update",
        "At least one field must be provided for update",
    )
    SEARCH_QUERY_REQUIRED = (
        HTTP_400_BAD_REQUEST,
        "posts.search_query_required",
        "Search query is required",
    )


class PostMsg:
    CREATED = "Post created successfully"
    LIST = "Posts retrieved successfully"
    DETAIL = "Post retrieved successfully"
    UPDATED = "Post updated successfully"
    DELETED = "Post deleted successfully"
    SEARCH = "Search results retrieved successfully"
    FEED = "Recent posts retrieved successfully"
    BY_USER = "User posts retrieved successfully"


class PostSortField(StrEnum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    LIKES_COUNT = "likesCount"
    COMMENTS_COUNT = "commentsCount"
