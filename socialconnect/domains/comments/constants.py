"""
File: socialconnect/domains/comments/constants.py
Description: 评论领域常量定义 (错误码 + 成功提示 + 排序字段)
Namespace: comments.*
"""

from enum import StrEnum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

from socialconnect.core.error_code import BaseErrorCode


class CommentError(BaseErrorCode):
    """
    评论领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    COMMENT_NOT_FOUND = (HTTP_404_NOT_FOUND, "comments.comment_not_found", "Comment not found")
    PARENT_NOT_FOUND = (
        HTTP_404_NOT_FOUND,
        "comments.parent_not_found",
        "Parent comment not found",
    )
    # 只支持一层回复，且父评论必须属于同一帖子
    INVALID_PARENT = (
        HTTP_400_BAD_REQUEST,
        "comments.invalid_parent",
        "Replies can only target a top-level comment of the same post",
    )
    NOT_OWNER = (
        HTTP_403_FORBIDDEN,
        "comments.not_owner",
        "You do not have permission to modify this comment",
    )


class CommentMsg:
    CREATED = "Comment created successfully"
    LIST = "Comments retrieved successfully"
    DETAIL = "Comment retrieved successfully"
    UPDATED = "Comment updated successfully"
    DELETED = "Comment deleted successfully"
    REPLIES = "Replies retrieved successfully"


class CommentSortField(StrEnum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    LIKES_COUNT = "likesCount"
