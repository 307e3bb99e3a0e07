"""
File: socialconnect/domains/users/constants.py
Description: 用户领域常量定义 (错误码 + 成功提示 + 排序字段)
Namespace: users.*
"""

from enum import StrEnum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

from socialconnect.core.error_code import BaseErrorCode


class UserError(BaseErrorCode):
    """
    用户领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    # 唯一性冲突统一按 400 返回
    USERNAME_EXIST = (HTTP_400_BAD_REQUEST, "users.username_exist", "Username is already taken")
    EMAIL_EXIST = (HTTP_400_BAD_REQUEST, "users.email_exist", "Email is already registered")

    USER_NOT_FOUND = (HTTP_404_NOT_FOUND, "users.user_not_found", "User not found")

    # 登录失败: 用户不存在与密码错误返回同一文案，防止账号枚举
    INVALID_CREDENTIALS = (
        HTTP_401_UNAUTHORIZED,
        "users.invalid_credentials",
        "Invalid credentials",
    )
    ACCOUNT_INACTIVE = (HTTP_401_UNAUTHORIZED, "users.account_inactive", "User account is inactive")

    EMPTY_UPDATE = (
        HTTP_400_BAD_REQUEST,
        "users.empty_update",
        "At least one field must be provided for update",
    )
    CURRENT_PASSWORD_INCORRECT = (
        HTTP_400_BAD_REQUEST,
        "users.current_password_incorrect",
        "Current password is incorrect",
    )
    PASSWORD_NOT_SET = (
        HTTP_400_BAD_REQUEST,
        "users.password_not_set",
        "This account signs in with an OAuth provider and has no password",
    )

    NOT_OWNER = (
        HTTP_403_FORBIDDEN,
        "users.not_owner",
        "You do not have permission to modify this user",
    )


class UserMsg:
    """
    用户领域成功提示文案
    """

    CREATED = "User created successfully"
    LIST = "Users retrieved successfully"
    DETAIL = "User retrieved successfully"
    UPDATED = "User updated successfully"
    DELETED = "User deleted successfully"
    LOGIN_SUCCESS = "Login successful"
    PROFILE = "Profile retrieved successfully"
    PASSWORD_CHANGED = "Password changed successfully"


class UserSortField(StrEnum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    USERNAME = "username"
