"""
File: socialconnect/domains/users/schemas.py
Description: 用户领域 Pydantic 模型 (Schema)

1. UserCreate: 注册参数 (包含密码明文)
2. UserUpdate: 资料更新参数 (白名单字段，全部可选)
3. LoginRequest / ChangePasswordRequest: 登录与修改密码
4. UserRead / AuthorSummary: 响应模型 (屏蔽密码哈希)

规范：
- 对外字段统一 camelCase (CamelModel)
- 校验失败的文案直接说明未满足的规则，由全局处理器转换为字段级错误
"""

import re
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, ValidationInfo, field_validator

from socialconnect.core.schemas import CamelModel
from socialconnect.db.models.user import OAuthProvider

# ------------------------------------------------------------------------------
# Constants & Rule Helpers (校验规则)
# ------------------------------------------------------------------------------

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
URL_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
NAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 500
PASSWORD_MIN_LENGTH = 6


def check_username(value: str) -> str:
    value = value.strip()
    if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
        raise ValueError(
            f"Username must be between {USERNAME_MIN_LENGTH} and "
            f"{USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username can only contain letters, numbers and underscores")
    return value


def check_person_name(value: str) -> str:
    """名/姓: 1-50 个字符，只允许字母 (含重音等 Unicode 字母) 与空格"""
    value = value.strip()
    if not 1 <= len(value) <= NAME_MAX_LENGTH:
        raise ValueError(f"Name must be between 1 and {NAME_MAX_LENGTH} characters")
    if not all(ch.isalpha() or ch == " " for ch in value):
        raise ValueError("Name can only contain letters and spaces")
    return value


def check_password_strength(value: str) -> str:
    """密码强度: 至少 6 位，且同时包含小写字母、大写字母和数字"""
    unmet: list[str] = []
    if len(value) < PASSWORD_MIN_LENGTH:
        unmet.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    if not any(ch.islower() for ch in value):
        unmet.append("one lowercase letter")
    if not any(ch.isupper() for ch in value):
        unmet.append("one uppercase letter")
    if not any(ch.isdigit() for ch in value):
        unmet.append("one number")
    if unmet:
        raise ValueError(f"Password must contain {', '.join(unmet)}")
    return value


def check_url(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    value = value.strip()
    if not URL_PATTERN.match(value):
        raise ValueError("Must be a valid http(s) URL")
    return value


# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class UserCreate(CamelModel):
    """
    用户注册模型。
    """

    username: str = Field(..., description="用户名 (3-30，字母数字下划线)", examples=["maria_dev"])
    email: EmailStr = Field(..., description="邮箱 (唯一)")
    password: str = Field(..., max_length=128, description="明文密码")
    first_name: str = Field(..., description="名")
    last_name: str = Field(..., description="姓")
    profile_picture: str | None = Field(default=None, description="头像 URL")
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH, description="个人简介")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return check_person_name(v)

    @field_validator("profile_picture")
    @classmethod
    def validate_picture(cls, v: str | None) -> str | None:
        return check_url(v)


class UserUpdate(CamelModel):
    """
    用户资料更新模型。
    仅白名单字段会被接收，其余字段 (密码、状态等) 被忽略。
    """

    username: str | None = None
    email: EmailStr | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None
    bio: str | None = Field(default=None, max_length=BIO_MAX_LENGTH)

    @field_validator("username", "email", "first_name", "last_name", mode="before")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return check_person_name(v)

    @field_validator("profile_picture")
    @classmethod
    def validate_picture(cls, v: str | None) -> str | None:
        return check_url(v)


class LoginRequest(CamelModel):
    """
    登录请求：邮箱或用户名 + 密码
    """

    email_or_username: str = Field(..., min_length=1, description="邮箱或用户名")
    password: str = Field(..., min_length=1, description="密码")

    @field_validator("email_or_username")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Email or username is required")
        return v


class ChangePasswordRequest(CamelModel):
    """
    修改密码请求。
    字段按声明顺序校验，后续字段可通过 info.data 读取前面已通过校验的值。
    """

    current_password: str = Field(..., min_length=1, description="当前密码")
    new_password: str = Field(..., max_length=128, description="新密码")
    confirm_password: str = Field(..., description="确认新密码")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str, info: ValidationInfo) -> str:
        check_password_strength(v)
        if v == info.data.get("current_password"):
            raise ValueError("New password must be different from the current password")
        return v

    @field_validator("confirm_password")
    @classmethod
    def validate_confirmation(cls, v: str, info: ValidationInfo) -> str:
        if "new_password" in info.data and v != info.data["new_password"]:
            raise ValueError("Password confirmation does not match the new password")
        return v


# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class AuthorSummary(CamelModel):
    """嵌入在帖子、评论、点赞中的作者信息"""

    id: UUID
    username: str
    first_name: str
    last_name: str
    profile_picture: str | None = None


class UserRead(CamelModel):
    """
    用户读取模型 (响应)。
    """

    id: UUID = Field(..., description="用户 ID (UUID v7)")
    username: str
    email: str
    first_name: str
    last_name: str
    profile_picture: str | None = None
    bio: str | None = None
    is_active: bool = Field(..., description="账号状态")
    oauth_provider: OAuthProvider | None = Field(default=None, description="OAuth 提供方")
    last_login: datetime | None = None
    created_at: datetime = Field(..., description="创建时间 (UTC)")
    updated_at: datetime = Field(..., description="更新时间 (UTC)")
