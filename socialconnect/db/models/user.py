"""
File: socialconnect/db/models/user.py
Description: 用户账号模型 (凭证 + 资料 + OAuth 关联)

继承自 UUIDModel 和 LifecycleMixin，自动拥有：
1. UUID v7 主键
2. created_at / updated_at (UTC)
3. is_active / deactivated_at (软删除)

约束:
- 用户名、邮箱全局唯一
- 至少存在一种登录凭证: 密码哈希 或 OAuth 提供方
- 同一 OAuth 提供方下外部 ID 唯一
"""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, DateTime, Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, validates

from socialconnect.db.models.base import LifecycleMixin, UUIDModel, utcnow


class OAuthProvider(StrEnum):
    """支持的第三方登录提供方"""

    GOOGLE = "google"
    GITHUB = "github"


class User(UUIDModel, LifecycleMixin):
    """
    用户模型
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "users"

    __table_args__ = (
        CheckConstraint(
            "hashed_password IS NOT NULL OR oauth_provider IS NOT NULL",
            name="credential_present",
        ),
        UniqueConstraint("oauth_provider", "oauth_id", name="uq_users_oauth_identity"),
    )

    # --------------------------------------------------------------------------
    # 核心凭证
    # --------------------------------------------------------------------------

    username: Mapped[str] = mapped_column(
        String(30), unique=True, nullable=False, comment="用户名 (唯一)"
    )

    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, comment="邮箱 (唯一，小写存储)"
    )

    # OAuth 账号可以没有本地密码
    hashed_password: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="密码哈希值 (bcrypt)"
    )

    # --------------------------------------------------------------------------
    # 基础资料
    # --------------------------------------------------------------------------

    first_name: Mapped[str] = mapped_column(String(50), nullable=False, comment="名")
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, comment="姓")

    profile_picture: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="头像 URL"
    )

    bio: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="个人简介"
    )

    # --------------------------------------------------------------------------
    # OAuth 关联 (每个账号最多关联一个提供方)
    # --------------------------------------------------------------------------

    oauth_provider: Mapped[OAuthProvider | None] = mapped_column(
        Enum(
            OAuthProvider,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
        comment="OAuth 提供方",
    )

    oauth_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True, comment="提供方侧的用户 ID"
    )

    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="最近登录时间 (UTC)"
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return value.strip().lower()

    def touch_login(self) -> None:
        """刷新最近登录时间"""
        self.last_login = utcnow()
