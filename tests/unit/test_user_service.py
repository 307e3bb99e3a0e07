"""
File: tests/unit/test_user_service.py
Description: 用户领域服务单元测试

1. 注册：密码哈希、唯一性校验 (邮箱 / 用户名)
2. 登录：邮箱或用户名、停用账号、OAuth 账号无密码
3. 修改密码
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.core.exceptions import AppException
from socialconnect.core.security import verify_password
from socialconnect.db.models.user import OAuthProvider, User
from socialconnect.domains.users.constants import UserError
from socialconnect.domains.users.repository import UserRepository
from socialconnect.domains.users.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    UserCreate,
)
from socialconnect.domains.users.service import UserService

# ------------------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------------------


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    repo = UserRepository(model=User, session=db_session)
    return UserService(repo=repo)


def make_user_in(username: str, email: str | None = None) -> UserCreate:
    return UserCreate(
        username=username,
        email=email or f"{username}@example.com",
        password="Secret123",
        first_name="Test",
        last_name="User",
    )


# ------------------------------------------------------------------------------
# Test Cases
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_register_hashes_password(user_service: UserService) -> None:
    session = await user_service.register(make_user_in("alice"))

    user = await user_service.repo.get(session.user.id)
    assert user is not None
    assert user.hashed_password != "Secret123"
    assert verify_password("Secret123", user.hashed_password)
    assert session.user.is_active is True
    assert session.access_token and session.refresh_token


@pytest.mark.asyncio
async def test_register_duplicate_email(user_service: UserService) -> None:
    await user_service.register(make_user_in("alice"))

    with pytest.raises(AppException) as exc_info:
        await user_service.register(make_user_in("alice2", email="ALICE@example.com"))

    assert exc_info.value.error is UserError.EMAIL_EXIST
    assert exc_info.value.http_status == 400


@pytest.mark.asyncio
async def test_register_duplicate_username(user_service: UserService) -> None:
    await user_service.register(make_user_in("alice"))

    with pytest.raises(AppException) as exc_info:
        await user_service.register(make_user_in("alice", email="other@example.com"))

    assert exc_info.value.error is UserError.USERNAME_EXIST


@pytest.mark.asyncio
async def test_login_with_email_or_username_updates_last_login(
    user_service: UserService,
) -> None:
    await user_service.register(make_user_in("bob"))

    by_name = await user_service.login(
        LoginRequest(email_or_username="bob", password="Secret123")
    )
    by_email = await user_service.login(
        LoginRequest(email_or_username="BOB@example.com", password="Secret123")
    )

    assert by_name.user.id == by_email.user.id
    assert by_email.user.last_login is not None


@pytest.mark.asyncio
async def test_login_failures(user_service: UserService) -> None:
    registered = await user_service.register(make_user_in("carol"))

    with pytest.raises(AppException) as exc_info:
        await user_service.login(LoginRequest(email_or_username="carol", password="Wrong123"))
    assert exc_info.value.error is UserError.INVALID_CREDENTIALS

    with pytest.raises(AppException) as exc_info:
        await user_service.login(LoginRequest(email_or_username="nobody", password="Secret123"))
    assert exc_info.value.error is UserError.INVALID_CREDENTIALS

    user = await user_service.repo.get(registered.user.id)
    await user_service.repo.deactivate(user)
    await user_service.repo.session.commit()

    with pytest.raises(AppException) as exc_info:
        await user_service.login(LoginRequest(email_or_username="carol", password="Secret123"))
    assert exc_info.value.error is UserError.ACCOUNT_INACTIVE


@pytest.mark.asyncio
async def test_inactive_account_hidden_behind_wrong_password(
    user_service: UserService,
) -> None:
    registered = await user_service.register(make_user_in("dormant"))
    user = await user_service.repo.get(registered.user.id)
    await user_service.repo.deactivate(user)
    await user_service.repo.session.commit()

    with pytest.raises(AppException) as exc_info:
        await user_service.login(LoginRequest(email_or_username="dormant", password="Wrong123"))

    # 密码错误时与不存在的账号表现一致
    assert exc_info.value.error is UserError.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_oauth_only_account_cannot_use_password(
    user_service: UserService, db_session: AsyncSession
) -> None:
    user = User(
        username="oauth_user",
        email="oauth@example.com",
        first_name="O",
        last_name="Auth",
        oauth_provider=OAuthProvider.GITHUB,
        oauth_id="99",
    )
    db_session.add(user)
    await db_session.commit()

    with pytest.raises(AppException) as exc_info:
        await user_service.login(
            LoginRequest(email_or_username="oauth_user", password="Secret123")
        )
    assert exc_info.value.error is UserError.INVALID_CREDENTIALS

    with pytest.raises(AppException) as exc_info:
        await user_service.change_password(
            user,
            ChangePasswordRequest(
                current_password="Secret123",
                new_password="Newpass456",
                confirm_password="Newpass456",
            ),
        )
    assert exc_info.value.error is UserError.PASSWORD_NOT_SET


@pytest.mark.asyncio
async def test_change_password(user_service: UserService) -> None:
    registered = await user_service.register(make_user_in("dave"))
    user = await user_service.repo.get(registered.user.id)

    with pytest.raises(AppException) as exc_info:
        await user_service.change_password(
            user,
            ChangePasswordRequest(
                current_password="Wrong123",
                new_password="Newpass456",
                confirm_password="Newpass456",
            ),
        )
    assert exc_info.value.error is UserError.CURRENT_PASSWORD_INCORRECT

    await user_service.change_password(
        user,
        ChangePasswordRequest(
            current_password="Secret123",
            new_password="Newpass456",
            confirm_password="Newpass456",
        ),
    )
    session = await user_service.login(
        LoginRequest(email_or_username="dave", password="Newpass456")
    )
    assert session.user.id == user.id
