"""
File: tests/integration/test_auth_router.py
Description: 认证接口集成测试 (Token 校验、刷新、登出黑名单、登录状态)
"""

from datetime import timedelta
from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient
from jose import jwt

from socialconnect.core.config import settings
from socialconnect.core.security import create_access_token, create_refresh_token

API = settings.API_PREFIX


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_wrong_secret_and_expired_tokens_are_distinguished(
    client: AsyncClient, register: Any
) -> None:
    user = await register("tokens")
    user_id = user["user"]["id"]

    forged = jwt.encode(
        {"sub": user_id, "type": "access", "exp": 4102444800},
        "wrong-secret",
        algorithm=settings.ALGORITHM,
    )
    expired = create_access_token(user_id, expires_delta=timedelta(seconds=-1))

    invalid_res = await client.get(f"{API}/users/profile", headers=bearer(forged))
    expired_res = await client.get(f"{API}/users/profile", headers=bearer(expired))

    assert invalid_res.status_code == 401
    assert invalid_res.json()["code"] == "system.token_invalid"
    assert expired_res.status_code == 401
    assert expired_res.json()["code"] == "system.token_expired"


@pytest.mark.asyncio
async def test_malformed_authorization_header(client: AsyncClient) -> None:
    response = await client.get(
        f"{API}/users/profile", headers={"Authorization": "Token abc"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_rejected(client: AsyncClient) -> None:
    token = create_access_token(uuid4())

    response = await client.get(f"{API}/users/profile", headers=bearer(token))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_status(client: AsyncClient, register: Any) -> None:
    anonymous = await client.get(f"{API}/auth/status")
    assert anonymous.status_code == 401

    user = await register("status_user")
    response = await client.get(f"{API}/auth/status", headers=bearer(user["accessToken"]))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["authenticated"] is True
    assert data["user"]["username"] == "status_user"


@pytest.mark.asyncio
async def test_refresh_issues_new_access_token(client: AsyncClient, register: Any) -> None:
    user = await register("refresher")

    response = await client.post(
        f"{API}/auth/refresh", json={"refreshToken": user["refreshToken"]}
    )

    assert response.status_code == 200
    new_token = response.json()["data"]["accessToken"]
    profile = await client.get(f"{API}/users/profile", headers=bearer(new_token))
    assert profile.status_code == 200


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, register: Any) -> None:
    user = await register("wrong_type")

    response = await client.post(
        f"{API}/auth/refresh", json={"refreshToken": user["accessToken"]}
    )

    assert response.status_code == 401
    assert response.json()["code"] == "system.token_invalid"


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token(
    client: AsyncClient, register: Any, redis: Any
) -> None:
    user = await register("logout_user")
    refresh = user["refreshToken"]

    logout = await client.post(f"{API}/auth/logout", json={"refreshToken": refresh})
    assert logout.status_code == 200

    jti = jwt.get_unverified_claims(refresh)["jti"]
    assert await redis.exists(f"revoked_token:{jti}") == 1
    assert await redis.ttl(f"revoked_token:{jti}") > 0

    response = await client.post(f"{API}/auth/refresh", json={"refreshToken": refresh})
    assert response.status_code == 401
    assert response.json()["code"] == "auth.refresh_token_revoked"


@pytest.mark.asyncio
async def test_logout_with_expired_refresh_token_succeeds(client: AsyncClient) -> None:
    expired = create_refresh_token(uuid4(), expires_delta=timedelta(seconds=-1))

    response = await client.post(f"{API}/auth/logout", json={"refreshToken": expired})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_refresh_rejected_for_deactivated_user(
    client: AsyncClient, register: Any
) -> None:
    user = await register("gone_user")
    await client.delete(
        f"{API}/users/{user['user']['id']}", headers=bearer(user["accessToken"])
    )

    response = await client.post(
        f"{API}/auth/refresh", json={"refreshToken": user["refreshToken"]}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_providers(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "GITHUB_CLIENT_ID", None)

    response = await client.get(f"{API}/auth")

    assert response.status_code == 200
    providers = {p["name"]: p for p in response.json()["data"]}
    assert providers["google"] == {
        "name": "google",
        "enabled": True,
        "loginUrl": f"{API}/auth/google",
    }
    assert providers["github"]["enabled"] is False

    start = await client.get(f"{API}/auth/github")
    assert start.status_code == 503
    assert start.json()["code"] == "auth.provider_not_configured"
