"""
File: tests/conftest.py
Description: Pytest 全局 Fixtures 配置 (Async + 内存数据库 + fakeredis)

1. 每个测试使用独立的内存 SQLite (StaticPool)，表结构由 metadata.create_all 创建
2. Redis 替换为 fakeredis，OAuth 提供方替换为 httpx.MockTransport
3. 环境变量必须在导入 socialconnect 之前设置 (settings 在导入时实例化)
"""

import asyncio
import os
import sys
from collections.abc import AsyncGenerator, Callable
from typing import Any

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ------------------------------------------------------------------------------
# 1. 环境配置 (导入应用之前)
# ------------------------------------------------------------------------------
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-access-tokens-0123456789")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-secret-key-for-refresh-tokens-0123456789")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "local"
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ["OAUTH_CALLBACK_BASE_URL"] = "http://api.test"
os.environ["GOOGLE_CLIENT_ID"] = "google-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "google-client-secret"
os.environ["GITHUB_CLIENT_ID"] = "github-client-id"
os.environ["GITHUB_CLIENT_SECRET"] = "github-client-secret"

import httpx
import pytest
import pytest_asyncio
from fakeredis import aioredis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from socialconnect.api.deps import get_db
from socialconnect.core.config import settings
from socialconnect.core.redis import get_redis
from socialconnect.db.models import Base
from socialconnect.domains.auth.router import get_oauth_http_client
from socialconnect.main import app

API = settings.API_PREFIX

DEFAULT_PASSWORD = "Secret123"


# ------------------------------------------------------------------------------
# 2. 基础设施 Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    内存 SQLite 引擎。StaticPool 保证所有会话共用同一连接 (同一个内存库)。
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """服务层单元测试使用的会话"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def redis() -> AsyncGenerator[aioredis.FakeRedis, None]:
    client = aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def oauth_handler() -> dict[str, Callable[[httpx.Request], httpx.Response]]:
    """
    OAuth 提供方模拟：测试通过 handler["fn"] 指定响应逻辑。
    默认返回 500，未设置时任何提供方调用都会失败。
    """
    return {"fn": lambda request: httpx.Response(500, json={"error": "not mocked"})}


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    redis: aioredis.FakeRedis,
    oauth_handler: dict[str, Callable[[httpx.Request], httpx.Response]],
) -> AsyncGenerator[AsyncClient, None]:
    """
    获取异步 HTTP 客户端。每个请求使用新的数据库会话，与生产行为一致。
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    async def override_get_redis() -> AsyncGenerator[Any, None]:
        yield redis

    async def override_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        transport = httpx.MockTransport(lambda request: oauth_handler["fn"](request))
        async with httpx.AsyncClient(transport=transport) as http:
            yield http

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_oauth_http_client] = override_http_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ------------------------------------------------------------------------------
# 3. 业务辅助 Fixtures
# ------------------------------------------------------------------------------


def user_payload(username: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": DEFAULT_PASSWORD,
        "firstName": "Maria",
        "lastName": "Lopez",
    }
    payload.update(overrides)
    return payload


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: AsyncClient) -> Callable[..., Any]:
    """
    注册用户并返回 data: {user, accessToken, refreshToken, ...}
    """

    async def _register(username: str, **overrides: Any) -> dict[str, Any]:
        response = await client.post(f"{API}/users", json=user_payload(username, **overrides))
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def create_post(client: AsyncClient) -> Callable[..., Any]:
    async def _create_post(token: str, **payload: Any) -> dict[str, Any]:
        body = payload or {"content": "Hello world"}
        response = await client.post(f"{API}/posts", json=body, headers=auth_header(token))
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create_post
