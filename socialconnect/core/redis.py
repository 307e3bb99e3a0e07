"""
File: socialconnect/core/redis.py
Description: Redis 客户端管理 (Async)

用途：
1. Refresh Token 黑名单 (登出后失效)
2. OAuth state 随机串 (防 CSRF)
3. OAuth 一次性兑换码 (避免 Token 出现在重定向 URL 中)

使用 decode_responses=True，读取结果自动解码为 str。
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis, from_url

from socialconnect.core.config import settings

# 全局 Redis 客户端实例，内部维护连接池
redis_client: Redis = from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
)


async def get_redis() -> AsyncGenerator[Redis, None]:
    """
    获取 Redis 客户端依赖。
    测试中通过 dependency_overrides 替换为 fakeredis。
    """
    yield redis_client


RedisDep = Annotated[Redis, Depends(get_redis)]


async def close_redis() -> None:
    """
    关闭 Redis 连接池。
    在应用 lifespan shutdown 阶段调用。
    """
    await redis_client.aclose()
