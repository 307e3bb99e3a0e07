"""
File: socialconnect/db/session.py
Description: 数据库会话管理 (Async SQLAlchemy)

本模块负责：
1. 创建全局 AsyncEngine (生产: postgresql+asyncpg，测试: sqlite+aiosqlite)
2. 连接池参数仅对服务端数据库生效
3. 创建 AsyncSession 工厂 (AsyncSessionLocal)
4. 集成 orjson 用于 JSON 字段 (Post.tags) 序列化
"""

from typing import Any

import orjson
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from socialconnect.core.config import settings


def _orjson_serializer(obj: Any) -> str:
    """orjson 返回 bytes，SQLAlchemy 需要 str，因此需 decode。"""
    return orjson.dumps(obj).decode("utf-8")


def _orjson_deserializer(obj: str | bytes) -> Any:
    return orjson.loads(obj)


def build_engine_kwargs(database_uri: str) -> dict[str, Any]:
    """
    按数据库后端组装引擎参数。
    SQLite 不支持 QueuePool 的 pool_size / max_overflow 等参数。
    """
    url = make_url(database_uri)
    kwargs: dict[str, Any] = {
        "echo": settings.DEBUG,
        "json_serializer": _orjson_serializer,
        "json_deserializer": _orjson_deserializer,
    }

    if url.get_backend_name() == "sqlite":
        return kwargs

    kwargs.update(
        pool_pre_ping=settings.DB_POOL_PRE_PING,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    if url.get_driver_name() == "asyncpg":
        kwargs["connect_args"] = {"ssl": False}
    return kwargs


engine: AsyncEngine = create_async_engine(
    str(settings.SQLALCHEMY_DATABASE_URI),
    **build_engine_kwargs(str(settings.SQLALCHEMY_DATABASE_URI)),
)

# expire_on_commit=False: commit 后访问属性不触发隐式 IO (Async 模式下不支持)
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def close_engine() -> None:
    """
    关闭数据库引擎，释放连接池资源。
    在应用 shutdown 阶段调用。
    """
    await engine.dispose()
