"""
File: alembic/env.py
Description: Alembic 迁移环境配置 (同步驱动)

策略：
- 迁移 (Migration): postgresql+psycopg (同步)，避免在迁移脚本中管理事件循环
- 运行 (Runtime): postgresql+asyncpg (异步)
两者共用 settings.SQLALCHEMY_DATABASE_URI，这里只替换驱动名。
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool

from alembic import context  # type: ignore

# ------------------------------------------------------------------------------
# 0. 将项目根目录加入 sys.path (未 pip install 时也能直接运行 alembic)
# ------------------------------------------------------------------------------
sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

from socialconnect.core.config import settings
from socialconnect.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# 异步驱动 -> 同步驱动
SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}


def build_sync_url(async_url: str) -> str:
    for async_driver, sync_driver in SYNC_DRIVERS.items():
        if async_url.startswith(f"{async_driver}://"):
            return sync_driver + async_url[len(async_driver) :]
    return async_url


# configparser 会对 % 做插值，需要转义
config.set_main_option(
    "sqlalchemy.url",
    build_sync_url(str(settings.SQLALCHEMY_DATABASE_URI)).replace("%", "%%"),
)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """离线模式迁移：生成 SQL 脚本而不实际连接数据库"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """在线模式迁移：连接数据库并执行迁移"""
    connectable = create_engine(
        config.get_main_option("sqlalchemy.url") or "",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
