"""
File: socialconnect/main.py
Description: FastAPI 应用入口与工厂函数

本模块负责：
1. 创建 FastAPI 应用实例 (默认响应类为 ORJSONResponse)
2. 管理应用生命周期 (lifespan): 启动日志、关闭数据库与 Redis 连接
3. 组装全局组件：中间件、异常处理器、路由
4. 提供健康检查 (/health) 与系统入口 (/)
"""

import asyncio
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# ------------------------------------------------------------------------------
# [Fix for Windows] asyncpg 需要 SelectorEventLoop，必须在事件循环启动前设置
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from socialconnect.api_router import api_router
from socialconnect.core.config import settings
from socialconnect.core.exceptions import register_exception_handlers
from socialconnect.core.logging import setup_logging
from socialconnect.core.middleware import register_middlewares
from socialconnect.core.redis import close_redis
from socialconnect.core.response import ResponseModel
from socialconnect.db.session import close_engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    应用生命周期管理器。
    """
    setup_logging()

    yield

    await close_redis()
    await close_engine()


def create_app() -> FastAPI:
    """应用工厂函数"""

    docs_url = f"{settings.API_PREFIX}/docs"

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=docs_url,
        redoc_url=f"{settings.API_PREFIX}/redoc",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # 1. 中间件 (CORS, RequestID, 访问日志)
    register_middlewares(app)

    # 2. 异常处理器
    register_exception_handlers(app)

    # 3. 业务路由
    app.include_router(api_router, prefix=settings.API_PREFIX)

    # 4. 健康检查 (不带业务前缀，供负载均衡器探测)
    @app.get(
        "/health",
        tags=["health"],
        summary="健康检查",
        response_model=ResponseModel[dict[str, str]],
    )
    async def health_check(request: Request):
        return ResponseModel.ok(
            data={"status": "ok"},
            request_id=getattr(request.state, "request_id", None),
        )

    # 5. 根路由
    @app.get(
        "/",
        tags=["root"],
        summary="系统入口",
        response_model=ResponseModel[dict[str, str]],
    )
    async def root(request: Request):
        """
        返回欢迎信息及文档、健康检查地址。
        """
        return ResponseModel.ok(
            request_id=getattr(request.state, "request_id", None),
            message=f"Welcome to {settings.PROJECT_NAME}",
            data={
                "status": "running",
                "docs_url": docs_url,
                "health_url": "/health",
                "api_prefix": settings.API_PREFIX,
            },
        )

    return app


# 暴露给 Uvicorn 运行的应用实例
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
