"""
File: socialconnect/core/middleware.py
Description: 中间件配置与实现

1. RequestLogMiddleware：
   - 生成 UUID v7 request_id 并写入 request.state
   - 绑定 Loguru 上下文，请求链路内的日志自动携带 request_id
   - 记录访问日志，回传 X-Request-ID 响应头
2. register_middlewares：统一注册 CORS 与请求日志中间件
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from uuid6 import uuid7

from socialconnect.core.config import settings
from socialconnect.core.logging import logger

# 跳过访问日志的路径（健康检查等高频低价值请求）
SKIP_LOG_PATHS: set[str] = {"/health", "/health/", "/favicon.ico"}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    全局请求日志中间件
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid7())
        request.state.request_id = request_id

        skip_log = request.url.path in SKIP_LOG_PATHS

        with logger.contextualize(request_id=request_id):
            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                # ExceptionHandler 未能兜住的异常，记录完整堆栈后继续抛出
                logger.bind(
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                ).opt(exception=exc).error("Request failed with unhandled exception")
                raise

            response.headers["X-Request-ID"] = request_id

            if not skip_log:
                logger.bind(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    client_ip=request.client.host if request.client else "unknown",
                ).info("{} {} -> {}", request.method, request.url.path, response.status_code)

            return response


def register_middlewares(app: FastAPI) -> None:
    """
    统一注册所有中间件。
    后注册的中间件先执行 (请求进入方向)。
    """
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    app.add_middleware(RequestLogMiddleware)
