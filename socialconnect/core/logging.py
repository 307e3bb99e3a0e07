"""
File: socialconnect/core/logging.py
Description: 全局日志配置模块 (Loguru)

本模块负责：
1. 接管标准库 logging (Uvicorn / FastAPI / SQLAlchemy)，统一转发到 Loguru
2. 配置控制台输出（开发环境彩色文本，生产环境 JSON）
3. 按配置启用文件日志，设置轮转 (Rotation) 和保留 (Retention) 策略
4. 日志行附带 request_id / user_id（由中间件与 Service 绑定）
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from socialconnect.core.config import settings

# 需要接管的第三方 logger 前缀
INTERCEPTED_LOGGERS: tuple[str, ...] = ("uvicorn", "fastapi", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """
    将 Python 标准库 logging 拦截并转发到 Loguru 的 Handler。
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 回溯调用栈，跳过 logging 模块自身的帧，保证行号指向真正的调用者
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            if frame.f_back:
                frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def format_record(record: dict[str, Any]) -> str:
    """
    自定义文本日志格式。
    上下文中存在 request_id / user_id 时附加到行尾。
    """
    format_string = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    extra = record["extra"]
    if extra.get("request_id"):
        format_string += " | <magenta>req_id={extra[request_id]}</magenta>"
    if extra.get("user_id"):
        format_string += " | <blue>user={extra[user_id]}</blue>"

    format_string += "\n{exception}"
    return format_string


def _sink_options(colorize: bool) -> dict[str, Any]:
    """构造 sink 通用参数；JSON 模式下使用 Loguru 内置序列化"""
    options: dict[str, Any] = {
        "level": settings.LOG_LEVEL,
        "enqueue": True,
        "backtrace": True,
        "diagnose": settings.LOG_DIAGNOSE,
    }
    if settings.LOG_JSON_FORMAT:
        options["serialize"] = True
    else:
        options["format"] = format_record
        options["colorize"] = colorize
    return options


def setup_logging() -> None:
    """
    初始化日志配置。
    在应用 lifespan 启动阶段调用。
    """
    # 1. 拦截标准库日志
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)

    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith(INTERCEPTED_LOGGERS):
            logging.getLogger(name).handlers = []
            logging.getLogger(name).propagate = True

    # 2. 重建 Loguru Sink
    logger.remove()

    # Sink 1: 控制台
    logger.add(sys.stdout, **_sink_options(colorize=True))

    # Sink 2: 文件 (按配置启用)
    if settings.LOG_FILE_ENABLED:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_options = _sink_options(colorize=False)
        file_options.update(
            {
                "rotation": settings.LOG_ROTATION,
                "retention": settings.LOG_RETENTION,
                "compression": settings.LOG_COMPRESSION,
            }
        )
        logger.add(str(log_dir / "socialconnect_{time:YYYY-MM-DD}.log"), **file_options)

    logger.bind(environment=settings.ENVIRONMENT).info("Logging configured")
