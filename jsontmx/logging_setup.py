"""统一的日志初始化，以及按开关输出的配对/切分调试日志。"""

from __future__ import annotations

import logging
import os
from logging import Logger
from pathlib import Path
from typing import Any, Dict, Optional

from rich.logging import RichHandler

LOGGER_NAME = "jsontmx"
DEBUG_ENV_VAR = "JSONTMX_DEBUG"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_trace_enabled: bool = False


def init_logging(level: str, logfile: Optional[str | Path] = None) -> Logger:
    """初始化 ``jsontmx`` 日志器：控制台使用 Rich，可选写入 UTF-8 日志文件。"""

    level_upper = level.upper()
    logging_level = getattr(logging, level_upper, logging.INFO)  # 无法识别时回退到 INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging_level)
    if not getattr(logger, "_jsontmx_configured", False):
        logger.addHandler(RichHandler(rich_tracebacks=True, markup=False, show_path=False))
        logger.propagate = False
        setattr(logger, "_jsontmx_configured", True)

    if logfile:
        log_path = Path(logfile).expanduser().resolve()
        existing = next(
            (
                handler
                for handler in logger.handlers
                if isinstance(handler, logging.FileHandler)
                and handler.baseFilename == os.path.abspath(log_path)
            ),
            None,
        )
        if existing is not None:
            existing.setLevel(logging_level)  # 重复初始化时复用，避免日志行重复
        else:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(logging_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)

    logger.debug("Logging initialized at level %s", level_upper)
    return logger


def set_debug_logging(enabled: bool) -> None:
    """由 CLI 的 ``--debug`` 打开或关闭 jsontmx.debug 输出。"""

    global _trace_enabled
    _trace_enabled = bool(enabled)


def is_debug_logging_enabled() -> bool:
    """环境变量 JSONTMX_DEBUG 优先于 ``set_debug_logging`` 的设置。"""

    raw = os.getenv(DEBUG_ENV_VAR)
    if raw is not None:
        return raw.strip().lower() not in {"", "0", "false", "off"}
    return _trace_enabled


def make_log_limit(max_entries: int | None) -> Dict[str, Any]:
    """创建一个计数器，限制单次调用中调试日志的条数。"""

    return {"count": 0, "limit": max_entries}


def log_debug(message: str, *args: object, limit: Dict[str, Any] | None = None) -> None:
    """在调试开关打开时写入 ``jsontmx.debug``；*limit* 用尽后静默丢弃。"""

    if not is_debug_logging_enabled():
        return
    if limit is not None and limit.get("limit") is not None:
        if limit["count"] >= limit["limit"]:
            return
        limit["count"] += 1
    logging.getLogger(f"{LOGGER_NAME}.debug").info(message, *args)


__all__ = [
    "init_logging",
    "is_debug_logging_enabled",
    "log_debug",
    "make_log_limit",
    "set_debug_logging",
]
