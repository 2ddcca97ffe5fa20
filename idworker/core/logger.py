"""
idworker 日志系统模块
---------------------
支持：
✅ 控制台彩色日志
✅ 按天分割文件日志（配置 log.file 时启用）
✅ 标准 logging 转发到 Loguru
✅ 自动随 settings.app.debug 切换日志级别
"""

import logging
import sys

from loguru import logger


def _resolve_level(settings) -> str:
    if settings.app.debug:
        return "DEBUG"
    return settings.log.level.upper()


def init_logger(settings=None, intercept: bool = True):
    """
    初始化 Loguru 日志系统
    """
    if settings is None:
        from idworker.config.settings_manager import get_current_settings
        settings = get_current_settings()

    level = _resolve_level(settings)
    logger.remove()  # 移除默认配置
    logger.add(
        sys.stderr,
        level=level,
        backtrace=True,
        colorize=True,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
               "<level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
               "<level>{message}</level>",
    )
    if settings.log.file:
        logger.add(
            settings.log.file,
            rotation=settings.log.rotation,
            retention=settings.log.retention,
            level=level,
            enqueue=True,
            backtrace=True,
        )
    if intercept:
        logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.info(f"Logger initialized (level={level})")
    return logger


class InterceptHandler(logging.Handler):
    """将标准 logging 转发给 Loguru"""
    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
