"""structlog 配置 -- 供宿主应用（钱包后端、校验服务）启动时调用

库代码只通过 structlog.get_logger() 打点，从不自行配置日志。
"""

import logging
import os

import structlog

LOG_FORMATS = ("dev", "json")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog + 标准库 logging

    Args:
        log_format: "dev"（可读输出）或 "json"（结构化输出），
            None 时读取 SIWCO_LOG_FORMAT，默认 "dev"
        log_level: 日志级别名，None 时读取 SIWCO_LOG_LEVEL，默认 INFO
    """
    log_format = (log_format or os.environ.get("SIWCO_LOG_FORMAT", "dev")).lower()
    log_level = log_level or os.environ.get("SIWCO_LOG_LEVEL", "INFO")
    if log_format not in LOG_FORMATS:
        log_format = "dev"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(log_format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
