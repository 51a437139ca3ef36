"""structlog 配置模块

TASKTRACK_LOG_FORMAT: dev（默认，控制台可读输出）/ json（结构化输出）
TASKTRACK_LOG_LEVEL: 根 logger 级别，默认 INFO
TASKTRACK_LOG_REDACT_EMAILS: 默认 true，日志中的邮箱只保留首字母与域名
LOGFIRE_SEND_TO_LOGFIRE: true 时启用 Logfire APM（需安装 apm extra）
"""

import logging
import os

import structlog

# 这些库在 DEBUG 级别下输出过多，固定为 WARNING
_NOISY_LOGGERS = ("aiosqlite", "multipart", "python_multipart")

# 可能携带邮箱的事件字段
_EMAIL_KEYS = frozenset({"email", "emails", "author_email"})


def mask_email(value: str) -> str:
    """a.user@example.com -> a***@example.com"""
    local, sep, domain = value.partition("@")
    if not sep or not local:
        return value
    return f"{local[0]}***@{domain}"


def redact_emails(_logger, _method_name: str, event_dict: dict) -> dict:
    """structlog processor：遮蔽事件中的邮箱字段"""
    for key in event_dict.keys() & _EMAIL_KEYS:
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = mask_email(value)
        elif isinstance(value, list | tuple):
            event_dict[key] = [mask_email(v) if isinstance(v, str) else v for v in value]
    return event_dict


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


def _shared_processors() -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if _env_flag("TASKTRACK_LOG_REDACT_EMAILS", "true"):
        processors.append(redact_emails)
    return processors


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging() -> None:
    """初始化 structlog + 标准库 logging（stdlib 日志经同一处理链渲染）"""
    log_format = os.environ.get("TASKTRACK_LOG_FORMAT", "dev")
    log_level = os.environ.get("TASKTRACK_LOG_LEVEL", "INFO").upper()
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(log_format),
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logfire() -> None:
    """Logfire 可选初始化；未启用或初始化失败时只保留本地日志"""
    if not _env_flag("LOGFIRE_SEND_TO_LOGFIRE", "false"):
        return
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi()
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
        )
