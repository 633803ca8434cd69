"""
日志管理

基于标准库 logging + dictConfig：控制台与滚动文件输出、JSON 结构化日志、
敏感信息脱敏。所有 logger 位于 ``draftless.`` 命名空间下。
"""
import json
import logging
import logging.config
import re
import sys
import traceback
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_settings
from .constants import LoggingConstants

ROOT_LOGGER_NAME = "draftless"

# 结构化日志中单独提升为顶层字段的上下文键
_CONTEXT_KEYS = ("request_id", "document_id", "checkpoint_id", "project_id")


class SensitiveDataFilter(logging.Filter):
    """脱敏过滤器：遮盖 API 密钥与令牌，并截断过长的消息"""

    SENSITIVE_PATTERNS = [
        (re.compile(r'api_key["\']?\s*[:=]\s*["\']?([^"\'}\s,]+)', re.IGNORECASE), 'api_key'),
        (re.compile(r'token["\']?\s*[:=]\s*["\']?([^"\'}\s,]+)', re.IGNORECASE), 'token'),
        (re.compile(r'authorization:\s*bearer\s+([^\s]+)', re.IGNORECASE), 'auth_token'),
        (re.compile(r'\bsk-[a-zA-Z0-9\-_]{16,}'), 'api_key'),
    ]

    def __init__(self, max_length: int = LoggingConstants.MAX_MESSAGE_LENGTH):
        super().__init__()
        self.max_length = max_length

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        record.msg = self._truncate(self._mask_sensitive_data(message))
        record.args = None
        return True

    def _mask_sensitive_data(self, text: str) -> str:
        for pattern, field_type in self.SENSITIVE_PATTERNS:
            text = pattern.sub(f'{field_type}=***masked***', text)
        return text

    def _truncate(self, text: str) -> str:
        if len(text) <= self.max_length:
            return text
        return f"{text[:self.max_length]}...(已截断 {len(text) - self.max_length} 字符)"


class StructuredFormatter(logging.Formatter):
    """JSON 格式化器，每条记录一行"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}:{record.funcName}:{record.lineno}",
        }

        extra_data = getattr(record, 'extra_data', None) or {}
        for key in _CONTEXT_KEYS:
            if key in extra_data:
                entry[key] = extra_data[key]
            elif hasattr(record, key):
                entry[key] = getattr(record, key)
        entry['context'] = {k: v for k, v in extra_data.items() if k not in _CONTEXT_KEYS}

        if record.exc_info:
            entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def _rotating_file(log_dir: Path, filename: str, level: str, formatter: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(log_dir / filename),
        "maxBytes": LoggingConstants.MAX_LOG_FILE_SIZE,
        "backupCount": LoggingConstants.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": ["sensitive_filter"],
    }


def get_logging_config() -> Dict[str, Any]:
    """构建 dictConfig 配置"""
    settings = get_settings()
    log_level = settings.LOG_LEVEL.upper()
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    production = settings.ENVIRONMENT == "production"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "structured": {"()": StructuredFormatter},
        },
        "filters": {
            "sensitive_filter": {"()": SensitiveDataFilter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "structured" if production else "default",
                "stream": sys.stdout,
                "filters": ["sensitive_filter"],
            },
            "file": _rotating_file(log_dir, "draftless.log", "INFO", "default"),
            "error_file": _rotating_file(log_dir, "error.log", "ERROR", "default"),
            "events_file": _rotating_file(log_dir, "events.log", "INFO", "structured"),
        },
        "loggers": {
            ROOT_LOGGER_NAME: {
                "level": log_level,
                "handlers": ["console", "file", "error_file", "events_file"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "WARNING" if production else "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "ERROR" if production else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
    }


def setup_logging() -> None:
    """初始化日志系统（应用启动时调用一次）"""
    settings = get_settings()
    logging.config.dictConfig(get_logging_config())

    for noisy in ("httpx", "openai", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    get_logger("logging").info(f"日志系统初始化完成 - 环境: {settings.ENVIRONMENT}, 级别: {settings.LOG_LEVEL}")


def get_logger(name: str) -> logging.Logger:
    """获取 draftless 命名空间下的 logger"""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class StructuredLogger:
    """结构化日志记录器：上下文写入 extra_data，由 StructuredFormatter 输出"""

    def __init__(self, name: str):
        self.logger = get_logger(name)

    def log_with_context(self, level: int, message: str, **context) -> None:
        extra_data = {'event_type': context.pop('event_type', 'general'), **context}
        self.logger.log(level, message, extra={'extra_data': extra_data})

    def info(self, message: str, **context) -> None:
        self.log_with_context(logging.INFO, message, **context)

    def warning(self, message: str, **context) -> None:
        self.log_with_context(logging.WARNING, message, **context)

    def error(self, message: str, **context) -> None:
        self.log_with_context(logging.ERROR, message, **context)

    def log_request(self, method: str, path: str, **kwargs) -> None:
        self.info(f"请求开始: {method} {path}", event_type="request_start", http_method=method, path=path, **kwargs)

    def log_response(self, status_code: int, duration: float, **kwargs) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log_with_context(
            level,
            f"请求完成: {status_code} - 耗时: {duration * 1000:.1f}ms",
            event_type="request_end",
            status_code=status_code,
            duration_ms=duration * 1000,
            **kwargs
        )

    def log_external_api_call(self, service: str, endpoint: str, duration: Optional[float] = None,
                              success: bool = True, **kwargs) -> None:
        """记录对文本生成服务的调用（只记录耗时与结果，不记录提示词）"""
        message = f"外部调用: {service} {endpoint}"
        if duration is not None:
            message += f" - 耗时: {duration * 1000:.1f}ms"
        self.log_with_context(
            logging.INFO if success else logging.WARNING,
            message,
            event_type="external_api_call",
            service=service,
            endpoint=endpoint,
            success=success,
            duration_ms=duration * 1000 if duration is not None else None,
            **kwargs
        )

    def log_business_event(self, event: str, entity_type: Optional[str] = None,
                           entity_id: Optional[str] = None, **kwargs) -> None:
        """记录业务事件，例如 checkpoint_saved、weave_accepted"""
        message = f"业务事件: {event}"
        if entity_type and entity_id:
            message += f" - {entity_type}:{entity_id}"
        self.info(
            message,
            event_type="business_event",
            business_event=event,
            entity_type=entity_type,
            entity_id=entity_id,
            **kwargs
        )

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None, **kwargs) -> None:
        error_context = {
            'event_type': 'error',
            'error_type': type(error).__name__,
            'error_message': str(error),
            **(context or {}),
            **kwargs
        }
        self.logger.error(
            f"错误发生: {type(error).__name__}: {error}",
            exc_info=True,
            extra={'extra_data': error_context}
        )


@contextmanager
def log_operation(logger: StructuredLogger, operation: str, **context):
    """记录一次操作的开始、结束与耗时；异常原样抛出"""
    start_time = datetime.now()
    logger.info(f"开始操作: {operation}", event_type="operation_start", operation=operation, **context)
    try:
        yield
    except Exception as e:
        duration_ms = (datetime.now() - start_time).total_seconds() * 1000
        logger.error(
            f"操作失败: {operation} - 耗时: {duration_ms:.1f}ms - 错误: {e}",
            event_type="operation_end",
            operation=operation,
            duration_ms=duration_ms,
            status="error",
            error_type=type(e).__name__,
            **context
        )
        raise
    duration_ms = (datetime.now() - start_time).total_seconds() * 1000
    logger.info(
        f"操作完成: {operation} - 耗时: {duration_ms:.1f}ms",
        event_type="operation_end",
        operation=operation,
        duration_ms=duration_ms,
        status="success",
        **context
    )
