"""
Конфигурация логирования клиента
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Атрибуты, которые есть у любой LogRecord; всё остальное пришло через extra
_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

# Значение заголовка Authorization: "Token <value>"
_TOKEN_PATTERN = re.compile(r"(Token\s+)[A-Za-z0-9._\-]+")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"


class TokenRedactingFilter(logging.Filter):
    """Маскирует значения токенов в тексте сообщений."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str) and "Token" in record.msg:
            record.msg = _TOKEN_PATTERN.sub(r"\1[REDACTED]", record.msg)
        return True


class JSONFormatter(logging.Formatter):
    """Одна строка JSON на запись, поля из extra добавляются как есть."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update({k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS})

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """
    Цветной уровень для консоли (для разработки).

    Запись копируется перед окраской: исходную получают и другие handlers.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _handler(handler: logging.Handler, level: str, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(TokenRedactingFilter())
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Настройка логирования для клиента.

    Заменяет handlers корневого logger'а: консоль (цветная или JSON)
    и, опционально, файл в JSON. Во всех handlers токены маскируются.

    Args:
        level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON формат в консоли
        log_file: Путь к файлу логов

    Example:
        >>> setup_logging(level="DEBUG")
        >>> logging.getLogger(__name__).info("Signed in", extra={"user_id": 1})
    """
    level = level.upper()
    console_formatter = JSONFormatter() if json_logs else ColoredFormatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)
    handlers = [_handler(logging.StreamHandler(sys.stdout), level, console_formatter)]
    if log_file:
        handlers.append(_handler(logging.FileHandler(log_file, encoding="utf-8"), level, JSONFormatter()))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = handlers

    # HTTP стек слишком многословен на DEBUG
    for noisy in ("urllib3", "requests"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured",
        extra={"json_logs": json_logs, "log_file": log_file},
    )
