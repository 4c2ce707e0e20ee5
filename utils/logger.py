"""
Centralized logging configuration for SuggestBox.

Structured JSON logging:
- Console handler (stderr) at LOG_LEVEL, human-readable or JSON
- Optional rotating JSON file handlers (LOG_TO_FILE=true)
- Context passed through extra={"extra_fields": {...}}
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class LoggerConfig:
    """
    Process-wide logger setup, applied once.
    """

    LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()  # text | json
    MAX_BYTES = 5 * 1024 * 1024
    BACKUP_COUNT = 3

    ROOT_LOGGER_NAME = "suggestbox"

    _initialized = False

    @classmethod
    def setup_logging(cls) -> None:
        """
        Configure the "suggestbox" logger hierarchy.

        Module loggers created through get_logger() are re-parented under this
        logger so the host application's root logger is left alone.
        """
        if cls._initialized:
            return

        level = getattr(logging, cls.LOG_LEVEL, logging.INFO)
        base_logger = logging.getLogger(cls.ROOT_LOGGER_NAME)
        base_logger.setLevel(level)
        base_logger.handlers.clear()
        base_logger.propagate = True

        json_formatter = JsonFormatter()
        text_formatter = logging.Formatter(
            fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(json_formatter if cls.LOG_FORMAT == "json" else text_formatter)
        base_logger.addHandler(console_handler)

        if cls.LOG_TO_FILE:
            cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

            engine_handler = logging.handlers.RotatingFileHandler(
                cls.LOG_DIR / "suggestbox.log",
                maxBytes=cls.MAX_BYTES,
                backupCount=cls.BACKUP_COUNT,
                encoding="utf-8",
            )
            engine_handler.setLevel(level)
            engine_handler.setFormatter(json_formatter)
            base_logger.addHandler(engine_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                cls.LOG_DIR / "error.log",
                maxBytes=cls.MAX_BYTES,
                backupCount=cls.BACKUP_COUNT,
                encoding="utf-8",
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(json_formatter)
            base_logger.addHandler(error_handler)

        cls._initialized = True

        base_logger.debug(
            "Logging system initialized",
            extra={
                "extra_fields": {
                    "log_level": cls.LOG_LEVEL,
                    "log_to_file": cls.LOG_TO_FILE,
                    "log_dir": str(cls.LOG_DIR),
                }
            },
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._initialized:
            cls.setup_logging()

        if name == cls.ROOT_LOGGER_NAME or name.startswith(cls.ROOT_LOGGER_NAME + "."):
            return logging.getLogger(name)
        return logging.getLogger(f"{cls.ROOT_LOGGER_NAME}.{name}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        Logger nested under the "suggestbox" hierarchy

    Example:
        >>> from utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.warning("Provider failed", extra={"extra_fields": {"provider": "people"}})
    """
    return LoggerConfig.get_logger(name)
