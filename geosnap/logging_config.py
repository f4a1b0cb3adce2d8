"""Structured logging configuration for geosnap."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from geosnap.settings import LoggingSettings


class JSONFormatter:
    """JSON formatter for structured logging."""

    def __call__(self, record: dict[str, Any]) -> str:
        """Format log record as a single JSON line."""
        log_data = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "module": record.get("module", ""),
            "function": record.get("function", ""),
            "line": record.get("line", 0),
        }

        exception = record.get("exception")
        if exception is not None:
            log_data["exception"] = {
                "type": exception.type.__name__ if exception.type else None,
                "value": str(exception.value) if exception.value else None,
            }

        extra = record.get("extra")
        if extra:
            log_data.update(extra)

        # loguru treats the returned string as a format template
        payload = json.dumps(log_data, ensure_ascii=False, default=str)
        return payload.replace("{", "{{").replace("}", "}}") + "\n"


TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def setup_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Whether to emit one JSON object per line.
        log_file: Optional path to log file. If None, logs only to stderr.
    """
    logger.remove()

    formatter: Any = JSONFormatter() if json_format else TEXT_FORMAT

    logger.add(
        sys.stderr,
        format=formatter,
        level=level,
        colorize=not json_format,
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=formatter,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
        )


def setup_logging_from_settings(settings: LoggingSettings) -> None:
    """Configure logging from the `logging` section of the settings file."""
    setup_logging(
        level=settings.level,
        json_format=settings.json_format,
        log_file=settings.log_file,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a logger instance.

    Args:
        name: Optional logger name. If None, returns the default logger.

    Returns:
        Logger instance.
    """
    if name:
        return logger.bind(name=name)
    return logger
