"""
Structured Logging Setup

Consistent logging configuration across the service.
Uses JSON format for structured logs in production.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "service",
    "message", "taskName",
))

# Request context, emitted in this order ahead of any other extras
CONTEXT_FIELDS = ("method", "path", "value", "argv", "returncode", "uri")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Core fields come first, then the request context a handler bound or
    passed (bus method, kernel file, command), then remaining extras.
    Missing context fields are left out rather than written as null.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service", "unknown"),
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = record.__dict__
        for key in CONTEXT_FIELDS:
            if key in fields:
                log_data[key] = fields[key]

        for key, value in fields.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceLoggerAdapter(logging.LoggerAdapter):
    """
    Adds the component name, and any bound context, to every record.

    Per-call extras win over bound context of the same name.
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "ServiceLoggerAdapter":
        """Adapter for the same logger with extra context fields"""
        return ServiceLoggerAdapter(self.logger, {**self.extra, **context})


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = True,
) -> logging.Logger:
    """
    Set up structured logging for the service.

    All component loggers are children of the ``kerneltune`` logger, so a
    single handler here covers them.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format (True for production, False for dev)

    Returns:
        Configured root service logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger("kerneltune")
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_service_logger(service_name: str) -> ServiceLoggerAdapter:
    """
    Get a logger adapter with service context.

    Args:
        service_name: Name of the component (e.g., "cpufreq", "bus.server")

    Returns:
        Logger adapter with service name in all logs
    """
    logger = logging.getLogger(f"kerneltune.{service_name}")
    return ServiceLoggerAdapter(logger, {"service": service_name})


def log_attribute_write(
    logger: logging.LoggerAdapter,
    path: str,
    value: Any,
    success: bool = True,
) -> None:
    """Log a kernel attribute write"""
    if success:
        logger.info(
            f"Write {path} = {value}",
            extra={"path": path, "value": value},
        )
    else:
        logger.error(
            f"Failed to write {path} = {value}",
            extra={"path": path, "value": value},
        )


def log_command(
    logger: logging.LoggerAdapter,
    argv: list[str],
    returncode: int | None,
) -> None:
    """Log an external command run"""
    if returncode == 0:
        logger.debug(
            f"Command {' '.join(argv)} exited 0",
            extra={"argv": argv, "returncode": returncode},
        )
    else:
        logger.warning(
            f"Command {' '.join(argv)} failed (status {returncode})",
            extra={"argv": argv, "returncode": returncode},
        )
