"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from business_manager.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_command(
    command: str,
    principal_id: str | None,
    ok: bool,
    duration_ms: float,
    error: str | None = None,
) -> None:
    """Log structured command outcome"""
    logging.info(
        "Command completed",
        extra={
            "command": command,
            "principal_id": principal_id or "anonymous",
            "outcome": "ok" if ok else "failed",
            "error": error,
            "duration_ms": duration_ms,
        },
    )


def log_request(
    request_id: str,
    method: str,
    endpoint: str,
    status: int,
    principal_id: str | None,
    duration_ms: float,
) -> None:
    """Log structured HTTP request outcome"""
    logging.info(
        "Request completed",
        extra={
            "request_id": request_id,
            "method": method,
            "endpoint": endpoint,
            "status": status,
            "principal_id": principal_id or "anonymous",
            "duration_ms": duration_ms,
        },
    )
