"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "roundup-ledger"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_batch(
    request_id: str,
    operation: str,
    accepted: int,
    rejected: int,
    windows: int,
    duration_ms: float,
    wage: Optional[float] = None,
) -> None:
    """Log the outcome of one engine call"""
    extra = {
        "request_id": request_id,
        "operation": operation,
        "accepted_count": accepted,
        "rejected_count": rejected,
        "window_count": windows,
        "duration_ms": duration_ms,
    }
    if wage is not None:
        extra["wage"] = wage
    logging.info("Batch processed", extra=extra)
