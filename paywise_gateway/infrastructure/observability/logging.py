"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable
from pythonjsonlogger import jsonlogger

from paywise_gateway.config import settings


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


def log_payment_request(
    request_id: str,
    payment_id: str,
    client_id: str,
    failed_channels: Iterable[str],
    duration_ms: float,
) -> None:
    """Log structured payment request outcome for analysis"""
    failed = list(failed_channels)
    logging.getLogger("paywise_gateway.payments").info(
        "Payment request completed",
        extra={
            "request_id": request_id,
            "payment_id": payment_id,
            "client_id": client_id,
            "step": "payment_request_complete",
            "notification_outcome": "partial" if failed else "delivered",
            "failed_channels": failed,
            "duration_ms": duration_ms,
        },
    )


def log_status_change(request_id: str, payment_id: str, previous: str, current: str) -> None:
    logging.getLogger("paywise_gateway.payments").info(
        "Payment status changed",
        extra={
            "request_id": request_id,
            "payment_id": payment_id,
            "step": "status_change",
            "previous_status": previous,
            "status": current,
        },
    )
