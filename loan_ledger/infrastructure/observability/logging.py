"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "loan-ledger"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


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


def log_enrichment_batch(
    request_id: str,
    user_id: str,
    entity: str,
    total: int,
    fallback_count: int,
    duration_ms: float,
) -> None:
    """Log one line per enriched read so fallback rates can be tracked"""
    logging.info(
        "Enrichment completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": f"{entity}_enrichment_complete",
            "records": total,
            "fallbacks": fallback_count,
            "duration_ms": duration_ms,
        },
    )
