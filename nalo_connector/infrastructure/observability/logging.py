"""Structured JSON logging for connector runs"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from nalo_connector.domain.models import SyncSummary


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service: str = "nalo-connector", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service


def setup_logging(level: str = "INFO", service: str = "nalo-connector") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service=service,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_sync(summary: SyncSummary, duration_ms: float) -> None:
    """Log structured run outcome for analysis"""
    logging.info(
        "Sync completed",
        extra={
            "step": "sync_complete",
            "files_saved": summary.files_saved,
            "bills_saved": summary.bills_saved,
            "bills_ignored": summary.bills_ignored,
            "accounts": len(summary.accounts),
            "duration_ms": duration_ms,
        },
    )
