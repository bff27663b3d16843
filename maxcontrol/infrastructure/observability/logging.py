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
        log_record["service"] = "maxcontrol"


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


def log_quote_priced(
    request_id: str,
    payment_method: str,
    total_cash: float,
    total_card: float,
    net_amount_due: float,
    is_overpaid: bool,
    quote_id: Optional[str] = None,
) -> None:
    """Log structured pricing outcome"""
    logging.info(
        "Quote priced",
        extra={
            "request_id": request_id,
            "step": "quote_priced",
            "quote_id": quote_id,
            "payment_method": payment_method,
            "total_cash": total_cash,
            "total_card": total_card,
            "net_amount_due": net_amount_due,
            "is_overpaid": is_overpaid,
        },
    )


def log_payables_created(
    request_id: str,
    name: str,
    total: float,
    count: int,
    series_id: Optional[str],
) -> None:
    """Log accounts payable batch creation"""
    logging.info(
        "Accounts payable created",
        extra={
            "request_id": request_id,
            "step": "payables_created",
            "entry_name": name,
            "total": total,
            "installments": count,
            "series_id": series_id,
        },
    )
