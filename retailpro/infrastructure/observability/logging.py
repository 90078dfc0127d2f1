"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from retailpro.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_invoice_committed(
    invoice_id: str,
    customer_name: str,
    grand_total: float,
    is_paid: bool,
    transaction_id: str | None,
) -> None:
    """Log the outcome of an invoice commit"""
    logging.info(
        "Invoice committed",
        extra={
            "step": "invoice_commit",
            "invoice_id": invoice_id,
            "customer_name": customer_name,
            "grand_total": grand_total,
            "payment_status": "paid" if is_paid else "pending",
            "transaction_id": transaction_id,
        },
    )


def log_stock_adjusted(product_name: str, quantity: int, action: str, matched_ids: list[str]) -> None:
    logging.info(
        "Stock adjusted",
        extra={
            "step": "stock_adjustment",
            "product_name": product_name,
            "quantity": quantity,
            "action": action,
            "matched_product_ids": matched_ids,
            "match_outcome": "matched" if matched_ids else "unmatched",
        },
    )


def log_reminder_sent(invoice_id: str, reminder_id: str, method: str) -> None:
    logging.info(
        "Reminder recorded",
        extra={"step": "reminder", "invoice_id": invoice_id, "reminder_id": reminder_id, "method": method},
    )
