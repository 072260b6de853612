"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from microlend_gateway.config import settings


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

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_eligibility(
    user_id: str,
    eligible: bool,
    max_amount: int,
    credit_score: int | None,
    reason: str | None,
    duration_ms: float,
) -> None:
    """Log structured eligibility outcome for analysis"""
    logging.info(
        "Eligibility evaluated",
        extra={
            "user_id": user_id,
            "step": "eligibility",
            "outcome": "eligible" if eligible else "ineligible",
            "max_amount": max_amount,
            "credit_score": credit_score,
            "reason": reason,
            "duration_ms": duration_ms,
        },
    )


def log_risk_assessment(user_id: str, loan_amount: float, risk_level: str, score: int) -> None:
    logging.info(
        "Risk assessed",
        extra={
            "user_id": user_id,
            "step": "risk_assessment",
            "loan_amount": loan_amount,
            "risk_level": risk_level,
            "credit_score": score,
        },
    )
