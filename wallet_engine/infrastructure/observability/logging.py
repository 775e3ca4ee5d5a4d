"""Structured JSON logging for engine operations"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from wallet_engine.config import settings
from wallet_engine.domain.models import FeeBreakdown, LoanApproval, SavingsAccount, WithdrawalResult

logger = logging.getLogger(__name__)


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers
    root.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def _money(value: Decimal) -> str:
    # Keep exact decimal text in JSON output
    return str(value)


def log_fee_computed(breakdown: FeeBreakdown) -> None:
    logger.info(
        "Fee computed",
        extra={
            "step": "fee_computed",
            "category": breakdown.category.value,
            "tier": breakdown.tier.value,
            "amount": _money(breakdown.amount),
            "base_fee": _money(breakdown.base_fee),
            "discount_rate": _money(breakdown.discount_rate),
            "fee": _money(breakdown.fee),
        },
    )


def log_savings_opened(account: SavingsAccount) -> None:
    logger.info(
        "Savings account opened",
        extra={
            "step": "savings_opened",
            "principal": _money(account.principal),
            "annual_interest_rate": _money(account.annual_interest_rate),
            "lock_period_months": account.lock_period_months,
            "maturity_date": account.maturity_date.isoformat(),
        },
    )


def log_withdrawal(result: WithdrawalResult) -> None:
    logger.info(
        "Savings withdrawal completed",
        extra={
            "step": "savings_withdrawn",
            "outcome": "early" if result.early else "matured",
            "principal": _money(result.account.principal),
            "payout": _money(result.payout),
            "penalty": _money(result.penalty),
        },
    )


def log_loan_approved(approval: LoanApproval) -> None:
    logger.info(
        "Loan approved",
        extra={
            "step": "loan_approved",
            "requested_amount": _money(approval.requested_amount),
            "approved_amount": _money(approval.approved_amount),
            "interest_rate": _money(approval.interest_rate),
            "maturity_date": approval.maturity_date.isoformat(),
        },
    )


def log_rejected(operation: str, error: Exception) -> None:
    """Log a domain error that is about to be re-raised to the caller"""
    logger.warning(
        "Operation rejected",
        extra={
            "step": operation,
            "error": type(error).__name__,
            "detail": str(error),
        },
    )
