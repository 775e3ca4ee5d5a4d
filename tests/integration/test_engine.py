"""Integration tests for the engine facade with logging and metrics"""

import json
import logging
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from prometheus_client import generate_latest

from wallet_engine import engine
from wallet_engine.config import settings
from wallet_engine.domain.models import AccountStatus, SubscriberTier, TransactionCategory
from wallet_engine.domain.tiers import loan_rate_for_tier
from wallet_engine.domain.exceptions import (
    AccountAlreadyWithdrawnError,
    BelowMinimumDepositError,
    LoanNotEligibleError,
    UnknownCategoryError,
    UnknownTierError,
)
from wallet_engine.infrastructure.observability.logging import setup_logging

LOGGER_NAME = "wallet_engine.infrastructure.observability.logging"

pytestmark = pytest.mark.integration


def test_compute_fee_records_metrics(sample_value):
    """Every quoted fee is counted by category and tier"""
    labels = {"category": "peer_transfer", "tier": "vip"}
    before = sample_value("wallet_fee_computed_total", labels)
    quoted_before = sample_value("wallet_fee_quoted_total", {"category": "peer_transfer"})

    fee = engine.compute_fee(1000, TransactionCategory.PEER_TRANSFER, SubscriberTier.VIP)

    assert fee == Decimal("7.00")
    assert sample_value("wallet_fee_computed_total", labels) == before + 1
    assert sample_value("wallet_fee_quoted_total", {"category": "peer_transfer"}) == quoted_before + 7.0


def test_compute_fee_logs_breakdown(caplog):
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        engine.compute_fee(1000, "withdrawal", "plus")

    record = next(r for r in caplog.records if getattr(r, "step", None) == "fee_computed")
    assert record.category == "withdrawal"
    assert record.tier == "plus"
    assert record.fee == "24.50"


def test_unknown_category_counted_and_reraised(sample_value, caplog):
    labels = {"operation": "compute_fee", "error": "UnknownCategoryError"}
    before = sample_value("wallet_domain_errors_total", labels)

    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        with pytest.raises(UnknownCategoryError):
            engine.compute_fee(1000, "lottery")

    assert sample_value("wallet_domain_errors_total", labels) == before + 1
    assert any(getattr(r, "error", None) == "UnknownCategoryError" for r in caplog.records)


def test_open_account_uses_configured_floor(monkeypatch):
    """Minimum deposit comes from settings"""
    start = datetime(2025, 1, 15, tzinfo=timezone.utc)
    assert engine.open_savings_account(500, 3, "0.12", start).principal == Decimal("500")

    monkeypatch.setattr(settings, "minimum_savings_deposit", Decimal("1000"))
    with pytest.raises(BelowMinimumDepositError):
        engine.open_savings_account(500, 3, "0.12", start)


def test_open_account_for_tier_locks_rate(sample_value):
    """Rate is taken from the tier at opening and stored on the account"""
    before = sample_value("wallet_savings_opened_total", {"lock_period_months": "12"})

    account = engine.open_savings_account_for_tier(2000, 12, "vip")

    assert account.annual_interest_rate == Decimal("0.18")
    assert account.start_date.tzinfo is not None
    assert sample_value("wallet_savings_opened_total", {"lock_period_months": "12"}) == before + 1

    with pytest.raises(UnknownTierError):
        engine.open_savings_account_for_tier(2000, 12, "gold")


def test_savings_lifecycle_early_withdrawal(sample_value):
    """Open at plus rate, withdraw early at month 3, then refuse a second withdrawal"""
    start = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
    early_before = sample_value("wallet_savings_withdrawals_total", {"outcome": "early"})
    penalty_before = sample_value("wallet_early_withdrawal_penalty_total")

    account = engine.open_savings_account_for_tier(10000, 6, SubscriberTier.PLUS, start)
    result = engine.withdraw(account, datetime(2025, 4, 15, 9, 0, tzinfo=timezone.utc), early=True)

    assert result.penalty == Decimal("500.00")
    assert result.payout == Decimal("9500.00")
    assert result.account.status == AccountStatus.WITHDRAWN
    assert sample_value("wallet_savings_withdrawals_total", {"outcome": "early"}) == early_before + 1
    assert sample_value("wallet_early_withdrawal_penalty_total") == penalty_before + 500.0

    with pytest.raises(AccountAlreadyWithdrawnError):
        engine.withdraw(result.account, account.maturity_date)


def test_savings_lifecycle_matured_then_loan():
    """Matured plus-tier account: full payout, and loan capacity before withdrawal"""
    start = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
    account = engine.open_savings_account(10000, 6, "0.12", start)

    limit = engine.max_loan(account, loan_rate_for_tier("vip"), now=account.maturity_date)
    assert limit == Decimal("9873.67")

    eligibility = engine.check_loan_eligibility(5000, Decimal("10615.20"), "vip")
    assert eligibility.eligible is True

    result = engine.withdraw(account, account.maturity_date)
    assert result.payout == Decimal("10615.20")
    assert result.penalty == Decimal("0")
    assert engine.max_loan(result.account, "0.15", now=account.maturity_date) == Decimal("0")


def test_metrics_disabled(monkeypatch, sample_value):
    monkeypatch.setattr(settings, "metrics_enabled", False)
    labels = {"category": "merchant_scan", "tier": "basic"}
    before = sample_value("wallet_fee_computed_total", labels)

    engine.compute_fee(1000, "merchant_scan")

    assert sample_value("wallet_fee_computed_total", labels) == before


def test_metrics_exposition():
    engine.compute_fee(200, "peer_transfer")
    assert "wallet_fee_computed_total" in generate_latest().decode()


def test_setup_logging_emits_json(capsys):
    """Records are written to stdout as JSON with service metadata"""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("INFO")
        engine.compute_fee(1000, "peer_transfer", "vip")
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    payload = json.loads(lines[-1])

    assert payload["message"] == "Fee computed"
    assert payload["level"] == "INFO"
    assert payload["service"] == "wallet-engine"
    assert payload["fee"] == "7.00"
    assert "timestamp" in payload


def test_approve_loan_counted_and_logged(sample_value, caplog):
    now = datetime(2025, 7, 15, 9, 0, tzinfo=timezone.utc)
    before = sample_value("wallet_loans_approved_total")

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        approval = engine.approve_loan(5000, Decimal("10615.20"), "vip", now)

    assert approval.approved_amount == Decimal("5000")
    assert approval.maturity_date == datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)
    assert sample_value("wallet_loans_approved_total") == before + 1
    record = next(r for r in caplog.records if getattr(r, "step", None) == "loan_approved")
    assert record.approved_amount == "5000"


def test_approve_loan_below_configured_minimum(monkeypatch, sample_value):
    monkeypatch.setattr(settings, "minimum_loan_amount", Decimal("1000"))
    labels = {"operation": "approve_loan", "error": "LoanNotEligibleError"}
    before = sample_value("wallet_domain_errors_total", labels)

    with pytest.raises(LoanNotEligibleError, match="Minimum loan amount is 1000"):
        engine.approve_loan(500, Decimal("10615.20"), "vip")

    assert sample_value("wallet_domain_errors_total", labels) == before + 1
