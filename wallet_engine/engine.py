"""Engine entry points for the wallet service

Thin layer over the pure domain functions: reads floors from settings,
records metrics and emits one structured log line per call. Domain errors
are logged, counted and re-raised unchanged for the caller to translate.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from wallet_engine.config import settings
from wallet_engine.domain import fees, loans, savings
from wallet_engine.domain.exceptions import DomainException
from wallet_engine.domain.models import (
    FeeBreakdown,
    LoanApproval,
    LoanEligibility,
    SavingsAccount,
    SubscriberTier,
    TransactionCategory,
    WithdrawalResult,
)
from wallet_engine.domain.tiers import savings_rate_for_tier
from wallet_engine.infrastructure.observability.logging import (
    log_fee_computed,
    log_loan_approved,
    log_rejected,
    log_savings_opened,
    log_withdrawal,
)
from wallet_engine.infrastructure.observability.metrics import (
    operation_duration_histogram,
    record_error,
    record_fee,
    record_loan_approved,
    record_savings_opened,
    record_withdrawal,
)
from wallet_engine.utils.money import Amount

Category = Union[TransactionCategory, str]
Tier = Union[SubscriberTier, str]


def fee_breakdown(amount: Amount, category: Category, tier: Tier = SubscriberTier.BASIC) -> FeeBreakdown:
    try:
        with operation_duration_histogram.labels(operation="compute_fee").time():
            breakdown = fees.fee_breakdown(amount, category, tier)
    except DomainException as e:
        record_error("compute_fee", e)
        log_rejected("compute_fee", e)
        raise

    record_fee(breakdown)
    log_fee_computed(breakdown)
    return breakdown


def compute_fee(amount: Amount, category: Category, tier: Tier = SubscriberTier.BASIC) -> Decimal:
    """Fee to charge before debiting the wallet; the caller books it as revenue"""
    return fee_breakdown(amount, category, tier).fee


def open_savings_account(
    principal: Amount,
    lock_period_months: int,
    annual_rate: Amount,
    start_date: Optional[datetime] = None,
) -> SavingsAccount:
    """Open an account at a caller-resolved rate; start_date defaults to the current tz-aware local time"""
    if start_date is None:
        start_date = datetime.now().astimezone()

    try:
        with operation_duration_histogram.labels(operation="open_savings_account").time():
            account = savings.open_savings_account(
                principal,
                lock_period_months,
                annual_rate,
                start_date,
                minimum_deposit=settings.minimum_savings_deposit,
            )
    except DomainException as e:
        record_error("open_savings_account", e)
        log_rejected("open_savings_account", e)
        raise

    record_savings_opened(account)
    log_savings_opened(account)
    return account


def open_savings_account_for_tier(
    principal: Amount,
    lock_period_months: int,
    tier: Tier,
    start_date: Optional[datetime] = None,
) -> SavingsAccount:
    """Open an account at the tier's current savings rate, fixed for the account's life"""
    try:
        rate = savings_rate_for_tier(tier)
    except DomainException as e:
        record_error("open_savings_account", e)
        log_rejected("open_savings_account", e)
        raise
    return open_savings_account(principal, lock_period_months, rate, start_date)


def withdraw(account: SavingsAccount, now: datetime, early: bool = False) -> WithdrawalResult:
    """Close an account; persist result.account and book result.penalty as revenue"""
    try:
        with operation_duration_histogram.labels(operation="withdraw").time():
            result = savings.withdraw(account, now, early)
    except DomainException as e:
        record_error("withdraw", e)
        log_rejected("withdraw", e)
        raise

    record_withdrawal(result)
    log_withdrawal(result)
    return result


def max_loan(account: SavingsAccount, tier_loan_rate: Amount, now: Optional[datetime] = None) -> Decimal:
    try:
        with operation_duration_histogram.labels(operation="max_loan").time():
            return loans.max_loan(account, tier_loan_rate, now)
    except DomainException as e:
        record_error("max_loan", e)
        log_rejected("max_loan", e)
        raise


def check_loan_eligibility(
    requested_amount: Amount,
    collateral_value: Amount,
    tier: Tier,
    has_active_loan: bool = False,
) -> LoanEligibility:
    try:
        with operation_duration_histogram.labels(operation="check_loan_eligibility").time():
            return loans.check_loan_eligibility(
                requested_amount,
                collateral_value,
                tier,
                has_active_loan=has_active_loan,
                minimum_loan=settings.minimum_loan_amount,
            )
    except DomainException as e:
        record_error("check_loan_eligibility", e)
        log_rejected("check_loan_eligibility", e)
        raise


def approve_loan(
    requested_amount: Amount,
    collateral_value: Amount,
    tier: Tier,
    now: Optional[datetime] = None,
    has_active_loan: bool = False,
) -> LoanApproval:
    """Approve and disburse at `now`; raises LoanNotEligibleError with the failed checks"""
    if now is None:
        now = datetime.now().astimezone()

    try:
        with operation_duration_histogram.labels(operation="approve_loan").time():
            approval = loans.approve_loan(
                requested_amount,
                collateral_value,
                tier,
                now,
                has_active_loan=has_active_loan,
                minimum_loan=settings.minimum_loan_amount,
            )
    except DomainException as e:
        record_error("approve_loan", e)
        log_rejected("approve_loan", e)
        raise

    record_loan_approved(approval)
    log_loan_approved(approval)
    return approval
