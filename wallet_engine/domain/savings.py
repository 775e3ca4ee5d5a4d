"""Savings engine - monthly compound interest, lock periods, maturity, early withdrawal and goals"""

import math
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from wallet_engine.domain.models import (
    AccountStatus,
    SavingsAccount,
    SavingsGoal,
    SavingsSummary,
    WithdrawalResult,
)
from wallet_engine.domain.exceptions import (
    AccountAlreadyWithdrawnError,
    AccountNotMatureError,
    BelowMinimumDepositError,
    InvalidAmountError,
    InvalidLockPeriodError,
    InvalidTimestampError,
)
from wallet_engine.utils.date_utils import add_months, ensure_comparable, whole_months_between
from wallet_engine.utils.money import Amount, require_positive, round_money, to_decimal

LOCK_PERIODS = (1, 3, 6, 12)
MINIMUM_SAVINGS_DEPOSIT = Decimal("500")
EARLY_WITHDRAWAL_PENALTY_RATE = Decimal("0.05")  # of principal, not accrued value


def open_savings_account(
    principal: Amount,
    lock_period_months: int,
    annual_rate: Amount,
    start_date: datetime,
    minimum_deposit: Amount = MINIMUM_SAVINGS_DEPOSIT,
) -> SavingsAccount:
    """
    Lock a deposit for a fixed number of months.

    The annual rate is resolved by the caller from the subscriber's tier at
    opening time and stays with the account; later tier changes don't touch it.

    Raises:
        BelowMinimumDepositError: principal under the floor (500 by default)
        InvalidLockPeriodError: lock period not in 1, 3, 6, 12
        InvalidAmountError: principal or rate is not a number, or rate is negative
    """
    principal = to_decimal(principal)
    rate = to_decimal(annual_rate)
    floor = to_decimal(minimum_deposit)

    if principal < floor:
        raise BelowMinimumDepositError(f"Minimum deposit is {floor}, got {principal}")

    if lock_period_months not in LOCK_PERIODS:
        raise InvalidLockPeriodError(
            f"Invalid lock period {lock_period_months!r}; must be one of {', '.join(map(str, LOCK_PERIODS))} months"
        )

    if rate < 0:
        raise InvalidAmountError("Annual interest rate cannot be negative")

    return SavingsAccount(
        principal=principal,
        annual_interest_rate=rate,
        lock_period_months=lock_period_months,
        start_date=start_date,
        maturity_date=add_months(start_date, lock_period_months),
        status=AccountStatus.ACTIVE,
    )


def accrued_value(principal: Amount, annual_rate: Amount, months: int) -> Decimal:
    """principal * (1 + annual_rate/12) ** months, rounded to cents"""
    principal = to_decimal(principal)
    if months <= 0:
        return principal

    monthly_rate = to_decimal(annual_rate) / 12
    return round_money(principal * (1 + monthly_rate) ** months)


def interest_earned(principal: Amount, annual_rate: Amount, months: int) -> Decimal:
    return accrued_value(principal, annual_rate, months) - to_decimal(principal)


def months_accrued(account: SavingsAccount, now: datetime) -> int:
    """Whole months of interest earned so far; stops counting at the end of the lock period"""
    ensure_comparable(account.start_date, now)
    return min(whole_months_between(account.start_date, now), account.lock_period_months)


def maturity_value(account: SavingsAccount) -> Decimal:
    return accrued_value(account.principal, account.annual_interest_rate, account.lock_period_months)


def current_value(account: SavingsAccount, now: datetime) -> Decimal:
    """Value of an active account at `now`; a withdrawn account holds nothing"""
    ensure_comparable(account.start_date, now)
    if not account.is_active:
        return Decimal("0")
    return accrued_value(account.principal, account.annual_interest_rate, months_accrued(account, now))


def withdraw(account: SavingsAccount, now: datetime, early: bool = False) -> WithdrawalResult:
    """
    Close a savings account and compute what the holder receives.

    - Matured (now >= maturity_date): full-term compounded value, no penalty,
      whatever the early flag says.
    - Before maturity with early=True: 5% of principal is kept as penalty and
      all interest is forfeited.
    - Before maturity without early: refused.

    The given snapshot is left untouched; the returned result carries the
    withdrawn snapshot for the caller to persist.

    Raises:
        AccountAlreadyWithdrawnError: account status is already withdrawn
        AccountNotMatureError: before maturity and early is False
        InvalidTimestampError: now is naive for an aware account, or the reverse
    """
    ensure_comparable(account.start_date, now)

    if account.status == AccountStatus.WITHDRAWN:
        raise AccountAlreadyWithdrawnError("Savings account has already been withdrawn")

    if now >= account.maturity_date:
        payout = maturity_value(account)
        penalty = Decimal("0")
        is_early = False
    elif early:
        penalty = round_money(account.principal * EARLY_WITHDRAWAL_PENALTY_RATE)
        payout = account.principal - penalty
        is_early = True
    else:
        raise AccountNotMatureError(
            f"Account matures on {account.maturity_date.isoformat()}; "
            "withdrawal before maturity must be flagged as early"
        )

    closed = replace(account, status=AccountStatus.WITHDRAWN, withdrawn_at=now)
    return WithdrawalResult(payout=payout, penalty=penalty, early=is_early, account=closed)


def savings_summary(account: SavingsAccount, now: datetime) -> SavingsSummary:
    """Current value, earned interest and time left to maturity"""
    ensure_comparable(account.start_date, now)
    value = current_value(account, now)
    earned = value - account.principal if account.is_active else Decimal("0")

    remaining = account.maturity_date - now
    days_to_maturity = max(0, math.ceil(remaining.total_seconds() / 86400))

    return SavingsSummary(
        months_elapsed=months_accrued(account, now),
        current_value=value,
        interest_earned=earned,
        maturity_value=maturity_value(account),
        days_to_maturity=days_to_maturity,
        is_matured=now >= account.maturity_date,
    )


def total_savings_value(accounts: Iterable[SavingsAccount], now: datetime) -> Decimal:
    """Combined current value of all active accounts, used as loan collateral"""
    return sum((current_value(account, now) for account in accounts), Decimal("0"))


def create_savings_goal(
    target_amount: Amount,
    target_date: datetime,
    now: datetime,
    name: str = "",
) -> SavingsGoal:
    """
    Start tracking progress towards a target amount.

    Raises:
        InvalidAmountError: target is not a positive number
        InvalidTimestampError: target_date is not after now, or tz-awareness differs
    """
    target = require_positive(target_amount)
    ensure_comparable(now, target_date)

    if target_date <= now:
        raise InvalidTimestampError("Target date must be in the future")

    return SavingsGoal(name=name, target_amount=target, target_date=target_date, created_at=now)


def add_to_savings_goal(goal: SavingsGoal, amount: Amount) -> SavingsGoal:
    """Record a contribution; the goal is completed once current_amount reaches the target"""
    contribution = require_positive(amount)
    return replace(goal, current_amount=goal.current_amount + contribution)
