"""Loans against savings collateral - borrowing capacity, eligibility, approval, impact and repayment schedule"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from wallet_engine.domain.models import (
    LoanApproval,
    LoanEligibility,
    LoanImpact,
    LoanInstallment,
    LoanRepaymentPlan,
    LoanRiskLevel,
    SavingsAccount,
    SubscriberTier,
)
from wallet_engine.domain.exceptions import InvalidAmountError, LoanNotEligibleError
from wallet_engine.domain.savings import current_value
from wallet_engine.domain.tiers import loan_rate_for_tier, parse_tier
from wallet_engine.utils.date_utils import add_months, now_like
from wallet_engine.utils.money import Amount, require_positive, round_money, round_money_down, to_decimal

LOAN_TERM_MONTHS = 6
# Fraction of a year the loan interest is charged for (6 of 12 months)
LOAN_TERM_FACTOR = Decimal("0.5")
# Keeps principal + interest strictly inside the collateral after rounding
COLLATERAL_BUFFER = Decimal("1")
MINIMUM_LOAN_AMOUNT = Decimal("100")

# Eligibility score deductions, from a starting score of 100
OVER_LIMIT_SCORE_PENALTY = 50
BELOW_MINIMUM_SCORE_PENALTY = 20

# Loan-to-savings ratio above which a loan counts as medium / high risk
MEDIUM_RISK_RATIO = Decimal("0.5")
HIGH_RISK_RATIO = Decimal("0.8")


def max_loan_for_collateral(collateral_value: Amount, loan_rate: Amount) -> Decimal:
    """
    Largest principal P with P + P * rate * 0.5 <= collateral - 1.

    Rounded down to cents so the bound still holds after rounding.
    """
    value = to_decimal(collateral_value)
    rate = to_decimal(loan_rate)
    if rate < 0:
        raise InvalidAmountError("Loan rate cannot be negative")

    if value <= COLLATERAL_BUFFER:
        return Decimal("0")

    return round_money_down((value - COLLATERAL_BUFFER) / (1 + rate * LOAN_TERM_FACTOR))


def max_loan(account: SavingsAccount, tier_loan_rate: Amount, now: Optional[datetime] = None) -> Decimal:
    """Borrowing capacity against a single savings account; 0 unless the account is active"""
    if not account.is_active:
        return Decimal("0")

    if now is None:
        now = now_like(account.start_date)
    return max_loan_for_collateral(current_value(account, now), tier_loan_rate)


def check_loan_eligibility(
    requested_amount: Amount,
    collateral_value: Amount,
    tier: Union[SubscriberTier, str],
    has_active_loan: bool = False,
    minimum_loan: Amount = MINIMUM_LOAN_AMOUNT,
) -> LoanEligibility:
    """
    Decide whether a loan request fits within the savings collateral.

    Every failed check adds a reason; the request is eligible only when there
    are none.
    """
    requested = to_decimal(requested_amount)
    collateral = to_decimal(collateral_value)
    floor = to_decimal(minimum_loan)
    rate = loan_rate_for_tier(parse_tier(tier))

    if has_active_loan:
        return LoanEligibility(
            eligible=False,
            max_loan_amount=Decimal("0"),
            interest_rate=rate,
            collateral_value=collateral,
            score=0,
            reasons=["An active loan is already outstanding"],
        )

    if collateral <= COLLATERAL_BUFFER:
        return LoanEligibility(
            eligible=False,
            max_loan_amount=Decimal("0"),
            interest_rate=rate,
            collateral_value=collateral,
            score=0,
            reasons=[f"Insufficient savings: more than {COLLATERAL_BUFFER} in savings is required"],
        )

    limit = max_loan_for_collateral(collateral, rate)
    reasons: List[str] = []
    score = 100

    if requested > limit:
        reasons.append(f"Requested amount exceeds maximum loan of {limit}")
        score -= OVER_LIMIT_SCORE_PENALTY
    if requested < floor:
        reasons.append(f"Minimum loan amount is {floor}")
        score -= BELOW_MINIMUM_SCORE_PENALTY

    return LoanEligibility(
        eligible=not reasons,
        max_loan_amount=limit,
        interest_rate=rate,
        collateral_value=collateral,
        score=max(score, 0),
        reasons=reasons,
    )


def loan_repayment_plan(
    amount: Amount,
    annual_rate: Amount,
    term_months: int = LOAN_TERM_MONTHS,
    start_date: date | None = None,
) -> LoanRepaymentPlan:
    """
    Simple-interest repayment schedule in equal monthly installments.

    Requirements:
    - Interest = amount * annual_rate / 12 * term_months
    - Installments due one calendar month apart, first one month after start
    - Last installment absorbs the rounding remainder
    - interest_breakdown splits out the interest in each month's payment,
      charged on the principal still outstanding

    Example:
        1000 at 20% over 6 months -> interest 100.00, total 1100.00
        1100.00 / 6 = 183.33 base, remainder 0.02
        Last installment: 183.33 + 0.02 = 183.35
    """
    principal = require_positive(amount)
    rate = to_decimal(annual_rate)
    if rate < 0:
        raise InvalidAmountError("Loan rate cannot be negative")
    if term_months <= 0:
        raise InvalidAmountError("Loan term must be at least one month")

    if start_date is None:
        start_date = date.today()

    total_interest = round_money(principal * rate / 12 * term_months)
    total_repayment = principal + total_interest

    base_amount = round_money_down(total_repayment / term_months)
    remainder = total_repayment - base_amount * term_months

    installments = []
    for i in range(term_months):
        amount_due = base_amount + (remainder if i == term_months - 1 else Decimal("0"))
        installments.append(LoanInstallment(due_date=add_months(start_date, i + 1), amount=amount_due))

    monthly_rate = rate / 12
    monthly_payment = total_repayment / term_months
    outstanding = principal
    interest_breakdown = []
    for _ in range(term_months):
        interest = outstanding * monthly_rate
        outstanding -= monthly_payment - interest
        interest_breakdown.append(round_money(interest))

    return LoanRepaymentPlan(
        principal=principal,
        annual_rate=rate,
        term_months=term_months,
        total_interest=total_interest,
        total_repayment=total_repayment,
        installments=installments,
        interest_breakdown=interest_breakdown,
    )


def approve_loan(
    requested_amount: Amount,
    collateral_value: Amount,
    tier: Union[SubscriberTier, str],
    now: datetime,
    has_active_loan: bool = False,
    minimum_loan: Amount = MINIMUM_LOAN_AMOUNT,
) -> LoanApproval:
    """
    Approve a loan against savings collateral.

    The approved amount is the request capped at the collateral limit; the
    loan is disbursed at `now` and matures after the fixed loan term.

    Raises:
        LoanNotEligibleError: any eligibility check failed
    """
    eligibility = check_loan_eligibility(
        requested_amount,
        collateral_value,
        tier,
        has_active_loan=has_active_loan,
        minimum_loan=minimum_loan,
    )
    if not eligibility.eligible:
        raise LoanNotEligibleError(f"Loan not eligible: {', '.join(eligibility.reasons)}")

    requested = to_decimal(requested_amount)
    return LoanApproval(
        requested_amount=requested,
        approved_amount=min(requested, eligibility.max_loan_amount),
        interest_rate=eligibility.interest_rate,
        term_months=LOAN_TERM_MONTHS,
        disbursed_at=now,
        maturity_date=add_months(now, LOAN_TERM_MONTHS),
        eligibility=eligibility,
    )


def calculate_loan_impact(loan_amount: Amount, collateral_value: Amount) -> LoanImpact:
    """Savings left over and risk band for a loan: ratio > 0.8 is high, > 0.5 medium"""
    loan = to_decimal(loan_amount)
    collateral = require_positive(collateral_value)
    if loan < 0:
        raise InvalidAmountError("Loan amount cannot be negative")

    ratio = loan / collateral
    if ratio > HIGH_RISK_RATIO:
        risk_level = LoanRiskLevel.HIGH
    elif ratio > MEDIUM_RISK_RATIO:
        risk_level = LoanRiskLevel.MEDIUM
    else:
        risk_level = LoanRiskLevel.LOW

    return LoanImpact(
        remaining_savings=collateral - loan,
        loan_to_savings_ratio=ratio.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP),
        risk_level=risk_level,
    )
