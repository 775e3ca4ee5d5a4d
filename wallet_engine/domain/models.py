"""Domain models - pure Python dataclasses representing fee and savings entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class TransactionCategory(str, Enum):
    """Kind of wallet transaction; selects the fee rule"""

    PEER_TRANSFER = "peer_transfer"
    AIRTIME = "airtime"
    DATA_BUNDLE = "data_bundle"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    MERCHANT_SCAN = "merchant_scan"
    SCHEDULED_PAYMENT = "scheduled_payment"


class SubscriberTier(str, Enum):
    """Subscription level attached to the account at call time"""

    BASIC = "basic"
    PLUS = "plus"
    VIP = "vip"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    WITHDRAWN = "withdrawn"


@dataclass(frozen=True)
class FeeRule:
    """Percent + fixed fee, optionally capped"""

    percent_rate: Decimal
    fixed_amount: Decimal = Decimal("0")
    cap_amount: Optional[Decimal] = None

    def apply(self, amount: Decimal) -> Decimal:
        fee = amount * self.percent_rate + self.fixed_amount
        if self.cap_amount is not None and fee > self.cap_amount:
            fee = self.cap_amount
        return max(fee, Decimal("0"))


@dataclass(frozen=True)
class FeeBracket:
    """Amount range ending at upper_bound (inclusive); None means unbounded"""

    upper_bound: Optional[Decimal]
    rule: FeeRule


@dataclass
class FeeBreakdown:
    """Itemised fee for a single transaction"""

    amount: Decimal
    category: TransactionCategory
    tier: SubscriberTier
    percentage_fee: Decimal
    fixed_fee: Decimal
    base_fee: Decimal  # after cap, before tier discount
    discount_rate: Decimal
    discount_amount: Decimal
    fee: Decimal
    net_amount: Decimal


@dataclass(frozen=True)
class SavingsAccount:
    """Locked savings deposit; principal and rate are fixed at opening"""

    principal: Decimal
    annual_interest_rate: Decimal
    lock_period_months: int
    start_date: datetime
    maturity_date: datetime
    status: AccountStatus = AccountStatus.ACTIVE
    withdrawn_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE


@dataclass
class WithdrawalResult:
    """Outcome of closing a savings account"""

    payout: Decimal
    penalty: Decimal
    early: bool
    account: SavingsAccount  # snapshot after the status transition


@dataclass
class SavingsSummary:
    """Point-in-time view of a savings account"""

    months_elapsed: int
    current_value: Decimal
    interest_earned: Decimal
    maturity_value: Decimal
    days_to_maturity: int
    is_matured: bool


@dataclass
class LoanEligibility:
    """Derived borrowing capacity against savings collateral"""

    eligible: bool
    max_loan_amount: Decimal
    interest_rate: Decimal
    collateral_value: Decimal
    score: int = 0  # 0-100; 100 means every check passed
    reasons: List[str] = field(default_factory=list)


@dataclass
class LoanInstallment:
    """Single monthly loan repayment"""

    due_date: date
    amount: Decimal


@dataclass
class LoanRepaymentPlan:
    """Simple-interest repayment schedule for a collateralised loan"""

    principal: Decimal
    annual_rate: Decimal
    term_months: int
    total_interest: Decimal
    total_repayment: Decimal
    installments: List[LoanInstallment]
    # Interest share of each month's payment on a declining balance
    interest_breakdown: List[Decimal] = field(default_factory=list)


@dataclass(frozen=True)
class SavingsGoal:
    """Target amount a user is saving towards by a date"""

    name: str
    target_amount: Decimal
    target_date: datetime
    created_at: datetime
    current_amount: Decimal = Decimal("0")

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount

    @property
    def remaining_amount(self) -> Decimal:
        return max(self.target_amount - self.current_amount, Decimal("0"))


class LoanRiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class LoanImpact:
    """Effect of a loan on the savings that back it"""

    remaining_savings: Decimal
    loan_to_savings_ratio: Decimal
    risk_level: LoanRiskLevel


@dataclass
class LoanApproval:
    """Approved loan terms, disbursed at approval time"""

    requested_amount: Decimal
    approved_amount: Decimal
    interest_rate: Decimal
    term_months: int
    disbursed_at: datetime
    maturity_date: datetime
    eligibility: LoanEligibility
