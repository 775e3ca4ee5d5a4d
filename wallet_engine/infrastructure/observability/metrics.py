"""Prometheus metrics for quoted fees, savings activity and rejected operations"""

from prometheus_client import Counter, Histogram

from wallet_engine.config import settings
from wallet_engine.domain.models import FeeBreakdown, LoanApproval, SavingsAccount, WithdrawalResult

# Fee metrics
fee_computed_counter = Counter(
    "wallet_fee_computed_total",
    "Total fees computed",
    ["category", "tier"],
)

fee_quoted_counter = Counter(
    "wallet_fee_quoted",
    "Fee amounts quoted, in currency units",
    ["category"],
)

# Savings metrics
savings_opened_counter = Counter(
    "wallet_savings_opened_total",
    "Savings accounts opened",
    ["lock_period_months"],
)

savings_withdrawal_counter = Counter(
    "wallet_savings_withdrawals_total",
    "Savings withdrawals",
    ["outcome"],  # matured | early
)

penalty_revenue_counter = Counter(
    "wallet_early_withdrawal_penalty",
    "Early withdrawal penalties, in currency units",
)

# Loan metrics
loan_approved_counter = Counter(
    "wallet_loans_approved_total",
    "Loans approved against savings collateral",
)

# Errors
domain_error_counter = Counter(
    "wallet_domain_errors_total",
    "Operations rejected with a domain error",
    ["operation", "error"],
)

# Engine latency
operation_duration_histogram = Histogram(
    "wallet_engine_operation_duration_seconds",
    "Engine call latency",
    ["operation"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05],
)


def record_fee(breakdown: FeeBreakdown) -> None:
    if not settings.metrics_enabled:
        return
    fee_computed_counter.labels(category=breakdown.category.value, tier=breakdown.tier.value).inc()
    fee_quoted_counter.labels(category=breakdown.category.value).inc(float(breakdown.fee))


def record_savings_opened(account: SavingsAccount) -> None:
    if not settings.metrics_enabled:
        return
    savings_opened_counter.labels(lock_period_months=str(account.lock_period_months)).inc()


def record_withdrawal(result: WithdrawalResult) -> None:
    if not settings.metrics_enabled:
        return
    outcome = "early" if result.early else "matured"
    savings_withdrawal_counter.labels(outcome=outcome).inc()
    penalty_revenue_counter.inc(float(result.penalty))


def record_error(operation: str, error: Exception) -> None:
    if not settings.metrics_enabled:
        return
    domain_error_counter.labels(operation=operation, error=type(error).__name__).inc()


def record_loan_approved(approval: LoanApproval) -> None:
    if not settings.metrics_enabled:
        return
    loan_approved_counter.inc()
