"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAmountError(DomainException):
    """Amount is non-positive, NaN or infinite"""

    pass


class UnknownCategoryError(DomainException):
    """No fee rule exists for the transaction category"""

    pass


class UnknownTierError(DomainException):
    """Subscriber tier is not one of basic, plus, vip"""

    pass


class BelowMinimumDepositError(DomainException):
    """Savings principal is under the minimum deposit floor"""

    pass


class InvalidLockPeriodError(DomainException):
    """Lock period is not one of the allowed month counts"""

    pass


class AccountNotMatureError(DomainException):
    """Withdrawal before maturity without the early flag"""

    pass


class AccountAlreadyWithdrawnError(DomainException):
    """Savings account has already been withdrawn"""

    pass


class InvalidTimestampError(DomainException):
    """Timestamp cannot be compared with the account's dates (naive vs aware) or is out of range"""

    pass


class LoanNotEligibleError(DomainException):
    """Loan request failed the eligibility checks"""

    pass
