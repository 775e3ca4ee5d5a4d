"""Date manipulation utilities"""

from datetime import datetime

from dateutil.relativedelta import relativedelta

from wallet_engine.domain.exceptions import InvalidTimestampError


def add_months(from_date, months: int):
    """Add calendar months, clamping to the last day of shorter months (Jan 31 + 1 -> Feb 28)"""
    return from_date + relativedelta(months=months)


def whole_months_between(start, end) -> int:
    """Number of complete calendar months from start to end (floor), 0 if end precedes start"""
    if end < start:
        return 0

    months = (end.year - start.year) * 12 + (end.month - start.month)
    # Step back when the anniversary within the final month hasn't been reached
    if add_months(start, months) > end:
        months -= 1
    return max(months, 0)


def is_aware(value) -> bool:
    return isinstance(value, datetime) and value.tzinfo is not None and value.utcoffset() is not None


def ensure_comparable(reference: datetime, value: datetime) -> datetime:
    """Reject a timestamp whose tz-awareness differs from reference; naive and aware can't be ordered"""
    if not isinstance(value, datetime):
        raise InvalidTimestampError(f"Expected a datetime, got {type(value).__name__}")
    if is_aware(reference) != is_aware(value):
        expected = "timezone-aware" if is_aware(reference) else "naive"
        raise InvalidTimestampError(f"Timestamp {value.isoformat()} must be {expected} like {reference.isoformat()}")
    return value


def now_like(reference: datetime) -> datetime:
    """Current time with the same tz-awareness as reference"""
    return datetime.now(tz=reference.tzinfo)
