"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from prometheus_client import REGISTRY

from wallet_engine.domain.models import SavingsAccount
from wallet_engine.domain.savings import open_savings_account


@pytest.fixture
def start_date() -> datetime:
    """Fixed opening time so maturity dates are predictable"""
    return datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def plus_account(start_date: datetime) -> SavingsAccount:
    """10,000 locked for 6 months at the plus-tier rate (12%)"""
    return open_savings_account("10000", 6, "0.12", start_date)


@pytest.fixture
def sample_value() -> Callable[..., float]:
    """Read a Prometheus sample, treating a not-yet-created series as 0"""

    def _sample(name: str, labels: Optional[Dict[str, str]] = None) -> float:
        return REGISTRY.get_sample_value(name, labels or {}) or 0.0

    return _sample
