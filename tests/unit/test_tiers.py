"""Unit tests for tier tables and enum parsing"""

import pytest
from decimal import Decimal
from wallet_engine.domain.models import SubscriberTier, TransactionCategory
from wallet_engine.domain.tiers import (
    discount_rate,
    loan_rate_for_tier,
    parse_category,
    parse_tier,
    savings_rate_for_tier,
)
from wallet_engine.domain.exceptions import UnknownCategoryError, UnknownTierError


@pytest.mark.parametrize("category", list(TransactionCategory))
def test_basic_tier_has_no_discount(category):
    assert discount_rate(category, SubscriberTier.BASIC) == Decimal("0")


def test_discount_matrix():
    """Plus and VIP discounts; unlisted pairs default to zero"""
    assert discount_rate(TransactionCategory.PEER_TRANSFER, SubscriberTier.PLUS) == Decimal("0.25")
    assert discount_rate(TransactionCategory.WITHDRAWAL, SubscriberTier.PLUS) == Decimal("0.30")
    assert discount_rate(TransactionCategory.SCHEDULED_PAYMENT, SubscriberTier.PLUS) == Decimal("0")
    assert discount_rate(TransactionCategory.MERCHANT_SCAN, SubscriberTier.VIP) == Decimal("0.50")
    assert discount_rate(TransactionCategory.WITHDRAWAL, SubscriberTier.VIP) == Decimal("0.60")
    assert discount_rate(TransactionCategory.SCHEDULED_PAYMENT, SubscriberTier.VIP) == Decimal("1")
    assert discount_rate(TransactionCategory.DEPOSIT, SubscriberTier.VIP) == Decimal("0")


def test_savings_rates_increase_with_tier():
    assert savings_rate_for_tier("basic") == Decimal("0.06")
    assert savings_rate_for_tier("plus") == Decimal("0.12")
    assert savings_rate_for_tier(SubscriberTier.VIP) == Decimal("0.18")


def test_loan_rates_decrease_with_tier():
    """Loan rates are inverted: better tiers borrow cheaper"""
    assert loan_rate_for_tier("basic") == Decimal("0.20")
    assert loan_rate_for_tier("plus") == Decimal("0.18")
    assert loan_rate_for_tier("vip") == Decimal("0.15")


def test_parse_enums():
    assert parse_tier("vip") is SubscriberTier.VIP
    assert parse_tier(SubscriberTier.PLUS) is SubscriberTier.PLUS
    assert parse_category("merchant_scan") is TransactionCategory.MERCHANT_SCAN


def test_parse_unknown_values():
    with pytest.raises(UnknownTierError):
        parse_tier("platinum")
    with pytest.raises(UnknownTierError):
        savings_rate_for_tier("")
    with pytest.raises(UnknownCategoryError):
        parse_category("p2p")
