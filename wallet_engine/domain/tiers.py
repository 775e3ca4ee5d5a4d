"""Subscriber tier tables: fee discounts, savings rates and loan rates"""

from decimal import Decimal
from typing import Dict, Union

from wallet_engine.domain.models import SubscriberTier, TransactionCategory
from wallet_engine.domain.exceptions import UnknownCategoryError, UnknownTierError

# Missing (tier, category) pairs get no discount
DISCOUNTS: Dict[SubscriberTier, Dict[TransactionCategory, Decimal]] = {
    SubscriberTier.BASIC: {},
    SubscriberTier.PLUS: {
        TransactionCategory.PEER_TRANSFER: Decimal("0.25"),
        TransactionCategory.MERCHANT_SCAN: Decimal("0.25"),
        TransactionCategory.WITHDRAWAL: Decimal("0.30"),
        TransactionCategory.SCHEDULED_PAYMENT: Decimal("0"),
    },
    SubscriberTier.VIP: {
        TransactionCategory.PEER_TRANSFER: Decimal("0.50"),
        TransactionCategory.MERCHANT_SCAN: Decimal("0.50"),
        TransactionCategory.WITHDRAWAL: Decimal("0.60"),
        TransactionCategory.SCHEDULED_PAYMENT: Decimal("1.00"),  # free
    },
}

SAVINGS_RATES: Dict[SubscriberTier, Decimal] = {
    SubscriberTier.BASIC: Decimal("0.06"),
    SubscriberTier.PLUS: Decimal("0.12"),
    SubscriberTier.VIP: Decimal("0.18"),
}

# Better tiers borrow cheaper
LOAN_RATES: Dict[SubscriberTier, Decimal] = {
    SubscriberTier.BASIC: Decimal("0.20"),
    SubscriberTier.PLUS: Decimal("0.18"),
    SubscriberTier.VIP: Decimal("0.15"),
}


def parse_tier(value: Union[SubscriberTier, str]) -> SubscriberTier:
    try:
        return SubscriberTier(value)
    except ValueError:
        raise UnknownTierError(f"Unknown subscriber tier: {value!r}")


def parse_category(value: Union[TransactionCategory, str]) -> TransactionCategory:
    try:
        return TransactionCategory(value)
    except ValueError:
        raise UnknownCategoryError(f"Unknown transaction category: {value!r}")


def discount_rate(category: TransactionCategory, tier: SubscriberTier) -> Decimal:
    """Fraction of the base fee waived for this tier"""
    return DISCOUNTS[tier].get(category, Decimal("0"))


def savings_rate_for_tier(tier: Union[SubscriberTier, str]) -> Decimal:
    """Annual savings rate offered when an account is opened"""
    return SAVINGS_RATES[parse_tier(tier)]


def loan_rate_for_tier(tier: Union[SubscriberTier, str]) -> Decimal:
    """Annual loan rate charged against savings collateral"""
    return LOAN_RATES[parse_tier(tier)]
