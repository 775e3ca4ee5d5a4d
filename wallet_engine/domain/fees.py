"""Transaction fee calculation - bracketed peer transfers, flat rules, tier discounts

Peer-transfer schedule (amount brackets, upper bound inclusive):
    - 0 - 100:           free
    - 100 - 500:         1.00% + 2,  cap 20
    - 500 - 1,000:       0.90% + 5,  cap 40
    - 1,000 - 5,000:     0.75% + 7,  cap 80
    - 5,000 - 10,000:    0.50% + 10, cap 150
    - 10,000 - 50,000:   0.30% + 15, cap 300
    - 50,000+:           0.20% + 20, cap 600

Other categories:
    - airtime, data bundle, deposit: free
    - withdrawal:        1.5% + 20, cap 250
    - merchant scan:     0.75% + 5, cap 50
    - scheduled payment: 0.5%, uncapped
"""

from decimal import Decimal
from typing import Dict, Sequence, Union

from wallet_engine.domain.models import (
    FeeBracket,
    FeeBreakdown,
    FeeRule,
    SubscriberTier,
    TransactionCategory,
)
from wallet_engine.domain.exceptions import UnknownCategoryError
from wallet_engine.domain.tiers import discount_rate, parse_category, parse_tier
from wallet_engine.utils.money import Amount, require_positive, round_money

FREE = FeeRule(Decimal("0"))

PEER_TRANSFER_BRACKETS: Sequence[FeeBracket] = (
    FeeBracket(Decimal("100"), FeeRule(Decimal("0"), Decimal("0"), Decimal("0"))),
    FeeBracket(Decimal("500"), FeeRule(Decimal("0.01"), Decimal("2"), Decimal("20"))),
    FeeBracket(Decimal("1000"), FeeRule(Decimal("0.009"), Decimal("5"), Decimal("40"))),
    FeeBracket(Decimal("5000"), FeeRule(Decimal("0.0075"), Decimal("7"), Decimal("80"))),
    FeeBracket(Decimal("10000"), FeeRule(Decimal("0.005"), Decimal("10"), Decimal("150"))),
    FeeBracket(Decimal("50000"), FeeRule(Decimal("0.003"), Decimal("15"), Decimal("300"))),
    FeeBracket(None, FeeRule(Decimal("0.002"), Decimal("20"), Decimal("600"))),
)

# Categories with a single rule independent of amount
STATIC_RULES: Dict[TransactionCategory, FeeRule] = {
    TransactionCategory.AIRTIME: FREE,
    TransactionCategory.DATA_BUNDLE: FREE,
    TransactionCategory.DEPOSIT: FREE,
    TransactionCategory.WITHDRAWAL: FeeRule(Decimal("0.015"), Decimal("20"), Decimal("250")),
    TransactionCategory.MERCHANT_SCAN: FeeRule(Decimal("0.0075"), Decimal("5"), Decimal("50")),
    TransactionCategory.SCHEDULED_PAYMENT: FeeRule(Decimal("0.005")),
}


def select_bracket(amount: Decimal, brackets: Sequence[FeeBracket] = PEER_TRANSFER_BRACKETS) -> FeeBracket:
    """First bracket whose upper bound the amount does not exceed"""
    for bracket in brackets:
        if bracket.upper_bound is None or amount <= bracket.upper_bound:
            return bracket
    # Table always ends with an unbounded bracket
    raise ValueError("Fee bracket table has no unbounded final bracket")


def resolve_rule(amount: Decimal, category: TransactionCategory) -> FeeRule:
    if category == TransactionCategory.PEER_TRANSFER:
        return select_bracket(amount).rule

    rule = STATIC_RULES.get(category)
    if rule is None:
        raise UnknownCategoryError(f"No fee rule for category: {category.value}")
    return rule


def fee_breakdown(
    amount: Amount,
    category: Union[TransactionCategory, str],
    tier: Union[SubscriberTier, str] = SubscriberTier.BASIC,
) -> FeeBreakdown:
    """
    Itemise the fee for a transaction.

    Flow:
    1. Resolve the rule (bracket for peer transfers, static rule otherwise)
    2. Apply percent + fixed, then the cap
    3. Scale by (1 - tier discount)
    4. Round to cents, half-up

    Raises:
        InvalidAmountError: amount is not a positive finite number
        UnknownCategoryError: no rule for the category
        UnknownTierError: tier is not recognised
    """
    value = require_positive(amount)
    category = parse_category(category)
    tier = parse_tier(tier)

    rule = resolve_rule(value, category)
    base_fee = rule.apply(value)

    discount = discount_rate(category, tier)
    fee = round_money(base_fee * (Decimal("1") - discount))

    return FeeBreakdown(
        amount=value,
        category=category,
        tier=tier,
        percentage_fee=round_money(value * rule.percent_rate),
        fixed_fee=rule.fixed_amount,
        base_fee=round_money(base_fee),
        discount_rate=discount,
        discount_amount=round_money(base_fee) - fee,
        fee=fee,
        net_amount=value - fee,
    )


def compute_fee(
    amount: Amount,
    category: Union[TransactionCategory, str],
    tier: Union[SubscriberTier, str] = SubscriberTier.BASIC,
) -> Decimal:
    """Fee to charge for a transaction, rounded to cents"""
    return fee_breakdown(amount, category, tier).fee
