"""Discount price computation.

All arithmetic is Decimal; results are rounded half-up to cents.
"""

from decimal import ROUND_HALF_UP, Decimal

from ticketing.domain.value_objects import CENT, MAX_AMOUNT, DiscountType, Money

HUNDRED = Decimal(100)


def validate_discount_value(discount_type: DiscountType, value: Decimal) -> None:
    """Raise ValueError if `value` is out of range for `discount_type`."""
    if value < 0:
        raise ValueError("Discount value cannot be negative")
    if value >= MAX_AMOUNT:
        raise ValueError("Discount value is too large")
    if discount_type is DiscountType.PERCENTAGE and value > HUNDRED:
        raise ValueError("Percentage discount cannot exceed 100")


def apply_discount(price: Money, discount_type: DiscountType, value: Decimal) -> Money:
    """Return the price after applying the discount, clamped at zero."""
    validate_discount_value(discount_type, value)
    if discount_type is DiscountType.PERCENTAGE:
        reduced = price.amount - price.amount * value / HUNDRED
    else:
        reduced = price.amount - value
    reduced = max(Decimal(0), reduced).quantize(CENT, rounding=ROUND_HALF_UP)
    return Money(amount=min(reduced, price.amount))
