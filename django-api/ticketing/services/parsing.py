"""Conversion of raw service inputs into domain primitives.

Each parser raises ValidationFailedError naming the offending field.
"""

from typing import Any, TypeVar

from ticketing.domain import DiscountCode, EventId, MemberId, Money, TicketId, TicketType
from ticketing.domain.errors import ValidationFailedError
from ticketing.domain.value_objects import MAX_AMOUNT

IdT = TypeVar("IdT", EventId, MemberId, TicketId)


def parse_id(id_type: type[IdT], value: Any, field: str) -> IdT:
    try:
        return id_type.from_string(str(value))
    except ValueError as exc:
        raise ValidationFailedError({field: "Must be a valid UUID"}) from exc


def parse_price(value: Any, field: str = "price") -> Money:
    """Parse a strictly positive amount below MAX_AMOUNT, rounded to cents."""
    try:
        price = Money.of(value)
    except (ValueError, TypeError) as exc:
        raise ValidationFailedError({field: "Must be a positive amount"}) from exc
    if price.amount <= 0:
        raise ValidationFailedError({field: "Must be a positive amount"})
    if price.amount >= MAX_AMOUNT:
        raise ValidationFailedError({field: f"Must be less than {MAX_AMOUNT}"})
    return price


def parse_code(value: Any, field: str = "code") -> DiscountCode:
    try:
        return DiscountCode(value)
    except (ValueError, AttributeError) as exc:
        raise ValidationFailedError({field: "Must be a non-empty string"}) from exc


def parse_ticket_type(value: Any) -> TicketType:
    try:
        return TicketType(value)
    except ValueError as exc:
        allowed = ", ".join(kind.value for kind in TicketType)
        raise ValidationFailedError({"ticket_type": f"Must be one of: {allowed}"}) from exc
