"""Discount service - discount creation, quoting and redemption.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import structlog
from django.utils import timezone

from ticketing.domain import Discount, DiscountCode, DiscountType, EventId, Money
from ticketing.domain.errors import (
    DiscountNotActiveError,
    DiscountUsageExceededError,
    DuplicateDiscountCodeError,
    EventNotFoundError,
    InvalidDiscountCodeError,
    ValidationFailedError,
)
from ticketing.domain.pricing import validate_discount_value
from ticketing.domain.value_objects import CENT
from ticketing.services.parsing import parse_code, parse_id, parse_price
from ticketing.stores.interfaces import DiscountStore, EventStore

logger = structlog.get_logger(__name__)


class DiscountService:
    """Service for discount resolution."""

    def __init__(self, discounts: DiscountStore, events: EventStore) -> None:
        self._discounts = discounts
        self._events = events

    def create_discount(
        self,
        code: str,
        event_id: str,
        discount_type: str,
        value: Decimal | int | str,
        expiry_date: datetime,
        max_usage: int = 0,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Discount:
        """Register a new discount code for an event.

        Raises:
            ValidationFailedError: If a field is malformed or out of range.
            EventNotFoundError: If the event does not exist.
            DuplicateDiscountCodeError: If the code is taken (case-insensitively).
        """
        errors: dict[str, str] = {}
        fields: dict[str, Any] = {}
        try:
            fields["code"] = parse_code(code)
        except ValidationFailedError as exc:
            errors.update(exc.errors)
        try:
            fields["event_id"] = parse_id(EventId, event_id, "event_id")
        except ValidationFailedError as exc:
            errors.update(exc.errors)
        try:
            fields["discount_type"] = DiscountType(discount_type)
        except ValueError:
            errors["discount_type"] = "Must be 'percentage' or 'flat'"
        try:
            amount = Decimal(str(value))
            if not amount.is_finite():
                raise ValueError(value)
            amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
            if "discount_type" in fields:
                validate_discount_value(fields["discount_type"], amount)
        except (InvalidOperation, ValueError):
            errors["value"] = "Out of range for the discount type"
        if max_usage < 0:
            errors["max_usage"] = "Cannot be negative"
        if start_date is not None and end_date is not None and start_date > end_date:
            errors["end_date"] = "Must not be before start_date"
        if errors:
            raise ValidationFailedError(errors)

        normalised: DiscountCode = fields["code"]
        event: EventId = fields["event_id"]
        if self._events.get_event(event) is None:
            raise EventNotFoundError(event_id)
        if self._discounts.code_exists(normalised):
            raise DuplicateDiscountCodeError(normalised.value)

        discount = self._discounts.create_discount(
            code=normalised,
            event_id=event,
            discount_type=fields["discount_type"],
            value=amount,
            expiry_date=expiry_date,
            max_usage=max_usage,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info("discount_created", code=discount.code.value, event_id=str(event))
        return discount

    def quote_discount(self, code: Any, event_id: Any, price: Any, now: datetime | None = None) -> Money:
        """Return the discounted price without consuming a use of the code."""
        discount = self._find_valid(
            parse_code(code), parse_id(EventId, event_id, "event_id"), now or timezone.now()
        )
        return discount.apply_to(parse_price(price))

    def resolve_discount(
        self, code: DiscountCode, event_id: EventId, price: Money, now: datetime | None = None
    ) -> tuple[Discount, Money]:
        """Validate the code, redeem one use of it and return the final price.

        Must run inside the caller's transaction so a later failure also
        rolls the redemption back.

        Raises:
            InvalidDiscountCodeError: No active, unexpired code for this event.
            DiscountNotActiveError: Outside the code's start/end window.
            DiscountUsageExceededError: The last use was taken concurrently.
        """
        discount = self._find_valid(code, event_id, now or timezone.now())
        if not self._discounts.apply_usage(discount.id):
            logger.info("discount_usage_exceeded", code=code.value)
            raise DiscountUsageExceededError(code.value)
        return discount, discount.apply_to(price)

    def _find_valid(self, code: DiscountCode, event_id: EventId, now: datetime) -> Discount:
        discount = self._discounts.find_active_discount(code, event_id, now)
        if discount is None or not discount.is_redeemable(now):
            raise InvalidDiscountCodeError(code.value)
        if not discount.is_within_window(now):
            raise DiscountNotActiveError(code.value)
        return discount
