"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ticketing.domain.pricing import apply_discount
from ticketing.domain.status import TicketStatus
from ticketing.domain.value_objects import (
    Capacity,
    DiscountCode,
    DiscountId,
    DiscountType,
    EventId,
    MemberId,
    Money,
    TicketId,
    TicketType,
)


@dataclass(frozen=True)
class TicketTypeOption:
    """One entry of an event's ticket-type catalog."""

    name: str
    price: Money
    quantity: Capacity


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    location: str
    starts_at: datetime
    ticket_types: tuple[TicketTypeOption, ...] = ()

    def find_ticket_type(self, name: str) -> TicketTypeOption | None:
        for option in self.ticket_types:
            if option.name == name:
                return option
        return None


@dataclass(frozen=True)
class Member:
    """Domain representation of a platform user."""

    id: MemberId
    name: str
    email: str
    role: str = "user"
    referred_by: MemberId | None = None
    reward_points: int = 0


@dataclass(frozen=True)
class Discount:
    """Domain representation of a redeemable discount code."""

    id: DiscountId
    code: DiscountCode
    event_id: EventId
    discount_type: DiscountType
    value: Decimal
    expiry_date: datetime
    max_usage: int = 0
    used_count: int = 0
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None

    def is_redeemable(self, now: datetime) -> bool:
        """Active and not past its expiry date."""
        return self.is_active and self.expiry_date >= now

    def is_within_window(self, now: datetime) -> bool:
        if self.start_date is not None and now < self.start_date:
            return False
        if self.end_date is not None and now > self.end_date:
            return False
        return True

    def apply_to(self, price: Money) -> Money:
        return apply_discount(price, self.discount_type, self.value)


@dataclass(frozen=True)
class CredentialRefs:
    """Storage paths of a ticket's generated badge artifacts."""

    badge_path: str
    badge_pdf_path: str


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: TicketId
    event_id: EventId
    member_id: MemberId
    ticket_type: TicketType
    price: Money
    final_price: Money
    status: TicketStatus
    created_at: datetime
    discount_id: DiscountId | None = None
    credentials: CredentialRefs | None = None

    def __post_init__(self) -> None:
        if self.final_price.amount > self.price.amount:
            raise ValueError("Final price cannot exceed the listed price")


@dataclass(frozen=True)
class BookingResult:
    ticket: Ticket
    credentials: CredentialRefs


@dataclass(frozen=True)
class TicketDetails:
    """A ticket with its holder, as shown when the badge QR code is scanned."""

    ticket: Ticket
    holder: Member


@dataclass(frozen=True)
class CancellationResult:
    ticket: Ticket
    refund_percentage: int
