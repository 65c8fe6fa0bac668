from ticketing.domain.models import (
    BookingResult,
    CancellationResult,
    CredentialRefs,
    Discount,
    Event,
    Member,
    Ticket,
    TicketDetails,
    TicketTypeOption,
)
from ticketing.domain.status import TicketAction, TicketStatus
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

__all__ = [
    "BookingResult",
    "CancellationResult",
    "CredentialRefs",
    "Discount",
    "Event",
    "Member",
    "Ticket",
    "TicketDetails",
    "TicketTypeOption",
    "TicketAction",
    "TicketStatus",
    "Capacity",
    "DiscountCode",
    "DiscountId",
    "DiscountType",
    "EventId",
    "MemberId",
    "Money",
    "TicketId",
    "TicketType",
]
