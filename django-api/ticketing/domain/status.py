"""Ticket status state machine.

Every status change goes through `transition`, which rejects illegal moves
with the matching domain error. Allowed edges:

    Booked -> Checked-in
    Booked -> Cancelled

Checked-in, Cancelled and Refunded are terminal.
"""

from enum import Enum

from ticketing.domain.errors import (
    AlreadyCancelledError,
    AlreadyCheckedInError,
    DomainError,
    TicketCancelledError,
)


class TicketStatus(Enum):
    BOOKED = "Booked"
    CHECKED_IN = "Checked-in"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class TicketAction(Enum):
    CHECK_IN = "check_in"
    CANCEL = "cancel"


_ALLOWED: dict[tuple[TicketStatus, TicketAction], TicketStatus] = {
    (TicketStatus.BOOKED, TicketAction.CHECK_IN): TicketStatus.CHECKED_IN,
    (TicketStatus.BOOKED, TicketAction.CANCEL): TicketStatus.CANCELLED,
}

_REJECTED: dict[tuple[TicketStatus, TicketAction], type[DomainError]] = {
    (TicketStatus.CHECKED_IN, TicketAction.CHECK_IN): AlreadyCheckedInError,
    (TicketStatus.CANCELLED, TicketAction.CHECK_IN): TicketCancelledError,
    (TicketStatus.REFUNDED, TicketAction.CHECK_IN): TicketCancelledError,
    (TicketStatus.CHECKED_IN, TicketAction.CANCEL): AlreadyCheckedInError,
    (TicketStatus.CANCELLED, TicketAction.CANCEL): AlreadyCancelledError,
    (TicketStatus.REFUNDED, TicketAction.CANCEL): AlreadyCancelledError,
}


def transition(current: TicketStatus, action: TicketAction, ticket_id: str) -> TicketStatus:
    """Return the status reached by applying `action` to `current`.

    Raises:
        AlreadyCheckedInError: If the ticket was already checked in.
        AlreadyCancelledError: If cancelling a cancelled or refunded ticket.
        TicketCancelledError: If checking in a cancelled or refunded ticket.
    """
    target = _ALLOWED.get((current, action))
    if target is not None:
        return target
    raise _REJECTED[(current, action)](ticket_id)
