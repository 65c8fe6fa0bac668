"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Methods documented as
atomic must apply their check and write as one conditional update in the
backing store, never as a read-modify-write in application code.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal

from ticketing.domain import (
    CredentialRefs,
    Discount,
    DiscountCode,
    DiscountId,
    DiscountType,
    Event,
    EventId,
    Member,
    MemberId,
    Money,
    Ticket,
    TicketId,
    TicketStatus,
    TicketType,
)


class UnitOfWork(ABC):
    """Transaction boundary spanning every store."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager; writes inside it commit or roll back together."""
        ...


class EventStore(ABC):
    """Interface for event lookups."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event with its ticket-type catalog, or None if not found."""
        ...

    @abstractmethod
    def reserve_ticket_type(self, event_id: EventId, name: str) -> bool:
        """Atomically take one unit of a catalog entry's remaining quantity.

        Returns False when the entry is missing or has none left.
        """
        ...


class MemberStore(ABC):
    """Interface for member (user) lookups and reward credits."""

    @abstractmethod
    def get_member(self, member_id: MemberId) -> Member | None:
        ...

    @abstractmethod
    def credit_referral(self, referrer_id: MemberId, ticket_id: TicketId, amount: int) -> bool:
        """Add `amount` reward points to the referrer, at most once per ticket.

        Returns False when the ticket already credited a referrer.
        """
        ...


class DiscountStore(ABC):
    """Interface for discount persistence operations."""

    @abstractmethod
    def code_exists(self, code: DiscountCode) -> bool:
        ...

    @abstractmethod
    def create_discount(
        self,
        code: DiscountCode,
        event_id: EventId,
        discount_type: DiscountType,
        value: Decimal,
        expiry_date: datetime,
        max_usage: int = 0,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Discount:
        ...

    @abstractmethod
    def find_active_discount(self, code: DiscountCode, event_id: EventId, now: datetime) -> Discount | None:
        """Return the active, unexpired discount for this code and event, or None."""
        ...

    @abstractmethod
    def apply_usage(self, discount_id: DiscountId) -> bool:
        """Atomically record one redemption.

        Increments used_count only while the discount is active and below
        max_usage (0 = unlimited), and deactivates it when the cap is hit.
        Returns False if no use was left.
        """
        ...


class TicketStore(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    def create_ticket(
        self,
        event_id: EventId,
        member_id: MemberId,
        ticket_type: TicketType,
        price: Money,
        final_price: Money,
        discount_id: DiscountId | None = None,
    ) -> Ticket:
        """Persist a new ticket in status Booked."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        ...

    @abstractmethod
    def attach_credentials(self, ticket_id: TicketId, credentials: CredentialRefs) -> Ticket:
        ...

    @abstractmethod
    def update_status(self, ticket_id: TicketId, expected: TicketStatus, new: TicketStatus) -> Ticket | None:
        """Atomically move a ticket from `expected` to `new`.

        Returns the updated ticket, or None if its status was no longer `expected`.
        """
        ...
