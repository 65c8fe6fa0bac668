"""Ticket service - booking, check-in and cancellation.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Booking policy: the discount redemption, ticket row and credential
references are written in one transaction. A credential generation failure
fails the whole booking so no ticket is issued without a scannable badge.
The referral bonus is credited after that transaction and never fails it.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from datetime import datetime
from typing import Any

import structlog
from django.utils import timezone

from ticketing.credentials.interfaces import CredentialGenerator
from ticketing.domain import (
    BookingResult,
    CancellationResult,
    CredentialRefs,
    Event,
    EventId,
    Member,
    MemberId,
    Ticket,
    TicketAction,
    TicketDetails,
    TicketId,
    TicketType,
)
from ticketing.domain.errors import (
    CredentialGenerationError,
    EventNotFoundError,
    MemberNotFoundError,
    TicketNotFoundError,
    TicketTypeSoldOutError,
    TicketTypeUnavailableError,
    ValidationFailedError,
)
from ticketing.domain.refunds import REFUND_POLICY, days_before_event, refund_percentage
from ticketing.domain.status import transition
from ticketing.services.discount_service import DiscountService
from ticketing.services.parsing import parse_code, parse_id, parse_price, parse_ticket_type
from ticketing.stores.interfaces import EventStore, MemberStore, TicketStore, UnitOfWork

logger = structlog.get_logger(__name__)

REFERRAL_BONUS = 10


class TicketService:
    """Service for the ticket lifecycle."""

    def __init__(
        self,
        tickets: TicketStore,
        events: EventStore,
        members: MemberStore,
        discounts: DiscountService,
        credentials: CredentialGenerator,
        unit_of_work: UnitOfWork,
        *,
        enforce_catalog: bool = False,
        credential_timeout: float = 10.0,
        referral_bonus: int = REFERRAL_BONUS,
    ) -> None:
        self._tickets = tickets
        self._events = events
        self._members = members
        self._discounts = discounts
        self._credentials = credentials
        self._uow = unit_of_work
        self._enforce_catalog = enforce_catalog
        self._credential_timeout = credential_timeout
        self._referral_bonus = referral_bonus

    def book_ticket(
        self,
        event_id: Any,
        member_id: Any,
        ticket_type: Any,
        price: Any,
        discount_code: str | None = None,
        now: datetime | None = None,
    ) -> BookingResult:
        """Book a ticket, optionally redeeming a discount code.

        Raises:
            ValidationFailedError: If a required field is missing or malformed.
            EventNotFoundError: If the event does not exist.
            MemberNotFoundError: If the booking user does not exist.
            InvalidDiscountCodeError, DiscountNotActiveError,
            DiscountUsageExceededError: If the discount code cannot be redeemed.
            TicketTypeUnavailableError, TicketTypeSoldOutError: With catalog
                enforcement on, if the event does not sell this ticket type.
            CredentialGenerationError: If the badge could not be produced.
        """
        errors: dict[str, str] = {}
        parsed: dict[str, Any] = {}
        for field, parse in (
            ("event_id", lambda: parse_id(EventId, event_id, "event_id")),
            ("member_id", lambda: parse_id(MemberId, member_id, "member_id")),
            ("ticket_type", lambda: parse_ticket_type(ticket_type)),
            ("price", lambda: parse_price(price)),
            ("discount_code", lambda: parse_code(discount_code, "discount_code") if discount_code else None),
        ):
            try:
                parsed[field] = parse()
            except ValidationFailedError as exc:
                errors.update(exc.errors)
        if errors:
            raise ValidationFailedError(errors)

        event = self._events.get_event(parsed["event_id"])
        if event is None:
            raise EventNotFoundError(str(event_id))
        member = self._members.get_member(parsed["member_id"])
        if member is None:
            raise MemberNotFoundError(str(member_id))

        listed_price = parsed["price"]
        code = parsed["discount_code"]
        with self._uow.atomic():
            final_price = listed_price
            discount_id = None
            if code is not None:
                discount, final_price = self._discounts.resolve_discount(code, event.id, listed_price, now)
                discount_id = discount.id
            if self._enforce_catalog:
                self._reserve(event, parsed["ticket_type"])
            ticket = self._tickets.create_ticket(
                event_id=event.id,
                member_id=member.id,
                ticket_type=parsed["ticket_type"],
                price=listed_price,
                final_price=final_price,
                discount_id=discount_id,
            )
            credentials = self._generate_credentials(member, event, ticket)
            try:
                ticket = self._tickets.attach_credentials(ticket.id, credentials)
            except Exception:
                self._credentials.discard(credentials)
                raise

        logger.info(
            "ticket_booked",
            ticket_id=str(ticket.id),
            event_id=str(event.id),
            ticket_type=ticket.ticket_type.value,
            final_price=str(ticket.final_price),
            discount_code=code.value if code else None,
        )
        if member.referred_by is not None:
            self._credit_referrer(member, ticket)
        return BookingResult(ticket=ticket, credentials=credentials)

    def get_ticket(self, ticket_id: Any) -> Ticket:
        """Return a ticket by ID.

        Raises:
            ValidationFailedError: If the ticket_id is not a valid UUID.
            TicketNotFoundError: If the ticket does not exist.
        """
        return self._get(parse_id(TicketId, ticket_id, "ticket_id"))

    def get_ticket_details(self, ticket_id: Any) -> TicketDetails:
        """Return a ticket together with its holder's name and email.

        Raises:
            ValidationFailedError: If the ticket_id is not a valid UUID.
            TicketNotFoundError: If the ticket does not exist.
            MemberNotFoundError: If the holder no longer exists.
        """
        ticket = self.get_ticket(ticket_id)
        holder = self._members.get_member(ticket.member_id)
        if holder is None:
            raise MemberNotFoundError(str(ticket.member_id))
        return TicketDetails(ticket=ticket, holder=holder)

    def check_in(self, ticket_id: Any) -> Ticket:
        """Mark a booked ticket as checked in.

        Raises:
            TicketNotFoundError: If the ticket does not exist.
            AlreadyCheckedInError: If it was already checked in.
            TicketCancelledError: If it was cancelled.
        """
        ticket = self._apply(parse_id(TicketId, ticket_id, "ticket_id"), TicketAction.CHECK_IN)
        logger.info("ticket_checked_in", ticket_id=str(ticket.id))
        return ticket

    def cancel_ticket(self, ticket_id: Any, now: datetime | None = None) -> CancellationResult:
        """Cancel a booked ticket and report the refund percentage it earns.

        Raises:
            TicketNotFoundError: If the ticket does not exist.
            AlreadyCancelledError: If it was already cancelled.
            AlreadyCheckedInError: If it was already checked in.
        """
        ticket = self._apply(parse_id(TicketId, ticket_id, "ticket_id"), TicketAction.CANCEL)
        event = self._events.get_event(ticket.event_id)
        if event is None:
            raise EventNotFoundError(str(ticket.event_id))
        days_left = days_before_event(event.starts_at, now or timezone.now())
        percentage = refund_percentage(ticket.ticket_type, days_left)
        logger.info(
            "ticket_cancelled",
            ticket_id=str(ticket.id),
            days_before_event=days_left,
            refund_percentage=percentage,
        )
        return CancellationResult(ticket=ticket, refund_percentage=percentage)

    def get_refund_policy(self) -> dict[str, str]:
        return dict(REFUND_POLICY)

    def _get(self, ticket_id: TicketId) -> Ticket:
        ticket = self._tickets.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(str(ticket_id))
        return ticket

    def _apply(self, ticket_id: TicketId, action: TicketAction) -> Ticket:
        # No edge leads back to Booked, so a lost race re-reads a terminal
        # status and the next transition() raises.
        while True:
            ticket = self._get(ticket_id)
            target = transition(ticket.status, action, str(ticket_id))
            updated = self._tickets.update_status(ticket_id, ticket.status, target)
            if updated is not None:
                return updated

    def _reserve(self, event: Event, ticket_type: TicketType) -> None:
        if event.find_ticket_type(ticket_type.value) is None:
            raise TicketTypeUnavailableError(ticket_type.value)
        if not self._events.reserve_ticket_type(event.id, ticket_type.value):
            raise TicketTypeSoldOutError(ticket_type.value)

    def _generate_credentials(self, member: Member, event: Event, ticket: Ticket) -> CredentialRefs:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="credentials")
        future = executor.submit(self._credentials.generate, member, event, ticket)
        try:
            return future.result(timeout=self._credential_timeout)
        except FuturesTimeoutError as exc:
            logger.error("credential_generation_timed_out", ticket_id=str(ticket.id))
            raise CredentialGenerationError("timed out") from exc
        except Exception as exc:
            logger.exception("credential_generation_failed", ticket_id=str(ticket.id))
            raise CredentialGenerationError(str(exc)) from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _credit_referrer(self, member: Member, ticket: Ticket) -> None:
        try:
            referrer = self._members.get_member(member.referred_by)
            if referrer is None:
                logger.warning("referrer_not_found", member_id=str(member.id), referrer_id=str(member.referred_by))
                return
            if self._members.credit_referral(referrer.id, ticket.id, self._referral_bonus):
                logger.info("referral_credited", referrer_id=str(referrer.id), ticket_id=str(ticket.id))
            else:
                logger.info("referral_already_credited", ticket_id=str(ticket.id))
        except Exception:
            logger.exception("referral_credit_failed", member_id=str(member.id), ticket_id=str(ticket.id))
