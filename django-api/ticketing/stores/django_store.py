"""Django ORM implementations of the ticketing stores."""

from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import Case, F, Q, Value, When

from ticketing import models
from ticketing.domain import (
    Capacity,
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
    TicketTypeOption,
)
from ticketing.stores.interfaces import (
    DiscountStore,
    EventStore,
    MemberStore,
    TicketStore,
    UnitOfWork,
)


class DjangoUnitOfWork(UnitOfWork):
    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic()


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        location=row.location,
        starts_at=row.starts_at,
        ticket_types=tuple(
            TicketTypeOption(name=option.name, price=Money(option.price), quantity=Capacity(option.quantity))
            for option in row.ticket_types.all()
        ),
    )


def _member_to_domain(row: models.Member) -> Member:
    return Member(
        id=MemberId(row.id),
        name=row.name,
        email=row.email,
        role=row.role,
        referred_by=MemberId(row.referred_by_id) if row.referred_by_id else None,
        reward_points=row.reward_points,
    )


def _discount_to_domain(row: models.Discount) -> Discount:
    return Discount(
        id=DiscountId(row.id),
        code=DiscountCode(row.code),
        event_id=EventId(row.event_id),
        discount_type=DiscountType(row.discount_type),
        value=row.value,
        expiry_date=row.expiry_date,
        max_usage=row.max_usage,
        used_count=row.used_count,
        is_active=row.is_active,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def _ticket_to_domain(row: models.Ticket) -> Ticket:
    credentials = None
    if row.badge and row.badge_pdf:
        credentials = CredentialRefs(badge_path=row.badge, badge_pdf_path=row.badge_pdf)
    return Ticket(
        id=TicketId(row.id),
        event_id=EventId(row.event_id),
        member_id=MemberId(row.member_id),
        ticket_type=TicketType(row.ticket_type),
        price=Money(row.price),
        final_price=Money(row.final_price),
        status=TicketStatus(row.status),
        created_at=row.created_at,
        discount_id=DiscountId(row.discount_id) if row.discount_id else None,
        credentials=credentials,
    )


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.prefetch_related("ticket_types").filter(pk=event_id.value).first()
        return _event_to_domain(row) if row else None

    def reserve_ticket_type(self, event_id: EventId, name: str) -> bool:
        updated = models.TicketTypeOption.objects.filter(
            event_id=event_id.value, name=name, quantity__gt=0
        ).update(quantity=F("quantity") - 1)
        return updated == 1


class DjangoMemberStore(MemberStore):
    def get_member(self, member_id: MemberId) -> Member | None:
        row = models.Member.objects.filter(pk=member_id.value).first()
        return _member_to_domain(row) if row else None

    def credit_referral(self, referrer_id: MemberId, ticket_id: TicketId, amount: int) -> bool:
        try:
            with transaction.atomic():
                models.ReferralReward.objects.create(
                    ticket_id=ticket_id.value, referrer_id=referrer_id.value, points=amount
                )
                models.Member.objects.filter(pk=referrer_id.value).update(
                    reward_points=F("reward_points") + amount
                )
        except IntegrityError:
            return False
        return True


class DjangoDiscountStore(DiscountStore):
    def code_exists(self, code: DiscountCode) -> bool:
        return models.Discount.objects.filter(code__iexact=code.value).exists()

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
        row = models.Discount.objects.create(
            code=code.value,
            event_id=event_id.value,
            discount_type=discount_type.value,
            value=value,
            expiry_date=expiry_date,
            max_usage=max_usage,
            start_date=start_date,
            end_date=end_date,
        )
        return _discount_to_domain(row)

    def find_active_discount(self, code: DiscountCode, event_id: EventId, now: datetime) -> Discount | None:
        row = models.Discount.objects.filter(
            code__iexact=code.value,
            event_id=event_id.value,
            is_active=True,
            expiry_date__gte=now,
        ).first()
        return _discount_to_domain(row) if row else None

    def apply_usage(self, discount_id: DiscountId) -> bool:
        # Single UPDATE: the WHERE clause and SET expressions see the same row
        # version, so concurrent redemptions cannot overshoot max_usage.
        updated = (
            models.Discount.objects.filter(pk=discount_id.value, is_active=True)
            .filter(Q(max_usage=0) | Q(used_count__lt=F("max_usage")))
            .update(
                used_count=F("used_count") + 1,
                is_active=Case(
                    When(Q(max_usage__gt=0) & Q(used_count__gte=F("max_usage") - 1), then=Value(False)),
                    default=Value(True),
                ),
            )
        )
        return updated == 1


class DjangoTicketStore(TicketStore):
    def create_ticket(
        self,
        event_id: EventId,
        member_id: MemberId,
        ticket_type: TicketType,
        price: Money,
        final_price: Money,
        discount_id: DiscountId | None = None,
    ) -> Ticket:
        row = models.Ticket.objects.create(
            event_id=event_id.value,
            member_id=member_id.value,
            ticket_type=ticket_type.value,
            price=price.amount,
            final_price=final_price.amount,
            status=TicketStatus.BOOKED.value,
            discount_id=discount_id.value if discount_id else None,
        )
        return _ticket_to_domain(row)

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        row = models.Ticket.objects.filter(pk=ticket_id.value).first()
        return _ticket_to_domain(row) if row else None

    def attach_credentials(self, ticket_id: TicketId, credentials: CredentialRefs) -> Ticket:
        models.Ticket.objects.filter(pk=ticket_id.value).update(
            badge=credentials.badge_path, badge_pdf=credentials.badge_pdf_path
        )
        return _ticket_to_domain(models.Ticket.objects.get(pk=ticket_id.value))

    def update_status(self, ticket_id: TicketId, expected: TicketStatus, new: TicketStatus) -> Ticket | None:
        updated = models.Ticket.objects.filter(pk=ticket_id.value, status=expected.value).update(
            status=new.value
        )
        if updated != 1:
            return None
        return _ticket_to_domain(models.Ticket.objects.get(pk=ticket_id.value))
