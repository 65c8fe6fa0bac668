"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from fakes import (
    InMemoryDiscountStore,
    InMemoryEventStore,
    InMemoryMemberStore,
    InMemoryTicketStore,
    InMemoryUnitOfWork,
    StubCredentialGenerator,
)
from rest_framework.test import APIClient

from ticketing.domain import (
    Capacity,
    Discount,
    DiscountCode,
    DiscountId,
    DiscountType,
    Event,
    EventId,
    Member,
    MemberId,
    Money,
    TicketTypeOption,
)
from ticketing.services.discount_service import DiscountService
from ticketing.services.ticket_service import TicketService

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")
    return tmp_path / "media"


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def member_store() -> InMemoryMemberStore:
    return InMemoryMemberStore()


@pytest.fixture
def discount_store() -> InMemoryDiscountStore:
    return InMemoryDiscountStore()


@pytest.fixture
def ticket_store() -> InMemoryTicketStore:
    return InMemoryTicketStore()


@pytest.fixture
def credentials() -> StubCredentialGenerator:
    return StubCredentialGenerator()


@pytest.fixture
def unit_of_work(event_store, member_store, discount_store, ticket_store) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(event_store, member_store, discount_store, ticket_store)


@pytest.fixture
def discount_service(discount_store, event_store) -> DiscountService:
    return DiscountService(discounts=discount_store, events=event_store)


@pytest.fixture
def ticket_service(
    ticket_store, event_store, member_store, discount_service, credentials, unit_of_work
) -> TicketService:
    return TicketService(
        tickets=ticket_store,
        events=event_store,
        members=member_store,
        discounts=discount_service,
        credentials=credentials,
        unit_of_work=unit_of_work,
    )


@pytest.fixture
def event(event_store) -> Event:
    return event_store.add(
        Event(
            id=EventId(uuid4()),
            name="PyCon Berlin",
            location="Berlin",
            starts_at=NOW + timedelta(days=10),
            ticket_types=(
                TicketTypeOption(name="Early Bird", price=Money.of(80), quantity=Capacity(1)),
                TicketTypeOption(name="Regular", price=Money.of(100), quantity=Capacity(50)),
            ),
        )
    )


@pytest.fixture
def member(member_store) -> Member:
    return member_store.add(Member(id=MemberId(uuid4()), name="Ada Lovelace", email="ada@example.com"))


@pytest.fixture
def referrer(member_store) -> Member:
    return member_store.add(Member(id=MemberId(uuid4()), name="Grace Hopper", email="grace@example.com"))


@pytest.fixture
def referred_member(member_store, referrer) -> Member:
    return member_store.add(
        Member(id=MemberId(uuid4()), name="Alan Turing", email="alan@example.com", referred_by=referrer.id)
    )


@pytest.fixture
def make_discount(discount_store, event):
    """Add a discount for `event`; keyword arguments override the defaults."""

    def _make(**overrides) -> Discount:
        fields = {
            "id": DiscountId(uuid4()),
            "code": DiscountCode("SAVE10"),
            "event_id": event.id,
            "discount_type": DiscountType.PERCENTAGE,
            "value": Decimal("10"),
            "expiry_date": NOW + timedelta(days=5),
        }
        fields.update(overrides)
        return discount_store.add(Discount(**fields))

    return _make
