"""Service wiring for the HTTP handlers.

Views obtain services here so tests can patch a single place.
"""

from django.conf import settings

from ticketing.credentials.badge import BadgeCredentialGenerator
from ticketing.services.discount_service import DiscountService
from ticketing.services.ticket_service import TicketService
from ticketing.stores.django_store import (
    DjangoDiscountStore,
    DjangoEventStore,
    DjangoMemberStore,
    DjangoTicketStore,
    DjangoUnitOfWork,
)


def get_discount_service() -> DiscountService:
    return DiscountService(discounts=DjangoDiscountStore(), events=DjangoEventStore())


def get_credential_generator() -> BadgeCredentialGenerator:
    return BadgeCredentialGenerator(
        ticket_url_template=settings.TICKETING_PUBLIC_BASE_URL.rstrip("/") + "/api/tickets/{ticket_id}",
    )


def get_ticket_service() -> TicketService:
    return TicketService(
        tickets=DjangoTicketStore(),
        events=DjangoEventStore(),
        members=DjangoMemberStore(),
        discounts=get_discount_service(),
        credentials=get_credential_generator(),
        unit_of_work=DjangoUnitOfWork(),
        enforce_catalog=settings.TICKETING_ENFORCE_CATALOG,
        credential_timeout=settings.TICKETING_CREDENTIAL_TIMEOUT,
        referral_bonus=settings.TICKETING_REFERRAL_BONUS,
    )
