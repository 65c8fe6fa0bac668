"""Integration tests for the ticketing HTTP API.

These validate status codes and response bodies end to end, with badge files
written to a temporary MEDIA_ROOT.
Run with: pytest tests/test_api.py -v
"""

from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest
from django.utils import timezone
from fakes import StubCredentialGenerator
from rest_framework.test import APIClient

from ticketing import models
from ticketing.handlers import deps


@pytest.fixture
def event_row() -> models.Event:
    return models.Event.objects.create(
        name="EuroPython", location="Prague", starts_at=timezone.now() + timedelta(days=20)
    )


@pytest.fixture
def member_row() -> models.Member:
    return models.Member.objects.create(name="Ada", email="ada@example.com", role="volunteer")


@pytest.fixture
def discount_row(event_row) -> models.Discount:
    return models.Discount.objects.create(
        code="SAVE10",
        event=event_row,
        discount_type="percentage",
        value=Decimal("10"),
        max_usage=1,
        expiry_date=timezone.now() + timedelta(days=5),
    )


def book(api_client: APIClient, event_row, member_row, **overrides):
    payload = {
        "event_id": str(event_row.id),
        "member_id": str(member_row.id),
        "ticket_type": "Regular",
        "price": "100",
    }
    payload.update(overrides)
    return api_client.post("/api/tickets/book", payload, format="json")


@pytest.mark.django_db
class TestBookTicket:
    """Tests for POST /api/tickets/book"""

    def test_booking_returns_ticket_and_badge_urls(self, api_client, event_row, member_row, media_root):
        response = book(api_client, event_row, member_row)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Ticket booked successfully"
        assert body["ticket"]["status"] == "Booked"
        assert body["ticket"]["final_price"] == "100.00"
        assert body["credentials"]["badge"].startswith("http://localhost:8000/media/badges/volunteers/")
        assert body["credentials"]["badge_pdf"].endswith(".pdf")

        ticket = models.Ticket.objects.get(pk=body["ticket"]["id"])
        assert (Path(media_root) / ticket.badge).is_file()
        assert (Path(media_root) / ticket.badge_pdf).read_bytes().startswith(b"%PDF")

    def test_booking_with_code_redeems_it(self, api_client, event_row, member_row, discount_row):
        response = book(api_client, event_row, member_row, discount_code="save10")

        assert response.status_code == 201
        assert response.json()["ticket"]["final_price"] == "90.00"
        discount_row.refresh_from_db()
        assert discount_row.used_count == 1
        assert discount_row.is_active is False

    def test_exhausted_code_is_rejected_without_a_ticket(self, api_client, event_row, member_row, discount_row):
        book(api_client, event_row, member_row, discount_code="SAVE10")

        response = book(api_client, event_row, member_row, discount_code="SAVE10")

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_DISCOUNT_CODE"
        assert models.Ticket.objects.count() == 1

    def test_missing_fields_are_reported(self, api_client):
        response = api_client.post("/api/tickets/book", {"ticket_type": "VIP"}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert {"event_id", "member_id", "price"} <= set(body["errors"])

    def test_invalid_values_are_reported(self, api_client, event_row, member_row):
        response = book(api_client, event_row, member_row, ticket_type="Gold", price="free")

        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"ticket_type", "price"}

    def test_oversized_price_returns_400(self, api_client, event_row, member_row):
        response = book(api_client, event_row, member_row, price="123456789012")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"
        assert set(response.json()["errors"]) == {"price"}
        assert models.Ticket.objects.count() == 0

    def test_unknown_event_returns_404(self, api_client, member_row):
        response = api_client.post(
            "/api/tickets/book",
            {"event_id": str(uuid4()), "member_id": str(member_row.id), "ticket_type": "VIP", "price": "50"},
            format="json",
        )

        assert response.status_code == 404
        assert response.json() == {"code": "EVENT_NOT_FOUND", "message": "Event not found"}

    def test_unknown_member_returns_404(self, api_client, event_row):
        response = api_client.post(
            "/api/tickets/book",
            {"event_id": str(event_row.id), "member_id": str(uuid4()), "ticket_type": "VIP", "price": "50"},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["code"] == "MEMBER_NOT_FOUND"

    def test_credential_failure_returns_503_and_books_nothing(
        self, api_client, event_row, member_row, discount_row, monkeypatch
    ):
        monkeypatch.setattr(deps, "get_credential_generator", lambda: StubCredentialGenerator(OSError("disk full")))

        response = book(api_client, event_row, member_row, discount_code="SAVE10")

        assert response.status_code == 503
        assert response.json()["code"] == "CREDENTIAL_GENERATION_FAILED"
        assert models.Ticket.objects.count() == 0
        discount_row.refresh_from_db()
        assert discount_row.used_count == 0

    def test_referrer_earns_bonus(self, api_client, event_row, member_row):
        referred = models.Member.objects.create(name="Alan", email="alan@example.com", referred_by=member_row)

        response = book(api_client, event_row, referred)

        assert response.status_code == 201
        member_row.refresh_from_db()
        assert member_row.reward_points == 10
        assert models.ReferralReward.objects.get().referrer_id == member_row.id

    def test_catalog_enforcement_rejects_unlisted_type(self, api_client, event_row, member_row, settings):
        settings.TICKETING_ENFORCE_CATALOG = True

        response = book(api_client, event_row, member_row, ticket_type="VIP")

        assert response.status_code == 422
        assert response.json()["code"] == "TICKET_TYPE_UNAVAILABLE"


@pytest.mark.django_db
class TestTicketLifecycle:
    @pytest.fixture
    def ticket_id(self, api_client, event_row, member_row, monkeypatch) -> str:
        monkeypatch.setattr(deps, "get_credential_generator", StubCredentialGenerator)
        return book(api_client, event_row, member_row).json()["ticket"]["id"]

    def test_get_ticket(self, api_client, ticket_id):
        response = api_client.get(f"/api/tickets/{ticket_id}")

        assert response.status_code == 200
        assert response.json()["ticket"]["id"] == ticket_id
        assert response.json()["holder"]["name"] == "Ada"
        assert response.json()["holder"]["email"] == "ada@example.com"

    def test_get_unknown_ticket_returns_404(self, api_client):
        response = api_client.get(f"/api/tickets/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "TICKET_NOT_FOUND"

    def test_malformed_ticket_id_returns_400(self, api_client):
        response = api_client.post("/api/tickets/not-a-uuid/check-in")

        assert response.status_code == 400
        assert response.json()["errors"] == {"ticket_id": "Must be a valid UUID"}

    def test_check_in_then_repeat(self, api_client, ticket_id):
        first = api_client.post(f"/api/tickets/{ticket_id}/check-in")
        second = api_client.post(f"/api/tickets/{ticket_id}/check-in")

        assert first.status_code == 200
        assert first.json()["ticket"]["status"] == "Checked-in"
        assert second.status_code == 409
        assert second.json()["code"] == "ALREADY_CHECKED_IN"

    def test_cancel_reports_refund(self, api_client, ticket_id):
        response = api_client.post(f"/api/tickets/{ticket_id}/cancel")

        assert response.status_code == 200
        body = response.json()
        assert body["refund_percentage"] == 75
        assert body["ticket"]["status"] == "Cancelled"

    def test_cancelled_ticket_cannot_be_checked_in(self, api_client, ticket_id):
        api_client.post(f"/api/tickets/{ticket_id}/cancel")

        response = api_client.post(f"/api/tickets/{ticket_id}/check-in")

        assert response.status_code == 409
        assert response.json()["code"] == "TICKET_CANCELLED"

    def test_second_cancel_is_rejected(self, api_client, ticket_id):
        api_client.post(f"/api/tickets/{ticket_id}/cancel")

        response = api_client.post(f"/api/tickets/{ticket_id}/cancel")

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_CANCELLED"

    def test_refund_policy(self, api_client):
        response = api_client.get("/api/tickets/refund-policy")

        assert response.status_code == 200
        assert response.json()["refund_policy"]["Regular"] == "75% refund if canceled 3 days before the event."


@pytest.mark.django_db
class TestDiscounts:
    """Tests for POST /api/discounts and POST /api/discounts/quote"""

    def test_create_discount(self, api_client, event_row):
        response = api_client.post(
            "/api/discounts",
            {
                "code": "spring20",
                "event_id": str(event_row.id),
                "discount_type": "flat",
                "value": "20",
                "max_usage": 50,
                "expiry_date": (timezone.now() + timedelta(days=30)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == "SPRING20"
        assert body["used_count"] == 0
        assert models.Discount.objects.filter(code="SPRING20").exists()

    def test_duplicate_code_returns_409(self, api_client, event_row, discount_row):
        response = api_client.post(
            "/api/discounts",
            {
                "code": "Save10",
                "event_id": str(event_row.id),
                "discount_type": "percentage",
                "value": "5",
                "expiry_date": (timezone.now() + timedelta(days=30)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_DISCOUNT_CODE"

    def test_quote_does_not_consume_a_use(self, api_client, event_row, discount_row):
        response = api_client.post(
            "/api/discounts/quote",
            {"code": "save10", "event_id": str(event_row.id), "price": "59.99"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {"final_price": "53.99"}
        discount_row.refresh_from_db()
        assert discount_row.used_count == 0

    def test_quote_with_oversized_price_returns_400(self, api_client, event_row, discount_row):
        response = api_client.post(
            "/api/discounts/quote",
            {"code": "SAVE10", "event_id": str(event_row.id), "price": "1e30"},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["errors"] == {"price": "Must be a positive amount"}


@pytest.mark.django_db
def test_unexpected_error_returns_generic_500(api_client, monkeypatch):
    def broken():
        raise RuntimeError("connection pool exhausted")

    monkeypatch.setattr(deps, "get_ticket_service", broken)

    response = api_client.get("/api/tickets/refund-policy")

    assert response.status_code == 500
    assert response.json() == {"code": "INTERNAL_ERROR", "message": "Internal Server Error."}
