"""Unit tests for DiscountService.

These test validation, error mapping and redemption against in-memory stores.
Run with: pytest tests/test_discount_service.py -v
"""

import threading
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from conftest import NOW

from ticketing.domain import DiscountCode, DiscountType, EventId, Money
from ticketing.domain.errors import (
    DiscountNotActiveError,
    DiscountUsageExceededError,
    DuplicateDiscountCodeError,
    EventNotFoundError,
    InvalidDiscountCodeError,
    ValidationFailedError,
)


class TestCreateDiscount:
    def test_creates_discount_with_normalised_code(self, discount_service, discount_store, event):
        discount = discount_service.create_discount(
            code="summer10",
            event_id=str(event.id),
            discount_type="percentage",
            value="10",
            expiry_date=NOW + timedelta(days=30),
        )

        assert discount.code == DiscountCode("SUMMER10")
        assert discount.used_count == 0
        assert discount.is_active
        assert discount.id in discount_store.discounts

    def test_duplicate_code_is_rejected_case_insensitively(self, discount_service, make_discount, event):
        make_discount(code=DiscountCode("SAVE10"))

        with pytest.raises(DuplicateDiscountCodeError):
            discount_service.create_discount(
                code="save10",
                event_id=str(event.id),
                discount_type="flat",
                value="5",
                expiry_date=NOW + timedelta(days=30),
            )

    def test_unknown_event_is_rejected(self, discount_service):
        with pytest.raises(EventNotFoundError):
            discount_service.create_discount(
                code="GHOST",
                event_id=str(uuid4()),
                discount_type="flat",
                value="5",
                expiry_date=NOW,
            )

    def test_all_field_errors_are_reported_together(self, discount_service):
        with pytest.raises(ValidationFailedError) as exc_info:
            discount_service.create_discount(
                code=" ",
                event_id="nope",
                discount_type="bogo",
                value="abc",
                expiry_date=NOW,
                max_usage=-1,
            )

        assert set(exc_info.value.errors) == {"code", "event_id", "discount_type", "value", "max_usage"}

    @pytest.mark.parametrize(("discount_type", "value"), [("percentage", "100.5"), ("flat", "-1")])
    def test_out_of_range_value_is_rejected(self, discount_service, event, discount_type, value):
        with pytest.raises(ValidationFailedError) as exc_info:
            discount_service.create_discount(
                code="BAD",
                event_id=str(event.id),
                discount_type=discount_type,
                value=value,
                expiry_date=NOW,
            )
        assert "value" in exc_info.value.errors

    @pytest.mark.parametrize("value", ["1e30", "100000000"])
    def test_oversized_flat_value_is_rejected(self, discount_service, event, value):
        with pytest.raises(ValidationFailedError) as exc_info:
            discount_service.create_discount(
                code="HUGE",
                event_id=str(event.id),
                discount_type="flat",
                value=value,
                expiry_date=NOW,
            )
        assert set(exc_info.value.errors) == {"value"}

    def test_window_end_before_start_is_rejected(self, discount_service, event):
        with pytest.raises(ValidationFailedError) as exc_info:
            discount_service.create_discount(
                code="WINDOW",
                event_id=str(event.id),
                discount_type="flat",
                value="5",
                expiry_date=NOW + timedelta(days=9),
                start_date=NOW + timedelta(days=2),
                end_date=NOW + timedelta(days=1),
            )
        assert "end_date" in exc_info.value.errors


class TestQuoteDiscount:
    def test_quote_returns_final_price_without_redeeming(self, discount_service, discount_store, make_discount, event):
        discount = make_discount(max_usage=1)

        final = discount_service.quote_discount("save10", str(event.id), "100", now=NOW)

        assert final == Money.of(90)
        assert discount_store.discounts[discount.id].used_count == 0

    def test_quote_for_unknown_code_is_invalid(self, discount_service, event):
        with pytest.raises(InvalidDiscountCodeError):
            discount_service.quote_discount("NOPE", str(event.id), "100", now=NOW)

    def test_quote_rejects_non_positive_price(self, discount_service, make_discount, event):
        make_discount()
        with pytest.raises(ValidationFailedError):
            discount_service.quote_discount("SAVE10", str(event.id), "0", now=NOW)

    def test_quote_rejects_oversized_price(self, discount_service, make_discount, event):
        make_discount()
        with pytest.raises(ValidationFailedError) as exc_info:
            discount_service.quote_discount("SAVE10", str(event.id), "1e30", now=NOW)
        assert set(exc_info.value.errors) == {"price"}


class TestResolveDiscount:
    def test_valid_code_is_redeemed(self, discount_service, discount_store, make_discount, event):
        discount = make_discount(discount_type=DiscountType.FLAT, value=Decimal("20"))

        resolved, final = discount_service.resolve_discount(DiscountCode("save10"), event.id, Money.of(50), now=NOW)

        assert resolved.id == discount.id
        assert final == Money.of(30)
        assert discount_store.discounts[discount.id].used_count == 1

    def test_code_for_another_event_is_invalid(self, discount_service, make_discount):
        make_discount()
        with pytest.raises(InvalidDiscountCodeError):
            discount_service.resolve_discount(DiscountCode("SAVE10"), EventId(uuid4()), Money.of(50), now=NOW)

    def test_expired_code_is_invalid_regardless_of_active_flag(self, discount_service, make_discount, event):
        make_discount(expiry_date=NOW - timedelta(minutes=1), is_active=True)
        with pytest.raises(InvalidDiscountCodeError):
            discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)

    def test_deactivated_code_is_invalid(self, discount_service, make_discount, event):
        make_discount(is_active=False)
        with pytest.raises(InvalidDiscountCodeError):
            discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)

    def test_code_before_its_window_is_not_active(self, discount_service, discount_store, make_discount, event):
        discount = make_discount(start_date=NOW + timedelta(days=1))

        with pytest.raises(DiscountNotActiveError):
            discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)
        assert discount_store.discounts[discount.id].used_count == 0

    def test_last_use_deactivates_the_code(self, discount_service, discount_store, make_discount, event):
        discount = make_discount(max_usage=3, used_count=2)

        discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)

        stored = discount_store.discounts[discount.id]
        assert stored.used_count == 3
        assert not stored.is_active

    def test_lost_race_for_last_use_reports_usage_exceeded(
        self, discount_service, discount_store, make_discount, event, monkeypatch
    ):
        discount = make_discount(max_usage=1)
        # Another booking takes the last use between lookup and redemption.
        real_find = discount_store.find_active_discount

        def find_then_race(*args):
            found = real_find(*args)
            discount_store.apply_usage(discount.id)
            return found

        monkeypatch.setattr(discount_store, "find_active_discount", find_then_race)

        with pytest.raises(DiscountUsageExceededError):
            discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)
        assert discount_store.discounts[discount.id].used_count == 1

    def test_unlimited_code_stays_active(self, discount_service, discount_store, make_discount, event):
        discount = make_discount(max_usage=0)

        for _ in range(5):
            discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)

        stored = discount_store.discounts[discount.id]
        assert stored.used_count == 5
        assert stored.is_active

    def test_concurrent_redemptions_of_last_use_admit_one(self, discount_service, discount_store, make_discount, event):
        discount = make_discount(max_usage=1)
        barrier = threading.Barrier(2)
        real_find = discount_store.find_active_discount

        def find_together(*args):
            found = real_find(*args)
            barrier.wait(timeout=5)
            return found

        discount_store.find_active_discount = find_together
        outcomes: list[object] = []

        def redeem():
            try:
                outcomes.append(
                    discount_service.resolve_discount(DiscountCode("SAVE10"), event.id, Money.of(50), now=NOW)
                )
            except DiscountUsageExceededError as exc:
                outcomes.append(exc)

        threads = [threading.Thread(target=redeem) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(outcomes) == 2
        assert sum(isinstance(outcome, DiscountUsageExceededError) for outcome in outcomes) == 1
        assert discount_store.discounts[discount.id].used_count == 1
