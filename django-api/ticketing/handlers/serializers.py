"""Serializers for request validation and for transforming domain models to API responses."""

from django.conf import settings
from rest_framework import serializers

from ticketing.domain import CredentialRefs, Ticket


def public_url(path: str) -> str:
    """Absolute URL of a file saved in media storage."""
    base = settings.TICKETING_PUBLIC_BASE_URL.rstrip("/")
    return f"{base}{settings.MEDIA_URL}{path}"


class BookTicketRequestSerializer(serializers.Serializer):
    """Shape check only; the service validates values."""

    event_id = serializers.CharField()
    member_id = serializers.CharField()
    ticket_type = serializers.CharField()
    price = serializers.CharField()
    discount_code = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class QuoteDiscountRequestSerializer(serializers.Serializer):
    code = serializers.CharField()
    event_id = serializers.CharField()
    price = serializers.CharField()


class CreateDiscountRequestSerializer(serializers.Serializer):
    code = serializers.CharField()
    event_id = serializers.CharField()
    discount_type = serializers.CharField()
    value = serializers.CharField()
    max_usage = serializers.IntegerField(required=False, default=0)
    start_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    end_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    expiry_date = serializers.DateTimeField()


class DiscountSerializer(serializers.Serializer):
    """Serializer for Discount domain model."""

    id = serializers.CharField(source="id.value")
    code = serializers.CharField(source="code.value")
    event_id = serializers.CharField(source="event_id.value")
    discount_type = serializers.CharField(source="discount_type.value")
    value = serializers.DecimalField(max_digits=10, decimal_places=2)
    max_usage = serializers.IntegerField()
    used_count = serializers.IntegerField()
    start_date = serializers.DateTimeField(allow_null=True)
    end_date = serializers.DateTimeField(allow_null=True)
    expiry_date = serializers.DateTimeField()
    is_active = serializers.BooleanField()


class HolderSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    name = serializers.CharField()
    email = serializers.EmailField()


class CredentialsSerializer(serializers.Serializer):
    badge = serializers.SerializerMethodField()
    badge_pdf = serializers.SerializerMethodField()

    def get_badge(self, obj: CredentialRefs) -> str:
        return public_url(obj.badge_path)

    def get_badge_pdf(self, obj: CredentialRefs) -> str:
        return public_url(obj.badge_pdf_path)


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.CharField(source="id.value")
    event_id = serializers.CharField(source="event_id.value")
    member_id = serializers.CharField(source="member_id.value")
    ticket_type = serializers.CharField(source="ticket_type.value")
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    final_price = serializers.DecimalField(source="final_price.amount", max_digits=10, decimal_places=2)
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()
    credentials = serializers.SerializerMethodField()

    def get_credentials(self, obj: Ticket) -> dict[str, str] | None:
        if obj.credentials is None:
            return None
        return CredentialsSerializer(obj.credentials).data
