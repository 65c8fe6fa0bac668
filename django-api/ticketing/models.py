"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]

    def __str__(self) -> str:
        return self.name


class TicketTypeOption(models.Model):
    """Persistence model for an event's ticket-type catalog entry."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ticket_types")
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="unique_ticket_type_per_event"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"


class Member(models.Model):
    """Persistence model for platform users, with referral data."""

    class Role(models.TextChoices):
        USER = "user"
        VOLUNTEER = "volunteer"
        ORGANIZER = "organizer"
        ADMIN = "admin"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)
    referred_by = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="referrals"
    )
    reward_points = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class Discount(models.Model):
    """Persistence model for discount codes.

    Codes are stored upper-cased so the unique index is case-insensitive.
    """

    class DiscountType(models.TextChoices):
        PERCENTAGE = "percentage"
        FLAT = "flat"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=64, unique=True)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="discounts")
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    value = models.DecimalField(max_digits=10, decimal_places=2)
    max_usage = models.PositiveIntegerField(default=0)
    used_count = models.PositiveIntegerField(default=0)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    expiry_date = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_usage=0) | models.Q(used_count__lte=models.F("max_usage")),
                name="discount_used_count_within_max_usage",
            ),
        ]

    def clean(self) -> None:
        # Runs before the admin form's unique check.
        self.code = self.code.strip().upper()

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.code


class Ticket(models.Model):
    """Persistence model for tickets. Tickets are never deleted."""

    class TicketType(models.TextChoices):
        EARLY_BIRD = "Early Bird"
        REGULAR = "Regular"
        VIP = "VIP"

    class Status(models.TextChoices):
        BOOKED = "Booked"
        CHECKED_IN = "Checked-in"
        CANCELLED = "Cancelled"
        REFUNDED = "Refunded"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="tickets")
    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="tickets")
    ticket_type = models.CharField(max_length=20, choices=TicketType.choices)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    final_price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.BOOKED)
    discount = models.ForeignKey(
        Discount, on_delete=models.SET_NULL, null=True, blank=True, related_name="tickets"
    )
    badge = models.CharField(max_length=500, blank=True, default="")
    badge_pdf = models.CharField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "status"], name="ticket_event_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_type} - {self.status}"


class ReferralReward(models.Model):
    """One referral bonus per ticket; the unique ticket makes credits idempotent."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ticket = models.OneToOneField(Ticket, on_delete=models.PROTECT, related_name="referral_reward")
    referrer = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="referral_rewards")
    points = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
