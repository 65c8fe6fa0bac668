"""Refund-percentage policy applied when a ticket is cancelled.

The percentage is advisory: it is reported with the cancellation and never
moves money by itself.
"""

import math
from datetime import datetime

from ticketing.domain.value_objects import TicketType

SECONDS_PER_DAY = 24 * 60 * 60

# ticket type -> (minimum days before the event, refund percentage)
REFUND_RULES: dict[TicketType, tuple[int, int]] = {
    TicketType.EARLY_BIRD: (7, 50),
    TicketType.REGULAR: (3, 75),
}

REFUND_POLICY: dict[str, str] = {
    TicketType.EARLY_BIRD.value: "50% refund if canceled 7 days before the event.",
    TicketType.REGULAR.value: "75% refund if canceled 3 days before the event.",
    TicketType.VIP.value: "No refund after booking.",
}


def days_before_event(starts_at: datetime, now: datetime) -> int:
    """Whole days left until the event, rounded up."""
    return math.ceil((starts_at - now).total_seconds() / SECONDS_PER_DAY)


def refund_percentage(ticket_type: TicketType, days_left: int) -> int:
    rule = REFUND_RULES.get(ticket_type)
    if rule is None:
        return 0
    minimum_days, percentage = rule
    return percentage if days_left >= minimum_days else 0
