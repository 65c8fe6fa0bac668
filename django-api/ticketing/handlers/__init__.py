from ticketing.handlers.views import (
    DiscountCreateView,
    DiscountQuoteView,
    RefundPolicyView,
    TicketBookView,
    TicketCancelView,
    TicketCheckInView,
    TicketDetailView,
)

__all__ = [
    "DiscountCreateView",
    "DiscountQuoteView",
    "RefundPolicyView",
    "TicketBookView",
    "TicketCancelView",
    "TicketCheckInView",
    "TicketDetailView",
]
