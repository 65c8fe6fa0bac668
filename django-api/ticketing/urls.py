from django.urls import path

from ticketing.handlers import (
    DiscountCreateView,
    DiscountQuoteView,
    RefundPolicyView,
    TicketBookView,
    TicketCancelView,
    TicketCheckInView,
    TicketDetailView,
)

urlpatterns = [
    path("discounts", DiscountCreateView.as_view(), name="discount-create"),
    path("discounts/quote", DiscountQuoteView.as_view(), name="discount-quote"),
    path("tickets/book", TicketBookView.as_view(), name="ticket-book"),
    path("tickets/refund-policy", RefundPolicyView.as_view(), name="ticket-refund-policy"),
    path("tickets/<str:ticket_id>", TicketDetailView.as_view(), name="ticket-detail"),
    path("tickets/<str:ticket_id>/check-in", TicketCheckInView.as_view(), name="ticket-check-in"),
    path("tickets/<str:ticket_id>/cancel", TicketCancelView.as_view(), name="ticket-cancel"),
]
