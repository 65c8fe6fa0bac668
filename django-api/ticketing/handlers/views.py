"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/exceptions.py)
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.handlers import deps
from ticketing.handlers.serializers import (
    BookTicketRequestSerializer,
    CreateDiscountRequestSerializer,
    CredentialsSerializer,
    DiscountSerializer,
    HolderSerializer,
    QuoteDiscountRequestSerializer,
    TicketSerializer,
)


class DiscountCreateView(APIView):
    """Handler for POST /api/discounts"""

    def post(self, request: Request) -> Response:
        payload = CreateDiscountRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        discount = deps.get_discount_service().create_discount(**payload.validated_data)
        return Response(DiscountSerializer(discount).data, status=status.HTTP_201_CREATED)


class DiscountQuoteView(APIView):
    """Handler for POST /api/discounts/quote"""

    def post(self, request: Request) -> Response:
        payload = QuoteDiscountRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        final_price = deps.get_discount_service().quote_discount(**payload.validated_data)
        return Response({"final_price": str(final_price)})


class TicketBookView(APIView):
    """Handler for POST /api/tickets/book"""

    def post(self, request: Request) -> Response:
        payload = BookTicketRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = deps.get_ticket_service().book_ticket(**payload.validated_data)
        return Response(
            {
                "message": "Ticket booked successfully",
                "ticket": TicketSerializer(result.ticket).data,
                "credentials": CredentialsSerializer(result.credentials).data,
            },
            status=status.HTTP_201_CREATED,
        )


class TicketDetailView(APIView):
    """Handler for GET /api/tickets/{ticket_id}"""

    def get(self, request: Request, ticket_id: str) -> Response:
        details = deps.get_ticket_service().get_ticket_details(ticket_id)
        return Response(
            {
                "ticket": TicketSerializer(details.ticket).data,
                "holder": HolderSerializer(details.holder).data,
            }
        )


class TicketCheckInView(APIView):
    """Handler for POST /api/tickets/{ticket_id}/check-in"""

    def post(self, request: Request, ticket_id: str) -> Response:
        ticket = deps.get_ticket_service().check_in(ticket_id)
        return Response({"message": "Ticket successfully checked in.", "ticket": TicketSerializer(ticket).data})


class TicketCancelView(APIView):
    """Handler for POST /api/tickets/{ticket_id}/cancel"""

    def post(self, request: Request, ticket_id: str) -> Response:
        result = deps.get_ticket_service().cancel_ticket(ticket_id)
        return Response(
            {
                "message": "Ticket cancelled successfully",
                "refund_percentage": result.refund_percentage,
                "ticket": TicketSerializer(result.ticket).data,
            }
        )


class RefundPolicyView(APIView):
    """Handler for GET /api/tickets/refund-policy"""

    def get(self, request: Request) -> Response:
        return Response({"refund_policy": deps.get_ticket_service().get_refund_policy()})
