"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    TICKET_CANCELLED = "TICKET_CANCELLED"
    DUPLICATE_DISCOUNT_CODE = "DUPLICATE_DISCOUNT_CODE"
    INVALID_DISCOUNT_CODE = "INVALID_DISCOUNT_CODE"
    DISCOUNT_NOT_ACTIVE = "DISCOUNT_NOT_ACTIVE"
    DISCOUNT_USAGE_EXCEEDED = "DISCOUNT_USAGE_EXCEEDED"
    TICKET_TYPE_UNAVAILABLE = "TICKET_TYPE_UNAVAILABLE"
    TICKET_TYPE_SOLD_OUT = "TICKET_TYPE_SOLD_OUT"
    CREDENTIAL_GENERATION_FAILED = "CREDENTIAL_GENERATION_FAILED"


class ErrorCategory(Enum):
    """Broad failure classes, used by handlers to pick a response status."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    BUSINESS_RULE = "business_rule"
    INFRASTRUCTURE = "infrastructure"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    category = ErrorCategory.BUSINESS_RULE

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationFailedError(DomainError):
    """Raised when required fields are missing or malformed."""

    category = ErrorCategory.VALIDATION

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="Invalid or missing fields: " + ", ".join(sorted(errors)),
        )
        self.errors = errors


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class MemberNotFoundError(DomainError):
    """Raised when a member (user) is not found."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, member_id: str) -> None:
        super().__init__(
            code=ErrorCode.MEMBER_NOT_FOUND,
            message="User not found",
        )
        self.member_id = member_id


class TicketNotFoundError(DomainError):
    """Raised when a ticket is not found."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message="Ticket not found",
        )
        self.ticket_id = ticket_id


class AlreadyCheckedInError(DomainError):
    category = ErrorCategory.STATE_CONFLICT

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CHECKED_IN,
            message="Ticket already checked in",
        )
        self.ticket_id = ticket_id


class AlreadyCancelledError(DomainError):
    category = ErrorCategory.STATE_CONFLICT

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CANCELLED,
            message="Ticket is already cancelled",
        )
        self.ticket_id = ticket_id


class TicketCancelledError(DomainError):
    """Raised when checking in a ticket that was cancelled."""

    category = ErrorCategory.STATE_CONFLICT

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_CANCELLED,
            message="Ticket is cancelled",
        )
        self.ticket_id = ticket_id


class DuplicateDiscountCodeError(DomainError):
    category = ErrorCategory.STATE_CONFLICT

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_DISCOUNT_CODE,
            message="Discount code already exists",
        )
        self.discount_code = code


class InvalidDiscountCodeError(DomainError):
    """Raised when no active, unexpired discount matches the code and event."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DISCOUNT_CODE,
            message="Invalid discount code",
        )
        self.discount_code = code


class DiscountNotActiveError(DomainError):
    """Raised when the current time is outside the discount's window."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_NOT_ACTIVE,
            message="Discount code expired or not yet active",
        )
        self.discount_code = code


class DiscountUsageExceededError(DomainError):
    """Raised when the last use of a capped code was taken concurrently."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_USAGE_EXCEEDED,
            message="Discount code usage limit reached",
        )
        self.discount_code = code


class TicketTypeUnavailableError(DomainError):
    def __init__(self, ticket_type: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_TYPE_UNAVAILABLE,
            message="Ticket type is not offered for this event",
        )
        self.ticket_type = ticket_type


class TicketTypeSoldOutError(DomainError):
    def __init__(self, ticket_type: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_TYPE_SOLD_OUT,
            message="No tickets of this type remain for the event",
        )
        self.ticket_type = ticket_type


class CredentialGenerationError(DomainError):
    """Raised when the badge or its PDF could not be produced."""

    category = ErrorCategory.INFRASTRUCTURE

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.CREDENTIAL_GENERATION_FAILED,
            message="Could not generate ticket credentials",
        )
        self.reason = reason
