"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Self
from uuid import UUID

CENT = Decimal("0.01")
# Amounts are persisted as DecimalField(max_digits=10, decimal_places=2).
MAX_AMOUNT = Decimal("100000000")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class MemberId:
    """Unique identifier for a Member (a platform user)."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TicketId:
    """Unique identifier for a Ticket."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DiscountId:
    """Unique identifier for a Discount."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation.

    Amounts are kept in the currency's smallest unit (two decimal places).
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def of(cls, value: Decimal | int | str) -> Self:
        """Build Money from raw input, rounding half-up to cents."""
        try:
            amount = Decimal(str(value))
            if not amount.is_finite():
                raise ValueError(f"Invalid amount: {value!r}")
            return cls(amount=amount.quantize(CENT, rounding=ROUND_HALF_UP))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class DiscountCode:
    """Case-insensitive discount code, normalised to upper case."""

    value: str

    def __post_init__(self) -> None:
        normalised = self.value.strip().upper()
        if not normalised:
            raise ValueError("Discount code cannot be empty")
        object.__setattr__(self, "value", normalised)

    def __str__(self) -> str:
        return self.value


class TicketType(Enum):
    """Fixed ticket type enumeration."""

    EARLY_BIRD = "Early Bird"
    REGULAR = "Regular"
    VIP = "VIP"


class DiscountType(Enum):
    """How a discount value is applied to a price."""

    PERCENTAGE = "percentage"
    FLAT = "flat"
