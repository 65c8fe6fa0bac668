"""Protocol definitions for credential (badge) generators.

Booking depends only on this protocol, so tests can substitute a stub and
other artifact formats can be plugged in.
"""

from typing import Protocol

from ticketing.domain import CredentialRefs, Event, Member, Ticket


class CredentialGenerator(Protocol):
    """Protocol for ticket credential generators."""

    def generate(self, member: Member, event: Event, ticket: Ticket) -> CredentialRefs:
        """Produce the credential artifacts for a booked ticket.

        Args:
            member: The ticket holder.
            event: The event the ticket admits to.
            ticket: The freshly created ticket.

        Returns:
            Storage paths of the generated artifacts.

        Raises:
            Exception: Any failure; callers treat it as a failed booking.
        """
        ...

    def discard(self, credentials: CredentialRefs) -> None:
        """Remove previously generated artifacts."""
        ...
