from enum import StrEnum


class TicketStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELED = 'canceled'

    @property
    def holds_capacity(self) -> bool:
        """Pending and confirmed tickets count against the event's capacity."""
        return self is not TicketStatus.CANCELED
