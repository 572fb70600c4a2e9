import attrs

from src.service.ticketing.domain.enum.ticket_status import TicketStatus


@attrs.frozen
class StatusTransition:
    """A validated ticket status change and its capacity effect."""

    from_status: TicketStatus
    to_status: TicketStatus

    @property
    def is_noop(self) -> bool:
        return self.from_status == self.to_status

    @property
    def releases_capacity(self) -> bool:
        return self.from_status.holds_capacity and not self.to_status.holds_capacity
