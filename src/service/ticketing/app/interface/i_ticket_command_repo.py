"""
Ticket Command Repository Interface

CQRS Write Side - ticket creation and status compare-and-set
"""

from abc import ABC, abstractmethod
from typing import Optional

from uuid_utils import UUID

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class ITicketCommandRepo(ABC):
    """Ticket Command Repository Interface - CQRS Write Side"""

    @abstractmethod
    async def create(self, *, ticket: TicketEntity) -> TicketEntity:
        """
        Persist a new ticket record.

        Raises:
            StoreUnavailableError: the store could not be reached
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        """Read a ticket inside the current write transaction."""
        pass

    @abstractmethod
    async def update_status(
        self,
        *,
        ticket_id: UUID,
        expected_status: TicketStatus,
        new_status: TicketStatus,
    ) -> bool:
        """
        Compare-and-set the ticket status.

        Returns:
            True when the stored status still equalled `expected_status` and was
            updated, False when a concurrent writer changed it first
        """
        pass
