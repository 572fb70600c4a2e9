"""
Ticket Query Repository Interface

CQRS Read Side - point lookups plus streamed scans for aggregation
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional, Sequence

from uuid_utils import UUID

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class ITicketQueryRepo(ABC):
    """Ticket Query Repository Interface - CQRS Read Side"""

    @property
    @abstractmethod
    def in_clause_limit(self) -> int:
        """Largest event-id list `iter_by_event_ids` accepts."""
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> List[TicketEntity]:
        """All tickets bought by a user, newest first. Empty list when none."""
        pass

    @abstractmethod
    def iter_by_event(
        self, *, event_id: str, status: Optional[TicketStatus] = None
    ) -> AsyncIterator[TicketEntity]:
        """Stream the tickets of one event, optionally filtered by status."""
        pass

    @abstractmethod
    def iter_by_event_ids(
        self, *, event_ids: Sequence[str], status: Optional[TicketStatus] = None
    ) -> AsyncIterator[TicketEntity]:
        """
        Stream tickets whose event id is in `event_ids`.

        Raises:
            ValueError: more than `in_clause_limit` event ids were passed
        """
        pass
