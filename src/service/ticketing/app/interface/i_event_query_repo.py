from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.ticketing.domain.entity.event_entity import EventEntity


class IEventQueryRepo(ABC):
    """Read-only event lookups consumed by the ticket engine."""

    @abstractmethod
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        pass

    @abstractmethod
    async def list_event_ids_by_organizer(self, *, organizer_id: str) -> List[str]:
        """Event ids owned by an organizer, in a stable order. Empty list when none."""
        pass
