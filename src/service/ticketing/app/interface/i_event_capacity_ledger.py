from abc import ABC, abstractmethod


class IEventCapacityLedger(ABC):
    """
    Per-event `tickets_left` counter.

    Every method is atomic per event. Implementations raise `NotFoundError` for an
    unknown event and `StoreUnavailableError` when the store cannot be reached.
    """

    @abstractmethod
    async def reserve(self, *, event_id: str, quantity: int) -> int:
        """
        Debit `quantity` seats if at least that many are left.

        Returns:
            tickets_left after the debit

        Raises:
            InsufficientCapacityError: fewer than `quantity` left; nothing is changed
        """
        pass

    @abstractmethod
    async def release(self, *, event_id: str, quantity: int) -> int:
        """
        Credit `quantity` seats back.

        Returns:
            tickets_left after the credit

        Raises:
            DomainError: the credit would push tickets_left above capacity_total
        """
        pass

    @abstractmethod
    async def get_tickets_left(self, *, event_id: str) -> int:
        pass
