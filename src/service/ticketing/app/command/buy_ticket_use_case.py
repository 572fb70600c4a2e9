from decimal import Decimal
from typing import Any, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    CustomBaseError,
    InsufficientCapacityError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.platform.retry import retry_with_backoff
from src.service.ticketing.app.interface.i_event_capacity_ledger import IEventCapacityLedger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.value_object.ticket_payload import TicketPayload


_RESULT_BY_ERROR: dict[type[CustomBaseError], str] = {
    InvalidArgumentError: 'invalid',
    NotFoundError: 'not_found',
    InsufficientCapacityError: 'insufficient_capacity',
    StoreUnavailableError: 'store_error',
}


class BuyTicketUseCase:
    """
    Purchase tickets against an event's capacity.

    Flow:
    1. Validate quantity / total price
    2. Event and user must exist
    3. Reserve capacity (atomic conditional decrement, nothing written on failure)
    4. Write the pending ticket, retried with backoff on StoreUnavailable
    5. If the write never lands, release the reservation again (also retried);
       if even that fails the seats are leaked: warn, count, surface StoreUnavailable
    """

    def __init__(
        self,
        *,
        ticket_command_repo: ITicketCommandRepo,
        event_capacity_ledger: IEventCapacityLedger,
        event_query_repo: IEventQueryRepo,
        user_query_repo: IUserQueryRepo,
        ticket_write_max_retries: Optional[int] = None,
        release_max_retries: Optional[int] = None,
    ) -> None:
        self.ticket_command_repo = ticket_command_repo
        self.event_capacity_ledger = event_capacity_ledger
        self.event_query_repo = event_query_repo
        self.user_query_repo = user_query_repo
        self.ticket_write_max_retries = (
            settings.TICKET_WRITE_MAX_RETRIES
            if ticket_write_max_retries is None
            else ticket_write_max_retries
        )
        self.release_max_retries = (
            settings.COMPENSATING_RELEASE_MAX_RETRIES
            if release_max_retries is None
            else release_max_retries
        )

    @classmethod
    @inject
    def depends(
        cls,
        ticket_command_repo: ITicketCommandRepo = Depends(Provide[Container.ticket_command_repo]),
        event_capacity_ledger: IEventCapacityLedger = Depends(
            Provide[Container.event_capacity_ledger]
        ),
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
    ) -> Self:
        return cls(
            ticket_command_repo=ticket_command_repo,
            event_capacity_ledger=event_capacity_ledger,
            event_query_repo=event_query_repo,
            user_query_repo=user_query_repo,
        )

    @Logger.io
    async def execute(
        self,
        *,
        event_id: str,
        user_id: str,
        quantity: int,
        total_price: Decimal | int | float | str,
        payload: Optional[dict[str, Any]] = None,
    ) -> TicketEntity:
        try:
            ticket = TicketEntity.create(
                event_id=event_id,
                user_id=user_id,
                quantity=quantity,
                total_price=total_price,
                payload=TicketPayload.from_dict(payload),
            )
            await self._ensure_references(event_id=event_id, user_id=user_id)
            await self.event_capacity_ledger.reserve(event_id=event_id, quantity=quantity)
        except CustomBaseError as e:
            metrics.record_reservation(result=_RESULT_BY_ERROR.get(type(e), 'error'))
            raise

        await self._write_ticket_or_compensate(ticket=ticket)

        metrics.record_reservation(result='success', quantity=quantity)
        Logger.base.info(
            f'✅ [BUY] User {user_id} bought {quantity} ticket(s) for event {event_id}: {ticket.id}'
        )
        return ticket

    async def _ensure_references(self, *, event_id: str, user_id: str) -> None:
        if await self.event_query_repo.get_by_id(event_id=event_id) is None:
            raise NotFoundError('Event not found.')
        if not await self.user_query_repo.exists(user_id=user_id):
            raise NotFoundError('User not found.')

    async def _write_ticket_or_compensate(self, *, ticket: TicketEntity) -> None:
        try:
            await retry_with_backoff(
                lambda: self.ticket_command_repo.create(ticket=ticket),
                max_retries=self.ticket_write_max_retries,
                exceptions=(StoreUnavailableError,),
                operation=f'ticket write {ticket.id}',
            )
        except Exception as e:
            # Only transient errors are retried, but every failed write releases the reservation
            metrics.record_reservation(
                result='store_error' if isinstance(e, StoreUnavailableError) else 'error'
            )
            await self._compensate_reservation(ticket=ticket)
            raise

    async def _compensate_reservation(self, *, ticket: TicketEntity) -> None:
        """Give back the seats of a ticket that was never written. Never raises."""
        try:
            tickets_left = await retry_with_backoff(
                lambda: self.event_capacity_ledger.release(
                    event_id=ticket.event_id, quantity=ticket.quantity
                ),
                max_retries=self.release_max_retries,
                exceptions=(StoreUnavailableError,),
                operation=f'compensating release {ticket.id}',
            )
        except CustomBaseError as e:
            metrics.compensating_releases.labels(result='failed').inc()
            metrics.capacity_leaks.inc()
            Logger.base.warning(
                f'🚨 [CAPACITY_LEAK] {ticket.quantity} seat(s) of event {ticket.event_id} stay '
                f'reserved without a ticket (ticket {ticket.id}): {type(e).__name__}: {e}'
            )
            return

        metrics.compensating_releases.labels(result='success').inc()
        metrics.record_release(reason='compensation', quantity=ticket.quantity)
        Logger.base.warning(
            f'↩️ [COMPENSATE] Released {ticket.quantity} seat(s) of event {ticket.event_id} '
            f'after failed ticket write, {tickets_left} left'
        )
