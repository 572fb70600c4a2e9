from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    ConcurrentModificationError,
    InvalidTransitionError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.platform.retry import retry_with_backoff
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class UpdateTicketStatusUseCase:
    """
    Move a ticket through its lifecycle.

    The status compare-and-set and the capacity release commit together in one unit
    of work. Losing the compare-and-set to a concurrent transition rolls back and
    retries from the read, so a second concurrent cancel sees `canceled` and becomes
    a no-op: capacity is released at most once.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        max_retries: Optional[int] = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.max_retries = (
            settings.STATUS_TRANSITION_MAX_RETRIES if max_retries is None else max_retries
        )

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, ticket_id: UUID, new_status: TicketStatus) -> TicketEntity:
        return await retry_with_backoff(
            lambda: self._transition_once(ticket_id=ticket_id, new_status=new_status),
            max_retries=self.max_retries,
            exceptions=(ConcurrentModificationError,),
            operation=f'status transition {ticket_id}',
        )

    @Logger.io
    async def cancel(self, *, ticket_id: UUID) -> TicketEntity:
        return await self.execute(ticket_id=ticket_id, new_status=TicketStatus.CANCELED)

    async def _transition_once(self, *, ticket_id: UUID, new_status: TicketStatus) -> TicketEntity:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_command_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None:
                raise NotFoundError('Ticket not found.')

            try:
                transition = ticket.plan_transition(new_status)
            except InvalidTransitionError:
                metrics.record_transition(
                    from_status=ticket.status.value, to_status=new_status.value, result='rejected'
                )
                raise

            if transition.is_noop:
                metrics.record_transition(
                    from_status=ticket.status.value, to_status=new_status.value, result='noop'
                )
                return ticket

            changed = await uow.ticket_command_repo.update_status(
                ticket_id=ticket_id,
                expected_status=transition.from_status,
                new_status=transition.to_status,
            )
            if not changed:
                metrics.transition_conflicts.inc()
                raise ConcurrentModificationError(
                    f'Ticket {ticket_id} changed status concurrently, please retry.'
                )

            if transition.releases_capacity:
                await uow.event_capacity_ledger.release(
                    event_id=ticket.event_id, quantity=ticket.quantity
                )

            await uow.commit()

        if transition.releases_capacity:
            metrics.record_release(reason='cancellation', quantity=ticket.quantity)
        metrics.record_transition(
            from_status=transition.from_status.value,
            to_status=transition.to_status.value,
            result='applied',
        )
        Logger.base.info(
            f'🔁 [STATUS] Ticket {ticket_id}: {transition.from_status.value} -> '
            f'{transition.to_status.value}'
        )
        return ticket.apply(transition)
