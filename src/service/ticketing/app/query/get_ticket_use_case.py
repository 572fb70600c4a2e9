from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity


class GetTicketUseCase:
    def __init__(self, *, ticket_query_repo: ITicketQueryRepo):
        self.ticket_query_repo = ticket_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
    ) -> Self:
        return cls(ticket_query_repo=ticket_query_repo)

    @Logger.io
    async def get_ticket(self, *, ticket_id: UUID) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id=ticket_id)
        if not ticket:
            raise NotFoundError('Ticket not found.')
        return ticket

    @Logger.io
    async def list_user_tickets(self, *, user_id: str) -> List[TicketEntity]:
        # A user without tickets is a valid, empty answer
        return await self.ticket_query_repo.list_by_user(user_id=user_id)
