"""
Unit of Work Pattern - 統一管理 database session 和 repositories

Architecture:
- UoW 負責 session 生命週期管理
- UoW 負責 commit/rollback
- Repositories 透過 UoW 取得 shared session
- Use cases 透過 UoW 協調 ticket status 與 capacity ledger 的 atomic write
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import get_session_maker
from src.platform.database.store_errors import store_operation


if TYPE_CHECKING:
    from src.service.ticketing.app.interface.i_event_capacity_ledger import (
        IEventCapacityLedger,
    )
    from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the ticket engine

    Responsibilities:
    - Manage database session lifecycle
    - Make the ticket status change and the capacity release all-or-nothing
    - Provide commit/rollback interface

    Usage:
        async with uow:
            changed = await uow.ticket_command_repo.update_status(...)
            await uow.event_capacity_ledger.release(...)
            await uow.commit()

    Leaving the block without commit() rolls everything back.
    """

    ticket_command_repo: ITicketCommandRepo
    event_capacity_ledger: IEventCapacityLedger

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    One session per `async with` block; create a new instance per transaction.
    """

    def __init__(self, session_factory: Optional[Callable[[], AsyncSession]] = None):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self):
        from src.service.ticketing.driven_adapter.repo.event_capacity_ledger_impl import (
            EventCapacityLedgerImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )

        session_factory = self.session_factory or get_session_maker()
        self.session = session_factory()

        # Repositories share the UoW session and never commit on their own
        self.ticket_command_repo = TicketCommandRepoImpl()
        self.ticket_command_repo.session = self.session
        self.event_capacity_ledger = EventCapacityLedgerImpl()
        self.event_capacity_ledger.session = self.session

        return await super().__aenter__()

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self):
        async with store_operation('commit'):
            await self.session.commit()  # type: ignore[union-attr]

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
