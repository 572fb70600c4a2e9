from typing import AsyncContextManager, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_errors import store_operation
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.driven_adapter.model.user_model import UserModel


class UserQueryRepoImpl(IUserQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def exists(self, *, user_id: str) -> bool:
        async with store_operation('user exists'):
            async with self.session_factory() as session:
                result = await session.execute(
                    select(UserModel.id).where(UserModel.id == user_id).limit(1)
                )
                return result.scalar_one_or_none() is not None
