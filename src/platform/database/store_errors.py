"""
Backing-store failure translation

Driven adapters wrap every database round-trip in `store_operation(...)` so that
connectivity failures surface as StoreUnavailableError (the only error the purchase
path retries). Integrity or programming errors are left untouched and propagate.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.platform.exception.exceptions import StoreUnavailableError
from src.platform.logging.loguru_io import Logger


TRANSIENT_STORE_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    asyncio.TimeoutError,
    ConnectionError,
)


@asynccontextmanager
async def store_operation(name: str) -> AsyncIterator[None]:
    try:
        yield
    except TRANSIENT_STORE_ERRORS as e:
        Logger.base.warning(f'⚠️ [STORE] {name} failed: {type(e).__name__}: {e}')
        raise StoreUnavailableError(f'Ticket store unavailable during {name}') from e
