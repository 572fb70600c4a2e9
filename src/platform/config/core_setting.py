import json
from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Ticket Inventory Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS: comma separated or a JSON list (NoDecode skips the settings-source JSON decoding)
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.strip().startswith('['):
            return json.loads(v)
        if isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'ticket_inventory'
    POSTGRES_PORT: int = 5432

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 1800  # seconds
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Ticket store: max number of event ids accepted by one `event_id IN (...)` query.
    # Organizer fan-out splits its event ids into chunks of this size.
    TICKET_QUERY_IN_CLAUSE_LIMIT: int = 30

    # Purchase path: retry the ticket write, then compensate by releasing capacity
    TICKET_WRITE_MAX_RETRIES: int = 3
    COMPENSATING_RELEASE_MAX_RETRIES: int = 5

    # Optimistic status transitions (compare-and-set on ticket status)
    STATUS_TRANSITION_MAX_RETRIES: int = 3

    # Exponential backoff shared by every bounded retry loop
    RETRY_BASE_DELAY_SECONDS: float = 0.05
    RETRY_MAX_DELAY_SECONDS: float = 2.0

    @field_validator('TICKET_QUERY_IN_CLAUSE_LIMIT')
    @classmethod
    def validate_in_clause_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError('TICKET_QUERY_IN_CLAUSE_LIMIT must be at least 1')
        return v


settings = Settings()  # type: ignore
