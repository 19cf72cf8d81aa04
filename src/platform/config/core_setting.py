from pathlib import Path
from typing import List, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Inventory Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # Storage backend: 'postgres' for deployments, 'memory' for local runs and tests
    STORAGE_BACKEND: Literal['memory', 'postgres'] = 'postgres'

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'event_inventory_db'

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 1800  # seconds
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Inventory ledger retry on transient storage conflicts
    LEDGER_MAX_ATTEMPTS: int = 3
    LEDGER_RETRY_WAIT_MIN: float = 0.05  # seconds
    LEDGER_RETRY_WAIT_MAX: float = 1.0  # seconds

    # Booking references
    BOOKING_REFERENCE_PREFIX: str = 'TKT'
    RSVP_REFERENCE_PREFIX: str = 'RSVP'
    REFERENCE_MAX_ATTEMPTS: int = 5

    # Archival
    ARCHIVE_BUFFER_HOURS: int = 24
    ARCHIVE_BATCH_SIZE: int = 10
    ARCHIVE_LOG_RETENTION_DAYS: int = 90
    ARCHIVED_EVENTS_PAGE_SIZE: int = 50
    # A concurrent archiver that lost the transition waits this long for the winner's record
    ARCHIVE_RECORD_WAIT_ATTEMPTS: int = 10
    ARCHIVE_RECORD_WAIT_SECONDS: float = 0.05

    # Notifications (best-effort side channel)
    NOTIFICATION_CHANNEL: Literal['log', 'webhook'] = 'log'
    NOTIFICATION_QUEUE_SIZE: int = 100
    NOTIFICATION_WEBHOOK_URL: str = ''
    NOTIFICATION_TIMEOUT_SECONDS: float = 5.0


settings = Settings()  # type: ignore
