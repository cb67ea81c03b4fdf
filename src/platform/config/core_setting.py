from pathlib import Path
from typing import List, Optional

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

    PROJECT_NAME: str = 'Venue Access Platform'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security (tokens are issued by the identity service, only decoded here)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'venue_access'

    # Overrides the POSTGRES_* assembly (e.g. sqlite+aiosqlite:///./local.db)
    DATABASE_URL: Optional[str] = None

    # Connection pool (ignored by sqlite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 30.0

    AUTO_CREATE_TABLES: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Reservation holds
    RESERVATION_HOLD_SECONDS: int = 600
    RESERVATION_EXPIRY_INTERVAL_SECONDS: float = 30.0
    RESERVE_MAX_RETRIES: int = 3
    RESERVE_RETRY_BASE_DELAY_SECONDS: float = 0.05
    TICKET_CANCEL_CUTOFF_HOURS: int = 24

    # Check-in
    CHECK_IN_ENFORCE_EVENT_WINDOW: bool = True
    CHECK_IN_EARLY_ENTRY_MINUTES: int = 120

    # Guest list
    NO_SHOW_RECONCILE_INTERVAL_SECONDS: float = 900.0

    # POS sync
    POS_SYNC_INTERVAL_SECONDS: float = 300.0
    POS_SYNC_TIMEOUT_SECONDS: float = 15.0
    POS_SYNC_MAX_RETRIES: int = 4
    POS_SYNC_BACKOFF_SECONDS: float = 2.0
    POS_SYNC_INITIAL_LOOKBACK_DAYS: int = 7
    POS_USE_STUB_FETCHER: bool = True
    POS_INGEST_MAX_RETRIES: int = 3
    POS_INGEST_RETRY_BASE_DELAY_SECONDS: float = 0.05

    SQUARE_BASE_URL: str = 'https://connect.squareupsandbox.com'
    SQUARE_ACCESS_TOKEN: SecretStr = SecretStr('')
    SQUARE_API_VERSION: str = '2024-12-18'
    TOAST_BASE_URL: str = 'https://ws-sandbox-api.eng.toasttab.com'
    TOAST_ACCESS_TOKEN: SecretStr = SecretStr('')

    # Periodic jobs (expiry, POS sync, no-show reconciliation)
    ENABLE_BACKGROUND_JOBS: bool = True

    # Domain event stream
    VENUE_STREAM_BUFFER_SIZE: int = 32


settings = Settings()  # type: ignore
