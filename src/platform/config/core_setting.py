from pathlib import Path
from typing import List

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

    PROJECT_NAME: str = 'Reservation Back Office'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    ALGORITHM: str = 'HS256'
    AUTH_COOKIE_NAME: str = 'backofficeauth'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

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
    POSTGRES_DB: str = 'reservation_backoffice'
    DATABASE_URL: str = ''  # Overrides the POSTGRES_* assembly when set (e.g. sqlite in tests)

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@'
            f'{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Ticket signing and numbering
    QR_SECRET: SecretStr = SecretStr('test_qr_secret_change_in_production')
    TICKET_NUMBER_PREFIX: str = 'MIP'
    TICKET_NUMBER_MAX_ATTEMPTS: int = 5

    # Files
    UPLOAD_DIR: str = 'uploads'
    UPLOAD_URL_PREFIX: str = '/uploads'
    TICKET_TEMPLATE_DIR: str = 'static/images'
    MAX_PROOF_FILE_BYTES: int = 5 * 1024 * 1024

    # Duplicate request guard (per process, best effort)
    DUPLICATE_GUARD_TTL_SECONDS: float = 10.0
    DUPLICATE_GUARD_MAX_ENTRIES: int = 1000

    # Notification dispatch
    NOTIFICATION_MAX_ATTEMPTS: int = 3
    NOTIFICATION_BASE_DELAY_SECONDS: float = 1.0
    NOTIFICATION_MAX_DELAY_SECONDS: float = 30.0
    NOTIFICATION_QUEUE_SIZE: int = 1000
    MAIL_FROM: str = 'no-reply@backoffice.local'

    # Tracing (no exporter unless an endpoint is set)
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ''
    OTEL_CONSOLE_EXPORT: bool = False
    OTEL_SAMPLE_RATIO: float = 1.0
    DEPLOY_ENV: str = 'local_dev'


settings = Settings()  # type: ignore
