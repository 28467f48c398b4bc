from pathlib import Path
from typing import Literal

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

    PROJECT_NAME: str = 'NexTicket Checkout'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_TO_FILE: bool = False

    # API Gateway (ticket service lives behind /ticket_service/api)
    API_GATEWAY_URL: str = 'http://localhost:5000'
    TICKET_SERVICE_PATH: str = '/ticket_service/api'
    HTTP_TIMEOUT_SECONDS: float = 10.0

    @field_validator('API_GATEWAY_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/') if isinstance(v, str) else v

    @property
    def TICKET_API_BASE_URL(self) -> str:
        return f'{self.API_GATEWAY_URL}{self.TICKET_SERVICE_PATH}'

    # Checkout reservation
    RESERVATION_DEFAULT_TTL_SECONDS: int = 300  # Used when the lock response has no expiry
    COUNTDOWN_TICK_INTERVAL_SECONDS: float = 1.0
    COUNTDOWN_URGENT_THRESHOLD_SECONDS: int = 60
    CHECKOUT_STORAGE_KEY: str = 'checkoutData'
    CHECKOUT_STORAGE_BACKEND: Literal['memory', 'kvrocks'] = 'memory'
    CHECKOUT_CURRENCY: str = 'LKR'

    # Kvrocks (Redis protocol) backing for tab-scoped storage
    KVROCKS_HOST: str = 'localhost'
    KVROCKS_PORT: int = 6666
    KVROCKS_DB: int = 0
    KVROCKS_PASSWORD: str = ''
    KVROCKS_KEY_PREFIX: str = ''
    KVROCKS_SOCKET_TIMEOUT: int = 5  # seconds
    CHECKOUT_SESSION_TTL_SECONDS: int = 1800  # Abandoned tabs are dropped after this

    # Stripe
    STRIPE_SECRET_KEY: SecretStr = SecretStr('')

    # Observability
    SERVICE_NAME: str = 'checkout'
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None


settings = Settings()  # type: ignore
