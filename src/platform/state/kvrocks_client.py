from typing import Optional

from redis import ConnectionPool, Redis

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class KvrocksClient:
    """
    Kvrocks client with a connection pool.

    Checkout storage is read and written synchronously from UI handlers, so
    this wraps the blocking redis-py client rather than redis.asyncio.

    Usage:
        kvrocks_client.initialize()  # In startup
        client = kvrocks_client.get_client()  # In adapters
    """

    def __init__(self) -> None:
        self._client: Optional[Redis] = None

    def initialize(self) -> Redis:
        """Initialize connection pool (idempotent)"""
        if self._client is not None:
            return self._client

        pool = ConnectionPool.from_url(
            f'redis://{settings.KVROCKS_HOST}:{settings.KVROCKS_PORT}/{settings.KVROCKS_DB}',
            password=settings.KVROCKS_PASSWORD or None,
            decode_responses=True,
            socket_timeout=settings.KVROCKS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.KVROCKS_SOCKET_TIMEOUT,
        )
        client = Redis(connection_pool=pool)
        client.ping()  # Fail-fast
        Logger.base.info('✅ Kvrocks connected')
        self._client = client
        return client

    def get_client(self) -> Redis:
        if self._client is None:
            raise RuntimeError(
                'Kvrocks client not initialized. Call kvrocks_client.initialize() during startup.'
            )
        return self._client

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


# Global singleton
kvrocks_client = KvrocksClient()
