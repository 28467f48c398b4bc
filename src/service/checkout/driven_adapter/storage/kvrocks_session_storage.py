"""
Kvrocks Session Storage

Tab-scoped storage in Kvrocks so a checkout survives a page reload handled by
another worker. Keys are namespaced per tab and expire, so an abandoned tab
does not leave a reservation behind.

Key format: {prefix}checkout:{tab_id}:{key}
"""

from redis import Redis

from src.service.checkout.app.interface.i_session_storage import ISessionStorage


class KvrocksSessionStorage(ISessionStorage):
    def __init__(
        self, *, client: Redis, tab_id: str, ttl_seconds: int, key_prefix: str = ''
    ) -> None:
        if not tab_id:
            raise ValueError('tab_id is required for tab-scoped storage')
        self.client = client
        self.tab_id = tab_id
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        return f'{self.key_prefix}checkout:{self.tab_id}:{key}'

    def get(self, key: str) -> str | None:
        value = self.client.get(self._make_key(key))
        if isinstance(value, bytes):
            return value.decode()
        return value  # type: ignore[return-value]

    def set(self, key: str, value: str) -> None:
        self.client.set(self._make_key(key), value, ex=self.ttl_seconds)

    def delete(self, key: str) -> None:
        self.client.delete(self._make_key(key))
