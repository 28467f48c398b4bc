from typing import Optional

from src.service.checkout.app.interface.i_session_storage import ISessionStorage


class InMemorySessionStorage(ISessionStorage):
    """
    Tab storage living as long as the process.

    Tabs share one backing dict and are kept apart by `tab_id`, the same
    scoping the Kvrocks adapter applies to its keys.
    """

    def __init__(
        self, *, tab_id: str = 'default', data: Optional[dict[tuple[str, str], str]] = None
    ) -> None:
        if not tab_id:
            raise ValueError('tab_id is required for tab-scoped storage')
        self.tab_id = tab_id
        self._data = {} if data is None else data

    def get(self, key: str) -> str | None:
        return self._data.get((self.tab_id, key))

    def set(self, key: str, value: str) -> None:
        self._data[(self.tab_id, key)] = value

    def delete(self, key: str) -> None:
        self._data.pop((self.tab_id, key), None)
