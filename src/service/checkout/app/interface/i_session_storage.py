"""
Session Storage Interface

Key-value string storage scoped to one checkout tab.
"""

from abc import ABC, abstractmethod


class ISessionStorage(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are not an error."""
        pass
