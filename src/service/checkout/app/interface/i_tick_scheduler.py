from typing import Callable, Protocol


class ITickHandle(Protocol):
    def cancel(self) -> None:
        """Stop further ticks. Safe to call more than once."""
        ...


class ITickScheduler(Protocol):
    def schedule(self, *, interval: float, callback: Callable[[], None]) -> ITickHandle:
        """
        Call `callback` every `interval` seconds until the handle is cancelled.

        Raises:
            TimerUnavailableError: When no tick source is available
        """
        ...
