"""
Anyio Tick Scheduler

Runs interval callbacks as tasks of an anyio task group (the app's
background task group), each in its own cancel scope.
"""

from typing import Callable, Optional

import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_error import TimerUnavailableError


class AnyioTickHandle:
    def __init__(self) -> None:
        self.cancel_scope = anyio.CancelScope()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        self.cancel_scope.cancel()


class AnyioTickScheduler:
    def __init__(self, *, task_group: Optional[TaskGroup]) -> None:
        self.task_group = task_group

    def schedule(self, *, interval: float, callback: Callable[[], None]) -> AnyioTickHandle:
        if self.task_group is None:
            raise TimerUnavailableError('No background task group available for ticking')

        handle = AnyioTickHandle()
        self.task_group.start_soon(self._run, interval, callback, handle)
        return handle

    @staticmethod
    async def _run(interval: float, callback: Callable[[], None], handle: AnyioTickHandle) -> None:
        with handle.cancel_scope:
            while not handle.cancelled:
                await anyio.sleep(interval)
                if handle.cancelled:
                    break
                try:
                    callback()
                except Exception as e:
                    # A failing listener must not kill the background task group
                    Logger.base.exception(f'❌ [TICK] Tick callback failed: {e}')
