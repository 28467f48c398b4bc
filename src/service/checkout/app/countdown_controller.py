"""
Countdown Controller

Publishes remaining reservation time and fires exactly one expiry
notification. Framework independent: the UI subscribes to tick output
instead of owning the timer.

State machine::

    IDLE ──start()──> RUNNING ──tick() reaches 0──> EXPIRED
      │                  └──────stop()────────────> STOPPED
      └──start() with nothing left──> EXPIRED
"""

from datetime import datetime
import math
from typing import Callable, Optional

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_tick_scheduler import ITickHandle, ITickScheduler
from src.service.checkout.domain.checkout_error import TimerUnavailableError
from src.service.checkout.domain.countdown_state import CountdownState, format_remaining
from src.service.checkout.domain.reservation_session import ReservationSession, utc_now


URGENT_THRESHOLD_SECONDS = 60


class CountdownController:
    def __init__(
        self,
        *,
        tick_scheduler: Optional[ITickScheduler],
        clock: Callable[[], datetime] = utc_now,
        tick_interval: float = 1.0,
        urgent_threshold_seconds: int = URGENT_THRESHOLD_SECONDS,
    ) -> None:
        self.tick_scheduler = tick_scheduler
        self.clock = clock
        self.tick_interval = tick_interval
        self.urgent_threshold_seconds = urgent_threshold_seconds

        self._state = CountdownState.IDLE
        self._remaining_seconds = 0
        self._on_expired: Optional[Callable[[], None]] = None
        self._handle: Optional[ITickHandle] = None
        self._listeners: list[Callable[[int], None]] = []

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def display(self) -> str:
        return format_remaining(self._remaining_seconds)

    @property
    def is_urgent(self) -> bool:
        return self._state == CountdownState.RUNNING and (
            self._remaining_seconds < self.urgent_threshold_seconds
        )

    @property
    def is_expired(self) -> bool:
        return self._state == CountdownState.EXPIRED

    def subscribe(self, listener: Callable[[int], None]) -> None:
        """Register a listener called with the remaining seconds after every change."""
        self._listeners.append(listener)

    @Logger.io
    def start(self, session: ReservationSession, *, on_expired: Callable[[], None]) -> None:
        if self._state != CountdownState.IDLE:
            Logger.base.warning(f'⚠️ [COUNTDOWN] start() ignored in state {self._state}')
            return

        self._on_expired = on_expired
        self._remaining_seconds = max(0, math.ceil(session.seconds_left(now=self.clock())))

        if self._remaining_seconds == 0:
            self._expire()
            return

        self._state = CountdownState.RUNNING
        self._publish()
        self._schedule_ticks()

    def tick(self) -> None:
        if self._state != CountdownState.RUNNING:
            return

        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        if self._remaining_seconds == 0:
            self._expire()
            return
        self._publish()

    @Logger.io
    def stop(self) -> None:
        if self._state != CountdownState.RUNNING:
            return
        self._state = CountdownState.STOPPED
        self._cancel_ticks()

    def _schedule_ticks(self) -> None:
        if self.tick_scheduler is None:
            Logger.base.warning('⚠️ [COUNTDOWN] No tick scheduler, countdown will not advance')
            return
        try:
            self._handle = self.tick_scheduler.schedule(
                interval=self.tick_interval, callback=self.tick
            )
        except TimerUnavailableError as e:
            Logger.base.warning(f'⚠️ [COUNTDOWN] Timer unavailable, countdown will not advance: {e}')

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self) -> None:
        self._state = CountdownState.EXPIRED
        self._remaining_seconds = 0
        self._cancel_ticks()
        self._publish()

        on_expired, self._on_expired = self._on_expired, None
        Logger.base.info('⏰ [COUNTDOWN] Reservation expired')
        if on_expired is not None:
            on_expired()

    def _publish(self) -> None:
        for listener in self._listeners:
            listener(self._remaining_seconds)
