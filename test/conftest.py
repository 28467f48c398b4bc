"""
Test Configuration and Fixtures

This module provides:
- Early environment setup (test log directory, in-memory tab storage)
- Shared checkout test doubles: a controllable clock, a manual tick
  scheduler, a stub payment gateway and tab storage whose delete fails
- A sample reservation factory

Architecture:
- Unit tests (test/**/unit/): pure, no external services
- Adapter tests: httpx MockTransport / patched SDK, never the real network
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the logging config read these at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['CHECKOUT_STORAGE_BACKEND'] = 'memory'
    os.environ.setdefault('DEBUG', 'true')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Callable  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402

from src.service.checkout.app.dto.payment_dto import PaymentIntentResponse  # noqa: E402
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway  # noqa: E402
from src.service.checkout.app.reservation_store import ReservationStore  # noqa: E402
from src.service.checkout.domain.checkout_error import TimerUnavailableError  # noqa: E402
from src.service.checkout.domain.payment_result import PaymentMethodHandle  # noqa: E402
from src.service.checkout.domain.reservation_session import ReservationSession  # noqa: E402
from src.service.checkout.driven_adapter.storage.in_memory_session_storage import (  # noqa: E402
    InMemorySessionStorage,
)


NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
CLIENT_SECRET = 'pi_3PxTest123_secret_Sup3rS3cr3t'


# =============================================================================
# Test doubles
# =============================================================================
class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ManualTickHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTickScheduler:
    """Tick scheduler driven by the test through `fire()`"""

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self.interval: Optional[float] = None
        self.callback: Optional[Callable[[], None]] = None
        self.handle: Optional[ManualTickHandle] = None
        self.schedule_count = 0

    def schedule(self, *, interval: float, callback: Callable[[], None]) -> ManualTickHandle:
        if not self.available:
            raise TimerUnavailableError('No tick source')
        self.schedule_count += 1
        self.interval = interval
        self.callback = callback
        self.handle = ManualTickHandle()
        return self.handle

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None or self.handle is None or self.handle.cancelled:
                return
            self.callback()


class StubPaymentGateway(IPaymentGateway):
    """
    Payment gateway stub.

    `response` is returned, or `error` raised, from confirm_payment.
    `during_confirm` runs while the call is in flight (to simulate races).
    """

    def __init__(self) -> None:
        self.ready = True
        self.response = PaymentIntentResponse(status='succeeded', payment_intent_id='pi_3PxTest123')
        self.error: Optional[Exception] = None
        self.during_confirm: Optional[Callable[[], None]] = None
        self.calls: list[dict] = []

    def is_ready(self) -> bool:
        return self.ready

    async def confirm_payment(
        self, *, client_secret: str, payment_method: PaymentMethodHandle
    ) -> PaymentIntentResponse:
        self.calls.append({'client_secret': client_secret, 'payment_method': payment_method})
        if self.during_confirm is not None:
            self.during_confirm()
        if self.error is not None:
            raise self.error
        return self.response


class UnreliableSessionStorage(InMemorySessionStorage):
    """In-memory tab storage whose delete fails while `delete_error` is set"""

    def __init__(self) -> None:
        super().__init__()
        self.delete_error: Optional[Exception] = ConnectionError('storage down')
        self.delete_attempts = 0

    def delete(self, key: str) -> None:
        self.delete_attempts += 1
        if self.delete_error is not None:
            raise self.delete_error
        super().delete(key)


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
def client_secret() -> str:
    return CLIENT_SECRET


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def tick_scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture
def unavailable_tick_scheduler() -> ManualTickScheduler:
    return ManualTickScheduler(available=False)


@pytest.fixture
def storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def unreliable_storage() -> UnreliableSessionStorage:
    return UnreliableSessionStorage()


@pytest.fixture
def reservation_store(storage: InMemorySessionStorage, clock: FakeClock) -> ReservationStore:
    return ReservationStore(storage=storage, clock=clock)


@pytest.fixture
def make_session(clock: FakeClock) -> Callable[..., ReservationSession]:
    """Factory for sessions expiring `seconds_left` after the fake clock's now"""

    def _make(
        *, order_id: str = 'order-1', seconds_left: float = 300, seat_count: int = 2
    ) -> ReservationSession:
        return ReservationSession(
            order_id=order_id,
            client_secret=CLIENT_SECRET,
            total_amount=Decimal('1500.00'),
            subtotal=Decimal('1400.00'),
            service_fee=Decimal('100.00'),
            expires_at=clock() + timedelta(seconds=seconds_left),
            seat_count=seat_count,
        )

    return _make


@pytest.fixture
def payment_gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def card() -> PaymentMethodHandle:
    return PaymentMethodHandle(token='pm_card_visa')
