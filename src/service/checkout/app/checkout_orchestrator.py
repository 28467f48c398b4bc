"""
Checkout Orchestrator

Façade the checkout screen binds to. Composes ReservationStore,
CountdownController and PaymentConfirmer and reports through two terminal
callbacks, `on_success()` and `on_error(message)`.

Rules:
- Status only moves through `can_transition`; terminal states do not re-fire callbacks
- Expiry while a confirmation is in flight clears the reservation at once but
  lets the payment result decide which callback fires
- After `unmount()` late results still update storage but never touch the UI
"""

from typing import Callable, Optional

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.payment_confirmer import PaymentConfirmer
from src.service.checkout.app.countdown_controller import CountdownController
from src.service.checkout.app.reservation_store import ReservationStore
from src.service.checkout.domain.checkout_error import (
    MissingReservationError,
    ReservationExpiredError,
)
from src.service.checkout.domain.checkout_message import (
    NO_PAYMENT_INFORMATION,
    PAYMENT_FAILED,
    TIME_EXPIRED,
)
from src.service.checkout.domain.checkout_status import CheckoutStatus, can_transition
from src.service.checkout.domain.payment_result import (
    PaymentMethodHandle,
    PaymentResult,
    PaymentStatus,
)
from src.service.checkout.domain.reservation_session import ReservationSession


class CheckoutOrchestrator:
    def __init__(
        self,
        *,
        reservation_store: ReservationStore,
        countdown_controller: CountdownController,
        payment_confirmer: PaymentConfirmer,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
        on_processing: Optional[Callable[[], None]] = None,
    ) -> None:
        self.reservation_store = reservation_store
        self.countdown_controller = countdown_controller
        self.payment_confirmer = payment_confirmer
        self.on_success = on_success
        self.on_error = on_error
        self.on_processing = on_processing

        self._status = CheckoutStatus.IDLE
        self._session: Optional[ReservationSession] = None
        self._mounted = False
        self._payment_in_flight = False
        self._expired_during_payment = False

    @property
    def status(self) -> CheckoutStatus:
        return self._status

    @property
    def session(self) -> Optional[ReservationSession]:
        return self._session

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @Logger.io
    def mount(self) -> CheckoutStatus:
        if self._status != CheckoutStatus.IDLE:
            return self._status
        self._mounted = True
        try:
            self._session = self.reservation_store.load()
        except Exception as e:
            Logger.base.error(f'❌ [CHECKOUT] Tab storage unreadable: {type(e).__name__}')
            self._session = None
        if self._session is None:
            self._transition(CheckoutStatus.FAILED, error=NO_PAYMENT_INFORMATION)
            return self._status

        self._transition(CheckoutStatus.READY)
        # May expire synchronously when the lock already ran out
        self.countdown_controller.start(self._session, on_expired=self._handle_expired)
        return self._status

    @Logger.io
    async def submit(self, payment_method: PaymentMethodHandle) -> CheckoutStatus:
        if self._status != CheckoutStatus.READY:
            Logger.base.info(f'⏭️ [CHECKOUT] Submit ignored in status {self._status}')
            return self._status

        session = self._session
        self._transition(CheckoutStatus.PROCESSING)
        self._payment_in_flight = True
        try:
            result = await self.payment_confirmer.confirm(
                session=session,
                payment_method=payment_method,
                countdown=self.countdown_controller,
            )
        except Exception as e:
            self._payment_in_flight = False
            self._handle_confirm_error(e)
            return self._status

        self._payment_in_flight = False
        self._handle_payment_result(result)
        return self._status

    @Logger.io
    def unmount(self) -> None:
        self.countdown_controller.stop()
        self._mounted = False

    def _handle_expired(self) -> None:
        if self._payment_in_flight:
            Logger.base.info('⏳ [CHECKOUT] Expired during payment, waiting for the payment result')
            self._expired_during_payment = True
        else:
            self._transition(CheckoutStatus.EXPIRED, error=TIME_EXPIRED)
        self._discard_session()

    def _handle_confirm_error(self, error: Exception) -> None:
        if isinstance(error, ReservationExpiredError) or self._expired_during_payment:
            self._expire_now()
            return
        if isinstance(error, MissingReservationError):
            self._transition(CheckoutStatus.FAILED, error=error.message)
            return
        # SDK not ready or an unexpected error before any charge: the user may retry
        message = error.message if isinstance(error, CustomBaseError) else PAYMENT_FAILED
        self._transition(CheckoutStatus.READY, error=message)

    def _expire_now(self) -> None:
        self.countdown_controller.stop()
        self._transition(CheckoutStatus.EXPIRED, error=TIME_EXPIRED)
        self._discard_session()

    def _discard_session(self) -> None:
        if self._session is not None:
            self.reservation_store.discard(order_id=self._session.order_id)

    def _handle_payment_result(self, result: PaymentResult) -> None:
        if result.status == PaymentStatus.SUCCEEDED:
            self.countdown_controller.stop()
            self._transition(CheckoutStatus.SUCCEEDED)
            return

        if self._expired_during_payment:
            self._transition(CheckoutStatus.EXPIRED, error=TIME_EXPIRED)
            return

        if result.status == PaymentStatus.PENDING:
            self._transition(CheckoutStatus.AWAITING_CONFIRMATION)
            return

        if result.reservation_expired:
            self.countdown_controller.stop()
            self._transition(CheckoutStatus.EXPIRED, error=result.reason)
            return

        # Decline or unknown failure: reservation kept so the user can retry
        self._transition(CheckoutStatus.READY, error=result.reason)

    def _transition(self, target: CheckoutStatus, *, error: str | None = None) -> None:
        """Single gate for every status change and every UI callback."""
        if not can_transition(self._status, target):
            Logger.base.warning(f'⚠️ [CHECKOUT] Ignored transition {self._status} -> {target}')
            return

        previous, self._status = self._status, target
        Logger.base.info(f'🔄 [CHECKOUT] {previous} -> {target}')

        if target == CheckoutStatus.SUCCEEDED or target == CheckoutStatus.EXPIRED:
            self._expired_during_payment = False

        if not self._mounted:
            return

        if target == CheckoutStatus.SUCCEEDED:
            self.on_success()
        elif target == CheckoutStatus.AWAITING_CONFIRMATION:
            if self.on_processing is not None:
                self.on_processing()
        elif error is not None:
            self.on_error(error)
