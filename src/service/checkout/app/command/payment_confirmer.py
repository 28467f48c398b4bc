"""
Payment Confirmer

Drives one payment-confirmation call with the stored client secret and
normalizes the outcome to SUCCEEDED / FAILED(reason) / PENDING.

Flow:
1. Preconditions (reservation present, not expired, SDK ready)
2. Exactly one confirm call, no retries
3. Succeeded → clear reservation; decline → keep it for a manual retry,
   unless the collaborator says the reservation itself expired
"""

from datetime import datetime
from typing import Callable, Optional

from opentelemetry import trace

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.countdown_controller import CountdownController
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.app.reservation_store import ReservationStore
from src.service.checkout.domain.checkout_error import (
    MissingReservationError,
    PaymentFailedError,
    PaymentSdkNotReadyError,
    ReservationExpiredError,
)
from src.service.checkout.domain.checkout_message import PAYMENT_FAILED
from src.service.checkout.domain.payment_result import PaymentMethodHandle, PaymentResult
from src.service.checkout.domain.reservation_session import ReservationSession, utc_now


SUCCEEDED_STATUSES = frozenset({'succeeded'})
PENDING_STATUSES = frozenset(
    {'processing', 'requires_action', 'requires_confirmation', 'requires_capture'}
)

RESERVATION_EXPIRED_CODES = frozenset({'reservation_expired', 'lock_expired', 'order_expired'})
# Phrases only: a bare "expired" would also match "Your card has expired."
RESERVATION_EXPIRED_MARKERS = (
    'reservation expired',
    'reservation has expired',
    'lock expired',
    'lock has expired',
    'seat lock has expired',
    'time expired',
    'order expired',
    'order has expired',
)


def indicates_reservation_expired(reason: str, code: str | None = None) -> bool:
    if code and code.lower() in RESERVATION_EXPIRED_CODES:
        return True
    lowered = reason.lower()
    return any(marker in lowered for marker in RESERVATION_EXPIRED_MARKERS)


class PaymentConfirmer:
    def __init__(
        self,
        *,
        payment_gateway: IPaymentGateway,
        reservation_store: ReservationStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.payment_gateway = payment_gateway
        self.reservation_store = reservation_store
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    def check_preconditions(
        self,
        session: Optional[ReservationSession],
        countdown: Optional[CountdownController] = None,
    ) -> ReservationSession:
        """
        Raises:
            MissingReservationError: No active reservation
            ReservationExpiredError: Countdown expired or expiry instant passed
            PaymentSdkNotReadyError: Payment SDK not initialised yet
        """
        if session is None:
            raise MissingReservationError()
        if (countdown is not None and countdown.is_expired) or session.is_expired(now=self.clock()):
            raise ReservationExpiredError()
        if not self.payment_gateway.is_ready():
            raise PaymentSdkNotReadyError()
        return session

    @Logger.io
    async def confirm(
        self,
        *,
        session: Optional[ReservationSession],
        payment_method: PaymentMethodHandle,
        countdown: Optional[CountdownController] = None,
    ) -> PaymentResult:
        """
        Confirm payment for the active reservation.

        Args:
            countdown: The checkout screen's countdown; an expired countdown blocks the call

        Raises:
            MissingReservationError, ReservationExpiredError, PaymentSdkNotReadyError:
                Precondition failures, raised before the gateway is called
        """
        session = self.check_preconditions(session, countdown)

        with self.tracer.start_as_current_span(
            'checkout.confirm_payment',
            attributes={
                'checkout.order_id': session.order_id,
                'checkout.seat_count': session.seat_count,
            },
        ) as span:
            result = await self._confirm_once(session=session, payment_method=payment_method)
            span.set_attribute('checkout.payment_status', result.status.value)
            return result

    async def _confirm_once(
        self, *, session: ReservationSession, payment_method: PaymentMethodHandle
    ) -> PaymentResult:
        try:
            response = await self.payment_gateway.confirm_payment(
                client_secret=session.client_secret, payment_method=payment_method
            )
        except PaymentFailedError as e:
            Logger.base.info(f'💳 [PAYMENT] Declined for order {session.order_id}: {e.message}')
            return self._failed(session=session, reason=e.message, code=e.code)
        except Exception as e:
            reason = e.message if isinstance(e, CustomBaseError) else (str(e) or PAYMENT_FAILED)
            Logger.base.warning(
                f'⚠️ [PAYMENT] Confirmation error for order {session.order_id}: {type(e).__name__}'
            )
            return self._failed(session=session, reason=reason, unknown=True)

        if response.status in SUCCEEDED_STATUSES:
            self.reservation_store.discard(order_id=session.order_id)
            Logger.base.info(f'✅ [PAYMENT] Succeeded for order {session.order_id}')
            return PaymentResult.succeeded(payment_intent_id=response.payment_intent_id)

        if response.status in PENDING_STATUSES:
            Logger.base.info(
                f'⏳ [PAYMENT] Pending ({response.status}) for order {session.order_id}'
            )
            return PaymentResult.pending(payment_intent_id=response.payment_intent_id)

        return self._failed(
            session=session,
            reason=f'{PAYMENT_FAILED}: unexpected payment status "{response.status}"',
            unknown=True,
        )

    def _failed(
        self,
        *,
        session: ReservationSession,
        reason: str,
        code: str | None = None,
        unknown: bool = False,
    ) -> PaymentResult:
        expired = indicates_reservation_expired(reason, code)
        if expired:
            self.reservation_store.discard(order_id=session.order_id)
        return PaymentResult.failed(reason, unknown=unknown, reservation_expired=expired)
