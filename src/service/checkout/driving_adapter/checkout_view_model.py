"""
Checkout View Model

What the checkout screen renders: remaining time as M:SS, the urgent flag,
whether the pay button is enabled, and the single message to show. The
screen calls mount/submit/unmount and reads properties; it owns no timers.
"""

from decimal import Decimal
from typing import Optional

from src.service.checkout.app.checkout_orchestrator import CheckoutOrchestrator
from src.service.checkout.app.command.payment_confirmer import PaymentConfirmer
from src.service.checkout.app.countdown_controller import CountdownController
from src.service.checkout.app.reservation_store import ReservationStore
from src.service.checkout.domain.checkout_status import CheckoutStatus
from src.service.checkout.domain.countdown_state import format_remaining
from src.service.checkout.domain.payment_result import PaymentMethodHandle


class CheckoutViewModel:
    def __init__(
        self,
        *,
        reservation_store: ReservationStore,
        countdown_controller: CountdownController,
        payment_confirmer: PaymentConfirmer,
        currency: str = 'LKR',
    ) -> None:
        self.countdown_controller = countdown_controller
        self.currency = currency
        self.orchestrator = CheckoutOrchestrator(
            reservation_store=reservation_store,
            countdown_controller=countdown_controller,
            payment_confirmer=payment_confirmer,
            on_success=self._on_success,
            on_error=self._on_error,
            on_processing=self._on_processing,
        )

        self.error_message: Optional[str] = None
        self.is_complete = False
        self.is_processing = False
        self.remaining_display = format_remaining(0)
        self.countdown_controller.subscribe(self._on_tick)

    @property
    def status(self) -> CheckoutStatus:
        return self.orchestrator.status

    @property
    def is_urgent(self) -> bool:
        return self.countdown_controller.is_urgent

    @property
    def can_submit(self) -> bool:
        return self.orchestrator.status == CheckoutStatus.READY

    @property
    def order_id(self) -> Optional[str]:
        session = self.orchestrator.session
        return session.order_id if session else None

    @property
    def total_display(self) -> Optional[str]:
        session = self.orchestrator.session
        if session is None:
            return None
        return f'{self.currency} {session.total_amount.quantize(Decimal("0.01"))}'

    def mount(self) -> CheckoutStatus:
        return self.orchestrator.mount()

    async def submit(self, payment_method: PaymentMethodHandle) -> CheckoutStatus:
        if not self.can_submit:
            return self.orchestrator.status
        self.error_message = None
        self.is_processing = True
        try:
            return await self.orchestrator.submit(payment_method)
        finally:
            self.is_processing = self.orchestrator.status == CheckoutStatus.AWAITING_CONFIRMATION

    def unmount(self) -> None:
        self.orchestrator.unmount()

    def _on_tick(self, remaining_seconds: int) -> None:
        self.remaining_display = format_remaining(remaining_seconds)

    def _on_success(self) -> None:
        self.is_complete = True
        self.error_message = None

    def _on_error(self, message: str) -> None:
        self.error_message = message

    def _on_processing(self) -> None:
        self.is_processing = True
