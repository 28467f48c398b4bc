"""
Checkout error taxonomy.

Every error carries a user-facing message; the orchestrator turns them into
`on_error(message)` and never lets them reach the UI as exceptions.
"""

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    NotFoundError,
    ServiceUnavailableError,
    UpstreamServiceError,
)
from src.service.checkout.domain.checkout_message import (
    NO_PAYMENT_INFORMATION,
    SDK_NOT_READY,
    SEATS_ALREADY_LOCKED,
    TIME_EXPIRED,
)


class MissingReservationError(NotFoundError):
    def __init__(self, message: str = NO_PAYMENT_INFORMATION) -> None:
        super().__init__(message)


class MalformedReservationError(MissingReservationError):
    """Stored session could not be parsed; handled exactly like a missing one."""


class ReservationExpiredError(CustomBaseError):
    def __init__(self, message: str = TIME_EXPIRED) -> None:
        super().__init__(message, 410)


class PaymentSdkNotReadyError(ServiceUnavailableError):
    def __init__(self, message: str = SDK_NOT_READY) -> None:
        super().__init__(message)


class PaymentFailedError(CustomBaseError):
    """Structured decline from the payment collaborator; `reason` is shown verbatim."""

    def __init__(self, reason: str, *, code: str | None = None) -> None:
        self.code = code
        super().__init__(reason, 402)


class UnknownPaymentError(CustomBaseError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason, 500)


class SeatLockConflictError(ConflictError):
    def __init__(self, message: str = SEATS_ALREADY_LOCKED) -> None:
        super().__init__(message)


class SeatLockError(UpstreamServiceError):
    pass


class TimerUnavailableError(ServiceUnavailableError):
    """No tick source in this context (headless, no running event loop)."""
