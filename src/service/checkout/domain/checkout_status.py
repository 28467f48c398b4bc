from enum import StrEnum


class CheckoutStatus(StrEnum):
    IDLE = 'idle'
    READY = 'ready'
    PROCESSING = 'processing'
    AWAITING_CONFIRMATION = 'awaiting_confirmation'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    EXPIRED = 'expired'

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({CheckoutStatus.SUCCEEDED, CheckoutStatus.FAILED, CheckoutStatus.EXPIRED})

_ALLOWED: dict[CheckoutStatus, frozenset[CheckoutStatus]] = {
    CheckoutStatus.IDLE: frozenset({CheckoutStatus.READY, CheckoutStatus.FAILED, CheckoutStatus.EXPIRED}),
    CheckoutStatus.READY: frozenset({CheckoutStatus.PROCESSING, CheckoutStatus.EXPIRED}),
    CheckoutStatus.PROCESSING: frozenset(
        {
            CheckoutStatus.READY,  # recoverable decline, session kept for retry
            CheckoutStatus.AWAITING_CONFIRMATION,
            CheckoutStatus.SUCCEEDED,
            CheckoutStatus.FAILED,
            CheckoutStatus.EXPIRED,
        }
    ),
    CheckoutStatus.AWAITING_CONFIRMATION: frozenset({CheckoutStatus.EXPIRED}),
}


def can_transition(current: CheckoutStatus, target: CheckoutStatus) -> bool:
    return target in _ALLOWED.get(current, frozenset())
