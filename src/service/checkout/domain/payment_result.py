from enum import StrEnum

import attrs


class PaymentStatus(StrEnum):
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    PENDING = 'pending'


@attrs.frozen
class PaymentResult:
    status: PaymentStatus
    reason: str = ''
    # True when the failure came from an exception rather than a structured decline
    unknown: bool = False
    # True when the reservation was cleared because the collaborator reported expiry
    reservation_expired: bool = False
    payment_intent_id: str | None = None

    @classmethod
    def succeeded(cls, *, payment_intent_id: str | None = None) -> 'PaymentResult':
        return cls(status=PaymentStatus.SUCCEEDED, payment_intent_id=payment_intent_id)

    @classmethod
    def pending(cls, *, payment_intent_id: str | None = None) -> 'PaymentResult':
        return cls(status=PaymentStatus.PENDING, payment_intent_id=payment_intent_id)

    @classmethod
    def failed(
        cls, reason: str, *, unknown: bool = False, reservation_expired: bool = False
    ) -> 'PaymentResult':
        return cls(
            status=PaymentStatus.FAILED,
            reason=reason,
            unknown=unknown,
            reservation_expired=reservation_expired,
        )


@attrs.frozen
class PaymentMethodHandle:
    """Opaque payment-method reference captured by the card widget (e.g. a Stripe pm_ id)."""

    token: str = attrs.field(repr=False)
