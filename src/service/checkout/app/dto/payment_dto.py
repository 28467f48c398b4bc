import attrs


@attrs.frozen
class PaymentIntentResponse:
    """Payment intent state after a confirm call (Stripe status vocabulary)"""

    status: str
    payment_intent_id: str | None = None
