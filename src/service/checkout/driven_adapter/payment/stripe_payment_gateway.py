"""
Stripe Payment Gateway

Confirms the PaymentIntent opened by the seat-lock service. The client
secret has the form `pi_<id>_secret_<token>`; the intent id is its prefix.
"""

from functools import partial

import anyio
import stripe

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.payment_dto import PaymentIntentResponse
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.domain.checkout_error import PaymentFailedError, UnknownPaymentError
from src.service.checkout.domain.checkout_message import PAYMENT_FAILED
from src.service.checkout.domain.payment_result import PaymentMethodHandle


CLIENT_SECRET_SEPARATOR = '_secret_'


def payment_intent_id_from_client_secret(client_secret: str) -> str:
    intent_id, separator, _ = client_secret.partition(CLIENT_SECRET_SEPARATOR)
    if not separator or not intent_id.startswith('pi_'):
        raise UnknownPaymentError('Invalid payment client secret')
    return intent_id


class StripePaymentGateway(IPaymentGateway):
    def __init__(self, *, api_key: str, stripe_module=stripe) -> None:
        self.api_key = api_key
        self._stripe = stripe_module

    def is_ready(self) -> bool:
        return bool(self.api_key)

    @Logger.io
    async def confirm_payment(
        self, *, client_secret: str, payment_method: PaymentMethodHandle
    ) -> PaymentIntentResponse:
        intent_id = payment_intent_id_from_client_secret(client_secret)
        try:
            intent = await anyio.to_thread.run_sync(
                partial(
                    self._stripe.PaymentIntent.confirm,
                    intent_id,
                    payment_method=payment_method.token,
                    api_key=self.api_key,
                )
            )
        except self._stripe.CardError as e:
            raise PaymentFailedError(e.user_message or PAYMENT_FAILED, code=e.code) from e
        except self._stripe.StripeError as e:
            raise UnknownPaymentError(e.user_message or str(e) or PAYMENT_FAILED) from e

        if intent.status == 'requires_payment_method':
            # Confirmation went through but the attached method was declined
            last_error = getattr(intent, 'last_payment_error', None)
            message = getattr(last_error, 'message', None) or PAYMENT_FAILED
            code = getattr(last_error, 'code', None)
            raise PaymentFailedError(message, code=code)

        return PaymentIntentResponse(status=intent.status, payment_intent_id=intent.id)
