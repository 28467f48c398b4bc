"""
Payment Gateway Interface

Wraps the external payment SDK's confirm-payment operation.
"""

from abc import ABC, abstractmethod

from src.service.checkout.app.dto.payment_dto import PaymentIntentResponse
from src.service.checkout.domain.payment_result import PaymentMethodHandle


class IPaymentGateway(ABC):
    @abstractmethod
    def is_ready(self) -> bool:
        """Whether the SDK is initialised and can confirm payments."""
        pass

    @abstractmethod
    async def confirm_payment(
        self, *, client_secret: str, payment_method: PaymentMethodHandle
    ) -> PaymentIntentResponse:
        """
        Confirm the payment intent identified by `client_secret`.

        Returns:
            The intent status after confirmation

        Raises:
            PaymentFailedError: Structured decline, message shown verbatim
            Exception: Anything else (network, SDK) is treated as an unknown failure
        """
        pass
