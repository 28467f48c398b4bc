"""Checkout Application DTOs"""

from src.service.checkout.app.dto.lock_seats_dto import (
    LockedSeatsResponse,
    LockSeatsRequest,
    LockSeatsResponse,
    SeatId,
)
from src.service.checkout.app.dto.payment_dto import PaymentIntentResponse


__all__ = [
    'LockedSeatsResponse',
    'LockSeatsRequest',
    'LockSeatsResponse',
    'PaymentIntentResponse',
    'SeatId',
]
