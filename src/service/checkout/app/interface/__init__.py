"""Checkout Application Interfaces"""

from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.app.interface.i_seat_lock_gateway import ISeatLockGateway
from src.service.checkout.app.interface.i_session_storage import ISessionStorage
from src.service.checkout.app.interface.i_tick_scheduler import ITickHandle, ITickScheduler


__all__ = [
    'IPaymentGateway',
    'ISeatLockGateway',
    'ISessionStorage',
    'ITickHandle',
    'ITickScheduler',
]
