"""
Seat Lock Gateway Interface

Ticket service endpoints that hold seats for a buyer while they pay.
"""

from abc import ABC, abstractmethod

from src.service.checkout.app.dto.lock_seats_dto import (
    LockedSeatsResponse,
    LockSeatsRequest,
    LockSeatsResponse,
)


class ISeatLockGateway(ABC):
    @abstractmethod
    async def lock_seats(self, request: LockSeatsRequest) -> LockSeatsResponse:
        """
        Lock seats and open a payment intent for them.

        Raises:
            AuthenticationError: No identity token available
            SeatLockConflictError: Some seats are held by other users (HTTP 409)
            SeatLockError: Any other non-success response
        """
        pass

    @abstractmethod
    async def get_locked_seats(self) -> LockedSeatsResponse:
        """Server view of the current user's active lock."""
        pass
