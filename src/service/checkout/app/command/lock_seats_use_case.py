from datetime import datetime
from typing import Callable

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.lock_seats_dto import LockSeatsRequest
from src.service.checkout.app.interface.i_seat_lock_gateway import ISeatLockGateway
from src.service.checkout.app.reservation_store import ReservationStore
from src.service.checkout.domain.checkout_error import SeatLockError
from src.service.checkout.domain.reservation_session import (
    DEFAULT_RESERVATION_TTL_SECONDS,
    ReservationSession,
    utc_now,
)


class LockSeatsUseCase:
    """Lock the selected seats and persist the resulting checkout session for this tab"""

    def __init__(
        self,
        *,
        seat_lock_gateway: ISeatLockGateway,
        reservation_store: ReservationStore,
        default_ttl_seconds: int = DEFAULT_RESERVATION_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.seat_lock_gateway = seat_lock_gateway
        self.reservation_store = reservation_store
        self.default_ttl_seconds = default_ttl_seconds
        self.clock = clock

    @Logger.io
    async def execute(self, request: LockSeatsRequest) -> ReservationSession:
        if not request.seat_ids:
            raise DomainError('At least one seat must be selected')
        if len(set(request.seat_ids)) != len(request.seat_ids):
            raise DomainError('Duplicate seats in selection')

        response = await self.seat_lock_gateway.lock_seats(request)

        try:
            session = ReservationSession.create(
                order_id=response.order_id,
                client_secret=response.client_secret,
                total_amount=response.total_amount,
                subtotal=response.subtotal,
                service_fee=response.service_fee,
                expires_at=response.expires_at,
                expires_in_seconds=response.expires_in_seconds,
                seat_count=len(request.seat_ids),
                now=self.clock(),
                default_ttl_seconds=self.default_ttl_seconds,
            )
        except DomainError as e:
            raise SeatLockError(f'Invalid seat lock response: {e.message}') from e

        # Replaces any earlier reservation of this tab
        self.reservation_store.save(session)
        Logger.base.info(
            f'🔒 [CHECKOUT] Locked {session.seat_count} seats for event {request.event_id}, '
            f'order {session.order_id}'
        )
        return session
