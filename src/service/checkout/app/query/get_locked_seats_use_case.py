from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.lock_seats_dto import LockedSeatsResponse
from src.service.checkout.app.interface.i_seat_lock_gateway import ISeatLockGateway


class GetLockedSeatsUseCase:
    def __init__(self, *, seat_lock_gateway: ISeatLockGateway) -> None:
        self.seat_lock_gateway = seat_lock_gateway

    @Logger.io
    async def execute(self) -> LockedSeatsResponse:
        return await self.seat_lock_gateway.get_locked_seats()
