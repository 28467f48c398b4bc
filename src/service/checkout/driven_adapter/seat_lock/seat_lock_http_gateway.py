"""
Seat Lock HTTP Gateway

Talks to the ticket service through the API gateway:
- POST {base}/ticket-locking/lock-seats
- GET  {base}/ticket-locking/locked-seats

Every call carries the buyer's identity token as a bearer token.
"""

from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.lock_seats_dto import (
    LockedSeatsResponse,
    LockSeatsRequest,
    LockSeatsResponse,
    SeatId,
)
from src.service.checkout.app.interface.i_seat_lock_gateway import ISeatLockGateway
from src.service.checkout.domain.checkout_error import SeatLockConflictError, SeatLockError
from src.service.checkout.domain.checkout_message import (
    SEATS_ALREADY_LOCKED,
    USER_NOT_AUTHENTICATED,
)
from src.service.checkout.driven_adapter.seat_lock.seat_lock_schema import (
    LockedSeatsResponseSchema,
    LockSeatsRequestSchema,
    LockSeatsResponseSchema,
    SeatIdSchema,
)


LOCK_SEATS_PATH = '/ticket-locking/lock-seats'
LOCKED_SEATS_PATH = '/ticket-locking/locked-seats'

IdTokenProvider = Callable[[], Awaitable[Optional[str]]]
_SchemaT = TypeVar('_SchemaT', bound=BaseModel)


async def anonymous_id_token() -> Optional[str]:
    """Identity provider used until the UI signs a buyer in"""
    return None


class SeatLockHttpGateway(ISeatLockGateway):
    def __init__(self, *, client: httpx.AsyncClient, id_token_provider: IdTokenProvider) -> None:
        self.client = client
        self.id_token_provider = id_token_provider

    async def _auth_headers(self) -> dict[str, str]:
        token = await self.id_token_provider()
        if not token:
            raise AuthenticationError(USER_NOT_AUTHENTICATED)
        return {'Authorization': f'Bearer {token}'}

    @Logger.io
    async def lock_seats(self, request: LockSeatsRequest) -> LockSeatsResponse:
        body = LockSeatsRequestSchema(
            event_id=request.event_id,
            bulk_ticket_id=request.bulk_ticket_id,
            seat_ids=[
                SeatIdSchema(section=seat.section, row_id=seat.row_id, col_id=seat.col_id)
                for seat in request.seat_ids
            ],
        )
        response = await self.client.post(
            LOCK_SEATS_PATH, json=body.model_dump(), headers=await self._auth_headers()
        )

        if response.status_code == httpx.codes.CONFLICT:
            detail = _error_detail(response)
            raise SeatLockConflictError(detail or SEATS_ALREADY_LOCKED)
        _raise_for_status(response)

        data = _parse(LockSeatsResponseSchema, response)
        return LockSeatsResponse(
            order_id=data.order_id,
            client_secret=data.client_secret,
            total_amount=data.total_amount,
            subtotal=data.subtotal,
            service_fee=data.service_fee,
            expires_at=data.expires_at,
            expires_in_seconds=data.expires_in_seconds,
            payment_intent_id=data.payment_intent_id,
            locked_seats=data.locked_seats,
            message=data.message,
        )

    @Logger.io
    async def get_locked_seats(self) -> LockedSeatsResponse:
        response = await self.client.get(LOCKED_SEATS_PATH, headers=await self._auth_headers())
        _raise_for_status(response)

        data = _parse(LockedSeatsResponseSchema, response)
        ticket_info = data.bulk_ticket_info
        return LockedSeatsResponse(
            order_id=data.order_id,
            event_id=data.event_id,
            status=data.status,
            expires_at=data.expires_at,
            remaining_seconds=data.remaining_seconds,
            seat_ids=[
                SeatId(section=seat.section, row_id=seat.row_id, col_id=seat.col_id)
                for seat in data.seat_ids
            ],
            price_per_seat=ticket_info.price_per_seat if ticket_info else None,
            seat_type=ticket_info.seat_type if ticket_info else None,
        )


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        payload: Any = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    detail = payload.get('detail') or payload.get('message')
    return detail if isinstance(detail, str) else None


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    detail = _error_detail(response)
    raise SeatLockError(detail or f'HTTP error! status: {response.status_code}')


def _parse(schema: type[_SchemaT], response: httpx.Response) -> _SchemaT:
    try:
        return schema.model_validate_json(response.content)
    except ValidationError as e:
        raise SeatLockError(
            f'Unexpected ticket service response: {e.error_count()} invalid fields'
        ) from e
