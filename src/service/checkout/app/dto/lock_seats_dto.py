"""Seat lock DTOs for the lock-seats / locked-seats gateway calls."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import attrs


@attrs.frozen
class SeatId:
    section: str
    row_id: int
    col_id: int


@attrs.define
class LockSeatsRequest:
    event_id: int
    bulk_ticket_id: str
    seat_ids: List[SeatId] = attrs.field(factory=list)


@attrs.define
class LockSeatsResponse:
    order_id: Optional[str] = None
    client_secret: Optional[str] = attrs.field(default=None, repr=False)
    total_amount: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None
    expires_at: Optional[datetime] = None
    expires_in_seconds: Optional[int] = None
    payment_intent_id: Optional[str] = None
    locked_seats: List[str] = attrs.field(factory=list)
    message: Optional[str] = None


@attrs.define
class LockedSeatsResponse:
    """Server view of the user's active lock"""

    order_id: str
    event_id: int
    status: str
    expires_at: datetime
    remaining_seconds: int
    seat_ids: List[SeatId] = attrs.field(factory=list)
    price_per_seat: Optional[Decimal] = None
    seat_type: Optional[str] = None
