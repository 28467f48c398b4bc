"""Wire schemas of the ticket service's ticket-locking endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SeatIdSchema(BaseModel):
    section: str
    row_id: int
    col_id: int


class LockSeatsRequestSchema(BaseModel):
    event_id: int
    seat_ids: List[SeatIdSchema]
    bulk_ticket_id: str


class LockSeatsResponseSchema(BaseModel):
    model_config = ConfigDict(extra='ignore')

    success: Optional[bool] = None
    message: Optional[str] = None
    order_id: Optional[str] = None
    client_secret: Optional[str] = Field(default=None, repr=False)
    payment_intent_id: Optional[str] = None
    total_amount: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None
    expires_at: Optional[datetime] = None
    expires_in_seconds: Optional[int] = None
    locked_seats: List[str] = Field(default_factory=list)


class BulkTicketInfoSchema(BaseModel):
    bulk_ticket_id: int
    price_per_seat: Decimal
    seat_type: str


class LockedSeatsResponseSchema(BaseModel):
    model_config = ConfigDict(extra='ignore')

    order_id: str
    user_id: Optional[str] = None
    seat_ids: List[SeatIdSchema] = Field(default_factory=list)
    event_id: int
    status: str
    expires_at: datetime
    remaining_seconds: int
    bulk_ticket_info: Optional[BulkTicketInfoSchema] = None
