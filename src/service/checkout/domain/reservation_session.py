from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError


DEFAULT_RESERVATION_TTL_SECONDS = 300


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Naive timestamps from the gateway are UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def parse_expires_at(value: str) -> datetime:
    """
    Parse an ISO-8601 expiry instant.

    Raises:
        ValueError: When the value is not a valid ISO-8601 timestamp
    """
    return ensure_aware(datetime.fromisoformat(value))


@attrs.frozen
class ReservationSession:
    """
    The one active checkout session of a tab.

    Immutable: the store only ever replaces or clears it as a whole.
    `client_secret` is excluded from repr so it never lands in a log line.
    """

    order_id: str
    client_secret: str = attrs.field(repr=False)
    total_amount: Decimal
    expires_at: datetime = attrs.field(converter=ensure_aware)
    seat_count: int = 0
    subtotal: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None

    @classmethod
    def create(
        cls,
        *,
        order_id: str | None,
        client_secret: str | None,
        total_amount: Decimal | None,
        seat_count: int,
        subtotal: Decimal | None = None,
        service_fee: Decimal | None = None,
        expires_at: datetime | None = None,
        expires_in_seconds: int | None = None,
        now: datetime | None = None,
        default_ttl_seconds: int = DEFAULT_RESERVATION_TTL_SECONDS,
    ) -> 'ReservationSession':
        """
        Build a session from a seat-lock response.

        Expiry precedence: server `expires_at`, then `expires_in_seconds`,
        then `default_ttl_seconds` counted from `now`.

        Raises:
            DomainError: When order id, client secret or total amount is missing
        """
        if not order_id:
            raise DomainError('Reservation is missing an order id')
        if not client_secret:
            raise DomainError('Reservation is missing a client secret')
        if total_amount is None:
            raise DomainError('Reservation is missing a total amount')
        if seat_count < 0:
            raise DomainError('seat_count must not be negative')

        created_at = now or utc_now()
        if expires_at is None:
            ttl = expires_in_seconds if expires_in_seconds is not None else default_ttl_seconds
            expires_at = created_at + timedelta(seconds=ttl)

        return cls(
            order_id=order_id,
            client_secret=client_secret,
            total_amount=total_amount,
            subtotal=subtotal,
            service_fee=service_fee,
            expires_at=expires_at,
            seat_count=seat_count,
        )

    def seconds_left(self, *, now: datetime) -> float:
        return (self.expires_at - ensure_aware(now)).total_seconds()

    def is_expired(self, *, now: datetime) -> bool:
        return self.seconds_left(now=now) <= 0
