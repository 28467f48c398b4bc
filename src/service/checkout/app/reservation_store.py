"""
Reservation Store

Single source of truth for the tab's active ReservationSession, kept in
tab-scoped storage so a reload during checkout does not drop the seat lock.
"""

from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

import orjson

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_session_storage import ISessionStorage
from src.service.checkout.domain.checkout_error import (
    MalformedReservationError,
    MissingReservationError,
)
from src.service.checkout.domain.reservation_session import (
    DEFAULT_RESERVATION_TTL_SECONDS,
    ReservationSession,
    parse_expires_at,
    utc_now,
)


CHECKOUT_STORAGE_KEY = 'checkoutData'


class ReservationStore:
    def __init__(
        self,
        *,
        storage: ISessionStorage,
        key: str = CHECKOUT_STORAGE_KEY,
        default_ttl_seconds: int = DEFAULT_RESERVATION_TTL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.storage = storage
        self.key = key
        self.default_ttl_seconds = default_ttl_seconds
        self.clock = clock

    @Logger.io
    def load(self) -> ReservationSession | None:
        """
        Read the persisted session.

        Returns:
            The session, or None when nothing is stored or the payload is malformed
        """
        try:
            raw = self._read_raw()
            if raw is None:
                Logger.base.info('🔍 [CHECKOUT] No reservation in tab storage')
                return None
            return self._deserialize(raw)
        except MalformedReservationError as e:
            # Never log the payload
            Logger.base.warning(
                f'⚠️ [CHECKOUT] Malformed reservation treated as absent: '
                f'{type(e.__cause__).__name__}'
            )
            return None

    def require(self) -> ReservationSession:
        session = self.load()
        if session is None:
            raise MissingReservationError()
        return session

    @Logger.io
    def save(self, session: ReservationSession) -> None:
        self.storage.set(self.key, self._serialize(session))

    @Logger.io
    def clear(self, *, order_id: str | None = None) -> None:
        """
        Remove the persisted session. Idempotent.

        Args:
            order_id: Only clear when the stored session belongs to this order,
                so a late result for an old attempt cannot wipe a newer lock
        """
        if order_id is not None:
            current = self.load()
            if current is not None and current.order_id != order_id:
                Logger.base.info(
                    f'⏭️ [CHECKOUT] Skip clear: stored order {current.order_id} != {order_id}'
                )
                return
        self.storage.delete(self.key)

    def discard(self, *, order_id: str | None = None) -> bool:
        """
        clear() for paths that must not fail, such as expiry and post-charge
        cleanup. A storage error is logged and the entry is left to its TTL.

        Returns:
            True when the session was cleared
        """
        try:
            self.clear(order_id=order_id)
        except Exception as e:
            Logger.base.exception(
                f'❌ [CHECKOUT] Could not clear reservation {order_id}: {type(e).__name__}'
            )
            return False
        return True

    def _read_raw(self) -> str | None:
        try:
            return self.storage.get(self.key)
        except UnicodeDecodeError as e:
            raise MalformedReservationError() from e

    @staticmethod
    def _serialize(session: ReservationSession) -> str:
        payload = {
            'order_id': session.order_id,
            'client_secret': session.client_secret,
            'total_amount': str(session.total_amount),
            'subtotal': None if session.subtotal is None else str(session.subtotal),
            'service_fee': None if session.service_fee is None else str(session.service_fee),
            'expires_at': session.expires_at.isoformat(),
            'seat_count': session.seat_count,
        }
        return orjson.dumps(payload).decode()

    def _deserialize(self, raw: str) -> ReservationSession:
        try:
            return self._decode(raw)
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise MalformedReservationError() from e

    def _decode(self, raw: str) -> ReservationSession:
        data: Any = orjson.loads(raw)
        if not isinstance(data, dict):
            raise TypeError('reservation payload must be an object')

        order_id = data['order_id']
        client_secret = data['client_secret']
        if not isinstance(order_id, str) or not order_id:
            raise ValueError('order_id')
        if not isinstance(client_secret, str) or not client_secret:
            raise ValueError('client_secret')

        expires_at_raw = data.get('expires_at')
        if expires_at_raw:
            expires_at = parse_expires_at(expires_at_raw)
        else:
            expires_at = self.clock() + timedelta(seconds=self.default_ttl_seconds)

        seat_count = data.get('seat_count', 0)
        if not isinstance(seat_count, int) or isinstance(seat_count, bool) or seat_count < 0:
            raise ValueError('seat_count')

        return ReservationSession(
            order_id=order_id,
            client_secret=client_secret,
            total_amount=_to_decimal(data['total_amount']),
            subtotal=_to_optional_decimal(data.get('subtotal')),
            service_fee=_to_optional_decimal(data.get('service_fee')),
            expires_at=expires_at,
            seat_count=seat_count,
        )


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError('amount')
    amount = Decimal(str(value))
    if not amount.is_finite():
        raise ValueError('amount')
    return amount


def _to_optional_decimal(value: Any) -> Decimal | None:
    return None if value is None else _to_decimal(value)
