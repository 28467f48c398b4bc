"""
Unit tests for ReservationStore

Covers:
1. save/load round trip keeps the authoritative amount and expiry
2. Missing and malformed payloads both read as "no reservation"
3. Missing expiry falls back to now + 300s
4. clear() is idempotent and honours the order-id guard
"""

from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal
from typing import Any
from unittest.mock import Mock

import orjson
import pytest
from redis import Redis

from src.service.checkout.app.reservation_store import CHECKOUT_STORAGE_KEY, ReservationStore
from src.service.checkout.domain.checkout_error import MissingReservationError
from src.service.checkout.domain.reservation_session import ReservationSession
from src.service.checkout.driven_adapter.storage.in_memory_session_storage import (
    InMemorySessionStorage,
)
from src.service.checkout.driven_adapter.storage.kvrocks_session_storage import (
    KvrocksSessionStorage,
)


def _payload(**overrides: Any) -> str:
    data = {
        'order_id': 'order-1',
        'client_secret': 'pi_1_secret_abc',
        'total_amount': '1500.00',
        'subtotal': '1400.00',
        'service_fee': '100.00',
        'expires_at': '2025-03-01T12:05:00+00:00',
        'seat_count': 2,
    }
    data.update(overrides)
    return orjson.dumps(data).decode()


@pytest.mark.unit
class TestReservationStoreLoad:
    def test_load_returns_none_when_nothing_stored(
        self, reservation_store: ReservationStore
    ) -> None:
        assert reservation_store.load() is None

    def test_save_then_load_returns_same_session(
        self,
        reservation_store: ReservationStore,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        # Arrange
        session = make_session()

        # Act
        reservation_store.save(session)
        loaded = reservation_store.load()

        # Assert
        assert loaded == session
        assert loaded is not None
        assert loaded.total_amount == Decimal('1500.00')

    def test_persisted_form_uses_checkout_data_key_and_string_amounts(
        self,
        reservation_store: ReservationStore,
        storage: InMemorySessionStorage,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        reservation_store.save(make_session())

        raw = storage.get(CHECKOUT_STORAGE_KEY)
        assert raw is not None
        data = orjson.loads(raw)
        assert data['order_id'] == 'order-1'
        assert data['total_amount'] == '1500.00'
        assert data['expires_at'] == '2025-03-01T12:05:00+00:00'

    def test_save_overwrites_previous_session(
        self,
        reservation_store: ReservationStore,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        reservation_store.save(make_session(order_id='order-1'))
        reservation_store.save(make_session(order_id='order-2'))

        loaded = reservation_store.load()
        assert loaded is not None
        assert loaded.order_id == 'order-2'

    def test_missing_expiry_defaults_to_300_seconds_from_load_time(
        self, reservation_store: ReservationStore, storage: InMemorySessionStorage, clock: Any
    ) -> None:
        # Arrange
        storage.set(CHECKOUT_STORAGE_KEY, _payload(expires_at=None))

        # Act
        loaded = reservation_store.load()

        # Assert
        assert loaded is not None
        assert loaded.expires_at == clock() + timedelta(seconds=300)

    def test_naive_expiry_is_read_as_utc(
        self, reservation_store: ReservationStore, storage: InMemorySessionStorage, clock: Any
    ) -> None:
        storage.set(CHECKOUT_STORAGE_KEY, _payload(expires_at='2025-03-01T12:05:00'))

        loaded = reservation_store.load()

        assert loaded is not None
        assert loaded.seconds_left(now=clock()) == 300

    def test_optional_display_amounts_may_be_absent(
        self, reservation_store: ReservationStore, storage: InMemorySessionStorage
    ) -> None:
        storage.set(CHECKOUT_STORAGE_KEY, _payload(subtotal=None, service_fee=None))

        loaded = reservation_store.load()

        assert loaded is not None
        assert loaded.subtotal is None
        assert loaded.service_fee is None

    @pytest.mark.parametrize(
        'raw',
        [
            'not json at all',
            '[1, 2, 3]',
            '"just a string"',
            _payload(order_id=None),
            _payload(order_id=''),
            _payload(client_secret=None),
            _payload(total_amount=None),
            _payload(total_amount='abc'),
            _payload(total_amount='NaN'),
            _payload(expires_at='yesterday'),
            _payload(seat_count='two'),
        ],
    )
    def test_malformed_payload_is_treated_as_absent(
        self, reservation_store: ReservationStore, storage: InMemorySessionStorage, raw: str
    ) -> None:
        storage.set(CHECKOUT_STORAGE_KEY, raw)

        assert reservation_store.load() is None

    def test_payload_without_total_amount_key_is_treated_as_absent(
        self, reservation_store: ReservationStore, storage: InMemorySessionStorage
    ) -> None:
        data = orjson.loads(_payload())
        del data['total_amount']
        storage.set(CHECKOUT_STORAGE_KEY, orjson.dumps(data).decode())

        assert reservation_store.load() is None

    @pytest.mark.parametrize(
        'redis_get',
        [
            {'return_value': b'\xff\xfe not utf8'},
            {'side_effect': UnicodeDecodeError('utf-8', b'\xff', 0, 1, 'invalid start byte')},
        ],
    )
    def test_undecodable_kvrocks_payload_is_treated_as_absent(
        self, clock: Any, redis_get: dict[str, Any]
    ) -> None:
        # Arrange - raw bytes, or a client with decode_responses=True
        client = Mock(spec=Redis)
        client.get.configure_mock(**redis_get)
        store = ReservationStore(
            storage=KvrocksSessionStorage(client=client, tab_id='tab-1', ttl_seconds=60),
            clock=clock,
        )

        # Act & Assert
        assert store.load() is None

    def test_require_raises_when_nothing_stored(
        self, reservation_store: ReservationStore
    ) -> None:
        with pytest.raises(MissingReservationError) as exc_info:
            reservation_store.require()

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == 'No payment information found. Please select seats again.'

    def test_custom_storage_key(self, storage: InMemorySessionStorage, clock: Any) -> None:
        store = ReservationStore(storage=storage, key='otherKey', clock=clock)
        storage.set('otherKey', _payload())

        loaded = store.load()

        assert loaded is not None
        assert loaded.order_id == 'order-1'


@pytest.mark.unit
class TestReservationStoreClear:
    def test_clear_removes_session(
        self,
        reservation_store: ReservationStore,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        reservation_store.save(make_session())

        reservation_store.clear()

        assert reservation_store.load() is None

    def test_clear_is_idempotent(self, reservation_store: ReservationStore) -> None:
        reservation_store.clear()
        reservation_store.clear()

        assert reservation_store.load() is None

    def test_clear_with_matching_order_id_removes_session(
        self,
        reservation_store: ReservationStore,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        reservation_store.save(make_session(order_id='order-1'))

        reservation_store.clear(order_id='order-1')

        assert reservation_store.load() is None

    def test_clear_with_other_order_id_keeps_newer_session(
        self,
        reservation_store: ReservationStore,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        # Arrange - a newer lock replaced the one being paid for
        reservation_store.save(make_session(order_id='order-2'))

        # Act - late result for the old order
        reservation_store.clear(order_id='order-1')

        # Assert
        loaded = reservation_store.load()
        assert loaded is not None
        assert loaded.order_id == 'order-2'

    def test_clear_with_order_id_removes_malformed_payload(
        self, reservation_store: ReservationStore, storage: InMemorySessionStorage
    ) -> None:
        storage.set(CHECKOUT_STORAGE_KEY, 'garbage')

        reservation_store.clear(order_id='order-1')

        assert storage.get(CHECKOUT_STORAGE_KEY) is None

    def test_discard_swallows_storage_failure_and_keeps_session(
        self,
        unreliable_storage: Any,
        clock: Any,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        # Arrange
        store = ReservationStore(storage=unreliable_storage, clock=clock)
        store.save(make_session())

        # Act
        cleared = store.discard(order_id='order-1')

        # Assert
        assert cleared is False
        assert unreliable_storage.delete_attempts == 1
        assert store.load() is not None

    def test_discard_reports_success(
        self,
        reservation_store: ReservationStore,
        make_session: Callable[..., ReservationSession],
    ) -> None:
        reservation_store.save(make_session())

        assert reservation_store.discard(order_id='order-1') is True
        assert reservation_store.load() is None

    def test_clear_still_raises_storage_failure(
        self, unreliable_storage: Any, clock: Any
    ) -> None:
        store = ReservationStore(storage=unreliable_storage, clock=clock)

        with pytest.raises(ConnectionError):
            store.clear()


@pytest.mark.unit
class TestInMemorySessionStorage:
    def test_tabs_sharing_backing_data_do_not_see_each_other(self) -> None:
        data: dict[tuple[str, str], str] = {}
        tab_one = InMemorySessionStorage(tab_id='tab-1', data=data)
        tab_two = InMemorySessionStorage(tab_id='tab-2', data=data)

        tab_one.set(CHECKOUT_STORAGE_KEY, '{}')

        assert tab_one.get(CHECKOUT_STORAGE_KEY) == '{}'
        assert tab_two.get(CHECKOUT_STORAGE_KEY) is None

    def test_same_tab_reads_back_through_new_instance(self) -> None:
        data: dict[tuple[str, str], str] = {}
        InMemorySessionStorage(tab_id='tab-1', data=data).set(CHECKOUT_STORAGE_KEY, '{}')

        assert InMemorySessionStorage(tab_id='tab-1', data=data).get(CHECKOUT_STORAGE_KEY) == '{}'

    def test_empty_tab_id_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            InMemorySessionStorage(tab_id='')
