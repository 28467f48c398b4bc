"""Unit tests for checkout domain values: ReservationSession and CheckoutStatus"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import attrs
import pytest

from src.platform.exception.exceptions import DomainError
from src.service.checkout.domain.checkout_status import CheckoutStatus, can_transition
from src.service.checkout.domain.reservation_session import ReservationSession


@pytest.mark.unit
class TestReservationSessionCreate:
    def test_server_expiry_wins_over_relative_expiry(self, clock: Any) -> None:
        server_expiry = clock() + timedelta(seconds=42)

        session = ReservationSession.create(
            order_id='order-1',
            client_secret='pi_1_secret_abc',
            total_amount=Decimal('10'),
            seat_count=1,
            expires_at=server_expiry,
            expires_in_seconds=600,
            now=clock(),
        )

        assert session.expires_at == server_expiry

    def test_naive_server_expiry_is_utc(self, clock: Any) -> None:
        session = ReservationSession.create(
            order_id='order-1',
            client_secret='pi_1_secret_abc',
            total_amount=Decimal('10'),
            seat_count=1,
            expires_at=datetime(2025, 3, 1, 12, 1, 0),
            now=clock(),
        )

        assert session.expires_at.tzinfo == timezone.utc
        assert session.seconds_left(now=clock()) == 60

    def test_custom_default_ttl(self, clock: Any) -> None:
        session = ReservationSession.create(
            order_id='order-1',
            client_secret='pi_1_secret_abc',
            total_amount=Decimal('10'),
            seat_count=1,
            now=clock(),
            default_ttl_seconds=90,
        )

        assert session.expires_at == clock() + timedelta(seconds=90)

    def test_negative_seat_count_is_rejected(self, clock: Any) -> None:
        with pytest.raises(DomainError):
            ReservationSession.create(
                order_id='order-1',
                client_secret='pi_1_secret_abc',
                total_amount=Decimal('10'),
                seat_count=-1,
                now=clock(),
            )

    def test_session_is_immutable(self, make_session: Any) -> None:
        session = make_session()

        with pytest.raises(attrs.exceptions.FrozenInstanceError):
            session.order_id = 'other'  # type: ignore[misc]

    def test_expired_exactly_at_expiry_instant(self, make_session: Any, clock: Any) -> None:
        session = make_session(seconds_left=10)

        clock.advance(10)

        assert session.is_expired(now=clock())


@pytest.mark.unit
class TestCheckoutStatus:
    @pytest.mark.parametrize(
        'terminal', [CheckoutStatus.SUCCEEDED, CheckoutStatus.FAILED, CheckoutStatus.EXPIRED]
    )
    def test_terminal_states_never_transition(self, terminal: CheckoutStatus) -> None:
        assert terminal.is_terminal
        assert not any(can_transition(terminal, target) for target in CheckoutStatus)

    @pytest.mark.parametrize(
        ('current', 'target'),
        [
            (CheckoutStatus.IDLE, CheckoutStatus.READY),
            (CheckoutStatus.READY, CheckoutStatus.PROCESSING),
            (CheckoutStatus.PROCESSING, CheckoutStatus.READY),
            (CheckoutStatus.PROCESSING, CheckoutStatus.SUCCEEDED),
            (CheckoutStatus.PROCESSING, CheckoutStatus.AWAITING_CONFIRMATION),
            (CheckoutStatus.AWAITING_CONFIRMATION, CheckoutStatus.EXPIRED),
        ],
    )
    def test_forward_transitions_allowed(
        self, current: CheckoutStatus, target: CheckoutStatus
    ) -> None:
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        ('current', 'target'),
        [
            (CheckoutStatus.IDLE, CheckoutStatus.PROCESSING),
            (CheckoutStatus.READY, CheckoutStatus.SUCCEEDED),
            (CheckoutStatus.PROCESSING, CheckoutStatus.PROCESSING),
        ],
    )
    def test_skipping_states_is_refused(
        self, current: CheckoutStatus, target: CheckoutStatus
    ) -> None:
        assert not can_transition(current, target)
