"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/providers/selector.html
"""

from dependency_injector import containers, providers
import httpx

from src.platform.config.core_setting import Settings
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.checkout.app.command.lock_seats_use_case import LockSeatsUseCase
from src.service.checkout.app.command.payment_confirmer import PaymentConfirmer
from src.service.checkout.app.countdown_controller import CountdownController
from src.service.checkout.app.query.get_locked_seats_use_case import GetLockedSeatsUseCase
from src.service.checkout.app.reservation_store import ReservationStore
from src.service.checkout.driven_adapter.payment.stripe_payment_gateway import (
    StripePaymentGateway,
)
from src.service.checkout.driven_adapter.seat_lock.seat_lock_http_gateway import (
    SeatLockHttpGateway,
    anonymous_id_token,
)
from src.service.checkout.driven_adapter.storage.in_memory_session_storage import (
    InMemorySessionStorage,
)
from src.service.checkout.driven_adapter.storage.kvrocks_session_storage import (
    KvrocksSessionStorage,
)
from src.service.checkout.driven_adapter.timer.anyio_tick_scheduler import AnyioTickScheduler
from src.service.checkout.driving_adapter.checkout_view_model import CheckoutViewModel


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Background task group (set by bootstrap lifespan)
    # Countdown ticks run as tasks of this group
    task_group = providers.Object(None)

    # Browser tab the checkout belongs to (overridden per tab)
    tab_id = providers.Object('default')

    # Identity token source for the seat-lock service (overridden after sign-in)
    id_token_provider = providers.Object(anonymous_id_token)

    # Tab storage
    memory_tab_data = providers.Singleton(dict)
    kvrocks = providers.Callable(kvrocks_client.get_client)
    session_storage = providers.Selector(
        config_service.provided.CHECKOUT_STORAGE_BACKEND,
        memory=providers.Factory(InMemorySessionStorage, tab_id=tab_id, data=memory_tab_data),
        kvrocks=providers.Factory(
            KvrocksSessionStorage,
            client=kvrocks,
            tab_id=tab_id,
            ttl_seconds=config_service.provided.CHECKOUT_SESSION_TTL_SECONDS,
            key_prefix=config_service.provided.KVROCKS_KEY_PREFIX,
        ),
    )
    reservation_store = providers.Factory(
        ReservationStore,
        storage=session_storage,
        key=config_service.provided.CHECKOUT_STORAGE_KEY,
        default_ttl_seconds=config_service.provided.RESERVATION_DEFAULT_TTL_SECONDS,
    )

    # External gateways
    http_client = providers.Singleton(
        httpx.AsyncClient,
        base_url=config_service.provided.TICKET_API_BASE_URL,
        timeout=config_service.provided.HTTP_TIMEOUT_SECONDS,
    )
    seat_lock_gateway = providers.Singleton(
        SeatLockHttpGateway,
        client=http_client,
        id_token_provider=id_token_provider,
    )
    payment_gateway = providers.Singleton(
        StripePaymentGateway,
        api_key=config_service.provided.STRIPE_SECRET_KEY.get_secret_value.call(),
    )

    # Countdown (one per checkout screen)
    tick_scheduler = providers.Factory(AnyioTickScheduler, task_group=task_group)
    countdown_controller = providers.Factory(
        CountdownController,
        tick_scheduler=tick_scheduler,
        tick_interval=config_service.provided.COUNTDOWN_TICK_INTERVAL_SECONDS,
        urgent_threshold_seconds=config_service.provided.COUNTDOWN_URGENT_THRESHOLD_SECONDS,
    )

    # Use cases
    payment_confirmer = providers.Factory(
        PaymentConfirmer,
        payment_gateway=payment_gateway,
        reservation_store=reservation_store,
    )
    lock_seats_use_case = providers.Factory(
        LockSeatsUseCase,
        seat_lock_gateway=seat_lock_gateway,
        reservation_store=reservation_store,
        default_ttl_seconds=config_service.provided.RESERVATION_DEFAULT_TTL_SECONDS,
    )
    get_locked_seats_use_case = providers.Factory(
        GetLockedSeatsUseCase,
        seat_lock_gateway=seat_lock_gateway,
    )

    # Driving adapter
    checkout_view_model = providers.Factory(
        CheckoutViewModel,
        reservation_store=reservation_store,
        countdown_controller=countdown_controller,
        payment_confirmer=payment_confirmer,
        currency=config_service.provided.CHECKOUT_CURRENCY,
    )


container = Container()