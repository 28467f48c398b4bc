"""
Checkout runtime lifespan: startup and shutdown of everything the checkout
screen needs (tracing, tab storage, background task group, HTTP client).

Usage:
    async with lifespan() as container:
        view_model = container.checkout_view_model()
        view_model.mount()
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from dependency_injector import providers

from src.platform.config.core_setting import settings
from src.platform.config.di import Container, container
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.platform.state.kvrocks_client import kvrocks_client


@asynccontextmanager
async def lifespan(app_container: Container = container) -> AsyncIterator[Container]:
    Logger.base.info('🚀 [Checkout] Starting up...')

    tracing = TracingConfig(
        service_name=settings.SERVICE_NAME, otlp_endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT
    )
    tracing.setup()
    tracing.instrument_httpx()
    Logger.base.info('📊 [Checkout] OpenTelemetry tracing configured')

    use_kvrocks = app_container.config_service().CHECKOUT_STORAGE_BACKEND == 'kvrocks'
    if use_kvrocks:
        tracing.instrument_redis()
        kvrocks_client.initialize()
        Logger.base.info('📡 [Checkout] Kvrocks initialized')

    try:
        # Countdown ticks run in this task group
        async with anyio.create_task_group() as tg:
            app_container.task_group.override(providers.Object(tg))
            Logger.base.info('✅ [Checkout] Ready')

            yield app_container

            Logger.base.info('🛑 [Checkout] Shutting down...')
            tg.cancel_scope.cancel()
    finally:
        app_container.task_group.reset_override()

        await app_container.http_client().aclose()
        Logger.base.info('🌐 [Checkout] HTTP client closed')

        if use_kvrocks:
            kvrocks_client.disconnect()
            Logger.base.info('📡 [Checkout] Kvrocks disconnected')

        tracing.shutdown()
        app_container.reset_singletons()
        Logger.base.info('👋 [Checkout] Shutdown complete')
