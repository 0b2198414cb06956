"""Dependency injection factory functions."""

from autofinder.adapters.outbound.cache.in_memory_cache_store import InMemoryCacheStore
from autofinder.adapters.outbound.cache.redis_cache_store import RedisCacheStore
from autofinder.adapters.outbound.key_value_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    SqlKeyValueStore,
)
from autofinder.adapters.outbound.telemetry.http_event_sink import HttpEventSink
from autofinder.adapters.outbound.telemetry.logging_event_sink import LoggingEventSink
from autofinder.adapters.outbound.telemetry.noop_event_sink import NoOpEventSink
from autofinder.adapters.outbound.transport.http_catalog_transport import HttpCatalogTransport
from autofinder.application.ports.cache_store import CacheStore
from autofinder.application.ports.catalog_transport import CatalogTransport
from autofinder.application.ports.event_sink import EventSink
from autofinder.application.ports.key_value_store import PersistentKeyValueStore
from autofinder.application.use_cases.recent_query_log import RecentQueryLog
from autofinder.application.use_cases.search_coordinator import SearchCoordinator
from autofinder.infrastructure.config.settings import settings
from autofinder.infrastructure.logging.logger import log_event

SEARCH_HISTORY_KEY = "search_history"


def create_catalog_transport() -> CatalogTransport:
    """
    Factory function to create catalog transport.

    Returns:
        CatalogTransport instance
    """
    return HttpCatalogTransport(
        base_url=settings.catalog_api_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )


def create_cache_store() -> CacheStore:
    """
    Factory function to create cache store.

    Returns:
        CacheStore instance (Redis or in-memory)
    """
    if settings.cache_backend == "redis":
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when CACHE_BACKEND=redis")
        return RedisCacheStore(settings.redis_url)
    return InMemoryCacheStore()


def create_recent_query_store() -> PersistentKeyValueStore:
    """
    Factory function to create the store backing the recent query log.

    Returns:
        PersistentKeyValueStore instance
    """
    if settings.recent_query_store == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when RECENT_QUERY_STORE=postgres")
        return SqlKeyValueStore(SEARCH_HISTORY_KEY)
    if settings.recent_query_store == "file":
        return FileKeyValueStore(settings.recent_query_file_path)
    return InMemoryKeyValueStore()


def create_event_sink() -> EventSink:
    """
    Factory function to create telemetry event sink.

    Returns:
        EventSink instance
    """
    if settings.event_sink == "http":
        return HttpEventSink(
            base_url=settings.catalog_api_base_url,
            timeout_seconds=settings.http_timeout_seconds,
        )
    if settings.event_sink == "logging":
        return LoggingEventSink()
    return NoOpEventSink()


async def create_search_coordinator() -> SearchCoordinator:
    """
    Factory function to create SearchCoordinator with dependencies.

    Returns:
        SearchCoordinator instance with its recent query log loaded
    """
    query_log = await RecentQueryLog.open(
        create_recent_query_store(),
        max_entries=settings.recent_query_limit,
    )

    def _logger_func(component, **kwargs):
        log_event(component, **kwargs)

    log_event(
        "wiring",
        cache_backend=settings.cache_backend,
        recent_query_store=settings.recent_query_store,
        event_sink=settings.event_sink,
        discard_stale_responses=settings.discard_stale_responses,
    )

    return SearchCoordinator(
        transport=create_catalog_transport(),
        cache=create_cache_store(),
        query_log=query_log,
        event_sink=create_event_sink(),
        logger=_logger_func,
        page_size=settings.default_page_size,
        default_ttl_seconds=settings.cache_ttl_default_seconds,
        short_ttl_seconds=settings.cache_ttl_short_seconds,
        long_ttl_seconds=settings.cache_ttl_long_seconds,
        discard_stale_responses=settings.discard_stale_responses,
    )
