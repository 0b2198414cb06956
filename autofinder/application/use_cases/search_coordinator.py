"""Search coordinator use case: filters, pagination, cache and observable state."""

import dataclasses
from typing import Any, Awaitable, Callable, Optional

from autofinder.application.dtos.car import CarSummary, PriceAnalysis, ResultPage
from autofinder.application.dtos.statistics import CarStatistics
from autofinder.application.observable import Observable, Unsubscribe
from autofinder.application.ports.cache_store import CacheStore
from autofinder.application.ports.catalog_transport import CatalogTransport
from autofinder.application.ports.event_sink import EventKind, EventSink
from autofinder.application.use_cases.car_statistics import derive_statistics
from autofinder.application.use_cases.recent_query_log import RecentQueryLog
from autofinder.domain.entities.coordinator_state import CoordinatorState
from autofinder.domain.errors import CatalogError
from autofinder.domain.value_objects.filter_set import CARS_CACHE_PREFIX, FilterSet
from autofinder.infrastructure.logging.logger import logger

CAR_DETAIL_CACHE_PREFIX = "car_detail_"
SIMILAR_CARS_CACHE_PREFIX = "similar_cars_"
POPULAR_CARS_CACHE_PREFIX = "popular_cars_"
PRICE_ANALYSIS_CACHE_PREFIX = "price_analysis_"

# Key families dropped by refresh().
CACHE_PREFIXES = (
    CARS_CACHE_PREFIX,
    CAR_DETAIL_CACHE_PREFIX,
    SIMILAR_CARS_CACHE_PREFIX,
    POPULAR_CARS_CACHE_PREFIX,
    PRICE_ANALYSIS_CACHE_PREFIX,
)


class SearchCoordinator:
    """
    Owns the search state of one client and keeps it consistent.

    Responsibilities:
    - Reset pagination when the filters change, append when paginating
    - Serve non-append page loads from the cache when possible
    - Record transport failures in state instead of raising them
    - Push a state snapshot to subscribers after every mutation

    All public operations are meant to be awaited from a single event loop.
    Only ``load_more`` is guarded against overlapping fetches; overlapping
    ``load`` calls race, and with ``discard_stale_responses`` the older
    response is dropped when it arrives.
    """

    def __init__(
        self,
        transport: CatalogTransport,
        cache: CacheStore,
        query_log: RecentQueryLog,
        event_sink: Optional[EventSink] = None,
        logger: Optional[Callable[..., None]] = None,
        page_size: int = 20,
        default_ttl_seconds: int = 300,
        short_ttl_seconds: int = 60,
        long_ttl_seconds: int = 1800,
        discard_stale_responses: bool = True,
    ) -> None:
        """
        Initialize search coordinator.

        Args:
            transport: Catalog API transport
            cache: Cache store shared by page loads and lookups
            query_log: Recent query log fed by ``search``
            event_sink: Optional telemetry sink
            logger: Optional logger function (component, **kwargs)
            page_size: Page size of fresh filter sets
            default_ttl_seconds: Expiration of cached result pages
            short_ttl_seconds: Expiration of cached popular and similar cars
            long_ttl_seconds: Expiration of cached details and price analyses
            discard_stale_responses: Drop responses of superseded fetches
        """
        self._transport = transport
        self._cache = cache
        self._query_log = query_log
        self._event_sink = event_sink
        self._logger = logger
        self._page_size = page_size
        self._default_ttl_seconds = default_ttl_seconds
        self._short_ttl_seconds = short_ttl_seconds
        self._long_ttl_seconds = long_ttl_seconds
        self._discard_stale_responses = discard_stale_responses

        self._state = CoordinatorState(active_filters=FilterSet(size=page_size))
        self._loading_epoch = 0
        self._observable: Observable[CoordinatorState] = Observable("search_coordinator")

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> CoordinatorState:
        """Snapshot of the current state."""
        return self._state.snapshot()

    def snapshot(self) -> CoordinatorState:
        """Snapshot of the current state."""
        return self._state.snapshot()

    def subscribe(self, listener: Callable[[CoordinatorState], None]) -> Unsubscribe:
        """
        Register a listener called with a state snapshot after every mutation.

        Args:
            listener: Callable receiving a CoordinatorState snapshot

        Returns:
            Unsubscribe callable
        """
        return self._observable.subscribe(listener)

    @property
    def recent_queries(self) -> RecentQueryLog:
        """Recent query log fed by ``search``."""
        return self._query_log

    @property
    def statistics(self) -> CarStatistics:
        """Statistics over the loaded results, recomputed on every access."""
        return derive_statistics(self._state.results, self._state.total_elements)

    # ------------------------------------------------------------------
    # Search and pagination
    # ------------------------------------------------------------------

    async def load(self, filters: FilterSet) -> None:
        """
        Load the first page for the filters, or reload the current page.

        Filters that differ from the active ones (page ignored) reset
        pagination and clear the results before fetching.

        Args:
            filters: Filter set to load

        Raises:
            FilterValidationError: If filter parameters are invalid
        """
        filters.validate()
        state = self._state

        if filters.search_identity() != state.active_filters.search_identity():
            state.active_filters = filters
            state.current_page = 0
            state.results = []
            self._notify()

        state.active_filters = state.active_filters.with_page(state.current_page)
        await self._fetch(state.active_filters, append=False)

    async def load_more(self) -> None:
        """Fetch and append the next page. No-op at the end or while loading."""
        state = self._state
        if not state.has_more_pages or state.is_loading:
            return

        state.current_page += 1
        state.active_filters = state.active_filters.with_page(state.current_page)
        await self._fetch(state.active_filters, append=True)

    async def search(self, query: str) -> None:
        """
        Search by model text, recording the query in the recent query log.

        Every other filter is reset. Blank queries are ignored.

        Args:
            query: Free-text model query
        """
        trimmed = query.strip()
        if not trimmed:
            return

        await self._query_log.add(trimmed, result_count=len(self._state.results))
        await self.load(FilterSet(model=trimmed, size=self._page_size))

    async def refresh(self) -> None:
        """Drop every cached catalog entry and reload the first page."""
        for prefix in CACHE_PREFIXES:
            await self._cache_remove_prefix(prefix)

        self._state.current_page = 0
        await self.load(self._state.active_filters)

    async def apply_filters(self, filters: FilterSet) -> None:
        """Load the given filters."""
        await self.load(filters)

    async def reset_filters(self) -> None:
        """Load with every filter cleared."""
        await self.load(self._state.active_filters.reset())

    async def filter_by_brand(self, brand: str) -> None:
        """Narrow the active filters by model text."""
        await self.load(dataclasses.replace(self._state.active_filters, model=brand))

    async def filter_by_price_range(
        self, min_price: Optional[int], max_price: Optional[int]
    ) -> None:
        """Replace the price bounds of the active filters."""
        filters = dataclasses.replace(
            self._state.active_filters, min_price=min_price, max_price=max_price
        )
        await self.load(filters)

    async def filter_by_fuel_type(self, fuel: str) -> None:
        """Replace the fuel type of the active filters."""
        await self.load(dataclasses.replace(self._state.active_filters, fuel=fuel))

    async def filter_by_region(self, region: str) -> None:
        """Replace the region of the active filters."""
        await self.load(dataclasses.replace(self._state.active_filters, region=region))

    def clear_error(self) -> None:
        """Clear the last recorded failure."""
        self._state.clear_error()
        self._notify()

    # ------------------------------------------------------------------
    # Read-through lookups
    # ------------------------------------------------------------------

    async def get_detail(self, car_id: int) -> Optional[CarSummary]:
        """
        Get a car, from the cache when possible.

        Args:
            car_id: Car identifier

        Returns:
            Car summary, or None if the transport failed
        """
        result = await self._read_through(
            f"{CAR_DETAIL_CACHE_PREFIX}{car_id}",
            CarSummary,
            lambda: self._transport.fetch_detail(car_id),
            self._long_ttl_seconds,
        )
        if result is not None and not isinstance(result, _Cached):
            self._record_event(EventKind.DETAIL_VIEW, subject_id=car_id)
        return _unwrap(result)

    async def get_similar(self, car_id: int, limit: int = 5) -> Optional[list[CarSummary]]:
        """
        Get cars similar to the given one.

        Args:
            car_id: Reference car identifier
            limit: Maximum number of cars

        Returns:
            List of cars, or None if the transport failed
        """
        return _unwrap(
            await self._read_through(
                f"{SIMILAR_CARS_CACHE_PREFIX}{car_id}_{limit}",
                list[CarSummary],
                lambda: self._transport.fetch_similar(car_id, limit),
                self._short_ttl_seconds,
            )
        )

    async def get_popular(self, limit: int = 20) -> Optional[list[CarSummary]]:
        """
        Get the first cars of an unfiltered search.

        Args:
            limit: Number of cars

        Returns:
            List of cars, or None if the transport failed
        """
        return _unwrap(
            await self._read_through(
                f"{POPULAR_CARS_CACHE_PREFIX}{limit}",
                list[CarSummary],
                lambda: self._transport.fetch_popular(limit),
                self._short_ttl_seconds,
            )
        )

    async def get_price_analysis(self, model: str) -> Optional[list[PriceAnalysis]]:
        """
        Get price statistics per model year.

        Args:
            model: Model text

        Returns:
            List of price analysis rows, or None if the transport failed
        """
        return _unwrap(
            await self._read_through(
                f"{PRICE_ANALYSIS_CACHE_PREFIX}{model}",
                list[PriceAnalysis],
                lambda: self._transport.fetch_price_analysis(model),
                self._long_ttl_seconds,
            )
        )

    # ------------------------------------------------------------------
    # Local mutations
    # ------------------------------------------------------------------

    def find(self, car_id: int) -> Optional[CarSummary]:
        """Find a loaded car by id."""
        for car in self._state.results:
            if car.id == car_id:
                return car
        return None

    def remove(self, car_id: int) -> bool:
        """
        Remove every loaded car with the id.

        Returns:
            True if at least one car was removed
        """
        remaining = [car for car in self._state.results if car.id != car_id]
        if len(remaining) == len(self._state.results):
            return False
        self._state.results = remaining
        self._notify()
        return True

    def replace(self, updated_car: CarSummary) -> bool:
        """
        Replace the first loaded car sharing the updated car's id.

        Returns:
            True if a car was replaced
        """
        for index, car in enumerate(self._state.results):
            if car.id == updated_car.id:
                results = list(self._state.results)
                results[index] = updated_car
                self._state.results = results
                self._notify()
                return True
        return False

    async def close(self) -> None:
        """Flush telemetry and release the transport and cache connections."""
        collaborators = [self._event_sink, self._transport, self._cache]
        for collaborator in collaborators:
            if collaborator is None:
                continue
            try:
                await collaborator.close()
            except Exception as e:
                logger.warning(f"Error closing {type(collaborator).__name__}: {str(e)}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch(self, filters: FilterSet, append: bool) -> None:
        """
        Fetch one page and merge it into the state.

        Args:
            filters: Filter set stamped with the page to fetch
            append: Whether to extend instead of replace the results
        """
        state = self._state
        cache_key = filters.cache_key()
        state.epoch += 1
        epoch = state.epoch

        if not append:
            cached = await self._cache_get(cache_key, ResultPage)
            if cached is not None:
                if self._is_stale(epoch):
                    return
                state.merge_page(cached, append=False)
                self._log(
                    "catalog",
                    epoch=epoch,
                    cache_key=cache_key,
                    page=filters.page,
                    append=append,
                    results_count=len(cached.items),
                    source="cache",
                )
                self._notify()
                self._record_search(cached)
                return

        state.is_loading = True
        state.clear_error()
        self._loading_epoch = epoch
        self._notify()

        try:
            page = await self._transport.fetch_page(filters)
        except CatalogError as e:
            if self._finish_if_stale(epoch):
                return
            state.is_loading = False
            state.record_error(e)
            self._log(
                "catalog",
                epoch=epoch,
                cache_key=cache_key,
                page=filters.page,
                append=append,
                error_kind=e.kind.value,
            )
            self._notify()
            return
        except BaseException:
            self._release_loading(epoch)
            raise

        if self._finish_if_stale(epoch):
            return

        state.merge_page(page, append)
        state.is_loading = False
        self._log(
            "catalog",
            epoch=epoch,
            cache_key=cache_key,
            page=filters.page,
            append=append,
            results_count=len(page.items),
            source="network",
        )
        self._notify()
        self._record_search(page)

        if not append:
            await self._cache_set(cache_key, page, self._default_ttl_seconds)

    def _is_stale(self, epoch: int) -> bool:
        """Check if a newer fetch was issued after the given epoch."""
        return self._discard_stale_responses and epoch != self._state.epoch

    def _finish_if_stale(self, epoch: int) -> bool:
        """
        Drop a superseded network completion.

        The loading flag is released only if no newer network fetch owns it.

        Returns:
            True if the completion was dropped
        """
        if not self._is_stale(epoch):
            return False
        self._log("catalog", epoch=epoch, latest_epoch=self._state.epoch, discarded=True)
        self._release_loading(epoch)
        return True

    def _release_loading(self, epoch: int) -> None:
        """Clear the loading flag if the fetch of this epoch still owns it."""
        if self._loading_epoch == epoch and self._state.is_loading:
            self._state.is_loading = False
            self._notify()

    async def _read_through(
        self,
        key: str,
        value_type: Any,
        fetch: Callable[[], Awaitable[Any]],
        ttl_seconds: int,
    ) -> Any:
        """
        Read a value from the cache, falling back to the transport.

        Returns:
            ``_Cached(value)`` on a hit, the fetched value on a miss, or None
            when the transport failed (the failure is recorded in state)
        """
        cached = await self._cache_get(key, value_type)
        if cached is not None:
            return _Cached(cached)

        try:
            value = await fetch()
        except CatalogError as e:
            self._state.record_error(e)
            self._log("lookup", cache_key=key, error_kind=e.kind.value)
            self._notify()
            return None

        await self._cache_set(key, value, ttl_seconds)
        return value

    async def _cache_get(self, key: str, value_type: Any) -> Optional[Any]:
        try:
            value = await self._cache.get(key, value_type)
        except Exception as e:
            logger.warning(f"Error reading cache key {key}: {str(e)}")
            return None
        self._log("cache", cache_key=key, cache_hit=value is not None)
        return value

    async def _cache_set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self._cache.set(key, value, ttl_seconds)
        except Exception as e:
            logger.warning(f"Error writing cache key {key}: {str(e)}")

    async def _cache_remove_prefix(self, prefix: str) -> None:
        try:
            await self._cache.remove_all_matching_prefix(prefix)
        except Exception as e:
            logger.warning(f"Error invalidating cache prefix {prefix}: {str(e)}")

    def _record_search(self, page: ResultPage) -> None:
        self._record_event(EventKind.SEARCH, note=f"{len(page.items)} results")

    def _record_event(
        self,
        event_kind: EventKind,
        subject_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        if self._event_sink is None:
            return
        try:
            self._event_sink.record(event_kind, subject_id=subject_id, note=note)
        except Exception as e:
            logger.warning(f"Error recording {event_kind.value} event: {str(e)}")

    def _notify(self) -> None:
        self._observable.notify(self._state.snapshot())

    def _log(self, component: str, **kwargs: Any) -> None:
        """Log event if logger is available."""
        if self._logger:
            self._logger(component, **kwargs)


class _Cached:
    """Marks a value served from the cache."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value


def _unwrap(result: Any) -> Any:
    return result.value if isinstance(result, _Cached) else result
