"""HTTP routes."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from autofinder.adapters.inbound.http.schemas import (
    CoordinatorStateResponse,
    FilterSetSchema,
    RemoveRecentQueriesRequest,
    SearchQueryRequest,
)
from autofinder.application.dtos.car import CarSummary, PriceAnalysis
from autofinder.application.dtos.recent_query import RecentQuery
from autofinder.application.dtos.statistics import CarStatistics
from autofinder.application.use_cases.search_coordinator import SearchCoordinator
from autofinder.domain.errors import FilterValidationError
from autofinder.infrastructure.logging.logger import log_event

router = APIRouter()


def get_search_coordinator(request: Request) -> SearchCoordinator:
    """
    Resolve the coordinator owned by the application.

    Args:
        request: FastAPI request object

    Returns:
        SearchCoordinator stored on the app state
    """
    return request.app.state.search_coordinator


def _state_response(coordinator: SearchCoordinator) -> CoordinatorStateResponse:
    return CoordinatorStateResponse.from_state(coordinator.snapshot())


def _lookup_failed(coordinator: SearchCoordinator) -> HTTPException:
    """Build the error raised when a read-through lookup returned nothing."""
    state = coordinator.snapshot()
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "error": state.last_error.value if state.last_error else None,
            "message": state.last_error_message,
        },
    )


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.get("/search/state", response_model=CoordinatorStateResponse)
async def get_state(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Return the current coordinator state."""
    return _state_response(coordinator)


@router.post("/search/load", response_model=CoordinatorStateResponse)
async def load(
    filters: FilterSetSchema,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """
    Load the first page for the given filters.

    Args:
        filters: Filter set payload

    Returns:
        Coordinator state after the load
    """
    try:
        await coordinator.load(filters.to_filter_set())
    except FilterValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.to_dict()
        ) from e

    log_event(component="http", endpoint="/search/load", filters=filters.model_dump())
    return _state_response(coordinator)


@router.post("/search/query", response_model=CoordinatorStateResponse)
async def search(
    request: SearchQueryRequest,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Search by model text."""
    await coordinator.search(request.query)
    log_event(component="http", endpoint="/search/query", query_length=len(request.query))
    return _state_response(coordinator)


@router.post("/search/more", response_model=CoordinatorStateResponse)
async def load_more(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Append the next page."""
    await coordinator.load_more()
    return _state_response(coordinator)


@router.post("/search/refresh", response_model=CoordinatorStateResponse)
async def refresh(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Drop cached catalog data and reload the first page."""
    await coordinator.refresh()
    return _state_response(coordinator)


@router.post("/search/reset", response_model=CoordinatorStateResponse)
async def reset_filters(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Clear every filter and reload."""
    await coordinator.reset_filters()
    return _state_response(coordinator)


@router.delete("/search/error", response_model=CoordinatorStateResponse)
async def clear_error(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Clear the last recorded failure."""
    coordinator.clear_error()
    return _state_response(coordinator)


@router.get("/search/statistics", response_model=CarStatistics)
async def get_statistics(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CarStatistics:
    """Return statistics over the loaded results."""
    return coordinator.statistics


@router.get("/search/results/{car_id}", response_model=CarSummary)
async def find_result(
    car_id: int,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CarSummary:
    """Return a loaded car."""
    car = coordinator.find(car_id)
    if car is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Car not loaded")
    return car


@router.put("/search/results/{car_id}", response_model=CoordinatorStateResponse)
async def replace_result(
    car_id: int,
    car: CarSummary,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Replace a loaded car with an updated copy."""
    if car.id != car_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Path id and body id differ",
        )
    if not coordinator.replace(car):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Car not loaded")
    return _state_response(coordinator)


@router.delete("/search/results/{car_id}", response_model=CoordinatorStateResponse)
async def remove_result(
    car_id: int,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CoordinatorStateResponse:
    """Remove a loaded car."""
    if not coordinator.remove(car_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Car not loaded")
    return _state_response(coordinator)


@router.get("/cars/popular", response_model=list[CarSummary])
async def get_popular(
    limit: int = 20,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> list[CarSummary]:
    """Return popular cars."""
    cars = await coordinator.get_popular(limit)
    if cars is None:
        raise _lookup_failed(coordinator)
    return cars


@router.get("/cars/{car_id}", response_model=CarSummary)
async def get_detail(
    car_id: int,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> CarSummary:
    """Return a car."""
    car = await coordinator.get_detail(car_id)
    if car is None:
        raise _lookup_failed(coordinator)
    return car


@router.get("/cars/{car_id}/similar", response_model=list[CarSummary])
async def get_similar(
    car_id: int,
    limit: int = 5,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> list[CarSummary]:
    """Return cars similar to the given one."""
    cars = await coordinator.get_similar(car_id, limit)
    if cars is None:
        raise _lookup_failed(coordinator)
    return cars


@router.get("/analytics/price-by-year/{model}", response_model=list[PriceAnalysis])
async def get_price_analysis(
    model: str,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> list[PriceAnalysis]:
    """Return price statistics per model year."""
    analysis = await coordinator.get_price_analysis(model)
    if analysis is None:
        raise _lookup_failed(coordinator)
    return analysis


@router.get("/recent-queries", response_model=list[RecentQuery])
async def list_recent_queries(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> list[RecentQuery]:
    """Return recent queries, most recent first."""
    return coordinator.recent_queries.entries


@router.delete("/recent-queries", response_model=list[RecentQuery])
async def clear_recent_queries(
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> list[RecentQuery]:
    """Remove every recent query."""
    await coordinator.recent_queries.clear()
    return coordinator.recent_queries.entries


@router.post("/recent-queries/remove", response_model=list[RecentQuery])
async def remove_recent_queries(
    request: RemoveRecentQueriesRequest,
    coordinator: SearchCoordinator = Depends(get_search_coordinator),
) -> list[RecentQuery]:
    """Remove recent queries by position."""
    await coordinator.recent_queries.remove_at(request.indices)
    return coordinator.recent_queries.entries
