"""HTTP adapter schemas."""

from dataclasses import asdict
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from autofinder.application.dtos.car import CarSummary
from autofinder.domain.entities.coordinator_state import CoordinatorState
from autofinder.domain.value_objects.filter_set import FilterSet


class FilterSetSchema(BaseModel):
    """Filter set payload."""

    model: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    min_mileage: Optional[int] = None
    max_mileage: Optional[int] = None
    fuel: Optional[str] = None
    region: Optional[str] = None
    year: Optional[str] = None
    page: int = 0
    size: int = 20

    model_config = ConfigDict(
        protected_namespaces=(),
        json_schema_extra={
            "example": {
                "model": "쏘나타",
                "min_price": 1000,
                "max_price": 3000,
                "fuel": "가솔린",
                "region": "서울",
                "page": 0,
                "size": 20,
            }
        },
    )

    def to_filter_set(self) -> FilterSet:
        """Convert to the domain filter set."""
        return FilterSet(**self.model_dump())

    @classmethod
    def from_filter_set(cls, filters: FilterSet) -> "FilterSetSchema":
        """Build from the domain filter set."""
        return cls(**asdict(filters))


class SearchQueryRequest(BaseModel):
    """Free-text search payload."""

    query: str

    model_config = ConfigDict(json_schema_extra={"example": {"query": "쏘나타"}})


class RemoveRecentQueriesRequest(BaseModel):
    """Positions of recent queries to remove."""

    indices: list[int] = Field(default_factory=list)


class CoordinatorStateResponse(BaseModel):
    """Coordinator state as exposed over HTTP."""

    results: list[CarSummary]
    current_page: int
    has_more_pages: bool
    total_elements: int
    is_loading: bool
    last_error: Optional[str] = None
    last_error_message: Optional[str] = None
    active_filters: FilterSetSchema

    @classmethod
    def from_state(cls, state: CoordinatorState) -> "CoordinatorStateResponse":
        """Build from a coordinator state snapshot."""
        return cls(
            results=state.results,
            current_page=state.current_page,
            has_more_pages=state.has_more_pages,
            total_elements=state.total_elements,
            is_loading=state.is_loading,
            last_error=state.last_error.value if state.last_error else None,
            last_error_message=state.last_error_message,
            active_filters=FilterSetSchema.from_filter_set(state.active_filters),
        )
