"""Coordinator state entity."""

from dataclasses import dataclass, field, replace
from typing import Optional

from autofinder.application.dtos.car import CarSummary, ResultPage
from autofinder.domain.errors import CatalogError, ErrorKind
from autofinder.domain.value_objects.filter_set import FilterSet


@dataclass
class CoordinatorState:
    """Single source of truth read by coordinator observers."""

    results: list[CarSummary] = field(default_factory=list)
    current_page: int = 0
    has_more_pages: bool = True
    total_elements: int = 0
    is_loading: bool = False
    last_error: Optional[ErrorKind] = None
    last_error_message: Optional[str] = None
    active_filters: FilterSet = field(default_factory=FilterSet)
    epoch: int = 0

    def snapshot(self) -> "CoordinatorState":
        """
        Copy the state so readers cannot mutate the live result list.

        Returns:
            Independent copy of this state
        """
        return replace(self, results=list(self.results))

    def merge_page(self, page: ResultPage, append: bool) -> None:
        """
        Merge a result page into the state.

        Append extends the results without deduplication; replace swaps them.

        Args:
            page: Page received from the transport or the cache
            append: Whether to extend instead of replace
        """
        if append:
            self.results = self.results + list(page.items)
        else:
            self.results = list(page.items)
        self.has_more_pages = not page.is_last_page
        self.total_elements = page.total_count

    def record_error(self, error: CatalogError) -> None:
        """Record a catalog failure."""
        self.last_error = error.kind
        self.last_error_message = error.message

    def clear_error(self) -> None:
        """Clear the last recorded failure."""
        self.last_error = None
        self.last_error_message = None
