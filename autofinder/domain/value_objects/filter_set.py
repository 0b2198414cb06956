"""Filter set value object."""

import hashlib
import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Optional

from autofinder.domain.errors import FilterValidationError

CARS_CACHE_PREFIX = "cars_"
MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class FilterSet:
    """Query parameters defining a catalog search."""

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

    def search_identity(self) -> tuple:
        """
        Identity used to decide whether a load starts a new search.

        Returns:
            Tuple of every field except ``page``
        """
        return tuple(getattr(self, f.name) for f in fields(self) if f.name != "page")

    def cache_key(self) -> str:
        """
        Deterministic cache key over all fields, ``page`` included.

        Returns:
            Cache key string prefixed with ``cars_``
        """
        canonical = json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))
        digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
        return f"{CARS_CACHE_PREFIX}{digest}"

    def with_page(self, page: int) -> "FilterSet":
        """Return a copy stamped with the given page index."""
        return replace(self, page=page)

    def reset(self) -> "FilterSet":
        """Return a copy with every filter cleared, keeping the page size."""
        return FilterSet(size=self.size)

    @property
    def has_active_filters(self) -> bool:
        """Check if any filter besides paging is set."""
        return any(
            value is not None
            for value in (
                self.model,
                self.min_price,
                self.max_price,
                self.min_mileage,
                self.max_mileage,
                self.fuel,
                self.region,
                self.year,
            )
        )

    def to_query_params(self) -> dict[str, Any]:
        """
        Build catalog API query parameters.

        Empty text filters are dropped; ``page`` and ``size`` are always sent.

        Returns:
            Dictionary of camelCase query parameters
        """
        params: dict[str, Any] = {}
        if self.model:
            params["model"] = self.model
        if self.min_price is not None:
            params["minPrice"] = self.min_price
        if self.max_price is not None:
            params["maxPrice"] = self.max_price
        if self.min_mileage is not None:
            params["minMileage"] = self.min_mileage
        if self.max_mileage is not None:
            params["maxMileage"] = self.max_mileage
        if self.fuel:
            params["fuel"] = self.fuel
        if self.region:
            params["region"] = self.region
        if self.year:
            params["year"] = self.year
        params["page"] = self.page
        params["size"] = self.size
        return params

    def validate(self) -> None:
        """
        Validate filter parameters.

        Raises:
            FilterValidationError: If filter parameters are invalid
        """
        if self.page < 0:
            raise FilterValidationError("page must be >= 0", field="page")
        if self.size <= 0 or self.size > MAX_PAGE_SIZE:
            raise FilterValidationError(
                f"size must be between 1 and {MAX_PAGE_SIZE}", field="size"
            )
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise FilterValidationError("min_price cannot be greater than max_price")
        if (
            self.min_mileage is not None
            and self.max_mileage is not None
            and self.min_mileage > self.max_mileage
        ):
            raise FilterValidationError("min_mileage cannot be greater than max_mileage")
