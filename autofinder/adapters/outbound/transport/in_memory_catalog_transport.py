"""In-memory catalog transport adapter."""

import math
from typing import Optional

from autofinder.application.dtos.car import CarSummary, PriceAnalysis, ResultPage
from autofinder.application.ports.catalog_transport import CatalogTransport
from autofinder.domain.errors import ServerError
from autofinder.domain.value_objects.filter_set import FilterSet


class InMemoryCatalogTransport(CatalogTransport):
    """
    Canonical catalog implementation for development and tests.

    - Stores cars in insertion order
    - Applies AND-semantics filtering
    - Applies paging AFTER filtering
    - Reports total_count of matching cars before paging
    """

    def __init__(self, cars: Optional[list[CarSummary]] = None) -> None:
        """
        Initialize in-memory transport.

        Args:
            cars: Catalog contents
        """
        self._cars = list(cars or [])
        self.calls: list[tuple[str, object]] = []

    async def fetch_page(self, filters: FilterSet) -> ResultPage:
        """Fetch one page of matching cars."""
        self.calls.append(("fetch_page", filters))
        matches = [car for car in self._cars if self._matches(car, filters)]

        start = filters.page * filters.size
        end = start + filters.size
        total_pages = math.ceil(len(matches) / filters.size) if matches else 0

        return ResultPage(
            items=matches[start:end],
            is_last_page=end >= len(matches),
            total_count=len(matches),
            page_number=filters.page,
            total_pages=total_pages,
        )

    async def fetch_detail(self, car_id: int) -> CarSummary:
        """Fetch a single car."""
        self.calls.append(("fetch_detail", car_id))
        for car in self._cars:
            if car.id == car_id:
                return car
        raise ServerError(f"Car with identifier '{car_id}' not found", status_code=404)

    async def fetch_similar(self, car_id: int, limit: int) -> list[CarSummary]:
        """Fetch cars of the same brand, the reference car excluded."""
        self.calls.append(("fetch_similar", car_id))
        reference = await self.fetch_detail(car_id)
        similar = [
            car
            for car in self._cars
            if car.id != car_id and car.brand_name == reference.brand_name
        ]
        return similar[:limit]

    async def fetch_price_analysis(self, model: str) -> list[PriceAnalysis]:
        """Group priced cars whose model contains the text by year."""
        self.calls.append(("fetch_price_analysis", model))
        by_year: dict[str, list[int]] = {}
        for car in self._cars:
            if model.lower() in car.model.lower() and car.has_known_price:
                by_year.setdefault(car.year, []).append(car.price)

        return [
            PriceAnalysis(
                year=year,
                min_price=min(prices),
                avg_price=sum(prices) // len(prices),
                max_price=max(prices),
                count=len(prices),
            )
            for year, prices in sorted(by_year.items())
        ]

    def _matches(self, car: CarSummary, filters: FilterSet) -> bool:
        if filters.model and filters.model.lower() not in car.model.lower():
            return False
        if filters.min_price is not None and car.price < filters.min_price:
            return False
        if filters.max_price is not None and car.price > filters.max_price:
            return False
        if filters.min_mileage is not None and (car.mileage or 0) < filters.min_mileage:
            return False
        if filters.max_mileage is not None and (car.mileage or 0) > filters.max_mileage:
            return False
        if filters.fuel and car.fuel != filters.fuel:
            return False
        if filters.region and car.region != filters.region:
            return False
        if filters.year and not car.year.startswith(filters.year):
            return False
        return True
