"""Catalog transport port."""

from abc import ABC, abstractmethod

from autofinder.application.dtos.car import CarSummary, PriceAnalysis, ResultPage
from autofinder.domain.value_objects.filter_set import FilterSet


class CatalogTransport(ABC):
    """Port interface for the remote catalog API.

    Every call is single-shot: it returns one result or raises one
    ``CatalogError`` (``NetworkFailure``, ``ServerError`` or ``DecodingError``).
    """

    @abstractmethod
    async def fetch_page(self, filters: FilterSet) -> ResultPage:
        """
        Fetch one page of search results.

        Args:
            filters: Filter set, page index included

        Returns:
            Result page
        """
        pass

    @abstractmethod
    async def fetch_detail(self, car_id: int) -> CarSummary:
        """
        Fetch a single car.

        Args:
            car_id: Car identifier

        Returns:
            Car summary
        """
        pass

    @abstractmethod
    async def fetch_similar(self, car_id: int, limit: int) -> list[CarSummary]:
        """
        Fetch cars similar to the given one.

        Args:
            car_id: Reference car identifier
            limit: Maximum number of cars to return

        Returns:
            List of similar cars
        """
        pass

    @abstractmethod
    async def fetch_price_analysis(self, model: str) -> list[PriceAnalysis]:
        """
        Fetch price statistics per model year.

        Args:
            model: Model text

        Returns:
            List of price analysis rows
        """
        pass

    async def fetch_popular(self, limit: int) -> list[CarSummary]:
        """
        Fetch the first ``limit`` cars of an unfiltered search.

        Args:
            limit: Number of cars to return

        Returns:
            List of cars
        """
        page = await self.fetch_page(FilterSet(size=limit))
        return list(page.items)

    async def close(self) -> None:
        """Release network resources. Transports without any keep this no-op."""
        pass
