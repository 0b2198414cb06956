"""Statistics DTOs."""

from typing import Optional

from autofinder.application.dtos.base import DTO


class CarStatistics(DTO):
    """Read-only projection over the currently loaded results."""

    total_cars: int
    loaded_cars: int
    average_price: Optional[int] = None
    brand_distribution: dict[str, int]
    fuel_type_distribution: dict[str, int]
    region_distribution: dict[str, int]

    @property
    def formatted_average_price(self) -> str:
        """Average price formatted in 10k-won units."""
        if self.average_price is None:
            return "정보 없음"
        return f"{self.average_price:,}만원"
