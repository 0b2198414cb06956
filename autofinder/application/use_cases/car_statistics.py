"""Statistics derivation over loaded results."""

from collections import Counter
from typing import Sequence

from autofinder.application.dtos.car import CarSummary
from autofinder.application.dtos.statistics import CarStatistics


def derive_statistics(results: Sequence[CarSummary], total_elements: int) -> CarStatistics:
    """
    Project the loaded results into summary statistics.

    The average excludes listings carrying the "price on request" sentinel and
    uses integer division.

    Args:
        results: Currently loaded cars
        total_elements: Total matching cars reported by the server

    Returns:
        CarStatistics DTO
    """
    prices = [car.price for car in results if car.has_known_price]
    average_price = sum(prices) // len(prices) if prices else None

    return CarStatistics(
        total_cars=total_elements,
        loaded_cars=len(results),
        average_price=average_price,
        brand_distribution=dict(Counter(car.brand_name for car in results)),
        fuel_type_distribution=dict(Counter(car.fuel for car in results)),
        region_distribution=dict(Counter(car.region for car in results)),
    )
