"""Recent query DTOs."""

from datetime import datetime

from autofinder.application.dtos.base import DTO


class RecentQuery(DTO):
    """One entry of the recent query log."""

    query: str
    timestamp: datetime
    result_count: int
