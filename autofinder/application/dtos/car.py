"""Car DTOs."""

from typing import Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from autofinder.application.dtos.base import DTO

# Price sentinel meaning "price on request".
UNKNOWN_PRICE = 9999

KNOWN_BRANDS = ["현대", "기아", "제네시스", "르노", "쉐보레", "쌍용", "BMW", "벤츠", "아우디", "볼보"]


class CarSummary(DTO):
    """Catalog car summary. Prices are in units of 10,000 KRW."""

    id: int
    car_type: Optional[str] = None
    model: str
    year: str = ""
    mileage: Optional[int] = None
    price: int
    fuel: str = ""
    region: str = ""
    url: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1024,
                "carType": "국산",
                "model": "현대 쏘나타 DN8",
                "year": "21/03식",
                "mileage": 32000,
                "price": 2450,
                "fuel": "가솔린",
                "region": "서울",
            }
        },
    )

    @property
    def has_known_price(self) -> bool:
        """Check if the listing carries a real price."""
        return self.price != UNKNOWN_PRICE

    @property
    def brand_name(self) -> str:
        """Brand derived from the model text."""
        for brand in KNOWN_BRANDS:
            if brand in self.model:
                return brand
        parts = self.model.split()
        return parts[0] if parts else "기타"

    @property
    def model_name(self) -> str:
        """Model text without the leading brand word."""
        parts = self.model.split()
        return " ".join(parts[1:]) if len(parts) > 1 else self.model

    @property
    def price_category(self) -> str:
        """Price bucket label."""
        if not self.has_known_price or self.price < 0:
            return "가격 문의"
        if self.price < 1000:
            return "1천만원 이하"
        if self.price < 2000:
            return "1천~2천만원"
        if self.price < 3000:
            return "2천~3천만원"
        if self.price < 5000:
            return "3천~5천만원"
        return "5천만원 이상"


class ResultPage(DTO):
    """One page of catalog search results. Immutable once received."""

    items: list[CarSummary] = Field(default_factory=list)
    is_last_page: bool
    total_count: int
    page_number: int = 0
    total_pages: int = 0


class PriceAnalysis(DTO):
    """Price statistics for one model year."""

    year: str
    min_price: int
    avg_price: int
    max_price: int
    count: int
