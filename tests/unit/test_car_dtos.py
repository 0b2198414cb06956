"""Unit tests for car DTOs and domain errors."""

from autofinder.application.dtos.car import CarSummary
from autofinder.domain.errors import (
    DecodingError,
    ErrorKind,
    FilterValidationError,
    NetworkFailure,
    ServerError,
)


def test_car_summary_parses_camel_case_payload():
    """Test that API payloads with camelCase keys are accepted."""
    car = CarSummary.model_validate(
        {
            "id": 7,
            "carType": "국산",
            "model": "기아 K5 3세대",
            "year": "21/03식",
            "mileage": 15000,
            "price": 2450,
            "fuel": "가솔린",
            "region": "서울",
            "imageUrl": "https://img.example/7.jpg",
        }
    )

    assert car.car_type == "국산"
    assert car.image_url == "https://img.example/7.jpg"


def test_brand_name_prefers_known_brands():
    """Test brand derivation from the model text."""
    assert CarSummary(id=1, model="현대 쏘나타 DN8", price=2000).brand_name == "현대"
    assert CarSummary(id=2, model="더 뉴 제네시스 G80", price=5000).brand_name == "제네시스"
    assert CarSummary(id=3, model="Tesla Model 3", price=4000).brand_name == "Tesla"


def test_model_name_drops_brand_word():
    """Test model name derivation."""
    assert CarSummary(id=1, model="현대 쏘나타 DN8", price=2000).model_name == "쏘나타 DN8"
    assert CarSummary(id=2, model="모닝", price=500).model_name == "모닝"


def test_price_category_buckets():
    """Test price category labels, the on-request sentinel included."""
    labels = [
        CarSummary(id=i, model="현대 아반떼", price=price).price_category
        for i, price in enumerate([800, 1500, 2500, 4000, 6000, 9999])
    ]

    assert labels == [
        "1천만원 이하",
        "1천~2천만원",
        "2천~3천만원",
        "3천~5천만원",
        "5천만원 이상",
        "가격 문의",
    ]


def test_catalog_errors_carry_their_kind():
    """Test the error taxonomy."""
    assert NetworkFailure("offline").kind == ErrorKind.NETWORK_FAILURE
    assert DecodingError("bad json").kind == ErrorKind.DECODING_ERROR

    error = ServerError("not found", status_code=404, code="CAR_NOT_FOUND")

    assert error.kind == ErrorKind.SERVER_ERROR
    assert error.status_code == 404
    assert error.to_dict()["code"] == "SERVER_ERROR"
    assert error.to_dict()["server_code"] == "CAR_NOT_FOUND"


def test_filter_validation_error_to_dict():
    """Test structured error output."""
    error = FilterValidationError("page must be >= 0", field="page")

    assert error.to_dict() == {
        "message": "page must be >= 0",
        "code": "FILTER_VALIDATION_ERROR",
        "field": "page",
    }
