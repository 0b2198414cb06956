"""Unit tests for HTTP catalog transport."""

import httpx
import pytest

from autofinder.adapters.outbound.transport.http_catalog_transport import HttpCatalogTransport
from autofinder.domain.errors import DecodingError, NetworkFailure, ServerError
from autofinder.domain.value_objects.filter_set import FilterSet

BASE_URL = "http://catalog.test"


def _car_json(car_id: int) -> dict:
    return {
        "id": car_id,
        "carType": "국산",
        "model": "현대 쏘나타 DN8",
        "year": "21/03식",
        "mileage": 32000,
        "price": 2450,
        "fuel": "가솔린",
        "region": "서울",
        "imageUrl": f"https://img.example/{car_id}.jpg",
    }


def _page_json(ids: list[int], total: int, last: bool, number: int = 0) -> dict:
    return {
        "content": [_car_json(car_id) for car_id in ids],
        "totalElements": total,
        "totalPages": 8,
        "last": last,
        "first": number == 0,
        "size": 20,
        "number": number,
    }


def _transport(handler) -> HttpCatalogTransport:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpCatalogTransport(base_url=BASE_URL, client=client)


@pytest.mark.asyncio
async def test_fetch_page_sends_filters_and_decodes_envelope():
    """Test the search request and the page envelope mapping."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_page_json(list(range(1, 21)), total=143, last=False))

    transport = _transport(handler)

    page = await transport.fetch_page(FilterSet(model="쏘나타", min_price=1000, page=0, size=20))

    assert requests[0].url.path == "/api/cars"
    assert requests[0].url.params["model"] == "쏘나타"
    assert requests[0].url.params["minPrice"] == "1000"
    assert requests[0].url.params["page"] == "0"
    assert requests[0].url.params["size"] == "20"
    assert len(page.items) == 20
    assert page.items[0].image_url == "https://img.example/1.jpg"
    assert page.is_last_page is False
    assert page.total_count == 143
    assert page.total_pages == 8


@pytest.mark.asyncio
async def test_fetch_detail():
    """Test the detail request."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/cars/7"
        return httpx.Response(200, json=_car_json(7))

    car = await _transport(handler).fetch_detail(7)

    assert car.id == 7
    assert car.car_type == "국산"


@pytest.mark.asyncio
async def test_fetch_similar_returns_page_content():
    """Test the similar cars request."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/cars/7/similar"
        assert request.url.params["limit"] == "3"
        return httpx.Response(200, json=_page_json([8, 9, 10], total=3, last=True))

    cars = await _transport(handler).fetch_similar(7, 3)

    assert [car.id for car in cars] == [8, 9, 10]


@pytest.mark.asyncio
async def test_fetch_price_analysis_encodes_model():
    """Test the price analysis request."""
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.raw_path.decode("ascii"))
        return httpx.Response(
            200,
            json=[
                {"year": "2020", "minPrice": 1800, "avgPrice": 2100, "maxPrice": 2500, "count": 12},
                {"year": "2021", "minPrice": 2200, "avgPrice": 2450, "maxPrice": 2900, "count": 8},
            ],
        )

    analysis = await _transport(handler).fetch_price_analysis("쏘나타 DN8")

    assert paths[0] == "/api/analytics/price-by-year/%EC%8F%98%EB%82%98%ED%83%80%20DN8"
    assert [row.year for row in analysis] == ["2020", "2021"]
    assert analysis[0].avg_price == 2100


@pytest.mark.asyncio
async def test_fetch_popular_requests_unfiltered_page():
    """Test that popular cars are the first page of an unfiltered search."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert dict(request.url.params) == {"page": "0", "size": "5"}
        return httpx.Response(200, json=_page_json([1, 2, 3, 4, 5], total=500, last=False))

    cars = await _transport(handler).fetch_popular(5)

    assert len(cars) == 5


@pytest.mark.asyncio
async def test_transport_error_maps_to_network_failure():
    """Test connection failures."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFailure):
        await _transport(handler).fetch_page(FilterSet())


@pytest.mark.asyncio
async def test_timeout_maps_to_network_failure():
    """Test timeouts."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NetworkFailure):
        await _transport(handler).fetch_detail(1)


@pytest.mark.asyncio
async def test_error_status_maps_to_server_error_with_body():
    """Test non-2xx responses with a decodable error body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404,
            json={"error": "Not Found", "message": "Car not found", "code": "CAR_NOT_FOUND"},
        )

    with pytest.raises(ServerError) as exc_info:
        await _transport(handler).fetch_detail(99)

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "CAR_NOT_FOUND"
    assert exc_info.value.message == "Car not found"


@pytest.mark.asyncio
async def test_error_status_without_body():
    """Test non-2xx responses with an opaque body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="Service Unavailable")

    with pytest.raises(ServerError) as exc_info:
        await _transport(handler).fetch_page(FilterSet())

    assert exc_info.value.status_code == 503
    assert exc_info.value.code is None


@pytest.mark.asyncio
async def test_invalid_json_maps_to_decoding_error():
    """Test bodies that are not JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(DecodingError):
        await _transport(handler).fetch_page(FilterSet())


@pytest.mark.asyncio
async def test_unexpected_shape_maps_to_decoding_error():
    """Test JSON bodies of the wrong shape."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": []})

    with pytest.raises(DecodingError):
        await _transport(handler).fetch_page(FilterSet())


@pytest.mark.asyncio
async def test_corrupt_compressed_body_maps_to_decoding_error():
    """Test bodies whose content encoding cannot be decoded."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"content-encoding": "gzip"},
            content=b"not gzip at all",
        )

    with pytest.raises(DecodingError):
        await _transport(handler).fetch_page(FilterSet())


@pytest.mark.asyncio
async def test_other_request_errors_map_to_network_failure():
    """Test request errors that are not transport errors."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.TooManyRedirects("redirect loop", request=request)

    with pytest.raises(NetworkFailure):
        await _transport(handler).fetch_detail(1)
