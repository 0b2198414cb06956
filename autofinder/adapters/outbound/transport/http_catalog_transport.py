"""HTTP catalog transport adapter."""

from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from autofinder.application.dtos.base import DTO
from autofinder.application.dtos.car import CarSummary, PriceAnalysis, ResultPage
from autofinder.application.ports.catalog_transport import CatalogTransport
from autofinder.domain.errors import DecodingError, NetworkFailure, ServerError
from autofinder.domain.value_objects.filter_set import FilterSet
from autofinder.infrastructure.config.settings import settings

CARS_ENDPOINT = "/api/cars"
CAR_DETAIL_ENDPOINT = "/api/cars/{car_id}"
SIMILAR_CARS_ENDPOINT = "/api/cars/{car_id}/similar"
PRICE_ANALYSIS_ENDPOINT = "/api/analytics/price-by-year/{model}"


class PageEnvelope(DTO):
    """Paginated response body of the catalog API."""

    content: list[CarSummary]
    total_elements: int
    total_pages: int = 0
    last: bool
    first: bool = False
    size: int = 0
    number: int = 0

    def to_result_page(self) -> ResultPage:
        """Convert to the application result page."""
        return ResultPage(
            items=self.content,
            is_last_page=self.last,
            total_count=self.total_elements,
            page_number=self.number,
            total_pages=self.total_pages,
        )


class ErrorBody(DTO):
    """Error response body of the catalog API."""

    error: Optional[str] = None
    message: Optional[str] = None
    details: Optional[str] = None
    code: Optional[str] = None


_price_analysis_adapter = TypeAdapter(list[PriceAnalysis])


class HttpCatalogTransport(CatalogTransport):
    """Catalog transport over the REST API using httpx."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize HTTP catalog transport.

        Args:
            base_url: API base URL (defaults to settings.catalog_api_base_url)
            timeout_seconds: Request timeout (defaults to settings.http_timeout_seconds)
            client: Preconfigured client, mainly for tests
        """
        self._base_url = base_url or settings.catalog_api_base_url
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client.

        Returns:
            httpx AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Args:
            path: Endpoint path
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            NetworkFailure: If the request could not be completed
            ServerError: If the response status is not 2xx
            DecodingError: If the body cannot be decoded or is not valid JSON
        """
        try:
            response = await self._get_client().get(path, params=params)
        except httpx.DecodingError as e:
            raise DecodingError(f"Undecodable body from {path}: {str(e)}") from e
        except httpx.RequestError as e:
            raise NetworkFailure(f"Request to {path} failed: {str(e)}") from e

        if not response.is_success:
            raise self._server_error(response)

        try:
            return response.json()
        except ValueError as e:
            raise DecodingError(f"Invalid JSON from {path}: {str(e)}") from e

    def _server_error(self, response: httpx.Response) -> ServerError:
        """
        Build a server error from a non-2xx response.

        Args:
            response: HTTP response

        Returns:
            ServerError carrying the status and, when decodable, the error body
        """
        message = f"Catalog API returned {response.status_code}"
        code = None
        try:
            body = ErrorBody.model_validate(response.json())
            code = body.code
            if body.message:
                message = body.message
        except (ValueError, ValidationError):
            pass
        return ServerError(message, status_code=response.status_code, code=code)

    def _decode(self, validate: Any, data: Any, path: str) -> Any:
        """
        Validate decoded JSON into the expected shape.

        Raises:
            DecodingError: If the data does not match
        """
        try:
            return validate(data)
        except ValidationError as e:
            raise DecodingError(f"Unexpected response shape from {path}: {str(e)}") from e

    async def fetch_page(self, filters: FilterSet) -> ResultPage:
        """Fetch one page of search results."""
        data = await self._get_json(CARS_ENDPOINT, params=filters.to_query_params())
        envelope = self._decode(PageEnvelope.model_validate, data, CARS_ENDPOINT)
        return envelope.to_result_page()

    async def fetch_detail(self, car_id: int) -> CarSummary:
        """Fetch a single car."""
        path = CAR_DETAIL_ENDPOINT.format(car_id=car_id)
        data = await self._get_json(path)
        return self._decode(CarSummary.model_validate, data, path)

    async def fetch_similar(self, car_id: int, limit: int) -> list[CarSummary]:
        """Fetch cars similar to the given one."""
        path = SIMILAR_CARS_ENDPOINT.format(car_id=car_id)
        data = await self._get_json(path, params={"limit": limit})
        envelope = self._decode(PageEnvelope.model_validate, data, path)
        return list(envelope.content)

    async def fetch_price_analysis(self, model: str) -> list[PriceAnalysis]:
        """Fetch price statistics per model year."""
        path = PRICE_ANALYSIS_ENDPOINT.format(model=quote(model, safe=""))
        data = await self._get_json(path)
        return self._decode(_price_analysis_adapter.validate_python, data, path)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
