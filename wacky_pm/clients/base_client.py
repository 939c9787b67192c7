"""
Base HTTP client for the GitHub and Copilot APIs.
Provides the shared httpx client, authentication headers and error mapping.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from wacky_pm.core.exceptions import ExternalApiError, WackyPMError
from wacky_pm.core.logging import get_logger

logger = get_logger(__name__)


class BaseAPIClient(ABC):
    """
    Abstract base class for API clients authenticated with a user's token.

    Only idempotent reads are retried, and only on transport errors.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (mock transports in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(
        self,
        method: str,
        endpoint: str,
        token: str,
        data: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return await client.request(
            method=method,
            url=endpoint,
            json=data,
            headers=headers,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _send_with_retry(self, method: str, endpoint: str, token: str) -> httpx.Response:
        return await self._send(method, endpoint, token)

    async def _request(
        self,
        method: str,
        endpoint: str,
        token: str,
        data: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Make an authenticated request and decode the JSON answer.

        Raises:
            WackyPMError: subclass chosen by ``_api_error`` when the request fails
        """
        try:
            if method == "GET":
                response = await self._send_with_retry(method, endpoint, token)
            else:
                response = await self._send(method, endpoint, token, data=data)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                "API request failed",
                service=self.service_name,
                endpoint=endpoint,
                status_code=e.response.status_code,
            )
            raise self._api_error(
                f"HTTP {e.response.status_code}: {e.response.text}",
                {"endpoint": endpoint, "status_code": e.response.status_code},
            ) from e

        except httpx.RequestError as e:
            logger.error(
                "API request error",
                service=self.service_name,
                endpoint=endpoint,
                error=str(e),
            )
            raise self._api_error(
                f"Request failed: {e!s}",
                {"endpoint": endpoint},
            ) from e

        except ValueError as e:
            raise self._api_error("Response is not valid JSON", {"endpoint": endpoint}) from e

    async def _get(self, endpoint: str, token: str) -> Any:
        """Make a GET request."""
        return await self._request("GET", endpoint, token)

    async def _post(self, endpoint: str, token: str, data: dict[str, Any]) -> Any:
        """Make a POST request."""
        return await self._request("POST", endpoint, token, data=data)

    def _api_error(self, message: str, details: dict[str, Any]) -> WackyPMError:
        return ExternalApiError(service_name=self.service_name, message=message, details=details)

    @property
    @abstractmethod
    def service_name(self) -> str:
        """Human readable name used in errors and logs."""
        ...

    async def __aenter__(self) -> "BaseAPIClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
