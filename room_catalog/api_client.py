"""
HTTP client module for the hosted layouts API.

Provides an async client for the external CRUD collection: list, fetch,
create, replace and delete layout records, plus a health check. Every call
is timed, logged and counted; failures are raised as ``LayoutsApiError``.
"""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .config import settings
from .exceptions import LayoutNotFoundException, LayoutsApiError
from .logging_config import get_logger
from .metrics import track_api_error, track_api_request
from .models import Layout, LayoutPayload

logger = get_logger(__name__)


class LayoutsApiClient:
    """
    Client for the layouts collection endpoint.

    Uses a persistent HTTP client with connection pooling so consecutive
    page renders reuse connections to the hosted API.

    Attributes:
        base_url: Collection URL, e.g. ``https://host/api/romm-furniture``
        timeout: Request timeout in seconds
        _client: Persistent httpx.AsyncClient with connection pooling
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize layouts API client.

        Args:
            base_url: Collection URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        self.base_url = (base_url or settings.LAYOUTS_API_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT

        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            f"Initialized LayoutsApiClient: base_url={self.base_url}, "
            f"timeout={self.timeout}s"
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the persistent HTTP client with connection pooling.

        Returns:
            Configured httpx.AsyncClient instance
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=10,
                    max_connections=20,
                    keepalive_expiry=30.0,
                ),
                http2=True,
            )
            logger.debug("Created new HTTP client with connection pooling")
        return self._client

    async def close(self) -> None:
        """
        Close the HTTP client and release connections.

        Should be called during application shutdown.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed HTTP client")

    def _url(self, layout_id: Optional[str] = None) -> str:
        if layout_id is None:
            return self.base_url
        return f"{self.base_url}/{quote(layout_id, safe='')}"

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request to the layouts API and decode its JSON body.

        Args:
            operation: Short name of the CRUD operation, used for logs and metrics
            method: HTTP method
            url: Absolute request URL
            json: Optional JSON body

        Returns:
            Decoded JSON response body

        Raises:
            LayoutsApiError: On timeout, network failure, non-2xx status or bad JSON
        """
        start_time = time.perf_counter()

        logger.debug(
            "Sending request to layouts API",
            extra={
                "extra_fields": {
                    "operation": operation,
                    "method": method,
                    "url": url,
                }
            },
        )

        try:
            client = await self._get_client()
            response = await client.request(
                method,
                url,
                json=json,
                headers={"Accept": "application/json"},
            )
            duration = time.perf_counter() - start_time

            logger.info(
                "Received response from layouts API",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "status_code": response.status_code,
                        "duration_ms": duration * 1000,
                    }
                },
            )
            track_api_request(operation, response.status_code, duration)

            response.raise_for_status()
            return response.json()

        except (httpx.TimeoutException, TimeoutError) as error:
            track_api_error(operation, "timeout")
            logger.error(
                "Layouts API request timed out",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "url": url,
                        "timeout": self.timeout,
                        "error_type": type(error).__name__,
                    }
                },
            )
            raise LayoutsApiError(
                f"Layouts API timed out after {self.timeout}s",
                details={"operation": operation, "error_type": "timeout"},
            ) from error

        except httpx.HTTPStatusError as error:
            status_code = error.response.status_code
            track_api_error(operation, "http_error")
            logger.error(
                "HTTP error from layouts API",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "url": url,
                        "status_code": status_code,
                        "response_body": error.response.text[:500],
                    }
                },
            )
            raise LayoutsApiError(
                f"Layouts API returned error: {status_code}",
                status_code=status_code,
                details={"operation": operation, "error_type": "http_error"},
            ) from error

        except httpx.RequestError as error:
            track_api_error(operation, "request_error")
            logger.error(
                "Cannot reach layouts API",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "url": url,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                    }
                },
                exc_info=True,
            )
            raise LayoutsApiError(
                "Cannot connect to the layouts API",
                details={"operation": operation, "error_type": "request_error"},
            ) from error

        except ValueError as error:
            track_api_error(operation, "invalid_body")
            logger.error(
                "Layouts API returned a body that is not JSON",
                extra={"extra_fields": {"operation": operation, "url": url}},
            )
            raise LayoutsApiError(
                "Layouts API returned an invalid response",
                details={"operation": operation, "error_type": "invalid_body"},
            ) from error

    async def _request_layout(
        self,
        operation: str,
        method: str,
        layout_id: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            return await self._request(operation, method, self._url(layout_id), json)
        except LayoutsApiError as error:
            if error.status_code == 404:
                raise LayoutNotFoundException(layout_id) from error
            raise

    @staticmethod
    def _parse_layout(operation: str, data: Any) -> Layout:
        try:
            return Layout.model_validate(data)
        except ValidationError as error:
            track_api_error(operation, "invalid_record")
            logger.error(
                "Layouts API returned a malformed record",
                extra={"extra_fields": {"operation": operation, "errors": error.errors()}},
            )
            raise LayoutsApiError(
                "Layouts API returned a malformed record",
                details={"operation": operation, "error_type": "invalid_record"},
            ) from error

    async def list_layouts(self) -> List[Layout]:
        """
        Fetch the whole collection.

        Returns:
            All layouts in the order the service returned them
        """
        data = await self._request("list", "GET", self._url())
        if not isinstance(data, list):
            raise LayoutsApiError(
                "Layouts API returned an unexpected collection body",
                details={"operation": "list", "error_type": "invalid_body"},
            )
        return [self._parse_layout("list", item) for item in data]

    async def get_layout(self, layout_id: str) -> Layout:
        """
        Fetch a single layout.

        Raises:
            LayoutNotFoundException: If the service has no such record
        """
        data = await self._request_layout("get", "GET", layout_id)
        return self._parse_layout("get", data)

    async def create_layout(self, payload: LayoutPayload) -> Layout:
        """Create a layout and return the record with its assigned id."""
        data = await self._request("create", "POST", self._url(), payload.to_api())
        layout = self._parse_layout("create", data)
        logger.info(
            "Layout created",
            extra={"extra_fields": {"layout_id": layout.id, "room_name": layout.room_name}},
        )
        return layout

    async def update_layout(self, layout_id: str, payload: LayoutPayload) -> Layout:
        """Replace every field of an existing layout."""
        data = await self._request_layout("update", "PUT", layout_id, payload.to_api())
        logger.info("Layout updated", extra={"extra_fields": {"layout_id": layout_id}})
        return self._parse_layout("update", data)

    async def delete_layout(self, layout_id: str) -> Dict[str, Any]:
        """
        Delete a layout.

        Returns:
            The service's confirmation body, the deleted record for mock APIs
        """
        data = await self._request_layout("delete", "DELETE", layout_id)
        logger.info("Layout deleted", extra={"extra_fields": {"layout_id": layout_id}})
        return data if isinstance(data, dict) else {"id": layout_id}

    async def health_check(self) -> bool:
        """
        Check if the layouts API is reachable and answering.

        Returns:
            True if the collection endpoint answers 200, False otherwise
        """
        try:
            client = await self._get_client()
            response = await client.get(
                self._url(),
                headers={"Accept": "application/json"},
                timeout=3.0,
            )
            is_healthy = response.status_code == 200

            if not is_healthy:
                logger.warning(
                    "Layouts API health check failed",
                    extra={
                        "extra_fields": {
                            "base_url": self.base_url,
                            "status_code": response.status_code,
                        }
                    },
                )

            return is_healthy

        except Exception as error:
            logger.warning(
                "Layouts API health check failed with exception",
                extra={
                    "extra_fields": {
                        "base_url": self.base_url,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                    }
                },
            )
            return False


# Singleton instance for application-wide use
layouts_client = LayoutsApiClient()
