"""
HTTP client for the Numora dashboard backend.

Handles request execution, retry logic, authentication, and response processing.
Follows pure core/impure edges principle with clean separation of concerns.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientResponse, ClientSession

from .models.config import ConnectionConfig, RetryConfig


class HttpClient:
    """HTTP client specialized for dashboard backend interactions."""

    def __init__(
        self,
        config: ConnectionConfig,
        retry_config: Optional[RetryConfig] = None,
    ):
        """Initialize HTTP client with configuration."""
        self._config = config
        self._retry_config = retry_config or RetryConfig()

    async def request(
        self,
        session: ClientSession,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retry: bool = True,
    ) -> Dict[str, Any]:
        """
        Execute HTTP request with authentication and optional retry.

        Mutating calls must pass ``retry=False``: the backend owns per-item
        atomicity and a replayed request could act twice.
        """
        url = f"{self._config.base_url}{endpoint}"

        request_headers = self._prepare_headers(headers)
        request_headers["Authorization"] = f"Bearer {self._config.session_token}"

        attempts = self._retry_config.max_retries + 1 if retry else 1
        response_data = await self._execute_with_retry(
            session, method, url, params or {}, data, request_headers, attempts
        )

        self._check_envelope(response_data)
        return response_data

    def _prepare_headers(self, custom_headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        """Prepare request headers."""
        headers = {}
        if custom_headers:
            headers.update(custom_headers)
        return headers

    def _check_envelope(self, response_data: Any) -> None:
        """Raise when a 2xx body reports ``success: false``."""
        if isinstance(response_data, dict) and response_data.get("success") is False:
            raise BackendError(
                str(response_data.get("error") or "Request failed"),
                status_code=200,
                response_data=response_data,
            )

    async def _execute_with_retry(
        self,
        session: ClientSession,
        method: str,
        url: str,
        params: Dict[str, Any],
        data: Optional[Dict[str, Any]],
        headers: Dict[str, str],
        attempts: int,
    ) -> Dict[str, Any]:
        """Execute request with retry logic."""
        last_exception = None

        for attempt in range(attempts):
            try:
                request_kwargs = {
                    "method": method,
                    "url": url,
                    "headers": headers,
                }
                if params:
                    request_kwargs["params"] = sorted(params.items())
                if data is not None:
                    request_kwargs["json"] = data

                async with session.request(**request_kwargs) as response:
                    response_data = await self._process_response(response)

                    if response.status < 400:
                        return response_data

                    message = self._error_message(response_data)

                    # Don't retry on client errors (4xx)
                    if 400 <= response.status < 500:
                        if response.status == 401:
                            raise HttpClientClientError(
                                f"Authentication failed: session expired or not verified. "
                                f"Please sign in again. Server response: {message}",
                                status_code=response.status,
                                response_data=response_data,
                            )

                        raise HttpClientClientError(
                            message or f"Client error {response.status}",
                            status_code=response.status,
                            response_data=response_data,
                        )

                    if response.status in self._retry_config.retry_on_status:
                        raise HttpServerError(
                            message or f"Server error {response.status}",
                            status_code=response.status,
                            response_data=response_data,
                        )

                    raise HttpClientClientError(
                        f"HTTP {response.status}: {message}",
                        status_code=response.status,
                        response_data=response_data,
                    )

            except (HttpServerError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e

                if attempt == attempts - 1:
                    break

                # Exponential backoff
                delay = self._retry_config.retry_delay * (
                    self._retry_config.backoff_factor ** attempt
                )
                await asyncio.sleep(delay)

        if isinstance(last_exception, HttpClientError):
            raise last_exception
        raise HttpClientError(
            f"Request failed after {attempts} attempt(s): {last_exception}"
        ) from last_exception

    @staticmethod
    def _error_message(response_data: Any) -> str:
        """Extract the backend's error text from a failure body."""
        if isinstance(response_data, dict):
            return str(response_data.get("error") or response_data.get("message") or "")
        return str(response_data or "")

    async def _process_response(self, response: ClientResponse) -> Dict[str, Any]:
        """Process HTTP response and return data."""
        response_text = await response.text()

        if not response_text:
            return {"status": response.status, "data": None}

        try:
            return json.loads(response_text)
        except json.JSONDecodeError as e:
            raise HttpClientError(
                f"Invalid JSON response (Status {response.status}): {response_text[:200]}",
                status_code=response.status,
            ) from e


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class HttpServerError(HttpClientError):
    """Exception for server errors (5xx)."""
    pass


class HttpClientClientError(HttpClientError):
    """Exception for client errors (4xx)."""
    pass


class BackendError(HttpClientClientError):
    """The backend answered but reported ``success: false``."""
    pass
