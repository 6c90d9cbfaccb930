"""Internal HTTP layer for the thread simulator client.

Wraps httpx.Client with JSON decoding, status-code to exception mapping and
optional retry with exponential backoff. Sub-clients go through BaseClient
and never touch httpx directly.
"""

import time
from typing import Any, Literal

import httpx

from client.exceptions import (
    APIError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

# Retried only when retry is enabled
RETRYABLE_STATUS_CODES = {502, 503, 504}

DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds


def _parse_error_response(response: httpx.Response) -> tuple[str, str | None, dict | None]:
    """Extract (message, error_type, details) from an error response.

    Understands the server's {"error", "detail", "type"} bodies and
    FastAPI's request-validation list. Falls back to the raw text.
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return (text or f"HTTP {response.status_code} error"), None, None

    if not isinstance(body, dict):
        return str(body), None, None

    detail = body.get("detail")
    if isinstance(detail, list):
        messages = [
            f"{err.get('loc', ['unknown'])[-1]}: {err.get('msg', 'invalid')}"
            for err in detail
        ]
        return "; ".join(messages), "validation_error", {"errors": detail}
    if isinstance(detail, str):
        errors = body.get("validation_errors")
        return detail, body.get("type"), {"errors": errors} if errors else None
    if "error" in body:
        return str(body["error"]), body.get("type"), None
    return str(body), None, None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the client exception matching an error status code.

    Raises:
        ValidationError: For HTTP 422 responses.
        NotFoundError: For HTTP 404 responses.
        ConflictError: For HTTP 409 responses.
        ServerError: For HTTP 5xx responses.
        APIError: For other HTTP 4xx responses.
    """
    if response.is_success:
        return

    message, error_type, details = _parse_error_response(response)
    try:
        response_body = response.json()
    except ValueError:
        response_body = response.text

    status_code = response.status_code
    if status_code == 422:
        raise ValidationError(message, details=details, response_body=response_body)
    if status_code == 404:
        raise NotFoundError(message, details=details, response_body=response_body)
    if status_code == 409:
        raise ConflictError(message, details=details, response_body=response_body)
    if status_code >= 500:
        raise ServerError(
            message, status_code=status_code, details=details, response_body=response_body
        )
    raise APIError(
        message,
        status_code=status_code,
        error_type=error_type,
        details=details,
        response_body=response_body,
    )


def _calculate_backoff(attempt: int, base: float = DEFAULT_RETRY_BACKOFF_BASE) -> float:
    """Delay before retry number `attempt` (0-indexed): base * 2^attempt, capped."""
    return min(base * (2**attempt), DEFAULT_RETRY_BACKOFF_MAX)


class HTTPClient:
    """Synchronous JSON-over-HTTP client.

    Attributes:
        base_url: The base URL for all API requests.
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry connection failures, timeouts and
            RETRYABLE_STATUS_CODES.
        max_retries: Maximum number of retry attempts.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: The base URL for all API requests.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry on transient failures.
            max_retries: Maximum number of retry attempts.
            transport: Custom transport (e.g. httpx.MockTransport in tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: The HTTP method.
            path: URL path relative to base_url.
            params: Query parameters; None values are dropped.
            json: JSON body.

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        attempts = self.max_retries + 1 if self.retry_enabled else 1
        for attempt in range(attempts):
            is_last = attempt >= attempts - 1
            try:
                response = self._client.request(method=method, url=path, params=params, json=json)
            except httpx.ConnectError as e:
                if is_last:
                    raise ConnectionError(f"Failed to connect to {url}", url=url, cause=e) from e
                time.sleep(_calculate_backoff(attempt))
                continue
            except httpx.TimeoutException as e:
                if is_last:
                    raise TimeoutError(
                        f"Request to {url} timed out", timeout=self.timeout, url=url
                    ) from e
                time.sleep(_calculate_backoff(attempt))
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and not is_last:
                time.sleep(_calculate_backoff(attempt))
                continue

            _raise_for_status(response)
            return response.json() if response.content else None

        raise RuntimeError("Unexpected error in request retry loop")

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("POST", path, params=params, json=json)

    def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("DELETE", path, params=params)
