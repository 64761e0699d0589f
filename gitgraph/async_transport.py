"""
Async HTTP Transport for gitgraph.

Executes authenticated requests against the provider REST API with automatic
retry logic, and maps HTTP failures to typed exceptions or structured results.
"""

import asyncio
import random
import time
from typing import Any

import httpx

from gitgraph.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitGraphError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitgraph.logging import log_http_request, log_http_response
from gitgraph.transport import RemoteResult, RetryConfig

USER_AGENT = "gitgraph/0.1.0"
API_VERSION = "2022-11-28"

# Status codes with a dedicated exception; other 4xx are ValidationError, 5xx ServerError
_ERRORS_BY_STATUS: dict[int, type[GitGraphError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
}


class AsyncHTTPTransport:
    """
    Async HTTP transport with token authentication and retry logic.

    - Sends ``Authorization: Bearer`` plus the provider's API version headers
    - Retries 429/5xx responses and connection failures with exponential
      backoff and jitter, or waits ``Retry-After`` when the provider sends it
    - Turns error responses into typed exceptions carrying the status code

    One ``httpx.AsyncClient`` is created per transport and reused for every
    call, so the connection pool is shared across all operations.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            base_url: API root, e.g. "https://api.github.com"
            token: Access token sent as a bearer credential
            timeout: Per-request timeout in seconds (owned client only)
            retry_config: Retry policy (default: ``RetryConfig()``)
            http_client: Pre-built ``httpx.AsyncClient`` to use instead of
                creating one. Its base URL and headers are left untouched and
                it is not closed by ``close()``.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout
        )

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send an authenticated request, retrying where the policy allows.

        Args:
            method: HTTP method (GET, POST, PATCH, PUT, DELETE)
            path: API path such as "/repos/owner/repo/git/blobs", or an
                absolute URL returned by the provider
            body: JSON request body
            params: Query parameters

        Returns:
            Decoded JSON, or an empty dict when the response has no body

        Raises:
            GitGraphError: The typed error of the final failed attempt
        """
        response = await self._send_with_retry(method, self._url(path), body, params)
        return response.json() if response.content else {}

    async def try_request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> RemoteResult:
        """
        Like ``request`` but report the outcome instead of raising.

        Returns:
            RemoteResult whose status is OK, NOT_FOUND (404) or ERROR
        """
        try:
            data = await self.request(method, path, body=body, params=params)
        except GitGraphError as e:
            return RemoteResult.from_error(e)
        return RemoteResult.ok(data)

    def _url(self, path: str) -> str:
        # Absolute URLs pass through; injected clients may have no base URL
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _send_once(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None,
        params: dict[str, Any] | None,
    ) -> httpx.Response:
        log_http_request(method, url, self._headers, body)
        started = time.monotonic()
        response = await self._client.request(
            method, url, params=params, json=body, headers=self._headers
        )
        log_http_response(response.status_code, url, (time.monotonic() - started) * 1000)
        return response

    async def _send_with_retry(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None,
        params: dict[str, Any] | None,
    ) -> httpx.Response:
        """Return the first successful response; raise once retries run out."""
        attempt = 0
        while True:
            try:
                response = await self._send_once(method, url, body, params)
            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e
                delay = self._get_backoff_time(attempt, None)
            else:
                if response.status_code < 400:
                    return response
                if not self._should_retry(response.status_code, attempt):
                    raise self._parse_error_response(response)
                delay = self._get_backoff_time(attempt, response.headers.get("Retry-After"))

            await asyncio.sleep(delay)
            attempt += 1

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """Whether attempt number ``attempt`` (0-indexed) may be followed by another."""
        return (
            attempt < self.retry_config.max_retries
            and status_code in self.retry_config.retry_on
        )

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Seconds to wait before the next attempt.

        A numeric ``Retry-After`` wins when the policy respects it; otherwise
        ``backoff_factor ** attempt`` with ±``jitter`` applied, capped at
        ``max_backoff``.
        """
        config = self.retry_config
        if retry_after and config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # HTTP-date form; fall back to backoff

        wait = config.backoff_factor ** attempt
        wait *= 1 + random.uniform(-config.jitter, config.jitter)
        return min(wait, config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> GitGraphError:
        """
        Map an error response to a typed exception.

        The provider reports errors as ``{"message": ..., "documentation_url": ...}``.
        An exhausted primary rate limit arrives as 403 with
        ``X-RateLimit-Remaining: 0`` and is reported like a 429.
        """
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = {}

        status_code = response.status_code
        message = payload.get("message") or f"HTTP {status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        rate_limited = status_code == 429 or (
            status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        )
        if rate_limited:
            return RateLimitedError(
                "RATE_LIMITED",
                message,
                self._retry_after_seconds(response),
                request_id,
                status_code,
            )

        error_class = _ERRORS_BY_STATUS.get(status_code)
        if error_class is None:
            error_class = ServerError if status_code >= 500 else ValidationError
        return error_class(f"HTTP_{status_code}", message, request_id, status_code)

    @staticmethod
    def _retry_after_seconds(response: httpx.Response) -> int:
        try:
            return int(response.headers.get("Retry-After", "60"))
        except ValueError:
            return 60
