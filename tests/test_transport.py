"""
Tests for the async HTTP transport: retry behavior, error mapping and
structured results.
"""

import asyncio
import string

import httpx
import pytest
from hypothesis import example, given, settings
from hypothesis import strategies as st

from gitgraph.async_transport import AsyncHTTPTransport
from gitgraph.exceptions import (
    AuthorizationError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitgraph.transport import RemoteResult, ResultStatus, RetryConfig

BASE_URL = "https://api.github.test"

# Test strategies
backoff_factor_strategy = st.floats(min_value=1.1, max_value=5.0)
attempt_strategy = st.integers(min_value=0, max_value=5)
retry_after_strategy = st.integers(min_value=1, max_value=120)


def make_transport(
    handler=None, retry_config: RetryConfig | None = None
) -> AsyncHTTPTransport:
    http_client = None
    if handler is not None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncHTTPTransport(
        base_url=BASE_URL,
        token="ghp_testtoken",
        retry_config=retry_config,
        http_client=http_client,
    )


@given(
    backoff_factor=backoff_factor_strategy,
    attempt=attempt_strategy,
)
@settings(max_examples=100)
def test_exponential_backoff_timing(backoff_factor: float, attempt: int) -> None:
    """
    For backoff factor B and attempt N the wait is B^N seconds within the
    jitter range, capped at max_backoff.
    """
    config = RetryConfig(
        backoff_factor=backoff_factor,
        jitter=0.1,  # ±10% jitter
        max_backoff=1000.0,  # High max to not interfere with test
    )
    transport = make_transport(retry_config=config)

    expected_base = backoff_factor ** attempt
    actual = transport._get_backoff_time(attempt, None)

    min_expected = min(expected_base * 0.9, config.max_backoff)
    max_expected = min(expected_base * 1.1, config.max_backoff)

    assert min_expected <= actual <= max_expected, (
        f"Backoff time {actual} not in expected range [{min_expected}, {max_expected}] "
        f"for attempt {attempt} with factor {backoff_factor}"
    )


@given(retry_after=retry_after_strategy)
@settings(max_examples=100)
def test_retry_after_header_respected(retry_after: int) -> None:
    """A Retry-After value is used as the wait time verbatim."""
    transport = make_transport(retry_config=RetryConfig(respect_retry_after=True))

    actual = transport._get_backoff_time(0, str(retry_after))

    assert actual == float(retry_after), f"Expected wait time {retry_after}, got {actual}"


@given(
    status_code=st.sampled_from([400, 401, 403, 404, 409, 422]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_no_retry_on_non_retryable_errors(status_code: int, attempt: int) -> None:
    """Client errors other than 429 are never retried."""
    transport = make_transport(retry_config=RetryConfig(max_retries=3))

    assert not transport._should_retry(status_code, attempt), (
        f"Should not retry on status code {status_code}"
    )


@given(
    status_code=st.sampled_from([429, 500, 502, 503]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_retry_on_retryable_errors(status_code: int, attempt: int) -> None:
    """Rate limits and server errors are retried while attempts remain."""
    transport = make_transport(retry_config=RetryConfig(max_retries=3))

    assert transport._should_retry(status_code, attempt), (
        f"Should retry on status code {status_code} at attempt {attempt}"
    )


def test_max_retries_exceeded() -> None:
    """Retries stop once max_retries is reached."""
    transport = make_transport(retry_config=RetryConfig(max_retries=2))

    assert not transport._should_retry(500, 2)
    assert not transport._should_retry(500, 3)
    assert transport._should_retry(500, 0)
    assert transport._should_retry(500, 1)


def test_backoff_respects_max_backoff() -> None:
    config = RetryConfig(backoff_factor=10.0, max_backoff=5.0, jitter=0.0)
    transport = make_transport(retry_config=config)

    assert transport._get_backoff_time(3, None) == 5.0


# Status code to exception type mapping for property test
STATUS_CODE_TO_EXCEPTION = {
    400: "ValidationError",
    401: "AuthenticationError",
    403: "AuthorizationError",
    404: "NotFoundError",
    409: "ConflictError",
    422: "ValidationError",
    429: "RateLimitedError",
    500: "ServerError",
    502: "ServerError",
    503: "ServerError",
}


@given(
    status_code=st.sampled_from(sorted(STATUS_CODE_TO_EXCEPTION)),
    error_message=st.text(min_size=1, max_size=200),
    request_id=st.text(
        min_size=1,
        max_size=50,
        # Header values must be ASCII; real ids look like "C0DE:1A2B:3C4D5E:6F70:65A1B2C3"
        alphabet=string.ascii_letters + string.digits + "-:",
    ),
    retry_after=st.integers(min_value=1, max_value=3600),
)
@example(
    status_code=404,
    error_message="Not Found",
    request_id="C0DE:1A2B:3C4D5E:6F70:65A1B2C3",
    retry_after=60,
)
@settings(max_examples=100)
def test_property_error_response_parsing(
    status_code: int,
    error_message: str,
    request_id: str,
    retry_after: int,
) -> None:
    """
    Every error response becomes a typed exception carrying the message,
    the request id and the numeric status code.
    """
    transport = make_transport()
    response = httpx.Response(
        status_code,
        json={"message": error_message, "documentation_url": "https://docs.github.com"},
        headers={"X-GitHub-Request-Id": request_id, "Retry-After": str(retry_after)},
    )

    error = transport._parse_error_response(response)

    assert type(error).__name__ == STATUS_CODE_TO_EXCEPTION[status_code]
    assert error.message == error_message
    assert error.request_id == request_id
    assert error.status_code == status_code
    if isinstance(error, RateLimitedError):
        assert error.retry_after == retry_after


def test_exhausted_rate_limit_on_403_is_rate_limited() -> None:
    transport = make_transport()
    response = httpx.Response(
        403,
        json={"message": "API rate limit exceeded"},
        headers={"X-RateLimit-Remaining": "0", "Retry-After": "30"},
    )

    error = transport._parse_error_response(response)

    assert isinstance(error, RateLimitedError)
    assert error.status_code == 403
    assert error.retry_after == 30


def test_error_without_json_body() -> None:
    transport = make_transport()

    error = transport._parse_error_response(httpx.Response(502, text="<html>Bad Gateway</html>"))

    assert isinstance(error, ServerError)
    assert error.message == "HTTP 502"
    assert error.code == "HTTP_502"


@pytest.mark.asyncio
async def test_request_sends_provider_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"sha": "abc"})

    transport = make_transport(handler)

    result = await transport.request("POST", "/repos/o/r/git/blobs", body={"content": "x"})

    assert result == {"sha": "abc"}
    request = seen[0]
    assert str(request.url) == f"{BASE_URL}/repos/o/r/git/blobs"
    assert request.headers["Authorization"] == "Bearer ghp_testtoken"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"


@pytest.mark.asyncio
async def test_request_passes_absolute_urls_through() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"tree": []})

    transport = make_transport(handler)

    await transport.request("GET", "https://other.test/repos/o/r/git/trees/abc")

    assert seen == ["https://other.test/repos/o/r/git/trees/abc"]


@pytest.mark.asyncio
async def test_empty_body_returns_empty_dict() -> None:
    transport = make_transport(lambda request: httpx.Response(204))

    assert await transport.request("DELETE", "/repos/o/r/git/refs/heads/x") == {}


@pytest.mark.asyncio
async def test_retries_server_error_then_succeeds(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(503, json={"message": "unavailable"})
        return httpx.Response(200, json={"ok": True})

    async def no_sleep(seconds: float) -> None:
        return None

    monkeypatch.setattr(asyncio, "sleep", no_sleep)
    transport = make_transport(handler, RetryConfig(max_retries=3))

    assert await transport.request("GET", "/rate") == {"ok": True}
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_connection_error_raises_server_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def no_sleep(seconds: float) -> None:
        return None

    monkeypatch.setattr(asyncio, "sleep", no_sleep)
    transport = make_transport(handler, RetryConfig(max_retries=1))

    with pytest.raises(ServerError) as exc_info:
        await transport.request("GET", "/repos/o/r")
    assert exc_info.value.code == "CONNECTION_ERROR"


@pytest.mark.asyncio
async def test_non_retryable_error_is_raised_immediately() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(422, json={"message": "Reference already exists"})

    transport = make_transport(handler, RetryConfig(max_retries=3))

    with pytest.raises(ValidationError) as exc_info:
        await transport.request("POST", "/repos/o/r/git/refs", body={"ref": "refs/heads/x"})
    assert exc_info.value.status_code == 422
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_try_request_classifies_outcomes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/ok"):
            return httpx.Response(200, json={"name": "main"})
        if request.url.path.endswith("/missing"):
            return httpx.Response(404, json={"message": "Branch not found"})
        return httpx.Response(403, json={"message": "Resource not accessible"})

    transport = make_transport(handler, RetryConfig(max_retries=0))

    ok = await transport.try_request("GET", "/branches/ok")
    missing = await transport.try_request("GET", "/branches/missing")
    denied = await transport.try_request("GET", "/branches/denied")

    assert ok.status is ResultStatus.OK and ok.data == {"name": "main"}
    assert missing.status is ResultStatus.NOT_FOUND
    assert isinstance(missing.error, NotFoundError)
    assert denied.status is ResultStatus.ERROR
    assert denied.error is not None and denied.error.status_code == 403
    with pytest.raises(AuthorizationError):
        denied.unwrap()


def test_remote_result_helpers() -> None:
    ok = RemoteResult.ok({"a": 1})

    assert ok.is_ok
    assert not ok.is_not_found
    assert ok.unwrap() == {"a": 1}

    not_found = RemoteResult.from_error(NotFoundError("HTTP_404", "Not Found", status_code=404))
    assert not_found.is_not_found
    with pytest.raises(NotFoundError):
        not_found.unwrap()


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open() -> None:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
    transport = AsyncHTTPTransport(BASE_URL, "ghp_testtoken", http_client=http_client)

    await transport.close()

    assert not http_client.is_closed
    await http_client.aclose()


@pytest.mark.asyncio
async def test_close_closes_owned_client() -> None:
    transport = AsyncHTTPTransport(BASE_URL, "ghp_testtoken")

    await transport.close()

    assert transport._client.is_closed
