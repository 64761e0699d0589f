"""
Transport-level configuration and result types shared by the HTTP transport.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gitgraph.exceptions import GitGraphError, NotFoundError


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class ResultStatus(Enum):
    """Outcome classes a remote call can end in."""

    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class RemoteResult:
    """
    Structured outcome of a remote call.

    Returned by ``AsyncHTTPTransport.try_request`` so that callers can branch
    on a missing resource without catching exceptions.
    """

    status: ResultStatus
    data: Any = None
    error: GitGraphError | None = None

    @classmethod
    def ok(cls, data: Any) -> "RemoteResult":
        return cls(status=ResultStatus.OK, data=data)

    @classmethod
    def from_error(cls, error: GitGraphError) -> "RemoteResult":
        if isinstance(error, NotFoundError):
            return cls(status=ResultStatus.NOT_FOUND, error=error)
        return cls(status=ResultStatus.ERROR, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def is_not_found(self) -> bool:
        return self.status is ResultStatus.NOT_FOUND

    def unwrap(self) -> Any:
        """Return the payload, or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.data
