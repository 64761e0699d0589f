"""Pull request-related data models."""

from dataclasses import dataclass
from enum import Enum

from gitgraph.exceptions import GitGraphError


class PullRequestStatus(Enum):
    """Lifecycle state of a pull request as reported by the provider."""

    NONE = "none"
    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"

    @classmethod
    def parse(cls, value: object) -> "PullRequestStatus | None":
        """Case-insensitive lookup; None when the value is not a known state."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class CheckState(Enum):
    """State of a single CI status entry."""

    SUCCESS = "success"
    PENDING = "pending"
    FAILURE = "failure"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "CheckState":
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN


@dataclass
class Check:
    """One CI status entry on the latest commit of a pull request."""

    state: CheckState
    name: str
    url: str | None
    raw_state: str | None = None


@dataclass
class PullRequest:
    """Pull request information."""

    number: int
    url: str
    html_url: str | None
    title: str
    description: str | None
    state: str  # "open" or "closed"
    merged: bool
    head_branch: str
    head_sha: str | None
    base_branch: str
    base_repo_url: str | None

    @property
    def status(self) -> PullRequestStatus:
        if self.merged:
            return PullRequestStatus.MERGED
        return PullRequestStatus.parse(self.state) or PullRequestStatus.NONE


@dataclass
class PullRequestCommit:
    """A commit belonging to a pull request."""

    author: str | None
    sha: str


@dataclass
class MergeParameters:
    """Options for merging a pull request."""

    commit_to_merge: str | None = None
    squash_merge: bool = False
    delete_source_branch: bool = False

    @property
    def merge_method(self) -> str:
        return "squash" if self.squash_merge else "merge"


@dataclass
class MergeResult:
    """
    Result of merging a pull request.

    ``merged`` reflects the merge call alone. When source branch deletion was
    requested and failed afterwards, ``branch_deleted`` is False and the
    failure is kept in ``branch_deletion_error``; the merge is not undone.
    """

    merged: bool
    sha: str | None
    message: str | None
    source_branch: str | None = None
    branch_deleted: bool = False
    branch_deletion_error: GitGraphError | None = None

    @property
    def partial_success(self) -> bool:
        return self.merged and self.branch_deletion_error is not None
