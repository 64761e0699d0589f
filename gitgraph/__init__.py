"""gitgraph - remote Git object-graph and pull request client."""

from gitgraph.async_client import AsyncGitGraphClient
from gitgraph.async_transport import AsyncHTTPTransport
from gitgraph.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DependencyFileNotFoundError,
    GitGraphError,
    InvalidArgumentError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TreePathNotFoundError,
    UnsupportedError,
    ValidationError,
)
from gitgraph.logging import configure_logging, get_logger
from gitgraph.transport import RemoteResult, ResultStatus, RetryConfig
from gitgraph.types import (
    Blob,
    BranchRef,
    Check,
    CheckState,
    CommitRecord,
    GitFile,
    MergeParameters,
    MergeResult,
    PullRequest,
    PullRequestCommit,
    PullRequestIdentifier,
    PullRequestStatus,
    RepositoryIdentifier,
    Tree,
    TreeNode,
)
from gitgraph.uri import (
    owner_and_repo_from_repo_uri,
    parse_pull_request_uri,
    parse_repo_uri,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "AsyncGitGraphClient",
    # URI resolution
    "parse_repo_uri",
    "parse_pull_request_uri",
    "owner_and_repo_from_repo_uri",
    # Types
    "RepositoryIdentifier",
    "PullRequestIdentifier",
    "GitFile",
    "TreeNode",
    "Tree",
    "Blob",
    "CommitRecord",
    "BranchRef",
    "PullRequest",
    "PullRequestStatus",
    "PullRequestCommit",
    "Check",
    "CheckState",
    "MergeParameters",
    "MergeResult",
    # Exceptions
    "GitGraphError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "DependencyFileNotFoundError",
    "TreePathNotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ConfigurationError",
    "InvalidArgumentError",
    "UnsupportedError",
    # Transport
    "AsyncHTTPTransport",
    "RetryConfig",
    "RemoteResult",
    "ResultStatus",
    # Logging
    "configure_logging",
    "get_logger",
]
