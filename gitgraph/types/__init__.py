"""gitgraph type definitions.

This module exports all data model types used by the library.
"""

from gitgraph.types.git import (
    Blob,
    BranchRef,
    CommitRecord,
    GitFile,
    PullRequestIdentifier,
    RepositoryIdentifier,
    Tree,
    TreeNode,
)
from gitgraph.types.pulls import (
    Check,
    CheckState,
    MergeParameters,
    MergeResult,
    PullRequest,
    PullRequestCommit,
    PullRequestStatus,
)

__all__ = [
    # Identifiers
    "RepositoryIdentifier",
    "PullRequestIdentifier",
    # Git objects
    "GitFile",
    "TreeNode",
    "Tree",
    "Blob",
    "CommitRecord",
    "BranchRef",
    # Pull requests
    "PullRequest",
    "PullRequestStatus",
    "PullRequestCommit",
    "Check",
    "CheckState",
    "MergeParameters",
    "MergeResult",
]
