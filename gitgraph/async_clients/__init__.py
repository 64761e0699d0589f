"""gitgraph async resource clients."""

from gitgraph.async_clients.branches import AsyncBranchesClient
from gitgraph.async_clients.comments import AsyncCommentsClient
from gitgraph.async_clients.commits import AsyncCommitsClient
from gitgraph.async_clients.contents import AsyncContentsClient
from gitgraph.async_clients.pulls import AsyncPullsClient
from gitgraph.async_clients.trees import AsyncTreesClient

__all__ = [
    "AsyncTreesClient",
    "AsyncBranchesClient",
    "AsyncCommitsClient",
    "AsyncContentsClient",
    "AsyncPullsClient",
    "AsyncCommentsClient",
]
