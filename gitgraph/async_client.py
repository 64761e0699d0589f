"""
gitgraph async client.

Provides the async interface for mutating a repository's object graph and
driving pull requests on the provider.
"""

import os
from typing import Any

import httpx

from gitgraph.async_clients import (
    AsyncBranchesClient,
    AsyncCommentsClient,
    AsyncCommitsClient,
    AsyncContentsClient,
    AsyncPullsClient,
    AsyncTreesClient,
)
from gitgraph.async_transport import AsyncHTTPTransport
from gitgraph.exceptions import ConfigurationError
from gitgraph.transport import RetryConfig


class AsyncGitGraphClient:
    """
    Async client for the provider's Git Data and pull request APIs.

    Aggregates all async resource clients over a single transport. The
    transport (and its connection pool) is created once, when the client is
    constructed, and reused by every call until ``close()``.

    Example:
        ```python
        import asyncio
        from gitgraph import AsyncGitGraphClient, GitFile

        async def main():
            async with AsyncGitGraphClient(token="ghp_...") as client:
                repo = "https://github.com/owner/repo"
                await client.branches.ensure_branch(repo, "update-deps", "main")
                await client.commits.push_files(
                    [GitFile("versions.props", "<Project />")],
                    repo,
                    "update-deps",
                    "Update dependencies",
                )
                pr_url = await client.pulls.create(repo, "main", "update-deps")

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_CONCURRENT_FETCHES = 10

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        max_concurrent_fetches: int = DEFAULT_MAX_CONCURRENT_FETCHES,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the async gitgraph client.

        Args:
            token: Access token for the provider API
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            max_concurrent_fetches: Blob downloads allowed in flight at once
                when reading a directory (default: 10)
            http_client: Pre-built ``httpx.AsyncClient`` to share (optional)
        """
        if not token:
            raise ConfigurationError("An access token is required")
        if max_concurrent_fetches < 1:
            raise ConfigurationError("max_concurrent_fetches must be at least 1")

        self.base_url = base_url
        self.timeout = timeout

        # Create async transport layer
        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            http_client=http_client,
        )

        # Initialize async resource clients
        self.trees = AsyncTreesClient(self._transport, max_concurrent_fetches)
        self.branches = AsyncBranchesClient(self._transport)
        self.commits = AsyncCommitsClient(self._transport, self.trees, self.branches)
        self.contents = AsyncContentsClient(self._transport)
        self.pulls = AsyncPullsClient(self._transport, self.branches)
        self.comments = AsyncCommentsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "AsyncGitGraphClient":
        """
        Create an async client from environment variables.

        Environment variables:
            GITGRAPH_TOKEN: Access token (required; GITHUB_TOKEN is used as a fallback)
            GITGRAPH_BASE_URL: Base URL for API (optional, default: https://api.github.com)
            GITGRAPH_MAX_CONCURRENT_FETCHES: Blob download concurrency (optional, default: 10)

        Raises:
            ConfigurationError: If required environment variables are missing
                or a value is malformed
        """
        token = os.environ.get("GITGRAPH_TOKEN") or os.environ.get("GITHUB_TOKEN")
        base_url = os.environ.get("GITGRAPH_BASE_URL", cls.DEFAULT_BASE_URL)
        concurrency = os.environ.get(
            "GITGRAPH_MAX_CONCURRENT_FETCHES", str(cls.DEFAULT_MAX_CONCURRENT_FETCHES)
        )

        if not token:
            raise ConfigurationError(
                "GITGRAPH_TOKEN (or GITHUB_TOKEN) environment variable not set"
            )

        try:
            max_concurrent_fetches = int(concurrency)
        except ValueError:
            raise ConfigurationError(
                f"Invalid GITGRAPH_MAX_CONCURRENT_FETCHES: {concurrency}. Must be an integer"
            ) from None

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            max_concurrent_fetches=max_concurrent_fetches,
            http_client=http_client,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncGitGraphClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
