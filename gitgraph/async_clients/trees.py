"""Async blob and tree client.

Builds new trees from in-memory file changes and reads existing trees back
into flat file listings.
"""

import asyncio
from typing import TYPE_CHECKING, Any

from gitgraph.exceptions import TreePathNotFoundError, UnsupportedError
from gitgraph.logging import get_logger
from gitgraph.types.git import (
    ENCODING_BASE64,
    ENCODING_UTF8,
    Blob,
    GitFile,
    Tree,
    TreeNode,
)
from gitgraph.uri import require_repo_uri

if TYPE_CHECKING:
    from gitgraph.async_transport import AsyncHTTPTransport

logger = get_logger("git")


def split_tree_path(path: str) -> tuple[str, ...]:
    """Normalise a directory path into its segments ("" -> no segments)."""
    normalized = path.replace("\\", "/").strip("/")
    if not normalized:
        return ()
    return tuple(segment for segment in normalized.split("/") if segment)


class AsyncTreesClient:
    """Async client for blob and tree objects."""

    def __init__(
        self,
        transport: "AsyncHTTPTransport",
        max_concurrent_fetches: int = 10,
    ) -> None:
        """
        Initialize the async trees client.

        Args:
            transport: Async HTTP transport for making requests
            max_concurrent_fetches: Upper bound on blob downloads in flight
                at once when reading a whole directory
        """
        self.transport = transport
        self.max_concurrent_fetches = max_concurrent_fetches

    async def create_blob(self, owner: str, repo: str, file: GitFile) -> str:
        """
        Upload a file's content as a blob.

        Returns:
            The new blob's sha
        """
        response = await self.transport.request(
            method="POST",
            path=f"/repos/{owner}/{repo}/git/blobs",
            body={"content": file.content, "encoding": file.content_encoding},
        )
        return response["sha"]

    async def get_blob(self, owner: str, repo: str, sha: str) -> Blob:
        """Get a blob and its (usually base64-encoded) content."""
        response = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/git/blobs/{sha}",
        )
        return Blob(
            sha=response.get("sha", sha),
            content=response.get("content", ""),
            encoding=response.get("encoding", ENCODING_UTF8),
            size=response.get("size"),
        )

    async def get_tree(
        self, owner: str, repo: str, tree_sha: str, recursive: bool = False
    ) -> Tree:
        """
        Get a tree, optionally with all nested entries flattened into it.

        The truncation flag is reported as-is; callers that need a complete
        listing use ``expand_tree_recursive`` instead.
        """
        response = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/git/trees/{tree_sha}",
            params={"recursive": "1"} if recursive else None,
        )
        return self._parse_tree(response)

    async def create_tree(
        self,
        owner: str,
        repo: str,
        entries: list[TreeNode],
        base_tree_sha: str,
    ) -> Tree:
        """
        Create a tree layered on ``base_tree_sha``.

        Only the changed entries are sent; the provider merges them with the
        base tree server-side.
        """
        response = await self.transport.request(
            method="POST",
            path=f"/repos/{owner}/{repo}/git/trees",
            body={
                "base_tree": base_tree_sha,
                "tree": [
                    {
                        "path": entry.path,
                        "mode": entry.mode,
                        "type": entry.type,
                        "sha": entry.sha,
                    }
                    for entry in entries
                ],
            },
        )
        return self._parse_tree(response)

    async def build_commit_tree(
        self,
        owner: str,
        repo: str,
        files: list[GitFile],
        base_tree: Tree,
    ) -> Tree:
        """
        Turn file changes into blobs and a new tree on top of ``base_tree``.

        Blobs are created one at a time in the order given. If any blob
        creation fails the error propagates and no tree is created.

        Args:
            owner: Repository owner
            repo: Repository name
            files: Files to write
            base_tree: Tree the new tree is layered on

        Returns:
            The newly created tree
        """
        entries: list[TreeNode] = []
        for file in files:
            blob_sha = await self.create_blob(owner, repo, file)
            entries.append(
                TreeNode(path=file.file_path, sha=blob_sha, type="blob", mode=file.mode)
            )

        return await self.create_tree(owner, repo, entries, base_tree.sha)

    async def resolve_tree_at_path(
        self,
        owner: str,
        repo: str,
        commit_sha: str,
        path: str | tuple[str, ...],
    ) -> Tree:
        """
        Walk from a commit's root tree down to the tree at ``path``.

        Args:
            owner: Repository owner
            repo: Repository name
            commit_sha: Commit whose tree is walked
            path: Directory path, or its segments

        Returns:
            The tree at ``path`` (the root tree for an empty path)

        Raises:
            TreePathNotFoundError: If a segment is not a subtree of its parent
            UnsupportedError: If an intermediate tree comes back truncated
        """
        segments = split_tree_path(path) if isinstance(path, str) else path

        commit = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/git/commits/{commit_sha}",
        )
        tree = await self._get_complete_tree(owner, repo, commit["tree"]["sha"])

        for depth, segment in enumerate(segments):
            child = next(
                (
                    entry
                    for entry in tree.entries
                    if entry.type == "tree" and entry.path == segment
                ),
                None,
            )
            if child is None:
                raise TreePathNotFoundError("/".join(segments[: depth + 1]))
            tree = await self._get_complete_tree(owner, repo, child.sha)

        return tree

    async def expand_tree_recursive(self, owner: str, repo: str, tree_sha: str) -> Tree:
        """
        Get every entry below a tree in one call.

        Raises:
            UnsupportedError: If the provider truncated the listing. There is
                no paginated fallback, so no partial listing is returned.
        """
        tree = await self.get_tree(owner, repo, tree_sha, recursive=True)
        if tree.truncated:
            raise UnsupportedError(
                "The git repository is too large for the provider API. "
                f"Getting recursive tree '{tree_sha}' returned truncated results."
            )
        return tree

    async def get_files_for_commit(
        self, repo_uri: str, commit: str, path: str
    ) -> list[GitFile]:
        """
        Read every file below ``path`` at ``commit``.

        Blob contents are fetched concurrently. A single failed fetch fails
        the whole call; no partial listing is returned.

        Args:
            repo_uri: Repository URL
            commit: Commit sha
            path: Directory to read, relative to the repository root

        Returns:
            Files with paths prefixed by ``path`` and content as transmitted
            by the provider (normally base64)
        """
        segments = split_tree_path(path)
        prefix = "/".join(segments)
        identifier = require_repo_uri(repo_uri)
        owner, repo = identifier.owner, identifier.repo

        path_tree = await self.resolve_tree_at_path(owner, repo, commit, segments)
        recursive_tree = await self.expand_tree_recursive(owner, repo, path_tree.sha)

        semaphore = asyncio.Semaphore(self.max_concurrent_fetches)

        async def fetch(entry: TreeNode) -> GitFile:
            async with semaphore:
                blob = await self.get_blob(owner, repo, entry.sha)
            return GitFile(
                file_path=f"{prefix}/{entry.path}" if prefix else entry.path,
                content=blob.content,
                content_encoding=(
                    ENCODING_BASE64 if blob.encoding == ENCODING_BASE64 else ENCODING_UTF8
                ),
                mode=entry.mode,
            )

        blobs = [entry for entry in recursive_tree.entries if entry.type == "blob"]
        logger.info(
            f"Fetching {len(blobs)} files under '{prefix or '/'}' of "
            f"'{identifier.full_name}' at '{commit}'"
        )
        tasks = [asyncio.ensure_future(fetch(entry)) for entry in blobs]
        try:
            files = await asyncio.gather(*tasks)
        except BaseException:
            # Stop the remaining fetches before the error leaves this call
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return list(files)

    async def _get_complete_tree(self, owner: str, repo: str, tree_sha: str) -> Tree:
        tree = await self.get_tree(owner, repo, tree_sha)
        if tree.truncated:
            raise UnsupportedError(
                "The git repository is too large for the provider API. "
                f"Getting tree '{tree_sha}' returned truncated results."
            )
        return tree

    def _parse_tree(self, data: dict[str, Any]) -> Tree:
        """Parse tree data from API response."""
        return Tree(
            sha=data["sha"],
            entries=[
                TreeNode(
                    path=item["path"],
                    sha=item["sha"],
                    type=item["type"],
                    mode=item["mode"],
                    size=item.get("size"),
                )
                for item in data.get("tree", [])
            ],
            truncated=bool(data.get("truncated", False)),
        )
