"""Async repository contents client."""

import base64
from typing import TYPE_CHECKING

from gitgraph.exceptions import DependencyFileNotFoundError, UnsupportedError
from gitgraph.logging import get_logger
from gitgraph.types.git import TreeNode
from gitgraph.uri import require_repo_uri

if TYPE_CHECKING:
    from gitgraph.async_transport import AsyncHTTPTransport

logger = get_logger("git")


def decode_content(content: str) -> str:
    """
    Decode a base64 ``content`` field (which may contain line breaks) to text.

    Bytes that are not valid UTF-8 (binary files) become U+FFFD.
    """
    return base64.b64decode("".join(content.split())).decode("utf-8", errors="replace")


class AsyncContentsClient:
    """Async client for reading single files and tree listings."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async contents client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get_file_contents(self, file_path: str, repo_uri: str, ref: str) -> str:
        """
        Get the decoded text of a file.

        Args:
            file_path: Path of the file relative to the repository root
            repo_uri: Repository URL
            ref: Branch or commit to read from

        Returns:
            File content as text

        Raises:
            DependencyFileNotFoundError: If the file does not exist at ``ref``
        """
        identifier = require_repo_uri(repo_uri)
        logger.info(
            f"Getting the contents of file '{file_path}' from repo '{repo_uri}' "
            f"in branch '{ref}'..."
        )

        result = await self.transport.try_request(
            method="GET",
            path=f"/repos/{identifier.full_name}/contents/{file_path}",
            params={"ref": ref},
        )
        if result.is_not_found:
            raise DependencyFileNotFoundError(
                file_path,
                repo_uri,
                ref,
                result.error.request_id if result.error else None,
            )
        response = result.unwrap()

        logger.info(
            f"Getting the contents of file '{file_path}' from repo '{repo_uri}' "
            f"in branch '{ref}' succeeded!"
        )
        return decode_content(response["content"])

    async def file_exists(self, repo_uri: str, file_path: str, ref: str) -> bool:
        """Return whether ``file_path`` exists at ``ref``; a 404 is reported as False."""
        identifier = require_repo_uri(repo_uri)
        result = await self.transport.try_request(
            method="GET",
            path=f"/repos/{identifier.full_name}/contents/{file_path}",
            params={"ref": ref},
        )
        if result.is_not_found:
            return False
        response = result.unwrap()
        return isinstance(response, dict) and bool(response.get("sha"))

    async def get_tree_items(self, repo_uri: str, commit: str) -> list[TreeNode]:
        """List every entry of the tree at ``commit``, recursively."""
        identifier = require_repo_uri(repo_uri)
        response = await self.transport.request(
            method="GET",
            path=f"/repos/{identifier.full_name}/commits/{commit}",
        )
        tree_url = response["commit"]["tree"]["url"]

        tree = await self.transport.request(
            method="GET",
            path=tree_url,
            params={"recursive": "1"},
        )
        if tree.get("truncated"):
            raise UnsupportedError(
                "The git repository is too large for the provider API. "
                f"Listing the tree of commit '{commit}' returned truncated results."
            )
        return [
            TreeNode(
                path=item["path"],
                sha=item["sha"],
                type=item["type"],
                mode=item["mode"],
                size=item.get("size"),
            )
            for item in tree.get("tree", [])
        ]
