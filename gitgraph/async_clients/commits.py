"""Async commit client.

Design notes:
    ``push_files`` is five dependent round-trips (head sha, head commit, base
    tree, new tree, new commit) followed by the ref update. It is not
    transactional: objects created before a failure are left for the
    provider to garbage-collect, and the branch only moves in the last step.
"""

from typing import TYPE_CHECKING, Any

from gitgraph.logging import get_logger
from gitgraph.types.git import BranchRef, CommitRecord, GitFile
from gitgraph.uri import require_repo_uri

if TYPE_CHECKING:
    from gitgraph.async_clients.branches import AsyncBranchesClient
    from gitgraph.async_clients.trees import AsyncTreesClient
    from gitgraph.async_transport import AsyncHTTPTransport

logger = get_logger("git")


class AsyncCommitsClient:
    """Async client for commit objects and multi-file pushes."""

    def __init__(
        self,
        transport: "AsyncHTTPTransport",
        trees: "AsyncTreesClient",
        branches: "AsyncBranchesClient",
    ) -> None:
        self.transport = transport
        self.trees = trees
        self.branches = branches

    async def get_commit(self, owner: str, repo: str, sha: str) -> CommitRecord:
        """Get a commit object."""
        response = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/git/commits/{sha}",
        )
        return self._parse_commit(response)

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree_sha: str,
        parent_sha: str,
    ) -> CommitRecord:
        """Create a commit with exactly one parent."""
        response = await self.transport.request(
            method="POST",
            path=f"/repos/{owner}/{repo}/git/commits",
            body={"message": message, "tree": tree_sha, "parents": [parent_sha]},
        )
        return self._parse_commit(response)

    async def push_files(
        self,
        files: list[GitFile],
        repo_uri: str,
        branch: str,
        commit_message: str,
    ) -> CommitRecord:
        """
        Commit ``files`` on top of ``branch`` and move the branch to the new commit.

        Args:
            files: Files to create or update
            repo_uri: Repository URL
            branch: Branch to push to
            commit_message: Message of the new commit

        Returns:
            The new commit

        Raises:
            GitGraphError: From whichever step failed. If the ref update
                fails the branch is unchanged and the whole call must be
                retried, since the branch head may have moved.
        """
        identifier = require_repo_uri(repo_uri)
        owner, repo = identifier.owner, identifier.repo
        logger.info(f"Pushing {len(files)} files to '{branch}' of '{repo_uri}'")

        base_commit_sha = await self.branches.get_last_commit_sha(repo_uri, branch)
        base_commit = await self.get_commit(owner, repo, base_commit_sha)
        base_tree = await self.trees.get_tree(owner, repo, base_commit.tree_sha)
        new_tree = await self.trees.build_commit_tree(owner, repo, files, base_tree)
        new_commit = await self.create_commit(
            owner, repo, commit_message, new_tree.sha, base_commit.sha
        )
        await self.branches.update_ref(
            owner, repo, BranchRef(name=branch, target_sha=new_commit.sha)
        )

        logger.info(f"Pushed commit '{new_commit.sha}' to '{branch}' of '{repo_uri}'")
        return new_commit

    def _parse_commit(self, data: dict[str, Any]) -> CommitRecord:
        """Parse commit data from API response."""
        return CommitRecord(
            sha=data["sha"],
            tree_sha=data["tree"]["sha"],
            parent_shas=[parent["sha"] for parent in data.get("parents", [])],
            message=data.get("message"),
        )
