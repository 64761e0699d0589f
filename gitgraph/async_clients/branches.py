"""Async branch and ref client."""

from typing import TYPE_CHECKING

from gitgraph.exceptions import NotFoundError
from gitgraph.logging import get_logger
from gitgraph.transport import ResultStatus
from gitgraph.types.git import BranchRef
from gitgraph.uri import require_repo_uri

if TYPE_CHECKING:
    from gitgraph.async_transport import AsyncHTTPTransport

logger = get_logger("git")


class AsyncBranchesClient:
    """Async client for branch refs."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async branches client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get_last_commit_sha(self, repo_uri: str, branch: str) -> str:
        """
        Get the sha of the latest commit on a branch.

        Raises:
            InvalidArgumentError: If ``repo_uri`` is not a repository URL
            NotFoundError: If the branch or repository does not exist
        """
        identifier = require_repo_uri(repo_uri)
        return await self._head_sha(identifier.owner, identifier.repo, branch)

    async def branch_exists(self, repo_uri: str, branch: str) -> bool:
        """Return whether ``branch`` exists; a 404 is reported as False."""
        identifier = require_repo_uri(repo_uri)
        result = await self.transport.try_request(
            method="GET",
            path=f"/repos/{identifier.full_name}/branches/{branch}",
        )
        if result.is_not_found:
            return False
        result.unwrap()
        return True

    async def create_ref(self, owner: str, repo: str, ref: BranchRef) -> None:
        """Create ``refs/heads/<name>`` pointing at ``ref.target_sha``."""
        await self.transport.request(
            method="POST",
            path=f"/repos/{owner}/{repo}/git/refs",
            body={"ref": ref.ref, "sha": ref.target_sha},
        )

    async def update_ref(self, owner: str, repo: str, ref: BranchRef) -> None:
        """Move an existing branch ref; ``ref.force`` allows non fast-forward moves."""
        await self.transport.request(
            method="PATCH",
            path=f"/repos/{owner}/{repo}/git/refs/heads/{ref.name}",
            body={"sha": ref.target_sha, "force": ref.force},
        )

    async def delete_ref(self, owner: str, repo: str, branch: str) -> None:
        """Delete ``refs/heads/<branch>``."""
        await self.transport.request(
            method="DELETE",
            path=f"/repos/{owner}/{repo}/git/refs/heads/{branch}",
        )

    async def ensure_branch(
        self, repo_uri: str, new_branch: str, base_branch: str
    ) -> BranchRef:
        """
        Point ``new_branch`` at the head of ``base_branch``.

        An existing branch is force-updated; a missing one is created. Both
        end with the branch at the base head sha, fetched once up front.

        Args:
            repo_uri: Repository URL
            new_branch: Branch to create or reset
            base_branch: Branch whose head commit is used

        Returns:
            The resulting branch ref

        Raises:
            GitGraphError: If the existence check fails with anything but 404,
                or if the create/update call fails
        """
        identifier = require_repo_uri(repo_uri)
        owner, repo = identifier.owner, identifier.repo
        logger.info(
            f"Verifying if '{new_branch}' branch exists in repo '{repo_uri}'. "
            "If not, it will be created..."
        )

        latest_sha = await self._head_sha(owner, repo, base_branch)
        branch_ref = BranchRef(name=new_branch, target_sha=latest_sha)

        result = await self.transport.try_request(
            method="GET",
            path=f"/repos/{owner}/{repo}/branches/{new_branch}",
        )

        if result.status is ResultStatus.OK:
            branch_ref.force = True
            await self.update_ref(owner, repo, branch_ref)
            logger.info(f"Branch '{new_branch}' exists; reset to '{latest_sha}'.")
        elif result.status is ResultStatus.NOT_FOUND:
            logger.info(f"'{new_branch}' branch doesn't exist. Creating it...")
            await self.create_ref(owner, repo, branch_ref)
            logger.info(f"Branch '{new_branch}' created in repo '{repo_uri}'!")
        else:
            logger.error(
                f"Checking if '{new_branch}' branch existed in repo '{repo_uri}' "
                f"failed with '{result.error}'"
            )
            result.unwrap()

        return branch_ref

    async def _head_sha(self, owner: str, repo: str, branch: str) -> str:
        response = await self.transport.request(
            method="GET",
            path=f"/repos/{owner}/{repo}/commits/{branch}",
        )
        sha = response.get("sha") if isinstance(response, dict) else None
        if not sha:
            raise NotFoundError(
                "NO_COMMITS",
                f"No commits found in branch '{branch}' of repo '{owner}/{repo}'!",
            )
        return sha
