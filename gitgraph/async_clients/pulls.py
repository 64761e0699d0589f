"""Async pull requests resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gitgraph.exceptions import GitGraphError
from gitgraph.logging import get_logger
from gitgraph.types.pulls import (
    Check,
    CheckState,
    MergeParameters,
    MergeResult,
    PullRequest,
    PullRequestCommit,
    PullRequestStatus,
)
from gitgraph.uri import pull_request_api_path, require_pull_request_uri, require_repo_uri

if TYPE_CHECKING:
    from gitgraph.async_clients.branches import AsyncBranchesClient
    from gitgraph.async_transport import AsyncHTTPTransport

logger = get_logger("pulls")

TITLE_TAG = "[gitgraph]"
DEFAULT_TITLE = f"{TITLE_TAG} Update files"
DEFAULT_DESCRIPTION = "This pull request was created by gitgraph."


def _quote_term(value: str) -> str:
    return quote(value, safe="/:")


def build_search_query(
    owner_and_repo: str,
    branch: str,
    status: PullRequestStatus,
    keyword: str | None = None,
    author: str | None = None,
) -> str:
    """
    Build the ``q`` value of an issue search for pull requests.

    Terms are joined with ``+`` (an encoded space), e.g.
    ``fix+repo:owner/repo+head:feature+type:pr+is:open+author:bot``.
    Values are percent-encoded, so ``+``, ``#`` or ``&`` inside a keyword or
    branch name cannot split a term or cut the query short.
    """
    query = ""
    if keyword:
        query += f"{_quote_term(keyword)}+"

    query += (
        f"repo:{_quote_term(owner_and_repo)}+head:{_quote_term(branch)}"
        f"+type:pr+is:{status.value}"
    )

    if author:
        query += f"+author:{_quote_term(author)}"
    return query


def _parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


class AsyncPullsClient:
    """Async client for pull request operations."""

    def __init__(
        self,
        transport: "AsyncHTTPTransport",
        branches: "AsyncBranchesClient",
    ) -> None:
        """
        Initialize the async pulls client.

        Args:
            transport: Async HTTP transport for making requests
            branches: Branch client used to delete merged source branches
        """
        self.transport = transport
        self.branches = branches

    async def create(
        self,
        repo_uri: str,
        base_branch: str,
        head_branch: str,
        title: str | None = None,
        description: str | None = None,
    ) -> str:
        """
        Create a pull request.

        Args:
            repo_uri: Repository URL
            base_branch: Branch to merge into
            head_branch: Branch containing changes
            title: Title, prefixed with the gitgraph tag (default: generic title)
            description: Body (default: generic description)

        Returns:
            API URL of the new pull request
        """
        identifier = require_repo_uri(repo_uri)
        return await self._create_or_update(
            "POST",
            f"/repos/{identifier.full_name}/pulls",
            base_branch,
            head_branch,
            title,
            description,
        )

    async def update(
        self,
        pull_request_uri: str,
        base_branch: str,
        head_branch: str,
        title: str | None = None,
        description: str | None = None,
    ) -> str:
        """
        Update an existing pull request with the same defaults as ``create``.

        Returns:
            API URL of the pull request
        """
        require_pull_request_uri(pull_request_uri)
        return await self._create_or_update(
            "PATCH",
            pull_request_api_path(pull_request_uri),
            base_branch,
            head_branch,
            title,
            description,
        )

    async def get(self, pull_request_uri: str) -> PullRequest:
        """Get pull request information."""
        response = await self._fetch(pull_request_uri)
        return self._parse_pull_request(response)

    async def get_status(self, pull_request_uri: str) -> PullRequestStatus:
        """
        Classify a pull request as open, closed or merged.

        A closed pull request is MERGED when the provider's ``merged`` flag is
        true. Any other or missing state yields ``PullRequestStatus.NONE``.
        """
        response = await self._fetch(pull_request_uri)
        return self._classify_status(response)

    async def get_repo(self, pull_request_uri: str) -> str:
        """Get the web URL of the repository the pull request targets."""
        response = await self._fetch(pull_request_uri)
        return response["base"]["repo"]["html_url"]

    async def get_source_branch(self, pull_request_uri: str) -> str:
        """Get the head branch name of a pull request."""
        response = await self._fetch(pull_request_uri)
        return response["head"]["ref"]

    async def get_commits(self, pull_request_uri: str) -> list[PullRequestCommit]:
        """List the commits of a pull request, oldest first."""
        identifier = require_pull_request_uri(pull_request_uri)
        response = await self.transport.request(
            method="GET",
            path=(
                f"/repos/{identifier.owner}/{identifier.repo}"
                f"/pulls/{identifier.number}/commits"
            ),
        )
        return [
            PullRequestCommit(
                author=((item.get("commit") or {}).get("author") or {}).get("name"),
                sha=item["sha"],
            )
            for item in response
        ]

    async def merge(
        self,
        pull_request_uri: str,
        parameters: MergeParameters | None = None,
    ) -> MergeResult:
        """
        Merge a pull request and optionally delete its source branch.

        The source branch is deleted only after a successful merge. If the
        deletion fails, the failure is logged and returned on the result;
        the merge itself still counts as successful.

        Args:
            pull_request_uri: Pull request API URL
            parameters: Merge options (default: merge commit, keep branch)

        Returns:
            MergeResult

        Raises:
            GitGraphError: If fetching or merging the pull request fails
        """
        parameters = parameters or MergeParameters()
        identifier = require_pull_request_uri(pull_request_uri)
        owner, repo = identifier.owner, identifier.repo

        pull_request = await self.get(pull_request_uri)

        body: dict[str, str] = {"merge_method": parameters.merge_method}
        if parameters.commit_to_merge:
            body["sha"] = parameters.commit_to_merge

        response = await self.transport.request(
            method="PUT",
            path=f"/repos/{owner}/{repo}/pulls/{identifier.number}/merge",
            body=body,
        )
        result = MergeResult(
            merged=bool(response.get("merged", True)),
            sha=response.get("sha"),
            message=response.get("message"),
            source_branch=pull_request.head_branch,
        )

        if parameters.delete_source_branch:
            try:
                await self.branches.delete_ref(owner, repo, pull_request.head_branch)
            except GitGraphError as e:
                logger.warning(
                    f"Merged pull request '{pull_request_uri}' but deleting source "
                    f"branch '{pull_request.head_branch}' failed: {e}"
                )
                result.branch_deletion_error = e
            else:
                result.branch_deleted = True

        return result

    async def search(
        self,
        repo_uri: str,
        branch: str,
        status: PullRequestStatus,
        keyword: str | None = None,
        author: str | None = None,
    ) -> list[int]:
        """
        Search pull requests by head branch and status.

        Returns:
            Numbers of the matching pull requests
        """
        identifier = require_repo_uri(repo_uri)
        query = build_search_query(identifier.full_name, branch, status, keyword, author)

        # The query is appended verbatim so "+" stays a term separator
        response = await self.transport.request(
            method="GET",
            path=f"/search/issues?q={query}",
        )
        return [int(item["number"]) for item in response.get("items", [])]

    async def get_checks(self, pull_request_uri: str) -> list[Check]:
        """
        Get the CI statuses of the latest commit of a pull request.

        Entries whose state is not recognised are kept as
        ``CheckState.UNKNOWN`` with the original string in ``raw_state``.
        """
        identifier = require_pull_request_uri(pull_request_uri)
        commits = await self.transport.request(
            method="GET",
            path=f"{pull_request_api_path(pull_request_uri)}/commits",
        )
        if not commits:
            return []
        last_commit_sha = commits[-1]["sha"]

        response = await self.transport.request(
            method="GET",
            path=(
                f"/repos/{identifier.owner}/{identifier.repo}"
                f"/commits/{last_commit_sha}/status"
            ),
        )

        checks: list[Check] = []
        for status in response.get("statuses", []):
            raw_state = status.get("state")
            state = CheckState.parse(raw_state)
            if state is CheckState.UNKNOWN:
                logger.warning(
                    f"Unrecognised check state '{raw_state}' for "
                    f"'{status.get('context')}' on '{last_commit_sha}'"
                )
            checks.append(
                Check(
                    state=state,
                    name=status.get("context", ""),
                    url=status.get("target_url"),
                    raw_state=raw_state,
                )
            )
        return checks

    async def _fetch(self, pull_request_uri: str) -> dict[str, Any]:
        require_pull_request_uri(pull_request_uri)
        return await self.transport.request(
            method="GET",
            path=pull_request_api_path(pull_request_uri),
        )

    async def _create_or_update(
        self,
        method: str,
        path: str,
        base_branch: str,
        head_branch: str,
        title: str | None,
        description: str | None,
    ) -> str:
        title = f"{TITLE_TAG} {title}" if title else DEFAULT_TITLE
        if description is None:
            description = DEFAULT_DESCRIPTION

        response = await self.transport.request(
            method=method,
            path=path,
            body={
                "title": title,
                "body": description,
                "head": head_branch,
                "base": base_branch,
            },
        )

        logger.info(f"Browser ready link for this PR is: {response.get('html_url')}")
        return response["url"]

    def _classify_status(self, data: dict[str, Any]) -> PullRequestStatus:
        status = PullRequestStatus.parse(data.get("state"))
        if status is PullRequestStatus.OPEN:
            return status
        if status is PullRequestStatus.CLOSED:
            if _parse_bool(data.get("merged")):
                return PullRequestStatus.MERGED
            return PullRequestStatus.CLOSED
        return PullRequestStatus.NONE

    def _parse_pull_request(self, data: dict[str, Any]) -> PullRequest:
        """Parse pull request data from API response."""
        head = data.get("head") or {}
        base = data.get("base") or {}
        return PullRequest(
            number=int(data["number"]),
            url=data.get("url", ""),
            html_url=data.get("html_url"),
            title=data.get("title", ""),
            description=data.get("body"),
            state=data.get("state", ""),
            merged=bool(_parse_bool(data.get("merged"))),
            head_branch=head.get("ref", ""),
            head_sha=head.get("sha"),
            base_branch=base.get("ref", ""),
            base_repo_url=(base.get("repo") or {}).get("html_url"),
        )
