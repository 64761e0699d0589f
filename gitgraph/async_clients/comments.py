"""Async pull request comments client."""

from typing import TYPE_CHECKING

from gitgraph.exceptions import InvalidArgumentError
from gitgraph.uri import require_pull_request_uri

if TYPE_CHECKING:
    from gitgraph.async_transport import AsyncHTTPTransport


class AsyncCommentsClient:
    """Async client for conversation comments on pull requests."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async comments client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def create(self, pull_request_uri: str, message: str) -> str:
        """
        Add a comment to a pull request.

        Returns:
            The provider-assigned comment id, as a string
        """
        identifier = require_pull_request_uri(pull_request_uri)
        response = await self.transport.request(
            method="POST",
            path=(
                f"/repos/{identifier.owner}/{identifier.repo}"
                f"/issues/{identifier.number}/comments"
            ),
            body={"body": message},
        )
        return str(response["id"])

    async def update(self, pull_request_uri: str, comment_id: str, message: str) -> None:
        """
        Replace the text of an existing comment.

        Raises:
            InvalidArgumentError: If ``comment_id`` is not an integer
        """
        identifier = require_pull_request_uri(pull_request_uri)
        try:
            comment_id_value = int(comment_id)
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                f"The comment id '{comment_id}' is in an invalid format"
            ) from None

        await self.transport.request(
            method="PATCH",
            path=(
                f"/repos/{identifier.owner}/{identifier.repo}"
                f"/issues/comments/{comment_id_value}"
            ),
            body={"body": message},
        )
