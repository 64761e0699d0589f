"""
Repository and pull request URL resolution.

Turns human-facing URLs into the identifiers the provider API is addressed
by. The ``parse_*`` functions never raise on a malformed URL: a shape that
does not match yields ``None`` and callers decide what that means. The
``require_*`` variants are for operations that cannot proceed without one.
"""

import re
from urllib.parse import urlsplit

from gitgraph.exceptions import InvalidArgumentError
from gitgraph.types.git import PullRequestIdentifier, RepositoryIdentifier

REPO_URI_PATTERN = re.compile(r"^/(?P<owner>[^/]+)/(?P<repo>[^/]+)/?$")
PULL_REQUEST_URI_PATTERN = re.compile(
    r"^/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/pulls/(?P<id>\d+)$"
)


def _uri_path(uri: str) -> str:
    # Bare "host/owner/repo" strings are treated like URLs without a scheme
    if "://" not in uri:
        uri = "https://" + uri
    try:
        return urlsplit(uri).path
    except ValueError:
        # Malformed netloc, e.g. an unbalanced IPv6 bracket
        return ""


def parse_repo_uri(uri: str) -> RepositoryIdentifier | None:
    """
    Extract (owner, repo) from a repository URL such as
    ``https://github.com/owner/repo``.

    Returns:
        RepositoryIdentifier, or None when the path is not ``/{owner}/{repo}[/]``
    """
    match = REPO_URI_PATTERN.match(_uri_path(uri))
    if match is None:
        return None
    return RepositoryIdentifier(owner=match.group("owner"), repo=match.group("repo"))


def parse_pull_request_uri(uri: str) -> PullRequestIdentifier | None:
    """
    Extract (owner, repo, number) from a pull request API URL such as
    ``https://api.github.com/repos/owner/repo/pulls/42``.

    Returns:
        PullRequestIdentifier, or None when the path does not match
    """
    match = PULL_REQUEST_URI_PATTERN.match(_uri_path(uri))
    if match is None:
        return None
    return PullRequestIdentifier(
        owner=match.group("owner"),
        repo=match.group("repo"),
        number=int(match.group("id")),
    )


def owner_and_repo_from_repo_uri(uri: str) -> str | None:
    """Return ``"owner/repo"`` for a repository URL, or None."""
    identifier = parse_repo_uri(uri)
    if identifier is None:
        return None
    return identifier.full_name


def pull_request_api_path(uri: str) -> str:
    """Return the path and query of a pull request API URL."""
    parts = urlsplit(uri)
    if parts.query:
        return f"{parts.path}?{parts.query}"
    return parts.path


def require_repo_uri(uri: str) -> RepositoryIdentifier:
    """Like ``parse_repo_uri`` but raise InvalidArgumentError on no match."""
    identifier = parse_repo_uri(uri)
    if identifier is None:
        raise InvalidArgumentError(f"'{uri}' is not a valid repository URL")
    return identifier


def require_pull_request_uri(uri: str) -> PullRequestIdentifier:
    """Like ``parse_pull_request_uri`` but raise InvalidArgumentError on no match."""
    identifier = parse_pull_request_uri(uri)
    if identifier is None:
        raise InvalidArgumentError(f"'{uri}' is not a valid pull request URL")
    return identifier
