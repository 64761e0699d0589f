"""
Property-based tests for repository and pull request URL resolution.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gitgraph.exceptions import InvalidArgumentError
from gitgraph.uri import (
    owner_and_repo_from_repo_uri,
    parse_pull_request_uri,
    parse_repo_uri,
    pull_request_api_path,
    require_pull_request_uri,
    require_repo_uri,
)

name_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="-_."),
    min_size=1,
    max_size=40,
).filter(lambda s: s not in (".", ".."))

host_strategy = st.sampled_from(["github.com", "github.example.com", "api.github.com"])


@given(host=host_strategy, owner=name_strategy, repo=name_strategy, trailing=st.booleans())
@settings(max_examples=100)
def test_repo_uri_round_trips_owner_and_repo(
    host: str, owner: str, repo: str, trailing: bool
) -> None:
    """
    Any ``https://host/owner/repo[/]`` resolves to exactly (owner, repo).
    """
    uri = f"https://{host}/{owner}/{repo}{'/' if trailing else ''}"

    identifier = parse_repo_uri(uri)

    assert identifier is not None
    assert identifier.owner == owner
    assert identifier.repo == repo
    assert owner_and_repo_from_repo_uri(uri) == f"{owner}/{repo}"


@given(owner=name_strategy, repo=name_strategy, extra=name_strategy)
@settings(max_examples=100)
def test_repo_uri_with_extra_segment_does_not_resolve(owner: str, repo: str, extra: str) -> None:
    """Paths deeper than two segments are not repository URLs."""
    uri = f"https://github.com/{owner}/{repo}/{extra}"

    assert parse_repo_uri(uri) is None
    assert owner_and_repo_from_repo_uri(uri) is None


@given(owner=name_strategy, repo=name_strategy, number=st.integers(min_value=0, max_value=10**9))
@settings(max_examples=100)
def test_pull_request_uri_number_equals_literal(owner: str, repo: str, number: int) -> None:
    """The resolved number equals the numeric literal in the URL."""
    uri = f"https://api.github.com/repos/{owner}/{repo}/pulls/{number}"

    identifier = parse_pull_request_uri(uri)

    assert identifier is not None
    assert (identifier.owner, identifier.repo, identifier.number) == (owner, repo, number)
    assert identifier.repository.full_name == f"{owner}/{repo}"


@given(text=st.text(max_size=80))
@settings(max_examples=100)
def test_parsers_never_raise(text: str) -> None:
    """Arbitrary input yields an identifier or None, never an exception."""
    parse_repo_uri(text)
    parse_pull_request_uri(text)
    owner_and_repo_from_repo_uri(text)


def test_pull_request_uri_rejects_non_numeric_id() -> None:
    assert parse_pull_request_uri("https://api.github.com/repos/o/r/pulls/abc") is None


def test_pull_request_uri_rejects_web_url() -> None:
    assert parse_pull_request_uri("https://github.com/o/r/pull/12") is None


def test_repo_uri_without_scheme() -> None:
    identifier = parse_repo_uri("github.com/dotnet/runtime")

    assert identifier is not None
    assert identifier.full_name == "dotnet/runtime"


def test_pull_request_api_path_keeps_query() -> None:
    uri = "https://api.github.com/repos/o/r/pulls/3?per_page=1"

    assert pull_request_api_path(uri) == "/repos/o/r/pulls/3?per_page=1"
    assert pull_request_api_path("https://api.github.com/repos/o/r/pulls/3") == "/repos/o/r/pulls/3"


def test_require_helpers_raise_invalid_argument() -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        require_repo_uri("https://github.com/only-owner")
    assert exc_info.value.code == "INVALID_ARGUMENT"

    with pytest.raises(InvalidArgumentError):
        require_pull_request_uri("https://github.com/o/r")
