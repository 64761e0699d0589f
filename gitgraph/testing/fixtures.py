"""
Pytest fixtures for gitgraph testing.

Provides a seeded fake provider API, a client wired to it, and sample
file changes.
"""

from collections.abc import Generator

import pytest

from gitgraph.async_client import AsyncGitGraphClient
from gitgraph.testing.mock import MockGitHubAPI
from gitgraph.types.git import ENCODING_BASE64, GitFile

SEED_FILES: dict[str, str | bytes] = {
    "README.md": "# sample\n",
    "eng/Versions.props": "<Project />\n",
    "eng/common/build.sh": "#!/bin/sh\necho build\n",
}


def create_git_file(
    file_path: str = "eng/Version.Details.xml",
    content: str = "<Dependencies />\n",
    content_encoding: str = "utf-8",
    mode: str = "100644",
) -> GitFile:
    """Create a GitFile with sensible defaults."""
    return GitFile(
        file_path=file_path,
        content=content,
        content_encoding=content_encoding,
        mode=mode,
    )


@pytest.fixture
def mock_api() -> Generator[MockGitHubAPI, None, None]:
    """
    Provide a MockGitHubAPI whose ``main`` branch holds ``SEED_FILES``.

    Example:
        ```python
        async def test_push(mock_api, client):
            await client.commits.push_files(files, mock_api.repo_uri, "main", "msg")
            assert mock_api.calls_to("PATCH", "/git/refs/heads/main")
        ```
    """
    api = MockGitHubAPI()
    api.seed_branch("main", SEED_FILES)
    yield api
    api.reset()


@pytest.fixture
def client(mock_api: MockGitHubAPI) -> AsyncGitGraphClient:
    """Provide an AsyncGitGraphClient talking to ``mock_api``."""
    return mock_api.client()


@pytest.fixture
def repo_uri(mock_api: MockGitHubAPI) -> str:
    """Provide the web URI of the fake repository."""
    return mock_api.repo_uri


@pytest.fixture
def sample_files() -> list[GitFile]:
    """Provide a text and a base64 file change."""
    return [
        create_git_file(),
        create_git_file(
            file_path="eng/common/logo.png",
            content="iVBORw0KGgo=",
            content_encoding=ENCODING_BASE64,
        ),
    ]
