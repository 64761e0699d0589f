"""gitgraph testing utilities.

Provides an in-memory fake of the provider API and pytest fixtures for
testing code that uses gitgraph.
"""

from gitgraph.testing.fixtures import SEED_FILES, create_git_file
from gitgraph.testing.mock import MockCall, MockFailure, MockGitHubAPI

__all__ = [
    "MockGitHubAPI",
    "MockCall",
    "MockFailure",
    "SEED_FILES",
    "create_git_file",
]
