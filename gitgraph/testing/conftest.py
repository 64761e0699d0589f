"""
Pytest plugin for gitgraph testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitgraph.testing.conftest"]
"""

from gitgraph.testing.fixtures import client, mock_api, repo_uri, sample_files

__all__ = ["mock_api", "client", "repo_uri", "sample_files"]
