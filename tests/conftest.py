from gitgraph.testing.fixtures import client, mock_api, repo_uri, sample_files  # noqa: F401
