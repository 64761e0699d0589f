#!/usr/bin/env python3
"""
Basic gitgraph usage example.

Runs the full branch -> push -> pull request -> merge flow against the
in-memory provider fake, so no token or network access is needed.
Run with: python examples/basic_usage.py
"""

import asyncio
import logging

from gitgraph import (
    GitFile,
    GitGraphError,
    InvalidArgumentError,
    MergeParameters,
    PullRequestStatus,
    configure_logging,
    parse_pull_request_uri,
    parse_repo_uri,
)
from gitgraph.testing import MockGitHubAPI

print("=== gitgraph Basic Usage Example ===\n")

# 1. URL resolution
print("1. Resolving URLs...")
repo = parse_repo_uri("https://github.com/dotnet/runtime")
pr = parse_pull_request_uri("https://api.github.com/repos/dotnet/runtime/pulls/42")
print(f"   Repository: {repo.full_name}")
print(f"   Pull request: {pr.repository.full_name} #{pr.number}")
print(f"   Not a repository URL: {parse_repo_uri('https://github.com/dotnet')}")

# 2. Exception hierarchy
print("\n2. Testing exception classes...")
try:
    GitFile("logo.png", "....", content_encoding="latin-1")
except GitGraphError as e:
    print(f"   Caught {type(e).__name__}: {e}")
    assert isinstance(e, InvalidArgumentError)

print("\n   OK: Exception classes working\n")


async def main() -> None:
    api = MockGitHubAPI(owner="dotnet", repo="runtime")
    api.seed_branch("main", {"eng/Versions.props": "<Project />\n", "README.md": "# runtime\n"})

    async with api.client() as client:
        # 3. Branch and push
        print("3. Creating a branch and pushing files...")
        await client.branches.ensure_branch(api.repo_uri, "update-deps", "main")
        commit = await client.commits.push_files(
            [
                GitFile("eng/Versions.props", "<Project><Version>9.0.1</Version></Project>\n"),
                GitFile("eng/Version.Details.xml", "<Dependencies />\n"),
            ],
            api.repo_uri,
            "update-deps",
            "Update dependencies",
        )
        print(f"   New commit: {commit.sha[:12]} (parent {commit.parent_shas[0][:12]})")
        print(f"   Files now on branch: {api.list_files(commit.sha)}")

        # 4. Read a directory back
        print("\n4. Reading 'eng' back...")
        files = await client.trees.get_files_for_commit(api.repo_uri, commit.sha, "eng")
        for file in files:
            print(f"   {file.file_path} ({file.content_encoding}, mode {file.mode})")

        # 5. Pull request lifecycle
        print("\n5. Opening and merging a pull request...")
        pr_url = await client.pulls.create(
            api.repo_uri, "main", "update-deps", title="Update dependencies"
        )
        print(f"   Created: {pr_url}")
        found = await client.pulls.search(api.repo_uri, "update-deps", PullRequestStatus.OPEN)
        print(f"   Open pull requests for 'update-deps': {found}")

        result = await client.pulls.merge(
            pr_url, MergeParameters(squash_merge=True, delete_source_branch=True)
        )
        print(f"   Merged: {result.merged}, branch deleted: {result.branch_deleted}")
        print(f"   Status now: {(await client.pulls.get_status(pr_url)).value}")

    print(f"\n   Requests made: {len(api.calls)}")
    print("\n   OK: Engine flow working\n")


configure_logging(level=logging.WARNING)
asyncio.run(main())

print("=== All examples completed successfully! ===")
