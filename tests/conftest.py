"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import Mock

import pytest

from release_pr.config import ReleaseConfig
from release_pr.git.remote import RemoteLocation
from release_pr.git.repository import ConfigScope
from release_pr.github.client import GitHubClient, PullRequestRecord


class FakeGit:
    """In-memory stand-in for `GitRepository`."""

    def __init__(
        self,
        *,
        merges: list[str] | None = None,
        heads: list[str] | None = None,
        released: set[str] | None = None,
        config: dict[str, str] | None = None,
    ) -> None:
        self.merges = merges or []
        self.heads = heads or []
        self.released = released or set()
        self.config = dict(config or {})
        self.calls: list[tuple[str, ...]] = []

    def update_remote(self) -> None:
        self.calls.append(("update_remote",))

    def merge_commits(self, range_expr: str) -> list[str]:
        self.calls.append(("merge_commits", range_expr))
        return list(self.merges)

    def remote_heads(self, pattern: str) -> list[str]:
        self.calls.append(("remote_heads", pattern))
        return list(self.heads)

    def is_ancestor(self, commit: str, ref: str) -> bool:
        self.calls.append(("is_ancestor", commit, ref))
        return commit in self.released

    def read_config(self, key: str) -> str | None:
        return self.config.get(key)

    def write_config(self, key: str, value: str, scope: ConfigScope = ConfigScope.LOCAL) -> None:
        self.calls.append(("write_config", key, value, scope.value))
        self.config[key] = value

    def remote_url(self) -> str | None:
        return self.config.get("remote.origin.url")


def make_pr(
    number: int,
    title: str = "",
    *,
    assignee: str | None = None,
    head_ref: str = "feature",
    base_ref: str = "staging",
    body: str = "",
    html_url: str | None = None,
) -> PullRequestRecord:
    return PullRequestRecord(
        number=number,
        title=title or f"PR {number}",
        assignee=assignee,
        head_ref=head_ref,
        base_ref=base_ref,
        body=body,
        html_url=html_url,
    )


@pytest.fixture
def release_config() -> ReleaseConfig:
    return ReleaseConfig(location=RemoteLocation(host="github.com", repository="octo-org/octo-repo"))


@pytest.fixture
def mock_github() -> Mock:
    github = Mock(spec=GitHubClient)
    github.repository = "octo-org/octo-repo"
    return github


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """`configure_logging` replaces root handlers; undo it after each test."""

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
