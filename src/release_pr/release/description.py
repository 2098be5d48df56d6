"""Render the release pull request body."""

from __future__ import annotations

from collections.abc import Iterable

from release_pr.github.client import PullRequestRecord


def render_line(pr: PullRequestRecord) -> str:
    line = f"- [ ] #{pr.number} {pr.title}"
    if pr.assignee:
        line += f" @{pr.assignee}"
    return line


def render_description(pull_requests: Iterable[PullRequestRecord]) -> str:
    """One unchecked checklist item per pull request, newline separated.

    Output depends only on the given records and their order.
    """

    return "\n".join(render_line(pr) for pr in pull_requests)
