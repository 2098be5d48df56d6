"""Unit tests for release description rendering."""

from __future__ import annotations

from release_pr.release.description import render_description
from tests.conftest import make_pr


def test_single_line_without_assignee() -> None:
    assert render_description([make_pr(7, "Add login")]) == "- [ ] #7 Add login"


def test_assignee_is_mentioned() -> None:
    assert render_description([make_pr(7, "Add login", assignee="octocat")]) == (
        "- [ ] #7 Add login @octocat"
    )


def test_lines_follow_input_order_without_trailing_newline() -> None:
    body = render_description([make_pr(7, "First"), make_pr(8, "Second", assignee="hubot")])

    assert body == "- [ ] #7 First\n- [ ] #8 Second @hubot"
    assert not body.endswith("\n")


def test_empty_list_renders_empty_string() -> None:
    assert render_description([]) == ""


def test_rendering_is_deterministic() -> None:
    prs = [make_pr(8, "B"), make_pr(7, "A", assignee="x")]

    assert render_description(prs) == render_description(list(prs))
    assert render_description(iter(prs)) == render_description(prs)
