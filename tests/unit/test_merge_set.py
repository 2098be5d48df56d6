"""Unit tests for pending pull request resolution."""

from __future__ import annotations

import logging

import pytest

from release_pr.git.repository import GitCommandError
from release_pr.release.merge_set import (
    MergeRecord,
    MergeSetResolver,
    RemoteHead,
    collect_merged_tips,
    drop_malformed_refs,
    drop_released,
    parse_merge_records,
    parse_pull_number,
    parse_remote_heads,
    select_merged_heads,
)
from tests.conftest import FakeGit


def test_parse_pull_number() -> None:
    assert parse_pull_number("refs/pull/42/head") == 42
    assert parse_pull_number("refs/pull/abc/head") is None
    assert parse_pull_number("refs/pull/42/merge") is None
    assert parse_pull_number("refs/heads/staging") is None


def test_every_merge_record_contributes_its_second_parent() -> None:
    records = parse_merge_records(["m1 t1", "", "m2 t2", "m3 t3 t4"])

    assert records == [
        MergeRecord(mainline="m1", merged_tip="t1"),
        MergeRecord(mainline="m2", merged_tip="t2"),
        MergeRecord(mainline="m3", merged_tip="t3"),
    ]
    assert collect_merged_tips(records) == {"t1", "t2", "t3"}


def test_single_parent_line_is_rejected() -> None:
    with pytest.raises(ValueError):
        parse_merge_records(["abc123"])


def test_select_merged_heads_preserves_remote_order() -> None:
    heads = parse_remote_heads(
        ["c3\trefs/pull/3/head", "c1\trefs/pull/1/head", "c2\trefs/pull/2/head"]
    )

    selected = select_merged_heads(heads, {"c1", "c3"})

    assert [h.ref for h in selected] == ["refs/pull/3/head", "refs/pull/1/head"]


def test_malformed_ref_is_dropped_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    heads = [RemoteHead("c1", "refs/pull/abc/head"), RemoteHead("c2", "refs/pull/42/head")]

    with caplog.at_level(logging.WARNING):
        numbers = [number for number, _ in drop_malformed_refs(heads)]

    assert numbers == [42]
    assert any(r.getMessage() == "Invalid pull request ref" for r in caplog.records)


def test_unexpected_ls_remote_line_is_skipped_with_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        heads = parse_remote_heads(
            ["c1\trefs/pull/1/head", "garbage", "c2 refs/pull/2/head extra"]
        )

    assert heads == [RemoteHead("c1", "refs/pull/1/head")]
    warnings = [
        r for r in caplog.records if r.getMessage() == "Ignoring unexpected ls-remote line"
    ]
    assert len(warnings) == 2


def test_drop_released_excludes_ancestors_of_production() -> None:
    candidates = [
        (7, RemoteHead("c7", "refs/pull/7/head")),
        (8, RemoteHead("c8", "refs/pull/8/head")),
    ]

    kept = list(
        drop_released(
            candidates,
            production_ref="origin/master",
            is_ancestor=lambda commit, ref: commit == "c7",
        )
    )

    assert kept == [8]


def test_no_merge_commits_yields_empty_set() -> None:
    git = FakeGit(merges=[], heads=["abc123\trefs/pull/7/head"])

    assert MergeSetResolver(git).resolve("origin/master", "origin/staging") == []
    assert ("merge_commits", "origin/master..origin/staging") in git.calls
    assert not any(call[0] == "remote_heads" for call in git.calls)


def test_single_merged_pull_request_is_pending() -> None:
    git = FakeGit(merges=["m1 abc123"], heads=["abc123\trefs/pull/7/head"])

    assert MergeSetResolver(git).resolve("origin/master", "origin/staging") == [7]
    assert ("remote_heads", "refs/pull/*/head") in git.calls
    assert ("is_ancestor", "abc123", "origin/master") in git.calls


def test_pull_request_already_in_production_is_excluded() -> None:
    git = FakeGit(
        merges=["m1 abc123"],
        heads=["abc123\trefs/pull/7/head"],
        released={"abc123"},
    )

    assert MergeSetResolver(git).resolve("origin/master", "origin/staging") == []


def test_unmerged_and_malformed_heads_do_not_abort() -> None:
    git = FakeGit(
        merges=["m1 aaa", "m2 bbb", "m3 ccc"],
        heads=[
            "zzz\trefs/pull/1/head",
            "aaa\trefs/pull/abc/head",
            "bbb\trefs/pull/8/head",
            "ccc\trefs/pull/7/head",
        ],
    )

    assert MergeSetResolver(git).resolve("origin/master", "origin/staging") == [8, 7]


def test_git_failure_propagates() -> None:
    class FailingGit(FakeGit):
        def merge_commits(self, range_expr: str) -> list[str]:
            raise GitCommandError(["git", "log"], 128, "fatal: bad revision")

    with pytest.raises(GitCommandError, match="bad revision"):
        MergeSetResolver(FailingGit()).resolve("origin/master", "origin/staging")
