"""Resolve which pull requests are merged into staging but not into production.

Pipeline:
    merge commits  -> merged feature tips (second parents)
    remote heads   -> heads whose commit is a merged tip
                   -> pull request numbers (malformed refs dropped)
                   -> drop heads already reachable from production
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from release_pr.git.repository import VersionControl

logger = logging.getLogger(__name__)

PULL_HEAD_REF_PATTERN = "refs/pull/*/head"
_PULL_HEAD_REF = re.compile(r"^refs/pull/(?P<number>\d+)/head$")


@dataclass(frozen=True, slots=True)
class MergeRecord:
    """Parents of a merge commit: mainline first, merged-in tip second."""

    mainline: str
    merged_tip: str


@dataclass(frozen=True, slots=True)
class RemoteHead:
    commit: str
    ref: str


def parse_merge_records(lines: Iterable[str]) -> list[MergeRecord]:
    records: list[MergeRecord] = []
    for line in lines:
        parents = line.split()
        if not parents:
            continue
        if len(parents) < 2:
            raise ValueError(f"Not a merge commit parent list: {line!r}")
        records.append(MergeRecord(mainline=parents[0], merged_tip=parents[1]))
    return records


def collect_merged_tips(records: Iterable[MergeRecord]) -> set[str]:
    return {record.merged_tip for record in records}


def parse_remote_heads(lines: Iterable[str]) -> list[RemoteHead]:
    heads: list[RemoteHead] = []
    for line in lines:
        fields = line.split()
        if len(fields) != 2:
            logger.warning("Ignoring unexpected ls-remote line", extra={"line": line})
            continue
        heads.append(RemoteHead(commit=fields[0], ref=fields[1]))
    return heads


def select_merged_heads(heads: Iterable[RemoteHead], tips: set[str]) -> list[RemoteHead]:
    return [head for head in heads if head.commit in tips]


def parse_pull_number(ref: str) -> int | None:
    """Return N for `refs/pull/N/head`, otherwise None."""

    match = _PULL_HEAD_REF.match(ref)
    if match is None:
        return None
    return int(match.group("number"))


def drop_malformed_refs(heads: Iterable[RemoteHead]) -> Iterator[tuple[int, RemoteHead]]:
    for head in heads:
        number = parse_pull_number(head.ref)
        if number is None:
            logger.warning("Invalid pull request ref", extra={"ref": head.ref})
            continue
        yield number, head


def drop_released(
    candidates: Iterable[tuple[int, RemoteHead]],
    *,
    production_ref: str,
    is_ancestor: Callable[[str, str], bool],
) -> Iterator[int]:
    for number, head in candidates:
        if is_ancestor(head.commit, production_ref):
            logger.debug(
                "Pull request already in production",
                extra={"pull_number": number, "commit": head.commit, "ref": production_ref},
            )
            continue
        yield number


class MergeSetResolver:
    """Computes the pending set for a production/staging pair of refs."""

    def __init__(self, git: VersionControl) -> None:
        self._git = git

    def resolve(self, production_ref: str, staging_ref: str) -> list[int]:
        """Return pull request numbers merged into `staging_ref` but not `production_ref`.

        Order follows `git ls-remote` output. An empty list means nothing to release.
        Git failures propagate unchanged.
        """

        records = parse_merge_records(self._git.merge_commits(f"{production_ref}..{staging_ref}"))
        tips = collect_merged_tips(records)
        logger.debug(
            "Merge commits collected",
            extra={"range": f"{production_ref}..{staging_ref}", "merges": len(records)},
        )
        if not tips:
            return []

        heads = parse_remote_heads(self._git.remote_heads(PULL_HEAD_REF_PATTERN))
        merged = select_merged_heads(heads, tips)
        pending = list(
            drop_released(
                drop_malformed_refs(merged),
                production_ref=production_ref,
                is_ancestor=self._git.is_ancestor,
            )
        )
        logger.info(
            "Pending pull requests resolved",
            extra={"production": production_ref, "staging": staging_ref, "pull_numbers": pending},
        )
        return pending
