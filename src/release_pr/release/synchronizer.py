"""Create or update the single `staging -> production` release pull request."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from release_pr.github.client import GitHubClient, PullRequestRecord

logger = logging.getLogger(__name__)

SyncAction = Literal["created", "updated"]


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True, slots=True)
class SyncResult:
    action: SyncAction
    pull_request: PullRequestRecord
    body_changed: bool


def release_title(now: datetime) -> str:
    return f"Release {now:%Y-%m-%d %H:%M:%S %z}"


def find_release_pull_request(
    pull_requests: Iterable[PullRequestRecord], *, staging: str, production: str
) -> PullRequestRecord | None:
    """Return the open pull request from `staging` into `production`, if any.

    Several matches should not exist; when they do, the lowest number wins so the
    choice does not depend on API listing order.
    """

    matches = [
        pr for pr in pull_requests if pr.head_ref == staging and pr.base_ref == production
    ]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "Multiple release pull requests are open; using the oldest",
            extra={"pull_numbers": sorted(pr.number for pr in matches)},
        )
    return min(matches, key=lambda pr: pr.number)


class ReleasePullRequestSynchronizer:
    """Brings the release pull request body in line with a rendered description.

    Performs at most one mutating API call per `synchronize` call.
    """

    def __init__(
        self, *, github: GitHubClient, now: Callable[[], datetime] = _local_now
    ) -> None:
        self._github = github
        self._now = now

    def synchronize(
        self, *, description: str, production: str, staging: str
    ) -> SyncResult | None:
        existing = find_release_pull_request(
            self._github.list_open_pull_requests(), staging=staging, production=production
        )

        if existing is not None:
            body_changed = existing.body != description
            updated = self._github.update_pull_request_body(existing.number, description)
            logger.info(
                "Release pull request updated",
                extra={"pull_number": existing.number, "body_changed": body_changed},
            )
            return SyncResult(action="updated", pull_request=updated, body_changed=body_changed)

        created = self._github.create_pull_request(
            title=release_title(self._now()),
            body=description,
            head=staging,
            base=production,
        )
        if created is None:
            return None
        logger.info("Release pull request created", extra={"pull_number": created.number})
        return SyncResult(action="created", pull_request=created, body_changed=True)
