"""One release run: resolve pending pull requests and sync the release PR."""

from __future__ import annotations

import logging

from release_pr.config import ReleaseConfig
from release_pr.git.repository import VersionControl
from release_pr.github.client import GitHubClient
from release_pr.logging import Severity
from release_pr.release.description import render_description
from release_pr.release.merge_set import MergeSetResolver
from release_pr.release.synchronizer import ReleasePullRequestSynchronizer

logger = logging.getLogger(__name__)


def run_release(
    *,
    config: ReleaseConfig,
    git: VersionControl,
    github: GitHubClient,
    synchronizer: ReleasePullRequestSynchronizer | None = None,
) -> int:
    """Run a full resolve-and-synchronize pass.

    Returns:
        0 when the release pull request was created or updated, 1 when there is
        nothing to release or no pull request reference is available afterwards.
    """

    pending = MergeSetResolver(git).resolve(config.production_ref, config.staging_ref)
    if not pending:
        logger.log(
            Severity.NOTICE,
            "No pull requests to be released",
            extra={"production": config.production_ref, "staging": config.staging_ref},
        )
        return 1

    # One request at a time, in pending-set order.
    pull_requests = [github.get_pull_request(number) for number in pending]
    description = render_description(pull_requests)

    synchronizer = synchronizer or ReleasePullRequestSynchronizer(github=github)
    result = synchronizer.synchronize(
        description=description,
        production=config.production_branch,
        staging=config.staging_branch,
    )
    if result is None:
        logger.error(
            "No release pull request found or created",
            extra={"repo": config.repository},
        )
        return 1

    pr = result.pull_request
    url = pr.html_url or config.location.web_url(f"pull/{pr.number}")
    logger.info(
        "Release pull request synchronized",
        extra={"action": result.action, "pull_number": pr.number, "url": url},
    )
    print(url)
    return 0
