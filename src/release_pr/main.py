"""CLI entrypoint.

A single invocation performs the full run: refresh the remote, resolve pending
pull requests and create or update the release pull request.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from release_pr import __version__
from release_pr.config import ReleasePrSettings, resolve_release_config
from release_pr.git.repository import GitRepository
from release_pr.github.client import GitHubClient
from release_pr.github.tokens import (
    FirstAvailableTokenProvider,
    InteractivePromptTokenProvider,
    MissingTokenError,
    StaticTokenProvider,
    StoredTokenProvider,
)
from release_pr.logging import configure_logging
from release_pr.release.runner import run_release

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-pr",
        description=(
            "Create or update the staging -> production pull request listing "
            "every pull request merged into staging but not yet released"
        ),
    )
    parser.add_argument("--version", action="version", version=f"release-pr {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    build_parser().parse_args(argv)

    try:
        settings = ReleasePrSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_threshold)

    try:
        git = GitRepository(remote=settings.remote)
        git.update_remote()
        config = resolve_release_config(git, remote=settings.remote)
        logger.debug(
            "Release configuration resolved",
            extra={
                "repo": config.repository,
                "api_base_url": config.api_base_url,
                "production": config.production_branch,
                "staging": config.staging_branch,
            },
        )

        token = FirstAvailableTokenProvider(
            StaticTokenProvider(settings.github_token),
            StoredTokenProvider(git),
            InteractivePromptTokenProvider(git, location=config.location),
        ).get_token()

        github = GitHubClient(
            token=token,
            repository=config.repository,
            base_url=config.api_base_url,
            verify=config.verify_ssl,
        )
        try:
            return run_release(config=config, git=git, github=github)
        finally:
            github.close()

    except MissingTokenError as e:
        logger.error(str(e))
        return 1

    except Exception:
        logger.exception("Release run failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
