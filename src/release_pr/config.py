"""Configuration for release runs.

Process settings are loaded from:
- environment variables
- and a local `.env` file (if present)

Per-project settings (branch names, access token) live in git config under the
`release-pr.*` namespace and are resolved once into a :class:`ReleaseConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from release_pr.git.remote import RemoteLocation, RemoteUrlError, parse_remote_url
from release_pr.git.repository import VersionControl
from release_pr.logging import Severity

PRODUCTION_BRANCH_KEY = "release-pr.branch.production"
STAGING_BRANCH_KEY = "release-pr.branch.staging"
DEFAULT_PRODUCTION_BRANCH = "master"
DEFAULT_STAGING_BRANCH = "staging"


class ReleasePrSettings(BaseSettings):
    """Process-level settings.

    Environment variables:
    - RELEASE_PR_DEBUG  (optional) enable trace/debug output
    - LOG_LEVEL         (optional)
    - RELEASE_PR_REMOTE (optional)
    - RELEASE_PR_TOKEN  (optional) overrides the token stored in git config

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ReleasePrSettings(_env_file=path_to_env)`.
    """

    debug: bool = Field(
        default=False,
        validation_alias="RELEASE_PR_DEBUG",
        description="Enable trace/debug-level log output",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level when debug is off",
    )
    remote: str = Field(
        default="origin",
        min_length=1,
        validation_alias="RELEASE_PR_REMOTE",
        description="Git remote hosting the production and staging branches",
    )
    github_token: str | None = Field(
        default=None,
        validation_alias="RELEASE_PR_TOKEN",
        description="GitHub token; takes precedence over git config",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        return Severity.parse(value).name

    @property
    def log_threshold(self) -> Severity:
        if self.debug:
            return Severity.TRACE
        return Severity.parse(self.log_level)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Everything a release run needs, resolved once at startup."""

    location: RemoteLocation
    remote: str = "origin"
    production_branch: str = DEFAULT_PRODUCTION_BRANCH
    staging_branch: str = DEFAULT_STAGING_BRANCH

    @property
    def repository(self) -> str:
        return self.location.repository

    @property
    def api_base_url(self) -> str:
        return self.location.api_base_url

    @property
    def verify_ssl(self) -> bool:
        return self.location.verify_ssl

    @property
    def production_ref(self) -> str:
        return f"{self.remote}/{self.production_branch}"

    @property
    def staging_ref(self) -> str:
        return f"{self.remote}/{self.staging_branch}"


def resolve_release_config(git: VersionControl, *, remote: str = "origin") -> ReleaseConfig:
    """Build a :class:`ReleaseConfig` from git config.

    Raises:
        RemoteUrlError: if the remote has no URL or it is not a GitHub-style URL.
    """

    url = git.remote_url()
    if not url:
        raise RemoteUrlError(f"Remote {remote!r} has no URL configured")

    return ReleaseConfig(
        location=parse_remote_url(url),
        remote=remote,
        production_branch=git.read_config(PRODUCTION_BRANCH_KEY) or DEFAULT_PRODUCTION_BRANCH,
        staging_branch=git.read_config(STAGING_BRANCH_KEY) or DEFAULT_STAGING_BRANCH,
    )
