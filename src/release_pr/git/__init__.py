"""Git access: subprocess-backed repository queries and remote URL resolution."""

from release_pr.git.remote import RemoteLocation, RemoteUrlError, parse_remote_url
from release_pr.git.repository import (
    ConfigScope,
    GitCommandError,
    GitRepository,
    VersionControl,
)

__all__ = [
    "ConfigScope",
    "GitCommandError",
    "GitRepository",
    "RemoteLocation",
    "RemoteUrlError",
    "VersionControl",
    "parse_remote_url",
]
