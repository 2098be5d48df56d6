"""Resolve a git remote URL into a GitHub host and repository name."""

from __future__ import annotations

import re
from dataclasses import dataclass

PUBLIC_HOST = "github.com"
PUBLIC_API_BASE_URL = "https://api.github.com"

# scheme-ful forms: https://host/owner/repo, git://host/owner/repo, ssh://git@host:22/owner/repo
_URL_WITH_SCHEME = re.compile(
    r"^(?:https?|git|ssh)://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$"
)
# scp-like form: git@host:owner/repo
_SCP_LIKE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^/:]+):(?P<path>[^/].*)$")


class RemoteUrlError(ValueError):
    """Raised when a remote URL cannot be mapped to a GitHub repository."""


@dataclass(frozen=True, slots=True)
class RemoteLocation:
    """Host and "owner/repo" identifier of a GitHub remote."""

    host: str
    repository: str

    @property
    def is_enterprise(self) -> bool:
        return self.host != PUBLIC_HOST

    @property
    def api_base_url(self) -> str:
        """REST endpoint for the host.

        GitHub.com:        https://api.github.com
        GitHub Enterprise: https://<host>/api/v3
        """

        if not self.is_enterprise:
            return PUBLIC_API_BASE_URL
        return f"https://{self.host}/api/v3"

    @property
    def verify_ssl(self) -> bool:
        # Enterprise installs commonly run with self-signed certificates.
        return not self.is_enterprise

    def web_url(self, path: str = "") -> str:
        base = f"https://{self.host}/{self.repository}"
        path = path.strip("/")
        return f"{base}/{path}" if path else base


def parse_remote_url(url: str) -> RemoteLocation:
    """Parse a remote URL such as `git@github.com:owner/repo.git`.

    Raises:
        RemoteUrlError: if the URL has no recognizable host and repository path.
    """

    raw = url.strip()
    if not raw:
        raise RemoteUrlError("Remote URL is empty")

    match = _URL_WITH_SCHEME.match(raw) or _SCP_LIKE.match(raw)
    if match is None:
        raise RemoteUrlError(f"Unrecognized remote URL: {url!r}")

    host = match.group("host")
    path = match.group("path").strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]

    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        raise RemoteUrlError(f"Remote URL has no owner/repo path: {url!r}")

    return RemoteLocation(host=host.lower(), repository="/".join(parts))
