"""GitHub API client wrapper.

This wraps `requests` (REST) and PyGithub (pull request creation) to keep GitHub
calls out of the release logic and make tests easy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from github import Auth, Github
from github.PullRequest import PullRequest
from github.Repository import Repository

from release_pr import __version__

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.github.com"


@dataclass(frozen=True, slots=True)
class PullRequestRecord:
    """Minimal pull request metadata needed to render and sync the release PR."""

    number: int
    title: str
    assignee: str | None
    head_ref: str
    base_ref: str
    body: str
    html_url: str | None = None


class TwoFactorRequired(RuntimeError):
    """Raised when GitHub asks for a one-time password during authorization."""


def _default_headers() -> dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": f"release-pr/{__version__}",
    }


def create_authorization(
    *,
    username: str,
    password: str,
    scopes: list[str],
    note: str,
    base_url: str = DEFAULT_API_BASE_URL,
    verify: bool = True,
    otp: str | None = None,
) -> str:
    """Create an OAuth authorization with basic credentials and return its token.

    Raises:
        TwoFactorRequired: if the account needs a one-time password and none was given.
    """

    headers = _default_headers()
    if otp:
        headers["X-GitHub-OTP"] = otp

    url = f"{base_url.rstrip('/')}/authorizations"
    resp = requests.post(
        url,
        auth=(username, password),
        json={"scopes": scopes, "note": note},
        headers=headers,
        verify=verify,
        timeout=30,
    )
    if resp.status_code == 401 and resp.headers.get("X-GitHub-OTP", "").startswith("required"):
        raise TwoFactorRequired("GitHub requires a two-factor authentication code")
    resp.raise_for_status()

    data: dict[str, Any] = resp.json()
    token = data.get("token")
    if not isinstance(token, str) or not token.strip():
        raise ValueError("Unexpected authorization response: missing token")
    logger.info("Authorization created", extra={"note": note, "scopes": scopes})
    return token


class GitHubClient:
    """Small wrapper around the GitHub API for the release pull request operations."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = DEFAULT_API_BASE_URL,
        verify: bool = True,
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository.strip("/ "):
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip("/ ")
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.verify = verify
        self._session.headers.update({"Authorization": f"Bearer {token}", **_default_headers()})

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=self._rest_base_url, verify=verify)

        self._repo = self._github.get_repo(self._repository_name)
        logger.info(
            "Authenticated with GitHub and connected to repository",
            extra={"repo": self._repository_name, "base_url": self._rest_base_url},
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _pulls_url(self, *, pull_number: int | None = None) -> str:
        url = f"{self._rest_base_url}/repos/{self._repository_name}/pulls"
        if pull_number is None:
            return url
        if pull_number <= 0:
            raise ValueError("pull_number must be a positive integer")
        return f"{url}/{pull_number}"

    def _get_paginated_json_list(
        self, url: str, params: dict[str, str] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch a REST endpoint that returns a JSON list, following basic pagination.

        Notes:
            Fetches up to 10 pages of 100 items each.
        """

        items: list[dict[str, Any]] = []
        per_page = 100
        for page in range(1, 11):
            resp = self._session.get(
                url,
                params={**(params or {}), "per_page": per_page, "page": page},
                timeout=30,
            )
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                break

            page_items: list[dict[str, Any]] = [p for p in payload if isinstance(p, dict)]
            items.extend(page_items)

            if len(payload) < per_page:
                break
        return items

    @staticmethod
    def _parse_pull_request_json(data: dict[str, Any]) -> PullRequestRecord:
        number = data.get("number")
        if not isinstance(number, int) or number <= 0:
            raise ValueError("Invalid pull request response: missing number")

        title = data.get("title")
        if not isinstance(title, str):
            title = ""

        body = data.get("body")
        if not isinstance(body, str):
            body = ""

        assignee: str | None = None
        raw_assignee = data.get("assignee")
        if isinstance(raw_assignee, dict):
            login = raw_assignee.get("login")
            if isinstance(login, str) and login.strip():
                assignee = login

        head = data.get("head")
        base = data.get("base")
        if not isinstance(head, dict) or not isinstance(base, dict):
            raise ValueError("Invalid pull request response: missing head/base")

        head_ref = head.get("ref")
        base_ref = base.get("ref")
        if not isinstance(head_ref, str) or not head_ref.strip():
            raise ValueError("Invalid pull request response: missing head.ref")
        if not isinstance(base_ref, str) or not base_ref.strip():
            raise ValueError("Invalid pull request response: missing base.ref")

        html_url = data.get("html_url")
        if not isinstance(html_url, str) or not html_url.strip():
            html_url = None

        return PullRequestRecord(
            number=number,
            title=title,
            assignee=assignee,
            head_ref=head_ref,
            base_ref=base_ref,
            body=body,
            html_url=html_url,
        )

    @staticmethod
    def _record_from_pull(pr: PullRequest) -> PullRequestRecord:
        assignee = pr.assignee.login if pr.assignee is not None else None
        return PullRequestRecord(
            number=pr.number,
            title=pr.title or "",
            assignee=assignee,
            head_ref=pr.head.ref,
            base_ref=pr.base.ref,
            body=pr.body or "",
            html_url=pr.html_url or None,
        )

    def get_pull_request(self, pull_number: int) -> PullRequestRecord:
        resp = self._session.get(self._pulls_url(pull_number=pull_number), timeout=30)
        resp.raise_for_status()
        pr = self._parse_pull_request_json(resp.json())
        logger.debug(
            "Pull request fetched",
            extra={"repo": self._repository_name, "pull_number": pr.number, "title": pr.title},
        )
        return pr

    def list_open_pull_requests(self) -> list[PullRequestRecord]:
        raw = self._get_paginated_json_list(self._pulls_url(), params={"state": "open"})
        pulls = [self._parse_pull_request_json(item) for item in raw]
        logger.debug(
            "Open pull requests listed",
            extra={"repo": self._repository_name, "count": len(pulls)},
        )
        return pulls

    def create_pull_request(
        self,
        *,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> PullRequestRecord | None:
        """Create a pull request; None when GitHub returns no numbered pull request."""

        if not title.strip():
            raise ValueError("Pull request title is required")

        pr = self._repo.create_pull(title=title, body=body, head=head, base=base)
        if pr is None or not isinstance(pr.number, int) or pr.number <= 0:
            logger.error(
                "Pull request creation returned no pull request",
                extra={"repo": self._repository_name, "head": head, "base": base},
            )
            return None
        record = self._record_from_pull(pr)
        logger.info(
            "Pull request created",
            extra={"repo": self._repository_name, "pull_number": record.number, "title": title},
        )
        return record

    def update_pull_request_body(self, pull_number: int, body: str) -> PullRequestRecord:
        resp = self._session.patch(
            self._pulls_url(pull_number=pull_number), json={"body": body}, timeout=30
        )
        resp.raise_for_status()
        pr = self._parse_pull_request_json(resp.json())
        logger.info(
            "Pull request body updated",
            extra={"repo": self._repository_name, "pull_number": pr.number},
        )
        return pr

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
