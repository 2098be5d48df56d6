"""Access token acquisition.

Providers are composed by the caller, typically::

    FirstAvailableTokenProvider(
        StoredTokenProvider(git),
        InteractivePromptTokenProvider(git, location=location),
    )
"""

from __future__ import annotations

import getpass
import logging
import socket
from collections.abc import Callable
from typing import Protocol

from release_pr.git.remote import RemoteLocation
from release_pr.git.repository import ConfigScope, VersionControl
from release_pr.github.client import TwoFactorRequired, create_authorization

logger = logging.getLogger(__name__)

TOKEN_CONFIG_KEY = "release-pr.token"
TOKEN_SCOPES = ["repo"]


class MissingTokenError(RuntimeError):
    """Raised when no provider yields an access token."""


class TokenProvider(Protocol):
    def get_token(self) -> str | None: ...


class StaticTokenProvider:
    """Returns a token handed in by the caller (e.g. from the environment)."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        if self._token is None or not self._token.strip():
            return None
        return self._token.strip()


class StoredTokenProvider:
    """Reads the token persisted in git config."""

    def __init__(self, git: VersionControl, *, key: str = TOKEN_CONFIG_KEY) -> None:
        self._git = git
        self._key = key

    def get_token(self) -> str | None:
        token = self._git.read_config(self._key)
        if token:
            logger.debug("Using token from git config", extra={"key": self._key})
        return token


class InteractivePromptTokenProvider:
    """Asks for GitHub credentials, creates an authorization and stores its token.

    The token is stored in the global git config for github.com and in the local
    (repository) config for enterprise hosts, so credentials for different hosts
    do not overwrite each other.
    """

    def __init__(
        self,
        git: VersionControl,
        *,
        location: RemoteLocation,
        prompt: Callable[[str], str] = input,
        secret_prompt: Callable[[str], str] = getpass.getpass,
        key: str = TOKEN_CONFIG_KEY,
    ) -> None:
        self._git = git
        self._location = location
        self._prompt = prompt
        self._secret_prompt = secret_prompt
        self._key = key

    def _authorize(self, username: str, password: str, otp: str | None) -> str:
        return create_authorization(
            username=username,
            password=password,
            scopes=TOKEN_SCOPES,
            note=f"release-pr ({socket.gethostname()})",
            base_url=self._location.api_base_url,
            verify=self._location.verify_ssl,
            otp=otp,
        )

    def get_token(self) -> str | None:
        logger.info(
            "No stored token; requesting GitHub credentials",
            extra={"host": self._location.host},
        )
        username = self._prompt(f"GitHub username ({self._location.host}): ").strip()
        if not username:
            return None
        password = self._secret_prompt(f"Password for {username}: ")

        try:
            token = self._authorize(username, password, otp=None)
        except TwoFactorRequired:
            otp = self._prompt("Two-factor authentication code: ").strip()
            token = self._authorize(username, password, otp=otp)

        scope = ConfigScope.LOCAL if self._location.is_enterprise else ConfigScope.GLOBAL
        self._git.write_config(self._key, token, scope)
        logger.info("Token stored in git config", extra={"key": self._key, "scope": scope.value})
        return token


class FirstAvailableTokenProvider:
    """Asks each provider in turn; the first non-empty token wins."""

    def __init__(self, *providers: TokenProvider) -> None:
        if not providers:
            raise ValueError("At least one token provider is required")
        self._providers = providers

    def get_token(self) -> str:
        for provider in self._providers:
            token = provider.get_token()
            if token:
                return token
        raise MissingTokenError("No GitHub access token available")
