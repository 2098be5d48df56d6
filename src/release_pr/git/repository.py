"""Thin wrapper around the `git` executable.

Every query the release run needs is a single `git` invocation. A non-zero exit
is fatal (:class:`GitCommandError`) unless the command uses its exit status as
an answer (`merge-base --is-ancestor`, `config --get`).
"""

from __future__ import annotations

import logging
import subprocess
from enum import Enum
from pathlib import Path
from typing import Protocol

from release_pr.logging import Severity

logger = logging.getLogger(__name__)


class ConfigScope(str, Enum):
    LOCAL = "local"
    GLOBAL = "global"


class GitCommandError(RuntimeError):
    """Raised when a git command exits with an unexpected status."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(
            f"`{' '.join(command)}` exited with status {returncode}: {self.stderr or '(no output)'}"
        )


class VersionControl(Protocol):
    """The git queries the release run depends on."""

    def update_remote(self) -> None: ...

    def merge_commits(self, range_expr: str) -> list[str]: ...

    def remote_heads(self, pattern: str) -> list[str]: ...

    def is_ancestor(self, commit: str, ref: str) -> bool: ...

    def read_config(self, key: str) -> str | None: ...

    def write_config(self, key: str, value: str, scope: ConfigScope) -> None: ...

    def remote_url(self) -> str | None: ...


class GitRepository:
    """Runs git commands against a working copy."""

    def __init__(self, *, cwd: Path | None = None, remote: str = "origin") -> None:
        if not remote.strip():
            raise ValueError("remote name is required")
        self._cwd = cwd
        self._remote = remote

    def _run(
        self, *args: str, allowed: frozenset[int] = frozenset({0})
    ) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        logger.log(Severity.TRACE, "Running git command", extra={"command": command})
        try:
            result = subprocess.run(
                command,
                cwd=self._cwd,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise GitCommandError(command, -1, str(e)) from e

        if result.returncode not in allowed:
            raise GitCommandError(command, result.returncode, result.stderr or "")
        return result

    @staticmethod
    def _lines(output: str) -> list[str]:
        return [line for line in output.splitlines() if line.strip()]

    def update_remote(self) -> None:
        """Refresh remote-tracking refs for the configured remote."""

        self._run("remote", "update", self._remote)
        logger.info("Remote updated", extra={"remote": self._remote})

    def merge_commits(self, range_expr: str) -> list[str]:
        """Return one "parentA parentB" line per merge commit in `range_expr`."""

        result = self._run("log", "--merges", "--pretty=format:%P", range_expr)
        return self._lines(result.stdout)

    def remote_heads(self, pattern: str) -> list[str]:
        """Return "commit<TAB>ref" lines for remote refs matching `pattern`."""

        result = self._run("ls-remote", self._remote, pattern)
        return self._lines(result.stdout)

    def is_ancestor(self, commit: str, ref: str) -> bool:
        result = self._run(
            "merge-base", "--is-ancestor", commit, ref, allowed=frozenset({0, 1})
        )
        return result.returncode == 0

    def read_config(self, key: str) -> str | None:
        """Return a git config value, or None when the key is unset."""

        result = self._run("config", "--get", key, allowed=frozenset({0, 1}))
        if result.returncode == 1:
            return None
        value = result.stdout.strip()
        return value or None

    def write_config(self, key: str, value: str, scope: ConfigScope = ConfigScope.LOCAL) -> None:
        self._run("config", f"--{scope.value}", key, value)
        logger.debug("Git config written", extra={"key": key, "scope": scope.value})

    def remote_url(self) -> str | None:
        return self.read_config(f"remote.{self._remote}.url")
