"""Error taxonomy for a discovery scan."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class RepoHostsError(Exception):
    """Base for all repohosts errors."""


class CommandError(RepoHostsError):
    """A git invocation failed, exited non-zero or timed out."""

    def __init__(
        self,
        command: Sequence[str],
        cwd: str | Path,
        message: str = "",
        returncode: int | None = None,
    ):
        self.command = list(command)
        self.cwd = str(cwd)
        self.returncode = returncode
        detail = message or f"exit status {returncode}"
        super().__init__(f"`{' '.join(self.command)}` failed in {self.cwd}: {detail}")


class TraversalError(RepoHostsError):
    """A directory could not be listed; its subtree is skipped."""

    def __init__(self, path: str | Path, cause: OSError):
        self.path = str(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot scan directory {self.path}: {reason}")


class OrchestrationError(RepoHostsError):
    """Unexpected failure outside node-level handling (a defect)."""
