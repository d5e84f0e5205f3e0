"""Structured records for providers, repositories and scans."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

REPO_GROUP = "repo"

# JavaScript-style named group, accepted in config files
_JS_NAMED_GROUP = re.compile(r"\(\?<(?=[A-Za-z_])")


@dataclass(frozen=True)
class Provider:
    """A hosting platform recognised by a URL pattern with a `repo` group."""

    name: str
    pattern: re.Pattern

    @classmethod
    def compile(cls, name: str, pattern: str | re.Pattern) -> "Provider":
        """Build a provider, compiling string patterns case-insensitively."""
        if isinstance(pattern, str):
            pattern = re.compile(_JS_NAMED_GROUP.sub("(?P<", pattern), re.IGNORECASE)
        if REPO_GROUP not in pattern.groupindex:
            raise ValueError(f"Pattern for provider {name!r} has no named group {REPO_GROUP!r}")
        return cls(name=str(name), pattern=pattern)

    @property
    def key(self) -> str:
        """Internal findings key (names compare case-insensitively)."""
        return self.name.lower()

    def match(self, url: str) -> Optional[str]:
        """Return the `owner/repo` slug if url belongs to this provider."""
        m = self.pattern.search(url)
        if m is None:
            return None
        return m.group(REPO_GROUP) or None


@dataclass
class RepoInfo:
    """Remote-tracking metadata of one local clone."""

    path: str
    url: str
    branch: str  # "HEAD" when detached


@dataclass
class Findings:
    """Single aggregation point for everything a walk discovers."""

    by_provider: dict[str, list[str]] = field(default_factory=dict)  # lower-cased provider name -> descriptors
    unreadable: list[str] = field(default_factory=list)
    no_remote: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)  # repos whose collection raised
    repos_seen: int = 0
    cancelled: bool = False


@dataclass
class ScanReport:
    """Outcome of one orchestrated scan."""

    root: str
    elapsed: float = 0.0
    results: dict[str, list[str]] = field(default_factory=dict)  # provider name -> descriptors
    repos_seen: int = 0
    unreadable: list[str] = field(default_factory=list)
    no_remote: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)  # repos whose collection raised
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def classified(self) -> int:
        return sum(len(v) for v in self.results.values())

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "elapsed": round(self.elapsed, 3),
            "results": {k: list(v) for k, v in self.results.items()},
            "repos_seen": self.repos_seen,
            "classified": self.classified,
            "unreadable": list(self.unreadable),
            "no_remote": list(self.no_remote),
            "failed": list(self.failed),
            "cancelled": self.cancelled,
            "error": self.error,
        }
