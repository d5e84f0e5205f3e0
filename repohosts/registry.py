"""Host registry — ordered providers, ignore set and the live result mapping."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from .models import Provider

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = ("data", "node_modules", "temp", "logs", "cache", "dist")


def _host_pattern(host: str) -> str:
    """https://host/o/r, ssh://git@host/o/r and git@host:o/r, optional .git and trailing slash."""
    return rf"{re.escape(host)}[:/](?P<repo>[^/\s]+/[^/\s]+?)(?:\.git)?/?$"


# Order matters: first match wins during classification
DEFAULT_PROVIDERS: tuple[tuple[str, str], ...] = (
    ("GitHub", _host_pattern("github.com")),
    ("Gitee", _host_pattern("gitee.com")),
    ("Gitcode", _host_pattern("gitcode.com")),
    ("CNB", _host_pattern("cnb.cool")),
)


class HostRegistry:
    """Providers in registration order plus the provider-keyed output lists.

    `results` is live: its lists are emptied when a scan starts and refilled
    in place when it ends, so callers may hold on to them.
    """

    def __init__(
        self,
        providers: Iterable[tuple[str, str | re.Pattern]] = DEFAULT_PROVIDERS,
        ignore: Iterable[str] = DEFAULT_IGNORE,
    ) -> None:
        self.providers: list[Provider] = []
        self.ignore: set[str] = set(ignore)
        self.results: dict[str, list[str]] = {}
        for name, pattern in providers:
            self.register(name, pattern)

    def register(self, name: str, pattern: str | re.Pattern) -> Provider:
        """Append a provider. Re-registering a name keeps both entries."""
        provider = Provider.compile(name, pattern)
        self.providers.append(provider)
        self.results.setdefault(provider.name, [])
        logger.debug("Registered provider %s: %s", provider.name, provider.pattern.pattern)
        return provider

    def set_ignore(self, names: Iterable[str]) -> None:
        self.ignore = set(names)

    def add_ignore(self, names: Iterable[str]) -> None:
        self.ignore.update(names)

    def snapshot(self) -> tuple[tuple[Provider, ...], frozenset[str]]:
        """Providers and ignore set as they stand when a scan starts."""
        return tuple(self.providers), frozenset(self.ignore)

    def reset(self) -> None:
        for descriptors in self.results.values():
            descriptors.clear()

    def publish(self, found: dict[str, list[str]]) -> None:
        """Replace every output list with the findings for its provider."""
        for name, descriptors in self.results.items():
            descriptors.clear()
            descriptors.extend(found.get(name.lower(), ()))
