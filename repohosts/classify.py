"""Classifier — map a remote URL to the first matching provider."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import Provider


def classify(
    url: str,
    branch: str,
    providers: Iterable[Provider],
    found: dict[str, list[str]],
) -> Optional[Provider]:
    """Append `slug:branch` under the first provider matching url.

    Returns the provider, or None for an unsupported host (dropped quietly).
    """
    url = url.strip()
    for provider in providers:
        slug = provider.match(url)
        if slug:
            found.setdefault(provider.key, []).append(f"{slug}:{branch}")
            return provider
    return None
