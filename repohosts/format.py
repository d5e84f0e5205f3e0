"""Terminal output formatting — provider sections, colors, summary footer."""

import shutil
from typing import List

import click

from .models import Provider, ScanReport


def _get_width() -> int:
    try:
        return min(72, shutil.get_terminal_size((72, 24)).columns)
    except OSError:
        return 72


def _plural(n: int, word: str, plural: str = "") -> str:
    return f"{n} {word}" if n == 1 else f"{n} {plural or word + 's'}"


def _footer(report: ScanReport) -> List[str]:
    lines = [
        f"Scanned {report.root} in {report.elapsed:.2f}s: "
        f"{_plural(report.repos_seen, 'repo')}, {report.classified} classified."
    ]
    if report.no_remote:
        lines.append(click.style(f"{_plural(len(report.no_remote), 'repo')} without a remote URL:", fg="yellow"))
        lines.extend(f"  {p}" for p in report.no_remote)
    if report.failed:
        lines.append(click.style(f"{_plural(len(report.failed), 'repo')} could not be inspected:", fg="yellow"))
        lines.extend(f"  {p}" for p in report.failed)
    if report.unreadable:
        lines.append(click.style(f"{_plural(len(report.unreadable), 'directory', 'directories')} could not be read:", fg="yellow"))
        lines.extend(f"  {p}" for p in report.unreadable)
    if report.cancelled:
        lines.append(click.style("Scan was cancelled before completion.", fg="yellow"))
    if report.error:
        lines.append(click.style(f"Error: {report.error}", fg="red", bold=True))
    return lines


def format_human(report: ScanReport) -> str:
    """Providers with their `owner/repo:branch` entries, then a summary."""
    width = _get_width()
    out: List[str] = []
    for name, descriptors in report.results.items():
        count = click.style(f"({len(descriptors)})", dim=True)
        out.append(f"{click.style(name, bold=True)} {count}")
        if not descriptors:
            out.append(click.style("  none", dim=True))
        for d in descriptors:
            out.append(f"  {d}")
    out.append("─" * width)
    out.extend(_footer(report))
    return "\n".join(out)


def format_providers(providers: List[Provider]) -> str:
    """One line per registered provider, in match order."""
    if not providers:
        return "No providers registered."
    pad = max(len(p.name) for p in providers)
    return "\n".join(
        f"{i}. {click.style(p.name.ljust(pad), bold=True)}  {p.pattern.pattern}"
        for i, p in enumerate(providers, 1)
    )
