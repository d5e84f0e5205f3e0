"""CLI entry point — scan a directory tree, list clones by hosting provider."""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
import typer


def _err(msg: str) -> None:
    """Raise a styled error (red box) — used for all CLI errors."""
    raise click.BadParameter(msg)

_SUBCOMMANDS = {"providers"}


def _preprocess_argv():
    """Fix argv so `repohosts ~/code --json` works like `repohosts -p ~/code --json`."""
    argv = sys.argv[1:]
    if not argv:
        return
    first = argv[0]
    if first in _SUBCOMMANDS or first.startswith("-"):
        return
    sys.argv[1:] = ["-p", first, *argv[1:]]

from .config import load_config
from .format import format_human, format_providers
from .service import DiscoveryService

app = typer.Typer(help="Find local git clones and group them by hosting provider.")


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_provider(spec: str) -> tuple[str, str]:
    """NAME=REGEX -> (name, regex)."""
    name, sep, pattern = spec.partition("=")
    if not sep or not name.strip() or not pattern:
        _err(f"Invalid provider: {spec}\nExpected NAME=REGEX, e.g. Corp='corp\\.example[:/](?P<repo>[^/]+/[^/.]+)'")
    return name.strip(), pattern


def _build_service(
    config_path: Optional[Path],
    ignore: Optional[List[str]],
    add_ignore: Optional[List[str]],
    provider: Optional[List[str]],
    timeout: Optional[float],
) -> DiscoveryService:
    config = load_config(config_path)
    if timeout is not None:
        config.command_timeout = timeout
    try:
        service = DiscoveryService.from_config(config)
        for spec in provider or []:
            service.register_provider(*_parse_provider(spec))
    except (ValueError, TypeError) as e:
        _err(str(e))
    if ignore:
        service.set_ignore(ignore)
    if add_ignore:
        service.add_ignore(add_ignore)
    return service


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(None, "--path", "-p", exists=True, file_okay=False, dir_okay=True, resolve_path=True, help="Root to scan (default: config root or .)"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", "-i", help="Replace ignored directory names (repeatable)"),
    add_ignore: Optional[List[str]] = typer.Option(None, "--add-ignore", "-a", help="Add an ignored directory name (repeatable)"),
    provider: Optional[List[str]] = typer.Option(None, "--provider", help="Extra provider as NAME=REGEX with a (?P<repo>...) group"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds allowed per git command"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", dir_okay=False, help="YAML config (default: ~/.repohosts/config.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging, including git fallbacks"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
) -> None:
    """Scan a directory tree and report clones per hosting provider."""
    if ctx.invoked_subcommand is not None:
        return
    _configure_logging(verbose, quiet)
    service = _build_service(config_path, ignore, add_ignore, provider, timeout)
    report = service.scan(path)

    if json_out:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        typer.echo(format_human(report))

    if report.error:
        raise typer.Exit(1)


@app.command("providers")
def providers_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="JSON output"),
    provider: Optional[List[str]] = typer.Option(None, "--provider", help="Extra provider as NAME=REGEX"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", dir_okay=False, help="YAML config"),
) -> None:
    """List registered providers in match order."""
    service = _build_service(config_path, None, None, provider, None)
    providers = service.registry.providers
    if json_out:
        typer.echo(json.dumps([{"name": p.name, "pattern": p.pattern.pattern} for p in providers], indent=2))
        return
    typer.echo(format_providers(providers))


def _main() -> None:
    """Entry point: preprocess argv (repohosts DIR -> repohosts -p DIR), then run app."""
    _preprocess_argv()
    app()


if __name__ == "__main__":
    _main()
