"""Discovery service — owns the registry and orchestrates scans."""

from __future__ import annotations

import asyncio
import functools
import logging
import re
import threading
import time
from pathlib import Path
from typing import Iterable, Optional

from .classify import classify
from .config import ScanConfig, load_config
from .errors import OrchestrationError
from .models import Findings, Provider, ScanReport
from .registry import HostRegistry
from .scanner import collect_repo_info, run_git, walk
from .scanner.git import Runner

logger = logging.getLogger(__name__)


class DiscoveryService:
    """Scans a root for git clones and files them under hosting providers.

    `scanning` is observational, not a lock: callers must not start a second
    scan on the same service while one is running.
    """

    def __init__(
        self,
        registry: Optional[HostRegistry] = None,
        root: str | Path | None = None,
        command_timeout: Optional[float] = None,
        runner: Optional[Runner] = None,
    ) -> None:
        self.registry = registry if registry is not None else HostRegistry()
        self.root = Path(root).expanduser() if root is not None else Path.cwd()
        self.scanning = False
        self._cancel = threading.Event()
        if runner is None:
            runner = functools.partial(run_git, timeout=command_timeout)
        self._run = runner

    @classmethod
    def from_config(cls, config: ScanConfig, runner: Optional[Runner] = None) -> "DiscoveryService":
        registry = HostRegistry()
        if config.ignore is not None:
            registry.set_ignore(config.ignore)
        registry.add_ignore(config.add_ignore)
        for name, pattern in config.providers.items():
            registry.register(name, pattern)
        return cls(registry, root=config.root, command_timeout=config.command_timeout, runner=runner)

    @property
    def results(self) -> dict[str, list[str]]:
        return self.registry.results

    def register_provider(self, name: str, pattern: str | re.Pattern) -> Provider:
        return self.registry.register(name, pattern)

    def set_ignore(self, names: Iterable[str]) -> None:
        self.registry.set_ignore(names)

    def add_ignore(self, names: Iterable[str]) -> None:
        self.registry.add_ignore(names)

    def reset(self) -> None:
        self.registry.reset()

    def cancel(self) -> None:
        """Ask a running scan to stop at the next directory visit."""
        self._cancel.set()

    async def run_scan(self, root: str | Path | None = None) -> ScanReport:
        """Walk root, classify every clone found, publish into `results`.

        Never raises for scan failures: they are logged and reflected in the
        returned report. `scanning` is cleared even if the walk blows up.
        """
        root = Path(root).expanduser() if root is not None else self.root
        report = ScanReport(root=str(root))
        findings = Findings()
        self.scanning = True
        self._cancel.clear()
        self.registry.reset()
        providers, ignore = self.registry.snapshot()
        logger.info("Scanning local git repositories under %s", root)
        start = time.perf_counter()

        async def on_repo(repo_dir: Path) -> None:
            info = await collect_repo_info(repo_dir, self._run)
            if info is None:
                findings.no_remote.append(str(repo_dir))
                return
            classify(info.url, info.branch, providers, findings.by_provider)

        try:
            await walk(root, on_repo, ignore=ignore, findings=findings, cancel=self._cancel)
            self.registry.publish(findings.by_provider)
        except Exception as e:
            err = OrchestrationError(f"Scan of {root} failed: {e}")
            logger.error("%s", err, exc_info=True)
            report.error = str(err)
        finally:
            self.scanning = False
            report.elapsed = time.perf_counter() - start
            logger.info("Local git repository scan finished in %.2fs", report.elapsed)

        report.results = {name: list(v) for name, v in self.registry.results.items()}
        report.repos_seen = findings.repos_seen
        report.unreadable = findings.unreadable
        report.no_remote = findings.no_remote
        report.failed = findings.failed
        report.cancelled = findings.cancelled
        return report

    def scan(self, root: str | Path | None = None) -> ScanReport:
        """Blocking wrapper around run_scan for synchronous callers.

        Uses asyncio.run, so it cannot be called while an event loop is
        running; await run_scan there instead.
        """
        return asyncio.run(self.run_scan(root))


def _service_for(config: Optional[ScanConfig], runner: Optional[Runner]) -> tuple[ScanConfig, DiscoveryService]:
    config = config if config is not None else load_config()
    return config, DiscoveryService.from_config(config, runner=runner)


def startup(config: Optional[ScanConfig] = None, runner: Optional[Runner] = None) -> DiscoveryService:
    """Build a service from config and scan its root when auto_scan is set.

    Blocking; from async code use astartup.
    """
    config, service = _service_for(config, runner)
    if config.auto_scan:
        service.scan()
    return service


async def astartup(config: Optional[ScanConfig] = None, runner: Optional[Runner] = None) -> DiscoveryService:
    """Awaitable startup for hosts that already run an event loop."""
    config, service = _service_for(config, runner)
    if config.auto_scan:
        await service.run_scan()
    return service
