"""Git inspection: run git commands and collect branch/remote metadata.

Each value is resolved through an ordered tuple of strategies; the first one
that returns non-empty output wins, failures fall through to the next tier.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import signal
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from ..errors import CommandError
from ..models import RepoInfo

logger = logging.getLogger(__name__)

GIT = "git"
DETACHED_BRANCH = "HEAD"
DEFAULT_REMOTE = "origin"

# "<name>\t<url> (fetch)" lines from `git remote -v`
_FETCH_LINE = re.compile(r"^\s*(\S+)\s+(\S+)\s+\(fetch\)", re.MULTILINE)

Runner = Callable[..., Awaitable[str]]


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill the child and anything it spawned, then reap it."""
    try:
        if hasattr(os, "killpg"):
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass  # already exited
    await proc.wait()


async def run_git(cwd: str | Path, *args: str, timeout: float | None = None) -> str:
    """Run `git <args>` in cwd and return stripped stdout.

    git runs in its own session so a timeout or cancellation can kill helper
    processes it started (aliases, credential helpers) along with it.

    Raises:
        CommandError: git could not be spawned, exited non-zero or timed out
        asyncio.CancelledError: if the awaiting task is cancelled
    """
    cmd = [GIT, *args]
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise CommandError(cmd, cwd, str(e)) from e

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(proc)
        raise CommandError(cmd, cwd, f"timed out after {timeout}s") from None
    except asyncio.CancelledError:
        await _kill(proc)
        raise

    if proc.returncode != 0:
        stderr = stderr_bytes.decode(errors="replace").strip()
        raise CommandError(cmd, cwd, stderr, returncode=proc.returncode)
    return stdout_bytes.decode(errors="replace").strip()


# Branch tiers


async def branch_from_abbrev_ref(repo_dir: Path, run: Runner) -> str:
    return await run(repo_dir, "rev-parse", "--abbrev-ref", "HEAD")


async def branch_from_show_current(repo_dir: Path, run: Runner) -> str:
    return await run(repo_dir, "branch", "--show-current")


BRANCH_STRATEGIES = (branch_from_abbrev_ref, branch_from_show_current)


# Remote URL tiers


async def url_from_remote_name(repo_dir: Path, run: Runner, remote: str) -> str:
    return await run(repo_dir, "remote", "get-url", remote)


async def url_from_remote_list(repo_dir: Path, run: Runner, remote: str) -> str:
    """First fetch URL listed by `git remote -v`, whatever its name."""
    m = _FETCH_LINE.search(await run(repo_dir, "remote", "-v"))
    return m.group(2) if m else ""


URL_STRATEGIES = (url_from_remote_name, url_from_remote_list)


async def first_success(strategies: Sequence[Callable[..., Awaitable[str]]], *args) -> Optional[str]:
    """Evaluate strategies in order; return the first non-empty result."""
    for strategy in strategies:
        try:
            value = await strategy(*args)
        except CommandError as e:
            logger.debug("%s: %s", strategy.__name__, e)
            continue
        if value:
            return value
    return None


async def configured_remote(repo_dir: Path, run: Runner, branch: str) -> str:
    """Upstream remote of branch, falling back to origin."""
    try:
        remote = await run(repo_dir, "config", "--get", f"branch.{branch}.remote")
    except CommandError as e:
        logger.debug("No upstream remote for %s in %s: %s", branch, repo_dir, e)
        return DEFAULT_REMOTE
    return remote or DEFAULT_REMOTE


async def collect_repo_info(repo_dir: str | Path, run: Runner = run_git) -> Optional[RepoInfo]:
    """Resolve (url, branch) for a directory holding a .git marker.

    Returns None, after one warning, when no remote URL can be found.
    """
    repo_dir = Path(repo_dir)
    branch = await first_success(BRANCH_STRATEGIES, repo_dir, run) or DETACHED_BRANCH
    remote = await configured_remote(repo_dir, run, branch)
    url = await first_success(URL_STRATEGIES, repo_dir, run, remote)
    if not url:
        logger.warning("No remote URL found for repository: %s", repo_dir)
        return None
    return RepoInfo(path=str(repo_dir), url=url.strip(), branch=branch)
