"""Tree walker — visits directories under a root and reports git repos."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from pathlib import Path
from typing import AbstractSet, Awaitable, Callable, Optional

from ..errors import TraversalError
from ..models import Findings

logger = logging.getLogger(__name__)

MARKER = ".git"

RepoCallback = Callable[[Path], Awaitable[None]]


def _has_marker(d: Path) -> bool:
    """True if d holds a .git directory or gitfile (worktrees, submodules)."""
    try:
        return (d / MARKER).exists()
    except OSError:
        return False


def _list_subdirs(d: Path) -> list[str]:
    """Names of real subdirectories of d, sorted. Symlinks are not followed."""
    with os.scandir(d) as it:
        return sorted(e.name for e in it if e.is_dir(follow_symlinks=False))


async def walk(
    root: str | Path,
    on_repo: RepoCallback,
    ignore: AbstractSet[str] = frozenset(),
    findings: Optional[Findings] = None,
    cancel: Optional[threading.Event] = None,
) -> Findings:
    """Visit root and its subdirectories depth-first, calling on_repo for each repo.

    Descent continues below repositories, so nested clones are reported too.
    Directories named in ignore are never entered. A directory that cannot be
    listed, or a repo whose callback fails, is logged and skipped; the rest of
    the tree is still walked.
    """
    findings = findings if findings is not None else Findings()
    # Explicit stack: tree depth is unbounded
    stack = [Path(root)]
    while stack:
        if cancel is not None and cancel.is_set():
            findings.cancelled = True
            break
        d = stack.pop()
        try:
            if await asyncio.to_thread(_has_marker, d):
                findings.repos_seen += 1
                await on_repo(d)
        except Exception as e:
            logger.warning("Failed to collect repository info: %s -> %s", d, e)
            findings.failed.append(str(d))
        try:
            names = await asyncio.to_thread(_list_subdirs, d)
        except OSError as e:
            err = TraversalError(d, e)
            logger.warning("%s", err)
            findings.unreadable.append(err.path)
            continue
        stack.extend(d / name for name in reversed(names) if name != MARKER and name not in ignore)
    return findings
