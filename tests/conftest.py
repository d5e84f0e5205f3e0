"""Shared fixtures: throwaway git repositories built with the real git binary."""

import subprocess
from pathlib import Path

import pytest


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=repohosts",
            "-c", "user.email=repohosts@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git():
    return _git


@pytest.fixture
def make_repo():
    """Create a repo at path on an unborn branch with the given remotes."""

    def _make(path: Path, remotes=(), branch: str = "main") -> Path:
        path.mkdir(parents=True, exist_ok=True)
        _git(path, "init", "-q")
        _git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
        for name, url in remotes:
            _git(path, "remote", "add", name, url)
        return path

    return _make
