"""Tests for the tree walker (no git needed: repos are bare .git markers)."""

import asyncio
import logging
import threading
from pathlib import Path

import pytest

from repohosts.scanner import walker
from repohosts.scanner.walker import walk


def _tree(base: Path, *dirs: str) -> None:
    for d in dirs:
        (base / d).mkdir(parents=True, exist_ok=True)


def _walk(root, **kwargs):
    seen = []

    async def on_repo(d):
        seen.append(d.relative_to(root).as_posix())

    findings = asyncio.run(walk(root, on_repo, **kwargs))
    return seen, findings


def test_finds_repos_in_sorted_preorder(tmp_path):
    _tree(tmp_path, "b/.git", "a/.git", "a/sub/.git", "c/plain")
    seen, findings = _walk(tmp_path)
    assert seen == ["a", "a/sub", "b"]
    assert findings.repos_seen == 3


def test_root_itself_can_be_a_repo(tmp_path):
    _tree(tmp_path, ".git", "inner/.git")
    seen, _ = _walk(tmp_path)
    assert seen == [".", "inner"]


def test_gitfile_marker_counts(tmp_path):
    """Worktrees and submodules have a .git file instead of a directory."""
    _tree(tmp_path, "wt")
    (tmp_path / "wt" / ".git").write_text("gitdir: /elsewhere\n")
    seen, _ = _walk(tmp_path)
    assert seen == ["wt"]


def test_ignored_names_are_never_entered(tmp_path):
    _tree(tmp_path, "r1/.git", "r1/node_modules/dep/.git", "r1/node_modules/.git", "deep/x/node_modules/y/.git")
    seen, _ = _walk(tmp_path, ignore=frozenset({"node_modules"}))
    assert seen == ["r1"]


def test_git_directory_is_not_descended(tmp_path):
    _tree(tmp_path, "r/.git/modules/sub/.git")
    seen, _ = _walk(tmp_path)
    assert seen == ["r"]


def test_symlinked_directories_not_followed(tmp_path):
    _tree(tmp_path, "real/.git")
    (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
    seen, _ = _walk(tmp_path)
    assert seen == ["real"]


def test_unreadable_directory_skipped_and_logged(tmp_path, monkeypatch, caplog):
    _tree(tmp_path, "locked/inner/.git", "open/.git")
    real_list = walker._list_subdirs

    def flaky(d):
        if d.name == "locked":
            raise PermissionError(13, "Permission denied", str(d))
        return real_list(d)

    monkeypatch.setattr(walker, "_list_subdirs", flaky)
    with caplog.at_level(logging.WARNING):
        seen, findings = _walk(tmp_path)
    assert seen == ["open"]
    assert findings.unreadable == [str(tmp_path / "locked")]
    assert any(str(tmp_path / "locked") in r.getMessage() for r in caplog.records)


def test_missing_root_is_reported_not_raised(tmp_path):
    seen, findings = _walk(tmp_path / "nope")
    assert seen == []
    assert findings.unreadable == [str(tmp_path / "nope")]


def test_cancel_stops_the_walk(tmp_path):
    _tree(tmp_path, "a/.git", "b/.git", "c/.git")
    cancel = threading.Event()
    seen = []

    async def on_repo(d):
        seen.append(d.name)
        cancel.set()

    findings = asyncio.run(walk(tmp_path, on_repo, cancel=cancel))
    assert seen == ["a"]
    assert findings.cancelled


def test_failing_repo_callback_does_not_abort_walk(tmp_path, caplog):
    _tree(tmp_path, "a/.git", "b/.git", "b/nested/.git", "c/.git")
    seen = []

    async def on_repo(d):
        if d.name == "b":
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        seen.append(d.relative_to(tmp_path).as_posix())

    with caplog.at_level(logging.WARNING):
        findings = asyncio.run(walk(tmp_path, on_repo))
    assert seen == ["a", "b/nested", "c"]
    assert findings.failed == [str(tmp_path / "b")]
    assert findings.repos_seen == 4
    assert any(str(tmp_path / "b") in r.getMessage() for r in caplog.records)


def test_cancelled_callback_propagates(tmp_path):
    _tree(tmp_path, "a/.git", "b/.git")

    async def on_repo(d):
        raise asyncio.CancelledError

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(walk(tmp_path, on_repo))


def test_very_deep_tree(tmp_path):
    depth = 1100
    bottom = tmp_path
    for _ in range(depth):
        bottom = bottom / "d"
        bottom.mkdir()
    (bottom / ".git").mkdir()
    seen, findings = _walk(tmp_path)
    assert seen == ["/".join(["d"] * depth)]
    assert findings.failed == []
