"""Repo scanner — walks a tree and inspects each git clone."""

from .git import collect_repo_info, run_git
from .walker import walk

__all__ = ["collect_repo_info", "run_git", "walk"]
