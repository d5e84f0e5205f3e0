"""repohosts — Classify local git clones by hosting provider."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("repohosts")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
