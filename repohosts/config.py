"""Scan configuration loaded from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# ~/.repohosts/config.yaml
CONFIG_PATH = Path.home() / ".repohosts" / "config.yaml"


@dataclass
class ScanConfig:
    """Settings read once at process start."""

    auto_scan: bool = True  # scan `root` as soon as the service starts
    root: Path = field(default_factory=Path.cwd)
    ignore: Optional[list[str]] = None  # replaces the default ignore set
    add_ignore: list[str] = field(default_factory=list)
    providers: dict[str, str] = field(default_factory=dict)  # name -> pattern with a `repo` group
    command_timeout: Optional[float] = None  # seconds per git call


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def config_from_dict(data: dict) -> ScanConfig:
    """Build ScanConfig from a mapping (e.g. parsed YAML)."""
    timeout = data.get("command_timeout")
    return ScanConfig(
        auto_scan=bool(data.get("auto_scan", True)),
        root=Path(data["root"]).expanduser() if data.get("root") else Path.cwd(),
        ignore=_as_list(data["ignore"]) if data.get("ignore") is not None else None,
        add_ignore=_as_list(data.get("add_ignore")),
        providers={str(k): str(v) for k, v in (data.get("providers") or {}).items()},
        command_timeout=float(timeout) if timeout is not None else None,
    )


def load_config(path: Optional[Path] = None) -> ScanConfig:
    """Load config from path (default ~/.repohosts/config.yaml).

    A missing file gives defaults; an unreadable or malformed one is logged
    and also gives defaults.
    """
    path = Path(path) if path is not None else CONFIG_PATH
    if not path.exists():
        return ScanConfig()
    try:
        data = yaml.safe_load(path.read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError("top level must be a mapping")
        return config_from_dict(data)
    except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Ignoring config %s: %s", path, e)
        return ScanConfig()
