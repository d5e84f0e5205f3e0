"""Tests for YAML configuration loading."""

import logging
from pathlib import Path

from repohosts.config import ScanConfig, config_from_dict, load_config


def test_missing_file_gives_defaults(tmp_path):
    c = load_config(tmp_path / "absent.yaml")
    assert c == ScanConfig(root=c.root)
    assert c.auto_scan is True
    assert c.ignore is None


def test_full_config(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(
        "auto_scan: false\n"
        f"root: {tmp_path}\n"
        "ignore: [vendor, third_party]\n"
        "add_ignore: build\n"
        "providers:\n"
        "  Internal: 'internalgit\\.corp[:/](?<repo>[^/]+/[^/.]+)'\n"
        "command_timeout: 7\n"
    )
    c = load_config(p)
    assert c.auto_scan is False
    assert c.root == tmp_path
    assert c.ignore == ["vendor", "third_party"]
    assert c.add_ignore == ["build"]
    assert c.providers == {"Internal": r"internalgit\.corp[:/](?<repo>[^/]+/[^/.]+)"}
    assert c.command_timeout == 7.0


def test_malformed_yaml_logged_and_defaulted(tmp_path, caplog):
    p = tmp_path / "config.yaml"
    p.write_text("ignore: [unclosed\n")
    with caplog.at_level(logging.WARNING):
        c = load_config(p)
    assert c.ignore is None
    assert any(str(p) in r.getMessage() for r in caplog.records)


def test_non_mapping_yaml_defaulted(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("- just\n- a list\n")
    assert load_config(p).providers == {}


def test_empty_file_defaults(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("")
    assert load_config(p).auto_scan is True


def test_config_from_dict_home_expansion():
    c = config_from_dict({"root": "~/code", "ignore": []})
    assert c.root == Path.home() / "code"
    assert c.ignore == []
