from __future__ import annotations

import logging
from pathlib import Path

from varnet.config import (
    load_config,
    log_level,
    logging_defaults,
    merge_payload,
    scan_defaults,
    scan_include_hsba,
    scan_type_list,
)


def test_missing_config_is_empty(tmp_path: Path) -> None:
    assert load_config(root=tmp_path) == {}
    assert scan_defaults(root=tmp_path) == {}


def test_invalid_toml_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "varnet.toml").write_text("[scan\ntypes = ", encoding="utf-8")
    assert load_config(root=tmp_path) == {}


def test_scan_section(tmp_path: Path) -> None:
    (tmp_path / "varnet.toml").write_text(
        '[scan]\ntypes = ["color", "FLOAT, string"]\ninclude_hsba = true\n',
        encoding="utf-8",
    )
    section = scan_defaults(root=tmp_path)
    assert scan_type_list(section) == ["COLOR", "FLOAT", "STRING"]
    assert scan_include_hsba(section) is True


def test_explicit_config_path(tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    path.write_text('[logging]\nlevel = "debug"\n', encoding="utf-8")
    assert log_level(logging_defaults(config_path=path)) == logging.DEBUG


def test_log_level_defaults_to_warning() -> None:
    assert log_level(None) == logging.WARNING
    assert log_level({"level": "nonsense"}) == logging.WARNING


def test_scan_helpers_tolerate_bad_sections() -> None:
    assert scan_type_list(None) == []
    assert scan_type_list({"types": 3}) == []
    assert scan_include_hsba({"include_hsba": "yes"}) is True
    assert scan_include_hsba({}) is False


def test_merge_payload_keeps_defaults_for_none() -> None:
    merged = merge_payload({"types": None, "document": "a.json"}, {"types": ["COLOR"]})
    assert merged == {"types": ["COLOR"], "document": "a.json"}
