from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from proj2tree.config import (
    DEFAULT_LANGUAGE,
    ExclusionPolicy,
    load_builtin_config,
    load_config_file,
    parse_config_payload,
)
from proj2tree.exceptions import ConfigParseError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.unit
def test_parse_config_payload_reads_section() -> None:
    payload = """
proj2tree:
  exclude_dirs: [node_modules, target]
  exclude_files: ["*.lock", Makefile]
  exclude_extensions: [PNG, .jpg]
  max_file_size: 1024
  extension_mapping:
    RS: rust
"""
    policy = parse_config_payload(payload)

    assert policy.exclude_dirs == frozenset({"node_modules", "target"})
    assert policy.exclude_files == ("*.lock", "Makefile")
    assert policy.exclude_extensions == frozenset({"png", "jpg"})
    assert policy.max_file_size == 1024
    assert policy.language_for("rs") == "rust"


@pytest.mark.unit
def test_parse_config_payload_missing_fields_default_to_empty() -> None:
    policy = parse_config_payload("proj2tree:\n  exclude_dirs: [dist]\n")

    assert policy.exclude_files == ()
    assert policy.exclude_extensions == frozenset()
    assert policy.max_file_size is None
    assert policy.language_for("py") == DEFAULT_LANGUAGE


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        "proj2tree: [unclosed",
        "other: {}\n",
        "proj2tree:\n  max_file_size: lots\n",
    ],
)
def test_parse_config_payload_rejects_bad_payloads(payload: str) -> None:
    with pytest.raises(ConfigParseError):
        parse_config_payload(payload)


@pytest.mark.unit
def test_builtin_config_is_loaded() -> None:
    policy = load_builtin_config()

    assert "node_modules" in policy.exclude_dirs
    assert "png" in policy.exclude_extensions
    assert policy.language_for("py") == "python"
    assert policy.max_file_size is not None


@pytest.mark.unit
def test_load_config_file_falls_back_to_empty_policy(tmp_path: Path) -> None:
    broken = tmp_path / "rules.yaml"
    broken.write_text("proj2tree: [oops", encoding="utf-8")

    assert load_config_file(broken) == ExclusionPolicy()
    assert load_config_file(tmp_path / "missing.yaml") == ExclusionPolicy()


@pytest.mark.unit
def test_policy_is_immutable() -> None:
    policy = ExclusionPolicy()

    with pytest.raises(ValidationError):
        policy.max_file_size = 10  # type: ignore[misc]


@pytest.mark.unit
def test_extension_mapping_is_read_only() -> None:
    policy = parse_config_payload("proj2tree:\n  extension_mapping:\n    py: python\n")

    with pytest.raises(TypeError):
        policy.extension_mapping["py"] = "ruby"  # type: ignore[index]
    assert policy.language_for("py") == "python"
