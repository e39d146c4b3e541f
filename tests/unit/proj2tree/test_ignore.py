from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from proj2tree.exceptions import IgnoreFileNotFoundError
from proj2tree.ignore import IgnoreMatcher, create_ignore_matcher

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.unit
def test_create_ignore_matcher_requires_gitignore(tmp_path: Path) -> None:
    with pytest.raises(IgnoreFileNotFoundError) as exc_info:
        create_ignore_matcher(tmp_path)

    assert exc_info.value.folder == tmp_path


@pytest.mark.unit
def test_matcher_applies_directory_and_glob_patterns(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("build/\n*.log\n!keep.log\n", encoding="utf-8")
    matcher = create_ignore_matcher(tmp_path)

    assert matcher.is_ignored(tmp_path / "build", is_dir=True)
    assert not matcher.is_ignored(tmp_path / "build", is_dir=False)
    assert matcher.is_ignored(tmp_path / "src" / "debug.log", is_dir=False)
    assert not matcher.is_ignored(tmp_path / "keep.log", is_dir=False)
    assert not matcher.is_ignored(tmp_path / "main.py", is_dir=False)


@pytest.mark.unit
def test_matcher_never_ignores_paths_outside_root(tmp_path: Path) -> None:
    matcher = IgnoreMatcher.from_lines(tmp_path / "root", ["*"])

    assert not matcher.is_ignored(tmp_path / "elsewhere.txt", is_dir=False)
    assert not matcher.is_ignored(tmp_path / "root", is_dir=True)
