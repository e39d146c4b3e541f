from __future__ import annotations

import os
from typing import TYPE_CHECKING

from pathspec import GitIgnoreSpec

from proj2tree.exceptions import IgnoreFileNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

IGNORE_FILE_NAME = ".gitignore"


class IgnoreMatcher:
    """Gitignore rules read from the single ignore file at the scan root.

    Paths are matched relative to the root the matcher was built for. Only the
    path itself is tested, not its parents: the walkers never descend into an
    ignored directory, so its children are never asked about.
    """

    def __init__(self, root: Path, spec: GitIgnoreSpec) -> None:
        self.root = root
        self.spec = spec

    @classmethod
    def from_lines(cls, root: Path, lines: list[str]) -> IgnoreMatcher:
        return cls(root, GitIgnoreSpec.from_lines(lines))

    def is_ignored(self, path: Path, *, is_dir: bool) -> bool:
        """Check whether `path` is excluded by the ignore rules.

        Args:
            path (Path): a path located under the matcher root
            is_dir (bool): whether the path is a directory, so that `dir/` patterns apply

        Returns:
            bool: True if the rules ignore the path, False otherwise
        """
        try:
            rel = path.relative_to(self.root).as_posix()
        except ValueError:
            return False
        if rel in {"", "."}:
            return False
        # decoded the same way as the ignore file lines
        rel = os.fsencode(rel).decode("utf-8", errors="replace")
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)


def create_ignore_matcher(root: Path) -> IgnoreMatcher:
    """Build an IgnoreMatcher from `<root>/.gitignore`.

    Args:
        root (Path): the scan root

    Raises:
        IgnoreFileNotFoundError: if the root holds no `.gitignore`.
        OSError: if the ignore file exists but cannot be read.

    Returns:
        IgnoreMatcher: the matcher for the root
    """
    ignore_file = root / IGNORE_FILE_NAME
    if not ignore_file.is_file():
        raise IgnoreFileNotFoundError(folder=root)
    lines = ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
    return IgnoreMatcher.from_lines(root, lines)
