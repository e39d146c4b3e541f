from __future__ import annotations

import os
from typing import TYPE_CHECKING

from proj2tree.config import EntryClass
from proj2tree.ignore import IGNORE_FILE_NAME

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from proj2tree.config import ExclusionPolicy, ScanContext

BACKTICK = "`"


def display_name(name: str) -> str:
    """Make a filesystem name safe to write to a UTF-8 sink.

    Names that are not valid UTF-8 on disk come back from `os` with surrogate
    escapes; their undecodable bytes are replaced with U+FFFD.
    """
    return os.fsencode(name).decode("utf-8", errors="replace")


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is the root itself, returns `./<name>`.
            If path is not under root, returns the original path as a string.
    """
    try:
        rel = path.relative_to(root).as_posix()
    except ValueError:
        return display_name(path.as_posix())
    if rel in {"", "."}:
        return f"./{display_name(path.name)}"
    return display_name(rel)


def file_extension(path: Path) -> str:
    """Return the lowercased extension of `path` without its dot, or "" if none."""
    return path.suffix.lower().lstrip(".")


def file_language(path: Path, policy: ExclusionPolicy) -> str:
    """Determine the code fence language of a file from its extension.

    Args:
        path (Path): the file path to analyze
        policy (ExclusionPolicy): the policy holding the extension mapping

    Returns:
        str: the mapped language, or the default tag for unknown extensions
    """
    return policy.language_for(file_extension(path))


def is_binary_file(path: Path, policy: ExclusionPolicy) -> bool:
    ext = file_extension(path)
    return bool(ext) and ext in policy.exclude_extensions


def is_file_too_large(path: Path, policy: ExclusionPolicy) -> bool:
    """Check a file against the policy's size ceiling.

    A file whose size cannot be read is not considered too large.
    """
    if policy.max_file_size is None:
        return False
    try:
        return path.stat().st_size > policy.max_file_size
    except OSError:
        return False


def matches_file_pattern(name: str, patterns: Sequence[str]) -> bool:
    """Check a basename against exclusion patterns.

    `*.<suffix>` patterns match when the name ends with `<suffix>` or contains
    `.<suffix>` anywhere (so `*.min.js` hides `app.min.js` and `*.log` hides
    `server.log.1`). Any other pattern must equal the name exactly.

    Args:
        name (str): the file basename
        patterns (Sequence[str]): the patterns to test

    Returns:
        bool: True if any pattern matches, False otherwise
    """
    for pattern in patterns:
        if pattern.startswith("*."):
            suffix = pattern[2:]
            if name.endswith(suffix) or f".{suffix}" in name:
                return True
        elif name == pattern:
            return True
    return False


def classify_entry(path: Path, name: str, ctx: ScanContext) -> EntryClass:
    """Decide how a filesystem entry appears in the document.

    Rules are evaluated in order and the first match wins:

    1. ignored by the root `.gitignore`: directories are shown with an ellipsis,
       files are hidden;
    2. dotfiles and dot-directories other than `.gitignore` are hidden;
    3. directories named in `exclude_dirs` are shown with an ellipsis;
    4. files matching `exclude_files` are hidden;
    5. the document's own output file is hidden;
    6. everything else is included.

    Binary and oversized files are included here; only the content renderer
    drops them.

    Args:
        path (Path): the entry path, located under `ctx.root`
        name (str): the entry basename
        ctx (ScanContext): the shared scan context

    Returns:
        EntryClass: the classification of the entry
    """
    is_dir = path.is_dir()

    if ctx.matcher is not None and ctx.matcher.is_ignored(path, is_dir=is_dir):
        return EntryClass.EXCLUDED_VISIBLE if is_dir else EntryClass.EXCLUDED_HIDDEN

    if name.startswith(".") and name != IGNORE_FILE_NAME:
        return EntryClass.EXCLUDED_HIDDEN

    if is_dir and name in ctx.policy.exclude_dirs:
        return EntryClass.EXCLUDED_VISIBLE

    if not is_dir and matches_file_pattern(name, ctx.policy.exclude_files):
        return EntryClass.EXCLUDED_HIDDEN

    if ctx.options.output_name is not None and name == ctx.options.output_name:
        return EntryClass.EXCLUDED_HIDDEN

    return EntryClass.INCLUDED


def list_entries(directory: Path) -> list[Path]:
    """List a directory sorted by basename in byte order.

    Errors while listing propagate to the caller.
    """
    return sorted(directory.iterdir(), key=lambda p: os.fsencode(p.name))


def calculate_fence_length(content: str) -> int:
    """Compute how many backticks are needed to fence `content` safely.

    The fence is one longer than the longest backtick run in the content, and
    never shorter than 3. Content that already holds a 3-backtick fence or a
    template-literal interpolation (`` `${ ``) gets at least 4.

    Args:
        content (str): the text to be fenced

    Returns:
        int: the fence length, at least 3
    """
    longest = 0
    current = 0
    for char in content:
        if char == BACKTICK:
            current += 1
            continue
        longest = max(longest, current)
        current = 0
    longest = max(longest, current)

    base_minimum = 4 if BACKTICK * 3 in content or "`${" in content else 3
    return max(base_minimum, longest + 1)


def read_text_strict(path: Path) -> str:
    """Read a file as UTF-8 without newline translation.

    Raises:
        UnicodeDecodeError: if the bytes are not valid UTF-8.
        OSError: if the file cannot be read.
    """
    return path.read_bytes().decode("utf-8")
