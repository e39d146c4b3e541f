from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from proj2tree.config import EntryClass
from proj2tree.file_manipulation import (
    calculate_fence_length,
    classify_entry,
    display_name,
    file_language,
    is_binary_file,
    is_file_too_large,
    list_entries,
    read_text_strict,
    relpath,
)
from proj2tree.logging import logger

if TYPE_CHECKING:
    from proj2tree.config import ScanContext

CURRENT_DIR_LABEL = "текущая директория"
TITLE_TEMPLATE = "# Структура проекта: {label}\n\n"
TREE_HEADING = "## Дерево файлов\n\n"
CONTENTS_HEADING = "## Содержимое файлов\n\n"
UNREADABLE_PLACEHOLDER = "[Не удалось прочитать файл]"

INDENT = "    "
BRANCH = "├── "
LAST_BRANCH = "└── "
ELLIPSIS = " ..."


def root_label(root: Path) -> str:
    """Return the title label for the scan root."""
    if root == Path():
        return CURRENT_DIR_LABEL
    return display_name(str(root))


def render_tree(ctx: ScanContext, current: Path, out: TextIO, depth: int = 0) -> None:
    """Write the ASCII tree of `current` to `out`, depth first.

    The last-entry glyph is chosen from the position in the full sorted listing,
    hidden entries included, so a hidden last entry leaves its visible siblings
    drawn with `├── `.

    Args:
        ctx (ScanContext): the shared scan context
        current (Path): the directory to list
        out (TextIO): the sink to write lines to
        depth (int): the nesting level of `current` below the root
    """
    entries = list_entries(current)
    last = len(entries) - 1
    for i, path in enumerate(entries):
        outcome = classify_entry(path, path.name, ctx)
        if outcome is EntryClass.EXCLUDED_HIDDEN:
            continue

        name = display_name(path.name)
        prefix = INDENT * depth + (LAST_BRANCH if i == last else BRANCH)
        if outcome is EntryClass.EXCLUDED_VISIBLE:
            out.write(f"{prefix}{name}/{ELLIPSIS}\n")
        elif path.is_dir():
            out.write(f"{prefix}{name}/\n")
            render_tree(ctx, path, out, depth + 1)
        else:
            out.write(f"{prefix}{name}\n")


def render_file(ctx: ScanContext, path: Path, out: TextIO) -> None:
    """Write the heading and fenced block for one included file.

    Content that cannot be decoded or read is replaced by a placeholder block;
    the failure is logged and never stops the walk.
    """
    out.write(f"\n### `{relpath(path, ctx.root)}`\n\n")
    try:
        content = read_text_strict(path)
    except (UnicodeDecodeError, OSError) as e:
        logger.warning("Could not read %s: %s", display_name(str(path)), e)
        out.write(f"```\n{UNREADABLE_PLACEHOLDER}\n```\n")
        return

    fence = "`" * calculate_fence_length(content)
    if not content.endswith("\n"):
        content += "\n"
    out.write(f"{fence}{file_language(path, ctx.policy)}\n")
    out.write(content)
    out.write(f"{fence}\n")


def render_contents(ctx: ScanContext, current: Path, out: TextIO) -> None:
    """Write a fenced block for every included file under `current`.

    Uses the same ordering and classification as `render_tree`, except that
    directories shown with an ellipsis in the tree are simply skipped. Binary
    and oversized files are dropped silently.

    Args:
        ctx (ScanContext): the shared scan context
        current (Path): the directory to walk
        out (TextIO): the sink to write blocks to
    """
    for path in list_entries(current):
        if classify_entry(path, path.name, ctx) is not EntryClass.INCLUDED:
            continue
        if path.is_dir():
            render_contents(ctx, path, out)
            continue
        if is_binary_file(path, ctx.policy) or is_file_too_large(path, ctx.policy):
            continue
        render_file(ctx, path, out)


def write_markdown(ctx: ScanContext, out: TextIO) -> None:
    """Write the whole document for `ctx.root` to `out`.

    The document holds a title, then the tree section and the contents section
    when they are enabled. With both disabled only the title is written. The
    tree is fenced like file contents, so names holding backticks stay inside
    its block.

    Args:
        ctx (ScanContext): the shared scan context
        out (TextIO): the sink
    """
    out.write(TITLE_TEMPLATE.format(label=root_label(ctx.root)))

    if ctx.options.include_tree:
        tree = io.StringIO()
        render_tree(ctx, ctx.root, tree)
        fence = "`" * calculate_fence_length(tree.getvalue())
        out.write(TREE_HEADING)
        out.write(f"{fence}\n")
        out.write(tree.getvalue())
        out.write(f"{fence}\n\n")

    if ctx.options.include_contents:
        out.write(CONTENTS_HEADING)
        render_contents(ctx, ctx.root, out)


def build_markdown(ctx: ScanContext) -> str:
    """Build the document for `ctx.root` and return it as a string."""
    out = io.StringIO()
    write_markdown(ctx, out)
    return out.getvalue()
