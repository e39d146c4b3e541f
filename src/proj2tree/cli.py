"""
proj2tree: snapshot a directory as a single Markdown document.

Overview
--------
The document holds:

1) a title naming the scanned directory,
2) an ASCII tree of the directory (`--no-tree` to skip it),
3) every included text file in a fenced code block tagged with its language
   (`--no-contents` to skip them).

Dotfiles are always hidden except `.gitignore`, whose rules are honoured unless
`--no-gitignore` is given. Built-in exclusion rules (directories, file patterns,
binary extensions, size ceiling) ship with the package and can be replaced with
`--config rules.yaml`.

Usage
-----
    - Write `tree.md` into the current directory:
        proj2tree

    - Scan `src/` and write the result elsewhere:
        proj2tree src --output snapshot.md

    - Tree only, printed to the console:
        proj2tree --no-contents --print
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from proj2tree import __version__
from proj2tree.config import RenderOptions, ScanContext, load_builtin_config, load_config_file
from proj2tree.exceptions import IgnoreFileNotFoundError, TargetDirectoryError
from proj2tree.ignore import create_ignore_matcher
from proj2tree.logging import logger, setup_logging
from proj2tree.output_construction import write_markdown
from proj2tree.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from proj2tree.config import ExclusionPolicy
    from proj2tree.ignore import IgnoreMatcher


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    p = argparse.ArgumentParser(
        prog="proj2tree",
        description="Render a directory tree and its file contents as Markdown.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Целевая директория для анализа",
    )
    p.add_argument("-o", "--output", type=str, default=None, metavar="FILE", help="Выходной файл")
    p.add_argument("-T", "--no-tree", action="store_true", help="Не выводить дерево файлов")
    p.add_argument("-C", "--no-contents", action="store_true", help="Не выводить содержимое файлов")
    p.add_argument(
        "-p",
        "--print",
        dest="print_to_console",
        action="store_true",
        help="Вывести результат в консоль",
    )
    p.add_argument(
        "-G",
        "--no-gitignore",
        action="store_true",
        help="Не учитывать правила из .gitignore",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="FILE",
        help="YAML file replacing the built-in exclusion rules.",
    )
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    args = p.parse_args(argv)
    return Settings(**vars(args))


def check_target(directory: Path) -> None:
    """Make sure the scan target exists and is a directory.

    Raises:
        TargetDirectoryError: if it does not exist or is not a directory.
    """
    if not directory.is_dir():
        raise TargetDirectoryError(directory=directory)


def load_policy(settings: Settings) -> ExclusionPolicy:
    if settings.config is not None:
        return load_config_file(settings.config)
    return load_builtin_config()


def build_matcher(root: Path, *, disabled: bool) -> IgnoreMatcher | None:
    """Build the root `.gitignore` matcher, or None when disabled or unavailable.

    A missing or unreadable ignore file is reported and otherwise ignored.
    """
    if disabled:
        logger.info("Gitignore handling disabled")
        return None
    try:
        matcher = create_ignore_matcher(root)
    except IgnoreFileNotFoundError as e:
        logger.warning("%s (%s)", e.message, e.folder)
        return None
    except OSError as e:
        logger.warning("Could not read .gitignore in %s: %s", root, e)
        return None
    logger.info("Applied .gitignore rules from %s", root)
    return matcher


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    root = settings.directory
    try:
        check_target(root)
    except TargetDirectoryError as e:
        logger.error(e.message, directory=str(e.directory))
        print(f"Ошибка: '{e.directory}' не является существующей директорией", file=sys.stderr)
        return 1

    ctx = ScanContext(
        root=root,
        policy=load_policy(settings),
        matcher=build_matcher(root, disabled=settings.no_gitignore),
        options=RenderOptions(
            include_tree=not settings.no_tree,
            include_contents=not settings.no_contents,
            output_name=settings.output_name(),
        ),
    )

    if settings.print_to_console:
        write_markdown(ctx, sys.stdout)
        sys.stdout.flush()
    else:
        out_path = settings.output_path()
        with out_path.open("w", encoding="utf-8", newline="") as fh:
            write_markdown(ctx, fh)
        logger.info("Wrote %s", out_path)
        print(f"Результат сохранен в файл: {out_path}")

    logger.info("Scanned directory %s", root)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
