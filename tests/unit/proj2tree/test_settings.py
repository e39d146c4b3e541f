from pathlib import Path

import pytest

from proj2tree.settings import Settings


@pytest.mark.unit
def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.directory == Path()
    assert settings.output is None
    assert settings.no_tree is False
    assert settings.no_contents is False
    assert settings.print_to_console is False
    assert settings.no_gitignore is False


@pytest.mark.unit
def test_output_path_defaults_to_tree_md_in_target() -> None:
    settings = Settings(directory=Path("project"))

    assert settings.output_path() == Path("project") / "tree.md"
    assert settings.output_name() == "tree.md"


@pytest.mark.unit
def test_output_name_uses_explicit_output_basename() -> None:
    settings = Settings(output=Path("docs/snapshot.md"), print_to_console=True)

    assert settings.output_name() == "snapshot.md"


@pytest.mark.unit
def test_print_without_output_excludes_nothing() -> None:
    settings = Settings(print_to_console=True)

    assert settings.output_name() is None
