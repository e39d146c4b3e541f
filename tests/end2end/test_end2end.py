from pathlib import Path

import pytest

from proj2tree import cli


def test_end_to_end_markdown_export(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    repo = tmp_path
    (repo / "src").mkdir()
    (repo / "src" / "app.py").write_text("print('app')\n", encoding="utf-8")
    (repo / "docs.md").write_text("````\nnested\n````", encoding="utf-8")
    (repo / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (repo / ".env").write_text("TOKEN=1\n", encoding="utf-8")
    (repo / "node_modules").mkdir()
    (repo / "node_modules" / "left-pad.js").write_text("pad()\n", encoding="utf-8")

    exit_code = cli.main([str(repo)])

    assert exit_code == 0
    output = repo / "tree.md"
    assert f"Результат сохранен в файл: {output}" in capsys.readouterr().out
    # tree.md is created before the walk and sorts last, so src/ is not the last entry
    assert output.read_text(encoding="utf-8") == (
        f"# Структура проекта: {repo}\n\n"
        "## Дерево файлов\n\n"
        "```\n"
        "├── docs.md\n"
        "├── logo.png\n"
        "├── node_modules/ ...\n"
        "├── src/\n"
        "    └── app.py\n"
        "```\n\n"
        "## Содержимое файлов\n\n"
        "\n### `docs.md`\n\n"
        "`````markdown\n````\nnested\n````\n`````\n"
        "\n### `src/app.py`\n\n"
        "```python\nprint('app')\n```\n"
    )
