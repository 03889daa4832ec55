"""Tests for the command-line entry point."""

import logging

import pytest

from gummibaum.cli import build_parser, main
from gummibaum.settings import RuntimeSettings

LETTER = (
    "\\documentclass{letter}\n"
    "%begin gummibaum repeat\n"
    "Dear NAME,\n"
    "%end gummibaum repeat\n"
    "\\end{document}\n"
)


@pytest.fixture(autouse=True)
def restore_logging():
    """``main`` reconfigures the root logger; put the previous state back."""
    root = logging.getLogger()
    saved = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in saved:
        root.addHandler(handler)
    root.setLevel(saved_level)


@pytest.fixture
def workspace(isolated_env):
    (isolated_env / "letter.tex").write_text(LETTER, encoding="utf-8")
    (isolated_env / "people.csv").write_text("name\nAnn\nBob\n", encoding="utf-8")
    return isolated_env


def test_parser_defaults_follow_settings(isolated_env, monkeypatch):
    monkeypatch.setenv("GUMMIBAUM_CSV_DELIMITER", ";")
    monkeypatch.setenv("GUMMIBAUM_NO_ESCAPE", "1")
    parser = build_parser(RuntimeSettings())
    args = parser.parse_args(["expand", "--file", "x.tex"])
    assert args.delimiter == ";"
    assert args.no_escape is True
    assert args.fan_out is False
    args = parser.parse_args(["template", "a.tex", "b.tex", "--csv", "p.csv", "--csv", "q.csv"])
    assert [path.name for path in args.templates] == ["a.tex", "b.tex"]
    assert [path.name for path in args.csv] == ["p.csv", "q.csv"]


def test_expand_merge_to_stdout(workspace, capsys):
    code = main(["expand", "--file", "letter.tex", "--csv", "people.csv", "--row", "NAME=name"])
    assert code == 0
    assert capsys.readouterr().out == (
        "\\documentclass{letter}\nDear Ann,\nDear Bob,\n\\end{document}\n"
    )


def test_expand_fan_out(workspace):
    code = main(
        [
            "expand",
            "--file",
            "letter.tex",
            "--csv",
            "people.csv",
            "--row",
            "NAME=name",
            "--fan-out",
            "--out",
            "letters",
        ]
    )
    assert code == 0
    assert sorted(path.name for path in (workspace / "letters").iterdir()) == [
        "out1.tex",
        "out2.tex",
    ]
    assert "Dear Bob," in (workspace / "letters" / "out2.tex").read_text(encoding="utf-8")


def test_expand_error_reports_stage_and_exit_status(workspace, capsys):
    (workspace / "broken.tex").write_text("%begin gummibaum repeat\nx\n", encoding="utf-8")
    code = main(["expand", "--file", "broken.tex", "--row", "X=x"])
    assert code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "parse error" in captured.err
    assert "end marker" in captured.err


def test_expand_missing_document_is_io_error(workspace, capsys):
    assert main(["expand", "--file", "nope.tex"]) == 1
    assert "I/O error" in capsys.readouterr().err


def test_template_command(workspace, capsys):
    (workspace / "t.tex").write_text(
        "#(% for p in people %#)\n#( latex(p.value('name')) #)\n#(% endfor %#)\n",
        encoding="utf-8",
    )
    assert main(["template", "t.tex", "--csv", "people.csv"]) == 0
    assert capsys.readouterr().out == "Ann\nBob\n"


def test_invalid_environment_aborts(workspace, monkeypatch, capsys):
    monkeypatch.setenv("GUMMIBAUM_NO_ESCAPE", "perhaps")
    assert main(["expand", "--file", "letter.tex"]) == 1
    assert "configuration error" in capsys.readouterr().err


def test_missing_subcommand_exits_with_usage(workspace):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
