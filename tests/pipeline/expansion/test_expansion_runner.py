"""Tests for the expand-mode runner."""

import logging

import pytest

from gummibaum.exceptions import ConfigurationError, DataSourceError, ParseError
from gummibaum.pipeline.expansion.processor import OutputMode
from gummibaum.pipeline.expansion.runner import (
    ExpandOptions,
    build_handlers,
    configure_logging,
    load_collection,
    run_expand,
)

LETTER = (
    "From: SENDER\n"
    "%begin gummibaum repeat\n"
    "Dear NAME,\n"
    "%end gummibaum repeat\n"
    "Bye\n"
)


@pytest.fixture
def files(tmp_path):
    document = tmp_path / "letter.tex"
    document.write_text(LETTER, encoding="utf-8")
    data = tmp_path / "people.csv"
    data.write_text("name,email\nAnn,a@x\nB&B,b@x\n", encoding="utf-8")
    return tmp_path, document, data


def test_build_handlers_cli_pairs_override_config(tmp_path):
    config = tmp_path / "config.json"
    config.write_text('{"Const": {"A": "file", "B": "file"}, "Rows": {"N": "name"}}', encoding="utf-8")
    options = ExpandOptions(
        document_path=tmp_path / "doc.tex",
        const_pairs=["B=cli"],
        config_path=config,
        escape=False,
    )
    const_handler, row_handler = build_handlers(options)
    assert const_handler.handle_line("A B") == "file cli"
    assert row_handler is not None
    assert dict(row_handler.placeholders) == {"N": "name"}


def test_build_handlers_without_rows():
    _, row_handler = build_handlers(ExpandOptions(document_path="doc.tex"))
    assert row_handler is None


def test_load_collection_optional(files):
    _, document, data = files
    assert load_collection(ExpandOptions(document_path=document)) is None
    collection = load_collection(ExpandOptions(document_path=document, csv_path=data))
    assert len(collection) == 2


def test_run_expand_merge_to_file_escapes_values(files):
    tmp_path, document, data = files
    out = tmp_path / "out.tex"
    options = ExpandOptions(
        document_path=document,
        const_pairs=["SENDER=Me"],
        row_pairs=["NAME=name"],
        csv_path=data,
        output_path=out,
    )
    assert run_expand(options) == 1
    assert out.read_text(encoding="utf-8") == (
        "From: Me\nDear Ann,\nDear B\\&B,\nBye\n"
    )


def test_run_expand_constants_only_needs_no_markers(tmp_path, capsys):
    document = tmp_path / "plain.tex"
    document.write_text("Hello NAME\n", encoding="utf-8")
    run_expand(ExpandOptions(document_path=document, const_pairs=["NAME=World"]))
    assert capsys.readouterr().out == "Hello World\n"


def test_run_expand_fan_out_creates_directory(files):
    tmp_path, document, data = files
    out_dir = tmp_path / "letters" / "2024"
    options = ExpandOptions(
        document_path=document,
        row_pairs=["NAME=name"],
        csv_path=data,
        output_path=out_dir,
        mode=OutputMode.FAN_OUT,
        escape=False,
    )
    assert run_expand(options) == 2
    assert (out_dir / "out2.tex").read_text(encoding="utf-8") == (
        "From: SENDER\nDear B&B,\nBye\n"
    )


def test_run_expand_fan_out_requires_output_and_data(files):
    _, document, data = files
    with pytest.raises(ConfigurationError):
        run_expand(ExpandOptions(document_path=document, csv_path=data, mode=OutputMode.FAN_OUT))
    with pytest.raises(ConfigurationError):
        run_expand(
            ExpandOptions(document_path=document, output_path=data.parent, mode=OutputMode.FAN_OUT)
        )


def test_run_expand_fails_before_writing_on_bad_input(files):
    tmp_path, document, _ = files
    out = tmp_path / "out.tex"
    bad_csv = tmp_path / "bad.csv"
    bad_csv.write_text('name\n"Ann"x\n', encoding="utf-8")
    options = ExpandOptions(
        document_path=document, row_pairs=["NAME=name"], csv_path=bad_csv, output_path=out
    )
    with pytest.raises(ParseError):
        run_expand(options)
    assert not out.exists()
    with pytest.raises(DataSourceError):
        run_expand(ExpandOptions(document_path=tmp_path / "missing.tex"))
    with pytest.raises(ParseError):
        run_expand(ExpandOptions(document_path=document, row_pairs=["NAME"]))


def test_run_expand_missing_marker_with_rows(tmp_path):
    document = tmp_path / "plain.tex"
    document.write_text("no markers\n", encoding="utf-8")
    with pytest.raises(ParseError, match="begin marker"):
        run_expand(ExpandOptions(document_path=document, row_pairs=["NAME=name"]))


def test_configure_logging_replaces_handlers():
    root = logging.getLogger()
    saved = root.handlers[:]
    saved_level = root.level
    try:
        configure_logging("DEBUG", enable_file=False)
        configure_logging("warning", enable_file=False)
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in saved:
            root.addHandler(handler)
        root.setLevel(saved_level)
