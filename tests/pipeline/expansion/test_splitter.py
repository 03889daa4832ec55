"""Tests for splitting documents into head, body and foot."""

import io

import pytest

from gummibaum.exceptions import DataSourceError, ParseError
from gummibaum.pipeline.expansion.splitter import read_lines, split_document

BEGIN = "%begin gummibaum repeat"
END = "%end gummibaum repeat"


def test_split_sections_and_line_count(letter_lines):
    document = split_document(letter_lines)
    assert document.head == ("\\documentclass{letter}", "From: SENDER")
    assert document.body == ("Dear NAME,", "mail: EMAIL")
    assert document.foot == ("\\end{document}",)
    total = len(document.head) + len(document.body) + len(document.foot)
    assert total == len(letter_lines) - 2
    assert split_document(letter_lines) == document


def test_markers_match_by_prefix():
    document = split_document([BEGIN + " -- start", "x", END + "!", "y"])
    assert document.head == ()
    assert document.body == ("x",)
    assert document.foot == ("y",)


def test_markers_are_case_sensitive_and_literal():
    with pytest.raises(ParseError):
        split_document(["%BEGIN gummibaum repeat", "x", END])
    with pytest.raises(ParseError):
        split_document([" " + BEGIN, "x", END])


def test_foot_keeps_marker_lines_verbatim():
    document = split_document([BEGIN, "a", END, BEGIN, END, "z"])
    assert document.body == ("a",)
    assert document.foot == (BEGIN, END, "z")


def test_second_begin_marker_inside_body_is_body_content():
    document = split_document([BEGIN, BEGIN, END])
    assert document.body == (BEGIN,)


def test_empty_body():
    document = split_document(["h", BEGIN, END])
    assert document.body == ()
    assert document.lines() == ("h",)


@pytest.mark.parametrize(
    "lines",
    [
        [BEGIN, "body"],
        ["head", BEGIN, "a", "b"],
        [BEGIN],
    ],
)
def test_missing_end_marker_is_parse_error(lines):
    with pytest.raises(ParseError) as excinfo:
        split_document(lines)
    assert "end marker" in excinfo.value.message
    assert excinfo.value.stage == "parse"


def test_missing_begin_marker_is_parse_error():
    with pytest.raises(ParseError) as excinfo:
        split_document(["only", "head", END])
    assert "begin marker" in excinfo.value.message
    assert excinfo.value.context["lines"] == 3


def test_custom_markers():
    document = split_document(["<<", "x", ">>"], begin_marker="<<", end_marker=">>")
    assert document.body == ("x",)


def test_read_lines_strips_terminators():
    stream = io.StringIO("a\nb\r\nc")
    assert read_lines(stream) == ["a", "b", "c"]
    assert read_lines(io.StringIO("")) == []
    assert read_lines(io.StringIO("x\n\n")) == ["x", ""]


def test_read_lines_translates_decode_errors(tmp_path):
    path = tmp_path / "bad.tex"
    path.write_bytes(b"ok\n\xff\xfe\n")
    with path.open("r", encoding="utf-8") as stream:
        with pytest.raises(DataSourceError):
            read_lines(stream)
