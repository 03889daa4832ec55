"""Tests for the application exception hierarchy."""

import pytest

from gummibaum.exceptions import (
    AppError,
    ColumnKeyError,
    ConfigurationError,
    DataSourceError,
    OutputError,
    ParseError,
    TemplateRenderError,
    UsageError,
)


@pytest.mark.parametrize(
    ("cls", "code", "stage"),
    [
        (ConfigurationError, "CONFIGURATION_ERROR", "config"),
        (ParseError, "PARSE_ERROR", "parse"),
        (TemplateRenderError, "TEMPLATE_RENDER_ERROR", "parse"),
        (DataSourceError, "DATA_SOURCE_ERROR", "io"),
        (OutputError, "OUTPUT_ERROR", "io"),
        (ColumnKeyError, "COLUMN_KEY_ERROR", "lookup"),
        (UsageError, "USAGE_ERROR", "usage"),
    ],
)
def test_codes_and_stages(cls, code, stage):
    error = cls("boom", context={"line": 3})
    assert isinstance(error, AppError)
    assert error.code == code
    assert error.stage == stage
    assert str(error) == f"{code}: boom"
    assert error.to_dict() == {
        "error_code": code,
        "message": "boom",
        "stage": stage,
        "context": {"line": 3},
    }


def test_context_is_copied():
    context = {"column": 1}
    error = OutputError("failed", context=context)
    context["column"] = 2
    assert error.context == {"column": 1}
    assert OutputError("failed").context == {}


def test_column_key_error_is_lookup_error():
    with pytest.raises(LookupError):
        raise ColumnKeyError("no such field")


def test_template_render_error_is_parse_error():
    with pytest.raises(ParseError):
        raise TemplateRenderError("bad template")
