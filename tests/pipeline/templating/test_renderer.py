"""Tests for Jinja2 template rendering and the LaTeX helpers."""

import pytest

from gummibaum.exceptions import ConfigurationError, DataSourceError, TemplateRenderError
from gummibaum.pipeline.expansion.escaping import escape_with_defaults
from gummibaum.pipeline.templating.helpers import make_join, make_latex, verb
from gummibaum.pipeline.templating.renderer import (
    load_template_sources,
    render_template_sources,
    render_templates,
)


def render(source, data=None, escape=None, extra=None):
    sources = {"main.tex": source, **(extra or {})}
    return render_template_sources(sources, "main.tex", data or {}, escape)


def test_expression_delimiters_leave_latex_braces_alone():
    output = render("\\textbf{#( title #)}", {"title": "Hi"})
    assert output == "\\textbf{Hi}"


def test_loop_over_collection(people):
    source = (
        "\\begin{itemize}\n"
        "#(% for person in people %#)\n"
        "\\item #( person.get_by_name('name') #)\n"
        "#(% endfor %#)\n"
        "\\end{itemize}\n"
    )
    output = render(source, {"people": people})
    assert output == (
        "\\begin{itemize}\n\\item Ann\n\\item Bob\n\\item Cy\n\\end{itemize}\n"
    )


def test_comments_are_dropped():
    assert render("a#(# note #)#b") == "ab"


def test_latex_helper_escapes_values():
    escape = escape_with_defaults()
    assert render("#( latex(x, y) #)", {"x": "50%", "y": "R&D"}, escape) == r"50\% R\&D"
    assert render("#( latex(x) #)", {"x": "50%"}, None) == "50%"


def test_join_helper_flattens_lists():
    escape = escape_with_defaults()
    output = render("#( join(', ', items, 'a_b') #)", {"items": ["x&y", "z"]}, escape)
    assert output == r"x\&y, z, a\_b"


def test_verb_helper_in_template():
    assert render("#( verb('|', code) #)", {"code": "a & b"}) == "\\verb|a & b|"


def test_undefined_name_is_render_error():
    with pytest.raises(TemplateRenderError) as excinfo:
        render("#( missing #)")
    assert excinfo.value.context["template"] == "main.tex"
    assert excinfo.value.stage == "parse"


def test_syntax_error_reports_line():
    with pytest.raises(TemplateRenderError) as excinfo:
        render("ok\n#(% for x in %#)\n")
    assert excinfo.value.context["line"] == 2


def test_include_other_template_by_name():
    output = render('A #(% include "part.tex" %#)', {"v": "1"}, extra={"part.tex": "part #( v #)"})
    assert output == "A part 1"


def test_verb_rejects_bad_delimiters():
    with pytest.raises(TemplateRenderError, match="delimiter length"):
        verb("||", "x")
    with pytest.raises(TemplateRenderError, match="contains delimiter"):
        verb("|", "a|b")
    assert verb("!", "a", "b") == "\\verb!a b!"


def test_helpers_without_escape():
    assert make_latex(None)("a&b", 1) == "a&b 1"
    assert make_join(None)("-", ("a", "b"), "c") == "a-b-c"


def test_load_template_sources(tmp_path):
    main = tmp_path / "main.tex"
    main.write_text("#( x #)\n", encoding="utf-8")
    assert load_template_sources([main]) == {"main.tex": "#( x #)\n"}
    assert render_templates([main], {"x": "y"}, None) == "y\n"
    with pytest.raises(ConfigurationError):
        load_template_sources([])
    with pytest.raises(DataSourceError):
        load_template_sources([tmp_path / "nope.tex"])
