"""Jinja2 rendering for template mode.

Template mode hands loops and conditionals to Jinja2. Because ``{{`` and
``}}`` are everywhere in LaTeX, the environment uses ``#( ... #)`` for
expressions, ``#(% ... %#)`` for statements and ``#(# ... #)#`` for
comments.

All given template files are loaded; the first one is rendered and the
others can be pulled in by file name, e.g. ``#(% include "table.tex" %#)``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from gummibaum.config import (
    DEFAULT_ENCODING,
    TEMPLATE_BLOCK_END,
    TEMPLATE_BLOCK_START,
    TEMPLATE_COMMENT_END,
    TEMPLATE_COMMENT_START,
    TEMPLATE_VARIABLE_END,
    TEMPLATE_VARIABLE_START,
)
from gummibaum.exceptions import (
    ConfigurationError,
    DataSourceError,
    TemplateRenderError,
)
from gummibaum.pipeline.expansion.escaping import EscapeFunc

from .helpers import make_join, make_latex, verb

logger = logging.getLogger(__name__)


def create_environment(
    escape: EscapeFunc | None, templates: Mapping[str, str] | None = None
) -> Environment:
    """Create the Jinja2 environment with LaTeX-friendly delimiters and helpers.

    Parameters
    ----------
    escape : EscapeFunc | None
        Escape function used by the ``latex`` and ``join`` helpers.
    templates : Mapping[str, str] | None, optional
        Template sources by name, available to ``include`` and ``import``.
    """
    env = Environment(
        loader=DictLoader(dict(templates or {})),
        variable_start_string=TEMPLATE_VARIABLE_START,
        variable_end_string=TEMPLATE_VARIABLE_END,
        block_start_string=TEMPLATE_BLOCK_START,
        block_end_string=TEMPLATE_BLOCK_END,
        comment_start_string=TEMPLATE_COMMENT_START,
        comment_end_string=TEMPLATE_COMMENT_END,
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["latex"] = make_latex(escape)
    env.globals["verb"] = verb
    env.globals["join"] = make_join(escape)
    return env


def load_template_sources(paths: Sequence[Path]) -> dict[str, str]:
    """Read template files into a mapping from file name to source text.

    Raises
    ------
    ConfigurationError
        If ``paths`` is empty.
    DataSourceError
        If a file can't be read.
    """
    if not paths:
        raise ConfigurationError("no template file names given")
    sources: dict[str, str] = {}
    for path in paths:
        path = Path(path)
        try:
            sources[path.name] = path.read_text(encoding=DEFAULT_ENCODING)
        except (OSError, UnicodeDecodeError) as error:
            raise DataSourceError(
                f"unable to read template {path}: {error}", context={"path": str(path)}
            ) from error
    return sources


def render_template_sources(
    sources: Mapping[str, str],
    main: str,
    data: Mapping[str, Any],
    escape: EscapeFunc | None,
) -> str:
    """Render template ``main`` out of ``sources`` with ``data``.

    Raises
    ------
    TemplateRenderError
        For syntax errors, undefined names or failing helpers.
    """
    env = create_environment(escape, sources)
    try:
        template = env.get_template(main)
        return template.render(**data)
    except TemplateError as error:
        context: dict[str, Any] = {"template": main}
        lineno = getattr(error, "lineno", None)
        if lineno is not None:
            context["line"] = lineno
        raise TemplateRenderError(
            f"failed to render template {main}: {error}", context=context
        ) from error


def render_templates(
    paths: Sequence[Path], data: Mapping[str, Any], escape: EscapeFunc | None
) -> str:
    """Load ``paths`` and render the first one with ``data``."""
    sources = load_template_sources(paths)
    main = Path(paths[0]).name
    logger.debug("Rendering %s with %d template files", main, len(sources))
    return render_template_sources(sources, main, data, escape)
