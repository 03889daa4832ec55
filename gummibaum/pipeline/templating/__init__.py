"""Template-mode package.

Renders LaTeX templates with Jinja2, using constants and CSV collections as
data. Unlike expand mode, loops and conditionals are written in the template
itself.

>>> from gummibaum.pipeline.templating import render_template_sources
>>> render_template_sources({"t.tex": "#( latex(name) #)"}, "t.tex", {"name": "A&B"}, None)
'A&B'
"""

from .helpers import make_join, make_latex, verb
from .renderer import (
    create_environment,
    load_template_sources,
    render_template_sources,
    render_templates,
)
from .runner import TemplateOptions, build_template_data, load_template_data, run_template

__all__ = [
    "TemplateOptions",
    "build_template_data",
    "create_environment",
    "load_template_data",
    "load_template_sources",
    "make_join",
    "make_latex",
    "render_template_sources",
    "render_templates",
    "run_template",
    "verb",
]
