"""gummibaum package.

gummibaum fills LaTeX documents with data. It has two modes:

- ``expand``: substitute constant placeholders and repeat a region marked by
  ``%begin gummibaum repeat`` / ``%end gummibaum repeat`` once per CSV row,
  either into one document or into one file per row;
- ``template``: render Jinja2 templates with constants and CSV collections.

Package Structure
-----------------
- `pipeline/expansion/`:
    Data model, line handlers, document splitter and expansion driver.
- `pipeline/templating/`:
    Jinja2 environment and LaTeX helpers for template mode.
- `config.py`: All configuration constants, as UPPER_SNAKE_CASE.
- `settings.py`: Environment and ``.env`` backed runtime settings.
- `exceptions.py`: Project-specific exception classes.
- `cli.py`: The ``gummibaum`` command.

Examples
--------
>>> from gummibaum.pipeline.expansion import ConstantHandler
>>> ConstantHandler({"X": "foo"}).handle_line("X-X")
'foo-foo'
"""

__version__ = "0.1.0"
