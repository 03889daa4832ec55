"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides small shared fixtures for documents and collections.
"""

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from gummibaum.pipeline.expansion.collection import Collection, MemorySource  # noqa: E402


@pytest.fixture
def people() -> Collection:
    """Three columns with a name and an email field."""
    return Collection.from_source(
        MemorySource(
            ["name", "email"],
            [
                ["Ann", "ann@example.org"],
                ["Bob", "bob@example.org"],
                ["Cy", "cy@example.org"],
            ],
        )
    )


@pytest.fixture
def letter_lines() -> list[str]:
    """A document with a two-line repeated body."""
    return [
        "\\documentclass{letter}",
        "From: SENDER",
        "%begin gummibaum repeat",
        "Dear NAME,",
        "mail: EMAIL",
        "%end gummibaum repeat",
        "\\end{document}",
    ]


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run in an empty working directory without GUMMIBAUM_* variables."""
    for name in ("GUMMIBAUM_LOG_LEVEL", "GUMMIBAUM_CSV_DELIMITER", "GUMMIBAUM_NO_ESCAPE"):
        # Set first so values loaded from a .env file are undone as well.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
