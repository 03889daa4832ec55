"""Run the local checks for gummibaum.

Steps, in order, stopping at the first failure:

1. the unit tests with branch coverage of ``gummibaum``;
2. the examples embedded in the package docstrings;
3. the unit tests again in a second random order;
4. an end-to-end run of ``gummibaum expand --fan-out`` on a generated
   letter, checking one output file per CSV row.

Usage
-----
python tools/run_all_checks.py [--skip-smoke]
"""

from __future__ import annotations

import argparse
import subprocess
import sys
import tempfile
from collections.abc import Callable
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

SMOKE_LETTER = (
    "\\documentclass{letter}\n"
    "%begin gummibaum repeat\n"
    "Dear NAME,\n"
    "%end gummibaum repeat\n"
    "\\end{document}\n"
)
SMOKE_ROWS = ("Ann", "B&B", "Cy")


def _call(cmd: list[str], cwd: Path = PROJECT_ROOT) -> bool:
    """Echo and run ``cmd``; True if it exits with status 0."""
    print(f"[checks] {' '.join(cmd)}")
    return subprocess.run(cmd, cwd=cwd).returncode == 0


def unit_tests_with_coverage() -> bool:
    return _call(
        [
            sys.executable,
            "-m",
            "pytest",
            "-q",
            "--maxfail=1",
            "--randomly-seed=1",
            "--cov=gummibaum",
            "--cov-branch",
            "--cov-report=term-missing",
        ]
    )


def docstring_examples() -> bool:
    return _call([sys.executable, "-m", "pytest", "-q", "--doctest-modules", "gummibaum"])


def unit_tests_reordered() -> bool:
    return _call([sys.executable, "-m", "pytest", "-q", "--maxfail=1", "--randomly-seed=2"])


def cli_fan_out_smoke() -> bool:
    """Expand a generated letter per CSV row and check the written files."""
    with tempfile.TemporaryDirectory(prefix="gummibaum-smoke-") as tmp:
        workdir = Path(tmp)
        (workdir / "letter.tex").write_text(SMOKE_LETTER, encoding="utf-8")
        (workdir / "people.csv").write_text(
            "name\n" + "\n".join(SMOKE_ROWS) + "\n", encoding="utf-8"
        )
        ok = _call(
            [
                sys.executable,
                "-m",
                "gummibaum.cli",
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
            ],
            cwd=workdir,
        )
        if not ok:
            return False
        written = sorted(path.name for path in (workdir / "letters").glob("*.tex"))
        expected = [f"out{index}.tex" for index in range(1, len(SMOKE_ROWS) + 1)]
        if written != expected:
            print(f"[checks] expected {expected}, found {written}")
            return False
        second = (workdir / "letters" / "out2.tex").read_text(encoding="utf-8")
        if "Dear B\\&B," not in second:
            print("[checks] out2.tex lacks the escaped row value")
            return False
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--skip-smoke", action="store_true", help="Skip the end-to-end CLI run."
    )
    args = parser.parse_args(argv)

    checks: list[tuple[str, Callable[[], bool]]] = [
        ("unit tests + coverage", unit_tests_with_coverage),
        ("docstring examples", docstring_examples),
        ("unit tests, second order", unit_tests_reordered),
    ]
    if not args.skip_smoke:
        checks.append(("expand --fan-out smoke run", cli_fan_out_smoke))
    for label, check in checks:
        print(f"[checks] == {label}")
        if not check():
            print(f"[checks] failed: {label}")
            return 1
    print(f"[checks] {len(checks)} checks passed")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
