"""Single-file testability check behind the --check flag."""

import os
from pathlib import Path

from selftest_runner.classifier import is_testable
from selftest_runner.console import Console
from selftest_runner.errors import (
    CheckFileNotFoundError,
    CheckFileUnreadableError,
    CheckModeError,
    CheckPathMissingError,
)

TESTABLE = "Testable"
NOT_TESTABLE = "NOT Testable"


def check_script(path: str | Path | None) -> str:
    """Classify one file and return a human-readable verdict.

    Raises:
        CheckPathMissingError: If no path was given
        CheckFileNotFoundError: If the path is not an existing file
        CheckFileUnreadableError: If the file cannot be read

    """
    if path is None or not str(path):
        raise CheckPathMissingError()

    file_path = Path(path)
    if not file_path.is_file():
        raise CheckFileNotFoundError(file_path)
    if not os.access(file_path, os.R_OK):
        raise CheckFileUnreadableError(file_path)

    try:
        source = file_path.read_text(errors="replace")
    except OSError as exc:
        raise CheckFileUnreadableError(file_path) from exc

    return TESTABLE if is_testable(source) else NOT_TESTABLE


def run_check(console: Console, path: str | Path | None) -> int:
    """Print the verdict for one file and return the exit code."""
    try:
        verdict = check_script(path)
    except CheckModeError as exc:
        console.fatal(str(exc))
        return 1

    console.line(verdict)
    return 0
