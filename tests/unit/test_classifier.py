"""Tests for the testability classifier."""

from pathlib import Path

import pytest

from selftest_runner.classifier import (
    classify_script,
    is_dispatch_line,
    is_testable,
    strip_comment,
)
from selftest_runner.models.script import ScriptCandidate
from selftest_runner.selftest import CLASSIFIER_GROUPS, ClassifierFixture

BUILTIN_FIXTURES = [
    fixture for group in CLASSIFIER_GROUPS for fixture in group.fixtures
]


@pytest.mark.parametrize(
    "fixture", BUILTIN_FIXTURES, ids=[f.filename for f in BUILTIN_FIXTURES]
)
def test_builtin_fixtures(fixture: ClassifierFixture) -> None:
    """Every fixture of the built-in battery is classified as expected."""
    assert is_testable(fixture.source) is fixture.testable


@pytest.mark.parametrize(
    "source",
    [
        'elif [ "$1" = "--test" ]; then',
        "    (-t|--test)",
        '    "-t"|"--test")',
        "    '-t'|'--test')",
        "  --other|'-t')",
        'if [[ $# -gt 0 && "$1" == "-t" ]]; then',
        "if [ '$1' = '-t' ]; then",
        "\t--test)",
        "  --other  |  -t  )",
    ],
)
def test_accepts_dispatch_shapes(source: str) -> None:
    """Recognizes case labels and if comparisons in their common spellings."""
    assert is_testable(source)


@pytest.mark.parametrize(
    "source",
    [
        'case "$1" in --test-all) exit 0 ;; esac',
        'case "$1" in --tests) exit 0 ;; esac',
        'case "$1" in --no-t) exit 0 ;; esac',
        "echo $(ls -t)",
        "files=$(ls -t)",
        "tar -tf archive.tar",
        'run_tests # if [[ "$1" == "-t" ]]; then',
        "    # -t|--test)",
        "test -f /etc/hosts && echo ok",
        "",
    ],
)
def test_rejects_look_alikes(source: str) -> None:
    """Rejects longer flags, option clusters, substitutions and comments."""
    assert not is_testable(source)


@pytest.mark.parametrize(
    "source",
    [
        'echo "Use -t|--test) for tests"',
        "echo \"if you pass '-t' it runs\"",
    ],
)
def test_flag_inside_string_literal_counts(source: str) -> None:
    """Quotes are not tracked, so flag-like text in a string is a dispatch."""
    assert is_testable(source)


def test_multiline_body_after_label() -> None:
    """Detects a label whose body continues on the following lines."""
    source = "\n".join(
        [
            "#!/bin/bash",
            "main() {",
            '  case "${1:-}" in',
            "    --test|-t)",
            "      run_tests",
            '      exit "$?"',
            "      ;;",
            "  esac",
            "}",
        ]
    )

    assert is_testable(source)


def test_strip_comment_keeps_parameter_count() -> None:
    """Does not treat $# as the start of a comment."""
    assert strip_comment('echo $# # count') == "echo $#"


def test_is_dispatch_line_ignores_blank_lines() -> None:
    assert not is_dispatch_line("   ")


def test_classify_script_reads_file(tmp_path: Path) -> None:
    """Classifies a script from its file contents."""
    path = tmp_path / "tool.sh"
    path.write_text('case "$1" in -t|--test) exit 0 ;; esac\n')
    script = ScriptCandidate.from_path(path)

    result = classify_script(script)

    assert result.script == script
    assert result.testable is True


def test_classify_script_unreadable_is_not_testable(tmp_path: Path) -> None:
    """Treats a file that cannot be read as not testable."""
    script = ScriptCandidate.from_path(tmp_path / "missing.sh")

    result = classify_script(script)

    assert result.testable is False
