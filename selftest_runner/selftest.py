"""Built-in self-test battery run by ``selftest-runner --test``.

Writes a set of small synthetic scripts to a temporary directory and checks
that each is classified as expected, then exercises the ``--check`` mode
against a few of them.
"""

import io
import logging
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from selftest_runner.check import NOT_TESTABLE, TESTABLE, run_check
from selftest_runner.classifier import is_testable
from selftest_runner.console import Console

log = logging.getLogger(__name__)

MULTILINE_CASE = """\
#!/bin/bash
case "$1" in
    -h|--help) echo "Help"; exit 0 ;;
    -t|--test)
        echo "Running tests"
        exit 0
        ;;
    *) echo "Default"; exit 1 ;;
esac
"""


@dataclass(frozen=True, kw_only=True)
class ClassifierFixture:
    """A synthetic script and the classification it must receive."""

    filename: str
    source: str
    testable: bool
    description: str


@dataclass(frozen=True, kw_only=True)
class FixtureGroup:
    title: str
    fixtures: Sequence[ClassifierFixture]


def _group(
    title: str, testable: bool, cases: Sequence[tuple[str, str, str]]
) -> FixtureGroup:
    return FixtureGroup(
        title=title,
        fixtures=tuple(
            ClassifierFixture(
                filename=filename,
                source=source + "\n",
                testable=testable,
                description=description,
            )
            for filename, source, description in cases
        ),
    )


CLASSIFIER_GROUPS: Sequence[FixtureGroup] = (
    _group(
        "Testing script detection logic for -- case --",
        True,
        [
            (
                "testable_case.sh",
                'case "$1" in -t|--test) exit 0 ;; esac',
                "Detects 'case' statement with -t|--test",
            ),
            (
                "testable_case_single.sh",
                'case "$1" in -t) exit 0 ;; esac',
                "Detects 'case' statement with just -t",
            ),
            (
                "testable_case_indent.sh",
                "    -t|--test) # indented case",
                "Detects indented 'case' statement",
            ),
            (
                "testable_case_t_first.sh",
                'case "$1" in -t|--other) exit 0;; esac',
                "Detects 'case' with -t as first option",
            ),
            (
                "testable_case_t_last.sh",
                'case "$1" in --other|-t) exit 0;; esac',
                "Detects 'case' with -t as last option",
            ),
            (
                "testable_case_long_first.sh",
                'case "$1" in --test|-t) exit 0;; esac',
                "Detects 'case' with --test before -t",
            ),
            (
                "testable_case_indent_single.sh",
                "    -t) # indented case with only -t",
                "Detects indented 'case' with only -t",
            ),
        ],
    ),
    _group(
        "Testing whitespace variations",
        True,
        [
            (
                "testable_case_space_before_pipe.sh",
                'case "$1" in -t  |--test) exit 0;; esac',
                "Detects 'case' with space before pipe",
            ),
            (
                "testable_case_space_after_pipe.sh",
                'case "$1" in -t|  --test) exit 0;; esac',
                "Detects 'case' with space after pipe",
            ),
            (
                "testable_case_many_spaces.sh",
                'case "$1" in -t  |  --test  ) exit 0;; esac',
                "Detects 'case' with multiple spaces",
            ),
            (
                "testable_case_indent_spaces.sh",
                "  -t) # indented with spaces",
                "Detects indented 'case' with spaces",
            ),
        ],
    ),
    _group(
        "Testing script detection logic for -- if --",
        True,
        [
            (
                "testable_if.sh",
                'if [[ "$1" == "-t" ]]; then exit 0; fi',
                "Detects 'if' statement with -t",
            ),
            (
                "testable_if_long.sh",
                'if [[ "$1" == "--test" ]]; then exit 0; fi',
                "Detects 'if' statement with --test",
            ),
            (
                "testable_if_or.sh",
                'if [[ "$a" == "b" || "$1" == "--test" ]]; then exit 0; fi',
                "Detects 'if' statement with ||",
            ),
        ],
    ),
    _group(
        "Testing multi-line case statements",
        True,
        [
            (
                "testable_case_multiline_full.sh",
                MULTILINE_CASE,
                "Detects multi-line 'case' statement",
            ),
        ],
    ),
    _group(
        "Testing non-testable scripts are skipped",
        False,
        [
            (
                "not_testable_substring.sh",
                'case "$1" in --teaast) exit 0 ;; esac',
                "Skips substring matches like --teaast",
            ),
            (
                "not_testable_simple.sh",
                'echo "no test flag"',
                "Skips script with no test flag",
            ),
            (
                "not_testable_comment.sh",
                "# This is a comment about -t|--test)",
                "Skips commented out test flag",
            ),
            (
                "not_testable_word.sh",
                'echo "this is a test"',
                "Skips the word 'test'",
            ),
            (
                "not_testable_false_positive.sh",
                "ss -tlpn | column -t",
                "Skips false positive from 'column -t)'",
            ),
            (
                "not_testable_other_flag.sh",
                'if [[ "$1" == "--another-test" ]]; then exit 0; fi',
                "Skips other similar flags",
            ),
        ],
    ),
)


@dataclass(frozen=True, kw_only=True)
class SelfTestSuite:
    """Counts passes and failures while reporting each assertion."""

    console: Console

    def run(self) -> int:
        """Run the whole battery and return the exit code."""
        outcomes: list[bool] = []
        with tempfile.TemporaryDirectory(prefix="selftest-runner-fixtures-") as tmp:
            fixture_dir = Path(tmp)
            self._write_fixtures(fixture_dir)

            for group in CLASSIFIER_GROUPS:
                self.console.section(group.title)
                for fixture in group.fixtures:
                    source = (fixture_dir / fixture.filename).read_text()
                    verdict = is_testable(source)
                    outcomes.append(
                        self._expect(fixture.description, fixture.testable, verdict)
                    )

            self.console.section("Testing command-line flags")
            outcomes.extend(self._check_mode_cases(fixture_dir))

        passed = sum(outcomes)
        failed = len(outcomes) - passed
        self.console.section("Test Summary:")
        self.console.ok(f"Passed: {passed}")
        if failed:
            self.console.error(f"Failed: {failed}")
        else:
            self.console.ok("Failed: 0")
        return 1 if failed else 0

    def _write_fixtures(self, fixture_dir: Path) -> None:
        for group in CLASSIFIER_GROUPS:
            for fixture in group.fixtures:
                (fixture_dir / fixture.filename).write_text(fixture.source)

    def _check_mode_cases(self, fixture_dir: Path) -> list[bool]:
        outcomes = [
            self._expect_check(
                "Reports 'Testable' for a testable file via --check",
                fixture_dir / "testable_case.sh",
                code=0,
                output=TESTABLE,
            ),
            self._expect_check(
                "Reports 'NOT Testable' for a non-testable file via --check",
                fixture_dir / "not_testable_simple.sh",
                code=0,
                output=NOT_TESTABLE,
            ),
            self._expect_check(
                "Fails when --check is missing a file path", None, code=1
            ),
            self._expect_check(
                "Fails when --check file does not exist",
                fixture_dir / "does_not_exist.sh",
                code=1,
            ),
        ]

        unreadable = fixture_dir / "unreadable.sh"
        unreadable.touch()
        unreadable.chmod(0)
        if os.access(unreadable, os.R_OK):
            # Permission bits do not apply, for instance when running as root.
            self.console.info("Skipped: --check on an unreadable file")
        else:
            outcomes.append(
                self._expect_check(
                    "Fails when --check file is not readable", unreadable, code=1
                )
            )
        unreadable.chmod(0o600)
        return outcomes

    def _expect(self, description: str, expected: object, actual: object) -> bool:
        if expected == actual:
            self.console.ok(description)
            return True
        self.console.error(f"{description} (expected {expected!r}, got {actual!r})")
        log.debug("Self-test assertion failed: %s", description)
        return False

    def _expect_check(
        self,
        description: str,
        path: Path | None,
        *,
        code: int,
        output: str | None = None,
    ) -> bool:
        out, err = io.StringIO(), io.StringIO()
        actual_code = run_check(Console(out=out, err=err), path)
        if output is not None and out.getvalue().strip() != output:
            return self._expect(description, output, out.getvalue().strip())
        return self._expect(description, code, actual_code)


def run_selftest(console: Console) -> int:
    """Run the built-in battery and return the exit code."""
    return SelfTestSuite(console=console).run()
