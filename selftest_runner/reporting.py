"""Aggregate self-test records into a summary and render the report."""

from collections.abc import Mapping, Sequence
from typing import Any

from selftest_runner.console import (
    FAILURE_INDENT,
    SUMMARY_INDENT,
    UNDERLINE,
    Console,
    indent_lines,
)
from selftest_runner.models.result import RunSummary, TestRunRecord
from selftest_runner.models.script import ScriptCandidate


def condensed_summary(output: str, marker: str) -> Sequence[str]:
    """Non-blank lines that follow the first line containing ``marker``.

    Further lines containing the marker are dropped. Returns an empty list
    when the marker never appears.
    """
    lines: list[str] = []
    found = False
    for line in output.splitlines():
        if marker in line:
            found = True
            continue
        if found and line.strip():
            lines.append(line)
    return lines


def build_summary(
    testable: Sequence[ScriptCandidate],
    skipped: Sequence[ScriptCandidate],
    records: Mapping[str, TestRunRecord],
) -> RunSummary:
    """Count passes and collect failures in discovery order.

    A testable script without a record counts as a failure.
    """
    failed = [
        script.name
        for script in testable
        if script.name not in records or not records[script.name].passed
    ]
    return RunSummary(
        passed_count=len(testable) - len(failed),
        failed=failed,
        skipped=[script.name for script in skipped],
    )


def render_results(
    console: Console,
    testable: Sequence[ScriptCandidate],
    records: Mapping[str, TestRunRecord],
    summary_marker: str,
) -> None:
    """Print one PASS/FAIL entry per script, in the order given."""
    console.line(console.style("    Test Results:", UNDERLINE))
    for script in testable:
        record = records.get(script.name)
        if record is not None and record.passed:
            console.passed(script.name)
            console.lines(
                SUMMARY_INDENT + line
                for line in condensed_summary(record.output, summary_marker)
            )
            continue

        console.failed(script.name)
        if record is None:
            console.line(f"{FAILURE_INDENT}No result was recorded for {script.name}")
        else:
            console.lines(indent_lines(record.output, FAILURE_INDENT))
        console.line()


def render_summary(console: Console, summary: RunSummary) -> None:
    """Print the aggregate counts."""
    console.section("Test Summary:")
    console.ok(f"Passed: {summary.passed_count}")
    if summary.failed:
        console.error(f"Failed: {summary.failed_count}")
        for name in summary.failed:
            console.line(f"  - {name}")
    else:
        console.ok("Failed: 0")

    console.info(f"Not Testable: {summary.skipped_count}")
    if summary.skipped:
        console.info(f"  {' '.join(summary.skipped)}")
    console.line()


def format_output(
    summary: RunSummary, records: Sequence[TestRunRecord]
) -> dict[str, Any]:
    """Format a run for JSON output."""
    return {
        "total": len(records),
        "passed": summary.passed_count,
        "failed": summary.failed_count,
        "not_testable": list(summary.skipped),
        "results": [
            {
                "script": record.script.name,
                "status": "pass" if record.passed else "fail",
                "exit_status": record.exit_status,
                "output": record.output,
            }
            for record in records
        ],
    }
