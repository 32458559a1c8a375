"""Orchestrator that discovers scripts and runs their self-tests concurrently."""

import asyncio
import logging
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from selftest_runner.classifier import classify_script
from selftest_runner.console import UNDERLINE, Console
from selftest_runner.discovery import discover_scripts
from selftest_runner.errors import LaunchError
from selftest_runner.models.config import RunnerConfig
from selftest_runner.models.result import RunSummary, TestRunRecord
from selftest_runner.models.script import ScriptCandidate
from selftest_runner.reporting import build_summary, render_results, render_summary
from selftest_runner.runner import ScriptRunner

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """Everything produced by one orchestrated run."""

    summary: RunSummary
    records: Sequence[TestRunRecord] = ()


@dataclass(frozen=True, kw_only=True)
class TestOrchestrator:
    """Runs every testable script in a directory and reports the results."""

    __test__ = False

    runner: ScriptRunner
    console: Console
    config: RunnerConfig = field(default_factory=RunnerConfig)

    async def run(self, directory: Path) -> RunOutcome:
        """Discover, classify, execute and report.

        Args:
            directory: Directory holding the scripts

        Returns:
            The summary plus one record per testable script, in discovery
            order

        Raises:
            DiscoveryError: If the directory cannot be scanned; no script is
                started in that case

        """
        candidates = discover_scripts(
            directory,
            pattern=self.config.script_pattern,
            excluded=self.config.excluded_names,
        )
        testable, skipped = self._partition(candidates)

        if not testable:
            log.info("No testable scripts among %d candidate(s)", len(candidates))
            self.console.warn("No testable scripts found.")
            return RunOutcome(summary=build_summary([], skipped, {}))

        self.console.info(f"Found {len(testable)} testable scripts. Running tests...")
        self.console.line()

        records = await self.execute(testable)

        render_results(self.console, testable, records, self.config.summary_marker)
        summary = build_summary(testable, skipped, records)
        render_summary(self.console, summary)

        return RunOutcome(
            summary=summary,
            records=[records[script.name] for script in testable],
        )

    async def execute(
        self, testable: Sequence[ScriptCandidate]
    ) -> Mapping[str, TestRunRecord]:
        """Run all self-tests at once and wait for every one of them.

        Captured output lives in a temporary directory that is removed once
        all runs are over, including when the wait is interrupted. Processes
        already started are not terminated on interruption.

        Returns:
            Records keyed by script name, one per script

        """
        log.info("Dispatching %d self-test(s)...", len(testable))
        heading = self.console.style("    Running tests in parallel...", UNDERLINE)
        self.console.line(heading)
        with tempfile.TemporaryDirectory(prefix="selftest-runner-") as tmp:
            results_dir = Path(tmp)
            async with self.console.spinner("Running all tests"):
                results = await asyncio.gather(
                    *(self.runner.run(script, results_dir) for script in testable),
                    return_exceptions=True,
                )
        log.info("All self-tests completed")

        return self._process_results(testable, results)

    def _partition(
        self, candidates: Sequence[ScriptCandidate]
    ) -> tuple[list[ScriptCandidate], list[ScriptCandidate]]:
        testable: list[ScriptCandidate] = []
        skipped: list[ScriptCandidate] = []
        for candidate in candidates:
            if classify_script(candidate).testable:
                testable.append(candidate)
            else:
                skipped.append(candidate)
        log.info(
            "Classified %d testable, %d not testable", len(testable), len(skipped)
        )
        return testable, skipped

    def _process_results(
        self,
        testable: Sequence[ScriptCandidate],
        results: Sequence[TestRunRecord | BaseException],
    ) -> Mapping[str, TestRunRecord]:
        """Key results by script name, turning exceptions into failed records."""
        records: dict[str, TestRunRecord] = {}

        for script, result in zip(testable, results, strict=True):
            if isinstance(result, TestRunRecord):
                records[script.name] = result
            elif isinstance(result, LaunchError):
                log.error("Could not launch %s: %s", script.name, result.reason)
                records[script.name] = TestRunRecord.launch_failure(
                    script, result.reason
                )
            elif isinstance(result, Exception):
                log.error(
                    "Self-test of %s failed: %s", script.name, result, exc_info=result
                )
                records[script.name] = TestRunRecord.launch_failure(
                    script, str(result)
                )
            else:
                raise result

        return records
