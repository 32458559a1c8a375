"""Models for self-test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass

from selftest_runner.models.script import ScriptCandidate

LAUNCH_FAILURE_STATUS = 127


@dataclass(frozen=True, kw_only=True)
class TestRunRecord:
    """Outcome of running one script's self-test.

    The exit status is recorded verbatim: zero is a pass, anything else
    (including negative values for signals) is a failure.
    """

    __test__ = False

    script: ScriptCandidate
    exit_status: int
    output: str

    @property
    def passed(self) -> bool:
        """Whether the self-test exited successfully."""
        return self.exit_status == 0

    @classmethod
    def launch_failure(cls, script: ScriptCandidate, reason: str) -> "TestRunRecord":
        """Record for a script whose process never started."""
        return cls(
            script=script,
            exit_status=LAUNCH_FAILURE_STATUS,
            output=f"Failed to launch {script.name}: {reason}\n",
        )


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Aggregate counts for a complete run."""

    passed_count: int
    failed: Sequence[str] = ()
    skipped: Sequence[str] = ()

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 iff nothing failed."""
        return 1 if self.failed else 0
