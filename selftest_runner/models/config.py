"""Configuration for a self-test run."""

from collections.abc import Sequence

from pydantic import Field

from selftest_runner.models.base import Model


class RunnerConfig(Model):
    """Settings controlling discovery, execution and reporting."""

    script_pattern: str = Field(
        default="*.sh", description="Glob pattern selecting candidate scripts"
    )
    interpreter: Sequence[str] = Field(
        default=("bash",),
        description="Command prefix used to run a script (empty runs it directly)",
    )
    runner_name: str = Field(
        default="test-all.sh",
        description="File name of the runner itself, never treated as a candidate",
    )
    shared_library_name: str = Field(
        default="shared.sh",
        description="File name of the shared library sourced by the scripts",
    )
    summary_marker: str = Field(
        default="Test Summary",
        description="Marker line starting the condensed block shown for passes",
    )

    @property
    def excluded_names(self) -> Sequence[str]:
        """File names discovery must skip."""
        return (self.runner_name, self.shared_library_name)
