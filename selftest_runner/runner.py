"""Run a single script's self-test in a subprocess."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from selftest_runner.classifier import TEST_FLAG
from selftest_runner.errors import LaunchError
from selftest_runner.models.result import TestRunRecord
from selftest_runner.models.script import ScriptCandidate

log = logging.getLogger(__name__)


def output_path(results_dir: Path, script: ScriptCandidate) -> Path:
    """Per-script capture file; names are unique within a directory."""
    return results_dir / f"{script.name}.log"


@dataclass(frozen=True, kw_only=True)
class ScriptRunner:
    """Launches scripts with the self-test flag and captures their output."""

    interpreter: Sequence[str] = ("bash",)

    def command(self, script: ScriptCandidate) -> Sequence[str]:
        return [*self.interpreter, str(script.path), TEST_FLAG]

    async def run(self, script: ScriptCandidate, results_dir: Path) -> TestRunRecord:
        """Run one self-test to completion.

        Standard output and standard error are written, interleaved, to a
        file of their own under ``results_dir``. A nonzero exit status is an
        ordinary result.

        Raises:
            LaunchError: If the process cannot be started

        """
        capture = output_path(results_dir, script)
        command = self.command(script)
        log.debug("Launching %s", " ".join(command))

        with capture.open("wb") as sink:
            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    cwd=script.path.parent,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=sink,
                    stderr=asyncio.subprocess.STDOUT,
                )
            except OSError as exc:
                raise LaunchError(script.name, exc.strerror or str(exc)) from exc

            exit_status = await process.wait()

        log.info(
            "Self-test finished: script=%s exit_status=%d", script.name, exit_status
        )
        return TestRunRecord(
            script=script,
            exit_status=exit_status,
            output=capture.read_text(errors="replace"),
        )
