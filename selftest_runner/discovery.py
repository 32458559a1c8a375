"""Discover candidate scripts in a directory."""

import logging
from collections.abc import Collection, Sequence
from fnmatch import fnmatch
from pathlib import Path

from selftest_runner.errors import DiscoveryError
from selftest_runner.models.script import ScriptCandidate

log = logging.getLogger(__name__)


def discover_scripts(
    directory: Path,
    *,
    pattern: str = "*.sh",
    excluded: Collection[str] = (),
) -> Sequence[ScriptCandidate]:
    """List the scripts directly inside a directory.

    Args:
        directory: Directory to scan (subdirectories are not descended into)
        pattern: Glob pattern a file name must match
        excluded: File names to leave out, such as the runner itself and
            the shared library

    Returns:
        Candidates sorted by file name.

    Raises:
        DiscoveryError: If the directory is missing or cannot be read

    """
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise DiscoveryError(directory, exc.strerror or str(exc)) from exc

    candidates = [
        ScriptCandidate.from_path(entry)
        for entry in entries
        if fnmatch(entry.name, pattern)
        and entry.name not in excluded
        and entry.is_file()
    ]
    candidates.sort(key=lambda candidate: candidate.name)

    log.info("Discovered %d script(s) in %s", len(candidates), directory)
    return candidates
