"""Models for discovered scripts and their classification."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class ScriptCandidate:
    """A script file found during discovery."""

    path: Path
    name: str

    @classmethod
    def from_path(cls, path: Path) -> "ScriptCandidate":
        """Build a candidate named after the file's base name."""
        return cls(path=path, name=path.name)


@dataclass(frozen=True, kw_only=True)
class ClassificationResult:
    """Whether a script exposes a self-test entry point."""

    script: ScriptCandidate
    testable: bool
