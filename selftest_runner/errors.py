"""Exceptions raised while discovering, checking and running scripts."""

from pathlib import Path


class SelftestRunnerError(Exception):
    """Base class for all runner errors."""


class ConfigError(SelftestRunnerError):
    """Raised when the runner configuration cannot be loaded."""


class DiscoveryError(SelftestRunnerError):
    """Raised when the target directory cannot be scanned."""

    def __init__(self, directory: Path, reason: str) -> None:
        super().__init__(f"Cannot read script directory {directory}: {reason}")
        self.directory = directory


class LaunchError(SelftestRunnerError):
    """Raised when a script's self-test process cannot be started."""

    def __init__(self, script_name: str, reason: str) -> None:
        super().__init__(reason)
        self.script_name = script_name
        self.reason = reason


class CheckModeError(SelftestRunnerError):
    """Raised when a single-file check cannot be performed."""


class CheckPathMissingError(CheckModeError):
    """Raised when --check is given without a path."""

    def __init__(self) -> None:
        super().__init__("The --check flag requires a file path.")


class CheckFileNotFoundError(CheckModeError):
    """Raised when the file to check does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class CheckFileUnreadableError(CheckModeError):
    """Raised when the file to check cannot be read."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"File is not readable: {path}")
        self.path = path
