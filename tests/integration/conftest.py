"""Fixtures for integration tests."""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def scripts_dir(tmp_path: Path) -> Path:
    """Create an empty directory of scripts."""
    directory = tmp_path / "scripts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_script(scripts_dir: Path) -> Callable[[str, str], Path]:
    """Return a function to create bash scripts in the scripts directory."""

    def _write(name: str, body: str) -> Path:
        path = scripts_dir / name
        path.write_text("#!/bin/bash\n" + textwrap.dedent(body).lstrip("\n"))
        return path

    return _write
