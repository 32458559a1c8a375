"""End-to-end runs of the CLI against directories of real scripts."""

import json
import shutil
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from selftest_runner.cli import main

WriteScript = Callable[[str, str], Path]

pytestmark = pytest.mark.skipif(shutil.which("bash") is None, reason="needs bash")


def run_main(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return int(exc_info.value.code or 0)


def test_mixed_results_report(
    write_script: WriteScript,
    scripts_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """One pass, one failure and one script without a self-test."""
    write_script(
        "a.sh",
        """
        case "$1" in
            -t|--test)
                echo "running checks"
                echo "Test Summary:"
                echo "Passed: 3"
                exit 0
                ;;
        esac
        """,
    )
    write_script(
        "b.sh",
        """
        if [[ "$1" == "--test" ]]; then
            echo "boom"
            exit 1
        fi
        """,
    )
    write_script("c.sh", 'echo "no self-test here"\n')

    exit_code = run_main(["--directory", str(scripts_dir), "--no-color"])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 1
    assert "[i] Found 2 testable scripts. Running tests..." in lines
    assert lines.index("[✓] PASS: a.sh") < lines.index("[✗] FAIL: b.sh")
    assert "      Passed: 3" in lines
    assert "running checks" not in "\n".join(lines)
    assert "        boom" in lines
    assert "[✓] Passed: 1" in lines
    assert "[✗] Failed: 1" in lines
    assert "  - b.sh" in lines
    assert "[i] Not Testable: 1" in lines
    assert "[i]   c.sh" in lines


def test_no_testable_scripts(
    write_script: WriteScript,
    scripts_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    write_script("plain.sh", 'echo "hello"\n')

    exit_code = run_main(["--directory", str(scripts_dir)])

    assert exit_code == 0
    assert "No testable scripts found" in capsys.readouterr().out


def test_all_passing_exits_zero(
    write_script: WriteScript,
    scripts_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    for name in ("one.sh", "two.sh"):
        write_script(
            name, 'if [[ "$1" == "-t" || "$1" == "--test" ]]; then exit 0; fi\n'
        )

    exit_code = run_main(["--directory", str(scripts_dir)])

    assert exit_code == 0
    assert "Failed: 0" in capsys.readouterr().out


def test_runner_and_shared_library_are_not_run(
    write_script: WriteScript,
    scripts_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """The runner's own file and the shared library are never candidates."""
    dispatch = 'case "$1" in -t|--test) echo "ran $0"; exit 1 ;; esac\n'
    write_script("test-all.sh", dispatch)
    write_script("shared.sh", dispatch)
    write_script("tool.sh", 'case "$1" in -t|--test) exit 0 ;; esac\n')

    exit_code = run_main(["--directory", str(scripts_dir)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "test-all.sh" not in out
    assert "shared.sh" not in out
    assert "PASS: tool.sh" in out


def test_report_order_with_delays(
    write_script: WriteScript,
    scripts_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Slow scripts early in the order still report first; runs overlap."""
    delays = {"a.sh": "1.2", "b.sh": "0.8", "c.sh": "0.4"}
    for name, delay in delays.items():
        write_script(
            name,
            f"""
            if [[ "$1" == "--test" ]]; then sleep {delay}; exit 0; fi
            """,
        )

    started = time.monotonic()
    exit_code = run_main(["--directory", str(scripts_dir), "--no-color"])
    elapsed = time.monotonic() - started

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    positions = [lines.index(f"[✓] PASS: {name}") for name in delays]
    assert positions == sorted(positions)
    assert elapsed < 2.2


def test_json_output_keeps_stdout_parseable(
    write_script: WriteScript,
    scripts_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Stdout holds only the JSON document; the report goes to stderr."""
    write_script("a.sh", 'case "$1" in -t) echo "{ oops"; exit 2 ;; esac\n')
    write_script("b.sh", 'case "$1" in -t) exit 0 ;; esac\n')
    write_script("z.sh", 'echo "plain"\n')

    exit_code = run_main(["--directory", str(scripts_dir), "--json", "--no-color"])

    captured = capsys.readouterr()
    document = json.loads(captured.out)
    assert exit_code == 1
    assert document["passed"] == 1
    assert document["failed"] == 1
    assert document["not_testable"] == ["z.sh"]
    assert [result["script"] for result in document["results"]] == ["a.sh", "b.sh"]
    assert document["results"][0]["exit_status"] == 2
    assert document["results"][0]["output"] == "{ oops\n"
    assert "FAIL: a.sh" in captured.err
    assert "PASS: b.sh" in captured.err


def test_config_changes_pattern(
    write_script: WriteScript,
    scripts_dir: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    write_script("tool.bash", 'case "$1" in -t) exit 0 ;; esac\n')
    write_script("tool.sh", 'case "$1" in -t) exit 1 ;; esac\n')
    config = tmp_path / "selftest.yaml"
    config.write_text('script_pattern: "*.bash"\n')

    exit_code = run_main(["--directory", str(scripts_dir), "--config", str(config)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "PASS: tool.bash" in out
    assert "tool.sh" not in out
