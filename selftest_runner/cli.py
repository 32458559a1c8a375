"""CLI entry point for the script self-test runner."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from selftest_runner.check import run_check
from selftest_runner.config_loader import load_config
from selftest_runner.console import Console, color_enabled
from selftest_runner.errors import ConfigError, DiscoveryError
from selftest_runner.models.config import RunnerConfig
from selftest_runner.orchestrator import TestOrchestrator
from selftest_runner.reporting import format_output
from selftest_runner.runner import ScriptRunner
from selftest_runner.selftest import run_selftest

LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


async def run(
    console: Console,
    directory: Path,
    config: RunnerConfig,
    *,
    json_output: bool = False,
) -> int:
    """Run every testable script in a directory and return the exit code.

    With ``json_output`` the results document is printed to stdout, so the
    console should write its report elsewhere.
    """
    log = logging.getLogger("selftest_runner")
    log.info("Scanning %s for testable scripts", directory)

    orchestrator = TestOrchestrator(
        runner=ScriptRunner(interpreter=config.interpreter),
        console=console,
        config=config,
    )
    try:
        outcome = await orchestrator.run(directory)
    except DiscoveryError as exc:
        console.fatal(str(exc))
        return 1

    if json_output:
        output = format_output(outcome.summary, outcome.records)
        print(json.dumps(output, indent=2))

    return outcome.summary.exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Discover scripts with a self-test mode and run them in parallel"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-t",
        "--test",
        action="store_true",
        help="Run the runner's own self-test battery",
    )
    mode.add_argument(
        "--check",
        nargs="?",
        const="",
        metavar="PATH",
        help="Report whether a single script is testable",
    )
    parser.add_argument(
        "--directory",
        type=Path,
        default=Path("."),
        help="Directory holding the scripts (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file overriding the runner configuration",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the results as JSON on stdout (the report moves to stderr)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (repeat for debug output)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVELS[min(args.verbose, len(LOG_LEVELS) - 1)],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    report_stream = sys.stderr if args.json else sys.stdout
    console = Console(
        out=report_stream,
        err=sys.stderr,
        color=not args.no_color and color_enabled(report_stream),
    )

    if args.test:
        sys.exit(run_selftest(console))

    if args.check is not None:
        sys.exit(run_check(console, args.check))

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        console.fatal(str(exc))
        sys.exit(1)

    try:
        exit_code = asyncio.run(
            run(console, args.directory, config, json_output=args.json)
        )
    except KeyboardInterrupt:
        console.fatal("Interrupted")
        sys.exit(130)
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
