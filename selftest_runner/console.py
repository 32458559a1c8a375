"""Console output formatting for reports and status messages."""

import asyncio
import contextlib
import os
import sys
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass, field
from typing import TextIO

RESET = "\033[0m"
BOLD = "\033[1m"
UNDERLINE = "\033[4m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
LIGHT_RED = "\033[31;1m"
LIGHT_GREEN = "\033[32;1m"
LIGHT_BLUE = "\033[34;1m"

SPINNER_FRAMES = "⣾⣷⣯⣟⡿⢿⣻⣽"
SPINNER_INTERVAL = 0.1

FAILURE_INDENT = " " * 8
SUMMARY_INDENT = " " * 6


def color_enabled(stream: TextIO) -> bool:
    """Whether ANSI colors should be written to a stream."""
    if os.environ.get("NO_COLOR"):
        return False
    return stream.isatty()


def indent_lines(text: str, prefix: str) -> list[str]:
    """Prefix every line of a block of text."""
    return [prefix + line for line in text.splitlines()]


@dataclass(frozen=True, kw_only=True)
class Console:
    """Writes styled messages to an output and an error stream.

    The console holds no mutable state; callers pass it to whatever needs to
    print.
    """

    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)
    color: bool = False

    def style(self, text: str, *codes: str) -> str:
        if not self.color or not codes:
            return text
        return "".join(codes) + text + RESET

    def line(self, text: str = "") -> None:
        print(text, file=self.out)

    def lines(self, texts: Iterable[str]) -> None:
        for text in texts:
            self.line(text)

    def ok(self, message: str) -> None:
        self.line(f"[{self.style('✓', BOLD, GREEN)}] {message}")

    def info(self, message: str) -> None:
        self.line(f"[{self.style('i', BOLD, YELLOW)}] {message}")

    def warn(self, message: str) -> None:
        self.line(f"[{self.style('!', BOLD, YELLOW)}] {message}")

    def error(self, message: str) -> None:
        icon = self.style("✗", BOLD, RED)
        self.line(f"[{icon}] {self.style(message, BOLD, LIGHT_RED)}")

    def fatal(self, message: str) -> None:
        """Report an error that ends the invocation, on the error stream."""
        print(f"[{self.style('✗', BOLD, RED)}] {message}", file=self.err)

    def section(self, title: str) -> None:
        self.line()
        self.line(self.style(title, UNDERLINE))

    def passed(self, name: str) -> None:
        self.ok(f"{self.style('PASS', LIGHT_GREEN)}: {self.style(name, LIGHT_BLUE)}")

    def failed(self, name: str) -> None:
        self.error(f"FAIL: {name}")

    @contextlib.asynccontextmanager
    async def spinner(self, description: str) -> AsyncIterator[None]:
        """Animate a spinner on the error stream while the body runs.

        Nothing is drawn unless the error stream is a terminal.
        """
        if not self.err.isatty():
            yield
            return

        task = asyncio.create_task(self._spin(description))
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            self.err.write("\r\033[K")
            self.err.flush()

    async def _spin(self, description: str) -> None:
        frame = 0
        while True:
            glyph = self.style(SPINNER_FRAMES[frame], LIGHT_BLUE)
            self.err.write(f"\r    {glyph} {description}")
            self.err.flush()
            frame = (frame + 1) % len(SPINNER_FRAMES)
            await asyncio.sleep(SPINNER_INTERVAL)
