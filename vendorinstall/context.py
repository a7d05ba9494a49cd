"""Console output for the vendor install tool."""
from __future__ import annotations

import sys


class Console:
    """Simple console output handler with configurable log level.

    Levels: none < error < info < debug
    Default: 'info'. Captured command output bypasses the level check.
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "info": 2,
        "debug": 3,
    }

    def __init__(self, level: str = "info", dry_run: bool = False):
        if level not in self.LEVELS:
            raise ValueError(f"Unknown console level: {level}")
        self.level_name = level
        self.level = self.LEVELS[level]
        self.dry_run = dry_run

    @classmethod
    def from_flags(cls, *, quiet: bool = False, verbose: bool = False, dry_run: bool = False) -> "Console":
        if quiet:
            return cls("error", dry_run=dry_run)
        if verbose:
            return cls("debug", dry_run=dry_run)
        return cls("info", dry_run=dry_run)

    def info(self, message: str) -> None:
        if self.level >= self.LEVELS["info"]:
            print(message)

    def error(self, message: str) -> None:
        if self.level >= self.LEVELS["error"]:
            print(f"error: {message}", file=sys.stderr)

    def dry(self, message: str) -> None:
        if self.dry_run:
            print(message)

    def debug(self, message: str) -> None:
        if self.level >= self.LEVELS["debug"]:
            print(f"[DEBUG] {message}")

    def output(self, text: str) -> None:
        """Emit captured command output regardless of level."""
        if not text:
            return
        sys.stdout.write(text if text.endswith("\n") else f"{text}\n")
        sys.stdout.flush()
