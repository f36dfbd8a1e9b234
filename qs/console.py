"""
qs.console - Status reporting

Every user-facing operation reports through a Console: status lines go to
stdout, errors to stderr, and, when a log file is attached, every message is
also appended to it as a trace line.
"""

import sys
from dataclasses import dataclass
from typing import Any


@dataclass
class Console:
    """Reports progress of a single qs invocation."""

    log_file: Any = None

    # Number of errors reported so far (used for --strict exit codes)
    errors: int = 0

    def _log(self, message: str) -> None:
        """Write a trace line to the log file, if one is attached."""
        if self.log_file:
            self.log_file.write(f"[qs] {message}\n")
            self.log_file.flush()

    def info(self, message: str = "") -> None:
        print(message)
        if message:
            self._log(message)

    def success(self, message: str) -> None:
        print(f"  ✓ {message}")
        self._log(f"ok: {message}")

    def warning(self, message: str) -> None:
        print(f"Warning: {message}")
        self._log(f"warning: {message}")

    def error(self, message: str) -> None:
        self.errors += 1
        print(f"Error: {message}", file=sys.stderr)
        self._log(f"error: {message}")

    def trace(self, message: str) -> None:
        """Record a message in the log file only."""
        self._log(message)
