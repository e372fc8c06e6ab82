"""
Runtime context of a single build invocation.

A Run carries the logging threshold, the start time used for duration
reporting, and the two output sinks. It is created once per invocation and
passed explicitly through every orchestration call.
"""

import logging
import time
from typing import Any, TextIO


class _BelowLevelFilter(logging.Filter):
    """Accept only records below the given level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


class Run:
    """
    Logging threshold, start timestamp and output sinks of one build.

    Records below WARNING are written to `out`, WARNING and above to `err`.

    Example usage:
        run = Run(logging.INFO, sys.stdout, sys.stderr)
        run.log(logging.INFO, "Building %d module(s)", 2)
        print(f"took {run.duration_millis()} ms")
    """

    def __init__(self, threshold: int, out: TextIO, err: TextIO):
        """
        Initialize run context.

        Args:
            threshold: Logging level threshold (e.g., logging.DEBUG)
            out: Stream receiving expected output
            err: Stream receiving warnings and errors
        """
        self.threshold = threshold
        self.out = out
        self.err = err
        self.start = time.monotonic()

        self.logger = logging.Logger("modmake.run", level=threshold)
        self.logger.propagate = False

        formatter = logging.Formatter("%(message)s")

        out_handler = logging.StreamHandler(out)
        out_handler.addFilter(_BelowLevelFilter(logging.WARNING))
        out_handler.setFormatter(formatter)
        self.logger.addHandler(out_handler)

        err_handler = logging.StreamHandler(err)
        err_handler.setLevel(logging.WARNING)
        err_handler.setFormatter(formatter)
        self.logger.addHandler(err_handler)

    @classmethod
    def create(cls, debug: bool, out: TextIO, err: TextIO) -> "Run":
        """Create a run context with DEBUG threshold in debug mode, INFO otherwise."""
        return cls(logging.DEBUG if debug else logging.INFO, out, err)

    def log(self, level: int, message: str, *args: Any) -> None:
        """Log a %-style message unless the threshold suppresses it."""
        self.logger.log(level, message, *args)

    def flush(self) -> None:
        """Flush both sinks."""
        self.out.flush()
        self.err.flush()

    def duration_millis(self) -> int:
        """Milliseconds elapsed since this run was created."""
        return int((time.monotonic() - self.start) * 1000)
