"""
Progress reporting: stage headers and a dot every few processed items.

One counter is shared by all stages, so dots keep their cadence across
extraction, parsing and export.
"""

import sys
from typing import TextIO

from pgdump_split.config import PROGRESS_EVERY


class Progress:
    """Prints incremental progress markers to a stream."""

    def __init__(
        self,
        stream: TextIO | None = None,
        every: int = PROGRESS_EVERY,
        enabled: bool = True,
    ):
        self.stream = stream if stream is not None else sys.stdout
        self.every = every
        self.enabled = enabled
        self.count = 0
        self.in_stage = False

    def _write(self, text: str) -> None:
        if self.enabled:
            print(text, end="", file=self.stream, flush=True)

    def stage(self, title: str) -> None:
        """Start a new stage with a header (no newline)."""
        self._write(title)
        self.in_stage = True

    def tick(self) -> None:
        """Count one processed item, printing a dot on every Nth."""
        if self.count % self.every == 0:
            self._write(".")
        self.count += 1

    def done(self) -> None:
        """Finish the current stage line."""
        self._write("\n")
        self.in_stage = False

    def interrupt(self) -> None:
        """End an unfinished stage line before an error is reported."""
        if self.in_stage:
            self.done()

    def message(self, text: str) -> None:
        """Print a complete line."""
        self._write(text + "\n")
