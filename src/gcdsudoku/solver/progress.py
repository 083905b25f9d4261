"""Background progress reporting for the grid solver."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from time import time
from typing import Protocol, TextIO

from gcdsudoku.solver.utils import int_comma, time_str


class SupportsTries(Protocol):
    """Anything exposing a running count of candidate rows tried."""

    candidate_tries: int


@dataclass(frozen=True)
class ProgressUpdate:
    """A single progress report."""

    divisor: int
    """Divisor under test."""

    candidate_tries: int
    """Candidate rows tried so far for this divisor."""

    elapsed: float
    """Seconds since the solver invocation started."""

    def __str__(self) -> str:
        return (
            f"Progress - divisor: {self.divisor}, "
            f"candidates tried: {int_comma(self.candidate_tries)}, "
            f"elapsed: {time_str(self.elapsed)}"
        )


def print_progress(update: ProgressUpdate, *, logf: TextIO | None = None) -> None:
    """Default progress callback: print a progress line."""
    print(update, file=logf, flush=True)


class ProgressMonitor(threading.Thread):
    """Periodically report the progress of one solver invocation.

    Reads `source.candidate_tries` without touching any other solver state.  Use as a
    context manager around the solver call: leaving the block stops and joins the thread,
    so no report can follow the solver's result.

    Example:
        >>> with ProgressMonitor(divisor, context, interval=30):
        ...     context.search()
    """

    def __init__(
        self,
        divisor: int,
        source: SupportsTries,
        *,
        interval: float,
        callback: Callable[[ProgressUpdate], None] = print_progress,
    ) -> None:
        super().__init__(name=f"progress-{divisor}", daemon=True)
        self.divisor = divisor
        self.source = source
        self.interval = interval
        self.callback = callback
        self.start_time = time()
        self._stop_event = threading.Event()

    def snapshot(self) -> ProgressUpdate:
        """Return the current progress without reporting it."""
        return ProgressUpdate(
            divisor=self.divisor,
            candidate_tries=self.source.candidate_tries,
            elapsed=time() - self.start_time,
        )

    def run(self) -> None:
        # `wait` returns True once stop() has been called
        while not self._stop_event.wait(self.interval):
            self.callback(self.snapshot())

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to exit."""
        self._stop_event.set()
        if self.is_alive():
            self.join()

    def __enter__(self) -> "ProgressMonitor":
        self.start_time = time()
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
