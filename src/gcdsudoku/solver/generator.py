"""Row candidate generation: every ordering of nine of the ten digits.

Work is split into one shard per excluded digit.  Shards are independent, so they can
run in separate worker processes; the coordinator concatenates their results in
alphabet order, which keeps the output deterministic.
"""

import os
import traceback
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass
from itertools import permutations
from multiprocessing import Value
from multiprocessing.sharedctypes import Synchronized
from typing import Literal, TextIO

from gcdsudoku.puzzle_config import DIGITS
from gcdsudoku.solver.utils import digit_mask, int_comma

worker_idx: int | None = None
"""Index of the current worker process (None in the coordinator)."""


def init_worker_globals(worker_ctr: "Synchronized[int]") -> None:
    """Initialize global variables for worker processes.

    Args:
        worker_ctr (Synchronized[int]): Shared counter for workers.
    """
    global worker_idx  # noqa: PLW0603
    with worker_ctr.get_lock():
        # Get and set the shared worker counter atomically, using the obtained value
        # as the worker index
        worker_idx = worker_ctr.value
        worker_ctr.value += 1


def get_executor(n_workers: int | None = None) -> ProcessPoolExecutor:
    """Get a ProcessPoolExecutor for candidate generation.

    Args:
        n_workers (int | None): Number of worker processes to create.  If None,
            defaults to number of CPU cores minus one.

    Returns:
        A ProcessPoolExecutor instance for worker processes.
    """
    worker_ctr: Synchronized[int] = Value("i", 0)

    cpus = os.cpu_count() or 1  # Fallback to 1 if os.cpu_count() is None
    if n_workers is None:
        n_workers = max(1, cpus - 1)  # Leave one core free
    if n_workers < 1:
        raise ValueError(f"Number of workers must be positive, got {n_workers}")
    if n_workers > cpus:
        raise ValueError(
            f"Requested number of workers ({n_workers}) exceeds CPU count ({cpus})",
        )
    return ProcessPoolExecutor(
        max_workers=n_workers,
        initializer=init_worker_globals,
        initargs=(worker_ctr,),
    )


def generate_shard(excluded: str, alphabet: str, required: str) -> list[str]:
    """Return every ordering of `alphabet` minus `excluded` that contains all `required` digits.

    The containment test never rejects anything while `excluded` is outside `required`,
    but keeps the shard correct for any caller.
    """
    digits = "".join(sorted(ch for ch in alphabet if ch != excluded))
    required_mask = digit_mask(required)
    if digit_mask(digits) & required_mask != required_mask:
        return []
    return ["".join(p) for p in permutations(digits)]


@dataclass
class ShardResult:
    """Wrapper for generation shard results."""

    excluded: str
    status: Literal["success", "error"]
    candidates: list[str]
    err_msg: str | None = None


def _shard_task(excluded: str, alphabet: str, required: str) -> ShardResult:
    """Worker task generating one shard."""
    try:
        return ShardResult(
            excluded=excluded,
            status="success",
            candidates=generate_shard(excluded, alphabet, required),
        )
    except Exception as e:
        return ShardResult(
            excluded=excluded,
            status="error",
            candidates=[],
            err_msg=(
                f"Worker {worker_idx} encountered an error: {str(e)}\n{traceback.format_exc()}"
            ),
        )


def generate_candidates(
    required: str,
    alphabet: str = DIGITS,
    *,
    executor: Executor | None = None,
    logf: TextIO | None = None,
) -> list[str]:
    """Generate all row candidates containing the required digits.

    A candidate uses `len(alphabet) - 1` distinct symbols: one symbol is left out, and
    required symbols are never the one left out.

    Args:
        required (str): Digits that every candidate must contain.
        alphabet (str): Symbols to draw from.  Default: the ten decimal digits.
        executor (Executor | None): If given, shards are generated in the executor's
            workers; otherwise they are generated in-process.
        logf: Optional file object to log per-shard counts.

    Returns:
        The candidate strings, grouped by excluded symbol in alphabet order.

    Raises:
        RuntimeError: If a worker fails to generate its shard.
    """
    shards = [ch for ch in alphabet if ch not in required]
    for ch in alphabet:
        if ch in required:
            print(f"Skipping excluded digit '{ch}': it is a required digit.", file=logf, flush=True)

    if executor is None:
        results = [_shard_task(ch, alphabet, required) for ch in shards]
    else:
        futures = [executor.submit(_shard_task, ch, alphabet, required) for ch in shards]
        # Results are gathered in submission order, not completion order
        results = [future.result() for future in futures]

    candidates: list[str] = []
    for result in results:
        if result.status == "error":
            raise RuntimeError(
                f"Generating candidates without '{result.excluded}' failed:\n{result.err_msg}"
            )
        print(
            f"Excluding digit '{result.excluded}' generated "
            f"{int_comma(len(result.candidates))} candidates.",
            file=logf,
            flush=True,
        )
        candidates.extend(result.candidates)
    return candidates
