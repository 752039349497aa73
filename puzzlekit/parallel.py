"""
puzzlekit Candidate Reduction

Some puzzles boil down to evaluating many independent candidates (rows of a
coordinate space, blueprints, starting cells) and combining the results with
a simple reduction: max, sum, or first match.

Candidates share only read-only input, so they run on worker processes in
any order. ``fn`` and every candidate are pickled to the workers: use
module-level functions (or ``functools.partial`` of them) and plain data.
The reducer runs in the calling process and must be commutative and
associative; completion order is not preserved.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")
A = TypeVar("A")


def reduce_candidates(
    fn: Callable[[C], R],
    candidates: Iterable[C],
    reducer: Callable[[A, R], A],
    initial: A,
    max_workers: Optional[int] = None,
) -> A:
    """Evaluate ``fn`` on every candidate and fold the results with ``reducer``.

    Args:
        fn: Pure, picklable function of one candidate
        candidates: Independent, picklable inputs
        reducer: Commutative, associative merge ``(acc, result) -> acc``
        initial: Identity element for ``reducer``
        max_workers: Process count (executor default when None)

    Raises:
        Whatever ``fn`` raised for the first failing candidate to complete
    """
    result = initial
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(fn, candidate): candidate for candidate in candidates}
        for future in as_completed(futures):
            result = reducer(result, future.result())
    logger.debug("Reduced %d candidates", len(futures))
    return result


def first_match(
    fn: Callable[[C], Optional[R]],
    candidates: Iterable[C],
    max_workers: Optional[int] = None,
) -> Optional[R]:
    """First non-None ``fn(candidate)`` in candidate order, or None.

    Candidates not yet started when a match is found are cancelled.
    """
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        for found in executor.map(fn, candidates):
            if found is not None:
                executor.shutdown(wait=True, cancel_futures=True)
                return found
    return None


def chunked(start: int, stop: int, size: int) -> list[range]:
    """Split ``range(start, stop)`` into consecutive ranges of at most ``size``."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [range(lo, min(lo + size, stop)) for lo in range(start, stop, size)]


__all__ = ["chunked", "first_match", "reduce_candidates"]
