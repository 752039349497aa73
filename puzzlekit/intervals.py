"""
puzzlekit Interval Engine

Coverage-style problems reduce to sets of inclusive integer intervals:
"which columns of row 2,000,000 does any sensor see", "do these two section
assignments overlap". This module keeps such sets in a canonical form.

    Interval(start, end)  — inclusive on BOTH ends, start <= end
    CoverageSet           — sorted, disjoint, non-adjacent intervals

Key operations:
- merge: collapse any interval collection into a CoverageSet
- first_gap: first uncovered integer inside some bounds
- union / clip / covered_count for coverage arithmetic

Inclusive bounds mean [2, 4] and [5, 7] touch and merge into [2, 7]; the
length of [2, 4] is 3.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from puzzlekit.combinators import ParseError, Rule, Span, char, i64, parse_all, separated_pair


@dataclass(frozen=True, order=True)
class Interval:
    """A contiguous run of integers, inclusive at both ends."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Interval start {self.start} exceeds end {self.end}")

    @classmethod
    def normalized(cls, a: int, b: int) -> Interval:
        """Build an interval from two endpoints in either order."""
        return cls(min(a, b), max(a, b))

    @property
    def length(self) -> int:
        """Number of integers covered."""
        return self.end - self.start + 1

    def contains(self, value: int) -> bool:
        return self.start <= value <= self.end

    def fully_contains(self, other: Interval) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: Interval) -> bool:
        return self.start <= other.end and other.start <= self.end

    def touches(self, other: Interval) -> bool:
        """Overlapping or directly adjacent (mergeable)."""
        return self.start <= other.end + 1 and other.start <= self.end + 1

    def clip(self, bounds: Interval) -> Optional[Interval]:
        """Intersection with ``bounds``, or None if disjoint."""
        start = max(self.start, bounds.start)
        end = min(self.end, bounds.end)
        if start > end:
            return None
        return Interval(start, end)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __repr__(self) -> str:
        return f"<Interval [{self.start}, {self.end}]>"


class CoverageSet:
    """Minimal disjoint-interval representation of a set of integers.

    Usage:
        cover = merge([Interval(2, 4), Interval(6, 8), Interval(3, 5)])
        cover.intervals      # (Interval(2, 8),)
        cover.covered_count  # 7
        first_gap(cover, Interval(0, 20))  # 0
    """

    def __init__(self, intervals: Iterable[Interval] = ()) -> None:
        ordered = tuple(intervals)
        for prev, nxt in zip(ordered, ordered[1:]):
            if nxt.start <= prev.end + 1:
                raise ValueError(
                    f"CoverageSet intervals must be sorted and non-adjacent: {prev!r}, {nxt!r}"
                )
        self._intervals = ordered

    @property
    def intervals(self) -> tuple[Interval, ...]:
        return self._intervals

    @property
    def covered_count(self) -> int:
        """Total number of integers covered."""
        return sum(iv.length for iv in self._intervals)

    def contains(self, value: int) -> bool:
        return any(iv.contains(value) for iv in self._intervals)

    def points(self) -> Iterator[int]:
        """Every covered integer, ascending."""
        for iv in self._intervals:
            yield from iv

    def union(self, other: Iterable[Interval]) -> CoverageSet:
        return merge(list(self._intervals) + list(other))

    def clip(self, bounds: Interval) -> CoverageSet:
        clipped = (iv.clip(bounds) for iv in self._intervals)
        return CoverageSet(iv for iv in clipped if iv is not None)

    def first_gap(self, bounds: Interval) -> Optional[int]:
        return first_gap(self, bounds)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __bool__(self) -> bool:
        return bool(self._intervals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CoverageSet):
            return NotImplemented
        return self._intervals == other._intervals

    def __hash__(self) -> int:
        return hash(self._intervals)

    def __repr__(self) -> str:
        body = ", ".join(f"[{iv.start}, {iv.end}]" for iv in self._intervals)
        return f"<CoverageSet {body} ({self.covered_count} points)>"


# ============================================================================
# Operations
# ============================================================================

def merge(intervals: Iterable[Interval]) -> CoverageSet:
    """Collapse intervals into the minimal sorted, disjoint, non-adjacent set.

    Left fold over the intervals sorted by start: extend the accumulator while
    the next interval starts at or before ``accumulator.end + 1``, otherwise
    close it and start a new one.
    """
    ordered = sorted(intervals)
    if not ordered:
        return CoverageSet()

    merged: list[Interval] = []
    acc = ordered[0]
    for nxt in ordered[1:]:
        if nxt.start <= acc.end + 1:
            if nxt.end > acc.end:
                acc = Interval(acc.start, nxt.end)
        else:
            merged.append(acc)
            acc = nxt
    merged.append(acc)
    return CoverageSet(merged)


def first_gap(coverage: Iterable[Interval], bounds: Interval) -> Optional[int]:
    """First integer within ``bounds`` not covered by ``coverage``.

    Args:
        coverage: A CoverageSet (or any merged, sorted interval sequence)
        bounds: Inclusive search window

    Returns:
        The smallest uncovered integer in ``bounds``, or None if fully covered
    """
    candidate = bounds.start
    for iv in coverage:
        if iv.end < candidate:
            continue
        if iv.start > candidate:
            break
        candidate = iv.end + 1
        if candidate > bounds.end:
            return None
    return candidate if candidate <= bounds.end else None


# ============================================================================
# Parsing
# ============================================================================

def _interval(span: Span) -> tuple[Span, Interval]:
    after, (start, end) = separated_pair(i64, char("-"), i64)(span)
    if start > end:
        raise ParseError(f"interval with start <= end (got {start}-{end})", span, fatal=True)
    return after, Interval(start, end)


interval_rule: Rule = _interval


def parse_interval(text: str) -> Interval:
    """Parse ``"2-4"`` into ``Interval(2, 4)``."""
    return parse_all(interval_rule, text)


__all__ = [
    "CoverageSet",
    "Interval",
    "first_gap",
    "interval_rule",
    "merge",
    "parse_interval",
]
