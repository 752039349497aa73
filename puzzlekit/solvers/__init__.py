"""
Reference daily solvers.

Each module exposes ``part1(text) -> str`` and ``part2(text) -> str`` and
only composes the core primitives (parsing, intervals, graphs, grids).
"""

from __future__ import annotations

from types import ModuleType
from typing import Callable

from puzzlekit.solvers import day04, day08, day10, day12, day14, day15, day21

SOLVERS: dict[int, ModuleType] = {
    4: day04,
    8: day08,
    10: day10,
    12: day12,
    14: day14,
    15: day15,
    21: day21,
}


def get_solver(day: int, part: int) -> Callable[[str], str]:
    """Look up ``part1``/``part2`` for a day."""
    if day not in SOLVERS:
        raise KeyError(f"No solver for day {day}. Available: {sorted(SOLVERS)}")
    if part not in (1, 2):
        raise ValueError(f"Part must be 1 or 2, got {part}")
    return getattr(SOLVERS[day], f"part{part}")


def describe(day: int) -> str:
    """First docstring line of a day's module."""
    doc = (SOLVERS[day].__doc__ or "").strip()
    return doc.splitlines()[0] if doc else f"Day {day}"


__all__ = ["SOLVERS", "describe", "get_solver"]
