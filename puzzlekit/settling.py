"""
puzzlekit Settling Simulation

Falling particles over a sparse field of obstructions. Each particle is
dropped from a fixed origin and, one move at a time, tries the cells

    down, down-left, down-right

in that order, taking the first one that is free. When none is free the
particle settles, becomes an obstruction itself, and the next particle is
dropped from the origin.

Two termination modes:
- FALL_THROUGH (floor-less): stop when a particle falls below the lowest
  obstruction; it would fall forever.
- ORIGIN_BLOCKED (floored): an infinite floor sits ``floor_offset`` rows
  below the lowest obstruction; stop once a particle settles at the origin.

``step()`` advances exactly one move and is the hook callers use for
instrumentation; ``drop()`` and ``run()`` are loops around it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from puzzlekit.combinators import (
    ParseError,
    Span,
    char,
    line_ending,
    parse_all,
    separated_list1,
    separated_pair,
    tag,
    u32,
)
from puzzlekit.grid import Coord

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN: Coord = (500, 0)
DROP_ORDER: tuple[Coord, ...] = ((0, 1), (-1, 1), (1, 1))


class Termination(Enum):
    FALL_THROUGH = "fall_through"
    ORIGIN_BLOCKED = "origin_blocked"


class StepOutcome(Enum):
    MOVED = "moved"
    SETTLED = "settled"
    FELL = "fell"
    BLOCKED = "blocked"


class SettlingSimulation:
    """Stepwise particle-drop simulation.

    Usage:
        sim = SettlingSimulation(parse_rock_paths(text))
        sim.run()       # 24 for the sample layout
        print(sim.render())
    """

    def __init__(
        self,
        obstacles: Iterable[Coord],
        origin: Coord = DEFAULT_ORIGIN,
        termination: Termination = Termination.FALL_THROUGH,
        floor_offset: int = 2,
    ) -> None:
        self._rocks: frozenset[Coord] = frozenset(obstacles)
        if not self._rocks:
            raise ValueError("Settling simulation needs at least one obstacle")
        self._occupied: set[Coord] = set(self._rocks)
        self.origin = origin
        self.termination = termination
        self.lowest = max(y for _, y in self._rocks)
        self.floor: Optional[int] = (
            self.lowest + floor_offset if termination is Termination.ORIGIN_BLOCKED else None
        )
        self.particle: Optional[Coord] = origin
        self.settled = 0
        self.steps = 0
        self.finished = origin in self._occupied

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    def is_blocked(self, coord: Coord) -> bool:
        if coord in self._occupied:
            return True
        return self.floor is not None and coord[1] >= self.floor

    @property
    def sand(self) -> frozenset[Coord]:
        """Cells occupied by settled particles."""
        return frozenset(self._occupied - self._rocks)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self) -> StepOutcome:
        """Advance the current particle by one move."""
        if self.finished or self.particle is None:
            return StepOutcome.BLOCKED

        x, y = self.particle
        for dx, dy in DROP_ORDER:
            candidate = (x + dx, y + dy)
            if not self.is_blocked(candidate):
                self.particle = candidate
                self.steps += 1
                if self.termination is Termination.FALL_THROUGH and candidate[1] > self.lowest:
                    self.finished = True
                    self.particle = None
                    logger.debug("Particle fell past y=%d after %d settled", self.lowest, self.settled)
                    return StepOutcome.FELL
                return StepOutcome.MOVED

        self._occupied.add(self.particle)
        self.settled += 1
        if self.particle == self.origin:
            self.finished = True
            self.particle = None
            logger.debug("Origin blocked after %d settled", self.settled)
        else:
            self.particle = self.origin
        return StepOutcome.SETTLED

    def drop(self) -> StepOutcome:
        """Run the current particle until it settles or falls."""
        outcome = self.step()
        while outcome is StepOutcome.MOVED:
            outcome = self.step()
        return outcome

    def run(self, limit: Optional[int] = None) -> int:
        """Drop particles until termination (or ``limit`` drops); returns the settled count."""
        drops = 0
        while not self.finished and (limit is None or drops < limit):
            self.drop()
            drops += 1
        return self.settled

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> str:
        """``#`` rock, ``o`` sand, ``+`` origin, ``.`` air."""
        cells = self._occupied | {self.origin}
        min_x = min(x for x, _ in cells)
        max_x = max(x for x, _ in cells)
        max_y = max(y for _, y in cells)
        lines = []
        for y in range(min(self.origin[1], 0), max_y + 1):
            row = []
            for x in range(min_x, max_x + 1):
                if (x, y) in self._rocks:
                    row.append("#")
                elif (x, y) in self._occupied:
                    row.append("o")
                elif (x, y) == self.origin:
                    row.append("+")
                else:
                    row.append(".")
            lines.append("".join(row))
        return "\n".join(lines)

    def __repr__(self) -> str:
        state = "finished" if self.finished else "running"
        return f"<SettlingSimulation {self.termination.value} settled={self.settled} {state}>"


# ============================================================================
# Parsing
# ============================================================================

point_rule = separated_pair(u32, char(","), u32)


def _segment_points(a: Coord, b: Coord) -> list[Coord]:
    (ax, ay), (bx, by) = a, b
    return [
        (x, y)
        for x in range(min(ax, bx), max(ax, bx) + 1)
        for y in range(min(ay, by), max(ay, by) + 1)
    ]


def rock_path_rule(span: Span) -> tuple[Span, set[Coord]]:
    """``x,y -> x,y -> ...``: axis-aligned segments expanded to every cell."""
    after, corners = separated_list1(tag(" -> "), point_rule)(span)
    cells: set[Coord] = set(corners)
    for a, b in zip(corners, corners[1:]):
        if a[0] != b[0] and a[1] != b[1]:
            raise ParseError(f"axis-aligned segment (got {a} -> {b})", span, fatal=True)
        cells.update(_segment_points(a, b))
    return after, cells


def parse_rock_paths(text: str) -> set[Coord]:
    """Parse one rock path per line into the set of occupied cells."""
    paths = parse_all(separated_list1(line_ending, rock_path_rule), text)
    return set().union(*paths)


__all__ = [
    "DEFAULT_ORIGIN",
    "SettlingSimulation",
    "StepOutcome",
    "Termination",
    "parse_rock_paths",
    "rock_path_rule",
]
