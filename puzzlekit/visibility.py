"""
puzzlekit Visibility Scans

Ray-cast properties of a height grid, scanning outward from each cell along
the four axis directions and stopping at the first cell that is as tall or
taller:

- visibility: a cell is visible from outside if, along at least one
  direction, every cell between it and the edge is strictly shorter
  (the blocker itself is excluded: it hides the cell)
- viewing distance: cells seen before the view is blocked, counting the
  blocker itself

Plain O(width * height * max(width, height)) scan.
"""

from __future__ import annotations

from math import prod
from typing import Callable

from puzzlekit.grid import Coord, Direction, Grid, Label

Height = Callable[[Label], int]


def _identity(label: Label) -> int:
    return label


def visible_along(grid: Grid, coord: Coord, direction: Direction, height: Height = _identity) -> bool:
    """Whether ``coord`` can be seen from outside the grid along ``direction``."""
    own = height(grid[coord])
    return all(height(grid[other]) < own for other in grid.ray(coord, direction))


def is_visible(grid: Grid, coord: Coord, height: Height = _identity) -> bool:
    return any(visible_along(grid, coord, d, height) for d in Direction)


def visible_from_outside(grid: Grid, height: Height = _identity) -> set[Coord]:
    """Every coordinate visible along at least one axis direction."""
    return {coord for coord, _ in grid.cells() if is_visible(grid, coord, height)}


def count_visible(grid: Grid, height: Height = _identity) -> int:
    return len(visible_from_outside(grid, height))


def viewing_distance(grid: Grid, coord: Coord, direction: Direction, height: Height = _identity) -> int:
    """Cells visible from ``coord`` along ``direction``, including the blocker."""
    own = height(grid[coord])
    seen = 0
    for other in grid.ray(coord, direction):
        seen += 1
        if height(grid[other]) >= own:
            break
    return seen


def scenic_score(grid: Grid, coord: Coord, height: Height = _identity) -> int:
    """Product of the four viewing distances."""
    return prod(viewing_distance(grid, coord, d, height) for d in Direction)


def best_scenic_score(grid: Grid, height: Height = _identity) -> int:
    return max(scenic_score(grid, coord, height) for coord, _ in grid.cells())


__all__ = [
    "best_scenic_score",
    "count_visible",
    "is_visible",
    "scenic_score",
    "viewing_distance",
    "visible_along",
    "visible_from_outside",
]
