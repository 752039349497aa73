"""
Day 12: Hill Climbing Algorithm

Letters are elevations; ``S`` (elevation a) is the start and ``E``
(elevation z) the goal. A step may climb at most one level but drop any
amount. Part 2 searches backwards from ``E`` to the nearest ``a``.
"""

from __future__ import annotations

from puzzlekit.grid import Grid, parse_grid
from puzzlekit.search import climb_at_most, require_path, reverse_edges, shortest_path

ELEVATION_ALIASES = {"S": "a", "E": "z"}


def elevation(label: str) -> int:
    return ord(ELEVATION_ALIASES.get(label, label))


climb = climb_at_most(1, elevation)


def parse(text: str) -> tuple[Grid, tuple[int, int], tuple[int, int]]:
    grid = parse_grid(text)
    start = grid.find("S")
    goal = grid.find("E")
    if start is None or goal is None:
        raise ValueError("Heightmap needs both an 'S' and an 'E'")
    return grid, start, goal


def part1(text: str) -> str:
    grid, start, goal = parse(text)
    return str(require_path(grid, start, goal, climb))


def part2(text: str) -> str:
    grid, _, goal = parse(text)
    distance = shortest_path(
        grid,
        goal,
        lambda _coord, label: elevation(label) == ord("a"),
        reverse_edges(climb),
    )
    if distance is None:
        raise ValueError("No lowest-elevation cell can reach the goal")
    return str(distance)
