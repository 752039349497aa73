"""
puzzlekit Grid Search

Breadth-first search over a Grid's 4-connected neighbour graph.

Traversability is a pure function of the two cells' labels:

    edge_allowed(from_label, to_label) -> bool

e.g. "step up at most one elevation". The search space is the grid crossed
with any extra state that changes the rules, so states are ``SearchNode``s
rather than bare coordinates.

Goals can be a fixed coordinate or a predicate; predicate mode is how
"nearest cell with label X" puzzles are solved by searching backwards from
the real goal with ``reverse_edges``.

Unreachable goals return None. ``require_path`` turns that into
``SearchExhausted`` for callers where no path means bad input.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Hashable, Iterable, NamedTuple, Optional, Union

from puzzlekit.grid import Coord, Grid, Label

logger = logging.getLogger(__name__)

EdgeAllowed = Callable[[Label, Label], bool]
GoalPredicate = Callable[[Coord, Label], bool]
Goal = Union[Coord, GoalPredicate]


class SearchExhausted(Exception):
    """No reachable state satisfied the goal."""

    def __init__(self, start: object, goal: object, explored: int):
        self.start = start
        self.goal = goal
        self.explored = explored
        super().__init__(f"No path from {start} to {goal} ({explored} states explored)")


class SearchNode(NamedTuple):
    """A search state: grid position plus rule-relevant extra state."""
    x: int
    y: int
    state: Hashable = None

    @property
    def coord(self) -> Coord:
        return self.x, self.y


# ============================================================================
# Edge rules
# ============================================================================

def always(_from: Label, _to: Label) -> bool:
    return True


def passable(blocked: Iterable[Label]) -> EdgeAllowed:
    """Allow stepping onto any label not in ``blocked``."""
    walls = frozenset(blocked)
    return lambda _from, to: to not in walls


def climb_at_most(step: int, height: Callable[[Label], int]) -> EdgeAllowed:
    """Allow moves whose destination is at most ``step`` higher."""
    return lambda a, b: height(b) <= height(a) + step


def reverse_edges(edge_allowed: EdgeAllowed) -> EdgeAllowed:
    """The same rule walked backwards (goal to start)."""
    return lambda a, b: edge_allowed(b, a)


# ============================================================================
# Generic BFS
# ============================================================================

def bfs(
    starts: Iterable[Hashable],
    successors: Callable[[Hashable], Iterable[Hashable]],
    is_goal: Callable[[Hashable], bool],
) -> Optional[tuple[Hashable, int]]:
    """Uniform-cost search over arbitrary hashable states.

    Returns:
        ``(goal_state, distance)`` for the nearest goal, or None
    """
    frontier: deque[tuple[Hashable, int]] = deque()
    seen: set[Hashable] = set()
    for start in starts:
        if start not in seen:
            seen.add(start)
            frontier.append((start, 0))

    while frontier:
        current, distance = frontier.popleft()
        if is_goal(current):
            logger.debug("Goal %s reached at distance %d (%d seen)", current, distance, len(seen))
            return current, distance
        for nxt in successors(current):
            if nxt not in seen:
                seen.add(nxt)
                frontier.append((nxt, distance + 1))

    logger.debug("Search exhausted after %d states", len(seen))
    return None


def _grid_successors(grid: Grid, edge_allowed: EdgeAllowed) -> Callable[[SearchNode], list[SearchNode]]:
    def successors(node: SearchNode) -> list[SearchNode]:
        here = node.state
        return [
            SearchNode(nx_, ny, grid[(nx_, ny)])
            for nx_, ny in grid.neighbors(node.coord)
            if edge_allowed(here, grid[(nx_, ny)])
        ]
    return successors


def _goal_test(grid: Grid, goal: Goal) -> Callable[[SearchNode], bool]:
    if callable(goal):
        return lambda node: goal(node.coord, node.state)
    target = tuple(goal)
    return lambda node: node.coord == target


def _start_nodes(grid: Grid, starts: Iterable[Coord]) -> list[SearchNode]:
    nodes = []
    for coord in starts:
        if not grid.in_bounds(coord):
            raise IndexError(f"Start {coord} outside {grid.width}x{grid.height} grid")
        nodes.append(SearchNode(coord[0], coord[1], grid[coord]))
    return nodes


# ============================================================================
# Grid searches
# ============================================================================

def shortest_path(
    grid: Grid,
    start: Coord,
    goal: Goal,
    edge_allowed: EdgeAllowed = always,
) -> Optional[int]:
    """Fewest 4-connected steps from ``start`` to ``goal``.

    Args:
        grid: The grid to search (never mutated)
        start: Starting coordinate
        goal: A fixed ``(x, y)`` or a predicate ``(coord, label) -> bool``
        edge_allowed: ``(from_label, to_label) -> bool`` traversability rule

    Returns:
        Step count, or None if no goal is reachable
    """
    return shortest_path_from_any(grid, [start], goal, edge_allowed)


def shortest_path_from_any(
    grid: Grid,
    starts: Iterable[Coord],
    goal: Goal,
    edge_allowed: EdgeAllowed = always,
) -> Optional[int]:
    """Multi-source variant: distance from the nearest of ``starts``."""
    found = bfs(
        _start_nodes(grid, starts),
        _grid_successors(grid, edge_allowed),
        _goal_test(grid, goal),
    )
    return None if found is None else found[1]


def require_path(
    grid: Grid,
    start: Coord,
    goal: Goal,
    edge_allowed: EdgeAllowed = always,
) -> int:
    """Like ``shortest_path`` but raises ``SearchExhausted`` when unreachable."""
    distance = shortest_path(grid, start, goal, edge_allowed)
    if distance is None:
        raise SearchExhausted(start, goal, len(bfs_distances(grid, start, edge_allowed)))
    return distance


def bfs_distances(
    grid: Grid,
    start: Coord,
    edge_allowed: EdgeAllowed = always,
) -> dict[Coord, int]:
    """Distance to every cell reachable from ``start``."""
    successors = _grid_successors(grid, edge_allowed)
    distances: dict[Coord, int] = {}
    frontier = deque((node, 0) for node in _start_nodes(grid, [start]))
    distances[start] = 0
    while frontier:
        node, distance = frontier.popleft()
        for nxt in successors(node):
            if nxt.coord not in distances:
                distances[nxt.coord] = distance + 1
                frontier.append((nxt, distance + 1))
    return distances


def flood_fill(grid: Grid, start: Coord, is_open: Callable[[Label], bool]) -> set[Coord]:
    """Every cell connected to ``start`` through cells where ``is_open`` holds."""
    if not is_open(grid[start]):
        return set()
    return set(bfs_distances(grid, start, lambda _a, b: is_open(b)))


__all__ = [
    "EdgeAllowed",
    "Goal",
    "SearchExhausted",
    "SearchNode",
    "always",
    "bfs",
    "bfs_distances",
    "climb_at_most",
    "flood_fill",
    "passable",
    "require_path",
    "reverse_edges",
    "shortest_path",
    "shortest_path_from_any",
]
