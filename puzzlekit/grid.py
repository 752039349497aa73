"""
puzzlekit Grid

A rectangular 2D array of cell labels (characters or small integers),
addressed by integer ``(x, y)`` with bounds ``[0, width) x [0, height)``.
``y`` grows downward, matching how puzzle text is laid out.

The Grid owns its cells and is immutable: searches and scans read it, and
derived grids (``relabel``, ``map``) are new objects.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterator, Optional, Sequence

from puzzlekit.combinators import Rule, line_ending, many1, map_rule, parse_all, regex, separated_list1

Coord = tuple[int, int]
Label = Any


class Direction(Enum):
    """The four axis directions, as ``(dx, dy)``."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def step(self, coord: Coord, distance: int = 1) -> Coord:
        return coord[0] + self.dx * distance, coord[1] + self.dy * distance


class Grid:
    """Immutable rectangular grid of labels.

    Usage:
        grid = parse_grid("Sabc\\nabcE")
        grid[(0, 0)]              # 'S'
        grid.find("E")            # (3, 1)
        list(grid.neighbors((0, 0)))
    """

    def __init__(self, rows: Sequence[Sequence[Label]]) -> None:
        self._rows: tuple[tuple[Label, ...], ...] = tuple(tuple(row) for row in rows)
        if not self._rows or not self._rows[0]:
            raise ValueError("Grid must have at least one row and one column")
        width = len(self._rows[0])
        for y, row in enumerate(self._rows):
            if len(row) != width:
                raise ValueError(f"Ragged grid: row {y} has {len(row)} cells, expected {width}")

    @classmethod
    def from_text(cls, text: str, cell: Optional[Rule] = None) -> Grid:
        return parse_grid(text, cell)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return len(self._rows[0])

    @property
    def height(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> tuple[tuple[Label, ...], ...]:
        return self._rows

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, coord: Coord) -> Iterator[Coord]:
        """In-bounds 4-connected neighbours, in Direction order."""
        for direction in Direction:
            nxt = direction.step(coord)
            if self.in_bounds(nxt):
                yield nxt

    def ray(self, coord: Coord, direction: Direction) -> Iterator[Coord]:
        """Cells outward from ``coord`` (exclusive) until the grid edge."""
        nxt = direction.step(coord)
        while self.in_bounds(nxt):
            yield nxt
            nxt = direction.step(nxt)

    def is_edge(self, coord: Coord) -> bool:
        x, y = coord
        return x in (0, self.width - 1) or y in (0, self.height - 1)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def __getitem__(self, coord: Coord) -> Label:
        if not self.in_bounds(coord):
            raise IndexError(f"{coord} outside {self.width}x{self.height} grid")
        x, y = coord
        return self._rows[y][x]

    def get(self, coord: Coord, default: Label = None) -> Label:
        if not self.in_bounds(coord):
            return default
        x, y = coord
        return self._rows[y][x]

    def cells(self) -> Iterator[tuple[Coord, Label]]:
        """Every ``((x, y), label)`` in row-major order."""
        for y, row in enumerate(self._rows):
            for x, label in enumerate(row):
                yield (x, y), label

    def find(self, label: Label) -> Optional[Coord]:
        """First coordinate holding ``label`` in row-major order."""
        for coord, found in self.cells():
            if found == label:
                return coord
        return None

    def find_all(self, label: Label) -> list[Coord]:
        return [coord for coord, found in self.cells() if found == label]

    # ------------------------------------------------------------------
    # Derivation & rendering
    # ------------------------------------------------------------------

    def map(self, fn: Callable[[Label], Label]) -> Grid:
        return Grid([[fn(label) for label in row] for row in self._rows])

    def relabel(self, mapping: dict) -> Grid:
        """Replace labels found in ``mapping``; others are kept."""
        return self.map(lambda label: mapping.get(label, label))

    def render(self, fmt: Callable[[Label], str] = str) -> str:
        return "\n".join("".join(fmt(label) for label in row) for row in self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"<Grid {self.width}x{self.height}>"


# ============================================================================
# Parsing
# ============================================================================

any_cell: Rule = regex(r"[^\r\n]", "grid cell")
digit_cell: Rule = map_rule(regex(r"[0-9]", "digit"), int)


def grid_rule(cell: Optional[Rule] = None) -> Rule:
    """Rows of one or more cells separated by line endings."""
    return map_rule(separated_list1(line_ending, many1(cell or any_cell)), Grid)


def parse_grid(text: str, cell: Optional[Rule] = None) -> Grid:
    """Parse a block of text into a Grid.

    Args:
        text: One row per line
        cell: Rule for a single cell (default: any character except newline)

    Raises:
        ParseError: if a cell does not match ``cell``
        ValueError: if rows have different lengths
    """
    return parse_all(grid_rule(cell), text)


__all__ = [
    "Coord",
    "Direction",
    "Grid",
    "Label",
    "any_cell",
    "digit_cell",
    "grid_rule",
    "parse_grid",
]
