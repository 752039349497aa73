"""Day 8: Treetop Tree House — visibility over a digit height grid."""

from __future__ import annotations

from puzzlekit.grid import Grid, digit_cell, parse_grid
from puzzlekit.visibility import best_scenic_score, count_visible


def parse(text: str) -> Grid:
    return parse_grid(text, digit_cell)


def part1(text: str) -> str:
    return str(count_visible(parse(text)))


def part2(text: str) -> str:
    return str(best_scenic_score(parse(text)))
