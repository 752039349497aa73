"""Day 21: Monkey Math — forward and inverse evaluation of an expression DAG."""

from __future__ import annotations

from puzzlekit.exprgraph import ExpressionGraph

ROOT = "root"
HUMAN = "humn"


def part1(text: str) -> str:
    return str(ExpressionGraph.from_text(text).value_of(ROOT))


def part2(text: str) -> str:
    """Value to shout so both sides of ``root`` are equal."""
    return str(ExpressionGraph.from_text(text).solve_for(HUMAN, root=ROOT))
