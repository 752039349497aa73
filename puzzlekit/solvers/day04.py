"""Day 4: Camp Cleanup — pairs of section-assignment ranges."""

from __future__ import annotations

from puzzlekit.combinators import char, line_ending, parse_all, separated_list1, separated_pair
from puzzlekit.intervals import Interval, interval_rule

pair_rule = separated_pair(interval_rule, char(","), interval_rule)


def parse(text: str) -> list[tuple[Interval, Interval]]:
    return parse_all(separated_list1(line_ending, pair_rule), text)


def part1(text: str) -> str:
    """Pairs where one assignment fully contains the other."""
    pairs = parse(text)
    return str(sum(1 for a, b in pairs if a.fully_contains(b) or b.fully_contains(a)))


def part2(text: str) -> str:
    """Pairs that overlap at all."""
    pairs = parse(text)
    return str(sum(1 for a, b in pairs if a.overlaps(b)))
