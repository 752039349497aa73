"""
Day 15: Beacon Exclusion Zone

Each sensor excludes every cell within Manhattan distance of its closest
beacon. A sensor's footprint on one row is a single inclusive interval, so
row coverage is a merge of intervals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Optional

from puzzlekit.combinators import (
    i64,
    line_ending,
    map_rule,
    parse_all,
    preceded,
    separated_list1,
    separated_pair,
    tag,
)
from puzzlekit.intervals import CoverageSet, Interval, first_gap, merge
from puzzlekit.parallel import chunked, first_match

logger = logging.getLogger(__name__)

TARGET_ROW = 2_000_000
SEARCH_LIMIT = 4_000_000
TUNING_MULTIPLIER = 4_000_000
ROWS_PER_CHUNK = 50_000


@dataclass(frozen=True)
class Sensor:
    x: int
    y: int
    beacon: tuple[int, int]

    @property
    def radius(self) -> int:
        return abs(self.beacon[0] - self.x) + abs(self.beacon[1] - self.y)

    def footprint(self, row: int) -> Optional[Interval]:
        """Cells of ``row`` within range, or None."""
        reach = self.radius - abs(self.y - row)
        if reach < 0:
            return None
        return Interval(self.x - reach, self.x + reach)


position_rule = separated_pair(preceded(tag("x="), i64), tag(", "), preceded(tag("y="), i64))

sensor_rule = map_rule(
    preceded(tag("Sensor at "), separated_pair(position_rule, tag(": closest beacon is at "), position_rule)),
    lambda pair: Sensor(pair[0][0], pair[0][1], pair[1]),
)


def parse(text: str) -> list[Sensor]:
    return parse_all(separated_list1(line_ending, sensor_rule), text)


def row_coverage(sensors: list[Sensor], row: int) -> CoverageSet:
    footprints = (sensor.footprint(row) for sensor in sensors)
    return merge(fp for fp in footprints if fp is not None)


def part1(text: str, row: int = TARGET_ROW) -> str:
    """Positions on ``row`` where a beacon cannot be."""
    sensors = parse(text)
    coverage = row_coverage(sensors, row)
    beacons_on_row = {s.beacon for s in sensors if s.beacon[1] == row and coverage.contains(s.beacon[0])}
    return str(coverage.covered_count - len(beacons_on_row))


def _scan_rows(sensors: list[Sensor], bounds: Interval, rows: range) -> Optional[tuple[int, int]]:
    for y in rows:
        x = first_gap(row_coverage(sensors, y), bounds)
        if x is not None:
            return x, y
    return None


def part2(text: str, limit: int = SEARCH_LIMIT, max_workers: Optional[int] = None) -> str:
    """Tuning frequency of the only uncovered cell in ``[0, limit]^2``."""
    sensors = parse(text)
    bounds = Interval(0, limit)
    chunks = chunked(0, limit + 1, ROWS_PER_CHUNK)
    found = first_match(partial(_scan_rows, sensors, bounds), chunks, max_workers)
    if found is None:
        raise ValueError(f"Every cell in [0, {limit}] is covered")
    x, y = found
    logger.debug("Distress beacon at (%d, %d)", x, y)
    return str(x * TUNING_MULTIPLIER + y)
