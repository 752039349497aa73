"""
puzzlekit Interval Engine Test Suite

Tests:
1. Interval construction and predicates (inclusive bounds)
2. merge: overlap, adjacency, idempotence, order independence
3. Coverage conservation and clipping
4. first_gap at the window boundaries
"""

import random

import pytest

from puzzlekit.combinators import ParseError, line_ending, parse_all, separated_list1
from puzzlekit.intervals import CoverageSet, Interval, first_gap, interval_rule, merge, parse_interval


# ============================================================================
# Interval
# ============================================================================

def test_interval_is_inclusive():
    iv = Interval(2, 4)
    assert iv.length == 3
    assert list(iv) == [2, 3, 4]
    assert iv.contains(2) and iv.contains(4)
    assert not iv.contains(5)


def test_interval_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        Interval(5, 3)
    assert Interval.normalized(5, 3) == Interval(3, 5)


def test_containment_and_overlap():
    assert Interval(2, 8).fully_contains(Interval(3, 7))
    assert not Interval(3, 7).fully_contains(Interval(2, 8))
    assert Interval(5, 7).overlaps(Interval(7, 9))
    assert not Interval(2, 4).overlaps(Interval(6, 8))


def test_touching_intervals():
    assert Interval(2, 4).touches(Interval(5, 7))
    assert not Interval(2, 4).touches(Interval(6, 7))


def test_clip():
    assert Interval(-5, 5).clip(Interval(0, 20)) == Interval(0, 5)
    assert Interval(25, 30).clip(Interval(0, 20)) is None


def test_parse_interval():
    assert parse_interval("2-4") == Interval(2, 4)
    assert parse_interval("-5--3") == Interval(-5, -3)
    with pytest.raises(ParseError):
        parse_interval("4-2")


def test_reversed_record_reported_inside_list():
    with pytest.raises(ParseError) as exc:
        parse_all(separated_list1(line_ending, interval_rule), "2-4\n8-6\n")
    assert exc.value.fatal
    assert (exc.value.line, exc.value.col) == (2, 1)
    assert "interval with start <= end" in str(exc.value)


# ============================================================================
# merge
# ============================================================================

def test_merge_overlapping():
    assert merge([Interval(2, 4), Interval(3, 5)]).intervals == (Interval(2, 5),)


def test_merge_bridges_gap():
    # [3, 5] overlaps [2, 4] and ends right before [6, 8]
    cover = merge([Interval(2, 4), Interval(6, 8), Interval(3, 5)])
    assert cover.intervals == (Interval(2, 8),)
    assert cover.covered_count == 7


def test_merge_joins_adjacent_intervals():
    cover = merge([Interval(2, 4), Interval(5, 7)])
    assert cover.intervals == (Interval(2, 7),)


def test_merge_keeps_gaps():
    cover = merge([Interval(2, 4), Interval(6, 8)])
    assert cover.intervals == (Interval(2, 4), Interval(6, 8))
    assert cover.covered_count == 6


def test_merge_of_nothing():
    cover = merge([])
    assert not cover
    assert cover.covered_count == 0


def test_merge_contained_interval():
    cover = merge([Interval(0, 10), Interval(3, 4)])
    assert cover.intervals == (Interval(0, 10),)


def test_merge_is_idempotent():
    cover = merge([Interval(1, 3), Interval(10, 12), Interval(2, 6)])
    assert merge(cover) == cover


def test_merge_is_order_independent():
    intervals = [Interval(a, a + w) for a, w in [(0, 3), (10, 2), (5, 0), (4, 1), (20, 5), (-3, 2)]]
    expected = merge(intervals)
    rng = random.Random(15)
    for _ in range(10):
        shuffled = intervals[:]
        rng.shuffle(shuffled)
        assert merge(shuffled) == expected


def test_merge_conserves_points():
    intervals = [Interval(0, 3), Interval(2, 9), Interval(12, 12), Interval(-4, -2)]
    points = set()
    for iv in intervals:
        points.update(iv)
    cover = merge(intervals)
    assert set(cover.points()) == points
    assert cover.covered_count == len(points)


def test_coverage_set_rejects_unmerged_input():
    with pytest.raises(ValueError):
        CoverageSet([Interval(2, 4), Interval(5, 6)])


def test_union_and_clip():
    cover = merge([Interval(0, 2)]).union([Interval(3, 5), Interval(10, 11)])
    assert cover.intervals == (Interval(0, 5), Interval(10, 11))
    assert cover.clip(Interval(4, 10)).intervals == (Interval(4, 5), Interval(10, 10))


# ============================================================================
# first_gap
# ============================================================================

def test_first_gap_inside_window():
    cover = merge([Interval(0, 10), Interval(12, 20)])
    assert first_gap(cover, Interval(0, 20)) == 11


def test_first_gap_at_window_start():
    cover = merge([Interval(3, 10)])
    assert first_gap(cover, Interval(0, 20)) == 0


def test_first_gap_after_last_interval():
    cover = merge([Interval(-5, 19)])
    assert first_gap(cover, Interval(0, 20)) == 20


def test_first_gap_fully_covered():
    cover = merge([Interval(-5, 8), Interval(9, 25)])
    assert cover.first_gap(Interval(0, 20)) is None


def test_first_gap_empty_coverage():
    assert first_gap(CoverageSet(), Interval(7, 9)) == 7
