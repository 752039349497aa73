"""
puzzlekit Visibility Test Suite

Tests:
1. Per-direction and overall visibility from outside the grid
2. Viewing distance (blocker counted) and scenic score
3. Custom height functions over character grids
"""

from puzzlekit.grid import Direction, digit_cell, parse_grid
from puzzlekit.visibility import (
    best_scenic_score,
    count_visible,
    is_visible,
    scenic_score,
    viewing_distance,
    visible_along,
    visible_from_outside,
)


def forest(sample):
    return parse_grid(sample(8), digit_cell)


# ============================================================================
# Visibility
# ============================================================================

def test_sample_visible_count(sample):
    assert count_visible(forest(sample)) == 21


def test_edges_always_visible(sample):
    grid = forest(sample)
    visible = visible_from_outside(grid)
    edge_cells = {coord for coord, _ in grid.cells() if grid.is_edge(coord)}
    assert edge_cells <= visible
    assert len(edge_cells) == 16


def test_visible_along_single_direction(sample):
    grid = forest(sample)
    # Top-left 5 (height 5 at (1, 1)) is visible from the top and left only
    assert visible_along(grid, (1, 1), Direction.UP)
    assert visible_along(grid, (1, 1), Direction.LEFT)
    assert not visible_along(grid, (1, 1), Direction.RIGHT)
    assert not visible_along(grid, (1, 1), Direction.DOWN)


def test_hidden_interior_tree(sample):
    # The centre 3 is hidden from every direction
    assert not is_visible(forest(sample), (2, 2))


def test_equal_height_blocks():
    grid = parse_grid("555\n555\n555", digit_cell)
    assert count_visible(grid) == 8


# ============================================================================
# Viewing distance & scenic score
# ============================================================================

def test_viewing_distance_counts_blocker(sample):
    grid = forest(sample)
    assert viewing_distance(grid, (2, 1), Direction.UP) == 1
    assert viewing_distance(grid, (2, 1), Direction.LEFT) == 1
    assert viewing_distance(grid, (2, 1), Direction.RIGHT) == 2
    assert viewing_distance(grid, (2, 1), Direction.DOWN) == 2
    assert scenic_score(grid, (2, 1)) == 4


def test_edge_score_is_zero(sample):
    assert scenic_score(forest(sample), (0, 2)) == 0


def test_best_scenic_score(sample):
    grid = forest(sample)
    assert scenic_score(grid, (2, 3)) == 8
    assert best_scenic_score(grid) == 8


# ============================================================================
# Custom heights
# ============================================================================

def test_character_heights():
    grid = parse_grid("aaa\nazb\naaa")
    assert is_visible(grid, (1, 1), height=ord)
    assert not is_visible(grid, (1, 1), height=lambda label: 0)
