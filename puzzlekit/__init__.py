"""
puzzlekit - a toolkit for daily text puzzles.

Parse small text inputs into typed values, then run bounded searches and
simulations over them.

Core: parser combinators, expression-graph evaluation (forward and inverse),
      interval merging, grid search / visibility / settling
Client code: reference daily solvers and a thin CLI
"""

__version__ = "0.4.0"

from puzzlekit.combinators import ParseError, Span, parse_all
from puzzlekit.exprgraph import (
    ArithmeticFault,
    CycleError,
    ExpressionGraph,
    GraphError,
    UndefinedReferenceError,
    UnknownCountError,
    parse_graph,
)
from puzzlekit.intervals import CoverageSet, Interval, first_gap, merge
from puzzlekit.grid import Direction, Grid, parse_grid
from puzzlekit.search import SearchExhausted, shortest_path
from puzzlekit.settling import SettlingSimulation, Termination

__all__ = [
    "ParseError",
    "Span",
    "parse_all",
    "ArithmeticFault",
    "CycleError",
    "ExpressionGraph",
    "GraphError",
    "UndefinedReferenceError",
    "UnknownCountError",
    "parse_graph",
    "CoverageSet",
    "Interval",
    "first_gap",
    "merge",
    "Direction",
    "Grid",
    "parse_grid",
    "SearchExhausted",
    "shortest_path",
    "SettlingSimulation",
    "Termination",
]
