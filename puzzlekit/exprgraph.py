"""
puzzlekit Expression Graph

A DAG of named expressions. Each node is either a literal integer or a
binary operation over two other named nodes:

    root: pppw + sjmn
    dbpl: 5
    pppw: cczh / lfqf

Edges run dependency → dependent, so a topological walk over the graph
visits every operand before anything that uses it.

Two evaluation modes:
- Forward: resolve every node in dependency order.
- Inverse: one leaf is unknown and the root is an equality constraint
  between its two operands. Solve for the unknown leaf by forward-evaluating
  everything that does not depend on it, then walking a reversed graph from
  the root outward, inverting each operator as it goes.

All arithmetic is checked against the signed 64-bit range; division
truncates toward zero and never divides by zero silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

import networkx as nx

from puzzlekit.combinators import (
    Rule,
    ParseError,
    alternative,
    delimited,
    i64,
    identifier,
    line_ending,
    map_rule,
    one_of,
    parse_all,
    separated_list1,
    sequence,
    tag,
)

logger = logging.getLogger(__name__)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


# ============================================================================
# Errors
# ============================================================================

class GraphError(Exception):
    """Structural problem with an expression graph."""


class CycleError(GraphError):
    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Cyclic dependency: {' -> '.join(cycle + cycle[:1])}")


class UndefinedReferenceError(GraphError):
    def __init__(self, node_id: str, reference: str):
        self.node_id = node_id
        self.reference = reference
        super().__init__(f"Node '{node_id}' references undefined node '{reference}'")


class DuplicateNodeError(GraphError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' is defined more than once")


class UnknownCountError(GraphError):
    """Inverse evaluation found zero or two unresolved values where one was expected."""


class ArithmeticFault(ArithmeticError):
    """Division by zero, 64-bit overflow, or an inexact inverse."""

    def __init__(self, message: str, node_id: Optional[str] = None):
        self.node_id = node_id
        where = f" at '{node_id}'" if node_id else ""
        super().__init__(f"{message}{where}")


# ============================================================================
# Expression model
# ============================================================================

class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    def apply(self, left: int, right: int, node_id: Optional[str] = None) -> int:
        if self is Operator.ADD:
            result = left + right
        elif self is Operator.SUB:
            result = left - right
        elif self is Operator.MUL:
            result = left * right
        else:
            result = _truncating_div(left, right, node_id)
        return _checked(result, node_id)

    def solve_left(self, target: int, right: int, node_id: Optional[str] = None) -> int:
        """Find ``left`` such that ``left <op> right == target``."""
        if self is Operator.ADD:
            result = target - right
        elif self is Operator.SUB:
            result = target + right
        elif self is Operator.MUL:
            result = _exact_div(target, right, node_id)
        else:
            result = target * right
        return _checked(result, node_id)

    def solve_right(self, target: int, left: int, node_id: Optional[str] = None) -> int:
        """Find ``right`` such that ``left <op> right == target``."""
        if self is Operator.ADD:
            result = target - left
        elif self is Operator.SUB:
            result = left - target
        elif self is Operator.MUL:
            result = _exact_div(target, left, node_id)
        else:
            result = _exact_div(left, target, node_id)
        return _checked(result, node_id)


@dataclass(frozen=True)
class Literal:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BinaryOp:
    left: str
    op: Operator
    right: str

    @property
    def operands(self) -> tuple[str, str]:
        return self.left, self.right

    def __str__(self) -> str:
        return f"{self.left} {self.op.value} {self.right}"


Expression = Union[Literal, BinaryOp]


def _checked(result: int, node_id: Optional[str]) -> int:
    if not INT64_MIN <= result <= INT64_MAX:
        raise ArithmeticFault(f"64-bit overflow ({result})", node_id)
    return result


def _truncating_div(left: int, right: int, node_id: Optional[str]) -> int:
    if right == 0:
        raise ArithmeticFault("Division by zero", node_id)
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def _exact_div(numerator: int, denominator: int, node_id: Optional[str]) -> int:
    if denominator == 0:
        raise ArithmeticFault("Cannot invert through a zero operand", node_id)
    if numerator % denominator != 0:
        raise ArithmeticFault(
            f"Inexact inverse: {numerator} is not divisible by {denominator}", node_id
        )
    return numerator // denominator


# ============================================================================
# The graph
# ============================================================================

class ExpressionGraph:
    """A read-only DAG of named expressions.

    Usage:
        graph = ExpressionGraph.from_text(text)
        graph.value_of("root")              # forward
        graph.solve_for("humn", root="root") # inverse
    """

    def __init__(self, nodes: Mapping[str, Expression]) -> None:
        self._nodes: dict[str, Expression] = dict(nodes)
        self._graph = nx.DiGraph()
        self._graph.add_nodes_from(self._nodes)

        for node_id, expr in self._nodes.items():
            if isinstance(expr, BinaryOp):
                for operand in expr.operands:
                    if operand not in self._nodes:
                        raise UndefinedReferenceError(node_id, operand)
                    self._graph.add_edge(operand, node_id)

        self._order: Optional[list[str]] = None

    @classmethod
    def from_text(cls, text: str) -> ExpressionGraph:
        return parse_graph(text)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def expression(self, node_id: str) -> Expression:
        if node_id not in self._nodes:
            raise KeyError(f"Unknown node '{node_id}'")
        return self._nodes[node_id]

    def dependents(self, node_id: str) -> list[str]:
        """Nodes that use ``node_id`` as an operand."""
        return list(self._graph.successors(node_id))

    def depends_on(self, node_id: str, other: str) -> bool:
        """Whether ``node_id`` transitively depends on ``other``."""
        return other in nx.ancestors(self._graph, node_id)

    def evaluation_order(self) -> list[str]:
        """Topological order of all nodes, operands first."""
        if self._order is None:
            try:
                self._order = list(nx.topological_sort(self._graph))
            except nx.NetworkXUnfeasible:
                cycle = [edge[0] for edge in nx.find_cycle(self._graph)]
                raise CycleError(cycle) from None
        return list(self._order)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # ------------------------------------------------------------------
    # Forward evaluation
    # ------------------------------------------------------------------

    def evaluate(self) -> dict[str, int]:
        """Resolve every node to its integer value."""
        values: dict[str, int] = {}
        for node_id in self.evaluation_order():
            expr = self._nodes[node_id]
            if isinstance(expr, Literal):
                values[node_id] = _checked(expr.value, node_id)
            else:
                values[node_id] = expr.op.apply(values[expr.left], values[expr.right], node_id)
        logger.debug("Evaluated %d nodes", len(values))
        return values

    def value_of(self, node_id: str) -> int:
        self.expression(node_id)
        return self.evaluate()[node_id]

    # ------------------------------------------------------------------
    # Inverse evaluation
    # ------------------------------------------------------------------

    def solve_for(self, unknown: str, root: str = "root") -> int:
        """Find the value of leaf ``unknown`` that makes ``root``'s operands equal.

        Raises:
            UnknownCountError: if the root does not have exactly one side
                depending on ``unknown``, or some node depends on it twice
            ArithmeticFault: on division by zero, overflow or inexact inverse
        """
        if not isinstance(self.expression(unknown), Literal):
            raise GraphError(f"Unknown '{unknown}' must be a literal leaf")
        root_expr = self.expression(root)
        if not isinstance(root_expr, BinaryOp):
            raise GraphError(f"Root '{root}' must be a binary operation")

        known: dict[str, int] = {}
        reversed_graph = nx.DiGraph()
        start: Optional[str] = None

        # Phase 1: forward-evaluate what does not depend on the unknown
        for node_id in self.evaluation_order():
            expr = self._nodes[node_id]
            if isinstance(expr, Literal):
                if node_id != unknown:
                    known[node_id] = _checked(expr.value, node_id)
                continue

            left = known.get(expr.left)
            right = known.get(expr.right)

            if node_id == root:
                if (left is None) == (right is None):
                    state = "unresolved" if left is None else "resolved"
                    raise UnknownCountError(
                        f"Both sides of root '{root}' are {state}; "
                        f"exactly one must depend on '{unknown}'"
                    )
                if left is None:
                    known[expr.left] = right
                    start = expr.left
                else:
                    known[expr.right] = left
                    start = expr.right
                continue

            if left is not None and right is not None:
                known[node_id] = expr.op.apply(left, right, node_id)
            elif left is not None:
                reversed_graph.add_edge(node_id, expr.right)
            elif right is not None:
                reversed_graph.add_edge(node_id, expr.left)
            else:
                raise UnknownCountError(
                    f"Both operands of '{node_id}' depend on '{unknown}'"
                )

        assert start is not None
        reversed_graph.add_node(start)
        unknown_side = reversed_graph.subgraph({start} | nx.descendants(reversed_graph, start))

        # Phase 2: push the target value from the root outward
        for node_id in nx.topological_sort(unknown_side):
            expr = self._nodes[node_id]
            if isinstance(expr, Literal):
                continue
            target = known.get(node_id)
            left = known.get(expr.left)
            right = known.get(expr.right)
            unresolved = [v is None for v in (target, left, right)].count(True)
            if unresolved != 1:
                raise UnknownCountError(
                    f"Node '{node_id}' has {unresolved} unresolved values (expected 1)"
                )
            if target is None:
                known[node_id] = expr.op.apply(left, right, node_id)
            elif left is None:
                known[expr.left] = expr.op.solve_left(target, right, node_id)
            else:
                known[expr.right] = expr.op.solve_right(target, left, node_id)

        if unknown not in known:
            raise UnknownCountError(f"'{unknown}' does not feed root '{root}'")
        logger.debug("Solved %s = %d via %d inverted nodes", unknown, known[unknown], len(unknown_side))
        return known[unknown]

    # ------------------------------------------------------------------
    # Derivation & rendering
    # ------------------------------------------------------------------

    def substitute(self, node_id: str, value: int) -> ExpressionGraph:
        """Return a new graph with ``node_id`` replaced by a literal."""
        self.expression(node_id)
        nodes = dict(self._nodes)
        nodes[node_id] = Literal(value)
        return ExpressionGraph(nodes)

    def render(self) -> str:
        """Canonical text form, one ``name: expr`` line per node."""
        return "\n".join(f"{node_id}: {expr}" for node_id, expr in self._nodes.items())

    def __repr__(self) -> str:
        return (
            f"<ExpressionGraph: {len(self._nodes)} nodes, "
            f"{self._graph.number_of_edges()} edges>"
        )


# ============================================================================
# Parsing
# ============================================================================

_OPERATORS = {op.value: op for op in Operator}

operator_rule: Rule = map_rule(delimited(tag(" "), one_of("+-*/"), tag(" ")), _OPERATORS.__getitem__)

binary_op_rule: Rule = map_rule(
    sequence(identifier, operator_rule, identifier),
    lambda parts: BinaryOp(parts[0], parts[1], parts[2]),
)

expression_rule: Rule = alternative(map_rule(i64, Literal), binary_op_rule)

node_rule: Rule = map_rule(
    sequence(identifier, tag(": "), expression_rule),
    lambda parts: (parts[0], parts[2]),
)


def parse_nodes(text: str) -> list[tuple[str, Expression]]:
    """Parse ``name: expr`` lines without building the graph."""
    return parse_all(separated_list1(line_ending, node_rule), text)


def parse_graph(text: str) -> ExpressionGraph:
    """Parse puzzle text into an ``ExpressionGraph``.

    Raises:
        ParseError: on malformed lines
        DuplicateNodeError: if a name is defined twice
        UndefinedReferenceError: if an operand is never defined
    """
    nodes: dict[str, Expression] = {}
    for node_id, expr in parse_nodes(text):
        if node_id in nodes:
            raise DuplicateNodeError(node_id)
        nodes[node_id] = expr
    return ExpressionGraph(nodes)


def render_graph(graph: ExpressionGraph) -> str:
    return graph.render()


__all__ = [
    "ArithmeticFault",
    "BinaryOp",
    "CycleError",
    "DuplicateNodeError",
    "Expression",
    "ExpressionGraph",
    "GraphError",
    "Literal",
    "Operator",
    "ParseError",
    "UndefinedReferenceError",
    "UnknownCountError",
    "parse_graph",
    "parse_nodes",
    "render_graph",
]
