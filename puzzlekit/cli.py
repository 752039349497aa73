#!/usr/bin/env python3
"""
puzzlekit — command-line boundary for the daily solvers.

Reads one input file, hands its text to a solver, prints the answer and a
status line.

Usage:
    puzzlekit solve <day> <file> [--part 1|2]   Solve one or both parts
    puzzlekit days                              List available solvers
    puzzlekit merge <file> [--bounds A-B]       Merge "a-b" ranges, one per line
    puzzlekit eval <file> [--node N]            Evaluate an expression graph
    puzzlekit eval <file> --solve-for humn      Solve for an unknown leaf

Logging goes to stderr; the level comes from --log-level or the
PUZZLEKIT_LOG environment variable (default WARNING).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import textwrap
import time
from pathlib import Path
from typing import Optional

from puzzlekit import __version__
from puzzlekit.combinators import ParseError, line_ending, parse_all, separated_list1
from puzzlekit.exprgraph import ArithmeticFault, ExpressionGraph, GraphError
from puzzlekit.intervals import interval_rule, merge, parse_interval
from puzzlekit.search import SearchExhausted
from puzzlekit.solvers import SOLVERS, describe, get_solver

LOG_ENV_VAR = "PUZZLEKIT_LOG"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


# ============================================================================
# Formatting helpers
# ============================================================================

class C:
    """ANSI colors."""
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    RESET = "\033[0m"

    @staticmethod
    def off():
        C.BOLD = C.DIM = C.RED = C.GREEN = C.YELLOW = C.CYAN = C.RESET = ""


def header(text: str) -> str:
    return f"\n{C.BOLD}{C.CYAN}{'─' * 60}{C.RESET}\n{C.BOLD}  {text}{C.RESET}\n{C.BOLD}{C.CYAN}{'─' * 60}{C.RESET}"


def ok(text: str) -> str:
    return f"  {C.GREEN}✓{C.RESET} {text}"


def warn(text: str) -> str:
    return f"  {C.YELLOW}⚠{C.RESET} {text}"


def fail(text: str) -> str:
    return f"  {C.RED}✗{C.RESET} {text}"


def dim(text: str) -> str:
    return f"{C.DIM}{text}{C.RESET}"


def configure_logging(level: Optional[str] = None) -> None:
    """Set up stderr logging from ``level`` or the environment."""
    name = (level or os.environ.get(LOG_ENV_VAR) or "WARNING").upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{name}'")
    logging.basicConfig(level=numeric, format=LOG_FORMAT, datefmt="%H:%M:%S", force=True)


def read_input(path: str) -> str:
    return Path(path).read_text()


# ============================================================================
# Commands
# ============================================================================

def cmd_solve(args):
    """Solve one or both parts of a day."""
    text = read_input(args.file)
    parts = [args.part] if args.part else [1, 2]
    solver_name = describe(args.day) if args.day in SOLVERS else f"Day {args.day}"

    print(header(f"SOLVE: {solver_name}"))
    print(f"  {C.DIM}Input: {args.file} ({len(text)} chars){C.RESET}")

    for part in parts:
        solve = get_solver(args.day, part)
        logger.info("Solving day %d part %d", args.day, part)
        started = time.perf_counter()
        answer = solve(text)
        elapsed = time.perf_counter() - started

        if "\n" in answer:
            print(f"\n  {C.BOLD}Part {part}:{C.RESET}")
            for line in answer.splitlines():
                print(f"    {line}")
        else:
            print(f"\n  {C.BOLD}Part {part}:{C.RESET} {answer}")
        print(ok(f"Day {args.day} part {part} solved in {elapsed:.3f}s"))


def cmd_days(args):
    """List available solvers."""
    print(header("DAYS"))
    for day in sorted(SOLVERS):
        print(f"  {C.CYAN}{day:>2}{C.RESET}  {describe(day)}")


def cmd_merge(args):
    """Merge inclusive ranges, one ``a-b`` per line."""
    text = read_input(args.file)
    intervals = parse_all(separated_list1(line_ending, interval_rule), text)
    coverage = merge(intervals)

    print(header(f"MERGE: {args.file}"))
    print(f"  {C.DIM}{len(intervals)} input range(s) → {len(coverage)} merged{C.RESET}")
    for iv in coverage:
        print(f"    [{iv.start}, {iv.end}]  {dim(f'{iv.length} points')}")
    print(f"\n  Covered: {C.BOLD}{coverage.covered_count}{C.RESET}")

    if args.bounds:
        bounds = parse_interval(args.bounds)
        gap = coverage.first_gap(bounds)
        if gap is None:
            print(ok(f"[{bounds.start}, {bounds.end}] is fully covered"))
        else:
            print(warn(f"First gap in [{bounds.start}, {bounds.end}]: {gap}"))


def cmd_eval(args):
    """Evaluate (or invert) an expression graph."""
    graph = ExpressionGraph.from_text(read_input(args.file))

    print(header(f"EVAL: {args.file}"))
    print(f"  {C.DIM}{len(graph)} node(s){C.RESET}")

    if args.solve_for:
        value = graph.solve_for(args.solve_for, root=args.node)
        print(f"\n  {C.BOLD}{args.solve_for}{C.RESET} = {value}")
        check = graph.expression(args.node)
        values = graph.substitute(args.solve_for, value).evaluate()
        if values[check.left] == values[check.right]:
            print(ok(f"{args.node} constraint holds ({values[check.left]})"))
        else:
            print(warn(f"{args.node} sides differ: {values[check.left]} != {values[check.right]}"))
    else:
        value = graph.value_of(args.node)
        print(f"\n  {C.BOLD}{args.node}{C.RESET} = {value}")
        print(ok("Evaluated"))


# ============================================================================
# Main
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="puzzlekit",
        description="Solve daily text puzzles with reusable parsing and search primitives.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
        examples:
          puzzlekit solve 15 input.txt --part 1
          puzzlekit solve 10 crt.txt
          puzzlekit merge ranges.txt --bounds 0-4000000
          puzzlekit eval monkeys.txt --solve-for humn
        """),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--log-level", help=f"Logging level (default: ${LOG_ENV_VAR} or WARNING)")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    # solve
    p = sub.add_parser("solve", help="Solve a day's puzzle")
    p.add_argument("day", type=int, help="Day number")
    p.add_argument("file", help="Puzzle input file")
    p.add_argument("--part", type=int, choices=[1, 2], help="Only solve this part")

    # days
    sub.add_parser("days", help="List available solvers")

    # merge
    p = sub.add_parser("merge", help="Merge inclusive a-b ranges")
    p.add_argument("file", help="File with one range per line")
    p.add_argument("--bounds", help="Report the first uncovered integer in A-B")

    # eval
    p = sub.add_parser("eval", help="Evaluate an expression graph")
    p.add_argument("file", help="File of 'name: expr' lines")
    p.add_argument("--node", "--root", dest="node", default="root",
                   help="Node to evaluate, or the equality root when solving (default: root)")
    p.add_argument("--solve-for", help="Unknown leaf to solve for")

    return parser


def main(argv: Optional[list[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        C.off()

    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    if not args.command:
        parser.print_help()
        return

    commands = {
        "solve": cmd_solve,
        "days": cmd_days,
        "merge": cmd_merge,
        "eval": cmd_eval,
    }

    handler = commands[args.command]
    try:
        handler(args)
    except FileNotFoundError as e:
        print(fail(f"File not found: {e.filename}"))
        sys.exit(1)
    except ParseError as e:
        print(fail(f"Input could not be understood: {e}"))
        sys.exit(1)
    except (GraphError, ArithmeticFault, SearchExhausted) as e:
        print(fail(f"Error: {e}"))
        sys.exit(1)
    except (KeyError, ValueError) as e:
        print(fail(f"Error: {e.args[0] if e.args else e}"))
        sys.exit(1)


if __name__ == "__main__":
    main()
