"""
puzzlekit CLI Test Suite

Drives ``main(argv)`` end to end with sample files and checks the printed
answers, status lines and exit codes.
"""

import logging
from pathlib import Path

import pytest

from puzzlekit import cli

SAMPLES = Path(__file__).parent / "samples"


@pytest.fixture(autouse=True)
def plain_output():
    cli.C.off()


def run(capsys, *argv):
    cli.main(["--no-color", *argv])
    return capsys.readouterr().out


# ============================================================================
# solve / days
# ============================================================================

def test_solve_single_part(capsys):
    out = run(capsys, "solve", "4", str(SAMPLES / "day04.txt"), "--part", "1")
    assert "Part 1: 2" in out
    assert "Part 2" not in out
    assert "✓ Day 4 part 1 solved in" in out


def test_solve_both_parts(capsys):
    out = run(capsys, "solve", "21", str(SAMPLES / "day21.txt"))
    assert "Part 1: 152" in out
    assert "Part 2: 301" in out


def test_solve_multiline_answer(capsys):
    out = run(capsys, "solve", "10", str(SAMPLES / "day10.txt"), "--part", "2")
    assert "    ##..##..##..##..##..##..##..##..##..##.." in out


def test_days_lists_solvers(capsys):
    out = run(capsys, "days")
    assert "Day 14: Regolith Reservoir" in out
    assert "Day 21: Monkey Math" in out


# ============================================================================
# merge / eval
# ============================================================================

def test_merge(capsys, tmp_path):
    ranges = tmp_path / "ranges.txt"
    ranges.write_text("2-4\n6-8\n10-12\n")
    out = run(capsys, "merge", str(ranges), "--bounds", "0-20")
    assert "[2, 4]" in out and "[10, 12]" in out
    assert "Covered: 9" in out
    assert "First gap in [0, 20]: 0" in out


def test_merge_fully_covered(capsys, tmp_path):
    ranges = tmp_path / "ranges.txt"
    ranges.write_text("0-5\n6-9\n")
    out = run(capsys, "merge", str(ranges), "--bounds", "0-9")
    assert "[0, 9]" in out
    assert "fully covered" in out


def test_eval_forward(capsys, tmp_path):
    graph = tmp_path / "graph.txt"
    graph.write_text("root: a + b\na: 2\nb: 3\n")
    out = run(capsys, "eval", str(graph))
    assert "root = 5" in out


def test_eval_solve_for(capsys):
    out = run(capsys, "eval", str(SAMPLES / "day21.txt"), "--solve-for", "humn")
    assert "humn = 301" in out
    assert "root constraint holds (150)" in out


# ============================================================================
# Errors
# ============================================================================

def test_missing_file_exits_nonzero(capsys, tmp_path):
    with pytest.raises(SystemExit) as exc:
        run(capsys, "solve", "4", str(tmp_path / "nope.txt"))
    assert exc.value.code == 1
    assert "File not found" in capsys.readouterr().out


def test_unknown_day_exits_nonzero(capsys):
    with pytest.raises(SystemExit) as exc:
        run(capsys, "solve", "99", str(SAMPLES / "day04.txt"))
    assert exc.value.code == 1
    assert "No solver for day 99" in capsys.readouterr().out


def test_parse_error_exits_nonzero(capsys, tmp_path):
    bad = tmp_path / "bad.txt"
    bad.write_text("2-4,6-x\n")
    with pytest.raises(SystemExit) as exc:
        run(capsys, "solve", "4", str(bad))
    assert exc.value.code == 1
    assert "Input could not be understood: Line 1, Col 7" in capsys.readouterr().out


def test_merge_reports_reversed_range(capsys, tmp_path):
    ranges = tmp_path / "ranges.txt"
    ranges.write_text("2-4\n8-6\n")
    with pytest.raises(SystemExit) as exc:
        run(capsys, "merge", str(ranges))
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "Line 2, Col 1: expected interval with start <= end" in out


def test_cycle_exits_nonzero(capsys, tmp_path):
    graph = tmp_path / "graph.txt"
    graph.write_text("root: a + b\na: b + b\nb: a + a\n")
    with pytest.raises(SystemExit) as exc:
        run(capsys, "eval", str(graph))
    assert exc.value.code == 1
    assert "Cyclic dependency" in capsys.readouterr().out


# ============================================================================
# Logging configuration
# ============================================================================

def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv(cli.LOG_ENV_VAR, "debug")
    cli.configure_logging()
    assert logging.getLogger().level == logging.DEBUG
    cli.configure_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_bad_log_level_rejected():
    with pytest.raises(ValueError):
        cli.configure_logging("chatty")
