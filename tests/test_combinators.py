"""
puzzlekit Parser Combinator Test Suite

Tests:
1. Primitive rules and integer width classes
2. sequence / alternative ordering
3. Repetition and separated lists
4. Committed sequences, cut and attempt; error positions
5. parse_all whole-input consumption
"""

import pytest

from puzzlekit.combinators import (
    ParseError,
    Span,
    alternative,
    attempt,
    char,
    cut,
    delimited,
    digit1,
    i32,
    i64,
    identifier,
    line_ending,
    many0,
    many1,
    map_rule,
    optional,
    parse_all,
    parse_prefix,
    preceded,
    separated_list0,
    separated_list1,
    separated_pair,
    sequence,
    tag,
    u32,
    u64,
    value,
)


# ============================================================================
# Primitives
# ============================================================================

def test_tag_consumes_literal():
    rest, matched = parse_prefix(tag("noop"), "noop\naddx 3")
    assert matched == "noop"
    assert rest == "\naddx 3"


def test_tag_mismatch_reports_offset():
    with pytest.raises(ParseError) as exc:
        tag("addx")(Span("noop"))
    assert exc.value.offset == 0
    assert exc.value.expected == "'addx'"
    assert not exc.value.fatal


def test_char_rejects_multiple_characters():
    with pytest.raises(ValueError):
        char("ab")


def test_identifier_and_digits():
    assert parse_prefix(identifier, "humn: 5") == (": 5", "humn")
    assert parse_prefix(digit1, "498,4") == (",4", "498")


# ----------------------------------------------------------------------------
# Integers
# ----------------------------------------------------------------------------

def test_signed_integers():
    assert parse_all(i64, "-35") == -35
    assert parse_all(i64, "+7") == 7
    assert parse_all(i32, "2147483647") == 2147483647


def test_signed_overflow_is_rejected():
    with pytest.raises(ParseError) as exc:
        parse_all(i32, "2147483648")
    assert "i32" in str(exc.value)

    with pytest.raises(ParseError):
        parse_all(i64, "9223372036854775808")


def test_unsigned_rejects_sign_and_overflow():
    with pytest.raises(ParseError):
        parse_all(u32, "-1")
    with pytest.raises(ParseError):
        parse_all(u32, "4294967296")
    assert parse_all(u64, "18446744073709551615") == 18446744073709551615


def test_integer_stops_at_separator():
    assert parse_all(separated_pair(i64, char("-"), i64), "2-4") == (2, 4)
    assert parse_all(separated_pair(i64, char("-"), i64), "-5--3") == (-5, -3)


# ============================================================================
# Sequencing and choice
# ============================================================================

def test_sequence_returns_tuple():
    rule = sequence(identifier, tag(": "), i64)
    assert parse_all(rule, "dbpl: 5") == ("dbpl", ": ", 5)


def test_sequence_error_points_at_failing_subrule():
    rule = sequence(identifier, tag(": "), i64)
    with pytest.raises(ParseError) as exc:
        parse_all(rule, "dbpl: x")
    assert exc.value.offset == 6


def test_alternative_first_success_wins():
    rule = alternative(value(tag("noop"), "N"), map_rule(preceded(tag("addx "), i32), lambda v: ("A", v)))
    assert parse_all(rule, "noop") == "N"
    assert parse_all(rule, "addx -11") == ("A", -11)


def test_alternative_order_is_significant():
    short_first = alternative(tag("a"), tag("ab"))
    long_first = alternative(tag("ab"), tag("a"))
    assert parse_prefix(short_first, "ab") == ("b", "a")
    assert parse_prefix(long_first, "ab") == ("", "ab")


def test_alternative_raises_last_error():
    rule = alternative(tag("x"), tag("y"))
    with pytest.raises(ParseError) as exc:
        parse_all(rule, "z")
    assert exc.value.expected == "'y'"


def test_alternative_needs_rules():
    with pytest.raises(ValueError):
        alternative()


def test_delimited_and_optional():
    rule = delimited(char("("), i64, char(")"))
    assert parse_all(rule, "(42)") == 42
    assert parse_prefix(optional(tag("-")), "5") == ("5", None)


# ============================================================================
# Repetition
# ============================================================================

def test_many0_allows_zero():
    assert parse_prefix(many0(char("a")), "bbb") == ("bbb", [])
    assert parse_prefix(many0(char("a")), "aab") == ("b", ["a", "a"])


def test_many0_stops_on_zero_width_match():
    assert parse_prefix(many0(optional(char("a"))), "b") == ("b", [])


def test_many1_requires_one():
    with pytest.raises(ParseError):
        many1(char("a"))(Span("b"))


def test_separated_list1_requires_one_element():
    rule = separated_list1(char(","), i64)
    assert parse_all(rule, "1,2,3") == [1, 2, 3]
    with pytest.raises(ParseError):
        parse_all(rule, "")


def test_separated_list1_leaves_dangling_separator():
    rule = separated_list1(char(","), i64)
    assert parse_prefix(rule, "1,2,") == (",", [1, 2])


def test_separated_list0_allows_empty():
    assert parse_all(separated_list0(char(","), i64), "") == []


def test_line_ending_accepts_crlf():
    rule = separated_list1(line_ending, identifier)
    assert parse_all(rule, "ab\r\ncd\nef") == ["ab", "cd", "ef"]


# ============================================================================
# Errors
# ============================================================================

def test_partial_sequence_failure_is_fatal():
    rule = alternative(sequence(tag("addx "), i32), tag("addx oops"))
    with pytest.raises(ParseError) as exc:
        parse_all(rule, "addx oops")
    assert exc.value.fatal
    assert exc.value.offset == 5
    assert exc.value.expected == "i32"


def test_sequence_failing_on_first_rule_is_recoverable():
    with pytest.raises(ParseError) as exc:
        sequence(tag("addx "), i32)(Span("noop"))
    assert not exc.value.fatal


def test_attempt_allows_backtracking():
    rule = alternative(attempt(sequence(tag("addx "), i32)), tag("addx oops"))
    assert parse_all(rule, "addx oops") == "addx oops"
    assert parse_all(rule, "addx 3") == ("addx ", 3)


def test_cut_makes_errors_fatal():
    committed = alternative(cut(tag("x")), tag("y"))
    with pytest.raises(ParseError) as exc:
        parse_all(committed, "y")
    assert exc.value.fatal
    assert exc.value.expected == "'x'"


def test_error_line_and_column():
    rule = sequence(identifier, line_ending, identifier, char(":"))
    with pytest.raises(ParseError) as exc:
        parse_all(rule, "ab\ncd!")
    assert (exc.value.line, exc.value.col) == (2, 3)
    assert str(exc.value).startswith("Line 2, Col 3:")


def test_bad_record_reports_failing_token():
    rule = separated_list1(line_ending, sequence(identifier, tag(": "), i64))
    with pytest.raises(ParseError) as exc:
        parse_all(rule, "a: 1\nb: 2\nc: ?")
    assert exc.value.fatal
    assert (exc.value.line, exc.value.col) == (3, 4)
    assert exc.value.expected == "i64"


def test_parse_all_rejects_trailing_input():
    with pytest.raises(ParseError) as exc:
        parse_all(i64, "12 apples")
    assert exc.value.expected == "end of input"


def test_parse_all_skips_trailing_newline():
    assert parse_all(i64, "12\n\n") == 12
    with pytest.raises(ParseError):
        parse_all(i64, "12\n", trailing_whitespace=False)


def test_span_line_col():
    span = Span("ab\ncd", 4)
    assert span.line_col() == (2, 2)
    assert span.rest == "d"
