"""
puzzlekit Parser Combinators

Turns line/record-oriented puzzle text into typed values by composing small
rules. A rule is any callable that takes an immutable ``Span`` and returns
``(remaining_span, value)``, or raises ``ParseError`` when the expected
token is absent.

Because rules never mutate their input, a failed attempt has nothing to roll
back: ``alternative`` simply retries the next rule against the same span.

Example:
    node = sequence(identifier, tag(": "), alternative(i64, binary_op))
    graph = parse_all(separated_list1(line_ending, node), text)

Error model:
    ParseError(offset, expected): recoverable; ``alternative`` moves on.
    ParseError(..., fatal=True): raised by a ``sequence`` that fails after
                                 partial success, or by ``cut``; propagates
                                 through ``alternative`` and the list rules.
    ``attempt(rule)`` turns fatal failures back into recoverable ones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union


# ============================================================================
# Input view
# ============================================================================

@dataclass(frozen=True)
class Span:
    """An immutable view into the input: the full text plus a read offset."""
    text: str
    offset: int = 0

    @property
    def rest(self) -> str:
        """The unconsumed remainder."""
        return self.text[self.offset:]

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def advance(self, count: int) -> Span:
        return Span(self.text, self.offset + count)

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.offset)

    def peek(self, count: int = 1) -> str:
        return self.text[self.offset:self.offset + count]

    def line_col(self) -> tuple[int, int]:
        """1-based line and column of the current offset."""
        line = self.text.count("\n", 0, self.offset) + 1
        line_start = self.text.rfind("\n", 0, self.offset) + 1
        return line, self.offset - line_start + 1

    def __repr__(self) -> str:
        return f"<Span @{self.offset} {self.peek(12)!r}>"


Rule = Callable[[Span], "tuple[Span, Any]"]


class ParseError(Exception):
    """Malformed input: the expected token or pattern was absent."""

    def __init__(self, expected: str, span: Span, fatal: bool = False):
        self.expected = expected
        self.offset = span.offset
        self.line, self.col = span.line_col()
        self.fatal = fatal
        self.span = span
        got = span.peek(12) if not span.at_end else "end of input"
        super().__init__(
            f"Line {self.line}, Col {self.col}: expected {expected} (got {got!r})"
        )


# ============================================================================
# Primitive rules
# ============================================================================

def tag(literal: str) -> Rule:
    """Match an exact literal string."""
    def rule(span: Span) -> tuple[Span, str]:
        if span.startswith(literal):
            return span.advance(len(literal)), literal
        raise ParseError(repr(literal), span)
    return rule


def char(expected: str) -> Rule:
    if len(expected) != 1:
        raise ValueError(f"char() takes a single character, got {expected!r}")
    return tag(expected)


def one_of(chars: str) -> Rule:
    """Match any single character from ``chars``."""
    def rule(span: Span) -> tuple[Span, str]:
        found = span.peek()
        if found and found in chars:
            return span.advance(1), found
        raise ParseError(f"one of {chars!r}", span)
    return rule


def regex(pattern: Union[str, re.Pattern], expected: Optional[str] = None) -> Rule:
    """Match a regular expression anchored at the current offset."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    label = expected or f"/{compiled.pattern}/"

    def rule(span: Span) -> tuple[Span, str]:
        match = compiled.match(span.text, span.offset)
        if match is None:
            raise ParseError(label, span)
        return span.advance(match.end() - match.start()), match.group()
    return rule


alpha1 = regex(r"[A-Za-z]+", "letters")
digit1 = regex(r"[0-9]+", "digits")
identifier = regex(r"[A-Za-z_][A-Za-z0-9_]*", "identifier")
space0 = regex(r"[ \t]*", "spaces")
space1 = regex(r"[ \t]+", "spaces")
multispace0 = regex(r"\s*", "whitespace")
multispace1 = regex(r"\s+", "whitespace")
newline = tag("\n")
line_ending = regex(r"\r?\n", "line ending")


def eof(span: Span) -> tuple[Span, None]:
    """Succeed only at the end of input."""
    if span.at_end:
        return span, None
    raise ParseError("end of input", span)


# ----------------------------------------------------------------------------
# Numbers
# ----------------------------------------------------------------------------

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")


def integer(signed: bool = True, bits: int = 64) -> Rule:
    """Parse a decimal integer constrained to a signedness and width class.

    Values that do not fit the requested width raise ``ParseError`` at the
    number's first character instead of silently widening.
    """
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        pattern, name = _SIGNED, f"i{bits}"
    else:
        low, high = 0, (1 << bits) - 1
        pattern, name = _UNSIGNED, f"u{bits}"

    def rule(span: Span) -> tuple[Span, int]:
        match = pattern.match(span.text, span.offset)
        if match is None:
            raise ParseError(name, span)
        number = int(match.group())
        if not low <= number <= high:
            raise ParseError(f"{name} in range [{low}, {high}]", span)
        return span.advance(match.end() - match.start()), number
    return rule


i32 = integer(signed=True, bits=32)
i64 = integer(signed=True, bits=64)
u32 = integer(signed=False, bits=32)
u64 = integer(signed=False, bits=64)


# ============================================================================
# Combinators
# ============================================================================

def sequence(*rules: Rule) -> Rule:
    """Apply each rule in order, keeping every value as a tuple.

    Short-circuits on the first failure; the error carries the failing
    sub-rule's position. Once an earlier sub-rule has consumed input the
    sequence is committed: a later failure is raised as fatal, so
    ``alternative`` and the list rules report it instead of backtracking.
    Wrap the sequence in ``attempt`` to allow backtracking.
    """
    def rule(span: Span) -> tuple[Span, tuple]:
        start = span
        values = []
        for sub in rules:
            try:
                span, value = sub(span)
            except ParseError as err:
                if err.fatal or span.offset == start.offset:
                    raise
                raise ParseError(err.expected, err.span, fatal=True) from err
            values.append(value)
        return span, tuple(values)
    return rule


def alternative(*rules: Rule) -> Rule:
    """Try rules in the order given; the first success wins.

    Order is significant: put the more specific rule first when a bare rule
    could match a prefix of it. If every rule fails, the last rule's error
    is raised.
    """
    if not rules:
        raise ValueError("alternative() needs at least one rule")

    def rule(span: Span) -> tuple[Span, Any]:
        last: Optional[ParseError] = None
        for sub in rules:
            try:
                return sub(span)
            except ParseError as err:
                if err.fatal:
                    raise
                last = err
        assert last is not None
        raise last
    return rule


def map_rule(inner: Rule, fn: Callable[[Any], Any]) -> Rule:
    """Transform the value of a successful match."""
    def rule(span: Span) -> tuple[Span, Any]:
        span, value = inner(span)
        return span, fn(value)
    return rule


def value(inner: Rule, constant: Any) -> Rule:
    """Replace a successful match's value with ``constant``."""
    return map_rule(inner, lambda _: constant)


def preceded(first: Rule, second: Rule) -> Rule:
    return map_rule(sequence(first, second), lambda pair: pair[1])


def terminated(first: Rule, second: Rule) -> Rule:
    return map_rule(sequence(first, second), lambda pair: pair[0])


def delimited(left: Rule, inner: Rule, right: Rule) -> Rule:
    return map_rule(sequence(left, inner, right), lambda triple: triple[1])


def separated_pair(first: Rule, sep: Rule, second: Rule) -> Rule:
    return map_rule(sequence(first, sep, second), lambda triple: (triple[0], triple[2]))


def optional(inner: Rule) -> Rule:
    """Match ``inner`` or nothing; yields ``None`` when absent."""
    def rule(span: Span) -> tuple[Span, Any]:
        try:
            return inner(span)
        except ParseError as err:
            if err.fatal:
                raise
            return span, None
    return rule


def many0(inner: Rule) -> Rule:
    """Apply ``inner`` zero or more times."""
    def rule(span: Span) -> tuple[Span, list]:
        values = []
        while True:
            try:
                after, item = inner(span)
            except ParseError as err:
                if err.fatal:
                    raise
                return span, values
            if after.offset == span.offset:
                # Zero-width match would loop forever
                return span, values
            values.append(item)
            span = after
    return rule


def many1(inner: Rule) -> Rule:
    """Apply ``inner`` one or more times."""
    repeated = many0(inner)

    def rule(span: Span) -> tuple[Span, list]:
        span_after, first = inner(span)
        span_after, rest = repeated(span_after)
        return span_after, [first] + rest
    return rule


def separated_list1(sep: Rule, inner: Rule) -> Rule:
    """Alternate ``inner`` and ``sep``; at least one element is required.

    A separator that is not followed by another element is left unconsumed.
    """
    def rule(span: Span) -> tuple[Span, list]:
        span, first = inner(span)
        values = [first]
        while True:
            try:
                after_sep, _ = sep(span)
                after_item, item = inner(after_sep)
            except ParseError as err:
                if err.fatal:
                    raise
                return span, values
            if after_item.offset == span.offset:
                return span, values
            values.append(item)
            span = after_item
    return rule


def separated_list0(sep: Rule, inner: Rule) -> Rule:
    """Zero-or-more wrapper around ``separated_list1``."""
    return map_rule(optional(separated_list1(sep, inner)), lambda items: items or [])


def cut(inner: Rule) -> Rule:
    """Commit to ``inner``: its failures become fatal and skip ``alternative``."""
    def rule(span: Span) -> tuple[Span, Any]:
        try:
            return inner(span)
        except ParseError as err:
            if err.fatal:
                raise
            raise ParseError(err.expected, err.span, fatal=True) from err
    return rule


def attempt(inner: Rule) -> Rule:
    """Opposite of ``cut``: any failure of ``inner`` becomes recoverable."""
    def rule(span: Span) -> tuple[Span, Any]:
        try:
            return inner(span)
        except ParseError as err:
            if not err.fatal:
                raise
            raise ParseError(err.expected, err.span) from err
    return rule


# ============================================================================
# Public API
# ============================================================================

def parse_prefix(rule: Rule, text: str) -> tuple[str, Any]:
    """Run ``rule`` on ``text``; returns ``(unconsumed_text, value)``."""
    span, result = rule(Span(text))
    return span.rest, result


def parse_all(rule: Rule, text: str, trailing_whitespace: bool = True) -> Any:
    """Run ``rule`` and require it to consume the entire input.

    Args:
        rule: Top-level rule for the puzzle input
        text: Raw input text
        trailing_whitespace: Allow (and skip) whitespace after the match

    Returns:
        The rule's value

    Raises:
        ParseError: if the rule fails or input remains afterwards
    """
    span, result = rule(Span(text))
    if trailing_whitespace:
        span, _ = multispace0(span)
    eof(span)
    return result
