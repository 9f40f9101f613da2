"""Tests for the parser combinators."""

from __future__ import annotations

import re

import pytest

from scratchc.combinators import (
    Constant,
    Or,
    Regexp,
    and_then,
    attempt,
    bind,
    constant,
    defer,
    either,
    error,
    map_value,
    maybe,
    parse_to_completion,
    regexp,
    zero_or_more,
)
from scratchc.errors import ABORTED, INCOMPLETE, CompileError, ParseAbort
from scratchc.source import ParseResult, Source

LETTER = regexp(r"^[A-Za-z]")
DIGIT = regexp(r"^[0-9]")


class TestConstant:
    def test_returns_value_without_consuming(self):
        source = Source("abc", 1)
        assert attempt(constant(42), source) == ParseResult(42, source)

    def test_succeeds_at_end_of_input(self):
        source = Source("abc", 3)
        assert attempt(constant("x"), source) == ParseResult("x", source)


class TestRegexp:
    def test_matched_text_is_value(self):
        result = attempt(regexp(r"[0-9]+"), Source("123abc"))
        assert result == ParseResult("123", Source("123abc", 3))

    def test_no_match(self):
        assert attempt(regexp(r"[0-9]+"), Source("abc123")) is None

    def test_flags(self):
        result = attempt(regexp(r"abc", re.IGNORECASE), Source("ABC"))
        assert result.value == "ABC"

    def test_accepts_compiled_pattern(self):
        pattern = re.compile(r"x")
        assert regexp(pattern) == Regexp(pattern)


class TestOr:
    def test_left_bias(self):
        for index in range(4):
            source = Source("abc", index)
            assert attempt(either(constant(1), constant(2)), source).value == 1

    def test_fallback_to_right(self):
        source = Source("7up")
        result = attempt(either(LETTER, DIGIT), source)
        assert result == ParseResult("7", Source("7up", 1))

    def test_both_fail(self):
        assert attempt(either(LETTER, DIGIT), Source("_")) is None

    def test_right_sees_original_cursor(self):
        # Left consumes "ab" and then fails; right must still start at 0
        left = and_then(regexp(r"ab"), regexp(r"x"))
        right = regexp(r"abc")
        result = attempt(either(left, right), Source("abc"))
        assert result == ParseResult("abc", Source("abc", 3))

    def test_consumed_left_does_not_leak(self):
        left = bind(regexp(r"a"), lambda _: regexp(r"z"))
        source = Source("abc")
        result = attempt(either(left, regexp(r"a")), source)
        assert result == ParseResult("a", Source("abc", 1))
        assert source == Source("abc")

    def test_alternating_letters_and_digits(self):
        parser = either(LETTER, DIGIT)
        source = Source("q1w2f3p4g5")
        values = []
        while True:
            result = attempt(parser, source)
            if result is None:
                break
            assert result.source.index == source.index + 1
            values.append(result.value)
            source = result.source
        assert values == list("q1w2f3p4g5")
        assert source.index == len("q1w2f3p4g5")

    def test_either_chains_left_to_right(self):
        parser = either(regexp(r"a"), regexp(r"b"), regexp(r"c"))
        assert parser == Or(Or(regexp(r"a"), regexp(r"b")), regexp(r"c"))
        assert attempt(parser, Source("c")).value == "c"

    def test_composition_does_not_mutate_parts(self):
        left = constant(1)
        right = constant(2)
        either(left, right)
        assert left == Constant(1)
        assert right == Constant(2)


class TestError:
    def test_aborts(self):
        with pytest.raises(ParseAbort) as exc_info:
            attempt(error("unreachable"), Source("abc"))
        assert exc_info.value.message == "unreachable"
        assert exc_info.value.code == ABORTED

    def test_is_compile_error(self):
        with pytest.raises(CompileError):
            attempt(error("boom"), Source(""))

    def test_not_recovered_by_or(self):
        with pytest.raises(ParseAbort, match="boom"):
            attempt(either(error("boom"), constant(1)), Source("abc"))

    def test_not_recovered_when_nested(self):
        deep = either(
            regexp(r"z"),
            and_then(regexp(r"a"), either(regexp(r"z"), bind(regexp(r"b"), lambda _: error("deep")))),
        )
        with pytest.raises(ParseAbort, match="deep"):
            attempt(either(deep, constant("fallback")), Source("abc"))

    def test_not_recovered_by_zero_or_more_or_maybe(self):
        with pytest.raises(ParseAbort):
            attempt(zero_or_more(error("many")), Source("abc"))
        with pytest.raises(ParseAbort):
            attempt(maybe(error("maybe")), Source("abc"))

    def test_right_branch_error_after_left_fails(self):
        with pytest.raises(ParseAbort, match="expected digit"):
            attempt(either(DIGIT, error("expected digit")), Source("a"))

    def test_position_reported(self):
        with pytest.raises(ParseAbort) as exc_info:
            attempt(error("here"), Source("ab\ncd", 4))
        span = exc_info.value.span
        assert (span.start_line, span.start_col) == (2, 2)


class TestSequencing:
    def test_bind_threads_cursor(self):
        parser = bind(regexp(r"[a-z]+"), lambda word: map_value(regexp(r"[0-9]+"), lambda n: (word, n)))
        result = attempt(parser, Source("abc123"))
        assert result == ParseResult(("abc", "123"), Source("abc123", 6))

    def test_bind_fails_if_first_fails(self):
        called = []
        parser = bind(regexp(r"x"), lambda v: called.append(v) or constant(v))
        assert attempt(parser, Source("y")) is None
        assert called == []

    def test_bind_fails_if_second_fails(self):
        parser = bind(regexp(r"a"), lambda _: regexp(r"b"))
        assert attempt(parser, Source("ac")) is None

    def test_and_then_keeps_right_value(self):
        result = attempt(and_then(regexp(r"\("), regexp(r"[0-9]")), Source("(5"))
        assert result == ParseResult("5", Source("(5", 2))

    def test_map_value(self):
        result = attempt(map_value(regexp(r"[0-9]+"), int), Source("42"))
        assert result.value == 42

    def test_map_value_fails_if_inner_fails(self):
        assert attempt(map_value(regexp(r"[0-9]+"), int), Source("x")) is None


class TestRepetition:
    def test_zero_or_more_collects(self):
        result = attempt(zero_or_more(DIGIT), Source("123x"))
        assert result == ParseResult(("1", "2", "3"), Source("123x", 3))

    def test_zero_or_more_accepts_nothing(self):
        result = attempt(zero_or_more(DIGIT), Source("x"))
        assert result == ParseResult((), Source("x"))

    def test_zero_or_more_stops_on_empty_match(self):
        result = attempt(zero_or_more(regexp(r"a*")), Source("bbb"))
        assert result == ParseResult(("",), Source("bbb"))

    def test_maybe_present(self):
        result = attempt(maybe(regexp(r"-")), Source("-1"))
        assert result == ParseResult("-", Source("-1", 1))

    def test_maybe_absent(self):
        assert attempt(maybe(regexp(r"-")), Source("1")) == ParseResult(None, Source("1"))


class TestDefer:
    def test_recursive_parser(self):
        # nested <- "(" nested ")" / ""
        nested = defer(lambda: parens)
        parens = either(
            bind(and_then(regexp(r"\("), nested), lambda depth: and_then(regexp(r"\)"), constant(depth + 1))),
            constant(0),
        )
        assert attempt(parens, Source("((()))")).value == 3
        assert attempt(parens, Source("(()")).value == 0


class TestAttempt:
    def test_is_pure(self):
        parser = zero_or_more(either(LETTER, DIGIT))
        source = Source("a1b2")
        assert attempt(parser, source) == attempt(parser, source)

    def test_rejects_unknown_objects(self):
        with pytest.raises(TypeError, match="not a parser"):
            attempt("[a-z]", Source("a"))  # type: ignore[arg-type]


class TestParseToCompletion:
    def test_returns_value(self):
        assert parse_to_completion(zero_or_more(DIGIT), "123") == ("1", "2", "3")

    def test_no_match(self):
        with pytest.raises(ParseAbort, match="index 0") as exc_info:
            parse_to_completion(DIGIT, "x")
        assert exc_info.value.code == INCOMPLETE

    def test_leftover_input(self):
        with pytest.raises(ParseAbort) as exc_info:
            parse_to_completion(zero_or_more(DIGIT), "12x", "nums.txt")
        err = exc_info.value
        assert err.message == "Parse error at index 2"
        assert str(err.span) == "nums.txt:1:3"
        assert err.notes == ["unexpected input: 'x'"]

    def test_error_gets_filename(self):
        with pytest.raises(ParseAbort) as exc_info:
            parse_to_completion(and_then(DIGIT, error("stop")), "1", "main.scr")
        assert exc_info.value.span.file == "main.scr"
        assert exc_info.value.code == ABORTED
