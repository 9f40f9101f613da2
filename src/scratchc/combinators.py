"""Parser combinators over an immutable ``Source`` cursor.

A parser is one of a closed set of frozen dataclasses.  ``attempt`` runs any
of them against a cursor and returns a ``ParseResult`` or ``None``:

- ``None`` is an ordinary non-match.  ``Or``, ``ZeroOrMore`` and ``Maybe``
  recover from it by trying something else from the same cursor.
- ``ParseAbort`` (raised by ``Error``) ends the whole parse.  Nothing in this
  module recovers from it.

Grammars are assembled with the lowercase constructors (``regexp``,
``constant``, ``either``, ``bind``...) rather than by subclassing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Union

from scratchc.errors import INCOMPLETE, TOO_DEEP, ParseAbort
from scratchc.source import ParseResult, Source

__all__ = [
    "And",
    "Bind",
    "Constant",
    "Defer",
    "Error",
    "Map",
    "Maybe",
    "Or",
    "ParseResult",
    "Parser",
    "Regexp",
    "ZeroOrMore",
    "and_then",
    "attempt",
    "bind",
    "constant",
    "defer",
    "either",
    "error",
    "map_value",
    "maybe",
    "parse_to_completion",
    "regexp",
    "zero_or_more",
]


# ── Variants ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Regexp:
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class Constant:
    value: Any


@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class Or:
    left: Parser
    right: Parser


@dataclass(frozen=True)
class ZeroOrMore:
    parser: Parser


@dataclass(frozen=True)
class Bind:
    parser: Parser
    callback: Callable[[Any], Parser]


@dataclass(frozen=True)
class And:
    left: Parser
    right: Parser


@dataclass(frozen=True)
class Map:
    parser: Parser
    callback: Callable[[Any], Any]


@dataclass(frozen=True)
class Maybe:
    parser: Parser


@dataclass(frozen=True)
class Defer:
    """Resolves its parser when attempted, for recursive grammars."""

    thunk: Callable[[], Parser]


Parser = Union[Regexp, Constant, Error, Or, ZeroOrMore, Bind, And, Map, Maybe, Defer]


# ── Constructors ─────────────────────────────────────────────────


def regexp(pattern: str | re.Pattern[str], flags: int = 0) -> Regexp:
    if isinstance(pattern, str):
        pattern = re.compile(pattern, flags)
    return Regexp(pattern)


def constant(value: Any) -> Constant:
    return Constant(value)


def error(message: str) -> Error:
    return Error(message)


def either(left: Parser, right: Parser, *rest: Parser) -> Or:
    """Ordered choice: ``either(a, b, c)`` is ``Or(Or(a, b), c)``."""
    combined = Or(left, right)
    for parser in rest:
        combined = Or(combined, parser)
    return combined


def zero_or_more(parser: Parser) -> ZeroOrMore:
    return ZeroOrMore(parser)


def bind(parser: Parser, callback: Callable[[Any], Parser]) -> Bind:
    return Bind(parser, callback)


def and_then(left: Parser, right: Parser) -> And:
    return And(left, right)


def map_value(parser: Parser, callback: Callable[[Any], Any]) -> Map:
    return Map(parser, callback)


def maybe(parser: Parser) -> Maybe:
    return Maybe(parser)


def defer(thunk: Callable[[], Parser]) -> Defer:
    return Defer(thunk)


# ── Dispatch ─────────────────────────────────────────────────────


def attempt(parser: Parser, source: Source) -> ParseResult[Any] | None:
    """Run ``parser`` at ``source``.

    Returns the parsed value and the advanced cursor, or ``None`` if the
    parser does not match here.  Raises ``ParseAbort`` if an ``Error``
    parser is reached.
    """
    if isinstance(parser, Regexp):
        return source.sticky_match(parser.pattern)
    if isinstance(parser, Constant):
        return ParseResult(parser.value, source)
    if isinstance(parser, Error):
        raise ParseAbort(parser.message, source.span())
    if isinstance(parser, Or):
        result = attempt(parser.left, source)
        if result is not None:
            return result
        return attempt(parser.right, source)
    if isinstance(parser, ZeroOrMore):
        return _attempt_zero_or_more(parser, source)
    if isinstance(parser, Bind):
        result = attempt(parser.parser, source)
        if result is None:
            return None
        return attempt(parser.callback(result.value), result.source)
    if isinstance(parser, And):
        result = attempt(parser.left, source)
        if result is None:
            return None
        return attempt(parser.right, result.source)
    if isinstance(parser, Map):
        result = attempt(parser.parser, source)
        if result is None:
            return None
        return ParseResult(parser.callback(result.value), result.source)
    if isinstance(parser, Maybe):
        result = attempt(parser.parser, source)
        if result is None:
            return ParseResult(None, source)
        return result
    if isinstance(parser, Defer):
        return attempt(parser.thunk(), source)
    raise TypeError(f"not a parser: {parser!r}")


def _attempt_zero_or_more(parser: ZeroOrMore, source: Source) -> ParseResult[tuple[Any, ...]]:
    values: list[Any] = []
    while True:
        result = attempt(parser.parser, source)
        if result is None:
            break
        values.append(result.value)
        # An inner parser that consumed nothing would match forever
        if result.source.index == source.index:
            break
        source = result.source
    return ParseResult(tuple(values), source)


def parse_to_completion(parser: Parser, text: str, filename: str = "<stdin>") -> Any:
    """Parse all of ``text`` and return the value.

    Raises ``ParseAbort`` if the parser does not match, leaves input
    unconsumed, or the input nests deeper than the recursion limit allows.
    """
    source = Source(text)
    try:
        result = attempt(parser, source)
    except ParseAbort as e:
        raise e.in_file(filename) from None
    except RecursionError:
        raise ParseAbort(
            "nesting too deep to parse", source.span(filename), code=TOO_DEEP,
        ) from None
    if result is None:
        raise ParseAbort("Parse error at index 0", source.span(filename), code=INCOMPLETE)
    stopped = result.source
    if not stopped.at_end:
        raise ParseAbort(
            f"Parse error at index {stopped.index}",
            stopped.span(filename),
            code=INCOMPLETE,
            notes=[f"unexpected input: {text[stopped.index:stopped.index + 20]!r}"],
        )
    return result.value
