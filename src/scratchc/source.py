"""Source cursor with anchored regex matching, and span tracking for diagnostics."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """A value produced by a successful parse, and the cursor after it."""

    value: T
    source: Source


@dataclass(frozen=True)
class Source:
    """An immutable position in a source string.

    Every successful match returns a new ``Source``; the receiver is never
    modified, so two alternatives tried from the same cursor always see the
    same input.
    """

    string: str
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index <= len(self.string):
            raise ValueError(
                f"index {self.index} out of range for source of length {len(self.string)}"
            )

    @property
    def at_end(self) -> bool:
        return self.index == len(self.string)

    def sticky_match(self, regexp: re.Pattern[str] | str) -> ParseResult[str] | None:
        """Match ``regexp`` exactly at the current index.

        The string is sliced at ``index`` first so that ``^`` anchors to the
        cursor rather than to the start of the whole buffer.
        """
        if isinstance(regexp, str):
            regexp = re.compile(regexp)
        m = regexp.match(self.string[self.index:])
        if m is None:
            return None
        value = m.group(0)
        return ParseResult(value, Source(self.string, self.index + len(value)))

    def line_col(self) -> tuple[int, int]:
        """Return the 1-indexed (line, column) of the cursor."""
        consumed = self.string[: self.index]
        line = consumed.count("\n") + 1
        col = self.index - (consumed.rfind("\n") + 1) + 1
        return line, col

    def span(self, filename: str = "<stdin>") -> Span:
        """A zero-width span at the cursor, for diagnostics."""
        line, col = self.line_col()
        return Span(filename, line, col, line, col)
