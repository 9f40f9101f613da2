"""Parse diagnostics and their Rust-style colored rendering."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scratchc.source import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"

# Diagnostic codes
ABORTED = "E100"     # an error() combinator was reached
INCOMPLETE = "E101"  # the parser stopped before the end of input
TOO_DEEP = "E102"    # nesting exceeded the interpreter recursion limit


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors.

    Source lines are looked up in ``sources`` first (text that never lived
    on disk, such as stdin) and then read from the file named by the span.
    """

    def __init__(self, *, color: bool = True, sources: dict[str, str] | None = None) -> None:
        self.color = color
        self._line_cache: dict[str, list[str]] = {
            name: text.splitlines() for name, text in (sources or {}).items()
        }

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        if filename not in self._line_cache:
            try:
                path = Path(filename)
                if path.is_file():
                    self._line_cache[filename] = path.read_text().splitlines()
                else:
                    self._line_cache[filename] = []
            except OSError:
                self._line_cache[filename] = []
        lines = self._line_cache[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        # Header: error[E100]: message
        lines.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        gutter_bar = f"  {self._c(_BLUE)}   |{self._c(_RESET)}"
        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            lines.append(gutter_bar)

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                gutter = f"{span.start_line:>4}"
                lines.append(f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}")
                if span.start_line == span.end_line:
                    width = max(1, span.end_col - span.start_col + 1)
                    padding = " " * (span.start_col - 1)
                    lines.append(
                        f"{gutter_bar} {padding}{self._c(color)}{'^' * width}{self._c(_RESET)}"
                    )

            if label.message:
                lines.append(f"{gutter_bar}   {self._c(color)}{label.message}{self._c(_RESET)}")

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class CompileError(Exception):
    """Compilation error carrying one or more diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


class ParseAbort(CompileError):
    """Unrecoverable parse failure.

    Raised by the ``error()`` combinator and by ``parse_to_completion``.
    Ordered choice never catches it, so it always ends the whole parse.
    """

    def __init__(self, message: str, span: Span, *, code: str = ABORTED,
                 notes: list[str] | None = None) -> None:
        self.message = message
        self.span = span
        self.code = code
        self.notes = notes or []
        super().__init__([
            Diagnostic(
                severity=Severity.ERROR,
                code=code,
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
                notes=self.notes,
            )
        ])

    def in_file(self, filename: str) -> ParseAbort:
        """The same abort, with its span pointing into ``filename``."""
        return ParseAbort(self.message, replace(self.span, file=filename),
                          code=self.code, notes=self.notes)
