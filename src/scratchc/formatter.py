"""AST-walking pretty-printer for Scratch source code.

Produces canonical formatting for .scr files.  Comments are not part of the
AST, so formatting a file drops them.
"""

from __future__ import annotations

import math

from scratchc.ast_nodes import (
    BINARY_OPERATORS,
    Assign,
    Block,
    Call,
    Function,
    Id,
    If,
    Not,
    Number,
    Return,
    Var,
    While,
)

# Operator precedence table (higher binds tighter)
_PRECEDENCE: dict[str, int] = {
    "==": 1, "!=": 1,
    "+": 2, "-": 2,
    "*": 3, "/": 3,
}
_UNARY = 4
_ATOM = 5

_INDENT = "    "


class ScratchFormatter:
    """Format a parsed program back to canonical source text."""

    # ── Public API ─────────────────────────────────────────────

    def format(self, program: Block) -> str:
        """Format a program to canonical source text."""
        parts: list[str] = []
        for i, stmt in enumerate(program.statements):
            if i > 0 and (isinstance(stmt, Function)
                          or isinstance(program.statements[i - 1], Function)):
                parts.append("")  # blank line around top-level functions
            parts.append(self._format_stmt(stmt, 0))
        return "\n".join(parts) + "\n" if parts else ""

    # ── Statements ─────────────────────────────────────────────

    def _format_stmt(self, stmt: object, depth: int) -> str:
        prefix = _INDENT * depth
        if isinstance(stmt, Return):
            return f"{prefix}return {self._format_expr(stmt.term)};"
        if isinstance(stmt, Var):
            return f"{prefix}var {stmt.name} = {self._format_expr(stmt.value)};"
        if isinstance(stmt, Assign):
            return f"{prefix}{stmt.name} = {self._format_expr(stmt.value)};"
        if isinstance(stmt, Block):
            return prefix + self._format_block(stmt, depth)
        if isinstance(stmt, Function):
            params = ", ".join(self._format_expr(p) for p in stmt.parameters)
            return f"{prefix}function {stmt.name}({params}) {self._format_body(stmt.body, depth)}"
        if isinstance(stmt, If):
            return (
                f"{prefix}if ({self._format_expr(stmt.conditional)}) "
                f"{self._format_body(stmt.consequence, depth)} else "
                f"{self._format_body(stmt.alternative, depth)}"
            )
        if isinstance(stmt, While):
            return (
                f"{prefix}while ({self._format_expr(stmt.conditional)}) "
                f"{self._format_body(stmt.body, depth)}"
            )
        return f"{prefix}{self._format_expr(stmt)};"

    def _format_body(self, body: object, depth: int) -> str:
        """Format a statement that follows a header on the same line."""
        if isinstance(body, Block):
            return self._format_block(body, depth)
        return self._format_stmt(body, depth).lstrip()

    def _format_block(self, block: Block, depth: int) -> str:
        if not block.statements:
            return "{}"
        lines = ["{"]
        for stmt in block.statements:
            lines.append(self._format_stmt(stmt, depth + 1))
        lines.append(_INDENT * depth + "}")
        return "\n".join(lines)

    # ── Expressions ────────────────────────────────────────────

    def _format_expr(self, expr: object) -> str:
        if isinstance(expr, Number):
            return _format_number(expr.value)
        if isinstance(expr, Id):
            return expr.value
        if isinstance(expr, Call):
            return f"{expr.callee}({', '.join(self._format_expr(a) for a in expr.args)})"
        if isinstance(expr, Not):
            term = self._format_expr(expr.term)
            if self._precedence(expr.term) < _ATOM:
                term = f"({term})"
            return f"!{term}"
        op = BINARY_OPERATORS.get(type(expr))
        if op is not None:
            prec = _PRECEDENCE[op]
            left = self._format_expr(expr.left)  # type: ignore[attr-defined]
            right = self._format_expr(expr.right)  # type: ignore[attr-defined]
            # Left-associative: a right operand of equal precedence needs parens
            if self._precedence(expr.left) < prec:  # type: ignore[attr-defined]
                left = f"({left})"
            if self._precedence(expr.right) <= prec:  # type: ignore[attr-defined]
                right = f"({right})"
            return f"{left} {op} {right}"
        raise TypeError(f"cannot format {type(expr).__name__} as an expression")

    def _precedence(self, expr: object) -> int:
        op = BINARY_OPERATORS.get(type(expr))
        if op is not None:
            return _PRECEDENCE[op]
        if isinstance(expr, Not):
            return _UNARY
        return _ATOM


def _format_number(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite number {value!r}")
    if value.is_integer():
        return str(int(value))
    return repr(value)
