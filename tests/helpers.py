"""Shared test helpers for the Scratch test suite."""

from __future__ import annotations

from scratchc.ast_nodes import Block
from scratchc.grammar import parse


def parse_program(source: str) -> Block:
    """Parse a whole program, asserting it succeeds."""
    return parse(source, "<test>")


def parse_statement(source: str):
    """Parse source holding exactly one statement and return it."""
    program = parse_program(source)
    assert len(program.statements) == 1, program.statements
    return program.statements[0]


def parse_expression(source: str):
    """Parse ``source`` as an expression statement and return the expression."""
    return parse_statement(f"{source};")
