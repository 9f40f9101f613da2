"""AST node definitions for the Scratch language.

Nodes are frozen dataclasses, so equality is structural.  ``node_key``
provides a total order across variants for reproducible sorting.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Union, get_args

# ── Leaves ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Id:
    value: str


# ── Operators ────────────────────────────────────────────────────


@dataclass(frozen=True)
class Not:
    term: Ast


@dataclass(frozen=True)
class Equal:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class NotEqual:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Add:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Subtract:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Multiply:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Divide:
    left: Ast
    right: Ast


@dataclass(frozen=True)
class Call:
    callee: str
    args: tuple[Ast, ...]


# ── Statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Return:
    term: Ast


@dataclass(frozen=True)
class Block:
    statements: tuple[Ast, ...]


@dataclass(frozen=True)
class If:
    conditional: Ast
    consequence: Ast
    alternative: Ast


@dataclass(frozen=True)
class Function:
    name: str
    parameters: tuple[Ast, ...]  # Id nodes
    body: Ast


@dataclass(frozen=True)
class Var:
    name: str
    value: Ast


@dataclass(frozen=True)
class Assign:
    name: str
    value: Ast


@dataclass(frozen=True)
class While:
    conditional: Ast
    body: Ast


Ast = Union[
    Add, Assign, Block, Call, Divide, Equal, Function, Id, If,
    Multiply, Not, NotEqual, Number, Return, Subtract, Var, While,
]

BINARY_OPERATORS: dict[type, str] = {
    Equal: "==",
    NotEqual: "!=",
    Add: "+",
    Subtract: "-",
    Multiply: "*",
    Divide: "/",
}

# Variant rank for ordering; follows the order of the Ast union
_TAG_ORDER: dict[type, int] = {cls: i for i, cls in enumerate(get_args(Ast))}


def node_key(node: Ast) -> tuple:
    """Sort key ordering nodes by variant, then field by field."""
    try:
        tag = _TAG_ORDER[type(node)]
    except KeyError:
        raise TypeError(f"not an AST node: {node!r}") from None
    return (tag, *(_field_key(getattr(node, f.name)) for f in fields(node)))


def _field_key(value: object) -> object:
    if isinstance(value, tuple):
        return tuple(node_key(child) for child in value)
    if isinstance(value, (str, float, int)):
        return value
    return node_key(value)  # type: ignore[arg-type]
