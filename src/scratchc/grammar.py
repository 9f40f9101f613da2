"""Grammar for the Scratch language, built from parser combinators.

Every token parser consumes the whitespace and comments that follow it, so
grammar rules never deal with layout.  Expressions use one ``infix`` helper
per precedence level; recursive rules refer to each other through ``defer``.
"""

from __future__ import annotations

import math
import re
from functools import reduce

from scratchc.ast_nodes import (
    Add,
    Assign,
    Block,
    Call,
    Divide,
    Equal,
    Function,
    Id,
    If,
    Multiply,
    Not,
    NotEqual,
    Number,
    Return,
    Subtract,
    Var,
    While,
)
from scratchc.combinators import (
    Parser,
    and_then,
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

# ── Layout ───────────────────────────────────────────────────────

whitespace = regexp(r"[ \n\r\t]+")
comments = either(regexp(r"//.*"), regexp(r"/\*.*?\*/", re.DOTALL))
ignored = zero_or_more(either(whitespace, comments))


def token(pattern: str) -> Parser:
    """Match ``pattern``, skip what follows it, and yield the matched text."""
    return bind(regexp(pattern), lambda value: and_then(ignored, constant(value)))


# ── Tokens ───────────────────────────────────────────────────────

FUNCTION = token(r"function\b")
IF = token(r"if\b")
ELSE = token(r"else\b")
RETURN = token(r"return\b")
VAR = token(r"var\b")
WHILE = token(r"while\b")

COMMA = token(r",")
SEMICOLON = token(r";")
LEFT_PAREN = token(r"\(")
RIGHT_PAREN = token(r"\)")
LEFT_BRACE = token(r"\{")
RIGHT_BRACE = token(r"\}")


def _number(digits: str) -> Parser:
    value = float(digits)
    if not math.isfinite(value):
        return error("number literal out of range")
    return constant(Number(value))


NUMBER = bind(token(r"[0-9]+"), _number)
ID = token(r"[a-zA-Z_][a-zA-Z0-9_]*")
id_ = map_value(ID, Id)

NOT = token(r"!(?!=)")
ASSIGN = token(r"=(?!=)")
EQUAL = map_value(token(r"=="), lambda _: Equal)
NOT_EQUAL = map_value(token(r"!="), lambda _: NotEqual)
PLUS = map_value(token(r"\+"), lambda _: Add)
MINUS = map_value(token(r"-"), lambda _: Subtract)
STAR = map_value(token(r"\*"), lambda _: Multiply)
SLASH = map_value(token(r"/"), lambda _: Divide)


# ── Expressions ──────────────────────────────────────────────────

expression: Parser = defer(lambda: comparison)

# args <- (expression (COMMA expression)*)?
args = either(
    bind(expression, lambda first:
         bind(zero_or_more(and_then(COMMA, expression)), lambda rest:
              constant((first, *rest)))),
    constant(()),
)

# call <- ID LEFT_PAREN args RIGHT_PAREN
call = bind(ID, lambda callee:
            and_then(LEFT_PAREN,
                     bind(args, lambda arguments:
                          and_then(RIGHT_PAREN, constant(Call(callee, arguments))))))

# atom <- call / ID / NUMBER / LEFT_PAREN expression RIGHT_PAREN
atom = either(
    call,
    id_,
    NUMBER,
    bind(and_then(LEFT_PAREN, expression), lambda inner:
         and_then(RIGHT_PAREN, constant(inner))),
)

# unary <- NOT? atom
unary = bind(maybe(NOT), lambda bang:
             map_value(atom, lambda term: Not(term) if bang else term))


def infix(operator: Parser, term: Parser) -> Parser:
    """Left-associative chain of ``term`` separated by ``operator``.

    ``operator`` must yield the node class to build for each pair.
    """
    pair = bind(operator, lambda node_type: map_value(term, lambda right: (node_type, right)))
    return bind(term, lambda first: map_value(
        zero_or_more(pair),
        lambda pairs: reduce(lambda left, p: p[0](left, p[1]), pairs, first),
    ))


product = infix(either(STAR, SLASH), unary)
sum_ = infix(either(PLUS, MINUS), product)
comparison = infix(either(EQUAL, NOT_EQUAL), sum_)


# ── Statements ───────────────────────────────────────────────────

statement: Parser = defer(lambda: statement_parser)

# return_statement <- RETURN expression SEMICOLON
return_statement = bind(and_then(RETURN, expression), lambda term:
                        and_then(SEMICOLON, constant(Return(term))))

# expression_statement <- expression SEMICOLON
expression_statement = bind(expression, lambda term: and_then(SEMICOLON, constant(term)))

# if_statement <- IF LEFT_PAREN expression RIGHT_PAREN statement ELSE statement
else_branch = either(
    and_then(ELSE, either(statement, error("expected statement after `else`"))),
    error("expected `else` branch after `if` statement"),
)
if_statement = bind(and_then(and_then(IF, LEFT_PAREN), expression), lambda conditional:
                    bind(and_then(RIGHT_PAREN, statement), lambda consequence:
                         bind(else_branch, lambda alternative:
                              constant(If(conditional, consequence, alternative)))))

# while_statement <- WHILE LEFT_PAREN expression RIGHT_PAREN statement
while_statement = bind(and_then(and_then(WHILE, LEFT_PAREN), expression), lambda conditional:
                       bind(and_then(RIGHT_PAREN, statement), lambda body:
                            constant(While(conditional, body))))

# var_statement <- VAR ID ASSIGN expression SEMICOLON
var_statement = bind(and_then(VAR, ID), lambda name:
                     bind(and_then(ASSIGN, expression), lambda value:
                          and_then(SEMICOLON, constant(Var(name, value)))))

# assignment_statement <- ID ASSIGN expression SEMICOLON
assignment_statement = bind(ID, lambda name:
                            bind(and_then(ASSIGN, expression), lambda value:
                                 and_then(SEMICOLON, constant(Assign(name, value)))))

# block_statement <- LEFT_BRACE statement* RIGHT_BRACE
block_statement = bind(and_then(LEFT_BRACE, zero_or_more(statement)), lambda statements:
                       and_then(RIGHT_BRACE, constant(Block(statements))))

# parameters <- (ID (COMMA ID)*)?
parameters = either(
    bind(id_, lambda first:
         bind(zero_or_more(and_then(COMMA, id_)), lambda rest:
              constant((first, *rest)))),
    constant(()),
)

# function_statement <- FUNCTION ID LEFT_PAREN parameters RIGHT_PAREN block_statement
function_statement = bind(and_then(FUNCTION, ID), lambda name:
                          bind(and_then(LEFT_PAREN, parameters), lambda params:
                               bind(and_then(RIGHT_PAREN, block_statement), lambda body:
                                    constant(Function(name, params, body)))))

statement_parser = either(
    return_statement,
    function_statement,
    if_statement,
    while_statement,
    var_statement,
    assignment_statement,
    block_statement,
    expression_statement,
)

program = map_value(and_then(ignored, zero_or_more(statement)), Block)


def parse(text: str, filename: str = "<stdin>") -> Block:
    """Parse a whole Scratch program into a ``Block`` of its statements.

    Raises ``ParseAbort`` if the text is not a valid program.
    """
    return parse_to_completion(program, text, filename)
