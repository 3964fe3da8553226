"""
Defines the abstract syntax tree (AST) node model for the Lox programming language.

Every node is a frozen dataclass with no behavior. `Expr` and `Stmt` are closed
unions of those classes, so consumers dispatch with `match` over the variants:

    match node:
        case Binary(left, operator, right): ...
        case Literal(value): ...

The parser is the only producer. Child sequences are tuples and every node
owns its children exclusively, so a tree can be compared structurally with
`==` and hashed.

Expression nodes:
    Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Call, Get, Set, This, Super

Statement nodes:
    Expression, Print, Var, Block, If, While, Function, Return, Class

Usage:
    This module is the shared vocabulary between the parser and whatever
    consumes the program (the printer in this package, or an evaluator).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from lox.lox_lexer import LiteralValue, Token


@dataclass(frozen=True)
class Literal:
    value: LiteralValue


@dataclass(frozen=True)
class Grouping:
    expression: Expr


@dataclass(frozen=True)
class Unary:
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary:
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical:
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable:
    name: Token


@dataclass(frozen=True)
class Assign:
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call:
    """A call; `paren` is the closing parenthesis, kept for error locations."""

    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True)
class Get:
    object: Expr
    name: Token


@dataclass(frozen=True)
class Set:
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class This:
    keyword: Token


@dataclass(frozen=True)
class Super:
    keyword: Token
    method: Token


Expr = Union[
    Literal,
    Grouping,
    Unary,
    Binary,
    Logical,
    Variable,
    Assign,
    Call,
    Get,
    Set,
    This,
    Super,
]


@dataclass(frozen=True)
class Expression:
    expression: Expr


@dataclass(frozen=True)
class Print:
    expression: Expr


@dataclass(frozen=True)
class Var:
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block:
    statements: tuple[Stmt, ...]


@dataclass(frozen=True)
class If:
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True)
class While:
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function:
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class Return:
    keyword: Token
    value: Expr | None = None


@dataclass(frozen=True)
class Class:
    """A class declaration; the superclass is an unresolved `Variable` reference."""

    name: Token
    superclass: Variable | None
    methods: tuple[Function, ...]


Stmt = Union[
    Expression,
    Print,
    Var,
    Block,
    If,
    While,
    Function,
    Return,
    Class,
]

EXPR_TYPES: tuple[type, ...] = Expr.__args__  # type: ignore[attr-defined]
STMT_TYPES: tuple[type, ...] = Stmt.__args__  # type: ignore[attr-defined]


__all__ = [
    "EXPR_TYPES",
    "STMT_TYPES",
    "Assign",
    "Binary",
    "Block",
    "Call",
    "Class",
    "Expr",
    "Expression",
    "Function",
    "Get",
    "Grouping",
    "If",
    "Literal",
    "Logical",
    "Print",
    "Return",
    "Set",
    "Stmt",
    "Super",
    "This",
    "Unary",
    "Var",
    "Variable",
    "While",
]
