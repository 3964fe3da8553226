"""
Renders Lox syntax trees for people and for tools.

Functions and classes:
    AstPrinter: Produces a Lisp-style, fully parenthesized rendering of a program,
        one line per top-level statement, e.g. `(; (+ 1 (* 2 3)))` for `1 + 2 * 3;`.
    to_dict(node): Converts a node and all of its descendants into plain dictionaries
        (`ASTDict`), suitable for `json.dumps`.

Both walk the tree with `match` over every node variant, so adding a variant to
`lox.lox_ast` without handling it here fails loudly with `TypeError`.
"""

from __future__ import annotations

from typing import Any, Sequence, TypedDict

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Class,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Set,
    Stmt,
    Super,
    This,
    Unary,
    Var,
    Variable,
    While,
)
from lox.lox_lexer import LiteralValue, Token


class TokenDict(TypedDict):
    type: str
    lexeme: str
    literal: LiteralValue
    line: int
    col: int


class ASTDict(TypedDict, total=False):
    """
    Serialized form of a node.

    `kind` is always present and names the node class; the other keys are the
    node's fields, with child nodes as nested ASTDicts and tokens as TokenDicts.
    """

    kind: str


def format_literal(value: LiteralValue) -> str:
    """Spell a literal value the way Lox source would."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return value


class AstPrinter:
    def print(self, program: Sequence[Stmt | Expr]) -> str:
        return "\n".join(self.render(node) for node in program)

    def parenthesize(self, name: str, *parts: Stmt | Expr | str) -> str:
        rendered = [p if isinstance(p, str) else self.render(p) for p in parts]
        return "(" + " ".join([name, *rendered]) + ")"

    def render(self, node: Stmt | Expr) -> str:
        match node:
            # Expressions.
            case Literal(value):
                if isinstance(value, str):
                    return f'"{value}"'
                return format_literal(value)
            case Grouping(expression):
                return self.parenthesize("group", expression)
            case Unary(operator, right):
                return self.parenthesize(operator.lexeme, right)
            case Binary(left, operator, right) | Logical(left, operator, right):
                return self.parenthesize(operator.lexeme, left, right)
            case Variable(name):
                return name.lexeme
            case Assign(name, value):
                return self.parenthesize("=", name.lexeme, value)
            case Call(callee, _, arguments):
                return self.parenthesize("call", callee, *arguments)
            case Get(obj, name):
                return self.parenthesize(".", obj, name.lexeme)
            case Set(obj, name, value):
                return self.parenthesize("=", self.parenthesize(".", obj, name.lexeme), value)
            case This():
                return "this"
            case Super(_, method):
                return self.parenthesize("super", method.lexeme)

            # Statements.
            case Expression(expression):
                return self.parenthesize(";", expression)
            case Print(expression):
                return self.parenthesize("print", expression)
            case Var(name, None):
                return self.parenthesize("var", name.lexeme)
            case Var(name, initializer):
                return self.parenthesize("var", name.lexeme, initializer)
            case Block(statements):
                return self.parenthesize("block", *statements)
            case If(condition, then_branch, None):
                return self.parenthesize("if", condition, then_branch)
            case If(condition, then_branch, else_branch):
                return self.parenthesize("if-else", condition, then_branch, else_branch)
            case While(condition, body):
                return self.parenthesize("while", condition, body)
            case Function(name, params, body):
                signature = "(" + " ".join(p.lexeme for p in params) + ")"
                return self.parenthesize("fun", name.lexeme, signature, *body)
            case Return(_, None):
                return "(return)"
            case Return(_, value):
                return self.parenthesize("return", value)
            case Class(name, superclass, methods):
                parts: list[Stmt | Expr | str] = [name.lexeme]
                if superclass is not None:
                    parts.append(self.parenthesize("<", superclass.name.lexeme))
                parts.extend(methods)
                return self.parenthesize("class", *parts)

        raise TypeError(f"Cannot print {type(node).__name__!r} as a Lox node")


def token_to_dict(token: Token) -> TokenDict:
    return {
        "type": token.type.name,
        "lexeme": token.lexeme,
        "literal": token.literal,
        "line": token.line,
        "col": token.col,
    }


def _value_to_dict(value: Any) -> Any:
    if isinstance(value, Token):
        return token_to_dict(value)
    if isinstance(value, tuple):
        return [_value_to_dict(v) for v in value]
    if value is None or isinstance(value, (bool, float, str)):
        return value
    return to_dict(value)


def to_dict(node: Stmt | Expr) -> ASTDict:
    """Convert `node` and all of its descendants into an `ASTDict`."""
    match node:
        case (
            Literal() | Grouping() | Unary() | Binary() | Logical() | Variable()
            | Assign() | Call() | Get() | Set() | This() | Super()
            | Expression() | Print() | Var() | Block() | If() | While()
            | Function() | Return() | Class()
        ):
            result: dict[str, Any] = {"kind": type(node).__name__}
            for name in node.__dataclass_fields__:
                result[name] = _value_to_dict(getattr(node, name))
            return result  # type: ignore[return-value]

    raise TypeError(f"Cannot serialize {type(node).__name__!r} as a Lox node")


__all__ = ["ASTDict", "AstPrinter", "TokenDict", "format_literal", "to_dict", "token_to_dict"]
