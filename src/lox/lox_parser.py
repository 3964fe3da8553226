"""
Lox Language Parser

Parses Lox tokens into a list of statement nodes (see `lox.lox_ast`).

This module implements a recursive-descent parser. Each precedence level of
the expression grammar is one method that parses the next-higher level and
then loops over its own operators, so precedence and left-associativity come
from call nesting alone:

    assignment → or → and → equality → comparison → term → factor
               → unary → call → primary

Supported Constructs
--------------------
- Expressions:
    * Arithmetic, comparison, equality and logical (`and`/`or`) operators
    * Unary `!` and `-`
    * Calls `f(a, b)`, property access `a.b`, `this`, `super.method`
    * Assignment to variables and properties (right-associative)

- Statements:
    * Declarations: `var`, `fun`, `class` (with optional `< Superclass`)
    * Control flow: `if`/`else`, `while`, `for` (desugared into `while`)
    * `print`, `return`, blocks and expression statements

Parser Behavior
---------------
- Never raises on malformed input. Every syntax error is reported to an
  `ErrorReporter` where it is detected; the current declaration is then
  abandoned and the parser skips ahead to the next statement boundary
  (panic-mode recovery), so one pass can report several errors.
- Declarations that failed are left out of the result.
- Parameter and argument lists over 255 entries are reported but kept whole.

Entry Points
------------
- `parse(tokens)`: Parse a token list produced by the scanner.
- `parse_source(source)`: Scan and parse in one step, returning a `ParseResult`.
"""

from __future__ import annotations

from typing import Callable

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
from lox.lox_errors import ErrorReporter, ParseResult
from lox.lox_lexer import Token, TokenType, scan

TT = TokenType

MAX_ARGS = 255

# Tokens that begin a declaration or statement; recovery resumes before them.
SYNC_TOKENS = frozenset(
    {TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN}
)


class ParseError(Exception):
    """Abandon the current declaration. Carries nothing: the error is already reported."""


class Parser:
    """
    Lox Parser Class

    Transforms one scanner token list into a list of statements. A Parser is
    single-use: create a new one for each token list.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream; must end with an EOF token.
    position : int
        Index of the current (not yet consumed) token.
    reporter : ErrorReporter
        Sink for syntax errors.
    """

    def __init__(self, tokens: list[Token], reporter: ErrorReporter | None = None) -> None:
        if not tokens or tokens[-1].type is not TT.EOF:
            raise ValueError("Token list must end with an EOF token.")
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()

    # -- token cursor -------------------------------------------------------

    def current(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        return self.current().is_eof

    def advance(self) -> Token:
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def check(self, *types: TokenType) -> bool:
        return self.current().type in types

    def match(self, *types: TokenType) -> Token | None:
        """Consume and return the current token if it is one of `types`."""
        if self.check(*types):
            return self.advance()
        return None

    def consume(self, type_: TokenType, message: str) -> Token:
        """Consume a required token, or report `message` and abandon the declaration."""
        if self.check(type_):
            return self.advance()
        raise self.error(self.current(), message)

    def error(self, token: Token, message: str) -> ParseError:
        """Report a syntax error at `token` and return the signal for the caller to raise."""
        self.reporter.error_token(token, message)
        return ParseError()

    def synchronize(self) -> None:
        """Discard tokens until the likely start of the next statement."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TT.SEMICOLON:
                return
            if self.current().type in SYNC_TOKENS:
                return
            self.advance()

    # -- declarations -------------------------------------------------------

    def parse(self) -> list[Stmt]:
        """Parse a full Lox program and return its top-level statements."""
        statements: list[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def declaration(self) -> Stmt | None:
        try:
            if self.match(TT.CLASS):
                return self.class_declaration()
            if self.match(TT.FUN):
                return self.function("function")
            if self.match(TT.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self) -> Class:
        name = self.consume(TT.IDENTIFIER, "Expect class name.")

        superclass: Variable | None = None
        if self.match(TT.LESS):
            superclass = Variable(self.consume(TT.IDENTIFIER, "Expect superclass name."))

        self.consume(TT.LEFT_BRACE, "Expect '{' before class body.")
        methods: list[Function] = []
        while not self.check(TT.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function("method"))
        self.consume(TT.RIGHT_BRACE, "Expect '}' after class body.")

        return Class(name, superclass, tuple(methods))

    def function(self, kind: str) -> Function:
        """Parse a function or method; `kind` only appears in error messages."""
        name = self.consume(TT.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TT.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: list[Token] = []
        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.current(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume(TT.IDENTIFIER, "Expect parameter name."))
                if not self.match(TT.COMMA):
                    break
        self.consume(TT.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TT.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.block()
        return Function(name, tuple(params), tuple(body))

    def var_declaration(self) -> Var:
        name = self.consume(TT.IDENTIFIER, "Expect variable name.")
        initializer: Expr | None = None
        if self.match(TT.EQUAL):
            initializer = self.expression()
        self.consume(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    # -- statements ---------------------------------------------------------

    def statement(self) -> Stmt:
        if self.match(TT.FOR):
            return self.for_statement()
        if self.match(TT.IF):
            return self.if_statement()
        if self.match(TT.PRINT):
            return self.print_statement()
        if self.match(TT.RETURN):
            return self.return_statement()
        if self.match(TT.WHILE):
            return self.while_statement()
        if self.match(TT.LEFT_BRACE):
            return Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        """Parse `for (init; cond; incr) body` and desugar it into a while loop."""
        self.consume(TT.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Stmt | None
        if self.match(TT.SEMICOLON):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition: Expr | None = None
        if not self.check(TT.SEMICOLON):
            condition = self.expression()
        self.consume(TT.SEMICOLON, "Expect ';' after loop condition.")

        increment: Expr | None = None
        if not self.check(TT.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TT.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = Block((body, Expression(increment)))
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block((initializer, body))
        return body

    def if_statement(self) -> If:
        self.consume(TT.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TT.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch: Stmt | None = None
        if self.match(TT.ELSE):
            else_branch = self.statement()
        return If(condition, then_branch, else_branch)

    def print_statement(self) -> Print:
        value = self.expression()
        self.consume(TT.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value: Expr | None = None
        if not self.check(TT.SEMICOLON):
            value = self.expression()
        self.consume(TT.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def while_statement(self) -> While:
        self.consume(TT.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TT.RIGHT_PAREN, "Expect ')' after condition.")
        return While(condition, self.statement())

    def block(self) -> list[Stmt]:
        """Parse declarations up to the closing brace; the opening brace is already consumed."""
        statements: list[Stmt] = []
        while not self.check(TT.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TT.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self) -> Expression:
        expr = self.expression()
        self.consume(TT.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # -- expressions --------------------------------------------------------

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.or_()

        if equals := self.match(TT.EQUAL):
            value = self.assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)

            # Reported but not raised: the parser is not in a confused state.
            self.error(equals, "Invalid assignment target.")

        return expr

    def or_(self) -> Expr:
        expr = self.and_()
        while operator := self.match(TT.OR):
            expr = Logical(expr, operator, self.and_())
        return expr

    def and_(self) -> Expr:
        expr = self.equality()
        while operator := self.match(TT.AND):
            expr = Logical(expr, operator, self.equality())
        return expr

    def equality(self) -> Expr:
        return self.binary(self.comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self.binary(
            self.term, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL
        )

    def term(self) -> Expr:
        return self.binary(self.factor, TT.MINUS, TT.PLUS)

    def factor(self) -> Expr:
        return self.binary(self.unary, TT.SLASH, TT.STAR)

    def binary(self, operand: Callable[[], Expr], *operators: TokenType) -> Expr:
        """Parse one left-associative binary precedence level."""
        expr = operand()
        while operator := self.match(*operators):
            expr = Binary(expr, operator, operand())
        return expr

    def unary(self) -> Expr:
        if operator := self.match(TT.BANG, TT.MINUS):
            return Unary(operator, self.unary())
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while True:
            if self.match(TT.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TT.DOT):
                name = self.consume(TT.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: list[Expr] = []
        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGS:
                    self.error(self.current(), f"Can't have more than {MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(TT.COMMA):
                    break
        paren = self.consume(TT.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(arguments))

    def primary(self) -> Expr:
        if self.match(TT.FALSE):
            return Literal(False)
        if self.match(TT.TRUE):
            return Literal(True)
        if self.match(TT.NIL):
            return Literal(None)
        if tok := self.match(TT.NUMBER, TT.STRING):
            return Literal(tok.literal)
        if keyword := self.match(TT.SUPER):
            self.consume(TT.DOT, "Expect '.' after 'super'.")
            method = self.consume(TT.IDENTIFIER, "Expect superclass method name.")
            return Super(keyword, method)
        if keyword := self.match(TT.THIS):
            return This(keyword)
        if name := self.match(TT.IDENTIFIER):
            return Variable(name)
        if self.match(TT.LEFT_PAREN):
            expr = self.expression()
            self.consume(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.current(), "Expect expression.")


def parse(tokens: list[Token], reporter: ErrorReporter | None = None) -> list[Stmt]:
    """Parse a scanner token list with a fresh Parser."""
    return Parser(tokens, reporter).parse()


def parse_source(source: str, reporter: ErrorReporter | None = None) -> ParseResult:
    """Scan and parse `source`, sharing one reporter between both passes.

    Only the diagnostics raised by this call are placed in the result, even
    when `reporter` already holds earlier ones.
    """
    reporter = reporter if reporter is not None else ErrorReporter()
    already_reported = reporter.count
    statements = parse(scan(source, reporter), reporter)
    return ParseResult(statements, reporter.diagnostics[already_reported:])


__all__ = ["MAX_ARGS", "ParseError", "Parser", "parse", "parse_source"]
