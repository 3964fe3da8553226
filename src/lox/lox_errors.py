"""
Diagnostics and error reporting for the Lox front end.

Both the scanner and the parser report problems through an `ErrorReporter`
instead of raising. The reporter records every problem as a `Diagnostic`
and, when asked to, echoes it to stderr in the classic Lox format:

    [line 3] Error at 'x': Expect ';' after expression.

Classes:
    Diagnostic: One recorded lexical or syntactic problem.
    ErrorReporter: The error sink shared by the scanner and the parser.
    ParseResult: Statements plus diagnostics returned from a full front-end pass.

Neither component consults the reporter's state; only a driver decides what
to do once a pass has finished (see `ParseResult.ok`).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from lox.lox_ast import Stmt
    from lox.lox_lexer import Token

LEXICAL = "lexical"
SYNTAX = "syntax"


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem.

    Attributes:
        kind (str): Either `LEXICAL` or `SYNTAX`.
        line (int): 1-based source line.
        where (str): Location suffix such as `" at 'x'"` or `" at end"`; empty for lexical errors.
        message (str): Human-readable description.
    """

    kind: str
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ErrorReporter:
    """Collects diagnostics from one or more front-end passes.

    Args:
        echo (bool): Print every diagnostic to `stream` as it is reported.
        stream (TextIO | None): Destination for echoed diagnostics. Defaults to `sys.stderr`
            (resolved at report time so pytest's capture sees it).
    """

    def __init__(self, echo: bool = False, stream: TextIO | None = None) -> None:
        self.echo = echo
        self.stream = stream
        self.diagnostics: list[Diagnostic] = []

    @property
    def count(self) -> int:
        return len(self.diagnostics)

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def error_line(self, line: int, message: str) -> None:
        """Report a lexical error known only by its line."""
        self.report(Diagnostic(LEXICAL, line, "", message))

    def error_token(self, token: Token, message: str) -> None:
        """Report a syntax error located at `token`."""
        if token.is_eof:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        self.report(Diagnostic(SYNTAX, token.line, where, message))

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.echo:
            print(diagnostic, file=self.stream or sys.stderr)

    def reset(self) -> None:
        """Forget everything reported so far (used between REPL lines)."""
        self.diagnostics.clear()


@dataclass
class ParseResult:
    """Outcome of scanning and parsing one source unit."""

    statements: list[Stmt]
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


__all__ = ["LEXICAL", "SYNTAX", "Diagnostic", "ErrorReporter", "ParseResult"]
