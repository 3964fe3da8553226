"""
Lexical analyzer for the Lox programming language.

This module converts raw source text into the token sequence consumed by the parser.

Classes:
    TokenType: Enumeration of every token kind.
    Token: Immutable token with type, lexeme, literal value and source location.
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Scanner: Converts a source string into a list of tokens in one left-to-right pass.

Features:
    - Skips whitespace and single-line comments (`//`)
    - One character of lookahead for `!=`, `==`, `<=`, `>=`
    - Recognizes:
        * Identifiers and the 16 reserved words
        * Numbers (always stored as float)
        * Strings (may span lines, no escape sequences)
        * Operators and punctuation

Errors:
    Scanning never raises on bad input. Unexpected characters and unterminated
    strings are reported to an `ErrorReporter` and scanning carries on. The
    result always ends with exactly one EOF token.

Example:
    >>> tokens = scan("print 42;")
    >>> [str(t) for t in tokens]
    ['PRINT print null', 'NUMBER 42 42.0', 'SEMICOLON ; null', 'EOF  null']

Exports:
    - TokenType
    - Token
    - LiteralValue
    - keywords
    - CharacterStream
    - Scanner
    - scan
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, Union

from lox.lox_errors import ErrorReporter


class TokenType(Enum):
    # Single-character tokens.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character tokens.
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals.
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords.
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


# fmt: off
keywords: Mapping[str, TokenType] = MappingProxyType({
    "and":    TokenType.AND,
    "class":  TokenType.CLASS,
    "else":   TokenType.ELSE,
    "false":  TokenType.FALSE,
    "for":    TokenType.FOR,
    "fun":    TokenType.FUN,
    "if":     TokenType.IF,
    "nil":    TokenType.NIL,
    "or":     TokenType.OR,
    "print":  TokenType.PRINT,
    "return": TokenType.RETURN,
    "super":  TokenType.SUPER,
    "this":   TokenType.THIS,
    "true":   TokenType.TRUE,
    "var":    TokenType.VAR,
    "while":  TokenType.WHILE,
})

single_char_tokens: Mapping[str, TokenType] = MappingProxyType({
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
})

# first char -> (kind when followed by '=', kind otherwise)
two_char_tokens: Mapping[str, tuple[TokenType, TokenType]] = MappingProxyType({
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
})
# fmt: on

LiteralValue = Union[None, bool, float, str]


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_alpha(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_"


def is_alphanumeric(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type (TokenType): The token kind.
        lexeme (str): The exact source text the token was read from.
        literal (LiteralValue): Parsed value for NUMBER and STRING tokens, else None.
        line (int): 1-based line the token ended on.
        col (int): 1-based column where the lexeme starts.
    """

    type: TokenType
    lexeme: str
    literal: LiteralValue = None
    line: int = 1
    col: int = 1

    def __str__(self) -> str:
        literal = "null" if self.literal is None else self.literal
        return f"{self.type.name} {self.lexeme} {literal}"

    @property
    def is_eof(self) -> bool:
        return self.type is TokenType.EOF


class CharacterStream:
    """
    Reads characters from a source string with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead without consuming it, or "" past the end."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def match(self, expected: str) -> bool:
        """Consumes the next character only if it equals `expected`."""
        if self.peek() != expected:
            return False
        self.next()
        return True

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Scanner:
    """Lexical analyzer for Lox.

    A Scanner processes exactly one source string; create a new one per input.

    Args:
        source (str): The complete source text.
        reporter (ErrorReporter | None): Sink for lexical errors. A private,
            silent reporter is created when omitted.
    """

    def __init__(self, source: str, reporter: ErrorReporter | None = None) -> None:
        self.stream = CharacterStream(source)
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: list[Token] = []
        self.start = 0
        self.start_col = 1

    def scan_tokens(self) -> list[Token]:
        """Scan the whole source and return its tokens, terminated by EOF."""
        while not self.stream.end_of_file():
            self.start = self.stream.position
            self.start_col = self.stream.column
            self.scan_token()

        self.tokens.append(
            Token(TokenType.EOF, "", None, self.stream.line, self.stream.column)
        )
        return self.tokens

    def scan_token(self) -> None:
        c = self.stream.next()
        if c in single_char_tokens:
            self.add_token(single_char_tokens[c])
        elif c in two_char_tokens:
            with_equal, alone = two_char_tokens[c]
            self.add_token(with_equal if self.stream.match("=") else alone)
        elif c == "/":
            if self.stream.match("/"):
                self.skip_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif c in " \r\t\n":
            # CharacterStream has already advanced the line on "\n".
            pass
        elif c == '"':
            self.string()
        elif is_digit(c):
            self.number()
        elif is_alpha(c):
            self.identifier()
        else:
            self.reporter.error_line(self.stream.line, "Unexpected character.")

    def skip_comment(self) -> None:
        """Advances through the stream until the end of a comment line."""
        while not self.stream.end_of_file() and self.stream.peek() != "\n":
            self.stream.next()

    def string(self) -> None:
        while not self.stream.end_of_file() and self.stream.peek() != '"':
            self.stream.next()

        if self.stream.end_of_file():
            self.reporter.error_line(self.stream.line, "Unterminated string.")
            return

        # The closing ".
        self.stream.next()

        value = self.stream.source[self.start + 1 : self.stream.position - 1]
        self.add_token(TokenType.STRING, value)

    def number(self) -> None:
        while is_digit(self.stream.peek()):
            self.stream.next()

        # A fractional part needs a digit after the '.'.
        if self.stream.peek() == "." and is_digit(self.stream.peek(1)):
            self.stream.next()
            while is_digit(self.stream.peek()):
                self.stream.next()

        self.add_token(TokenType.NUMBER, float(self.lexeme()))

    def identifier(self) -> None:
        while is_alphanumeric(self.stream.peek()):
            self.stream.next()

        self.add_token(keywords.get(self.lexeme(), TokenType.IDENTIFIER))

    def lexeme(self) -> str:
        return self.stream.source[self.start : self.stream.position]

    def add_token(self, type_: TokenType, literal: LiteralValue = None) -> None:
        self.tokens.append(
            Token(type_, self.lexeme(), literal, self.stream.line, self.start_col)
        )


def scan(source: str, reporter: ErrorReporter | None = None) -> list[Token]:
    """Convenience wrapper: scan `source` with a fresh Scanner."""
    return Scanner(source, reporter).scan_tokens()


__all__ = [
    "CharacterStream",
    "LiteralValue",
    "Scanner",
    "Token",
    "TokenType",
    "keywords",
    "scan",
]
