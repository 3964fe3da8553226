import json
from typing import Any

import pytest

from lox.lox_ast import Literal
from lox.lox_lexer import Token, TokenType
from lox.lox_parser import parse_source
from lox.lox_printer import AstPrinter, format_literal, to_dict, token_to_dict


def first_statement_dict(source: str) -> dict[str, Any]:
    result = parse_source(source)
    assert result.ok
    return dict(to_dict(result.statements[0]))


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, "nil"),
        (True, "true"),
        (False, "false"),
        (3.0, "3"),
        (2.5, "2.5"),
        (0.1, "0.1"),
        ("text", "text"),
    ],
)  # type: ignore[misc]
def test_format_literal(value: Any, expected: str) -> None:
    assert format_literal(value) == expected


def test_print_renders_one_line_per_statement(printer: AstPrinter) -> None:
    statements = parse_source("print 1; print 2;").statements
    assert printer.print(statements) == "(print 1)\n(print 2)"


def test_print_accepts_bare_expressions(printer: AstPrinter) -> None:
    assert printer.print([Literal("s"), Literal(None)]) == '"s"\nnil'


def test_printer_rejects_unknown_nodes(printer: AstPrinter) -> None:
    with pytest.raises(TypeError, match="Cannot print 'int'"):
        printer.render(42)  # type: ignore[arg-type]


def test_logical_and_unary_render_with_operator(printer: AstPrinter) -> None:
    statements = parse_source("!a and b;").statements
    assert printer.print(statements) == "(; (and (! a) b))"


def test_to_dict_var_declaration() -> None:
    d = first_statement_dict("var answer = 42;")
    assert d["kind"] == "Var"
    assert d["name"] == {
        "type": "IDENTIFIER",
        "lexeme": "answer",
        "literal": None,
        "line": 1,
        "col": 5,
    }
    assert d["initializer"] == {"kind": "Literal", "value": 42.0}


def test_to_dict_nested_sequences() -> None:
    d = first_statement_dict("fun f(a, b) { print a; }")
    assert d["kind"] == "Function"
    assert [p["lexeme"] for p in d["params"]] == ["a", "b"]
    assert d["body"][0]["kind"] == "Print"
    assert d["body"][0]["expression"]["kind"] == "Variable"


def test_to_dict_optional_children_are_null() -> None:
    d = first_statement_dict("class A {}")
    assert d["superclass"] is None
    assert d["methods"] == []


def test_to_dict_is_json_serializable() -> None:
    result = parse_source(
        "class B < A { m() { return this.x or super.m(); } }\n"
        "for (var i = 0; i < 1; i = i + 1) if (!i) print -i; else print nil;"
    )
    assert result.ok
    text = json.dumps([to_dict(stmt) for stmt in result.statements])
    assert json.loads(text)[0]["kind"] == "Class"


def test_to_dict_rejects_unknown_nodes() -> None:
    with pytest.raises(TypeError, match="Cannot serialize"):
        to_dict("print 1;")  # type: ignore[arg-type]


def test_token_to_dict() -> None:
    tok = Token(TokenType.STRING, '"a"', "a", 4, 2)
    assert token_to_dict(tok) == {
        "type": "STRING",
        "lexeme": '"a"',
        "literal": "a",
        "line": 4,
        "col": 2,
    }
