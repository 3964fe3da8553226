import json
import sys
from pathlib import Path
from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from lox import lox_cli
from lox.lox_cli import EX_DATAERR, EX_NOINPUT, EX_OK, run_lox


def test_run_lox_string_input_prints_ast(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_lox("print 1 + 2 * 3;", is_string=True)
    assert code == EX_OK
    assert capsys.readouterr().out.strip() == "(print (+ 1 (* 2 3)))"


def test_run_lox_file_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    file_path = tmp_path / "input.lox"
    file_path.write_text("var a = 1;\nprint a;\n", encoding="utf-8")
    assert run_lox(str(file_path)) == EX_OK
    assert capsys.readouterr().out.splitlines() == ["(var a 1)", "(print a)"]


def test_run_lox_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_lox(str(tmp_path / "nope.lox")) == EX_NOINPUT
    assert "[error] >>>" in capsys.readouterr().err


def test_run_lox_reports_errors_on_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_lox("var = ;\nprint 1", is_string=True)
    captured = capsys.readouterr()
    assert code == EX_DATAERR
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 2] Error at end: Expect ';' after value.",
    ]


def test_run_lox_lexical_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_lox('print "open;', is_string=True) == EX_DATAERR
    assert "Unterminated string." in capsys.readouterr().err


def test_run_lox_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_lox("print 42;", is_string=True, tokens_only=True) == EX_OK
    assert capsys.readouterr().out.splitlines() == [
        "PRINT print null",
        "NUMBER 42 42.0",
        "SEMICOLON ; null",
        "EOF  null",
    ]


def test_run_lox_tokens_with_lexical_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_lox("1 @", is_string=True, tokens_only=True) == EX_DATAERR
    captured = capsys.readouterr()
    assert "NUMBER 1 1.0" in captured.out
    assert "Unexpected character." in captured.err


def test_run_lox_tokens_json(capsys: pytest.CaptureFixture[str]) -> None:
    run_lox('"hi"', is_string=True, tokens_only=True, as_json=True)
    tokens = json.loads(capsys.readouterr().out)
    assert [t["type"] for t in tokens] == ["STRING", "EOF"]
    assert tokens[0]["literal"] == "hi"


def test_run_lox_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_lox("a = 1;", is_string=True, as_json=True) == EX_OK
    (stmt,) = json.loads(capsys.readouterr().out)
    assert stmt["kind"] == "Expression"
    assert stmt["expression"]["kind"] == "Assign"
    assert stmt["expression"]["name"]["lexeme"] == "a"


def test_run_lox_empty_program_prints_nothing(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_lox("// only a comment", is_string=True) == EX_OK
    assert capsys.readouterr().out == ""


def test_run_lox_deep_nesting(capsys: pytest.CaptureFixture[str]) -> None:
    source = "print " + "(" * 5000 + "1" + ")" * 5000 + ";"
    assert run_lox(source, is_string=True) == EX_DATAERR
    assert "Too deeply nested." in capsys.readouterr().err


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])  # type: ignore[misc]
@given(source=st.text(max_size=40))  # type: ignore[misc]
def test_run_lox_random_input_does_not_crash(
    source: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_lox(source, is_string=True) in (EX_OK, EX_DATAERR)
    capsys.readouterr()


def test_main_runs_string(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["lox", "-s", "print nil;"])
    with pytest.raises(SystemExit) as e:
        lox_cli.main()
    assert e.value.code == EX_OK
    assert capsys.readouterr().out.strip() == "(print nil)"


def test_main_exit_code_on_syntax_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["lox", "-s", "print"])
    with pytest.raises(SystemExit) as e:
        lox_cli.main()
    assert e.value.code == EX_DATAERR


def test_main_invalid_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["lox", "--bogus"])
    with pytest.raises(SystemExit) as e:
        lox_cli.main()
    assert e.value.code == 2


@pytest.mark.parametrize("argv", [["lox"], ["lox", "--repl"]])  # type: ignore[misc]
def test_main_launches_repl(monkeypatch: pytest.MonkeyPatch, argv: list[str]) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(sys, "argv", argv)
    monkeypatch.setattr(
        "lox.lox_repl.start_repl", lambda **kwargs: calls.append(kwargs)
    )
    lox_cli.main()
    assert len(calls) == 1


def test_main_repl_with_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(sys, "argv", ["lox", "--repl", "--tokens"])
    monkeypatch.setattr(
        "lox.lox_repl.start_repl", lambda **kwargs: calls.append(kwargs)
    )
    lox_cli.main()
    assert calls == [{"show_token_stream": True}]


def test_main_without_arguments_opens_plain_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(sys, "argv", ["lox"])
    monkeypatch.setattr(
        "lox.lox_repl.start_repl", lambda **kwargs: calls.append(kwargs)
    )
    lox_cli.main()
    assert calls == [{"show_token_stream": False}]
