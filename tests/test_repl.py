import builtins
from collections.abc import Iterable

import pytest

from lox.lox_repl import read_entry, start_repl


def feed(monkeypatch: pytest.MonkeyPatch, lines: Iterable[str]) -> None:
    it = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)


def test_repl_quit(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, ["quit"])
    start_repl()
    assert "Exiting Lox REPL." in capsys.readouterr().out


def test_repl_exit_on_eof(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, [])
    start_repl()
    assert "Exiting Lox REPL." in capsys.readouterr().out


def test_repl_prints_ast(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, ["print 1 + 2;", "", "exit"])
    start_repl()
    assert "(print (+ 1 2))" in capsys.readouterr().out


def test_repl_multiline_entry(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, ["fun f() {", "  return 1;", "}", "quit"])
    start_repl()
    assert "(fun f () (return 1))" in capsys.readouterr().out


def test_repl_reports_errors_and_continues(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ["print ;", "print 2;", "quit"])
    start_repl()
    out = capsys.readouterr().out
    assert "[error] >>>" in out
    assert "[line 1] Error at ';': Expect expression." in out
    # Diagnostics from one entry do not leak into the next.
    assert "(print 2)" in out


def test_repl_token_toggle(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, [":tokens", "print 7;", ":tokens", "quit"])
    start_repl()
    out = capsys.readouterr().out
    assert "[mode] >>> Token display ON" in out
    assert "NUMBER 7 7.0" in out
    assert "[mode] >>> Token display OFF" in out


def test_repl_deep_nesting_prints_traceback(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ["(" * 5000, "quit"])
    start_repl()
    out = capsys.readouterr().out
    assert "RecursionError" in out
    assert "Exiting Lox REPL." in out


def test_read_entry_quit_only_at_start(monkeypatch: pytest.MonkeyPatch) -> None:
    feed(monkeypatch, ["{", "quit", "}"])
    assert read_entry() == "{\nquit\n}"
