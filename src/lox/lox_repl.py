"""
Interactive prompt for the Lox front end.

Each entry is scanned and parsed on its own and the resulting tree (or the
diagnostics) is printed. Entries that open more braces than they close keep
reading continuation lines until they balance.

Commands:
    exit / quit   Leave the prompt (EOF does the same).
    :tokens       Toggle printing of the token stream before each tree.
"""

import io
import traceback

from lox.lox_errors import ErrorReporter
from lox.lox_lexer import Token, scan
from lox.lox_parser import parse
from lox.lox_printer import AstPrinter


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def read_entry() -> str | None:
    """Read one entry, joining continuation lines while braces are open.

    Returns None when the user asks to leave.
    """
    src_lines: list[str] = []
    brace_count = 0
    while True:
        prompt = "> " if not src_lines else ". "
        try:
            line = input(prompt)
        except EOFError:
            return None
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            return "\n".join(src_lines)


def show_tokens(tokens: list[Token]) -> None:
    print("[tokens] >>>")
    for tok in tokens:
        print(f"  {tok}")


def start_repl(show_token_stream: bool = False) -> None:
    print("Lox front end. Type 'exit' or 'quit' to leave.")
    printer = AstPrinter()
    reporter = ErrorReporter()

    while True:
        src = read_entry()
        if src is None:
            print("Exiting Lox REPL.")
            return
        if not src.strip():
            continue
        if src.strip() == ":tokens":
            show_token_stream = not show_token_stream
            print(f"[mode] >>> Token display {'ON' if show_token_stream else 'OFF'}")
            continue

        reporter.reset()
        try:
            tokens = scan(src, reporter)
            if show_token_stream:
                show_tokens(tokens)
            statements = parse(tokens, reporter)
        except RecursionError:
            print_traceback()
            continue

        if reporter.had_error:
            print("[error] >>>")
            for diagnostic in reporter.diagnostics:
                print(diagnostic)
            continue

        if statements:
            print(printer.print(statements))
