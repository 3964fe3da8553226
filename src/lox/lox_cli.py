"""
Lox CLI Entrypoint.

Command-line driver for the Lox front end. It reads source, runs the scanner
and parser, and prints what they produced. Nothing is evaluated.

Features:
    - Read source from a file or an inline string (`-s`).
    - Print the program as s-expressions (default), as JSON (`--json`), or
      print the token stream (`--tokens`).
    - Report diagnostics on stderr in `[line N] Error...` form.
    - Launch the interactive prompt when no source is given or `--repl` is passed.

Example usage:
    lox script.lox
    lox -s "print 1 + 2 * 3;"
    lox -s "var a = 1;" --json
    lox --repl

Exit codes:
    0   success
    2   bad command-line usage (argparse)
    65  the source had lexical or syntax errors
    66  the source file could not be read
"""

import argparse
import json
import sys

from lox.lox_errors import ErrorReporter
from lox.lox_lexer import scan
from lox.lox_parser import parse
from lox.lox_printer import AstPrinter, to_dict, token_to_dict

EX_OK = 0
EX_DATAERR = 65
EX_NOINPUT = 66


def run_lox(
    source: str,
    is_string: bool = False,
    tokens_only: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the front end over one source unit and print the result.

    Args:
        source (str): Lox source code, or a path to a source file.
        is_string (bool): If True, treat `source` as code instead of a path.
        tokens_only (bool): Print the scanned tokens instead of the tree.
        as_json (bool): Print the tree (or tokens) as JSON.

    Returns:
        int: The process exit code.
    """
    if not is_string:
        try:
            with open(source, encoding="utf-8") as f:
                source = f.read()
        except OSError as e:
            print(f"[error] >>> {e}", file=sys.stderr)
            return EX_NOINPUT

    reporter = ErrorReporter(echo=True)
    tokens = scan(source, reporter)

    if tokens_only:
        if as_json:
            print(json.dumps([token_to_dict(t) for t in tokens], indent=2))
        else:
            for tok in tokens:
                print(tok)
        return EX_DATAERR if reporter.had_error else EX_OK

    try:
        statements = parse(tokens, reporter)
    except RecursionError:
        print("[error] >>> Too deeply nested.", file=sys.stderr)
        return EX_DATAERR

    if reporter.had_error:
        return EX_DATAERR

    if as_json:
        print(json.dumps([to_dict(stmt) for stmt in statements], indent=2))
    elif statements:
        print(AstPrinter().print(statements))
    return EX_OK


def main() -> None:
    """
    Entry point for the Lox CLI.

    Parses command-line arguments and dispatches to the prompt or to `run_lox`,
    then exits with the code it returned.
    """
    parser = argparse.ArgumentParser(prog="lox")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream instead of the AST"
    )
    parser.add_argument("--json", action="store_true", help="Print output as JSON")
    parser.add_argument(
        "--repl", action="store_true", help="Launch the interactive prompt"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from lox.lox_repl import start_repl

        start_repl(show_token_stream=args.tokens)
        return

    sys.exit(
        run_lox(
            source=args.source,
            is_string=args.string,
            tokens_only=args.tokens,
            as_json=args.json,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
