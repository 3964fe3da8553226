import os
from typing import Any

import pytest

from lox.lox_errors import ErrorReporter
from lox.lox_printer import AstPrinter

# Measure subprocesses as well when coverage is started with COVERAGE_PROCESS_START.
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


@pytest.fixture  # type: ignore[misc]
def reporter() -> ErrorReporter:
    return ErrorReporter()


@pytest.fixture  # type: ignore[misc]
def printer() -> AstPrinter:
    return AstPrinter()


def pytest_make_parametrize_id(config: Any, val: Any, argname: str) -> str | None:
    # Keep Lox source snippets readable in test ids.
    if isinstance(val, str):
        return val.replace("\n", "\\n")
    return None
