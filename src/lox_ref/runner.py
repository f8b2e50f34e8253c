from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from .evaluator import Interpreter
from .parser_rd import parse_expr_fragment, parse_source
from .tree import Expr, Expression, Stmt
from .types import LoxRuntimeError, LoxSyntaxError, LoxSyntaxErrors, LoxValue
from .utils import debug_py_trace_enabled

logger = logging.getLogger(__name__)

# sysexits.h codes kept by the reference CLI
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

class RunStatus(Enum):
    OK = EX_OK
    SYNTAX_ERROR = EX_DATAERR
    RUNTIME_ERROR = EX_SOFTWARE

@dataclass
class RunResult:
    """Outcome of one run, returned instead of setting process-wide flags."""
    status: RunStatus = RunStatus.OK
    syntax_errors: List[LoxSyntaxError] = field(default_factory=list)
    runtime_error: Optional[LoxRuntimeError] = None

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.OK

    @property
    def exit_code(self) -> int:
        return self.status.value

def compile_source(source: str) -> List[Stmt]:
    """Scan and parse; raise LoxSyntaxErrors carrying every error found."""
    statements, errors = parse_source(source)
    logger.debug("parsed %d declarations with %d syntax errors", len(statements), len(errors))

    if errors:
        raise LoxSyntaxErrors(errors)

    return [stmt for stmt in statements if stmt is not None]

def run(src: str, interpreter: Optional[Interpreter]=None, out: Optional[TextIO]=None) -> RunResult:
    """
    Compile and execute `src`, reporting diagnostics to `out`.
    - Any syntax error => nothing executes; every error is reported.
    - A runtime error aborts the remaining statements and is reported once.
    """
    if interpreter is None:
        interpreter = Interpreter(out=out)
    stream = out if out is not None else sys.stdout

    try:
        statements = compile_source(src)
    except LoxSyntaxErrors as exc:
        for err in exc.errors:
            stream.write(f"{err}\n")
        return RunResult(status=RunStatus.SYNTAX_ERROR, syntax_errors=list(exc.errors))

    try:
        interpreter.interpret(statements)
    except LoxRuntimeError as exc:
        stream.write(f"{exc}\n")
        if debug_py_trace_enabled():
            traceback.print_exception(exc, file=sys.stderr)
        logger.debug("run aborted by runtime error at line %d", exc.line)
        return RunResult(status=RunStatus.RUNTIME_ERROR, runtime_error=exc)

    logger.debug("run completed")
    return RunResult()

def repl_eval(src: str, interpreter: Interpreter) -> Tuple[Optional[LoxValue], bool]:
    """
    Evaluate one REPL entry against a persistent interpreter.

    Returns (value, is_stmt): a lone expression statement, or a bare
    expression typed without its semicolon, yields its value for echoing.
    """
    try:
        statements = compile_source(src)
    except LoxSyntaxErrors:
        expr = _bare_expression(src)
        if expr is None:
            raise
        return interpreter.evaluate_global(expr), False

    if len(statements) == 1 and isinstance(statements[0], Expression):
        return interpreter.evaluate_global(statements[0].expression), False

    interpreter.interpret(statements)
    return None, True

def _bare_expression(src: str) -> Optional[Expr]:
    try:
        return parse_expr_fragment(src)
    except LoxSyntaxError:
        return None

def run_file(path: str) -> RunResult:
    source = Path(path).read_text(encoding="utf-8")
    return run(source)

USAGE = "Usage: lox [--verbose] [script]"

def main(argv: Optional[Sequence[str]]=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    script = None

    for token in args:
        if token in ("-v", "--verbose"):
            logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
            continue

        if token in ("-h", "--help"):
            print(USAGE)
            return EX_OK

        if script is None:
            script = token
        else:
            print(USAGE)
            return EX_USAGE

    if script is None:
        from .repl import repl
        repl()
        return EX_OK

    try:
        result = run_file(script)
    except OSError as exc:
        print(f"Could not read {script}: {exc}", file=sys.stderr)
        return EX_NOINPUT

    return result.exit_code

if __name__ == "__main__":
    sys.exit(main())
