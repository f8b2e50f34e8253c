from __future__ import annotations

import logging
import sys
from typing import Iterable, Optional, Sequence, TextIO

from . import tree as ast
from .runtime import call_value, install_natives
from .types import Environment, LoxValue, Returning
from .utils import call_frame_budget, max_call_depth, recursion_headroom, stringify

from .eval.blocks import eval_block
from .eval.common import literal_value
from .eval.control import eval_if_stmt, eval_return_stmt, eval_while_stmt
from .eval.expr import eval_binary, eval_logical, eval_unary
from .eval.fn import eval_fn_def

logger = logging.getLogger(__name__)

# ---------------- Public API ----------------

class Interpreter:
    """Tree-walking evaluator with one persistent global scope.

    Each Interpreter owns its globals, so separate instances never share
    state. Output from `print` goes to `out` (stdout when not given).
    """

    def __init__(self, out: Optional[TextIO]=None, max_depth: Optional[int]=None):
        self.out = out
        self.globals = Environment()
        install_natives(self.globals)
        self.call_depth = 0
        self.max_call_depth = max_depth if max_depth is not None else max_call_depth()

    def interpret(self, statements: Sequence[ast.Stmt]) -> None:
        """Execute top-level statements in order; a LoxRuntimeError aborts the rest."""
        logger.debug("interpreting %d statements", len(statements))
        self.call_depth = 0

        with recursion_headroom(call_frame_budget(self.max_call_depth)):
            for stmt in statements:
                self.execute(stmt, self.globals)

    def evaluate_global(self, expr: ast.Expr) -> LoxValue:
        """Evaluate one expression in the global scope (REPL echo)."""
        self.call_depth = 0

        with recursion_headroom(call_frame_budget(self.max_call_depth)):
            return self.evaluate(expr, self.globals)

    def execute(self, stmt: ast.Stmt, env: Environment) -> Optional[Returning]:
        return exec_node(stmt, env, self)

    def evaluate(self, expr: ast.Expr, env: Environment) -> LoxValue:
        return eval_node(expr, env, self)

    def execute_block(self, statements: Iterable[ast.Stmt], env: Environment) -> Optional[Returning]:
        return eval_block(statements, env, self)

    def write_line(self, text: str) -> None:
        out = self.out if self.out is not None else sys.stdout
        out.write(text + "\n")

# ---------------- Statements ----------------

def exec_node(n: ast.Stmt, env: Environment, interp: Interpreter) -> Optional[Returning]:
    match n:
        case ast.Expression(expression=expr):
            interp.evaluate(expr, env)
            return None
        case ast.Print(expression=expr):
            interp.write_line(stringify(interp.evaluate(expr, env)))
            return None
        case ast.Var(name=name, initializer=init):
            value = interp.evaluate(init, env) if init is not None else literal_value(None)
            env.define(name.lexeme, value)
            return None
        case ast.Block(statements=stmts):
            return interp.execute_block(stmts, Environment(env))
        case ast.If():
            return eval_if_stmt(n, env, interp)
        case ast.While():
            return eval_while_stmt(n, env, interp)
        case ast.Function():
            eval_fn_def(n, env)
            return None
        case ast.Return():
            return eval_return_stmt(n, env, interp)
        case _:
            raise TypeError(f"Unknown statement: {type(n).__name__}")

# ---------------- Expressions ----------------

def eval_node(n: ast.Expr, env: Environment, interp: Interpreter) -> LoxValue:
    match n:
        case ast.Literal(value=value):
            return literal_value(value)
        case ast.Grouping(expression=inner):
            return interp.evaluate(inner, env)
        case ast.Unary():
            return eval_unary(n, env, interp)
        case ast.Binary():
            return eval_binary(n, env, interp)
        case ast.Logical():
            return eval_logical(n, env, interp)
        case ast.Variable(name=name):
            return env.get(name)
        case ast.Assign(name=name, value=value_node):
            value = interp.evaluate(value_node, env)
            env.assign(name, value)
            return value
        case ast.Call(callee=callee_node, paren=paren, arguments=arg_nodes):
            callee = interp.evaluate(callee_node, env)
            args = [interp.evaluate(arg, env) for arg in arg_nodes]
            return call_value(interp, callee, paren, args)
        case _:
            raise TypeError(f"Unknown expression: {type(n).__name__}")
