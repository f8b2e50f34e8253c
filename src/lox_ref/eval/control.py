from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..tree import If, Return, While
from ..types import Environment, LoxNil, Returning
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_if_stmt(stmt: If, env: Environment, interp: 'Interpreter') -> Optional[Returning]:
    if is_truthy(interp.evaluate(stmt.condition, env)):
        return interp.execute(stmt.then_branch, env)

    if stmt.else_branch is not None:
        return interp.execute(stmt.else_branch, env)

    return None

def eval_while_stmt(stmt: While, env: Environment, interp: 'Interpreter') -> Optional[Returning]:
    while is_truthy(interp.evaluate(stmt.condition, env)):
        outcome = interp.execute(stmt.body, env)
        if outcome is not None:
            return outcome

    return None

def eval_return_stmt(stmt: Return, env: Environment, interp: 'Interpreter') -> Returning:
    if stmt.value is None:
        return Returning(LoxNil())

    return Returning(interp.evaluate(stmt.value, env))
