from __future__ import annotations

from ..tree import Function
from ..types import Environment, LoxFunction

def eval_fn_def(stmt: Function, env: Environment) -> None:
    # closure is the scope the declaration runs in
    fn_value = LoxFunction(declaration=stmt, closure=env)
    env.define(stmt.name.lexeme, fn_value)
