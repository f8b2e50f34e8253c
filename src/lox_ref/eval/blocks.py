from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from ..tree import Stmt
from ..types import Environment, Returning

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_block(statements: Iterable[Stmt], env: Environment, interp: 'Interpreter') -> Optional[Returning]:
    """Run statements in `env`, stopping at the first one that returns.

    The scope is passed in rather than swapped on the interpreter, so the
    caller's environment is untouched however this exits.
    """
    for stmt in statements:
        outcome = interp.execute(stmt, env)
        if outcome is not None:
            return outcome

    return None
