from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Callable, List

from .token_types import Tok
from .types import (
    Builtins,
    Environment,
    LoxArityError,
    LoxCallError,
    LoxCallable,
    LoxFunction,
    LoxNil,
    LoxStackOverflowError,
    LoxTypeError,
    LoxValue,
    NativeFn,
    NativeFunction,
    is_lox_value,
)

if TYPE_CHECKING:
    from .evaluator import Interpreter

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("lox_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_stdlib(name: str, *, arity: int = 0) -> Callable[[NativeFn], NativeFn]:
    def dec(fn: NativeFn) -> NativeFn:
        Builtins.natives[name] = NativeFunction(name=name, fn=fn, fixed_arity=arity)
        return fn

    return dec

def install_natives(env: Environment) -> None:
    init_stdlib()

    for name, native in Builtins.natives.items():
        env.define(name, native)

def call_value(interp: 'Interpreter', callee: LoxValue, paren: Tok, args: List[LoxValue]) -> LoxValue:
    """
    Call protocol shared by user functions and natives:
    - callee must be callable
    - argument count must equal arity exactly
    - call depth is bounded; running out reports a stack overflow
    """
    if not isinstance(callee, LoxCallable):
        raise LoxCallError(paren, "Can only call functions and classes.")

    if len(args) != callee.arity():
        raise LoxArityError(paren, callee.arity(), len(args))

    if interp.call_depth >= interp.max_call_depth:
        raise LoxStackOverflowError(paren)

    interp.call_depth += 1
    try:
        result = callee.call(interp, args)
    except RecursionError:
        raise LoxStackOverflowError(paren) from None
    finally:
        interp.call_depth -= 1

    if not is_lox_value(result):
        raise LoxTypeError(paren, f"Native function returned unexpected {type(result).__name__}.")

    return result

def call_lox_function(fn: LoxFunction, interp: 'Interpreter', arguments: List[LoxValue]) -> LoxValue:
    # one activation scope per call, parented on the defining environment
    env = Environment(fn.closure)

    for param, arg in zip(fn.declaration.params, arguments):
        env.define(param.lexeme, arg)

    outcome = interp.execute_block(fn.declaration.body, env)

    if outcome is None:
        return LoxNil()

    return outcome.value
