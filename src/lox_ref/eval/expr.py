from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..token_types import TT, Tok
from ..tree import Binary, Logical, Unary
from ..types import Environment, LoxBool, LoxNumber, LoxString, LoxTypeError, LoxValue
from ..utils import lox_equals
from .common import require_number, require_numbers
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_unary(node: Unary, env: Environment, interp: 'Interpreter') -> LoxValue:
    right = interp.evaluate(node.right, env)

    match node.operator.type:
        case TT.MINUS:
            return LoxNumber(-require_number(node.operator, right))
        case TT.BANG:
            return LoxBool(not is_truthy(right))
        case _:
            raise LoxTypeError(node.operator, f"Unsupported unary operator '{node.operator.lexeme}'.")

def eval_binary(node: Binary, env: Environment, interp: 'Interpreter') -> LoxValue:
    # both operands, left first, before any type check
    left = interp.evaluate(node.left, env)
    right = interp.evaluate(node.right, env)

    return apply_binary_operator(node.operator, left, right)

def apply_binary_operator(op: Tok, left: LoxValue, right: LoxValue) -> LoxValue:
    match op.type:
        case TT.EQUAL_EQUAL:
            return LoxBool(lox_equals(left, right))
        case TT.BANG_EQUAL:
            return LoxBool(not lox_equals(left, right))
        case TT.PLUS:
            return _add(op, left, right)
        case TT.MINUS:
            a, b = require_numbers(op, left, right)
            return LoxNumber(a - b)
        case TT.STAR:
            a, b = require_numbers(op, left, right)
            return LoxNumber(a * b)
        case TT.SLASH:
            a, b = require_numbers(op, left, right)
            return LoxNumber(divide(a, b))
        case TT.GREATER:
            a, b = require_numbers(op, left, right)
            return LoxBool(a > b)
        case TT.GREATER_EQUAL:
            a, b = require_numbers(op, left, right)
            return LoxBool(a >= b)
        case TT.LESS:
            a, b = require_numbers(op, left, right)
            return LoxBool(a < b)
        case TT.LESS_EQUAL:
            a, b = require_numbers(op, left, right)
            return LoxBool(a <= b)
        case _:
            raise LoxTypeError(op, f"Unsupported binary operator '{op.lexeme}'.")

def _add(op: Tok, left: LoxValue, right: LoxValue) -> LoxValue:
    match (left, right):
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case (LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case _:
            raise LoxTypeError(op, f"Operands of '{op.lexeme}' must be two numbers or two strings.")

def divide(a: float, b: float) -> float:
    """IEEE 754 division: x/0 is +-inf and 0/0 is nan instead of raising."""
    if b != 0:
        return a / b

    if a == 0 or math.isnan(a):
        return math.nan

    return math.copysign(math.inf, a) * math.copysign(1.0, b)

def eval_logical(node: Logical, env: Environment, interp: 'Interpreter') -> LoxValue:
    left = interp.evaluate(node.left, env)

    if node.operator.type == TT.OR:
        if is_truthy(left):
            return left
    elif not is_truthy(left):
        return left

    return interp.evaluate(node.right, env)
