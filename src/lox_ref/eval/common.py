from __future__ import annotations

from typing import Union

from ..token_types import Literal, Tok
from ..types import LoxBool, LoxNil, LoxNumber, LoxString, LoxTypeError, LoxValue

def literal_value(value: Union[Literal, bool]) -> LoxValue:
    """Wrap a literal carried by the AST as a runtime value."""
    match value:
        case None:
            return LoxNil()
        case bool():
            return LoxBool(value)
        case float():
            return LoxNumber(value)
        case str():
            return LoxString(value)
        case _:
            raise TypeError(f"Unsupported literal {value!r}")

def require_number(op: Tok, value: LoxValue) -> float:
    if not isinstance(value, LoxNumber):
        raise LoxTypeError(op, f"Operand of '{op.lexeme}' must be a number.")
    return value.value

def require_numbers(op: Tok, left: LoxValue, right: LoxValue) -> tuple[float, float]:
    if not isinstance(left, LoxNumber) or not isinstance(right, LoxNumber):
        raise LoxTypeError(op, f"Operands of '{op.lexeme}' must be numbers.")
    return left.value, right.value
