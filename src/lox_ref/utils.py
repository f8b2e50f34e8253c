from __future__ import annotations

import os as _os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from .types import (
    LoxValue,
    LoxBool,
    LoxCallable,
    LoxNil,
    LoxNumber,
    LoxString,
)

DEFAULT_MAX_CALL_DEPTH = 1000

# Python frames allowed per Lox call activation, nested blocks and
# branches of an ordinary function body included.
_PY_FRAMES_PER_CALL = 64

# Frames for whatever runs around the outermost call.
_FRAME_SLACK = 1000

# Python frames the recursive-descent parser may use.
PARSE_FRAME_BUDGET = 40_000

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """LOX_DEBUG_PY_TRACE: show Python tracebacks for runtime errors."""
    raw = _os.environ.get("LOX_DEBUG_PY_TRACE", "")
    return raw.strip().lower() in _TRUTHY_FLAGS


def max_call_depth() -> int:
    """LOX_MAX_CALL_DEPTH: call depth at which a stack overflow is reported."""
    raw = _os.environ.get("LOX_MAX_CALL_DEPTH")
    if raw is None:
        return DEFAULT_MAX_CALL_DEPTH

    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_MAX_CALL_DEPTH

    return value if value > 0 else DEFAULT_MAX_CALL_DEPTH


def call_frame_budget(call_depth: int) -> int:
    """Python frames needed to run `call_depth` nested Lox calls."""
    return call_depth * _PY_FRAMES_PER_CALL + _FRAME_SLACK


@contextmanager
def recursion_headroom(wanted: int) -> Iterator[None]:
    """Raise the host recursion limit to at least `wanted` frames."""
    previous = sys.getrecursionlimit()

    if wanted > previous:
        sys.setrecursionlimit(wanted)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (LoxCallable(), LoxCallable()):
            return lhs is rhs
        case _:
            # different types are never equal
            return False


def format_number(value: float) -> str:
    text = str(value)
    if text.endswith(".0"):
        return text[:-2]
    return text


def stringify(value: Optional[LoxValue]) -> str:
    if isinstance(value, LoxNil) or value is None:
        return "nil"

    if isinstance(value, LoxNumber):
        return format_number(value.value)

    if isinstance(value, LoxString):
        return value.value

    if isinstance(value, LoxBool):
        return "true" if value.value else "false"

    return repr(value)
