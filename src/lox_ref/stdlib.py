from __future__ import annotations

import time
from typing import List

from .runtime import register_stdlib
from .types import LoxNumber, LoxValue


@register_stdlib("clock", arity=0)
def std_clock(_interp, _args: List[LoxValue]) -> LoxNumber:
    return LoxNumber(time.time())
