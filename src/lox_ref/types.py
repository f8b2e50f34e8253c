from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from typing_extensions import TypeAlias

from .token_types import Tok
from .tree import Function

if TYPE_CHECKING:
    from .evaluator import Interpreter

# ---------- Value Model ----------

@dataclass
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        from .utils import format_number
        return format_number(self.value)

@dataclass
class LoxString:
    value: str
    def __repr__(self) -> str:
        return self.value

@dataclass
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

class LoxCallable:
    """Anything a call expression can invoke: user functions and natives."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        raise NotImplementedError

@dataclass(eq=False)
class LoxFunction(LoxCallable):
    declaration: Function
    closure: 'Environment'  # defining environment, kept alive by this reference

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        from .runtime import call_lox_function
        return call_lox_function(self, interpreter, arguments)

    def __repr__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"

NativeFn = Callable[['Interpreter', List['LoxValue']], 'LoxValue']

@dataclass(eq=False)
class NativeFunction(LoxCallable):
    name: str
    fn: NativeFn
    fixed_arity: int = 0

    def arity(self) -> int:
        return self.fixed_arity

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        return self.fn(interpreter, arguments)

    def __repr__(self) -> str:
        return "<native fn>"

LoxValue: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | LoxFunction
    | NativeFunction
)

@dataclass
class Returning:
    """Statement outcome that unwinds to the enclosing call activation."""
    value: LoxValue = field(default_factory=LoxNil)

# ---------- Environment ----------

class Environment:
    def __init__(self, enclosing: Optional['Environment']=None):
        self.enclosing = enclosing
        self.values: Dict[str, LoxValue] = {}

    def define(self, name: str, value: LoxValue) -> None:
        self.values[name] = value

    def get(self, name: Tok) -> LoxValue:
        if name.lexeme in self.values:
            return self.values[name.lexeme]

        if self.enclosing is not None:
            return self.enclosing.get(name)

        raise LoxNameError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Tok, value: LoxValue) -> None:
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return

        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return

        raise LoxNameError(name, f"Undefined variable '{name.lexeme}'.")

# ---------- Exceptions ----------

class LoxSyntaxError(Exception):
    """Scan or parse error; any of these blocks execution of the program."""

    def __init__(self, message: str, line: int):
        super().__init__(message)
        self.message = message
        self.line = line

class LoxSyntaxErrors(Exception):
    """Every syntax error found in one source text, in report order."""

    def __init__(self, errors: List[LoxSyntaxError]):
        super().__init__("\n".join(str(err) for err in errors))
        self.errors = errors

class LoxRuntimeError(Exception):
    def __init__(self, token: Tok, message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> int:
        return self.token.line

    def __str__(self) -> str:
        return f"{self.message}\n[line {self.token.line}]"

class LoxTypeError(LoxRuntimeError):
    pass

class LoxNameError(LoxRuntimeError):
    pass

class LoxCallError(LoxRuntimeError):
    pass

class LoxArityError(LoxRuntimeError):
    def __init__(self, token: Tok, expected: int, got: int):
        super().__init__(token, f"Expected {expected} arguments but got {got}.")
        self.expected = expected
        self.got = got

class LoxStackOverflowError(LoxRuntimeError):
    def __init__(self, token: Tok):
        super().__init__(token, "Stack overflow.")

_LOX_VALUE_TYPES: Tuple[type, ...] = (
    LoxNil,
    LoxNumber,
    LoxString,
    LoxBool,
    LoxCallable,
)

def is_lox_value(value: object) -> bool:
    return isinstance(value, _LOX_VALUE_TYPES)

class Builtins:
    natives: Dict[str, NativeFunction] = {}
