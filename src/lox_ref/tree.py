"""AST node classes produced by the parser and walked by the evaluator.

Each node category is a closed set of frozen dataclasses; ``Expr`` and
``Stmt`` are the unions the evaluator and printer match over. Nodes compare
by identity so one ``Function`` body can be shared by any number of closures.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union
from typing_extensions import TypeAlias

from .token_types import Literal as LiteralValue, Tok

# ---------- Expressions ----------

@dataclass(frozen=True, eq=False)
class Literal:
    value: Union[LiteralValue, bool]

@dataclass(frozen=True, eq=False)
class Grouping:
    expression: 'Expr'

@dataclass(frozen=True, eq=False)
class Unary:
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True, eq=False)
class Binary:
    left: 'Expr'
    operator: Tok
    right: 'Expr'

@dataclass(frozen=True, eq=False)
class Logical:
    left: 'Expr'
    operator: Tok  # AND / OR
    right: 'Expr'

@dataclass(frozen=True, eq=False)
class Variable:
    name: Tok

@dataclass(frozen=True, eq=False)
class Assign:
    name: Tok
    value: 'Expr'

@dataclass(frozen=True, eq=False)
class Call:
    callee: 'Expr'
    paren: Tok  # closing paren, used for error location
    arguments: Tuple['Expr', ...]

Expr: TypeAlias = Union[Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call]

# ---------- Statements ----------

@dataclass(frozen=True, eq=False)
class Expression:
    expression: Expr

@dataclass(frozen=True, eq=False)
class Print:
    expression: Expr

@dataclass(frozen=True, eq=False)
class Var:
    name: Tok
    initializer: Optional[Expr] = None

@dataclass(frozen=True, eq=False)
class Block:
    statements: Tuple['Stmt', ...]

@dataclass(frozen=True, eq=False)
class If:
    condition: Expr
    then_branch: 'Stmt'
    else_branch: Optional['Stmt'] = None

@dataclass(frozen=True, eq=False)
class While:
    condition: Expr
    body: 'Stmt'

@dataclass(frozen=True, eq=False)
class Function:
    name: Tok
    params: Tuple[Tok, ...]
    body: Tuple['Stmt', ...]

@dataclass(frozen=True, eq=False)
class Return:
    keyword: Tok
    value: Optional[Expr] = None

Stmt: TypeAlias = Union[Expression, Print, Var, Block, If, While, Function, Return]

Node: TypeAlias = Union[Expr, Stmt]

