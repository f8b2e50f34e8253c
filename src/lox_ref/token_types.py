"""
Token Types for the Lox scanner and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - one per terminal of the grammar"""

    # Single-character punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character operators
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    EOF = auto()


Literal = Union[float, str, None]


@dataclass(frozen=True)
class Tok:
    """Token with its source lexeme, literal value and line"""

    type: TT
    lexeme: str
    literal: Optional[Literal] = None
    line: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.lexeme!r}, {self.literal!r}, {self.line})"
