"""
Lexer for Lox - Recursive Descent Parser front end

Tokenizes Lox source code into a stream of tokens.

Features:
- Single-pass tokenization with one character of lookahead
- Line tracking (strings and block comments may span lines)
- Non-fatal errors: bad input is recorded and scanning carries on
"""

from typing import List

from .token_types import TT, Tok
from .types import LoxSyntaxError

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox lexer.

    Every call to scan_token() consumes at least one character, so the
    scan always terminates and always ends with an EOF token.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Single-character tokens that never combine with what follows
    SINGLE = {
        '(': TT.LEFT_PAREN,
        ')': TT.RIGHT_PAREN,
        '{': TT.LEFT_BRACE,
        '}': TT.RIGHT_BRACE,
        ',': TT.COMMA,
        '.': TT.DOT,
        '-': TT.MINUS,
        '+': TT.PLUS,
        ';': TT.SEMICOLON,
        '*': TT.STAR,
    }

    # Operators that become a two-character token when followed by '='
    WITH_EQUAL = {
        '!': (TT.BANG, TT.BANG_EQUAL),
        '=': (TT.EQUAL, TT.EQUAL_EQUAL),
        '<': (TT.LESS, TT.LESS_EQUAL),
        '>': (TT.GREATER, TT.GREATER_EQUAL),
    }

    def __init__(self, source: str):
        self.source = source
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens: List[Tok] = []
        self.errors: List[LexError] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while not self.at_end():
            self.start = self.pos
            self.scan_token()

        self.tokens.append(Tok(TT.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.advance()

        if ch in self.SINGLE:
            self.emit(self.SINGLE[ch])
            return

        if ch in self.WITH_EQUAL:
            plain, with_equal = self.WITH_EQUAL[ch]
            self.emit(with_equal if self.match('=') else plain)
            return

        if ch == '/':
            if self.match('/'):
                self.skip_line_comment()
            elif self.match('*'):
                self.skip_block_comment()
            else:
                self.emit(TT.SLASH)
            return

        # Whitespace
        if ch in (' ', '\r', '\t'):
            return

        if ch == '\n':
            self.line += 1
            return

        if ch == '"':
            self.scan_string()
            return

        if is_digit(ch):
            self.scan_number()
            return

        if is_alpha(ch):
            self.scan_identifier()
            return

        self.error("Unexpected character.")

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal; the opening quote is already consumed"""
        while not self.at_end() and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # Closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal"""
        while is_digit(self.peek()):
            self.advance()

        # A '.' belongs to the number only when a digit follows it
        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while is_alnum(self.peek()):
            self.advance()

        text = self.source[self.start:self.pos]
        self.emit(self.KEYWORDS.get(text, TT.IDENTIFIER))

    def skip_line_comment(self):
        """Skip comment until end of line"""
        while not self.at_end() and self.peek() != '\n':
            self.advance()

    def skip_block_comment(self):
        """Skip a non-nesting /* ... */ comment"""
        while not self.at_end():
            if self.peek() == '*' and self.peek(1) == '/':
                self.advance(2)
                return
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        self.error("Unterminated block comment.")

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        return result

    def match(self, expected: str) -> bool:
        """Consume the next character if it is the expected one"""
        if self.peek() != expected or self.at_end():
            return False
        self.pos += 1
        return True

    def emit(self, token_type: TT, literal=None):
        """Emit a token whose lexeme spans start..pos"""
        self.tokens.append(Tok(token_type, self.source[self.start:self.pos], literal, self.line))

    def error(self, message: str):
        self.errors.append(LexError(message, self.line))


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_alnum(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


class LexError(LoxSyntaxError):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int):
        super().__init__(message, line)

    def __str__(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source; raises the first error"""
    lexer = Lexer(source)
    tokens = lexer.tokenize()

    if lexer.errors:
        raise lexer.errors[0]

    return tokens


if __name__ == '__main__':
    import sys

    lexer = Lexer(sys.stdin.read())
    for tok in lexer.tokenize():
        print(tok)
    for err in lexer.errors:
        print(err, file=sys.stderr)
