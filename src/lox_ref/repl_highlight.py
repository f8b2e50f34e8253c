"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as LoxLexer
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_KEYWORDS = {
    TT.AND, TT.CLASS, TT.ELSE, TT.FOR, TT.FUN, TT.IF, TT.OR, TT.PRINT,
    TT.RETURN, TT.SUPER, TT.THIS, TT.VAR, TT.WHILE,
}

_OPERATORS = {
    TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR, TT.BANG, TT.BANG_EQUAL, TT.EQUAL,
    TT.EQUAL_EQUAL, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL,
}

_PUNCTUATION = {
    TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
    TT.COMMA, TT.DOT, TT.SEMICOLON,
}


def token_group(tokens: list[Tok], idx: int) -> str:
    """Highlight group for tokens[idx]."""
    tok = tokens[idx]

    if tok.type in _KEYWORDS:
        return "keyword"
    if tok.type in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tok.type == TT.NIL:
        return "constant"
    if tok.type == TT.NUMBER:
        return "number"
    if tok.type == TT.STRING:
        return "string"
    if tok.type in _OPERATORS:
        return "operator"
    if tok.type in _PUNCTUATION:
        return "punctuation"
    if tok.type == TT.IDENTIFIER:
        # declared name after `fun`, or a name being called
        prev_is_fun = idx > 0 and tokens[idx - 1].type == TT.FUN
        next_is_call = idx + 1 < len(tokens) and tokens[idx + 1].type == TT.LEFT_PAREN
        return "function" if prev_is_fun or next_is_call else "identifier"
    return ""


def _gap_spans(gap: str) -> StyleAndTextTuples:
    """Unstyled text between tokens; comments are the only thing worth colouring."""
    starts = [i for i in (gap.find("//"), gap.find("/*")) if i >= 0]
    if not starts:
        return [("", gap)]

    cut = min(starts)
    spans: StyleAndTextTuples = []
    if cut:
        spans.append(("", gap[:cut]))
    spans.append((GROUP_STYLE["comment"], gap[cut:]))
    return spans


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    lexer = LoxLexer(text)
    tokens = lexer.tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this token in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        if idx > pos:
            result.extend(_gap_spans(text[pos:idx]))

        result.append((GROUP_STYLE.get(token_group(tokens, i), ""), tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing text: comments, or whatever the scanner rejected.
    if pos < len(text):
        tail = text[pos:]
        if lexer.errors and not tail.lstrip().startswith(("//", "/*")):
            result.append((GROUP_STYLE["error"], tail))
        else:
            result.extend(_gap_spans(tail))

    return result if result else [("", text)]


class LoxReplLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
