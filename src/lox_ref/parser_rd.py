"""
Recursive Descent Parser for Lox

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: Recursive descent, one method per precedence level
- AST: Frozen dataclasses from tree.py

Errors never stop the parse: each one is recorded, the failing
declaration is dropped and parsing resumes at the next statement boundary.
"""

from typing import List, Optional, Tuple

from .lexer_rd import Lexer
from .token_types import TT, Tok
from .types import LoxSyntaxError
from .utils import PARSE_FRAME_BUDGET, recursion_headroom
from . import tree as ast

MAX_ARGS = 255

TOO_DEEP = "Expression nesting too deep."

# Tokens that begin a declaration or statement; synchronize() stops before them
_STATEMENT_STARTS = {
    TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN,
}

# ============================================================================
# Parser
# ============================================================================

class ParseError(LoxSyntaxError):
    """Parse error with position info"""
    def __init__(self, message: str, token: Tok):
        super().__init__(message, token.line)
        self.token = token

    @property
    def where(self) -> str:
        if self.token.type == TT.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"

class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. assignment (=, right associative)
    2. or
    3. and
    4. equality (==, !=)
    5. comparison (<, <=, >, >=)
    6. term (+, -)
    7. factor (*, /)
    8. unary (!, -)
    9. call (f(...))
    10. primary (literals, identifiers, parens)
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.errors: List[ParseError] = []
        self.function_depth = 0  # > 0 while inside a function body
        self.too_deep = False

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Tok:
        return self.tokens[self.pos]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.peek().type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or raise error"""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Tok, message: str) -> ParseError:
        """Record an error and hand it back for the caller to raise (or not)"""
        err = ParseError(message, token)
        self.errors.append(err)
        return err

    def nesting_error(self) -> ParseError:
        """Record running out of host stack; reported once per parse"""
        err = ParseError(TOO_DEEP, self.peek())
        if not self.too_deep:
            self.too_deep = True
            self.errors.append(err)
        return err

    def synchronize(self) -> None:
        """Skip to the start of the next statement after an error"""
        self.advance()

        while not self.at_end():
            if self.previous().type == TT.SEMICOLON:
                return
            if self.peek().type in _STATEMENT_STARTS:
                return
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Optional[ast.Stmt]]:
        """Parse entire program; None entries mark dropped declarations"""
        statements: List[Optional[ast.Stmt]] = []

        with recursion_headroom(PARSE_FRAME_BUDGET):
            while not self.at_end():
                statements.append(self.parse_declaration())

        return statements

    def parse_declaration(self) -> Optional[ast.Stmt]:
        try:
            if self.match(TT.VAR):
                return self.parse_var_decl()
            if self.match(TT.FUN):
                return self.parse_function()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.nesting_error()
            self.synchronize()
            return None

    def parse_var_decl(self) -> ast.Stmt:
        name = self.expect(TT.IDENTIFIER, "Expect variable name.")
        initializer = None

        if self.match(TT.EQUAL):
            initializer = self.parse_expression()

        self.expect(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def parse_function(self) -> ast.Function:
        name = self.expect(TT.IDENTIFIER, "Expect function name.")
        self.expect(TT.LEFT_PAREN, "Expect '(' after function name.")
        params: List[Tok] = []

        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.expect(TT.IDENTIFIER, "Expect parameter name."))
                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RIGHT_PAREN, "Expect ')' after parameters.")
        self.expect(TT.LEFT_BRACE, "Expect '{' before function body.")

        self.function_depth += 1
        try:
            body = self.parse_block()
        finally:
            self.function_depth -= 1

        return ast.Function(name, tuple(params), body)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> ast.Stmt:
        if self.match(TT.PRINT):
            return self.parse_print_stmt()
        if self.match(TT.LEFT_BRACE):
            return ast.Block(self.parse_block())
        if self.match(TT.IF):
            return self.parse_if_stmt()
        if self.match(TT.WHILE):
            return self.parse_while_stmt()
        if self.match(TT.FOR):
            return self.parse_for_stmt()
        if self.match(TT.RETURN):
            return self.parse_return_stmt()
        return self.parse_expr_stmt()

    def parse_print_stmt(self) -> ast.Stmt:
        value = self.parse_expression()
        self.expect(TT.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def parse_expr_stmt(self) -> ast.Stmt:
        expr = self.parse_expression()
        self.expect(TT.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    def parse_block(self) -> Tuple[ast.Stmt, ...]:
        """Parse declarations up to the closing brace; '{' already consumed"""
        statements: List[ast.Stmt] = []

        while not self.check(TT.RIGHT_BRACE) and not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)

        self.expect(TT.RIGHT_BRACE, "Expect '}' after block.")
        return tuple(statements)

    def parse_if_stmt(self) -> ast.Stmt:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.parse_statement()
        else_branch = None
        # else binds to the nearest if
        if self.match(TT.ELSE):
            else_branch = self.parse_statement()

        return ast.If(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> ast.Stmt:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after condition.")
        return ast.While(condition, self.parse_statement())

    def parse_for_stmt(self) -> ast.Stmt:
        """
        Desugar `for (init; cond; incr) body` into

            { init; while (cond) { body; incr; } }

        A missing condition loops forever.
        """
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[ast.Stmt]
        if self.match(TT.SEMICOLON):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition: Optional[ast.Expr] = None
        if not self.check(TT.SEMICOLON):
            condition = self.parse_expression()
        self.expect(TT.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[ast.Expr] = None
        if not self.check(TT.RIGHT_PAREN):
            increment = self.parse_expression()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = ast.Block((body, ast.Expression(increment)))

        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(condition, body)

        if initializer is not None:
            body = ast.Block((initializer, body))

        return body

    def parse_return_stmt(self) -> ast.Stmt:
        keyword = self.previous()

        if self.function_depth == 0:
            # Recorded, not raised: the statement itself still parses
            self.error(keyword, "Can't return from top-level code.")

        value = None
        if not self.check(TT.SEMICOLON):
            value = self.parse_expression()

        self.expect(TT.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> ast.Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> ast.Expr:
        expr = self.parse_or()

        if self.match(TT.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)

            self.error(equals, "Invalid assignment target.")

        return expr

    def parse_or(self) -> ast.Expr:
        expr = self.parse_and()

        while self.match(TT.OR):
            op = self.previous()
            expr = ast.Logical(expr, op, self.parse_and())

        return expr

    def parse_and(self) -> ast.Expr:
        expr = self.parse_equality()

        while self.match(TT.AND):
            op = self.previous()
            expr = ast.Logical(expr, op, self.parse_equality())

        return expr

    def parse_equality(self) -> ast.Expr:
        return self._parse_binary(self.parse_comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def parse_comparison(self) -> ast.Expr:
        return self._parse_binary(
            self.parse_term, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL
        )

    def parse_term(self) -> ast.Expr:
        return self._parse_binary(self.parse_factor, TT.MINUS, TT.PLUS)

    def parse_factor(self) -> ast.Expr:
        return self._parse_binary(self.parse_unary, TT.SLASH, TT.STAR)

    def _parse_binary(self, operand, *operators: TT) -> ast.Expr:
        """One left-associative precedence level"""
        expr = operand()

        while self.match(*operators):
            op = self.previous()
            expr = ast.Binary(expr, op, operand())

        return expr

    def parse_unary(self) -> ast.Expr:
        if self.match(TT.BANG, TT.MINUS):
            op = self.previous()
            return ast.Unary(op, self.parse_unary())

        return self.parse_call()

    def parse_call(self) -> ast.Expr:
        expr = self.parse_primary()

        while self.match(TT.LEFT_PAREN):
            expr = self._finish_call(expr)

        return expr

    def _finish_call(self, callee: ast.Expr) -> ast.Expr:
        arguments: List[ast.Expr] = []

        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                arguments.append(self.parse_expression())
                if not self.match(TT.COMMA):
                    break

        paren = self.expect(TT.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, tuple(arguments))

    def parse_primary(self) -> ast.Expr:
        if self.match(TT.FALSE):
            return ast.Literal(False)
        if self.match(TT.TRUE):
            return ast.Literal(True)
        if self.match(TT.NIL):
            return ast.Literal(None)
        if self.match(TT.NUMBER, TT.STRING):
            return ast.Literal(self.previous().literal)
        if self.match(TT.IDENTIFIER):
            return ast.Variable(self.previous())
        if self.match(TT.LEFT_PAREN):
            expr = self.parse_expression()
            self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")


# ============================================================================
# Convenience entry points
# ============================================================================

def parse_source(source: str) -> Tuple[List[Optional[ast.Stmt]], List[LoxSyntaxError]]:
    """
    Scan and parse Lox source.

    Returns the statement list together with every syntax error found,
    scan errors first. The program must not run if the error list is
    non-empty.
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()

    parser = Parser(tokens)
    statements = parser.parse()

    errors: List[LoxSyntaxError] = [*lexer.errors, *parser.errors]
    return statements, errors


def parse_expr_fragment(source: str) -> ast.Expr:
    """
    Parse a standalone expression.
    Used by the AST printer entry point and tests.
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    if lexer.errors:
        raise lexer.errors[0]

    parser = Parser(tokens)
    with recursion_headroom(PARSE_FRAME_BUDGET):
        try:
            expr = parser.parse_expression()
        except RecursionError:
            raise parser.nesting_error() from None

    if parser.errors:
        raise parser.errors[0]
    if not parser.at_end():
        raise ParseError("Unexpected tokens after expression.", parser.peek())
    return expr


# ============================================================================
# Main - print the parse tree
# ============================================================================

if __name__ == '__main__':
    import sys

    from .ast_printer import ast_tree

    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]

    # Read source from file or stdin
    if len(args) > 0 and args[0] != '-':
        with open(args[0], 'r') as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    statements, errors = parse_source(source)
    for err in errors:
        print(err, file=sys.stderr)
    if errors:
        sys.exit(65)

    for stmt in statements:
        print(ast_tree(stmt).pretty())
