"""Render AST nodes for humans.

``print_ast`` gives the compact parenthesised prefix form, e.g.
``(* (- 123) (group 45.67))``. ``ast_tree`` converts a node into a lark
``Tree`` so the indented ``pretty()`` dump is available for debugging.
"""
from __future__ import annotations

from typing import List, Union

from lark import Token, Tree

from . import tree as ast
from .token_types import Tok
from .utils import format_number


def format_literal(value: object) -> str:
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case float():
            return format_number(value)
        case _:
            return str(value)


def print_ast(node: ast.Node) -> str:
    match node:
        # expressions
        case ast.Literal(value=value):
            return format_literal(value)
        case ast.Grouping(expression=inner):
            return _parenthesize("group", inner)
        case ast.Unary(operator=op, right=right):
            return _parenthesize(op.lexeme, right)
        case ast.Binary(left=left, operator=op, right=right) | ast.Logical(left=left, operator=op, right=right):
            return _parenthesize(op.lexeme, left, right)
        case ast.Variable(name=name):
            return name.lexeme
        case ast.Assign(name=name, value=value):
            return _parenthesize(f"= {name.lexeme}", value)
        case ast.Call(callee=callee, arguments=args):
            return _parenthesize("call", callee, *args)

        # statements
        case ast.Expression(expression=expr):
            return _parenthesize(";", expr)
        case ast.Print(expression=expr):
            return _parenthesize("print", expr)
        case ast.Var(name=name, initializer=None):
            return f"(var {name.lexeme})"
        case ast.Var(name=name, initializer=init):
            return _parenthesize(f"var {name.lexeme} =", init)
        case ast.Block(statements=stmts):
            return _parenthesize("block", *stmts)
        case ast.If(condition=cond, then_branch=then, else_branch=None):
            return _parenthesize("if", cond, then)
        case ast.If(condition=cond, then_branch=then, else_branch=other):
            return _parenthesize("if-else", cond, then, other)
        case ast.While(condition=cond, body=body):
            return _parenthesize("while", cond, body)
        case ast.Function(name=name, params=params, body=body):
            header = f"fun {name.lexeme}({' '.join(p.lexeme for p in params)})"
            return _parenthesize(header, *body)
        case ast.Return(value=None):
            return "(return)"
        case ast.Return(value=value):
            return _parenthesize("return", value)
        case _:
            raise TypeError(f"Unknown node: {type(node).__name__}")


def _parenthesize(name: str, *nodes: ast.Node) -> str:
    parts = [name, *(print_ast(n) for n in nodes)]
    return "(" + " ".join(parts) + ")"


def _token(tok: Tok) -> Token:
    return Token(tok.type.name, tok.lexeme, line=tok.line)


def ast_tree(node: ast.Node) -> Union[Tree, Token]:
    """Convert a node to lark's Tree/Token shape, labelled by variant name."""
    label = type(node).__name__.lower()
    children: List[Union[Tree, Token]] = []

    match node:
        case ast.Literal(value=value):
            return Token("LITERAL", format_literal(value))
        case ast.Variable(name=name):
            return _token(name)
        case ast.Grouping(expression=inner):
            children = [ast_tree(inner)]
        case ast.Unary(operator=op, right=right):
            children = [_token(op), ast_tree(right)]
        case ast.Binary(left=left, operator=op, right=right) | ast.Logical(left=left, operator=op, right=right):
            children = [ast_tree(left), _token(op), ast_tree(right)]
        case ast.Assign(name=name, value=value):
            children = [_token(name), ast_tree(value)]
        case ast.Call(callee=callee, arguments=args):
            children = [ast_tree(callee), Tree("arguments", [ast_tree(a) for a in args])]
        case ast.Expression(expression=expr) | ast.Print(expression=expr):
            children = [ast_tree(expr)]
        case ast.Var(name=name, initializer=init):
            children = [_token(name)]
            if init is not None:
                children.append(ast_tree(init))
        case ast.Block(statements=stmts):
            children = [ast_tree(s) for s in stmts]
        case ast.If(condition=cond, then_branch=then, else_branch=other):
            children = [ast_tree(cond), ast_tree(then)]
            if other is not None:
                children.append(ast_tree(other))
        case ast.While(condition=cond, body=body):
            children = [ast_tree(cond), ast_tree(body)]
        case ast.Function(name=name, params=params, body=body):
            children = [
                _token(name),
                Tree("params", [_token(p) for p in params]),
                Tree("body", [ast_tree(s) for s in body]),
            ]
        case ast.Return(value=value):
            if value is not None:
                children = [ast_tree(value)]
        case _:
            raise TypeError(f"Unknown node: {type(node).__name__}")

    return Tree(label, children)
