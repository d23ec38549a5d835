"""
Rewriting user snippets for eval.

eval treats `{}` as an empty block (value undefined), `{'a': 1}` as a syntax
error and `{a: 1}` as a block holding a labeled statement (value 1). A
console user typing any of these means an object, so they are wrapped in
parentheses, while genuine statement lists such as `{var x = 1; x + x;}` are
left alone. This matches the Chrome and Node consoles.

With `force_expression` the snippet must be a single expression; trailing
semicolons and comments are dropped and anything more is a syntax error.
"""

from __future__ import annotations

import logging
from typing import Optional

from ccode.errors import CodeSyntaxError
from ccode.reader.nodes import Node
from ccode.reader.parser import Parser, default_parser

logger = logging.getLogger(__name__)

# Expressions that are illegal or mean something else in statement position.
WRAPPED_EXPRESSIONS = frozenset({"ObjectExpression", "FunctionExpression"})


def rewrite_program(src: str, ast: Node) -> str:
    """Disambiguate a snippet that already parses as a program."""
    if ast.type == "Program" and len(ast.body) == 1 and ast.body[0].type == "BlockStatement":
        block = ast.body[0].body
        if not block:
            # An empty object: {}
            return "({})"
        if len(block) == 1 and block[0].type == "LabeledStatement" \
                and block[0].body.type == "ExpressionStatement":
            # An unquoted object literal: {a: 1}
            # A trailing line comment would swallow the paren, so add a line break.
            return "(" + src + "\n)"
    return src


def check_remainder(remainder: str, parser: Parser) -> None:
    """Allow only semicolons and comments after the expression."""
    try:
        ast = parser.parse_program(remainder)
    except CodeSyntaxError as e:
        raise CodeSyntaxError("Syntax error beyond expression") from e
    if ast.type != "Program":
        raise CodeSyntaxError("Unexpected code beyond expression")
    body = list(ast.body)
    while body and body[0].type == "EmptyStatement":
        body.pop(0)
    if body:
        raise CodeSyntaxError("Only one expression expected")


def rewrite_for_eval(src: str, force_expression: bool = False,
                     parser: Optional[Parser] = None) -> str:
    parser = parser or default_parser

    if not force_expression:
        try:
            ast = parser.parse_program(src)
        except CodeSyntaxError as e:
            logger.debug("Not a program (%s); trying as an expression", e)
        else:
            return rewrite_program(src, ast)

    # May raise.
    expression = parser.parse_expression_at(src, 0)
    remainder = src[expression.end:].strip()
    if remainder:
        check_remainder(remainder, parser)
    src = src[:expression.end]
    if expression.type in WRAPPED_EXPRESSIONS:
        src = "(" + src + ")"
    return src
