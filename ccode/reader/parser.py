"""
ES5 Parser

A recursive-descent reader over the lazy token stream of
`ccode.reader.lexer`, producing ESTree-shaped `Node`s with exact spans.

Two entry points are exposed through `ScriptParser`:

- parse_program(text): the whole text as a statement list
- parse_expression_at(text, offset): the longest expression starting at
  `offset`; the returned node's `end` is the offset just past it and any
  text after it is left alone.

Parenthesized expressions are kept as ParenthesizedExpression nodes, so an
expression's span always covers its parentheses.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ccode.errors import CodeSyntaxError
from ccode.reader.lexer import Token, lex, read_regex, syntax_error
from ccode.reader.nodes import Node


RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "new",
    "null", "return", "super", "switch", "this", "throw", "true", "try",
    "typeof", "var", "void", "while", "with",
})

ASSIGNMENT_OPERATORS = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "<<=", ">>=", ">>>=", "&=", "|=", "^=",
})

# Higher number => binds tighter.
BINARY_PRECEDENCE: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "|": 3,
    "^": 4,
    "&": 5,
    "==": 6, "!=": 6, "===": 6, "!==": 6,
    "<": 7, ">": 7, "<=": 7, ">=": 7, "instanceof": 7, "in": 7,
    "<<": 8, ">>": 8, ">>>": 8,
    "+": 9, "-": 9,
    "*": 10, "/": 10, "%": 10,
}

LOGICAL_OPERATORS = frozenset({"||", "&&"})
UNARY_OPERATORS = frozenset({"!", "~", "+", "-"})
UNARY_WORDS = frozenset({"typeof", "void", "delete"})
UPDATE_OPERATORS = frozenset({"++", "--"})


class Parser(Protocol):
    """The two parse operations the code utilities consume."""

    def parse_program(self, text: str) -> Node: ...

    def parse_expression_at(self, text: str, offset: int) -> Node: ...


class TokenStream:
    """Parsing state for one call: a token buffer over `lex` plus context."""

    def __init__(self, source: str, pos: int = 0):
        self.source = source
        self.origin = pos
        self.tokens = lex(source, pos)
        self.buffer: list[Token] = []
        self.last_end = pos
        # Context for return/break/continue validity
        self.function_depth = 0
        self.loop_depth = 0
        self.switch_depth = 0
        self.labels: list[str] = []

    # --- Token helpers ---
    def peek(self, ahead: int = 0) -> Token:
        while len(self.buffer) <= ahead:
            if self.buffer and self.buffer[-1].type == "eof":
                return self.buffer[-1]
            self.buffer.append(next(self.tokens))
        return self.buffer[ahead]

    def advance(self) -> Token:
        tok = self.peek()
        if tok.type != "eof":
            self.buffer.pop(0)
        self.last_end = tok.end
        return tok

    def at(self, value: str, type: str = "punct") -> bool:
        tok = self.peek()
        return tok.type == type and tok.value == value

    def at_word(self, word: str) -> bool:
        return self.at(word, "name")

    def eat(self, value: str, type: str = "punct") -> bool:
        if self.at(value, type):
            self.advance()
            return True
        return False

    def expect(self, value: str, type: str = "punct") -> Token:
        if not self.at(value, type):
            self.unexpected()
        return self.advance()

    def error(self, message: str, pos: int) -> CodeSyntaxError:
        return syntax_error(self.source, message, pos)

    def unexpected(self, tok: Optional[Token] = None):
        tok = tok or self.peek()
        if tok.type == "eof":
            raise self.error("Unexpected end of input", tok.start)
        raise self.error("Unexpected token", tok.start)

    def semicolon(self) -> None:
        """Consume a `;` or accept an automatically inserted one."""
        if self.eat(";"):
            return
        tok = self.peek()
        if tok.type == "eof" or tok.newline_before or (tok.type == "punct" and tok.value == "}"):
            return
        self.unexpected()

    def rescan_regex(self, tok: Token) -> Token:
        """
        Re-read a `/` or `/=` punctuator as a regular expression literal.
        The lexer always reads `/` as an operator; only the parser knows
        when an operand is expected, so lexing restarts after the literal.
        """
        regex = read_regex(self.source, tok.start, tok.newline_before)
        self.tokens = lex(self.source, regex.end)
        self.buffer = [regex]
        return regex

    def node(self, type: str, start: int, **fields) -> Node:
        return Node(type, start, self.last_end, **fields)

    # --- Statements ---
    def parse_program(self) -> Node:
        body = []
        while self.peek().type != "eof":
            body.append(self.parse_statement())
        return Node("Program", self.origin, len(self.source), body=body)

    def parse_statement(self) -> Node:
        tok = self.peek()
        if tok.type == "punct":
            if tok.value == "{":
                return self.parse_block()
            if tok.value == ";":
                self.advance()
                return self.node("EmptyStatement", tok.start)
        elif tok.type == "name":
            handler = self._statement_handlers.get(tok.value)
            if handler is not None:
                return handler(self)
            nxt = self.peek(1)
            if tok.value not in RESERVED_WORDS and nxt.type == "punct" and nxt.value == ":":
                return self.parse_labeled()
        return self.parse_expression_statement()

    def parse_block(self) -> Node:
        start = self.expect("{").start
        body = []
        while not self.eat("}"):
            if self.peek().type == "eof":
                self.unexpected()
            body.append(self.parse_statement())
        return self.node("BlockStatement", start, body=body)

    def parse_expression_statement(self) -> Node:
        start = self.peek().start
        expression = self.parse_expression()
        self.semicolon()
        return self.node("ExpressionStatement", start, expression=expression)

    def parse_labeled(self) -> Node:
        start = self.peek().start
        label = self.parse_identifier()
        if label.name in self.labels:
            raise self.error(f"Label '{label.name}' is already declared", start)
        self.expect(":")
        self.labels.append(label.name)
        try:
            body = self.parse_statement()
        finally:
            self.labels.pop()
        return self.node("LabeledStatement", start, label=label, body=body)

    def parse_var(self) -> Node:
        start = self.advance().start
        declaration = self.parse_var_declarations(start, no_in=False)
        self.semicolon()
        declaration.end = self.last_end
        return declaration

    def parse_var_declarations(self, start: int, no_in: bool) -> Node:
        declarations = []
        while True:
            decl_start = self.peek().start
            ident = self.parse_identifier()
            init = self.parse_assignment(no_in) if self.eat("=") else None
            declarations.append(self.node("VariableDeclarator", decl_start, id=ident, init=init))
            if not self.eat(","):
                break
        return self.node("VariableDeclaration", start, kind="var", declarations=declarations)

    def parse_function_statement(self) -> Node:
        return self.parse_function(expression=False)

    def parse_if(self) -> Node:
        start = self.advance().start
        test = self.parse_paren_expression()
        consequent = self.parse_statement()
        alternate = self.parse_statement() if self.eat("else", "name") else None
        return self.node("IfStatement", start, test=test, consequent=consequent, alternate=alternate)

    def parse_loop_body(self) -> Node:
        self.loop_depth += 1
        try:
            return self.parse_statement()
        finally:
            self.loop_depth -= 1

    def parse_while(self) -> Node:
        start = self.advance().start
        test = self.parse_paren_expression()
        body = self.parse_loop_body()
        return self.node("WhileStatement", start, test=test, body=body)

    def parse_do_while(self) -> Node:
        start = self.advance().start
        body = self.parse_loop_body()
        self.expect("while", "name")
        test = self.parse_paren_expression()
        # The semicolon after do-while is always optional.
        self.eat(";")
        return self.node("DoWhileStatement", start, body=body, test=test)

    def parse_for(self) -> Node:
        start = self.advance().start
        self.expect("(")
        init = None
        if self.at("var", "name"):
            var_start = self.advance().start
            init = self.parse_var_declarations(var_start, no_in=True)
            if self.at_word("in") and len(init.declarations) == 1:
                return self.parse_for_in(start, init)
        elif not self.at(";"):
            init = self.parse_expression(no_in=True)
            if self.at_word("in"):
                self.check_target(init, "Assigning to rvalue")
                return self.parse_for_in(start, init)
        self.expect(";")
        test = None if self.at(";") else self.parse_expression()
        self.expect(";")
        update = None if self.at(")") else self.parse_expression()
        self.expect(")")
        body = self.parse_loop_body()
        return self.node("ForStatement", start, init=init, test=test, update=update, body=body)

    def parse_for_in(self, start: int, left: Node) -> Node:
        self.expect("in", "name")
        right = self.parse_expression()
        self.expect(")")
        body = self.parse_loop_body()
        return self.node("ForInStatement", start, left=left, right=right, body=body)

    def parse_return(self) -> Node:
        tok = self.advance()
        if self.function_depth == 0:
            raise self.error("'return' outside of function", tok.start)
        argument = None
        nxt = self.peek()
        if not (nxt.type == "eof" or nxt.newline_before or self.at(";") or self.at("}")):
            argument = self.parse_expression()
        self.semicolon()
        return self.node("ReturnStatement", tok.start, argument=argument)

    def parse_break_continue(self) -> Node:
        tok = self.advance()
        is_break = tok.value == "break"
        label = None
        nxt = self.peek()
        if nxt.type == "name" and nxt.value not in RESERVED_WORDS and not nxt.newline_before:
            label = self.parse_identifier()
            if label.name not in self.labels:
                raise self.error(f"Unsyntactic {tok.value}", tok.start)
        elif self.loop_depth == 0 and not (is_break and self.switch_depth):
            raise self.error(f"Unsyntactic {tok.value}", tok.start)
        self.semicolon()
        kind = "BreakStatement" if is_break else "ContinueStatement"
        return self.node(kind, tok.start, label=label)

    def parse_throw(self) -> Node:
        start = self.advance().start
        if self.peek().newline_before:
            raise self.error("Illegal newline after throw", self.last_end)
        argument = self.parse_expression()
        self.semicolon()
        return self.node("ThrowStatement", start, argument=argument)

    def parse_try(self) -> Node:
        start = self.advance().start
        block = self.parse_block()
        handler = None
        if self.at_word("catch"):
            catch_start = self.advance().start
            self.expect("(")
            param = self.parse_identifier()
            self.expect(")")
            body = self.parse_block()
            handler = self.node("CatchClause", catch_start, param=param, body=body)
        finalizer = self.parse_block() if self.eat("finally", "name") else None
        if handler is None and finalizer is None:
            raise self.error("Missing catch or finally clause", self.peek().start)
        return self.node("TryStatement", start, block=block, handler=handler, finalizer=finalizer)

    def parse_switch(self) -> Node:
        start = self.advance().start
        discriminant = self.parse_paren_expression()
        self.expect("{")
        cases = []
        seen_default = False
        self.switch_depth += 1
        try:
            while not self.eat("}"):
                case_start = self.peek().start
                if self.eat("case", "name"):
                    test = self.parse_expression()
                elif self.at_word("default"):
                    if seen_default:
                        raise self.error("Multiple default clauses", case_start)
                    self.advance()
                    seen_default = True
                    test = None
                else:
                    self.unexpected()
                self.expect(":")
                consequent = []
                while not (self.at("}") or self.at_word("case") or self.at_word("default")):
                    if self.peek().type == "eof":
                        self.unexpected()
                    consequent.append(self.parse_statement())
                cases.append(self.node("SwitchCase", case_start, test=test, consequent=consequent))
        finally:
            self.switch_depth -= 1
        return self.node("SwitchStatement", start, discriminant=discriminant, cases=cases)

    def parse_with(self) -> Node:
        start = self.advance().start
        obj = self.parse_paren_expression()
        body = self.parse_statement()
        return self.node("WithStatement", start, object=obj, body=body)

    def parse_debugger(self) -> Node:
        start = self.advance().start
        self.semicolon()
        return self.node("DebuggerStatement", start)

    _statement_handlers = {
        "var": parse_var,
        "function": parse_function_statement,
        "if": parse_if,
        "while": parse_while,
        "do": parse_do_while,
        "for": parse_for,
        "return": parse_return,
        "break": parse_break_continue,
        "continue": parse_break_continue,
        "throw": parse_throw,
        "try": parse_try,
        "switch": parse_switch,
        "with": parse_with,
        "debugger": parse_debugger,
    }

    # --- Functions ---
    def parse_function(self, expression: bool) -> Node:
        start = self.expect("function", "name").start
        ident = None
        if self.peek().type == "name":
            ident = self.parse_identifier()
        elif not expression:
            self.unexpected()
        kind = "FunctionExpression" if expression else "FunctionDeclaration"
        return self.parse_function_rest(start, ident, kind)

    def parse_function_rest(self, start: int, ident: Optional[Node], kind: str) -> Node:
        self.expect("(")
        params = []
        if not self.at(")"):
            while True:
                params.append(self.parse_identifier())
                if not self.eat(","):
                    break
        self.expect(")")

        # A function body starts a fresh context: no enclosing loops or labels.
        saved = (self.loop_depth, self.switch_depth, self.labels)
        self.loop_depth, self.switch_depth, self.labels = 0, 0, []
        self.function_depth += 1
        try:
            body = self.parse_block()
        finally:
            self.function_depth -= 1
            self.loop_depth, self.switch_depth, self.labels = saved
        return self.node(kind, start, id=ident, params=params, body=body)

    # --- Expressions ---
    def parse_paren_expression(self) -> Node:
        self.expect("(")
        expression = self.parse_expression()
        self.expect(")")
        return expression

    def parse_expression(self, no_in: bool = False) -> Node:
        start = self.peek().start
        expression = self.parse_assignment(no_in)
        if self.at(","):
            expressions = [expression]
            while self.eat(","):
                expressions.append(self.parse_assignment(no_in))
            return self.node("SequenceExpression", start, expressions=expressions)
        return expression

    def check_target(self, node: Node, message: str) -> None:
        target = node
        while target.type == "ParenthesizedExpression":
            target = target.expression
        if target.type not in ("Identifier", "MemberExpression"):
            raise self.error(message, node.start)

    def parse_assignment(self, no_in: bool = False) -> Node:
        start = self.peek().start
        left = self.parse_conditional(no_in)
        tok = self.peek()
        if tok.type == "punct" and tok.value in ASSIGNMENT_OPERATORS:
            self.check_target(left, "Assigning to rvalue")
            self.advance()
            right = self.parse_assignment(no_in)
            return self.node("AssignmentExpression", start, operator=tok.value, left=left, right=right)
        return left

    def parse_conditional(self, no_in: bool) -> Node:
        start = self.peek().start
        test = self.parse_binary(0, no_in)
        if self.eat("?"):
            consequent = self.parse_assignment()
            self.expect(":")
            alternate = self.parse_assignment(no_in)
            return self.node("ConditionalExpression", start, test=test,
                             consequent=consequent, alternate=alternate)
        return test

    def binary_operator(self, no_in: bool) -> Optional[str]:
        tok = self.peek()
        if tok.type == "punct" and tok.value in BINARY_PRECEDENCE:
            return tok.value
        if tok.type == "name" and tok.value in ("instanceof", "in"):
            if tok.value == "in" and no_in:
                return None
            return tok.value
        return None

    def parse_binary(self, min_prec: int, no_in: bool) -> Node:
        start = self.peek().start
        left = self.parse_unary()
        while True:
            op = self.binary_operator(no_in)
            if op is None or BINARY_PRECEDENCE[op] <= min_prec:
                return left
            self.advance()
            right = self.parse_binary(BINARY_PRECEDENCE[op], no_in)
            kind = "LogicalExpression" if op in LOGICAL_OPERATORS else "BinaryExpression"
            left = self.node(kind, start, operator=op, left=left, right=right)

    def parse_unary(self) -> Node:
        tok = self.peek()
        start = tok.start
        if (tok.type == "punct" and tok.value in UNARY_OPERATORS) or \
                (tok.type == "name" and tok.value in UNARY_WORDS):
            self.advance()
            argument = self.parse_unary()
            return self.node("UnaryExpression", start, operator=tok.value, prefix=True, argument=argument)
        if tok.type == "punct" and tok.value in UPDATE_OPERATORS:
            self.advance()
            argument = self.parse_unary()
            self.check_target(argument, "Assigning to rvalue")
            return self.node("UpdateExpression", start, operator=tok.value, prefix=True, argument=argument)

        expression = self.parse_subscripts(self.parse_atom(), start)
        nxt = self.peek()
        if nxt.type == "punct" and nxt.value in UPDATE_OPERATORS and not nxt.newline_before:
            self.check_target(expression, "Assigning to rvalue")
            self.advance()
            return self.node("UpdateExpression", start, operator=nxt.value, prefix=False, argument=expression)
        return expression

    def parse_atom(self) -> Node:
        if self.at_word("new"):
            return self.parse_new()
        return self.parse_primary()

    def parse_new(self) -> Node:
        start = self.advance().start
        callee_start = self.peek().start
        callee = self.parse_subscripts(self.parse_atom(), callee_start, no_calls=True)
        arguments = self.parse_arguments() if self.at("(") else []
        return self.node("NewExpression", start, callee=callee, arguments=arguments)

    def parse_subscripts(self, base: Node, start: int, no_calls: bool = False) -> Node:
        while True:
            if self.eat("."):
                prop = self.parse_identifier(allow_reserved=True)
                base = self.node("MemberExpression", start, object=base, property=prop, computed=False)
            elif self.eat("["):
                prop = self.parse_expression()
                self.expect("]")
                base = self.node("MemberExpression", start, object=base, property=prop, computed=True)
            elif not no_calls and self.at("("):
                arguments = self.parse_arguments()
                base = self.node("CallExpression", start, callee=base, arguments=arguments)
            else:
                return base

    def parse_arguments(self) -> list[Node]:
        self.expect("(")
        arguments = []
        if not self.at(")"):
            while True:
                arguments.append(self.parse_assignment())
                if not self.eat(","):
                    break
        self.expect(")")
        return arguments

    def parse_identifier(self, allow_reserved: bool = False) -> Node:
        tok = self.peek()
        if tok.type != "name" or (tok.value in RESERVED_WORDS and not allow_reserved):
            self.unexpected()
        self.advance()
        return self.node("Identifier", tok.start, name=tok.value)

    def literal(self, tok: Token, value) -> Node:
        self.advance()
        return self.node("Literal", tok.start, value=value, raw=self.source[tok.start:tok.end])

    def parse_primary(self) -> Node:
        tok = self.peek()
        if tok.type == "name":
            word = tok.value
            if word == "function":
                return self.parse_function(expression=True)
            if word == "this":
                self.advance()
                return self.node("ThisExpression", tok.start)
            if word in ("true", "false"):
                return self.literal(tok, word == "true")
            if word == "null":
                return self.literal(tok, None)
            return self.parse_identifier()
        if tok.type in ("num", "string"):
            return self.literal(tok, tok.value)
        if tok.type == "punct" and tok.value in ("/", "/="):
            tok = self.rescan_regex(tok)
        if tok.type == "regexp":
            node = self.literal(tok, None)
            pattern, flags = tok.value
            node.regex = {"pattern": pattern, "flags": flags}
            return node
        if tok.type == "punct":
            if tok.value == "(":
                self.advance()
                expression = self.parse_expression()
                self.expect(")")
                return self.node("ParenthesizedExpression", tok.start, expression=expression)
            if tok.value == "[":
                return self.parse_array()
            if tok.value == "{":
                return self.parse_object()
        self.unexpected()

    def parse_array(self) -> Node:
        start = self.advance().start
        elements: list[Optional[Node]] = []
        while not self.eat("]"):
            if self.eat(","):
                elements.append(None)  # hole
                continue
            elements.append(self.parse_assignment())
            if not self.at("]"):
                self.expect(",")
        return self.node("ArrayExpression", start, elements=elements)

    def parse_object(self) -> Node:
        start = self.advance().start
        properties = []
        while not self.at("}"):
            properties.append(self.parse_property())
            if not self.eat(","):
                break
        self.expect("}")
        return self.node("ObjectExpression", start, properties=properties)

    def parse_property(self) -> Node:
        tok = self.peek()
        nxt = self.peek(1)
        if tok.type == "name" and tok.value in ("get", "set") and nxt.type in ("name", "string", "num"):
            self.advance()
            key = self.parse_property_name()
            value = self.parse_function_rest(self.peek().start, None, "FunctionExpression")
            return self.node("Property", tok.start, key=key, value=value, kind=tok.value)
        key = self.parse_property_name()
        self.expect(":")
        value = self.parse_assignment()
        return self.node("Property", tok.start, key=key, value=value, kind="init")

    def parse_property_name(self) -> Node:
        tok = self.peek()
        if tok.type == "name":
            return self.parse_identifier(allow_reserved=True)
        if tok.type in ("string", "num"):
            return self.literal(tok, tok.value)
        self.unexpected()


class ScriptParser:
    """Default Parser: stateless, each call reads with a fresh TokenStream."""

    def parse_program(self, text: str) -> Node:
        return TokenStream(text).parse_program()

    def parse_expression_at(self, text: str, offset: int) -> Node:
        stream = TokenStream(text, offset)
        node = stream.parse_expression()
        # The token after the expression is always lexed; a lexical error
        # right after it is reported here.
        stream.peek()
        return node


default_parser = ScriptParser()
