"""
ES5 Lexer

- Streaming, lazy: tokens are produced on demand, so a caller that reads a
  single expression only lexes up to the token following it.
- Tokens carry their source span and whether a line break precedes them
  (needed for automatic semicolon insertion).
- Emits decoded values:

    - numbers -> int/float
    - strings -> str (escapes decoded)
    - regular expressions -> (pattern, flags), read by `read_regex` when
      the parser finds a `/` where an operand belongs
    - names/punctuators -> their text
"""

from __future__ import annotations

import re
from typing import Any, Iterator, NamedTuple

from ccode.errors import CodeSyntaxError


class Token(NamedTuple):
    type: str  # name | num | string | regexp | punct | eof
    value: Any
    start: int
    end: int
    newline_before: bool


LINE_TERMINATORS = frozenset("\n\r\u2028\u2029")

SKIP_RE = re.compile(
    r"(?:[\s\ufeff]+"  # whitespace, including line terminators
    r"|//[^\n\r\u2028\u2029]*"  # single-line comment
    r"|/\*.*?\*/)*",  # multi-line comment
    re.DOTALL,
)

TOKEN_RE = re.compile(
    r"(?P<num>0[xX][0-9a-fA-F]+|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
    r"|(?P<name>(?:[^\W\d]|\$)[\w$]*)"
    r"|(?P<string>\"(?:[^\"\\\n\r]|\\(?:\r\n|[\s\S]))*\""
    r"|'(?:[^'\\\n\r]|\\(?:\r\n|[\s\S]))*')"
    r"|(?P<punct>>>>=|>>>|===|!==|<<=|>>="
    r"|[-+*/%&|^=!<>]=|&&|\|\||\+\+|--|<<|>>"
    r"|[{}()\[\];,<>+\-*/%&|^!~?:=.])"
)

REGEX_RE = re.compile(
    r"/((?:\\[^\n\r]"  # escape
    r"|\[(?:\\[^\n\r]|[^\]\\\n\r])*\]"  # character class, may contain '/'
    r"|[^/\\\[\n\r])+)"
    r"/([\w$]*)"
)

IDENT_CHAR_RE = re.compile(r"[\w$]")

REGEX_FLAGS = frozenset("gimsuy")

_STRING_ESCAPE_RE = re.compile(
    r"\\(?:u([0-9a-fA-F]{4})"
    r"|x([0-9a-fA-F]{2})"
    r"|(\r\n|[\n\r\u2028\u2029])"
    r"|([0-3][0-7]{0,2}|[4-7][0-7]?)"
    r"|([\s\S]))"
)

SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


def position_label(source: str, pos: int) -> str:
    """`(line:column)` of an offset; lines count from 1, columns from 0."""
    before = source[:pos]
    line = before.count("\n") + 1
    column = pos - (before.rfind("\n") + 1)
    return f"({line}:{column})"


def syntax_error(source: str, message: str, pos: int) -> CodeSyntaxError:
    return CodeSyntaxError(f"{message} {position_label(source, pos)}", pos)


def decode_string(source: str, body: str, pos: int) -> str:
    """Decode the escapes of a string literal's body starting at offset `pos`."""
    def replace(m: re.Match) -> str:
        if m.group(1):
            return chr(int(m.group(1), 16))
        if m.group(2):
            return chr(int(m.group(2), 16))
        if m.group(3):
            return ""  # line continuation
        if m.group(4):
            return chr(int(m.group(4), 8))
        ch = m.group(5)
        if ch in ("u", "x"):
            raise syntax_error(source, "Bad character escape sequence", pos + m.start())
        return SIMPLE_ESCAPES.get(ch, ch)

    if "\\" not in body:
        return body
    return _STRING_ESCAPE_RE.sub(replace, body)


def number_value(text: str) -> int | float:
    if text[:2] in ("0x", "0X"):
        return int(text, 16)
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def read_regex(source: str, pos: int, newline_before: bool = False) -> Token:
    """Read the regular expression literal whose opening `/` is at `pos`."""
    m = REGEX_RE.match(source, pos)
    if not m:
        raise syntax_error(source, "Unterminated regular expression", pos)
    flags = m.group(2)
    if not REGEX_FLAGS.issuperset(flags) or len(set(flags)) != len(flags):
        raise syntax_error(source, "Invalid regular expression flag", pos)
    return Token("regexp", (m.group(1), flags), pos, m.end(), newline_before)


def lex(source: str, pos: int = 0) -> Iterator[Token]:
    """Token generator: yields Tokens from `pos`, ending with a single eof token."""
    n = len(source)

    while True:
        skipped = SKIP_RE.match(source, pos)
        newline = not LINE_TERMINATORS.isdisjoint(skipped.group(0))
        pos = skipped.end()
        if source.startswith("/*", pos):
            raise syntax_error(source, "Unterminated comment", pos)
        if pos >= n:
            yield Token("eof", None, n, n, newline)
            return

        ch = source[pos]
        m = TOKEN_RE.match(source, pos)
        if not m:
            if ch in "\"'":
                raise syntax_error(source, "Unterminated string constant", pos)
            raise syntax_error(source, f"Unexpected character {ch!r}", pos)
        kind = m.lastgroup
        text = m.group(0)
        if kind == "num":
            if IDENT_CHAR_RE.match(source, m.end()):
                raise syntax_error(source, "Identifier directly after number", m.end())
            value = number_value(text)
        elif kind == "string":
            value = decode_string(source, text[1:-1], pos + 1)
        else:
            value = text
        tok = Token(kind, value, pos, m.end(), newline)

        yield tok
        pos = tok.end
