import json

import pytest
from hypothesis import given, strategies as st

from ccode.errors import CodeSyntaxError
from ccode.reader.lexer import lex, position_label, read_regex


def _tokens(source):
    return [(t.type, t.value) for t in lex(source)]


EOF_TOKEN = ("eof", None)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a", [("name", "a"), EOF_TOKEN]),
        ("$_x1", [("name", "$_x1"), EOF_TOKEN]),
        ("1 + 2", [("num", 1), ("punct", "+"), ("num", 2), EOF_TOKEN]),
        ("x >>>= 3", [("name", "x"), ("punct", ">>>="), ("num", 3), EOF_TOKEN]),
        ("a === b", [("name", "a"), ("punct", "==="), ("name", "b"), EOF_TOKEN]),
        ("a.b", [("name", "a"), ("punct", "."), ("name", "b"), EOF_TOKEN]),
        ("0x1F", [("num", 31), EOF_TOKEN]),
        ("1.5e3", [("num", 1500.0), EOF_TOKEN]),
        (".5", [("num", 0.5), EOF_TOKEN]),
        ("'it\\'s'", [("string", "it's"), EOF_TOKEN]),
        ('"a\\nb"', [("string", "a\nb"), EOF_TOKEN]),
        ('"\\u0041\\x42\\0"', [("string", "AB\x00"), EOF_TOKEN]),
        ('"line\\\ncontinued"', [("string", "linecontinued"), EOF_TOKEN]),
        ("a / b / c", [("name", "a"), ("punct", "/"), ("name", "b"),
                       ("punct", "/"), ("name", "c"), EOF_TOKEN]),
        ("(a) / 2", [("punct", "("), ("name", "a"), ("punct", ")"),
                     ("punct", "/"), ("num", 2), EOF_TOKEN]),
        ("x /= 2", [("name", "x"), ("punct", "/="), ("num", 2), EOF_TOKEN]),
        ("return /x/", [("name", "return"), ("punct", "/"), ("name", "x"),
                        ("punct", "/"), EOF_TOKEN]),
        ("a // comment\nb", [("name", "a"), ("name", "b"), EOF_TOKEN]),
        ("a /* c */ b", [("name", "a"), ("name", "b"), EOF_TOKEN]),
        ("", [EOF_TOKEN]),
        ("  // only a comment", [EOF_TOKEN]),
    ]
)
def test_lexer_basic(source, expected):
    assert _tokens(source) == expected


def test_token_spans():
    tokens = list(lex("  foo  + 12"))
    assert [(t.start, t.end) for t in tokens] == [(2, 5), (7, 8), (9, 11), (11, 11)]


def test_lex_from_offset():
    tokens = list(lex("var x = y;", 8))
    assert [(t.type, t.value, t.start) for t in tokens] == [
        ("name", "y", 8), ("punct", ";", 9), ("eof", None, 10)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a b", False),
        ("a\nb", True),
        ("a // c\nb", True),
        ("a /* one\ntwo */ b", True),
        ("a /* one line */ b", False),
        ("a\u2028b", True),
    ]
)
def test_newline_before(source, expected):
    assert list(lex(source))[1].newline_before is expected


@pytest.mark.parametrize(
    "source,message",
    [
        ('"abc', "Unterminated string constant (1:0)"),
        ("a /* b", "Unterminated comment (1:2)"),
        ("3in x", "Identifier directly after number (1:1)"),
        ("a #", "Unexpected character '#' (1:2)"),
        ('x\n"\\u12"', "Bad character escape sequence (2:1)"),
    ]
)
def test_lexer_errors(source, message):
    with pytest.raises(CodeSyntaxError) as info:
        list(lex(source))
    assert str(info.value) == message


@pytest.mark.parametrize(
    "source,pos,value,end",
    [
        ("/ab+c/gi", 0, ("ab+c", "gi"), 8),
        ("x = /[/]/;", 4, ("[/]", ""), 9),
        ("/a\\/b/ + 1", 0, ("a\\/b", ""), 6),
        ("/=a/", 0, ("=a", ""), 4),
    ]
)
def test_read_regex(source, pos, value, end):
    tok = read_regex(source, pos)
    assert (tok.type, tok.value, tok.start, tok.end) == ("regexp", value, pos, end)


@pytest.mark.parametrize(
    "source,message",
    [
        ("/abc", "Unterminated regular expression (1:0)"),
        ("/a\nb/", "Unterminated regular expression (1:0)"),
        ("/a/x", "Invalid regular expression flag (1:0)"),
        ("/a/gg", "Invalid regular expression flag (1:0)"),
    ]
)
def test_read_regex_errors(source, message):
    with pytest.raises(CodeSyntaxError) as info:
        read_regex(source, 0)
    assert str(info.value) == message


def test_lexer_is_lazy():
    tokens = lex("1 #")
    assert next(tokens).value == 1
    with pytest.raises(CodeSyntaxError):
        next(tokens)


def test_error_position():
    with pytest.raises(CodeSyntaxError) as info:
        list(lex("ok\n  @"))
    assert info.value.pos == 5
    assert isinstance(info.value, SyntaxError)


@pytest.mark.parametrize("source,pos,label", [
    ("abc", 0, "(1:0)"),
    ("abc", 2, "(1:2)"),
    ("a\nbc", 3, "(2:1)"),
])
def test_position_label(source, pos, label):
    assert position_label(source, pos) == label


# -------------------------------
# Properties
# -------------------------------
identifier_strat = st.from_regex(r"[A-Za-z_$][A-Za-z0-9_$]{0,10}", fullmatch=True)


@given(identifier_strat)
def test_identifier_is_one_token(name):
    assert _tokens(name) == [("name", name), EOF_TOKEN]


@given(st.text(max_size=30))
def test_json_string_literal_decodes(s):
    assert _tokens(json.dumps(s, ensure_ascii=False)) == [("string", s), EOF_TOKEN]


@given(st.text(max_size=30))
def test_lexer_fails_only_with_syntax_errors(source):
    try:
        list(lex(source))
    except CodeSyntaxError:
        pass
