import datetime
import re

import pytest

from ccode.types.function import ScriptFunction
from ccode.types.kind import UNSERIALIZABLE, ValueKind, classify, error_kind, error_message
from ccode.types.script_error import ErrorKind, ScriptError
from ccode.types.symbol import ScriptSymbol
from ccode.types.undefined import Hole, Undefined


class Thing:
    def method(self):
        pass


@pytest.mark.parametrize(
    "value,kind",
    [
        (None, ValueKind.ABSENT),
        (Undefined, ValueKind.ABSENT),
        (Hole, ValueKind.ABSENT),
        (True, ValueKind.BOOLEAN),
        (0, ValueKind.NUMBER),
        (1.5, ValueKind.NUMBER),
        ("", ValueKind.STRING),
        (ScriptSymbol("s"), ValueKind.SYMBOL),
        (ScriptFunction("function () {}"), ValueKind.FUNCTION),
        (len, ValueKind.FUNCTION),
        (Thing().method, ValueKind.FUNCTION),
        (re.compile("x"), ValueKind.REGEXP),
        (datetime.datetime(2020, 1, 1), ValueKind.DATE),
        (datetime.date(2020, 1, 1), ValueKind.OBJECT),
        ([], ValueKind.ARRAY),
        ((), ValueKind.OBJECT),
        (ValueError(), ValueKind.ERROR),
        (ScriptError(), ValueKind.ERROR),
        ({}, ValueKind.OBJECT),
        (Thing, ValueKind.OBJECT),
        (Thing(), ValueKind.OBJECT),
    ]
)
def test_classify(value, kind):
    assert classify(value) is kind


def test_classify_function_definition():
    def local():
        pass

    assert classify(local) is ValueKind.FUNCTION


@pytest.mark.parametrize("kind,name", [
    (ValueKind.ABSENT, "undefined"),
    (ValueKind.SYMBOL, "symbol"),
    (ValueKind.FUNCTION, "function"),
    (ValueKind.ARRAY, "object"),
    (ValueKind.ERROR, "object"),
    (ValueKind.OBJECT, "object"),
])
def test_type_name(kind, name):
    assert kind.type_name == name


@pytest.mark.parametrize(
    "value,kind",
    [
        (Exception(), ErrorKind.GENERIC),
        (SyntaxError(), ErrorKind.SYNTAX),
        (TypeError(), ErrorKind.TYPE),
        (NameError(), ErrorKind.REFERENCE),
        (PermissionError(), ErrorKind.PERMISSION),
        (ScriptError(kind=ErrorKind.URI), ErrorKind.URI),
        (UnboundLocalError(), None),
        (KeyError(), None),
        (ValueError(), None),
    ]
)
def test_error_kind(value, kind):
    assert error_kind(value) is kind


def test_error_subclass_is_not_recognized():
    class AppError(ScriptError):
        pass

    assert error_kind(AppError("x")) is None


@pytest.mark.parametrize(
    "value,message",
    [
        (Exception(), Undefined),
        (Exception("m"), "m"),
        (Exception(3), 3),
        (Exception("a", "b"), UNSERIALIZABLE),
        (ScriptError(), Undefined),
        (ScriptError(None), None),
        (ScriptError("m"), "m"),
    ]
)
def test_error_message(value, message):
    assert error_message(value) is message or error_message(value) == message


def test_undefined_and_hole():
    assert not Undefined and not Hole
    assert repr(Undefined) == "undefined"
    assert Undefined is not Hole
    assert Undefined != Hole
