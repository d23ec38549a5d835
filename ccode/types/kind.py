"""
Value kinds.

A value's kind is decided structurally by a fixed, ordered list of
recognition rules, one per kind. The first rule that matches wins and
OBJECT is the final fallback, so every value has exactly one kind.
Supporting a new kind means adding a rule here and a branch in the printer.
"""

from __future__ import annotations

import datetime
import re
from enum import Enum
from typing import Callable, Optional

from ccode import ScriptValue
from ccode.types.function import is_function
from ccode.types.script_error import ErrorKind, ScriptError
from ccode.types.symbol import ScriptSymbol
from ccode.types.undefined import Undefined, Hole


class ValueKind(Enum):
    ABSENT = "absent"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SYMBOL = "symbol"
    FUNCTION = "function"
    REGEXP = "regexp"
    DATE = "date"
    ARRAY = "array"
    ERROR = "error"
    OBJECT = "object"

    @property
    def type_name(self) -> str:
        """The `typeof` name of values of this kind."""
        return _TYPE_NAMES.get(self, "object")


_TYPE_NAMES = {
    ValueKind.ABSENT: "undefined",
    ValueKind.BOOLEAN: "boolean",
    ValueKind.NUMBER: "number",
    ValueKind.STRING: "string",
    ValueKind.SYMBOL: "symbol",
    ValueKind.FUNCTION: "function",
}


_RULES: tuple[tuple[ValueKind, Callable[[ScriptValue], bool]], ...] = (
    (ValueKind.ABSENT, lambda v: v is None or v is Undefined or v is Hole),
    (ValueKind.BOOLEAN, lambda v: isinstance(v, bool)),
    (ValueKind.NUMBER, lambda v: isinstance(v, (int, float))),
    (ValueKind.STRING, lambda v: isinstance(v, str)),
    (ValueKind.SYMBOL, lambda v: isinstance(v, ScriptSymbol)),
    (ValueKind.FUNCTION, is_function),
    (ValueKind.REGEXP, lambda v: isinstance(v, re.Pattern)),
    (ValueKind.DATE, lambda v: isinstance(v, datetime.datetime)),
    (ValueKind.ARRAY, lambda v: type(v) is list),
    (ValueKind.ERROR, lambda v: isinstance(v, BaseException)),
)


def classify(value: ScriptValue) -> ValueKind:
    for kind, matches in _RULES:
        if matches(value):
            return kind
    return ValueKind.OBJECT


# Exact-type table: subclasses are not recognized, so `KeyError` is not an
# `Error` and a user subclass of TypeError keeps its identity.
_BUILTIN_ERROR_KINDS: dict[type, ErrorKind] = {
    Exception: ErrorKind.GENERIC,
    SyntaxError: ErrorKind.SYNTAX,
    TypeError: ErrorKind.TYPE,
    NameError: ErrorKind.REFERENCE,
    PermissionError: ErrorKind.PERMISSION,
}


def error_kind(value: BaseException) -> Optional[ErrorKind]:
    if type(value) is ScriptError:
        return value.kind if isinstance(value.kind, ErrorKind) else None
    return _BUILTIN_ERROR_KINDS.get(type(value))


class _Unserializable:
    def __repr__(self): return "<unserializable>"


# Returned by error_message when the message field has no single value.
UNSERIALIZABLE = _Unserializable()


def error_message(value: BaseException) -> ScriptValue:
    """
    The message field of an error: Undefined when absent, UNSERIALIZABLE when
    a builtin exception carries more than one argument.
    """
    if isinstance(value, ScriptError):
        return value.message
    if not value.args:
        return Undefined
    if len(value.args) == 1:
        return value.args[0]
    return UNSERIALIZABLE
