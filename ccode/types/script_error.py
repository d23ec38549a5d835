from __future__ import annotations

from enum import Enum
from typing import Any

from ccode.types.undefined import Undefined


class ErrorKind(Enum):
    """The closed set of error constructors that have a source form."""
    GENERIC = "Error"
    EVAL = "EvalError"
    RANGE = "RangeError"
    REFERENCE = "ReferenceError"
    SYNTAX = "SyntaxError"
    TYPE = "TypeError"
    URI = "URIError"
    PERMISSION = "PermissionError"

    @property
    def constructor(self) -> str:
        return self.value


class ScriptError(Exception):
    """An error object of the hosted language: a kind plus a message field."""

    def __init__(self, message: Any = Undefined, kind: ErrorKind = ErrorKind.GENERIC):
        if message is Undefined:
            super().__init__()
        else:
            super().__init__(message)
        self.message = message
        self.kind = kind

    def __repr__(self):
        if self.message is Undefined:
            return f"{self.kind.constructor}()"
        return f"{self.kind.constructor}({self.message!r})"
