# Runtime values are plain Python objects plus the few types in ccode.types
# that Python lacks (undefined, array holes, symbols, script functions and
# errors). The printer decides how to write each one from its ValueKind.

from typing import Any

# Runtime value alias
ScriptValue = Any

from ccode.code import CodeUtils
from ccode.errors import (
    CodeError,
    CodeSyntaxError,
    RecursiveStructureError,
    ReferenceLookupError,
    SourceUnavailableError,
    UnsupportedTypeError,
)
from ccode.printer.to_source import SourceSerializer, to_source, to_source_safe
from ccode.reader.parser import Parser, ScriptParser
from ccode.rewrite import rewrite_for_eval
from ccode.selector import NamespaceResolver, NullResolver, SelectorResolver
from ccode.types.function import ScriptFunction
from ccode.types.kind import ValueKind, classify
from ccode.types.script_error import ErrorKind, ScriptError
from ccode.types.symbol import ScriptSymbol
from ccode.types.undefined import Hole, Undefined

__all__ = [
    "ScriptValue",
    "CodeUtils",
    "CodeError",
    "CodeSyntaxError",
    "RecursiveStructureError",
    "ReferenceLookupError",
    "SourceUnavailableError",
    "UnsupportedTypeError",
    "SourceSerializer",
    "to_source",
    "to_source_safe",
    "Parser",
    "ScriptParser",
    "rewrite_for_eval",
    "NamespaceResolver",
    "NullResolver",
    "SelectorResolver",
    "ScriptFunction",
    "ValueKind",
    "classify",
    "ErrorKind",
    "ScriptError",
    "ScriptSymbol",
    "Hole",
    "Undefined",
]
