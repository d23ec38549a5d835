"""Function values and retrieval of their original definition text."""

from __future__ import annotations

import ast
import inspect
import textwrap
from typing import Any, Callable

from ccode.errors import SourceUnavailableError


class ScriptFunction:
    """A function of the hosted language, carrying its definition text verbatim."""

    __slots__ = ("source", "name")

    def __init__(self, source: str, name: str | None = None):
        self.source: str = source
        self.name: str | None = name

    def __str__(self) -> str:
        return self.source

    def __repr__(self) -> str:
        label = self.name or "anonymous"
        return f"<ScriptFunction {label}>"


# Retrieves the definition text of a function value.
SourceRetriever = Callable[[Any], str]


def is_function(value: Any) -> bool:
    return (
        isinstance(value, ScriptFunction)
        or inspect.isfunction(value)
        or inspect.ismethod(value)
        or inspect.isbuiltin(value)
    )


def _unavailable(fn: Any, reason: str) -> SourceUnavailableError:
    name = getattr(fn, "__qualname__", None) or repr(fn)
    return SourceUnavailableError(f"[function {name} {reason}]")


def lambda_source(fn: Any) -> str:
    """
    Cut a lambda expression out of its module's text.

    getsource only knows lines, so the lambda is found in the module's AST:
    on its first line, with its parameter names. When that still leaves
    more than one lambda the text is ambiguous and SourceUnavailableError
    is raised.
    """
    code = fn.__code__
    try:
        lines, _ = inspect.findsource(fn)
        source = "".join(lines)
        tree = ast.parse(source)
    except (OSError, TypeError, SyntaxError) as e:
        raise _unavailable(fn, "has no retrievable source") from e
    params = list(code.co_varnames[:code.co_argcount])
    candidates = [
        node for node in ast.walk(tree)
        if isinstance(node, ast.Lambda)
        and node.lineno == code.co_firstlineno
        and [a.arg for a in node.args.posonlyargs + node.args.args] == params
    ]
    if not candidates:
        raise _unavailable(fn, "has no retrievable source")
    if len(candidates) > 1:
        raise _unavailable(fn, "has ambiguous source")
    return ast.get_source_segment(source, candidates[0])


def function_source(fn: Any) -> str:
    """
    Return the original definition text of `fn`.

    ScriptFunction carries its own text. Python functions and methods are
    looked up with `inspect.getsource` and dedented, lambdas with
    `lambda_source`; builtins and functions created at runtime (exec, REPL)
    have no retrievable text and raise SourceUnavailableError rather than
    being rendered as a made-up signature.
    """
    if isinstance(fn, ScriptFunction):
        return fn.source
    if inspect.ismethod(fn):
        fn = fn.__func__
    if getattr(fn, "__name__", None) == "<lambda>":
        return lambda_source(fn)
    try:
        text = inspect.getsource(fn)
    except (OSError, TypeError) as e:
        raise _unavailable(fn, "has no retrievable source") from e
    return textwrap.dedent(text).rstrip("\n")
