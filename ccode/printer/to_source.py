"""
Source printer.

Renders a runtime value as source text. Primitives, functions, regular
expressions, dates, short arrays and recognized errors are written out in
full; any other object (and every symbol) is written as its selector.
"""

from __future__ import annotations

import datetime
import json
import logging
import re
from typing import Callable, Optional

from ccode import ScriptValue
from ccode.config import get_array_limit
from ccode.errors import (
    CodeError,
    RecursiveStructureError,
    ReferenceLookupError,
    UnsupportedTypeError,
)
from ccode.printer.numbers import number_to_source
from ccode.printer.seen import SeenSet
from ccode.selector import NullResolver, SelectorResolver
from ccode.types.function import SourceRetriever, function_source
from ccode.types.kind import UNSERIALIZABLE, ValueKind, classify, error_kind, error_message
from ccode.types.undefined import Undefined, Hole

logger = logging.getLogger(__name__)

# Kinds tracked in the SeenSet while they are being printed.
STRUCTURED_KINDS = frozenset({
    ValueKind.REGEXP,
    ValueKind.DATE,
    ValueKind.ARRAY,
    ValueKind.ERROR,
    ValueKind.OBJECT,
})

REGEX_FLAG_LETTERS = ((re.IGNORECASE, "i"), (re.MULTILINE, "m"), (re.DOTALL, "s"))

# Pattern flags with no literal counterpart.
FOREIGN_REGEX_FLAGS = re.VERBOSE | re.ASCII | re.LOCALE

LINE_TERMINATOR_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def regex_source(pattern: str) -> str:
    """Escape a pattern for use between slashes: `/` outside classes and line breaks."""
    if not pattern:
        return "(?:)"
    out = []
    escaped = in_class = False
    for ch in pattern:
        if escaped:
            out.append(LINE_TERMINATOR_ESCAPES.get(ch, "\\" + ch)[1:])
            escaped = False
            continue
        if ch in LINE_TERMINATOR_ESCAPES:
            out.append(LINE_TERMINATOR_ESCAPES[ch])
            continue
        if ch == "\\":
            escaped = True
        elif ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            out.append("\\/")
            continue
        out.append(ch)
    if escaped:
        out.append("\\")
    return "".join(out)


def date_source(value: datetime.datetime) -> str:
    """The `toJSON` timestamp: UTC, millisecond precision, `Z` suffix."""
    if value.tzinfo is not None and value.utcoffset() is not None:
        value = value.astimezone(datetime.timezone.utc)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


class SourceSerializer:
    """Formats runtime values into source text that evaluates back to them."""

    def __init__(
        self,
        resolver: Optional[SelectorResolver] = None,
        source_of: Optional[SourceRetriever] = None,
        array_limit: Optional[int] = None,
    ):
        self.resolver: SelectorResolver = resolver if resolver is not None else NullResolver()
        self.source_of: SourceRetriever = source_of or function_source
        self.array_limit = get_array_limit() if array_limit is None else array_limit
        self._handlers = self._create_handlers()

    def _create_handlers(self) -> dict[ValueKind, Callable[[ScriptValue, SeenSet], Optional[str]]]:
        # Each handler returns None to fall back to the value's selector.
        return {
            ValueKind.REGEXP: self._format_regexp,
            ValueKind.DATE: self._format_date,
            ValueKind.ARRAY: self._format_array,
            ValueKind.ERROR: self._format_error,
        }

    def to_source(self, value: ScriptValue, seen: Optional[SeenSet] = None) -> str:
        """
        Public entry point. `seen` is only passed by recursive calls (or by
        a caller deliberately continuing a traversal); a top-level call gets
        a fresh SeenSet.
        """
        kind = classify(value)
        if kind is ValueKind.ABSENT:
            return "null" if value is None else "undefined"
        if kind is ValueKind.BOOLEAN:
            return "true" if value else "false"
        if kind is ValueKind.NUMBER:
            return number_to_source(value)
        if kind is ValueKind.STRING:
            return json.dumps(value, ensure_ascii=False)
        if kind is ValueKind.FUNCTION:
            return self.source_of(value)
        if kind is ValueKind.SYMBOL:
            return self._format_reference(value, kind)
        if kind in STRUCTURED_KINDS:
            if seen is None:
                seen = SeenSet()
            if value in seen:
                raise RecursiveStructureError("[Recursive data structure]")
            seen.push(value)
            try:
                handler = self._handlers.get(kind)
                text = handler(value, seen) if handler is not None else None
            finally:
                seen.pop()
            if text is not None:
                return text
            return self._format_reference(value, kind)
        raise UnsupportedTypeError(f"[{kind.value}]")

    def _format_reference(self, value: ScriptValue, kind: ValueKind) -> str:
        selector = self.resolver.get_selector(value)
        if selector:
            return selector
        raise ReferenceLookupError(f"[{kind.type_name} with no known selector]")

    def _format_regexp(self, value: re.Pattern, seen: SeenSet) -> Optional[str]:
        if isinstance(value.pattern, bytes) or value.flags & FOREIGN_REGEX_FLAGS:
            return None
        flags = "".join(letter for flag, letter in REGEX_FLAG_LETTERS if value.flags & flag)
        return f"/{regex_source(value.pattern)}/{flags}"

    def _format_date(self, value: datetime.datetime, seen: SeenSet) -> Optional[str]:
        return f"Date('{date_source(value)}')"

    def _format_array(self, value: list, seen: SeenSet) -> Optional[str]:
        if len(value) > self.array_limit:
            return None
        items = []
        for item in value:
            if item is Hole:
                items.append("")
                continue
            try:
                items.append(self.to_source(item, seen))
            except RecursiveStructureError:
                logger.debug("Array of length %d contains itself; using its selector", len(value))
                return None
        if value and value[-1] is Hole:
            # `[1, ]` has length 1; keep the trailing hole.
            items.append("")
        return "[" + ", ".join(items) + "]"

    def _format_error(self, value: BaseException, seen: SeenSet) -> Optional[str]:
        kind = error_kind(value)
        if kind is None:
            return None
        message = error_message(value)
        if message is UNSERIALIZABLE:
            return None
        if message is Undefined:
            return f"{kind.constructor}()"
        try:
            text = self.to_source(message, seen)
        except CodeError as e:
            logger.debug("Message of %s not printable (%s); using its selector", kind.constructor, e)
            return None
        return f"{kind.constructor}({text})"


def to_source(
    value: ScriptValue,
    resolver: Optional[SelectorResolver] = None,
    seen: Optional[SeenSet] = None,
    source_of: Optional[SourceRetriever] = None,
) -> str:
    """Render `value` as source text; raises CodeError subclasses when it can't."""
    return SourceSerializer(resolver, source_of).to_source(value, seen)


def to_source_safe(
    value: ScriptValue,
    resolver: Optional[SelectorResolver] = None,
    source_of: Optional[SourceRetriever] = None,
) -> str:
    """Like to_source, but a missing selector yields the error's message as the text."""
    try:
        return to_source(value, resolver, source_of=source_of)
    except ReferenceLookupError as e:
        return str(e)
