from __future__ import annotations

from typing import Optional

from ccode import ScriptValue
from ccode.errors import ReferenceLookupError
from ccode.printer.seen import SeenSet
from ccode.printer.to_source import SourceSerializer
from ccode.reader.nodes import Node
from ccode.reader.parser import Parser, ScriptParser
from ccode.rewrite import rewrite_for_eval
from ccode.selector import NullResolver, SelectorResolver
from ccode.types.function import SourceRetriever, function_source


class CodeUtils:
    """
    The code utilities of one environment, with their collaborators wired in:
    a parser, a selector resolver and a function-source retriever.
    """

    def __init__(
        self,
        parser: Optional[Parser] = None,
        resolver: Optional[SelectorResolver] = None,
        source_of: Optional[SourceRetriever] = None,
    ):
        self.parser: Parser = parser if parser is not None else ScriptParser()
        self.resolver: SelectorResolver = resolver if resolver is not None else NullResolver()
        self.source_of: SourceRetriever = source_of or function_source

    def parse(self, text: str) -> Node:
        return self.parser.parse_program(text)

    def parse_expression_at(self, text: str, offset: int = 0) -> Node:
        return self.parser.parse_expression_at(text, offset)

    def serializer(self) -> SourceSerializer:
        return SourceSerializer(self.resolver, self.source_of)

    def to_source(self, value: ScriptValue, seen: Optional[SeenSet] = None) -> str:
        return self.serializer().to_source(value, seen)

    def to_source_safe(self, value: ScriptValue) -> str:
        try:
            return self.to_source(value)
        except ReferenceLookupError as e:
            return str(e)

    def rewrite_for_eval(self, src: str, force_expression: bool = False) -> str:
        return rewrite_for_eval(src, force_expression, self.parser)
