from __future__ import annotations

from typing import Any


class Node:
    """
    An ESTree-style syntax node. `type` names the production
    ("Program", "BlockStatement", "ObjectExpression", ...) and
    `source[start:end]` is exactly the text it was parsed from.
    Production-specific children are plain attributes.
    """

    def __init__(self, type: str, start: int, end: int, **fields: Any):
        self.type = type
        self.start = start
        self.end = end
        self.__dict__.update(fields)

    def __repr__(self) -> str:
        return f"Node({self.type}, {self.start}:{self.end})"
