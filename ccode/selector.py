"""
Selectors: stable source expressions, such as `$.users["ann b"].home`, that
evaluate back to a particular object. The printer asks a SelectorResolver
whenever a value cannot be written out structurally.
"""

from __future__ import annotations

import collections
import collections.abc
import json
import re
import types
from typing import Iterable, Optional, Protocol

from ccode import ScriptValue
from ccode.config import get_selector_depth


IDENTIFIER_RE = re.compile(r"(?:[^\W\d]|\$)[\w$]*")

# Values that are written literally and never need a selector.
_LITERAL_TYPES = (str, int, float, type(None))


class SelectorResolver(Protocol):
    def get_selector(self, value: ScriptValue) -> Optional[str]: ...


class NullResolver:
    """Resolves nothing."""

    def get_selector(self, value: ScriptValue) -> Optional[str]:
        return None


def member_selector(base: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{base}[{key}]"
    if IDENTIFIER_RE.fullmatch(key):
        return f"{base}.{key}"
    return f"{base}[{json.dumps(key, ensure_ascii=False)}]"


def members(node: ScriptValue) -> Iterable[tuple[str | int, ScriptValue]]:
    """The named children a selector path may step through."""
    if isinstance(node, collections.abc.Mapping):
        return [(k, v) for k, v in node.items() if isinstance(k, str)]
    if type(node) is list:
        return list(enumerate(node))
    if isinstance(node, (type, types.ModuleType)) or callable(node):
        return []
    attrs = getattr(node, "__dict__", None)
    if attrs is None:
        return []
    return [(k, v) for k, v in attrs.items() if not k.startswith("_")]


class NamespaceResolver:
    """
    Resolves values reachable from a root namespace object.

    Explicit bindings made with `bind` win; otherwise the object graph under
    `root` is searched breadth first, so the shortest path is returned.
    Each container is visited once and the search stops `max_depth` steps
    below the root.
    """

    def __init__(self, root: ScriptValue = None, root_name: str = "$", max_depth: Optional[int] = None):
        self.root = root
        self.root_name = root_name
        self.max_depth = get_selector_depth() if max_depth is None else max_depth
        # id -> (value, selector); the value is held so its id stays unique
        self._bindings: dict[int, tuple[ScriptValue, str]] = {}

    def bind(self, selector: str, value: ScriptValue) -> None:
        self._bindings[id(value)] = (value, selector)

    def unbind(self, value: ScriptValue) -> None:
        self._bindings.pop(id(value), None)

    def get_selector(self, value: ScriptValue) -> Optional[str]:
        pinned = self._bindings.get(id(value))
        if pinned is not None and pinned[0] is value:
            return pinned[1]
        if self.root is None:
            return None
        return self._search(value)

    def _search(self, value: ScriptValue) -> Optional[str]:
        queue = collections.deque([(self.root, self.root_name, 0)])
        visited = {id(self.root)}
        while queue:
            node, path, depth = queue.popleft()
            if node is value:
                return path
            if depth >= self.max_depth:
                continue
            for key, child in members(node):
                if isinstance(child, _LITERAL_TYPES) or id(child) in visited:
                    continue
                visited.add(id(child))
                queue.append((child, member_selector(path, key), depth + 1))
        return None
